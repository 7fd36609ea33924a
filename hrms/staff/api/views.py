import logging

from django.http import FileResponse
from django.http import Http404
from drf_spectacular.utils import OpenApiResponse
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import permissions
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser
from rest_framework.parsers import MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from hrms.companies.scoping import require_company
from hrms.payroll.importers.spreadsheet import SpreadsheetFileError
from hrms.staff.importers import process_staff_upload
from hrms.staff.models import StaffUpload
from hrms.users.api.permissions import IsHROrAdminOnly

from .serializers import StaffUploadRequestSerializer
from .serializers import StaffUploadSerializer

logger = logging.getLogger(__name__)

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class StaffUploadView(APIView):
    """Create staff records in bulk from a csv, xls or xlsx file."""

    permission_classes = [permissions.IsAuthenticated, IsHROrAdminOnly]
    parser_classes = [MultiPartParser, FormParser]

    @extend_schema(
        tags=["Staff"],
        request={"multipart/form-data": StaffUploadRequestSerializer},
        responses={
            200: OpenApiResponse(description="Upload processed"),
            400: OpenApiResponse(description="File could not be processed"),
        },
    )
    def post(self, request):
        company = require_company(request)
        uploaded = request.FILES.get("file")
        if not uploaded:
            return Response({"detail": "File is required"}, status=400)

        try:
            result = process_staff_upload(
                company=company, actor=request.user, uploaded_file=uploaded
            )
        except SpreadsheetFileError as exc:
            logger.info("Rejected staff file %s: %s", uploaded.name, exc)
            return Response({"detail": str(exc)}, status=400)

        return Response(result.as_payload(), status=200)


@extend_schema_view(
    list=extend_schema(tags=["Staff"]),
    retrieve=extend_schema(tags=["Staff"]),
)
class StaffUploadViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = StaffUploadSerializer
    permission_classes = [permissions.IsAuthenticated, IsHROrAdminOnly]
    filterset_fields = ["status"]
    search_fields = ["file_name"]
    ordering = ["-created_at", "-id"]

    def get_queryset(self):
        company = require_company(self.request)
        return StaffUpload.objects.filter(company=company).select_related(
            "uploaded_by"
        )

    @extend_schema(
        tags=["Staff"],
        responses={(200, XLSX_CONTENT_TYPE): bytes, 404: None},
    )
    @action(detail=True, methods=["get"], url_path="failed-records")
    def failed_records(self, request, pk=None):
        upload = self.get_object()
        if not upload.has_failed_records:
            msg = "No failed records file available for this upload"
            raise Http404(msg)
        try:
            handle = upload.failed_records_file.open("rb")
        except FileNotFoundError as exc:
            msg = "Failed records file not found on server"
            raise Http404(msg) from exc
        base_name = upload.file_name.rsplit(".", 1)[0] or str(upload.pk)
        return FileResponse(
            handle,
            as_attachment=True,
            filename=f"failed-staff-{base_name}.xlsx",
            content_type=XLSX_CONTENT_TYPE,
        )
