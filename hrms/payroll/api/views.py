import logging

from django.http import FileResponse
from django.http import Http404
from drf_spectacular.utils import OpenApiResponse
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import permissions
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.parsers import FormParser
from rest_framework.parsers import MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from hrms.companies.scoping import require_company
from hrms.payroll.importers.spreadsheet import SpreadsheetFileError
from hrms.payroll.models import PayrollUpload
from hrms.payroll.models import Payslip
from hrms.payroll.services import process_payroll_upload
from hrms.staff.services import staff_record_for_user
from hrms.users.api.permissions import IsHROrAdminOnly
from hrms.users.api.permissions import is_hr_or_admin

from .serializers import PayrollUploadRequestSerializer
from .serializers import PayrollUploadSerializer
from .serializers import PayslipSerializer

logger = logging.getLogger(__name__)

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class PayrollUploadView(APIView):
    """Accept a payroll spreadsheet and run it through the payroll pipeline.

    Multipart fields: ``file`` (csv, xls or xlsx) and optional ``sendEmails``
    ("true" to email each staff member once their payslip is ready).
    """

    permission_classes = [permissions.IsAuthenticated, IsHROrAdminOnly]
    parser_classes = [MultiPartParser, FormParser]

    @extend_schema(
        tags=["Payroll • Uploads"],
        request={"multipart/form-data": PayrollUploadRequestSerializer},
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
        send_emails = str(request.data.get("sendEmails", "")).strip().lower() == "true"

        try:
            result = process_payroll_upload(
                company=company,
                actor=request.user,
                uploaded_file=uploaded,
                send_emails=send_emails,
            )
        except SpreadsheetFileError as exc:
            logger.info("Rejected payroll file %s: %s", uploaded.name, exc)
            return Response({"detail": str(exc)}, status=400)

        return Response(result.as_payload(), status=200)


@extend_schema_view(
    list=extend_schema(tags=["Payroll • Uploads"]),
    retrieve=extend_schema(tags=["Payroll • Uploads"]),
)
class PayrollUploadViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = PayrollUploadSerializer
    permission_classes = [permissions.IsAuthenticated, IsHROrAdminOnly]
    filterset_fields = ["status"]
    search_fields = ["file_name"]
    ordering = ["-created_at", "-id"]

    def get_queryset(self):
        company = require_company(self.request)
        return PayrollUpload.objects.filter(company=company).select_related(
            "uploaded_by"
        )

    @extend_schema(
        tags=["Payroll • Uploads"],
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
            filename=f"failed-records-{base_name}.xlsx",
            content_type=XLSX_CONTENT_TYPE,
        )


@extend_schema_view(
    list=extend_schema(tags=["Payroll • Payslips"]),
    retrieve=extend_schema(tags=["Payroll • Payslips"]),
)
class PayslipViewSet(viewsets.ReadOnlyModelViewSet):
    """Company payslips for HR; ``download`` is also open to the payslip owner."""

    serializer_class = PayslipSerializer
    filterset_fields = ["period_year", "period_month", "staff"]
    search_fields = ["staff__staff_id", "staff__email", "staff__last_name"]
    ordering = ["-period_year", "-period_month", "-created_at"]

    def get_permissions(self):
        if self.action == "download":
            return [permissions.IsAuthenticated()]
        return [permissions.IsAuthenticated(), IsHROrAdminOnly()]

    def get_queryset(self):
        company = require_company(self.request)
        return Payslip.objects.filter(company=company).select_related("staff")

    @extend_schema(
        tags=["Payroll • Payslips"],
        responses={(200, "application/pdf"): bytes, 403: None, 404: None},
    )
    @action(detail=True, methods=["get"])
    def download(self, request, pk=None):
        payslip = self.get_object()
        if not is_hr_or_admin(request.user):
            own = staff_record_for_user(request.user)
            if own is None or own.pk != payslip.staff_id:
                msg = "You can only download your own payslips"
                raise PermissionDenied(msg)
        try:
            handle = payslip.file.open("rb")
        except FileNotFoundError as exc:
            msg = "Payslip file not found on server"
            raise Http404(msg) from exc
        return FileResponse(
            handle,
            as_attachment=True,
            filename=payslip.file_name,
            content_type="application/pdf",
        )


class MyPayslipsView(APIView):
    """Payslip history of the signed-in staff member."""

    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        tags=["Payroll • Payslips"],
        responses={200: OpenApiResponse(description="Payslip history")},
    )
    def get(self, request):
        company = require_company(request)
        staff = staff_record_for_user(request.user)
        if staff is None:
            return Response(
                {"detail": "Staff record not found for current user"}, status=404
            )
        payslips = Payslip.objects.filter(company=company, staff=staff).order_by(
            "-period_year", "-period_month", "-created_at"
        )
        return Response(
            {
                "staffId": staff.staff_id,
                "email": staff.email,
                "payslips": PayslipSerializer(payslips, many=True).data,
            }
        )
