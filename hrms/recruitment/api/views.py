import logging

from drf_spectacular.utils import OpenApiResponse
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import permissions
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser
from rest_framework.parsers import JSONParser
from rest_framework.parsers import MultiPartParser
from rest_framework.response import Response

from hrms.audit.utils import log_action
from hrms.companies.scoping import require_company
from hrms.payroll.importers.spreadsheet import SpreadsheetFileError
from hrms.recruitment.importers import import_jobs
from hrms.recruitment.models import Job
from hrms.recruitment.services import ApplicationError
from hrms.recruitment.services import apply_to_job
from hrms.recruitment.services import rank_applicants
from hrms.users.api.permissions import IsHROrAdminCanWrite
from hrms.users.api.permissions import IsHROrAdminOnly

from .serializers import ApplyRequestSerializer
from .serializers import JobApplicationSerializer
from .serializers import JobSerializer
from .serializers import JobUploadRequestSerializer
from .serializers import RankedApplicantSerializer

logger = logging.getLogger(__name__)


@extend_schema_view(
    list=extend_schema(tags=["Recruitment"]),
    retrieve=extend_schema(tags=["Recruitment"]),
    create=extend_schema(tags=["Recruitment"]),
    destroy=extend_schema(tags=["Recruitment"]),
)
class JobViewSet(viewsets.ModelViewSet):
    """Job postings of the caller's company."""

    serializer_class = JobSerializer
    permission_classes = [permissions.IsAuthenticated, IsHROrAdminCanWrite]
    parser_classes = [JSONParser, MultiPartParser, FormParser]
    http_method_names = ["get", "post", "delete", "head", "options"]
    filterset_fields = ["employment_type", "department"]
    search_fields = ["title", "description", "location"]
    ordering = ["-created_at", "-id"]

    def get_permissions(self):
        if self.action == "apply":
            return [permissions.IsAuthenticated()]
        if self.action in ("ranking", "upload"):
            return [permissions.IsAuthenticated(), IsHROrAdminOnly()]
        return super().get_permissions()

    def get_queryset(self):
        company = require_company(self.request)
        return Job.objects.filter(company=company)

    def perform_create(self, serializer):
        company = require_company(self.request)
        job = serializer.save(company=company, created_by=self.request.user)
        log_action(
            "job_created",
            actor=self.request.user,
            company=company,
            model_name="recruitment.Job",
            record_id=job.pk,
            after={"title": job.title},
        )

    def perform_destroy(self, instance):
        log_action(
            "job_deleted",
            actor=self.request.user,
            company=instance.company,
            model_name="recruitment.Job",
            record_id=instance.pk,
            before={"title": instance.title},
        )
        instance.delete()

    @extend_schema(
        tags=["Recruitment"],
        request={"multipart/form-data": ApplyRequestSerializer},
        responses={
            201: JobApplicationSerializer,
            400: OpenApiResponse(description="Application rejected"),
        },
    )
    @action(detail=True, methods=["post"])
    def apply(self, request, pk=None):
        job = self.get_object()
        try:
            application = apply_to_job(job, request.user, request.FILES.get("cv"))
        except ApplicationError as exc:
            logger.info("Application to job %s rejected: %s", job.pk, exc)
            return Response({"detail": str(exc)}, status=400)
        return Response(JobApplicationSerializer(application).data, status=201)

    @extend_schema(
        tags=["Recruitment"],
        request={"multipart/form-data": JobUploadRequestSerializer},
        responses={
            200: OpenApiResponse(description="Upload processed"),
            400: OpenApiResponse(description="File could not be processed"),
        },
    )
    @action(detail=False, methods=["post"])
    def upload(self, request):
        company = require_company(request)
        uploaded = request.FILES.get("file")
        if not uploaded:
            return Response({"detail": "File is required"}, status=400)
        try:
            result = import_jobs(
                company=company, actor=request.user, uploaded_file=uploaded
            )
        except SpreadsheetFileError as exc:
            logger.info("Rejected job file %s: %s", uploaded.name, exc)
            return Response({"detail": str(exc)}, status=400)
        return Response(result.as_payload(), status=200)

    @extend_schema(tags=["Recruitment"], responses=RankedApplicantSerializer(many=True))
    @action(detail=True, methods=["get"])
    def ranking(self, request, pk=None):
        job = self.get_object()
        ranked = rank_applicants(job)
        return Response(RankedApplicantSerializer(ranked, many=True).data)
