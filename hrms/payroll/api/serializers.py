from django.urls import reverse
from rest_framework import serializers

from hrms.payroll.models import PayrollUpload
from hrms.payroll.models import Payslip


class PayrollUploadSerializer(serializers.ModelSerializer):
    uploaded_by_name = serializers.CharField(
        source="uploaded_by.name", read_only=True, default=None
    )
    failed_records_download = serializers.SerializerMethodField()

    class Meta:
        model = PayrollUpload
        fields = [
            "id",
            "file_name",
            "status",
            "total_records",
            "successful",
            "failed",
            "payslips_generated",
            "emails_sent",
            "errors",
            "warnings",
            "uploaded_by",
            "uploaded_by_name",
            "created_at",
            "completed_at",
            "failed_records_download",
        ]
        read_only_fields = fields

    def get_failed_records_download(self, obj) -> str | None:
        if not obj.has_failed_records:
            return None
        return reverse("api_v1:payroll-upload-failed-records", kwargs={"pk": obj.pk})


class PayslipSerializer(serializers.ModelSerializer):
    staff_id = serializers.CharField(source="staff.staff_id", read_only=True)
    staff_name = serializers.CharField(source="staff.full_name", read_only=True)
    download_url = serializers.SerializerMethodField()

    class Meta:
        model = Payslip
        fields = [
            "id",
            "staff",
            "staff_id",
            "staff_name",
            "month_label",
            "period_month",
            "period_year",
            "gross_pay",
            "net_pay",
            "file_name",
            "created_at",
            "download_url",
        ]
        read_only_fields = fields

    def get_download_url(self, obj) -> str:
        return reverse("api_v1:payslip-download", kwargs={"pk": obj.pk})


class PayrollUploadRequestSerializer(serializers.Serializer):
    """Documents the multipart payload of a payroll upload."""

    file = serializers.FileField()
    sendEmails = serializers.ChoiceField(  # noqa: N815
        choices=["true", "false"], required=False, default="false"
    )
