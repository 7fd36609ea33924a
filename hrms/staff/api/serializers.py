from django.urls import reverse
from rest_framework import serializers

from hrms.staff.models import StaffUpload


class StaffUploadSerializer(serializers.ModelSerializer):
    uploaded_by_name = serializers.CharField(
        source="uploaded_by.name", read_only=True, default=None
    )
    failed_records_download = serializers.SerializerMethodField()

    class Meta:
        model = StaffUpload
        fields = [
            "id",
            "file_name",
            "status",
            "total_records",
            "successful",
            "failed",
            "errors",
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
        return reverse("api_v1:staff-upload-failed-records", kwargs={"pk": obj.pk})


class StaffUploadRequestSerializer(serializers.Serializer):
    """Documents the multipart payload of a staff upload."""

    file = serializers.FileField()
