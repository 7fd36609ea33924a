from rest_framework import serializers

from hrms.recruitment.models import Job
from hrms.recruitment.models import JobApplication


class JobSerializer(serializers.ModelSerializer):
    is_expired = serializers.BooleanField(read_only=True)
    application_count = serializers.SerializerMethodField()

    class Meta:
        model = Job
        fields = [
            "id",
            "title",
            "description",
            "department",
            "location",
            "employment_type",
            "expiration_date",
            "is_expired",
            "application_count",
            "created_at",
        ]
        read_only_fields = ["id", "created_at"]

    def get_application_count(self, obj) -> int:
        return obj.applications.count()


class JobApplicationSerializer(serializers.ModelSerializer):
    class Meta:
        model = JobApplication
        fields = [
            "id",
            "job",
            "first_name",
            "last_name",
            "email",
            "status",
            "created_at",
        ]
        read_only_fields = fields


class ApplyRequestSerializer(serializers.Serializer):
    cv = serializers.FileField(required=False)


class RankedApplicantSerializer(serializers.Serializer):
    application = JobApplicationSerializer()
    match_count = serializers.IntegerField()


class JobUploadRequestSerializer(serializers.Serializer):
    """Documents the multipart payload of a bulk job upload."""

    file = serializers.FileField()
