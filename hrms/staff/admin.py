from django.contrib import admin

from hrms.staff import models


@admin.register(models.StaffRecord)
class StaffRecordAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "staff_id",
        "first_name",
        "last_name",
        "email",
        "company",
        "department",
        "is_active",
    ]
    search_fields = ["staff_id", "first_name", "last_name", "email"]
    list_filter = ["company", "department", "is_active"]


@admin.register(models.StaffUpload)
class StaffUploadAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "company",
        "file_name",
        "status",
        "total_records",
        "successful",
        "failed",
        "created_at",
    ]
    list_filter = ["status", "company", "created_at"]
    search_fields = ["file_name"]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
