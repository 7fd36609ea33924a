from django.contrib import admin

from hrms.payroll import models


@admin.register(models.PayrollUpload)
class PayrollUploadAdmin(admin.ModelAdmin):
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


@admin.register(models.Payroll)
class PayrollAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "company",
        "staff",
        "month_label",
        "period_year",
        "gross_pay",
        "net_salary",
        "status",
    ]
    list_filter = ["company", "period_year", "period_month", "status"]
    search_fields = ["staff__staff_id", "staff__email", "staff__last_name"]
    list_select_related = ["company", "staff"]


@admin.register(models.Payslip)
class PayslipAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "company",
        "staff",
        "month_label",
        "period_year",
        "net_pay",
        "file_name",
    ]
    list_filter = ["company", "period_year", "period_month"]
    search_fields = ["staff__staff_id", "staff__email", "file_name"]
    list_select_related = ["company", "staff"]
