from django.contrib import admin

from hrms.recruitment import models


class JobApplicationInline(admin.TabularInline):
    model = models.JobApplication
    extra = 0
    fields = ["first_name", "last_name", "email", "status", "created_at"]
    readonly_fields = ["created_at"]


@admin.register(models.Job)
class JobAdmin(admin.ModelAdmin):
    list_display = ["id", "company", "title", "employment_type", "expiration_date"]
    list_filter = ["company", "employment_type"]
    search_fields = ["title", "department", "location"]
    inlines = [JobApplicationInline]


@admin.register(models.JobApplication)
class JobApplicationAdmin(admin.ModelAdmin):
    list_display = ["id", "job", "email", "status", "created_at"]
    list_filter = ["status"]
    search_fields = ["email", "last_name", "job__title"]
    list_select_related = ["job"]
