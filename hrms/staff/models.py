from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class StaffRecord(models.Model):
    """A pre-registered member of staff within one company.

    Payroll uploads only ever look these up; HR creates them in bulk through
    a staff upload or one by one in the admin.
    """

    company = models.ForeignKey(
        "companies.Company", on_delete=models.CASCADE, related_name="staff_records"
    )
    staff_id = models.CharField(max_length=50, help_text=_("Company staff number"))
    email = models.EmailField()
    first_name = models.CharField(max_length=150)
    last_name = models.CharField(max_length=150)
    department = models.CharField(max_length=150, blank=True)
    position = models.CharField(max_length=150, blank=True)
    phone = models.CharField(max_length=50, blank=True)
    bank_name = models.CharField(max_length=200, blank=True)
    account_number = models.CharField(max_length=50, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["last_name", "first_name"]
        constraints = [
            models.UniqueConstraint(
                fields=["company", "email"], name="uniq_staff_email_per_company"
            ),
            models.UniqueConstraint(
                fields=["company", "staff_id"], name="uniq_staff_id_per_company"
            ),
        ]
        verbose_name = _("Staff Record")
        verbose_name_plural = _("Staff Records")

    def __str__(self):  # pragma: no cover - trivial
        return f"{self.staff_id} - {self.full_name}"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def save(self, *args, **kwargs):
        self.email = (self.email or "").strip().lower()
        super().save(*args, **kwargs)


class StaffUpload(models.Model):
    """One bulk staff import and how many of its rows became staff records."""

    class Status(models.TextChoices):
        PROCESSING = "processing", _("Processing")
        COMPLETED = "completed", _("Completed")

    company = models.ForeignKey(
        "companies.Company", on_delete=models.CASCADE, related_name="staff_uploads"
    )
    file_name = models.CharField(max_length=255)
    file = models.FileField(upload_to="staff/uploads/", blank=True)
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="staff_uploads",
    )
    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.PROCESSING
    )
    total_records = models.PositiveIntegerField(default=0)
    successful = models.PositiveIntegerField(default=0)
    failed = models.PositiveIntegerField(default=0)
    errors = models.JSONField(default=list, blank=True)
    failed_records_file = models.FileField(upload_to="staff/failed/", blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        verbose_name = _("Staff Upload")
        verbose_name_plural = _("Staff Uploads")

    def __str__(self):  # pragma: no cover - trivial
        return f"{self.file_name} ({self.status})"

    def save(self, *args, **kwargs):
        if self.pk and not kwargs.get("force_insert"):
            stored = (
                type(self)
                .objects.filter(pk=self.pk)
                .values_list("status", flat=True)
                .first()
            )
            if stored == self.Status.COMPLETED:
                msg = "Completed staff uploads cannot be modified"
                raise ValueError(msg)
        super().save(*args, **kwargs)

    @property
    def has_failed_records(self) -> bool:
        return bool(self.failed_records_file)
