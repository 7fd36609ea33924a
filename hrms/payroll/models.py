"""
Payroll models for spreadsheet-driven payroll runs.

Figures are stored exactly as they arrive in the uploaded sheet; nothing in
here recomputes pay. Every row belongs to one company and one staff record of
that company.
"""

from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


def _money(**kwargs):
    return models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00"), **kwargs
    )


class PayrollUpload(models.Model):
    """One submitted payroll file and the aggregate outcome of processing it.

    Created as soon as row processing starts and completed exactly once.
    A completed upload is an immutable record of what happened.
    """

    class Status(models.TextChoices):
        PROCESSING = "processing", _("Processing")
        COMPLETED = "completed", _("Completed")

    company = models.ForeignKey(
        "companies.Company", on_delete=models.CASCADE, related_name="payroll_uploads"
    )
    file_name = models.CharField(max_length=255)
    file = models.FileField(upload_to="payroll/uploads/", blank=True)
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="payroll_uploads",
    )
    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.PROCESSING
    )
    total_records = models.PositiveIntegerField(default=0)
    successful = models.PositiveIntegerField(default=0)
    failed = models.PositiveIntegerField(default=0)
    payslips_generated = models.PositiveIntegerField(default=0)
    emails_sent = models.PositiveIntegerField(default=0)
    errors = models.JSONField(default=list, blank=True)
    warnings = models.JSONField(default=list, blank=True)
    failed_records_file = models.FileField(upload_to="payroll/failed/", blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        verbose_name = _("Payroll Upload")
        verbose_name_plural = _("Payroll Uploads")

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
                msg = "Completed payroll uploads cannot be modified"
                raise ValueError(msg)
        super().save(*args, **kwargs)

    @property
    def has_failed_records(self) -> bool:
        return bool(self.failed_records_file)


class Payroll(models.Model):
    """Monthly payroll figures for one staff member."""

    class Status(models.TextChoices):
        PROCESSED = "PROCESSED", _("Processed")

    company = models.ForeignKey(
        "companies.Company", on_delete=models.CASCADE, related_name="payrolls"
    )
    staff = models.ForeignKey(
        "staff.StaffRecord", on_delete=models.CASCADE, related_name="payrolls"
    )
    upload = models.ForeignKey(
        PayrollUpload,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="payrolls",
    )
    period_year = models.PositiveIntegerField()
    period_month = models.PositiveSmallIntegerField(help_text=_("1-12"))
    month_label = models.CharField(
        max_length=20, help_text=_("Month as written in the uploaded sheet")
    )
    period_key = models.CharField(max_length=20)

    gross_pay = _money()
    prorated_gross_pay = _money()
    basic = _money()
    housing = _money()
    transport = _money()
    dressing = _money()
    leave_allowance = _money()
    entertainment = _money()
    utility = _money()
    bonus_kpi = _money()
    deductions = _money()
    paye = _money(help_text=_("Pay-as-you-earn income tax"))
    pension = _money()
    medical_contribution = _money()
    net_salary = _money()
    final_gross = _money()
    working_days = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal("0.00")
    )
    days_worked = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal("0.00")
    )

    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.PROCESSED
    )
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="uploaded_payrolls",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-period_year", "-period_month", "staff_id"]
        constraints = [
            models.UniqueConstraint(
                fields=["company", "staff", "period_year", "period_key"],
                name="uniq_payroll_per_staff_period",
            ),
        ]
        verbose_name = _("Payroll")
        verbose_name_plural = _("Payrolls")

    def __str__(self):  # pragma: no cover - trivial
        return f"{self.staff} - {self.month_label} {self.period_year}"


class Payslip(models.Model):
    """Generated payslip PDF; written once per staff member and period."""

    company = models.ForeignKey(
        "companies.Company", on_delete=models.CASCADE, related_name="payslips"
    )
    staff = models.ForeignKey(
        "staff.StaffRecord", on_delete=models.CASCADE, related_name="payslips"
    )
    payroll = models.ForeignKey(
        Payroll, on_delete=models.CASCADE, related_name="payslips"
    )
    period_year = models.PositiveIntegerField()
    period_month = models.PositiveSmallIntegerField()
    month_label = models.CharField(max_length=20)
    period_key = models.CharField(max_length=20)
    file = models.FileField(upload_to="payslips/")
    file_name = models.CharField(max_length=255)
    gross_pay = _money()
    net_pay = _money()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-period_year", "-period_month", "-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["company", "staff", "period_year", "period_key"],
                name="uniq_payslip_per_staff_period",
            ),
        ]
        verbose_name = _("Payslip")
        verbose_name_plural = _("Payslips")

    def __str__(self):  # pragma: no cover - trivial
        return f"Payslip {self.month_label} {self.period_year} - {self.staff}"
