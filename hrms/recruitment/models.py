from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class Job(models.Model):
    """A job posting open to applicants within one company."""

    class EmploymentType(models.TextChoices):
        FULL_TIME = "FULL_TIME", _("Full time")
        PART_TIME = "PART_TIME", _("Part time")
        CONTRACT = "CONTRACT", _("Contract")
        INTERNSHIP = "INTERNSHIP", _("Internship")

    company = models.ForeignKey(
        "companies.Company", on_delete=models.CASCADE, related_name="jobs"
    )
    title = models.CharField(max_length=200)
    description = models.TextField(
        help_text=_("Keywords for applicant ranking are taken from here")
    )
    department = models.CharField(max_length=150, blank=True)
    location = models.CharField(max_length=150, blank=True)
    employment_type = models.CharField(
        max_length=20, choices=EmploymentType.choices, default=EmploymentType.FULL_TIME
    )
    expiration_date = models.DateField()
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="posted_jobs",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        verbose_name = _("Job")
        verbose_name_plural = _("Jobs")

    def __str__(self):  # pragma: no cover - trivial
        return self.title

    @property
    def is_expired(self) -> bool:
        return self.expiration_date < timezone.localdate()


class JobApplication(models.Model):
    class Status(models.TextChoices):
        PENDING = "PENDING", _("Pending")
        SHORTLISTED = "SHORTLISTED", _("Shortlisted")
        REJECTED = "REJECTED", _("Rejected")

    job = models.ForeignKey(Job, on_delete=models.CASCADE, related_name="applications")
    applicant = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="job_applications",
    )
    first_name = models.CharField(max_length=150)
    last_name = models.CharField(max_length=150)
    email = models.EmailField()
    cv = models.FileField(upload_to="recruitment/cvs/", blank=True)
    cv_text = models.TextField(blank=True)
    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.PENDING
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["job", "email"], name="uniq_application_per_job_email"
            ),
        ]
        verbose_name = _("Job Application")
        verbose_name_plural = _("Job Applications")

    def __str__(self):  # pragma: no cover - trivial
        return f"{self.first_name} {self.last_name} -> {self.job}"
