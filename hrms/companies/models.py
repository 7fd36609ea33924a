from django.db import models
from django.utils.translation import gettext_lazy as _


class Company(models.Model):
    """A tenant. All staff, payroll and recruitment data hangs off one company."""

    name = models.CharField(max_length=200, unique=True)
    address = models.CharField(max_length=255, blank=True)
    phone = models.CharField(max_length=50, blank=True)
    email = models.EmailField(
        blank=True, help_text=_("Sender address for staff notifications")
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        verbose_name = _("Company")
        verbose_name_plural = _("Companies")

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.name
