"""Payslip-ready emails sent after a payroll upload."""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string

from hrms.payroll.payslips import format_naira

if TYPE_CHECKING:
    from hrms.payroll.models import Payroll
    from hrms.staff.models import StaffRecord


def send_payroll_notification_email(staff: StaffRecord, payroll: Payroll) -> int:
    """Tell a staff member their payslip is ready.

    Errors from the mail backend propagate; the caller decides whether they
    are fatal.
    """
    company = staff.company
    frontend = getattr(settings, "FRONTEND_URL", "").rstrip("/")
    context = {
        "staff": staff,
        "company_name": company.name or "Your Company",
        "month": payroll.month_label,
        "year": payroll.period_year,
        "net_salary": format_naira(payroll.net_salary),
        "login_link": f"{frontend}/profile",
    }
    subject = f"Your Payslip for {payroll.month_label} {payroll.period_year}"
    message = EmailMultiAlternatives(
        subject=subject,
        body=render_to_string("payroll/email/payslip_ready.txt", context),
        from_email=company.email or settings.DEFAULT_FROM_EMAIL,
        to=[staff.email],
    )
    message.attach_alternative(
        render_to_string("payroll/email/payslip_ready.html", context), "text/html"
    )
    return message.send()
