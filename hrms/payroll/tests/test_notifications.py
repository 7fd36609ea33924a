import pytest
from django.core import mail

from hrms.payroll.notifications import send_payroll_notification_email
from hrms.payroll.tests.factories import PayrollFactory

pytestmark = pytest.mark.django_db


def test_payslip_email_is_sent_from_the_company():
    payroll = PayrollFactory(month_label="Jan", period_year=2025)

    sent = send_payroll_notification_email(payroll.staff, payroll)

    assert sent == 1
    assert len(mail.outbox) == 1
    message = mail.outbox[0]
    assert message.subject == "Your Payslip for Jan 2025"
    assert message.to == [payroll.staff.email]
    assert message.from_email == payroll.company.email
    assert "₦430,000.00" in message.body
    assert "http://frontend.testserver/profile" in message.body
    html, mimetype = message.alternatives[0]
    assert mimetype == "text/html"
    assert payroll.company.name in html
