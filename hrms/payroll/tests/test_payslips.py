from datetime import date
from decimal import Decimal

import pytest
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage

from hrms.payroll.importers.rows import parse_row
from hrms.payroll.importers.spreadsheet import SheetRow
from hrms.payroll.models import Payslip
from hrms.payroll.payslips import PayslipGenerationError
from hrms.payroll.payslips import format_naira
from hrms.payroll.payslips import generate_payslip
from hrms.payroll.payslips import payslip_file_name
from hrms.payroll.payslips import render_payslip_pdf
from hrms.payroll.services import upsert_payroll
from hrms.payroll.tests.factories import payroll_cells
from hrms.staff.tests.factories import StaffRecordFactory

pytestmark = pytest.mark.django_db


@pytest.fixture
def staff():
    return StaffRecordFactory(staff_id="STF/001", first_name="Ada", last_name="Obi")


@pytest.fixture
def row(staff):
    cells = payroll_cells(EMAIL=staff.email, Month="Mar", Year="2025")
    return parse_row(SheetRow(row_number=2, cells=cells), today=date(2025, 3, 1))


def test_format_naira():
    assert format_naira(Decimal("1234567.5")) == "₦1,234,567.50"
    assert format_naira(Decimal("-10")) == "-₦10.00"
    assert format_naira(None, symbol="NGN ") == "NGN 0.00"


def test_render_returns_a_pdf(staff, row):
    pdf = render_payslip_pdf(company_name=staff.company.name, staff=staff, row=row)
    assert pdf.startswith(b"%PDF")


def test_file_name_never_overwrites(staff, row):
    name = payslip_file_name(staff, row)
    assert name == "payslips/payslip-STF-001-03-2025.pdf"

    default_storage.save(name, ContentFile(b"%PDF existing"))
    second = payslip_file_name(staff, row)
    assert second != name
    assert second.startswith("payslips/payslip-STF-001-03-2025-")


def test_generate_payslip_once_per_period(staff, row):
    payroll, _ = upsert_payroll(staff.company, staff, row)

    payslip = generate_payslip(staff.company, staff, payroll, row)

    assert payslip is not None
    assert payslip.period_key == "2025-03"
    assert payslip.month_label == "Mar"
    assert payslip.net_pay == Decimal("430000.00")
    assert default_storage.exists(payslip.file.name)
    assert generate_payslip(staff.company, staff, payroll, row) is None
    assert Payslip.objects.count() == 1


def test_render_failure_is_reported(staff, row, monkeypatch):
    payroll, _ = upsert_payroll(staff.company, staff, row)

    def explode(**kwargs):
        msg = "font missing"
        raise RuntimeError(msg)

    monkeypatch.setattr("hrms.payroll.payslips.render_payslip_pdf", explode)
    with pytest.raises(PayslipGenerationError, match="Failed to generate payslip PDF"):
        generate_payslip(staff.company, staff, payroll, row)
    assert not Payslip.objects.exists()
