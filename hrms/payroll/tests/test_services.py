from datetime import date

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from hrms.payroll.importers.rows import parse_row
from hrms.payroll.importers.spreadsheet import SheetRow
from hrms.payroll.importers.spreadsheet import TooManyRows
from hrms.payroll.models import Payroll
from hrms.payroll.models import PayrollUpload
from hrms.payroll.services import process_payroll_upload
from hrms.payroll.services import upsert_payroll
from hrms.payroll.tests.factories import build_payroll_csv
from hrms.payroll.tests.factories import payroll_cells
from hrms.staff.tests.factories import StaffRecordFactory
from hrms.users.tests.factories import UserFactory

pytestmark = pytest.mark.django_db


def _csv(rows):
    return SimpleUploadedFile("payroll.csv", build_payroll_csv(rows), "text/csv")


def test_upsert_refuses_staff_of_another_company():
    staff = StaffRecordFactory()
    other = StaffRecordFactory().company
    row = parse_row(
        SheetRow(row_number=2, cells=payroll_cells(EMAIL=staff.email)),
        today=date(2025, 1, 1),
    )
    with pytest.raises(ValueError, match="another company"):
        upsert_payroll(other, staff, row)


def test_unexpected_row_error_keeps_the_payroll_and_the_batch(monkeypatch):
    staff = StaffRecordFactory()
    second = StaffRecordFactory(company=staff.company)
    actor = UserFactory(company=staff.company)

    def fail_first(company, staff_record, payroll, row):
        if staff_record == staff:
            msg = "storage offline"
            raise RuntimeError(msg)

    monkeypatch.setattr("hrms.payroll.services.generate_payslip", fail_first)
    result = process_payroll_upload(
        company=staff.company,
        actor=actor,
        uploaded_file=_csv(
            [payroll_cells(EMAIL=staff.email), payroll_cells(EMAIL=second.email)]
        ),
    )

    assert (result.successful, result.failed) == (1, 1)
    assert result.errors == ["Row 2: storage offline"]
    assert result.failed_records[0]["EMAIL"] == staff.email
    assert Payroll.objects.filter(staff=staff).exists()
    assert Payroll.objects.filter(staff=second).exists()
    upload = PayrollUpload.objects.get()
    assert upload.status == PayrollUpload.Status.COMPLETED
    assert upload.has_failed_records


def test_row_limit_stops_before_anything_is_stored(settings):
    settings.PAYROLL_MAX_UPLOAD_ROWS = 1
    staff = StaffRecordFactory()
    rows = [payroll_cells(EMAIL=staff.email), payroll_cells(EMAIL=staff.email)]
    with pytest.raises(TooManyRows):
        process_payroll_upload(
            company=staff.company, actor=None, uploaded_file=_csv(rows)
        )
    assert not PayrollUpload.objects.exists()
