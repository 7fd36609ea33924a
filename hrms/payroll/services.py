"""
Payroll upload pipeline.

A payroll file is processed strictly in order: parse the file, then validate,
resolve, upsert, render the payslip and optionally notify for each row, then
complete the upload record. Each row's writes commit on their own, so a
failure on one row never undoes the rows before it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from dataclasses import field
from typing import TYPE_CHECKING
from typing import Any

from django.conf import settings
from django.core.files.base import ContentFile
from django.urls import reverse
from django.utils import timezone

from hrms.audit.utils import log_action
from hrms.payroll.importers.rows import PayrollRow
from hrms.payroll.importers.rows import RowError
from hrms.payroll.importers.rows import parse_row
from hrms.payroll.importers.spreadsheet import SheetRow
from hrms.payroll.importers.spreadsheet import read_payroll_sheet
from hrms.payroll.models import Payroll
from hrms.payroll.models import PayrollUpload
from hrms.payroll.notifications import send_payroll_notification_email
from hrms.payroll.payslips import PayslipGenerationError
from hrms.payroll.payslips import generate_payslip
from hrms.payroll.reports import build_failed_records_workbook
from hrms.staff.services import StaffLookupError
from hrms.staff.services import resolve_staff

if TYPE_CHECKING:
    from django.core.files.uploadedfile import UploadedFile

    from hrms.companies.models import Company
    from hrms.staff.models import StaffRecord

logger = logging.getLogger(__name__)

ROW_ERRORS = (RowError, StaffLookupError, PayslipGenerationError)


@dataclass
class UploadResult:
    upload: PayrollUpload
    total: int
    successful: int = 0
    failed: int = 0
    payslips_generated: int = 0
    emails_sent: int = 0
    processed_records: list[dict[str, Any]] = field(default_factory=list)
    failed_records: list[dict[str, Any]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def record_failure(self, row: SheetRow, message: str) -> None:
        self.failed += 1
        self.errors.append(f"Row {row.row_number}: {message}")
        self.failed_records.append({**row.cells, "error": message})
        logger.warning(
            "Payroll upload %s row %s failed: %s",
            self.upload.pk,
            row.row_number,
            message,
        )

    def record_success(self, row: PayrollRow, staff: StaffRecord) -> None:
        self.successful += 1
        self.processed_records.append(
            {
                **row.raw,
                "staffId": staff.staff_id,
                "staffName": staff.full_name,
                "netSalary": row.net_salary,
                "status": Payroll.Status.PROCESSED,
            }
        )

    def as_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "uploadId": self.upload.pk,
            "summary": {
                "totalProcessed": self.total,
                "successful": self.successful,
                "failed": self.failed,
                "payslipsGenerated": self.payslips_generated,
                "emailsSent": self.emails_sent,
            },
            "results": {
                "processedRecords": self.processed_records,
                "failedRecords": self.failed_records,
                "errors": self.errors,
                "warnings": self.warnings,
            },
        }
        if self.upload.has_failed_records:
            payload["failedRecordsDownload"] = reverse(
                "api_v1:payroll-upload-failed-records", kwargs={"pk": self.upload.pk}
            )
        return payload


def upsert_payroll(
    company: Company,
    staff: StaffRecord,
    row: PayrollRow,
    *,
    actor=None,
    upload: PayrollUpload | None = None,
) -> tuple[Payroll, bool]:
    """Create or overwrite the payroll for (company, staff, period).

    Figures are written exactly as they were uploaded.
    """
    if staff.company_id != company.pk:
        msg = "Staff record belongs to another company"
        raise ValueError(msg)
    period = row.period
    defaults = {
        **row.figures(),
        "period_month": period.month,
        "month_label": period.display_label,
        "status": Payroll.Status.PROCESSED,
        "uploaded_by": actor,
        "upload": upload,
    }
    return Payroll.objects.update_or_create(
        company=company,
        staff=staff,
        period_year=period.year,
        period_key=period.key(),
        defaults=defaults,
    )


def _process_row(
    row: SheetRow,
    result: UploadResult,
    *,
    company: Company,
    actor,
    send_emails: bool,
) -> None:
    parsed = parse_row(row)
    staff = resolve_staff(company, email=parsed.email, name=parsed.name)
    payroll, _created = upsert_payroll(
        company, staff, parsed, actor=actor, upload=result.upload
    )

    if generate_payslip(company, staff, payroll, parsed) is not None:
        result.payslips_generated += 1

    if send_emails:
        try:
            send_payroll_notification_email(staff, payroll)
        except Exception as exc:  # noqa: BLE001
            result.warnings.append(
                f"Row {row.row_number}: Email sending failed - {exc}"
            )
            logger.warning(
                "Payslip email to %s failed for upload %s: %s",
                staff.email,
                result.upload.pk,
                exc,
            )
        else:
            result.emails_sent += 1

    result.record_success(parsed, staff)


def _complete_upload(result: UploadResult) -> None:
    upload = result.upload
    if result.failed_records:
        stamp = int(timezone.now().timestamp() * 1000)
        upload.failed_records_file.save(
            f"failed-records-{stamp}.xlsx",
            ContentFile(build_failed_records_workbook(result.failed_records)),
            save=False,
        )
    upload.successful = result.successful
    upload.failed = result.failed
    upload.payslips_generated = result.payslips_generated
    upload.emails_sent = result.emails_sent
    upload.errors = result.errors
    upload.warnings = result.warnings
    upload.status = PayrollUpload.Status.COMPLETED
    upload.completed_at = timezone.now()
    upload.save()


def process_payroll_upload(
    *,
    company: Company,
    actor,
    uploaded_file: UploadedFile,
    send_emails: bool = False,
) -> UploadResult:
    """Run a payroll file through the whole pipeline.

    File-level problems raise ``SpreadsheetFileError`` before anything is stored.
    Row-level problems are collected on the returned result.
    """
    content = uploaded_file.read()
    rows = read_payroll_sheet(
        content,
        uploaded_file.name,
        getattr(uploaded_file, "content_type", "") or "",
        max_rows=getattr(settings, "PAYROLL_MAX_UPLOAD_ROWS", None),
    )

    upload = PayrollUpload(
        company=company,
        file_name=uploaded_file.name,
        uploaded_by=actor,
        total_records=len(rows),
    )
    upload.file.save(uploaded_file.name, ContentFile(content), save=False)
    upload.save()
    logger.info(
        "Processing payroll upload %s for company %s (%s rows)",
        upload.pk,
        company.pk,
        len(rows),
    )

    result = UploadResult(upload=upload, total=len(rows))
    for row in rows:
        try:
            _process_row(
                row, result, company=company, actor=actor, send_emails=send_emails
            )
        except ROW_ERRORS as exc:
            result.record_failure(row, str(exc))
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected error on payroll row %s", row.row_number)
            result.record_failure(row, str(exc) or "Unknown error")

    _complete_upload(result)
    log_action(
        "payroll_upload",
        actor=actor,
        company=company,
        message=f"{upload.file_name}: {result.successful} ok, {result.failed} failed",
        model_name="payroll.PayrollUpload",
        record_id=upload.pk,
        after={
            "total": result.total,
            "successful": result.successful,
            "failed": result.failed,
            "payslipsGenerated": result.payslips_generated,
            "emailsSent": result.emails_sent,
        },
    )
    logger.info(
        "Payroll upload %s completed: %s successful, %s failed",
        upload.pk,
        result.successful,
        result.failed,
    )
    return result
