"""
Bulk import of staff records from a spreadsheet.

Headers are matched loosely, so ``staffId``, ``Staff ID`` and ``staff_id`` all
fill the same field. Rows are validated and created one at a time, in sheet
order: a bad row is reported and the rest of the file carries on, and a staff
id or email repeated further down the same file fails as a duplicate of the
record its first occurrence created.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from dataclasses import field
from typing import TYPE_CHECKING
from typing import Any

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.files.base import ContentFile
from django.core.validators import validate_email
from django.db import IntegrityError
from django.db import transaction
from django.db.models import Q
from django.urls import reverse
from django.utils import timezone

from hrms.audit.utils import log_action
from hrms.payroll.importers.spreadsheet import SheetRow
from hrms.payroll.importers.spreadsheet import check_row_count
from hrms.payroll.importers.spreadsheet import read_sheet
from hrms.payroll.reports import build_failed_records_workbook
from hrms.staff.models import StaffRecord
from hrms.staff.models import StaffUpload

if TYPE_CHECKING:
    from django.core.files.uploadedfile import UploadedFile

    from hrms.companies.models import Company

logger = logging.getLogger(__name__)

STAFF_ID_PATTERN = re.compile(r"^[A-Za-z0-9]{3,20}$")

# Field name -> label used in error messages, in reporting order.
REQUIRED_FIELDS = {
    "staff_id": "Staff ID",
    "email": "Email",
    "first_name": "First Name",
    "last_name": "Last Name",
    "department": "Department",
    "position": "Position",
}
OPTIONAL_FIELDS = ("phone", "bank_name", "account_number")

# Header cells with case, spaces and punctuation removed.
_HEADER_FIELDS = {
    "staffid": "staff_id",
    "staffno": "staff_id",
    "staffnumber": "staff_id",
    "employeeid": "staff_id",
    "email": "email",
    "emailaddress": "email",
    "firstname": "first_name",
    "lastname": "last_name",
    "surname": "last_name",
    "department": "department",
    "position": "position",
    "jobtitle": "position",
    "phone": "phone",
    "phonenumber": "phone",
    "bankname": "bank_name",
    "bank": "bank_name",
    "accountnumber": "account_number",
    "accountno": "account_number",
}


class StaffRowError(Exception):
    """One staff row cannot be imported; the rest of the file carries on."""


def staff_header(value) -> str:
    """Map a header cell to a ``StaffRecord`` field name.

    Unknown headers are kept, trimmed, so they still show up in exports.
    """
    text = str(value if value is not None else "")
    key = re.sub(r"[^a-z0-9]", "", text.lower())
    return _HEADER_FIELDS.get(key) or re.sub(r"\s+", " ", text).strip()


def cell_text(value) -> str:
    """Spreadsheet cell as text; whole-number floats lose their ``.0``."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def parse_staff_row(row: SheetRow) -> dict[str, str]:
    """Validated ``StaffRecord`` field values of one row.

    Raises ``StaffRowError`` describing the first problem found.
    """
    values = {name: cell_text(row.get(name)) for name in REQUIRED_FIELDS}
    values.update({name: cell_text(row.get(name)) for name in OPTIONAL_FIELDS})

    missing = [label for name, label in REQUIRED_FIELDS.items() if not values[name]]
    if missing:
        msg = f"Missing required fields: {', '.join(missing)}"
        raise StaffRowError(msg)

    try:
        validate_email(values["email"])
    except ValidationError:
        msg = f"Invalid email format: {values['email']}"
        raise StaffRowError(msg) from None

    if not STAFF_ID_PATTERN.match(values["staff_id"]):
        msg = "Staff ID must be 3-20 alphanumeric characters"
        raise StaffRowError(msg)

    values["email"] = values["email"].lower()
    return values


@dataclass
class StaffImportResult:
    upload: StaffUpload
    total: int
    successful: int = 0
    failed: int = 0
    created_records: list[dict[str, Any]] = field(default_factory=list)
    failed_records: list[dict[str, Any]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def record_failure(self, row: SheetRow, message: str) -> None:
        self.failed += 1
        self.errors.append(f"Row {row.row_number}: {message}")
        self.failed_records.append({**row.cells, "error": message})
        logger.warning(
            "Staff upload %s row %s failed: %s",
            self.upload.pk,
            row.row_number,
            message,
        )

    def record_success(self, staff: StaffRecord) -> None:
        self.successful += 1
        self.created_records.append(
            {
                "id": staff.pk,
                "staffId": staff.staff_id,
                "email": staff.email,
                "name": staff.full_name,
            }
        )

    def as_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "uploadId": self.upload.pk,
            "summary": {
                "totalProcessed": self.total,
                "successful": self.successful,
                "failed": self.failed,
            },
            "results": {
                "createdRecords": self.created_records,
                "failedRecords": self.failed_records,
                "errors": self.errors,
            },
        }
        if self.upload.has_failed_records:
            payload["failedRecordsDownload"] = reverse(
                "api_v1:staff-upload-failed-records", kwargs={"pk": self.upload.pk}
            )
        return payload


def create_staff_record(company: Company, values: dict[str, str]) -> StaffRecord:
    """Create one staff record unless its id or email is already taken."""
    duplicate = StaffRecord.objects.filter(company=company).filter(
        Q(staff_id__iexact=values["staff_id"]) | Q(email__iexact=values["email"])
    )
    msg = (
        f"Staff with ID {values['staff_id']} or email {values['email']} "
        "already exists"
    )
    if duplicate.exists():
        raise StaffRowError(msg)
    try:
        with transaction.atomic():
            return StaffRecord.objects.create(company=company, **values)
    except IntegrityError as exc:
        raise StaffRowError(msg) from exc


def _complete_upload(result: StaffImportResult) -> None:
    upload = result.upload
    if result.failed_records:
        stamp = int(timezone.now().timestamp() * 1000)
        upload.failed_records_file.save(
            f"failed-staff-{stamp}.xlsx",
            ContentFile(build_failed_records_workbook(result.failed_records)),
            save=False,
        )
    upload.successful = result.successful
    upload.failed = result.failed
    upload.errors = result.errors
    upload.status = StaffUpload.Status.COMPLETED
    upload.completed_at = timezone.now()
    upload.save()


def process_staff_upload(
    *, company: Company, actor, uploaded_file: UploadedFile
) -> StaffImportResult:
    """Create staff records from an uploaded csv, xls or xlsx file.

    File-level problems raise ``SpreadsheetFileError`` before anything is
    stored.
    """
    content = uploaded_file.read()
    rows = read_sheet(
        content,
        uploaded_file.name,
        getattr(uploaded_file, "content_type", "") or "",
        header=staff_header,
    )
    check_row_count(
        rows,
        label="staff",
        max_rows=getattr(settings, "STAFF_MAX_UPLOAD_ROWS", None),
    )

    upload = StaffUpload(
        company=company,
        file_name=uploaded_file.name,
        uploaded_by=actor,
        total_records=len(rows),
    )
    upload.file.save(uploaded_file.name, ContentFile(content), save=False)
    upload.save()
    logger.info(
        "Processing staff upload %s for company %s (%s rows)",
        upload.pk,
        company.pk,
        len(rows),
    )

    result = StaffImportResult(upload=upload, total=len(rows))
    for row in rows:
        try:
            staff = create_staff_record(company, parse_staff_row(row))
        except StaffRowError as exc:
            result.record_failure(row, str(exc))
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected error on staff row %s", row.row_number)
            result.record_failure(row, str(exc) or "Unknown error")
        else:
            result.record_success(staff)

    _complete_upload(result)
    log_action(
        "staff_upload",
        actor=actor,
        company=company,
        message=f"{upload.file_name}: {result.successful} ok, {result.failed} failed",
        model_name="staff.StaffUpload",
        record_id=upload.pk,
        after={
            "total": result.total,
            "successful": result.successful,
            "failed": result.failed,
        },
    )
    logger.info(
        "Staff upload %s completed: %s successful, %s failed",
        upload.pk,
        result.successful,
        result.failed,
    )
    return result
