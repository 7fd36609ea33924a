"""Create job postings in bulk from a csv, xls or xlsx file."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from dataclasses import field
from datetime import date
from datetime import datetime
from datetime import timedelta
from typing import TYPE_CHECKING
from typing import Any

from django.conf import settings
from django.utils.dateparse import parse_date
from django.utils.dateparse import parse_datetime

from hrms.audit.utils import log_action
from hrms.payroll.importers.spreadsheet import SheetRow
from hrms.payroll.importers.spreadsheet import check_row_count
from hrms.payroll.importers.spreadsheet import read_sheet
from hrms.recruitment.models import Job

if TYPE_CHECKING:
    from django.core.files.uploadedfile import UploadedFile

    from hrms.companies.models import Company

logger = logging.getLogger(__name__)

# Day zero of spreadsheet serial dates (serial 1 is 1900-01-01 in Excel).
EXCEL_EPOCH = date(1899, 12, 30)

_HEADER_FIELDS = {
    "title": "title",
    "jobtitle": "title",
    "description": "description",
    "jobdescription": "description",
    "department": "department",
    "location": "location",
    "employmenttype": "employment_type",
    "type": "employment_type",
    "expirationdate": "expiration_date",
    "expirydate": "expiration_date",
    "closingdate": "expiration_date",
    "deadline": "expiration_date",
}


def job_header(value) -> str:
    text = str(value if value is not None else "")
    key = re.sub(r"[^a-z0-9]", "", text.lower())
    return _HEADER_FIELDS.get(key) or re.sub(r"\s+", " ", text).strip()


def parse_expiration_date(value) -> date | None:
    """Date of a spreadsheet cell, or ``None`` when it is not a date.

    Accepts date cells, ISO text (``2025-12-31``, with or without a time) and
    spreadsheet serial numbers, as numbers or numeric text.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return _from_serial(value)

    text = str(value).strip()
    if not text:
        return None
    if re.fullmatch(r"\d+(\.\d+)?", text):
        return _from_serial(float(text))
    try:
        parsed = parse_date(text)
        if parsed is None:
            moment = parse_datetime(text)
            parsed = moment.date() if moment else None
    except ValueError:
        return None
    return parsed


def _from_serial(serial: float) -> date | None:
    if serial <= 0:
        return None
    try:
        return EXCEL_EPOCH + timedelta(days=int(serial))
    except OverflowError:
        return None


def parse_employment_type(value) -> str | None:
    """Employment type choice for "Full time", "full-time", "FULL_TIME"...

    Blank cells mean full time; unknown values give ``None``.
    """
    text = str(value if value is not None else "").strip()
    if not text:
        return Job.EmploymentType.FULL_TIME
    key = re.sub(r"[^A-Z]+", "_", text.upper()).strip("_")
    if key in Job.EmploymentType.values:
        return key
    return None


def _text(value) -> str:
    return "" if value is None else str(value).strip()


def parse_job_row(row: SheetRow) -> dict[str, Any] | list[str]:
    """Validated ``Job`` field values, or every problem found in the row."""
    title = _text(row.get("title"))
    description = _text(row.get("description"))
    expiration_date = parse_expiration_date(row.get("expiration_date"))
    employment_type = parse_employment_type(row.get("employment_type"))

    problems = []
    if not title:
        problems.append("Missing title")
    if not description:
        problems.append("Missing description")
    if employment_type is None:
        problems.append(f"Unknown employment type: {_text(row.get('employment_type'))}")
    if expiration_date is None:
        problems.append("Invalid or missing expiration date")
    if problems:
        return problems

    return {
        "title": title,
        "description": description,
        "department": _text(row.get("department")),
        "location": _text(row.get("location")),
        "employment_type": employment_type,
        "expiration_date": expiration_date,
    }


@dataclass
class JobImportResult:
    total: int
    jobs: list[Job] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def successful(self) -> int:
        return len(self.jobs)

    @property
    def failed(self) -> int:
        return self.total - self.successful

    def as_payload(self) -> dict[str, Any]:
        return {
            "summary": {
                "total": self.total,
                "successful": self.successful,
                "failed": self.failed,
            },
            "createdJobs": [{"id": job.pk, "title": job.title} for job in self.jobs],
            "errors": self.errors,
        }


def import_jobs(
    *, company: Company, actor, uploaded_file: UploadedFile
) -> JobImportResult:
    """Create one job per valid row; invalid rows are reported and skipped.

    File-level problems raise ``SpreadsheetFileError`` before any job exists.
    """
    rows = read_sheet(
        uploaded_file.read(),
        uploaded_file.name,
        getattr(uploaded_file, "content_type", "") or "",
        header=job_header,
    )
    check_row_count(
        rows, label="job", max_rows=getattr(settings, "JOB_MAX_UPLOAD_ROWS", None)
    )

    result = JobImportResult(total=len(rows))
    for row in rows:
        parsed = parse_job_row(row)
        if isinstance(parsed, list):
            result.errors.append(f"Row {row.row_number}: {'; '.join(parsed)}")
            continue
        result.jobs.append(
            Job.objects.create(company=company, created_by=actor, **parsed)
        )

    log_action(
        "job_upload",
        actor=actor,
        company=company,
        message=f"{uploaded_file.name}: {result.successful} ok, {result.failed} failed",
        model_name="recruitment.Job",
        after={
            "total": result.total,
            "successful": result.successful,
            "failed": result.failed,
            "jobIds": [job.pk for job in result.jobs],
        },
    )
    logger.info(
        "Job upload for company %s: %s created, %s failed",
        company.pk,
        result.successful,
        result.failed,
    )
    return result
