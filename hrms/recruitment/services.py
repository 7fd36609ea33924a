"""Job applications, CV text extraction and applicant ranking."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import PurePath
from typing import TYPE_CHECKING
from zipfile import BadZipFile

from django.core.files.base import ContentFile
from django.db import IntegrityError
from django.db import transaction
from docx import Document
from docx.opc.exceptions import PackageNotFoundError
from pypdf import PdfReader
from pypdf.errors import PdfReadError

from hrms.recruitment.keywords import extract_keywords
from hrms.recruitment.models import Job
from hrms.recruitment.models import JobApplication

if TYPE_CHECKING:
    from django.core.files.uploadedfile import UploadedFile

logger = logging.getLogger(__name__)

TEXT_SUFFIXES = {".txt", ".text", ".md"}


class ApplicationError(Exception):
    """An application cannot be accepted."""


class JobExpired(ApplicationError):
    pass


class DuplicateApplication(ApplicationError):
    pass


class UnsupportedCV(ApplicationError):
    pass


@dataclass
class RankedApplicant:
    application: JobApplication
    match_count: int


def extract_cv_text(content: bytes, file_name: str) -> str:
    """Plain text of an uploaded CV (PDF, Word .docx or text file)."""
    suffix = PurePath(file_name or "").suffix.lower()
    if suffix == ".pdf":
        try:
            reader = PdfReader(io.BytesIO(content))
            pages = [(page.extract_text() or "").strip() for page in reader.pages]
        except (PdfReadError, ValueError, OSError) as exc:
            msg = f"Could not read CV: {exc}"
            raise UnsupportedCV(msg) from exc
        return "\n".join(text for text in pages if text)
    if suffix == ".docx":
        try:
            document = Document(io.BytesIO(content))
        except (BadZipFile, PackageNotFoundError, KeyError, ValueError) as exc:
            msg = f"Could not read CV: {exc}"
            raise UnsupportedCV(msg) from exc
        lines = [paragraph.text.strip() for paragraph in document.paragraphs]
        for table in document.tables:
            lines.extend(cell.text.strip() for row in table.rows for cell in row.cells)
        return "\n".join(text for text in lines if text)
    if suffix in TEXT_SUFFIXES:
        return content.decode("utf-8", errors="replace")
    msg = "Unsupported CV format. Upload a PDF, Word (.docx) or plain text file."
    raise UnsupportedCV(msg)


def apply_to_job(job: Job, user, cv_file: UploadedFile | None = None) -> JobApplication:
    if job.is_expired:
        msg = "Job posting has expired"
        raise JobExpired(msg)
    if job.applications.filter(email__iexact=user.email).exists():
        msg = "You have already applied for this job"
        raise DuplicateApplication(msg)

    cv_text = ""
    content = b""
    if cv_file is not None:
        content = cv_file.read()
        cv_text = extract_cv_text(content, cv_file.name)

    application = JobApplication(
        job=job,
        applicant=user,
        first_name=user.first_name or user.username,
        last_name=user.last_name,
        email=user.email,
        cv_text=cv_text,
    )
    if cv_file is not None:
        application.cv.save(cv_file.name, ContentFile(content), save=False)
    try:
        with transaction.atomic():
            application.save()
    except IntegrityError as exc:
        msg = "You have already applied for this job"
        raise DuplicateApplication(msg) from exc
    logger.info("Application %s received for job %s", application.pk, job.pk)
    return application


def rank_applicants(job: Job) -> list[RankedApplicant]:
    """Applicants ordered by how many job keywords appear in their CV.

    Ties keep application order.
    """
    keywords = extract_keywords(job.description)
    ranked = []
    for application in job.applications.select_related("applicant").order_by(
        "created_at", "id"
    ):
        cv = (application.cv_text or "").lower()
        matches = sum(1 for keyword in keywords if keyword in cv)
        ranked.append(RankedApplicant(application=application, match_count=matches))
    ranked.sort(key=lambda item: item.match_count, reverse=True)
    return ranked
