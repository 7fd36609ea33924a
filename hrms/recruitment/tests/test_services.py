import io
from datetime import timedelta

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.utils import timezone
from docx import Document
from reportlab.pdfgen import canvas

from hrms.recruitment.models import JobApplication
from hrms.recruitment.services import DuplicateApplication
from hrms.recruitment.services import JobExpired
from hrms.recruitment.services import UnsupportedCV
from hrms.recruitment.services import apply_to_job
from hrms.recruitment.services import extract_cv_text
from hrms.recruitment.services import rank_applicants
from hrms.recruitment.tests.factories import JobApplicationFactory
from hrms.recruitment.tests.factories import JobFactory
from hrms.users.tests.factories import UserFactory

pytestmark = pytest.mark.django_db


def _pdf_with_text(text: str) -> bytes:
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer)
    pdf.drawString(72, 720, text)
    pdf.showPage()
    pdf.save()
    return buffer.getvalue()


def _docx_with_text(text: str) -> bytes:
    document = Document()
    document.add_paragraph(text)
    document.add_paragraph("")
    table = document.add_table(rows=1, cols=1)
    table.cell(0, 0).text = "PostgreSQL"
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


class TestExtractCvText:
    def test_plain_text_is_decoded(self):
        assert extract_cv_text(b"Django developer", "cv.txt") == "Django developer"

    def test_pdf_text_is_extracted(self):
        text = extract_cv_text(_pdf_with_text("Senior Django developer"), "cv.pdf")
        assert "Django" in text

    def test_docx_text_is_extracted(self):
        text = extract_cv_text(_docx_with_text("Senior Django developer"), "cv.docx")
        assert text == "Senior Django developer\nPostgreSQL"

    def test_broken_docx_is_rejected(self):
        with pytest.raises(UnsupportedCV, match="Could not read CV"):
            extract_cv_text(b"PK\x03\x04", "cv.docx")

    def test_other_formats_are_rejected(self):
        with pytest.raises(UnsupportedCV, match="Unsupported CV format"):
            extract_cv_text(b"{\\rtf1}", "cv.rtf")

    def test_broken_pdf_is_rejected(self):
        with pytest.raises(UnsupportedCV, match="Could not read CV"):
            extract_cv_text(b"not a pdf", "cv.pdf")


class TestApplyToJob:
    def test_application_copies_applicant_details(self):
        job = JobFactory()
        user = UserFactory(company=job.company, first_name="Ada", last_name="Obi")
        cv = SimpleUploadedFile("ada.txt", b"Python and Django", "text/plain")

        application = apply_to_job(job, user, cv)

        assert application.email == user.email
        assert application.first_name == "Ada"
        assert application.cv_text == "Python and Django"
        assert application.cv.name.startswith("recruitment/cvs/")
        assert application.status == JobApplication.Status.PENDING

    def test_expired_job_is_rejected(self):
        job = JobFactory(expiration_date=timezone.localdate() - timedelta(days=1))
        user = UserFactory(company=job.company)
        with pytest.raises(JobExpired):
            apply_to_job(job, user)

    def test_second_application_is_rejected(self):
        job = JobFactory()
        user = UserFactory(company=job.company)
        apply_to_job(job, user)
        with pytest.raises(DuplicateApplication):
            apply_to_job(job, user)
        assert job.applications.count() == 1


def test_rank_applicants_orders_by_match_count_and_keeps_ties_stable():
    job = JobFactory(description="python django postgresql docker")
    first = JobApplicationFactory(job=job, cv_text="Python only")
    second = JobApplicationFactory(job=job, cv_text="Python, Django and Docker")
    third = JobApplicationFactory(job=job, cv_text="Java developer")
    fourth = JobApplicationFactory(job=job, cv_text="Django")

    ranked = rank_applicants(job)

    assert [item.application for item in ranked] == [second, first, fourth, third]
    assert [item.match_count for item in ranked] == [3, 1, 1, 0]
