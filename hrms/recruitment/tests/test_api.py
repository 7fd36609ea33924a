import io
from datetime import date
from datetime import timedelta

from django.core.files.uploadedfile import SimpleUploadedFile
from django.urls import reverse
from django.utils import timezone
from openpyxl import Workbook
from rest_framework.test import APITestCase

from hrms.audit.models import AuditLog
from hrms.recruitment.models import Job
from hrms.recruitment.tests.factories import JobApplicationFactory
from hrms.recruitment.tests.factories import JobFactory
from hrms.users.api.permissions import ROLE_HR
from hrms.users.tests.factories import UserFactory


class JobAPITests(APITestCase):
    def setUp(self):
        self.hr = UserFactory(roles=[ROLE_HR])
        self.company = self.hr.company
        self.staff = UserFactory(company=self.company)
        self.job = JobFactory(company=self.company)

    def test_jobs_are_scoped_to_the_caller_company(self):
        JobFactory()
        self.client.force_authenticate(user=self.staff)
        res = self.client.get(reverse("api_v1:job-list"))
        assert res.status_code == 200
        ids = [row["id"] for row in res.data["results"]]
        assert ids == [self.job.pk]

    def test_only_hr_can_create_jobs(self):
        payload = {
            "title": "Accountant",
            "description": "IFRS reporting and reconciliations",
            "expiration_date": str(timezone.localdate() + timedelta(days=10)),
        }
        self.client.force_authenticate(user=self.staff)
        denied = self.client.post(reverse("api_v1:job-list"), payload, format="json")
        assert denied.status_code == 403

        self.client.force_authenticate(user=self.hr)
        res = self.client.post(reverse("api_v1:job-list"), payload, format="json")
        assert res.status_code == 201, res.data
        job = Job.objects.get(pk=res.data["id"])
        assert job.company == self.company
        assert job.created_by == self.hr
        assert AuditLog.objects.filter(action="job_created", record_id=job.pk).exists()

    def test_hr_can_delete_a_job(self):
        self.client.force_authenticate(user=self.hr)
        url = reverse("api_v1:job-detail", kwargs={"pk": self.job.pk})
        assert self.client.delete(url).status_code == 204
        assert not Job.objects.filter(pk=self.job.pk).exists()

    def test_staff_can_apply_once(self):
        self.client.force_authenticate(user=self.staff)
        url = reverse("api_v1:job-apply", kwargs={"pk": self.job.pk})
        cv = SimpleUploadedFile("cv.txt", b"Python Django", content_type="text/plain")

        res = self.client.post(url, {"cv": cv}, format="multipart")
        assert res.status_code == 201, res.data
        assert res.data["email"] == self.staff.email

        again = self.client.post(url, {}, format="multipart")
        assert again.status_code == 400
        assert again.data["detail"] == "You have already applied for this job"

    def test_apply_to_expired_job(self):
        self.job.expiration_date = timezone.localdate() - timedelta(days=1)
        self.job.save()
        self.client.force_authenticate(user=self.staff)
        url = reverse("api_v1:job-apply", kwargs={"pk": self.job.pk})
        res = self.client.post(url, {}, format="multipart")
        assert res.status_code == 400
        assert res.data["detail"] == "Job posting has expired"

    def test_cannot_apply_to_another_company_job(self):
        other = JobFactory()
        self.client.force_authenticate(user=self.staff)
        url = reverse("api_v1:job-apply", kwargs={"pk": other.pk})
        assert self.client.post(url, {}, format="multipart").status_code == 404

    def test_ranking_is_hr_only(self):
        JobApplicationFactory(job=self.job, cv_text="django")
        best = JobApplicationFactory(job=self.job, cv_text="python django postgresql")
        url = reverse("api_v1:job-ranking", kwargs={"pk": self.job.pk})

        self.client.force_authenticate(user=self.staff)
        assert self.client.get(url).status_code == 403

        self.client.force_authenticate(user=self.hr)
        res = self.client.get(url)
        assert res.status_code == 200
        assert res.data[0]["application"]["id"] == best.pk
        assert res.data[0]["match_count"] == 3


class JobUploadTests(APITestCase):
    def setUp(self):
        self.hr = UserFactory(roles=[ROLE_HR])
        self.company = self.hr.company
        self.url = reverse("api_v1:job-upload")

    def _workbook(self, rows) -> SimpleUploadedFile:
        workbook = Workbook()
        sheet = workbook.active
        sheet.append(
            ["Title", "Description", "Department", "Employment Type", "Expiration Date"]
        )
        for row in rows:
            sheet.append(row)
        buffer = io.BytesIO()
        workbook.save(buffer)
        return SimpleUploadedFile("jobs.xlsx", buffer.getvalue())

    def test_rows_become_jobs(self):
        upload = self._workbook(
            [
                ["Accountant", "IFRS reporting", "Finance", "Full time", 46022],
                ["Intern", "Data entry", "Ops", "internship", date(2026, 1, 31)],
                ["", "No title", "Ops", "", "2026-01-31"],
                ["Driver", "Fleet", "Ops", "", "next week"],
            ]
        )
        self.client.force_authenticate(user=self.hr)
        res = self.client.post(self.url, {"file": upload}, format="multipart")

        assert res.status_code == 200, res.data
        assert res.data["summary"] == {"total": 4, "successful": 2, "failed": 2}
        assert res.data["errors"] == [
            "Row 4: Missing title",
            "Row 5: Invalid or missing expiration date",
        ]
        accountant = Job.objects.get(title="Accountant")
        assert accountant.company == self.company
        assert accountant.created_by == self.hr
        assert accountant.expiration_date == date(2025, 12, 31)
        intern = Job.objects.get(title="Intern")
        assert intern.employment_type == Job.EmploymentType.INTERNSHIP
        assert intern.expiration_date == date(2026, 1, 31)
        assert AuditLog.objects.filter(
            action="job_upload", company=self.company
        ).exists()

    def test_staff_cannot_upload_jobs(self):
        staff = UserFactory(company=self.company)
        self.client.force_authenticate(user=staff)
        upload = self._workbook([["Accountant", "IFRS", "Finance", "", 46022]])
        res = self.client.post(self.url, {"file": upload}, format="multipart")
        assert res.status_code == 403
        assert not Job.objects.exists()

    def test_unsupported_file(self):
        self.client.force_authenticate(user=self.hr)
        upload = SimpleUploadedFile("jobs.pdf", b"%PDF-1.4")
        res = self.client.post(self.url, {"file": upload}, format="multipart")
        assert res.status_code == 400
        assert res.data["detail"].startswith("Invalid file format")
