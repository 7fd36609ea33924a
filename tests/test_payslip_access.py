from django.urls import reverse

from hrms.payroll.tests.factories import PayslipFactory
from hrms.staff.tests.factories import StaffRecordFactory
from tests.mixins import TenantAPITestCase


class PayslipAccessTests(TenantAPITestCase):
    def setUp(self):
        super().setUp()
        self.ada_payslip = PayslipFactory(
            payroll__company=self.company, payroll__staff=self.ada
        )
        self.ada_february = PayslipFactory(
            payroll__company=self.company,
            payroll__staff=self.ada,
            payroll__period_month=2,
            payroll__month_label="February",
            payroll__period_key="2025-02",
        )
        self.chidi_payslip = PayslipFactory(
            payroll__company=self.company, payroll__staff=self.chidi
        )
        globex_staff = StaffRecordFactory(company=self.other_company)
        self.globex_payslip = PayslipFactory(
            payroll__company=self.other_company, payroll__staff=globex_staff
        )

    def _download(self, payslip, user):
        self.client.force_authenticate(user=user)
        return self.client.get(
            reverse("api_v1:payslip-download", kwargs={"pk": payslip.pk})
        )

    def test_owner_can_download_own_payslip(self):
        res = self._download(self.ada_payslip, self.ada_user)
        self.assert_http_status(res, 200)
        assert res["Content-Type"] == "application/pdf"
        assert b"".join(res.streaming_content).startswith(b"%PDF")

    def test_colleague_cannot_download(self):
        res = self._download(self.ada_payslip, self.chidi_user)
        self.assert_http_status(res, 403)
        assert str(res.data["detail"]) == "You can only download your own payslips"

    def test_hr_downloads_any_company_payslip(self):
        self.assert_http_status(self._download(self.chidi_payslip, self.hr), 200)

    def test_other_company_payslips_are_invisible(self):
        self.assert_http_status(self._download(self.globex_payslip, self.hr), 404)

    def test_payslip_list_is_hr_only_and_scoped(self):
        self.client.force_authenticate(user=self.ada_user)
        denied = self.client.get(reverse("api_v1:payslip-list"))
        self.assert_http_status(denied, 403)

        self.client.force_authenticate(user=self.hr)
        res = self.client.get(reverse("api_v1:payslip-list"))
        self.assert_http_status(res, 200)
        ids = {row["id"] for row in self.extract_results(res)}
        assert ids == {
            self.ada_payslip.pk,
            self.ada_february.pk,
            self.chidi_payslip.pk,
        }

    def test_my_payslips_newest_first(self):
        self.client.force_authenticate(user=self.ada_user)
        res = self.client.get(reverse("api_v1:my-payslips"))

        self.assert_http_status(res, 200)
        assert res.data["staffId"] == "ACM001"
        assert res.data["email"] == self.ada.email
        assert [row["id"] for row in res.data["payslips"]] == [
            self.ada_february.pk,
            self.ada_payslip.pk,
        ]
        assert res.data["payslips"][0]["download_url"] == reverse(
            "api_v1:payslip-download", kwargs={"pk": self.ada_february.pk}
        )

    def test_my_payslips_without_staff_record(self):
        self.client.force_authenticate(user=self.hr)
        res = self.client.get(reverse("api_v1:my-payslips"))
        self.assert_http_status(res, 404)
        assert res.data["detail"] == "Staff record not found for current user"
