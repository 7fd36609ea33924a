from __future__ import annotations

from django.urls import reverse
from django.utils import timezone

from hrms.audit.models import AuditLog
from hrms.audit.utils import log_action
from tests.mixins import TenantAPITestCase


class TestRecentAuditEndpoint(TenantAPITestCase):
    def test_recent_audit_requires_hr(self):
        self.client.force_authenticate(user=self.ada_user)
        denied = self.client.get(reverse("api_v1:audit:recent"))
        self.assert_http_status(denied, 403)

        self.client.force_authenticate(user=self.hr)
        allowed = self.client.get(reverse("api_v1:audit:recent"))
        self.assert_http_status(allowed, 200)

    def test_recent_audit_returns_latest_5_for_the_company(self):
        # Deterministic timestamps so ordering is stable.
        base = timezone.now()
        created = [
            log_action(f"test_action_{i}", actor=self.hr, message=str(i))
            for i in range(6)
        ]
        log_action("elsewhere", actor=self.other_hr)
        for i, row in enumerate(created):
            AuditLog.objects.filter(pk=row.pk).update(
                created_at=base + timezone.timedelta(seconds=i)
            )

        self.client.force_authenticate(user=self.hr)
        res = self.client.get(reverse("api_v1:audit:recent"))
        self.assert_http_status(res, 200)
        actions = [r["action"] for r in res.data["results"]]
        assert actions == [
            "test_action_5",
            "test_action_4",
            "test_action_3",
            "test_action_2",
            "test_action_1",
        ]

    def test_action_filter_and_limit(self):
        for _ in range(3):
            log_action("payroll_upload", actor=self.hr)
        log_action("job_created", actor=self.hr)

        self.client.force_authenticate(user=self.hr)
        res = self.client.get(
            reverse("api_v1:audit:recent"), {"action": "payroll_upload", "limit": 2}
        )
        assert res.data["limit"] == 2
        assert [r["action"] for r in res.data["results"]] == ["payroll_upload"] * 2

