import importlib
import os
import sys
from pathlib import Path
from unittest import mock

import pytest
from django.core.handlers.wsgi import WSGIHandler
from django.urls import Resolver404
from django.urls import resolve
from django.urls import reverse

pytestmark = pytest.mark.django_db


def test_health_ok(client):
    res = client.get(reverse("health"))
    assert res.status_code == 200
    assert res.json() == {
        "status": "ok",
        "components": {"db": {"ok": True}, "storage": {"ok": True}},
    }


def test_health_degraded_when_storage_fails(client):
    with mock.patch(
        "django.core.files.storage.FileSystemStorage.exists",
        side_effect=OSError("disk gone"),
    ):
        res = client.get(reverse("health"))
    assert res.status_code == 503
    body = res.json()
    assert body["status"] == "degraded"
    assert body["components"]["storage"] == {"ok": False, "error": "disk gone"}


def test_schema_groups_operations_by_feature(admin_client):
    res = admin_client.get(reverse("api-schema-v1"), {"format": "json"})
    assert res.status_code == 200
    schema = res.json()
    upload = schema["paths"]["/api/v1/payroll/upload/"]["post"]
    assert upload["tags"] == ["Payroll • Uploads"]
    ranking_path = next(path for path in schema["paths"] if path.endswith("/ranking/"))
    ranking = schema["paths"][ranking_path]["get"]
    assert ranking["tags"] == ["Recruitment"]
    staff_upload = schema["paths"]["/api/v1/staff/upload/"]["post"]
    assert staff_upload["tags"] == ["Staff"]


def test_media_files_are_not_routed(client, media_root):
    payslip = Path(media_root) / "payslips" / "payslip.pdf"
    payslip.parent.mkdir(parents=True)
    payslip.write_bytes(b"%PDF-1.4")

    with pytest.raises(Resolver404):
        resolve("/media/payslips/payslip.pdf")
    assert client.get("/media/payslips/payslip.pdf").status_code == 404


def test_wsgi_application_keeps_the_active_settings(settings):
    wsgi = importlib.import_module("config.wsgi")
    assert isinstance(wsgi.application, WSGIHandler)
    assert os.environ["DJANGO_SETTINGS_MODULE"] == settings.SETTINGS_MODULE
    apps_dir = Path(wsgi.__file__).resolve().parent.parent / "hrms"
    assert str(apps_dir) not in sys.path
