from datetime import date
from datetime import datetime

import pytest

from hrms.payroll.importers.spreadsheet import SheetRow
from hrms.recruitment.importers import job_header
from hrms.recruitment.importers import parse_employment_type
from hrms.recruitment.importers import parse_expiration_date
from hrms.recruitment.importers import parse_job_row


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (45657, date(2024, 12, 31)),
        (45657.75, date(2024, 12, 31)),
        ("45657", date(2024, 12, 31)),
        ("2025-06-30", date(2025, 6, 30)),
        ("2025-06-30T17:00:00", date(2025, 6, 30)),
        (datetime(2025, 6, 30, 9, 0), date(2025, 6, 30)),
        (date(2025, 6, 30), date(2025, 6, 30)),
    ],
)
def test_expiration_date_sources(value, expected):
    assert parse_expiration_date(value) == expected


@pytest.mark.parametrize("value", [None, "", "soon", "2025-02-30", 0, -3, True])
def test_unusable_expiration_dates(value):
    assert parse_expiration_date(value) is None


def test_employment_type_spellings():
    assert parse_employment_type("Full time") == "FULL_TIME"
    assert parse_employment_type("part-time") == "PART_TIME"
    assert parse_employment_type("CONTRACT") == "CONTRACT"
    assert parse_employment_type("") == "FULL_TIME"
    assert parse_employment_type("Volunteer") is None


def test_headers():
    assert job_header("Expiration Date") == "expiration_date"
    assert job_header("expirationDate") == "expiration_date"
    assert job_header("Job Title") == "title"
    assert job_header("Position") == "Position"


def test_row_problems_are_all_reported():
    row = SheetRow(row_number=3, cells={"title": "", "employment_type": "Gig"})
    assert parse_job_row(row) == [
        "Missing title",
        "Missing description",
        "Unknown employment type: Gig",
        "Invalid or missing expiration date",
    ]
