import pytest

from hrms.companies.tests.factories import CompanyFactory
from hrms.staff.services import AmbiguousStaffMatch
from hrms.staff.services import StaffNotFound
from hrms.staff.services import resolve_staff
from hrms.staff.services import split_name
from hrms.staff.tests.factories import StaffRecordFactory

pytestmark = pytest.mark.django_db


def test_split_name():
    assert split_name("Ada Grace Obi") == ("Ada", "Grace Obi")
    assert split_name("  Ada  ") == ("Ada", "Ada")
    assert split_name("") == ("", "")


def test_resolves_by_email_case_insensitively():
    staff = StaffRecordFactory(email="ada.obi@example.com")
    found = resolve_staff(staff.company, email="ADA.Obi@Example.com", name="")
    assert found == staff


def test_email_match_wins_over_name():
    company = CompanyFactory()
    by_email = StaffRecordFactory(company=company, email="one@example.com")
    StaffRecordFactory(company=company, first_name="Chidi", last_name="Eze")
    found = resolve_staff(company, email="one@example.com", name="Chidi Eze")
    assert found == by_email


def test_falls_back_to_name_when_email_unknown():
    staff = StaffRecordFactory(first_name="Chidi", last_name="Eze")
    found = resolve_staff(staff.company, email="nobody@example.com", name="Chidi Eze")
    assert found == staff


def test_name_in_last_first_order_matches():
    staff = StaffRecordFactory(first_name="Chidi", last_name="Eze")
    assert resolve_staff(staff.company, name="eze chidi") == staff


def test_inactive_staff_are_not_matched_by_name():
    staff = StaffRecordFactory(first_name="Chidi", last_name="Eze", is_active=False)
    with pytest.raises(StaffNotFound, match="must be pre-registered"):
        resolve_staff(staff.company, name="Chidi Eze")


def test_staff_of_another_company_is_never_matched():
    staff = StaffRecordFactory(first_name="Chidi", last_name="Eze")
    other_company = CompanyFactory()
    with pytest.raises(StaffNotFound):
        resolve_staff(other_company, email=staff.email, name="Chidi Eze")


def test_exact_full_name_breaks_ties():
    company = CompanyFactory()
    exact = StaffRecordFactory(company=company, first_name="Ada", last_name="Obi")
    StaffRecordFactory(company=company, first_name="Adaeze", last_name="Obiora")
    assert resolve_staff(company, name="Ada Obi") == exact


def test_ambiguous_partial_name_is_rejected():
    company = CompanyFactory()
    StaffRecordFactory(company=company, first_name="Adaeze", last_name="Obi")
    StaffRecordFactory(company=company, first_name="Adanna", last_name="Obi")
    with pytest.raises(AmbiguousStaffMatch, match="matches 2 staff records"):
        resolve_staff(company, name="Ada Obi")


def test_exact_full_name_wins_among_many_partial_matches():
    company = CompanyFactory()
    for index in range(10):
        StaffRecordFactory(
            company=company, first_name=f"Adaeze{index}", last_name=f"Obiora{index}"
        )
    exact = StaffRecordFactory(company=company, first_name="Ada", last_name="Obi")
    assert resolve_staff(company, name="Ada Obi") == exact
    assert resolve_staff(company, name="obi  ada") == exact


def test_ambiguous_message_reports_every_candidate():
    company = CompanyFactory()
    for index in range(12):
        StaffRecordFactory(
            company=company, first_name=f"Adaeze{index}", last_name=f"Obiora{index}"
        )
    with pytest.raises(AmbiguousStaffMatch, match="matches 12 staff records"):
        resolve_staff(company, name="Ada Obi")


def test_namesakes_are_ambiguous():
    company = CompanyFactory()
    StaffRecordFactory(company=company, first_name="Ada", last_name="Obi")
    StaffRecordFactory(company=company, first_name="Ada", last_name="Obi")
    with pytest.raises(AmbiguousStaffMatch, match="matches 2 staff records"):
        resolve_staff(company, name="Ada Obi")
