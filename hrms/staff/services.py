"""Staff lookups used by payroll uploads.

Matching strategy, always within a single company:

1. exact email match (case-insensitive), active or not;
2. otherwise the sheet name is split into its first token and the remaining
   tokens, and active staff are matched when both parts are contained in
   (first_name, last_name) or in (last_name, first_name), ignoring case. This
   tolerates sheets written "Last First".

An active staff member whose full name equals the sheet name (either order)
wins outright when there is exactly one. Otherwise several name candidates
are reported as ambiguous, with their full count, instead of picking one
arbitrarily.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from django.db.models import Q
from django.db.models import Value
from django.db.models.functions import Concat
from django.db.models.functions import Lower

from hrms.staff.models import StaffRecord

if TYPE_CHECKING:
    from hrms.companies.models import Company


class StaffLookupError(Exception):
    """Raised when a payroll row cannot be tied to exactly one staff record."""


class StaffNotFound(StaffLookupError):
    pass


class AmbiguousStaffMatch(StaffLookupError):
    pass


def _normalize_name(value: str) -> str:
    return re.sub(r"\s+", " ", value or "").strip().lower()


def split_name(name: str) -> tuple[str, str]:
    """Split "First Middle Last" into ("First", "Middle Last").

    A single-word name is used for both halves.
    """
    parts = (name or "").split()
    if not parts:
        return "", ""
    first = parts[0]
    rest = " ".join(parts[1:]) or first
    return first, rest


def find_staff_by_email(company: Company, email: str) -> StaffRecord | None:
    email = (email or "").strip()
    if not email:
        return None
    return StaffRecord.objects.filter(company=company, email__iexact=email).first()


def find_staff_by_name(company: Company, name: str) -> StaffRecord | None:
    first, rest = split_name(name)
    if not first:
        return None

    active = StaffRecord.objects.filter(company=company, is_active=True)

    wanted = _normalize_name(name)
    exact = active.annotate(
        forward=Lower(Concat("first_name", Value(" "), "last_name")),
        backward=Lower(Concat("last_name", Value(" "), "first_name")),
    ).filter(Q(forward=wanted) | Q(backward=wanted))
    exact_count = exact.count()
    if exact_count == 1:
        return exact.get()

    candidates = active.filter(
        Q(first_name__icontains=first, last_name__icontains=rest)
        | Q(last_name__icontains=first, first_name__icontains=rest)
    )
    total = candidates.count()
    if exact_count == 0 and total <= 1:
        return candidates.first()

    msg = (
        f"Name '{name}' matches {max(total, exact_count)} staff records. "
        "Add the EMAIL column to identify the staff member."
    )
    raise AmbiguousStaffMatch(msg)


def resolve_staff(company: Company, *, email: str = "", name: str = "") -> StaffRecord:
    """Return the single staff record a payroll row refers to.

    Raises StaffNotFound when nothing matches; staff are never created here.
    """
    staff = find_staff_by_email(company, email)
    if staff is None and name:
        staff = find_staff_by_name(company, name)
    if staff is None:
        msg = (
            f"Staff record not found for {name or email}. "
            "Staff must be pre-registered."
        )
        raise StaffNotFound(msg)
    return staff


def staff_record_for_user(user) -> StaffRecord | None:
    """The staff record of a signed-in user: same company, same email."""
    company_id = getattr(user, "company_id", None)
    email = (getattr(user, "email", "") or "").strip()
    if not company_id or not email:
        return None
    return StaffRecord.objects.filter(
        company_id=company_id, email__iexact=email
    ).first()
