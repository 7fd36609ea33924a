"""Resolve the tenant (company) a request acts for."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rest_framework.exceptions import PermissionDenied

if TYPE_CHECKING:
    from hrms.companies.models import Company


def require_company(request) -> Company:
    """Return the caller's company or refuse the request.

    A missing tenant context is an authorization problem, never something
    to paper over with a default company.
    """
    user = getattr(request, "user", None)
    company = getattr(user, "company", None)
    if company is None:
        msg = "Company context missing for this user"
        raise PermissionDenied(msg)
    return company
