"""Role-based permission classes shared by the HRMS APIs."""

from collections.abc import Iterable

from rest_framework.permissions import SAFE_METHODS
from rest_framework.permissions import BasePermission

ROLE_SUPER_ADMIN = "Super Admin"
ROLE_HR = "HR"
ROLE_STAFF = "Staff"
RBAC_GROUPS = (ROLE_SUPER_ADMIN, ROLE_HR, ROLE_STAFF)


def user_in_groups(user, names: Iterable[str]) -> bool:
    groups = getattr(user, "groups", None)
    names_list = list(names)
    if not groups or not names_list:
        return False
    return groups.filter(name__in=names_list).exists()


def is_hr_or_admin(user) -> bool:
    """True for staff users and members of the HR or Super Admin groups."""
    if not (user and getattr(user, "is_authenticated", False)):
        return False
    return bool(getattr(user, "is_staff", False)) or user_in_groups(
        user, [ROLE_HR, ROLE_SUPER_ADMIN]
    )


class _RolePermission(BasePermission):
    """Base helper to gate access by role names."""

    allowed_roles: tuple[str, ...] = ()
    allow_staff: bool = True

    def has_permission(self, request, view) -> bool:
        user = getattr(request, "user", None)
        if not (user and getattr(user, "is_authenticated", False)):
            return False
        if self.allow_staff and getattr(user, "is_staff", False):
            return True
        return user_in_groups(user, self.allowed_roles)


class IsHROrAdminOnly(_RolePermission):
    """Allow access only to HR/Super Admin users (with staff overrides)."""

    allowed_roles = (ROLE_HR, ROLE_SUPER_ADMIN)


class IsHROrAdminCanWrite(BasePermission):
    """Reads for any authenticated user; writes for HR/Super Admin only."""

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return bool(getattr(request.user, "is_authenticated", False))
        return is_hr_or_admin(request.user)
