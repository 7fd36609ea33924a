"""Custom OpenAPI schema hooks for drf-spectacular.

This module adds human-friendly tag grouping so that all endpoints
appear under feature-specific sections instead of a single generic tag.
"""

from __future__ import annotations

from typing import Any

# Method names that contain operations in the OpenAPI path item
_HTTP_METHODS = {"get", "post", "put", "patch", "delete", "options", "head"}


PATTERN_TAGS = [
    ("/api/v1/payroll/upload", "Payroll • Uploads"),
    ("/api/v1/payroll/payslips", "Payroll • Payslips"),
    ("/api/v1/payroll/my-payslips", "Payroll • Payslips"),
    ("/api/v1/staff", "Staff"),
    ("/api/v1/recruitment/jobs", "Recruitment"),
    ("/api/v1/audit", "Audit"),
    ("/api/v1/schema", "Meta"),
]

ALL_TAGS = list(dict.fromkeys(t for _, t in PATTERN_TAGS))


def assign_group_tag(path: str) -> str | None:
    """Return the first matching tag name for a given path."""
    for prefix, tag in PATTERN_TAGS:
        if path.startswith(prefix):
            return tag
    return None


def group_tags(result: dict[str, Any], **kwargs: Any) -> dict[str, Any]:
    """Give every operation under a known prefix exactly one feature tag.

    Paths that match no prefix keep the tags declared on their views. The
    top-level ``tags`` list is extended so Swagger UI shows every feature
    group in ``PATTERN_TAGS`` order.
    """
    for path, path_item in result.get("paths", {}).items():
        tag = assign_group_tag(path)
        if tag is None:
            continue
        operations = (
            operation
            for method, operation in path_item.items()
            if method.lower() in _HTTP_METHODS and isinstance(operation, dict)
        )
        for operation in operations:
            operation["tags"] = [tag]

    declared = result.setdefault("tags", [])
    known = {entry.get("name") for entry in declared}
    declared.extend({"name": tag} for tag in ALL_TAGS if tag not in known)
    return result
