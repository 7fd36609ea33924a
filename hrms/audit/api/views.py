from __future__ import annotations

from typing import TYPE_CHECKING

from drf_spectacular.utils import OpenApiParameter
from drf_spectacular.utils import extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from hrms.audit.api.serializers import AuditLogSerializer
from hrms.audit.models import AuditLog
from hrms.companies.scoping import require_company
from hrms.users.api.permissions import IsHROrAdminOnly

if TYPE_CHECKING:
    from django.db.models import QuerySet


class RecentAuditView(APIView):
    """Latest audit entries for the caller's company."""

    permission_classes = [IsAuthenticated, IsHROrAdminOnly]

    @extend_schema(
        tags=["Audit"],
        parameters=[OpenApiParameter("limit", int, required=False)],
        responses={200: AuditLogSerializer(many=True)},
    )
    def get(self, request):
        company = require_company(request)
        try:
            limit = int(request.query_params.get("limit", "5"))
        except (TypeError, ValueError):
            limit = 5
        limit = max(1, min(limit, 50))

        qs: QuerySet[AuditLog] = AuditLog.objects.select_related("actor").filter(
            company=company
        )
        action = request.query_params.get("action")
        if action:
            qs = qs.filter(action=action)
        rows = list(qs[:limit])
        data = AuditLogSerializer(rows, many=True).data
        return Response({"results": data, "limit": limit})
