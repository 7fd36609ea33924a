from django.urls import include
from django.urls import path

app_name = "api"

urlpatterns = [
    path(
        "audit/",
        include(("hrms.audit.api.urls", "audit"), namespace="audit"),
    ),
    path("payroll/", include("hrms.payroll.api.urls")),
    path("recruitment/", include("hrms.recruitment.api.urls")),
    path("staff/", include("hrms.staff.api.urls")),
]
