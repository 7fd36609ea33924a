from django.urls import path
from rest_framework.routers import SimpleRouter

from .views import MyPayslipsView
from .views import PayrollUploadView
from .views import PayrollUploadViewSet
from .views import PayslipViewSet

router = SimpleRouter()
router.register("uploads", PayrollUploadViewSet, basename="payroll-upload")
router.register("payslips", PayslipViewSet, basename="payslip")

urlpatterns = [
    path("upload/", PayrollUploadView.as_view(), name="payroll-upload"),
    path("my-payslips/", MyPayslipsView.as_view(), name="my-payslips"),
    *router.urls,
]
