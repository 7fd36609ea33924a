from django.urls import path
from rest_framework.routers import SimpleRouter

from .views import StaffUploadView
from .views import StaffUploadViewSet

router = SimpleRouter()
router.register("uploads", StaffUploadViewSet, basename="staff-upload")

urlpatterns = [
    path("upload/", StaffUploadView.as_view(), name="staff-upload"),
    *router.urls,
]
