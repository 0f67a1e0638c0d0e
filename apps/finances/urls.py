"""URL routing for host earnings."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import SimpleRouter  # type: ignore

from .views import EarningViewSet

router = SimpleRouter()
router.register(r"earnings", EarningViewSet, basename="earning")

urlpatterns = [
    path("", include(router.urls)),
]
