"""URL routing for rate plans (mounted under a property)."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import SimpleRouter  # type: ignore

from .views import RatePlanViewSet

router = SimpleRouter()
router.register(r"", RatePlanViewSet, basename="rate-plan")

urlpatterns = [
    path("", include(router.urls)),
]
