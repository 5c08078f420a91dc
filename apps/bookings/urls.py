"""URL routing for the booking domain."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import BookingOptionsView, BookingPriceView, ReservationViewSet

router = DefaultRouter()
router.register(r"reservations", ReservationViewSet, basename="reservation")

urlpatterns = [
    path("options/", BookingOptionsView.as_view(), name="booking-options"),
    path("price/", BookingPriceView.as_view(), name="booking-price"),
    path("", include(router.urls)),
]
