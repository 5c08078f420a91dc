"""API views for property pricing configuration."""

from __future__ import annotations

import structlog
from rest_framework import permissions, status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.users.permissions import IsHost

from .models import DateOverride
from .pricing import PricingConfigurationService
from .serializers import (
    CalendarDaySerializer,
    CalendarQuerySerializer,
    DateOverrideBulkSerializer,
    DateOverrideDeleteSerializer,
    DateOverrideSerializer,
    WeeklyPricingSerializer,
)

logger = structlog.get_logger(__name__)


class PricingServiceMixin:
    """Reads are public, writes need a host; ownership is checked by the service."""

    pricing_service_class = PricingConfigurationService

    def get_permissions(self):  # type: ignore
        if self.request.method in permissions.SAFE_METHODS:
            return [permissions.AllowAny()]
        return [permissions.IsAuthenticated(), IsHost()]

    @property
    def pricing_service(self) -> PricingConfigurationService:
        return self.pricing_service_class()


class WeeklyPricingView(PricingServiceMixin, APIView):
    """Недельная сетка цен объекта."""

    def get(self, request, property_id: int):  # type: ignore
        weekly = self.pricing_service.get_weekly_pricing(property_id)
        if weekly is None:
            return Response(
                {"detail": "Цены для объекта ещё не настроены."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(WeeklyPricingSerializer(weekly).data)

    def put(self, request, property_id: int):  # type: ignore
        serializer = WeeklyPricingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        weekly = self.pricing_service.set_weekly_pricing(
            property_id, request.user, serializer.validated_data
        )
        logger.info("pricing.weekly_saved", property_id=property_id, user_id=request.user.pk)
        return Response(WeeklyPricingSerializer(weekly).data)


class DateOverrideListView(PricingServiceMixin, APIView):
    """Список и массовое сохранение цен на даты."""

    def get(self, request, property_id: int):  # type: ignore
        queryset = DateOverride.objects.filter(property_id=property_id)
        start = request.query_params.get("start")
        end = request.query_params.get("end")
        if start:
            queryset = queryset.filter(date__gte=start)
        if end:
            queryset = queryset.filter(date__lte=end)
        return Response(DateOverrideSerializer(queryset, many=True).data)

    def post(self, request, property_id: int):  # type: ignore
        serializer = DateOverrideBulkSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        saved = self.pricing_service.set_date_overrides(
            property_id, request.user, serializer.validated_data["overrides"]
        )
        logger.info(
            "pricing.overrides_saved",
            property_id=property_id,
            user_id=request.user.pk,
            count=len(saved),
        )
        return Response(DateOverrideSerializer(saved, many=True).data, status=status.HTTP_201_CREATED)


class DateOverrideBulkDeleteView(PricingServiceMixin, APIView):
    def post(self, request, property_id: int):  # type: ignore
        serializer = DateOverrideDeleteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        deleted = self.pricing_service.delete_date_overrides(
            property_id, request.user, serializer.validated_data["dates"]
        )
        return Response({"deleted": deleted})


class PricingCalendarView(PricingServiceMixin, APIView):
    """Публичный календарь цен на диапазон дат (включительно)."""

    def get(self, request, property_id: int):  # type: ignore
        query = CalendarQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        calendar = self.pricing_service.get_pricing_calendar(
            property_id, query.validated_data["start"], query.validated_data["end"]
        )
        return Response(
            {
                "property_id": property_id,
                "start": query.validated_data["start"],
                "end": query.validated_data["end"],
                "days": CalendarDaySerializer(calendar, many=True).data,
            }
        )
