"""API views for rate plans nested under a property."""

from __future__ import annotations

import structlog
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.permissions import IsHost

from . import services
from .serializers import RatePlanSerializer

logger = structlog.get_logger(__name__)


class RatePlanViewSet(viewsets.ViewSet):
    """Тарифы объекта: чтение для всех, изменение только владельцу."""

    property_lookup_url_kwarg = "property_id"

    def get_permissions(self):  # type: ignore
        if self.action in {"list", "retrieve"}:
            return [permissions.AllowAny()]
        return [permissions.IsAuthenticated(), IsHost()]

    def _property_id(self) -> int:
        return self.kwargs[self.property_lookup_url_kwarg]

    def list(self, request, property_id=None):  # type: ignore
        queryset = services.list_rate_plans(self._property_id(), request.user)
        return Response(RatePlanSerializer(queryset, many=True).data)

    def retrieve(self, request, property_id=None, pk=None):  # type: ignore
        rate_plan = services.list_rate_plans(self._property_id(), request.user).filter(pk=pk).first()
        if rate_plan is None:
            return Response({"detail": "Тариф не найден."}, status=status.HTTP_404_NOT_FOUND)
        return Response(RatePlanSerializer(rate_plan).data)

    def create(self, request, property_id=None):  # type: ignore
        serializer = RatePlanSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        policy = data.pop("cancellation_policy", None)
        rate_plan = services.create_rate_plan(self._property_id(), request.user, data, policy)
        logger.info("rate_plan.created", rate_plan_id=rate_plan.pk, property_id=self._property_id())
        return Response(RatePlanSerializer(rate_plan).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, property_id=None, pk=None):  # type: ignore
        current = services.list_rate_plans(self._property_id(), request.user).filter(pk=pk).first()
        serializer = RatePlanSerializer(current, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        policy = data.pop("cancellation_policy", None)
        rate_plan = services.update_rate_plan(self._property_id(), pk, request.user, data, policy)
        return Response(RatePlanSerializer(rate_plan).data)

    def destroy(self, request, property_id=None, pk=None):  # type: ignore
        deleted = services.delete_rate_plan(self._property_id(), pk, request.user)
        if deleted:
            return Response(status=status.HTTP_204_NO_CONTENT)
        return Response(
            {"detail": "Тариф используется в бронированиях и был деактивирован.", "is_active": False},
            status=status.HTTP_200_OK,
        )
