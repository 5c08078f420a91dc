"""API views for the booking domain."""

from __future__ import annotations

import structlog
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from shared.application.message_bus import message_bus

from .application.command_handlers import ProcessCancellationCommand
from .application.queries import get_cancellation_history, get_cancellation_preview
from .models import Reservation
from .serializers import (
    BookingCriteriaSerializer,
    BookingOptionsSerializer,
    BookingPriceQuerySerializer,
    CancellationDetailsSerializer,
    CancellationPreviewSerializer,
    CancellationRecordSerializer,
    CancellationRequestSerializer,
    RatePlanOptionSerializer,
    ReservationSerializer,
)
from .services import BookingCalculator

logger = structlog.get_logger(__name__)


class BookingOptionsView(APIView):
    """Все варианты цены проживания, от дешёвого к дорогому."""

    permission_classes = [permissions.AllowAny]

    def get(self, request):  # type: ignore
        query = BookingCriteriaSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        options = BookingCalculator().calculate_booking_options(query.to_criteria())
        logger.info(
            "booking.options_calculated",
            property_id=options.property_id,
            nights=options.nights,
            options=len(options.options),
        )
        return Response(BookingOptionsSerializer(options).data)


class BookingPriceView(APIView):
    """Цена одного варианта: прямой тариф или выбранный тарифный план."""

    permission_classes = [permissions.AllowAny]

    def get(self, request):  # type: ignore
        query = BookingPriceQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        option = BookingCalculator().calculate_booking_price(
            query.to_criteria(), query.validated_data.get("rate_plan_id")
        )
        return Response(RatePlanOptionSerializer(option).data)


class ReservationViewSet(viewsets.ReadOnlyModelViewSet):
    """Бронирования, видимые пользователю, и их отмена."""

    serializer_class = ReservationSerializer
    queryset = Reservation.objects.select_related("property", "guest", "rate_plan").all()
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):  # type: ignore
        user = self.request.user
        qs = super().get_queryset()
        if hasattr(user, "is_manager") and user.is_manager():
            return qs
        if hasattr(user, "is_host") and user.is_host():
            return qs.filter(property__owner=user)
        return qs.filter(guest=user)

    @action(detail=True, methods=["get"], url_path="cancellation-preview")
    def cancellation_preview(self, request, pk=None):  # type: ignore
        preview = get_cancellation_preview(int(pk), request.user.pk)
        return Response(CancellationPreviewSerializer(preview).data)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):  # type: ignore
        serializer = CancellationRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = message_bus.handle_command(
            ProcessCancellationCommand(
                reservation_id=int(pk),
                user_id=request.user.pk,
                reason=serializer.validated_data["reason"],
                reason_category=serializer.validated_data["reason_category"],
            )
        )
        logger.info(
            "booking.cancelled",
            reservation_id=result.details.reservation_id,
            user_id=request.user.pk,
            refund_amount=str(result.details.refund_amount),
        )
        return Response(
            {
                "reservation": ReservationSerializer(result.reservation).data,
                "cancellation": CancellationDetailsSerializer(result.details).data,
            },
            status=status.HTTP_200_OK,
        )

    @action(detail=False, methods=["get"])
    def cancellations(self, request):  # type: ignore
        history = get_cancellation_history(request.user.pk)
        return Response(CancellationRecordSerializer(history, many=True).data)
