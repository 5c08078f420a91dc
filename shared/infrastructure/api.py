"""DRF integration for domain exceptions."""

from __future__ import annotations

import structlog
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler  # type: ignore

from shared.domain.exceptions import DomainError, RatePlanUnavailableError

logger = structlog.get_logger(__name__)


def domain_exception_handler(exc, context):
    """Translate DomainError subclasses into ``{"detail", "code"}`` responses.

    Anything else is left to DRF's default handler.
    """

    if not isinstance(exc, DomainError):
        return exception_handler(exc, context)

    view = context.get("view")
    logger.info(
        "api.domain_error",
        view=view.__class__.__name__ if view else None,
        error=exc.__class__.__name__,
        code=exc.code,
        detail=exc.message,
    )
    payload = {"detail": exc.message, "code": exc.code}
    if isinstance(exc, RatePlanUnavailableError) and exc.reasons:
        payload["reasons"] = exc.reasons
    return Response(payload, status=exc.status_code)
