"""
Domain Exceptions

Every failure the engine reports to callers derives from DomainError.
Each family carries a stable ``code`` and the HTTP status the API layer
answers with, so services can raise without knowing about transport.
"""


class DomainError(Exception):
    """Base class for all domain failures"""

    code = 'domain_error'
    status_code = 400
    default_message = 'Domain rule violated'

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


# ===== Families =====

class NotFoundError(DomainError):
    code = 'not_found'
    status_code = 404
    default_message = 'Resource not found'


class PermissionDeniedError(DomainError):
    code = 'permission_denied'
    status_code = 403
    default_message = 'You do not have permission to perform this action'


class InvalidStateError(DomainError):
    code = 'invalid_state'
    status_code = 409
    default_message = 'Operation is not allowed in the current state'


class DomainValidationError(DomainError):
    code = 'validation_error'
    status_code = 400
    default_message = 'Invalid input'


class RatePlanUnavailableError(DomainError):
    """Requested rate plan exists but cannot be used for this stay"""

    code = 'rate_plan_unavailable'
    status_code = 422
    default_message = 'Selected rate plan not available for this booking'

    def __init__(self, message: str | None = None, reasons: list[str] | None = None):
        super().__init__(message)
        self.reasons = list(reasons or [])


# ===== Not found =====

class PropertyNotFoundError(NotFoundError):
    default_message = 'Property not found'


class ReservationNotFoundError(NotFoundError):
    default_message = 'Reservation not found'


class RatePlanNotFoundError(NotFoundError):
    default_message = 'Rate plan not found'


class UserNotFoundError(NotFoundError):
    default_message = 'User not found'


# ===== Invalid state =====

class PropertyNotBookableError(InvalidStateError):
    default_message = 'Property is not available for booking'


class AlreadyCancelledError(InvalidStateError):
    default_message = 'Reservation is already cancelled'


class CannotCancelNoShowError(InvalidStateError):
    default_message = 'Cannot cancel a no-show reservation'


class PastCheckInError(InvalidStateError):
    default_message = 'Cannot cancel a reservation after check-in date'


class ImmutableAuditEntryError(InvalidStateError):
    default_message = 'Audit log entries cannot be modified or deleted'


# ===== Validation =====

class InvalidDateRangeError(DomainValidationError):
    default_message = 'Check-out date must be after check-in date'


class PricingNotConfiguredError(DomainValidationError):
    default_message = 'No base pricing configured for this property'
