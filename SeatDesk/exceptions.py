"""Domain errors raised by the seat and reservation services."""

from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INVALID = "INVALID"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    INTERNAL = "INTERNAL"


class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code = ErrorCode.INTERNAL
    default_message = "Unexpected error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class NotFoundError(DomainError):
    code = ErrorCode.NOT_FOUND
    default_message = "Resource not found"


class ConflictError(DomainError):
    code = ErrorCode.CONFLICT
    default_message = "Resource is in a conflicting state"


class InvalidError(DomainError):
    code = ErrorCode.INVALID
    default_message = "Request is not valid"


class PermissionDeniedError(DomainError):
    code = ErrorCode.PERMISSION_DENIED
    default_message = "Permission denied"


class InternalError(DomainError):
    code = ErrorCode.INTERNAL


class SeatNotFoundError(NotFoundError):
    default_message = "Seat not found"


class EventNotFoundError(NotFoundError):
    default_message = "Event not found"


class ReservationNotFoundError(NotFoundError):
    default_message = "Reservation not found"


class SeatUnavailableError(ConflictError):
    default_message = "Seat is not available"


class SeatNotHeldError(ConflictError):
    default_message = "Seat is not held for reservation"


class HoldExpiredError(ConflictError):
    default_message = "Seat hold has expired"


class SeatNotReleasableError(ConflictError):
    default_message = "Seat cannot be released"


class DuplicateReservationError(ConflictError):
    default_message = "You already have a reservation for this event"


class ReservationStateError(ConflictError):
    default_message = "Reservation cannot change from its current status"


class EventNotBookableError(InvalidError):
    default_message = "Event is not available for booking"


class EventInPastError(InvalidError):
    default_message = "Cannot reserve seats for past events"


class SeatEventMismatchError(InvalidError):
    default_message = "Seat does not belong to this event"


class CancellationWindowClosedError(InvalidError):
    default_message = "Cannot cancel reservations this close to the event"


class PaymentMethodRequiredError(InvalidError):
    default_message = "A payment method is required for paid seats"


class StaffOnlyError(PermissionDeniedError):
    default_message = "Admin or staff access required"


class HoldOwnershipError(PermissionDeniedError):
    default_message = "Seat is held by another user"


class PersistenceError(InternalError):
    default_message = "Could not save the reservation"
