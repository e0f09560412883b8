"""Domain error codes for the events module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    REGISTRATION_NOT_FOUND = "REGISTRATION_NOT_FOUND"
    INVALID_EVENT_ID = "INVALID_EVENT_ID"
    INVALID_REGISTRATION_ID = "INVALID_REGISTRATION_ID"
    DATE_INVALID = "DATE_INVALID"
    INVALID_CAPACITY = "INVALID_CAPACITY"
    INVALID_PRICE = "INVALID_PRICE"
    NOT_DRAFT = "NOT_DRAFT"
    EVENT_STARTED = "EVENT_STARTED"
    EVENT_NOT_STARTED = "EVENT_NOT_STARTED"
    ALREADY_CANCELLED = "ALREADY_CANCELLED"
    ALREADY_COMPLETED = "ALREADY_COMPLETED"
    CAPACITY_TOO_LOW = "CAPACITY_TOO_LOW"
    HAS_REGISTRATIONS = "HAS_REGISTRATIONS"
    EVENT_NOT_PUBLISHED = "EVENT_NOT_PUBLISHED"
    EVENT_FULL = "EVENT_FULL"
    EVENT_PAST = "EVENT_PAST"
    DUPLICATE_REGISTRATION = "DUPLICATE_REGISTRATION"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    NOT_OWNER = "NOT_OWNER"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self) -> None:
        super().__init__(code=ErrorCode.EVENT_NOT_FOUND, message="Event not found")


class RegistrationNotFoundError(DomainError):
    """Raised when a registration is not found."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.REGISTRATION_NOT_FOUND,
            message="Registration not found",
        )


class InvalidEventIdError(DomainError):
    """Raised when an event ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EVENT_ID,
            message="Invalid event ID format",
        )


class InvalidRegistrationIdError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_REGISTRATION_ID,
            message="Invalid registration ID format",
        )


class DateInvalidError(DomainError):
    """Raised when an event's start/end pair breaks a scheduling rule."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.DATE_INVALID, message=message)


class InvalidCapacityError(DomainError):
    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_CAPACITY, message=message)


class InvalidPriceError(DomainError):
    def __init__(self) -> None:
        super().__init__(code=ErrorCode.INVALID_PRICE, message="Price cannot be negative")


class NotDraftError(DomainError):
    """Raised when publishing an event that is not a draft."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.NOT_DRAFT,
            message="Only draft events can be published",
        )


class EventStartedError(DomainError):
    """Raised when publishing an event whose start date has passed."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.EVENT_STARTED,
            message="Cannot publish an event that has already started",
        )


class EventNotStartedError(DomainError):
    """Raised when attendance is recorded before the event starts."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_STARTED,
            message="Attendance can only be recorded once the event has started",
        )


class AlreadyCancelledError(DomainError):
    """Raised when cancelling an event or registration twice."""

    def __init__(self, message: str = "Event is already cancelled") -> None:
        super().__init__(code=ErrorCode.ALREADY_CANCELLED, message=message)


class AlreadyCompletedError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.ALREADY_COMPLETED,
            message="Cannot cancel a completed event",
        )


class CapacityTooLowError(DomainError):
    """Raised when a new capacity is below the number of registered attendees."""

    def __init__(self, registered_count: int) -> None:
        super().__init__(
            code=ErrorCode.CAPACITY_TOO_LOW,
            message=(
                "Capacity cannot be less than the number of registered "
                f"attendees ({registered_count})"
            ),
        )


class HasRegistrationsError(DomainError):
    """Raised when deleting an event that still holds registrations."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.HAS_REGISTRATIONS,
            message=(
                "Cannot delete event with existing registrations. "
                "Cancel the event instead."
            ),
        )


class EventNotPublishedError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_PUBLISHED,
            message="Cannot register for an unpublished event",
        )


class EventFullError(DomainError):
    """Raised when an event has no spots left."""

    def __init__(self) -> None:
        super().__init__(code=ErrorCode.EVENT_FULL, message="Event is at full capacity")


class CapacityExceededError(EventFullError):
    """Raised by the ledger when the atomic reservation finds no free spot."""


class EventPastError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.EVENT_PAST,
            message="Cannot register for a past event",
        )


class DuplicateRegistrationError(DomainError):
    """Raised when the user already holds a registration for the event."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.DUPLICATE_REGISTRATION,
            message="You are already registered for this event",
        )


class InvalidTransitionError(DomainError):
    """Raised when a registration cannot move to the requested status."""

    def __init__(self, current: str, target: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_TRANSITION,
            message=f"Cannot move a {current} registration to {target}",
        )


class PermissionDeniedError(DomainError):
    def __init__(
        self, message: str = "You do not have permission to perform this action"
    ) -> None:
        super().__init__(code=ErrorCode.PERMISSION_DENIED, message=message)


class NotOwnerError(DomainError):
    """Raised when a user acts on someone else's registration."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.NOT_OWNER,
            message="You can only manage your own registrations",
        )


class LedgerInvariantViolation(Exception):
    """Raised in strict mode when a release would push a count below zero.

    Internal only: never mapped to an HTTP response.
    """

    def __init__(self, event_id: str) -> None:
        super().__init__(f"registered_count for event {event_id} is already 0")
        self.event_id = event_id
