"""Helpers shared by the event and registration services."""

from datetime import datetime, timezone

from events.domain import ActingUser, EventId, RegistrationId
from events.domain.errors import (
    InvalidEventIdError,
    InvalidRegistrationIdError,
    PermissionDeniedError,
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_event_id(event_id: str | EventId) -> EventId:
    """Accept a raw string or an EventId.

    Raises:
        InvalidEventIdError: If the value is not a valid UUID.
    """
    if isinstance(event_id, EventId):
        return event_id
    try:
        return EventId.from_string(str(event_id))
    except ValueError as exc:
        raise InvalidEventIdError() from exc


def parse_registration_id(registration_id: str | RegistrationId) -> RegistrationId:
    if isinstance(registration_id, RegistrationId):
        return registration_id
    try:
        return RegistrationId.from_string(str(registration_id))
    except ValueError as exc:
        raise InvalidRegistrationIdError() from exc


def require_admin(acting_user: ActingUser) -> None:
    if not acting_user.is_admin:
        raise PermissionDeniedError()
