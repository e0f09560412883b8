"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.

Every method that moves ``registered_count`` or depends on it is a single
conditional write, so it stays correct when requests race on one event.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import datetime

from events.domain import (
    Capacity,
    CreateEvent,
    Event,
    EventId,
    EventStatus,
    Registration,
    RegistrationDetail,
    RegistrationId,
    RegistrationStatus,
    Schedule,
)


class TransactionalStore(ABC):
    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """Return a unit of work; writes inside it commit or roll back together."""
        ...


class EventStore(TransactionalStore):
    """Interface for event persistence operations."""

    @abstractmethod
    def add_event(
        self, command: CreateEvent, status: EventStatus, created_by_id: int
    ) -> Event:
        """Persist a new event with registered_count 0."""
        ...

    @abstractmethod
    def get_event(self, event_id: EventId, *, for_update: bool = False) -> Event | None:
        """Return an event by ID, or None if not found.

        ``for_update`` locks the row until the surrounding unit of work ends.
        """
        ...

    @abstractmethod
    def list_events(
        self,
        *,
        status: EventStatus | None = None,
        featured: bool | None = None,
        starts_after: datetime | None = None,
        newest_first: bool = False,
        limit: int | None = None,
    ) -> list[Event]:
        """Return events ordered by start date, or by created_at descending."""
        ...

    @abstractmethod
    def event_exists(self, event_id: EventId) -> bool:
        """Check if an event exists."""
        ...

    @abstractmethod
    def set_status(self, event_id: EventId, status: EventStatus) -> Event:
        ...

    @abstractmethod
    def update_details(self, event_id: EventId, changes: dict[str, object]) -> Event:
        """Overwrite descriptive fields (title, description, location, ...)."""
        ...

    @abstractmethod
    def set_schedule(self, event_id: EventId, schedule: Schedule) -> Event:
        ...

    @abstractmethod
    def set_capacity(self, event_id: EventId, capacity: Capacity) -> bool:
        """Set capacity only if registered_count <= capacity. Return success."""
        ...

    @abstractmethod
    def increment_registered(self, event_id: EventId) -> bool:
        """Add one to registered_count only if it is below capacity."""
        ...

    @abstractmethod
    def decrement_registered(self, event_id: EventId) -> bool:
        """Subtract one from registered_count only if it is above zero."""
        ...

    @abstractmethod
    def delete_if_unregistered(self, event_id: EventId) -> bool:
        """Delete the event only if registered_count is 0. Return success."""
        ...


class RegistrationStore(TransactionalStore):
    """Interface for registration persistence operations."""

    @abstractmethod
    def add_registration(
        self,
        event_id: EventId,
        user_id: int,
        status: RegistrationStatus,
        notes: str | None,
    ) -> Registration:
        """Insert a registration.

        Raises:
            DuplicateRegistrationError: If the user already holds a
                non-cancelled registration for the event.
        """
        ...

    @abstractmethod
    def get_registration(
        self, registration_id: RegistrationId, *, for_update: bool = False
    ) -> Registration | None:
        ...

    @abstractmethod
    def find_open(self, user_id: int, event_id: EventId) -> Registration | None:
        """Return the user's non-cancelled registration for the event, if any."""
        ...

    @abstractmethod
    def set_status(
        self, registration_id: RegistrationId, status: RegistrationStatus
    ) -> Registration:
        ...

    @abstractmethod
    def set_notes(self, registration_id: RegistrationId, notes: str | None) -> Registration:
        ...

    @abstractmethod
    def delete_registration(self, registration_id: RegistrationId) -> None:
        ...

    @abstractmethod
    def list_details(
        self,
        *,
        event_id: EventId | None = None,
        user_id: int | None = None,
        status: RegistrationStatus | None = None,
    ) -> list[RegistrationDetail]:
        """Return registrations joined with event and user, newest first."""
        ...

    @abstractmethod
    def get_detail(self, registration_id: RegistrationId) -> RegistrationDetail | None:
        ...

    @abstractmethod
    def exists_with_status(
        self, user_id: int, event_id: EventId, status: RegistrationStatus
    ) -> bool:
        ...

    @abstractmethod
    def count_by_status(self, event_id: EventId) -> dict[RegistrationStatus, int]:
        """Return per-status counts; statuses with no rows may be omitted."""
        ...
