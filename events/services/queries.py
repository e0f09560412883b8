"""Read-only projections over events and registrations.

Nothing here writes. Joins needed for display (event title, username) are
done by the store's detail queries, never by the write paths.
"""

from collections.abc import Callable
from datetime import datetime

from events.domain import (
    ActingUser,
    Event,
    EventId,
    EventStats,
    EventStatus,
    RegistrationDetail,
    RegistrationId,
    RegistrationStatus,
)
from events.domain.errors import (
    EventNotFoundError,
    NotOwnerError,
    RegistrationNotFoundError,
)
from events.services.common import (
    parse_event_id,
    parse_registration_id,
    require_admin,
    utcnow,
)
from events.stores.interfaces import EventStore, RegistrationStore

DEFAULT_UPCOMING_LIMIT = 10
DEFAULT_FEATURED_LIMIT = 5


class EventQueryService:
    """Public catalog and admin listings."""

    def __init__(
        self,
        store: EventStore,
        *,
        featured_limit: int = DEFAULT_FEATURED_LIMIT,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self._featured_limit = featured_limit
        self._clock = clock

    def list_published(self, status: EventStatus | None = None) -> list[Event]:
        """Return published events by start date.

        The public catalog never shows other statuses, so filtering on any
        status other than published yields nothing.
        """
        if status is not None and status is not EventStatus.PUBLISHED:
            return []
        return self._store.list_events(status=EventStatus.PUBLISHED)

    def list_upcoming(self, limit: int = DEFAULT_UPCOMING_LIMIT) -> list[Event]:
        return self._store.list_events(
            status=EventStatus.PUBLISHED, starts_after=self._clock(), limit=limit
        )

    def list_featured(self) -> list[Event]:
        return self._store.list_events(
            status=EventStatus.PUBLISHED, featured=True, limit=self._featured_limit
        )

    def get_public(self, event_id: str | EventId) -> Event:
        """Return a published event; anything else is reported as not found."""
        event = self._get(event_id)
        if event.status is not EventStatus.PUBLISHED:
            raise EventNotFoundError()
        return event

    def list_for_admin(self, acting_user: ActingUser) -> list[Event]:
        require_admin(acting_user)
        return self._store.list_events(newest_first=True)

    def get_for_admin(self, acting_user: ActingUser, event_id: str | EventId) -> Event:
        require_admin(acting_user)
        return self._get(event_id)

    def _get(self, event_id: str | EventId) -> Event:
        event = self._store.get_event(parse_event_id(event_id))
        if event is None:
            raise EventNotFoundError()
        return event


class RegistrationQueryService:
    """Registration listings, lookups and per-event statistics."""

    def __init__(self, events: EventStore, registrations: RegistrationStore) -> None:
        self._events = events
        self._registrations = registrations

    def list_all(self, acting_user: ActingUser) -> list[RegistrationDetail]:
        require_admin(acting_user)
        return self._registrations.list_details()

    def list_by_event(
        self, acting_user: ActingUser, event_id: str | EventId
    ) -> list[RegistrationDetail]:
        require_admin(acting_user)
        return self._registrations.list_details(event_id=self._existing_event(event_id))

    def list_mine(self, acting_user: ActingUser) -> list[RegistrationDetail]:
        return self._registrations.list_details(user_id=acting_user.id)

    def list_pending(
        self, acting_user: ActingUser, event_id: str | EventId | None = None
    ) -> list[RegistrationDetail]:
        """Admin approval queue, optionally for one event."""
        require_admin(acting_user)
        parsed_id = self._existing_event(event_id) if event_id is not None else None
        return self._registrations.list_details(
            event_id=parsed_id, status=RegistrationStatus.PENDING
        )

    def get(
        self, acting_user: ActingUser, registration_id: str | RegistrationId
    ) -> RegistrationDetail:
        """Return one registration to an admin or to its owner."""
        detail = self._registrations.get_detail(parse_registration_id(registration_id))
        if detail is None:
            raise RegistrationNotFoundError()
        if not acting_user.is_admin and detail.registration.user_id != acting_user.id:
            raise NotOwnerError()
        return detail

    def is_registered(self, acting_user: ActingUser, event_id: str | EventId) -> bool:
        """True iff the user holds a confirmed registration for the event."""
        return self._registrations.exists_with_status(
            acting_user.id, parse_event_id(event_id), RegistrationStatus.CONFIRMED
        )

    def event_stats(self, acting_user: ActingUser, event_id: str | EventId) -> EventStats:
        require_admin(acting_user)
        counts = self._registrations.count_by_status(self._existing_event(event_id))
        return EventStats(
            total=sum(counts.values()),
            pending=counts.get(RegistrationStatus.PENDING, 0),
            confirmed=counts.get(RegistrationStatus.CONFIRMED, 0),
            cancelled=counts.get(RegistrationStatus.CANCELLED, 0),
            attended=counts.get(RegistrationStatus.ATTENDED, 0),
        )

    def _existing_event(self, event_id: str | EventId) -> EventId:
        parsed_id = parse_event_id(event_id)
        if not self._events.event_exists(parsed_id):
            raise EventNotFoundError()
        return parsed_id
