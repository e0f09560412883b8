"""In-process implementation of the stores.

Both stores share one ``InMemoryDatabase``. A unit of work holds the
database lock for its whole duration and restores a snapshot if it fails,
which gives the same all-or-nothing behaviour as a database transaction.
"""

import threading
import uuid
from collections import Counter
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from dataclasses import replace
from datetime import datetime, timezone

from events.domain import (
    Capacity,
    CreateEvent,
    Event,
    EventId,
    EventStatus,
    Money,
    Registration,
    RegistrationDetail,
    RegistrationId,
    RegistrationStatus,
    Schedule,
)
from events.domain.errors import DuplicateRegistrationError
from events.stores.interfaces import EventStore, RegistrationStore


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryDatabase:
    def __init__(self, usernames: dict[int, str] | None = None) -> None:
        self.events: dict[EventId, Event] = {}
        self.registrations: dict[RegistrationId, Registration] = {}
        self.usernames = usernames or {}
        self.lock = threading.RLock()
        self._depth = 0

    @contextmanager
    def atomic(self) -> Iterator[None]:
        with self.lock:
            outermost = self._depth == 0
            if outermost:
                snapshot = (dict(self.events), dict(self.registrations))
            self._depth += 1
            try:
                yield
            except BaseException:
                if outermost:
                    self.events, self.registrations = snapshot
                raise
            finally:
                self._depth -= 1

    def username(self, user_id: int) -> str:
        return self.usernames.get(user_id, f"user-{user_id}")


class InMemoryEventStore(EventStore):
    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    def atomic(self) -> AbstractContextManager[None]:
        return self._db.atomic()

    def add_event(
        self, command: CreateEvent, status: EventStatus, created_by_id: int
    ) -> Event:
        now = _now()
        event = Event(
            id=EventId(uuid.uuid4()),
            title=command.title,
            description=command.description,
            location=command.location,
            schedule=Schedule(start=command.start_date, end=command.end_date),
            capacity=Capacity(command.capacity),
            registered_count=0,
            status=status,
            price=Money(command.price),
            is_featured=command.is_featured,
            image_url=command.image_url,
            created_by_id=created_by_id,
            created_at=now,
            updated_at=now,
        )
        with self._db.lock:
            self._db.events[event.id] = event
        return event

    def get_event(self, event_id: EventId, *, for_update: bool = False) -> Event | None:
        return self._db.events.get(event_id)

    def list_events(
        self,
        *,
        status: EventStatus | None = None,
        featured: bool | None = None,
        starts_after: datetime | None = None,
        newest_first: bool = False,
        limit: int | None = None,
    ) -> list[Event]:
        events = [
            event
            for event in list(self._db.events.values())
            if (status is None or event.status is status)
            and (featured is None or event.is_featured == featured)
            and (starts_after is None or event.start_date > starts_after)
        ]
        if newest_first:
            events.sort(key=lambda event: event.created_at, reverse=True)
        else:
            events.sort(key=lambda event: event.start_date)
        return events[:limit] if limit is not None else events

    def event_exists(self, event_id: EventId) -> bool:
        return event_id in self._db.events

    def set_status(self, event_id: EventId, status: EventStatus) -> Event:
        return self._replace(event_id, status=status)

    def update_details(self, event_id: EventId, changes: dict[str, object]) -> Event:
        if "price" in changes:
            changes = {**changes, "price": Money(changes["price"])}
        return self._replace(event_id, **changes)

    def set_schedule(self, event_id: EventId, schedule: Schedule) -> Event:
        return self._replace(event_id, schedule=schedule)

    def set_capacity(self, event_id: EventId, capacity: Capacity) -> bool:
        with self._db.lock:
            event = self._db.events.get(event_id)
            if event is None or event.registered_count > capacity.value:
                return False
            self._replace(event_id, capacity=capacity)
            return True

    def increment_registered(self, event_id: EventId) -> bool:
        with self._db.lock:
            event = self._db.events.get(event_id)
            if event is None or event.is_full:
                return False
            self._db.events[event_id] = replace(
                event, registered_count=event.registered_count + 1
            )
            return True

    def decrement_registered(self, event_id: EventId) -> bool:
        with self._db.lock:
            event = self._db.events.get(event_id)
            if event is None or event.registered_count == 0:
                return False
            self._db.events[event_id] = replace(
                event, registered_count=event.registered_count - 1
            )
            return True

    def delete_if_unregistered(self, event_id: EventId) -> bool:
        with self._db.lock:
            event = self._db.events.get(event_id)
            if event is None or event.registered_count != 0:
                return False
            del self._db.events[event_id]
            self._db.registrations = {
                key: registration
                for key, registration in self._db.registrations.items()
                if registration.event_id != event_id
            }
            return True

    def _replace(self, event_id: EventId, **fields: object) -> Event:
        with self._db.lock:
            event = replace(self._db.events[event_id], updated_at=_now(), **fields)
            self._db.events[event_id] = event
            return event


class InMemoryRegistrationStore(RegistrationStore):
    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    def atomic(self) -> AbstractContextManager[None]:
        return self._db.atomic()

    def add_registration(
        self,
        event_id: EventId,
        user_id: int,
        status: RegistrationStatus,
        notes: str | None,
    ) -> Registration:
        with self._db.lock:
            if self.find_open(user_id, event_id) is not None:
                raise DuplicateRegistrationError()
            now = _now()
            registration = Registration(
                id=RegistrationId(uuid.uuid4()),
                event_id=event_id,
                user_id=user_id,
                status=status,
                notes=notes,
                registered_at=now,
                updated_at=now,
            )
            self._db.registrations[registration.id] = registration
            return registration

    def get_registration(
        self, registration_id: RegistrationId, *, for_update: bool = False
    ) -> Registration | None:
        return self._db.registrations.get(registration_id)

    def find_open(self, user_id: int, event_id: EventId) -> Registration | None:
        for registration in list(self._db.registrations.values()):
            if (
                registration.user_id == user_id
                and registration.event_id == event_id
                and registration.status is not RegistrationStatus.CANCELLED
            ):
                return registration
        return None

    def set_status(
        self, registration_id: RegistrationId, status: RegistrationStatus
    ) -> Registration:
        return self._replace(registration_id, status=status)

    def set_notes(self, registration_id: RegistrationId, notes: str | None) -> Registration:
        return self._replace(registration_id, notes=notes)

    def delete_registration(self, registration_id: RegistrationId) -> None:
        with self._db.lock:
            self._db.registrations.pop(registration_id, None)

    def list_details(
        self,
        *,
        event_id: EventId | None = None,
        user_id: int | None = None,
        status: RegistrationStatus | None = None,
    ) -> list[RegistrationDetail]:
        registrations = [
            registration
            for registration in list(self._db.registrations.values())
            if (event_id is None or registration.event_id == event_id)
            and (user_id is None or registration.user_id == user_id)
            and (status is None or registration.status is status)
        ]
        registrations.sort(key=lambda registration: registration.registered_at, reverse=True)
        return [self._detail(registration) for registration in registrations]

    def get_detail(self, registration_id: RegistrationId) -> RegistrationDetail | None:
        registration = self._db.registrations.get(registration_id)
        return self._detail(registration) if registration else None

    def exists_with_status(
        self, user_id: int, event_id: EventId, status: RegistrationStatus
    ) -> bool:
        return any(
            registration.user_id == user_id
            and registration.event_id == event_id
            and registration.status is status
            for registration in list(self._db.registrations.values())
        )

    def count_by_status(self, event_id: EventId) -> dict[RegistrationStatus, int]:
        return dict(
            Counter(
                registration.status
                for registration in list(self._db.registrations.values())
                if registration.event_id == event_id
            )
        )

    def _detail(self, registration: Registration) -> RegistrationDetail:
        event = self._db.events[registration.event_id]
        return RegistrationDetail(
            registration=registration,
            event_title=event.title,
            event_start_date=event.start_date,
            event_status=event.status,
            username=self._db.username(registration.user_id),
        )

    def _replace(self, registration_id: RegistrationId, **fields: object) -> Registration:
        with self._db.lock:
            registration = replace(
                self._db.registrations[registration_id], updated_at=_now(), **fields
            )
            self._db.registrations[registration_id] = registration
            return registration
