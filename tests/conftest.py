"""Pytest configuration and shared fixtures."""

import itertools
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

import pytest
from rest_framework.test import APIClient

from events.domain import ActingUser, CreateEvent, Event, Role
from events.services import (
    CapacityLedger,
    EventQueryService,
    EventService,
    RegistrationQueryService,
    RegistrationService,
)
from events.stores.memory_store import (
    InMemoryDatabase,
    InMemoryEventStore,
    InMemoryRegistrationStore,
)


class Clock:
    """Controllable time source for services."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


def event_command(
    now: datetime,
    *,
    starts_in: timedelta = timedelta(days=7),
    duration: timedelta = timedelta(hours=3),
    **overrides: object,
) -> CreateEvent:
    fields = {
        "title": "Spring Meetup",
        "description": "An evening of talks and networking.",
        "location": "Main Hall",
        "start_date": now + starts_in,
        "end_date": now + starts_in + duration,
        "capacity": 10,
    }
    fields.update(overrides)
    return CreateEvent(**fields)


def event_payload(**overrides: object) -> dict:
    start = datetime.now(timezone.utc) + timedelta(days=7)
    payload = {
        "title": "Spring Meetup",
        "description": "An evening of talks and networking.",
        "location": "Main Hall",
        "start_date": start.isoformat(),
        "end_date": (start + timedelta(hours=3)).isoformat(),
        "capacity": 10,
    }
    payload.update(overrides)
    return payload


def create_event(client: APIClient, **overrides: object) -> dict:
    response = client.post("/api/events", event_payload(**overrides), format="json")
    assert response.status_code == 201, response.data
    return response.data


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def staff_client(admin_user) -> APIClient:
    client = APIClient()
    client.force_authenticate(admin_user)
    return client


@pytest.fixture
def member(django_user_model):
    return django_user_model.objects.create_user(username="member", password="pw")


@pytest.fixture
def member_client(member) -> APIClient:
    client = APIClient()
    client.force_authenticate(member)
    return client


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def clock() -> Clock:
    return Clock(datetime(2030, 3, 1, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def memory_db() -> InMemoryDatabase:
    return InMemoryDatabase()


@pytest.fixture
def event_store(memory_db: InMemoryDatabase) -> InMemoryEventStore:
    return InMemoryEventStore(memory_db)


@pytest.fixture
def registration_store(memory_db: InMemoryDatabase) -> InMemoryRegistrationStore:
    return InMemoryRegistrationStore(memory_db)


@pytest.fixture
def ledger(event_store: InMemoryEventStore) -> CapacityLedger:
    return CapacityLedger(event_store, strict=True)


@pytest.fixture
def event_service(event_store: InMemoryEventStore, clock: Clock) -> EventService:
    return EventService(event_store, clock=clock)


@pytest.fixture
def registration_service(
    event_store: InMemoryEventStore,
    registration_store: InMemoryRegistrationStore,
    ledger: CapacityLedger,
    clock: Clock,
) -> RegistrationService:
    return RegistrationService(event_store, registration_store, ledger, clock=clock)


@pytest.fixture
def approval_service(
    event_store: InMemoryEventStore,
    registration_store: InMemoryRegistrationStore,
    ledger: CapacityLedger,
    clock: Clock,
) -> RegistrationService:
    """Registration service where new registrations wait for an admin."""
    return RegistrationService(
        event_store, registration_store, ledger, require_approval=True, clock=clock
    )


@pytest.fixture
def event_queries(event_store: InMemoryEventStore, clock: Clock) -> EventQueryService:
    return EventQueryService(event_store, clock=clock)


@pytest.fixture
def registration_queries(
    event_store: InMemoryEventStore, registration_store: InMemoryRegistrationStore
) -> RegistrationQueryService:
    return RegistrationQueryService(event_store, registration_store)


@pytest.fixture
def admin() -> ActingUser:
    return ActingUser(id=1, role=Role.ADMIN)


@pytest.fixture
def make_participant() -> Callable[[], ActingUser]:
    ids = itertools.count(100)
    return lambda: ActingUser(id=next(ids), role=Role.PARTICIPANT)


@pytest.fixture
def participant(make_participant: Callable[[], ActingUser]) -> ActingUser:
    return make_participant()


@pytest.fixture
def make_event(
    event_service: EventService, admin: ActingUser, clock: Clock
) -> Callable[..., Event]:
    """Create an event through the service; published unless told otherwise."""

    def make(publish: bool = True, **overrides: object) -> Event:
        return event_service.create(
            admin, event_command(clock(), publish=publish, **overrides)
        )

    return make
