"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in events/models.py (persistence layer).
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from events.domain.value_objects import (
    Capacity,
    EventId,
    Money,
    RegistrationId,
    Schedule,
)


class EventStatus(Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class RegistrationStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    ATTENDED = "attended"


# Statuses that hold one unit of an event's registered_count.
LEDGER_ACTIVE = frozenset({RegistrationStatus.PENDING, RegistrationStatus.CONFIRMED})

# Legal registration moves: source -> allowed targets.
REGISTRATION_TRANSITIONS: dict[RegistrationStatus, frozenset[RegistrationStatus]] = {
    RegistrationStatus.PENDING: frozenset(
        {RegistrationStatus.CONFIRMED, RegistrationStatus.CANCELLED}
    ),
    RegistrationStatus.CONFIRMED: frozenset(
        {RegistrationStatus.CANCELLED, RegistrationStatus.ATTENDED}
    ),
    RegistrationStatus.CANCELLED: frozenset(),
    RegistrationStatus.ATTENDED: frozenset(),
}


class Role(Enum):
    ADMIN = "admin"
    PARTICIPANT = "participant"


@dataclass(frozen=True)
class ActingUser:
    """Identity of the user on whose behalf an operation runs."""

    id: int
    role: Role = Role.PARTICIPANT

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event."""

    id: EventId
    title: str
    description: str
    location: str
    schedule: Schedule
    capacity: Capacity
    registered_count: int
    status: EventStatus
    price: Money
    is_featured: bool
    image_url: str | None
    created_by_id: int
    created_at: datetime
    updated_at: datetime

    @property
    def start_date(self) -> datetime:
        return self.schedule.start

    @property
    def end_date(self) -> datetime:
        return self.schedule.end

    @property
    def spots_left(self) -> int:
        return max(0, self.capacity.value - self.registered_count)

    @property
    def is_full(self) -> bool:
        return self.registered_count >= self.capacity.value


@dataclass(frozen=True)
class Registration:
    """Domain representation of a Registration."""

    id: RegistrationId
    event_id: EventId
    user_id: int
    status: RegistrationStatus
    notes: str | None
    registered_at: datetime
    updated_at: datetime

    @property
    def holds_spot(self) -> bool:
        return self.status in LEDGER_ACTIVE

    def can_move_to(self, target: RegistrationStatus) -> bool:
        return target in REGISTRATION_TRANSITIONS[self.status]


@dataclass(frozen=True)
class RegistrationDetail:
    """Read-side projection of a registration joined with its event and user."""

    registration: Registration
    event_title: str
    event_start_date: datetime
    event_status: EventStatus
    username: str


@dataclass(frozen=True)
class EventStats:
    total: int
    pending: int
    confirmed: int
    cancelled: int
    attended: int
