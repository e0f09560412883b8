"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Self
from uuid import UUID

from events.domain.errors import DateInvalidError

MIN_CAPACITY = 1
MAX_CAPACITY = 100_000
MAX_EVENT_DURATION = timedelta(days=30)


@dataclass(frozen=True)
class EventId:
    """Unique identifier for an Event."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class RegistrationId:
    """Unique identifier for a Registration."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Money:
    """Price representation with validation."""

    amount: Decimal

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError("Money amount cannot be negative")

    def __str__(self) -> str:
        return f"{self.amount:.2f}"


@dataclass(frozen=True)
class Capacity:
    """Number of attendees an event can hold."""

    value: int

    def __post_init__(self) -> None:
        if self.value < MIN_CAPACITY:
            raise ValueError(f"Capacity must be at least {MIN_CAPACITY}")
        if self.value > MAX_CAPACITY:
            raise ValueError(f"Capacity cannot exceed {MAX_CAPACITY:,}")


@dataclass(frozen=True)
class Schedule:
    """Start/end pair of an event.

    Construction only checks ordering; ``check`` applies the rules that
    depend on the current time.
    """

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.end <= self.start:
            raise DateInvalidError("End date must be after start date")

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def check(self, now: datetime, max_duration: timedelta = MAX_EVENT_DURATION) -> None:
        """Raise DateInvalidError unless the schedule is bookable at ``now``."""
        if self.start <= now:
            raise DateInvalidError("Start date must be in the future")
        if self.duration > max_duration:
            raise DateInvalidError(
                f"Event duration cannot exceed {max_duration.days} days"
            )
