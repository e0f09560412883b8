"""Event service - event lifecycle business logic lives here.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors

Event status moves draft -> published -> cancelled; ``completed`` is set
outside this service. Registrations are never touched here: cancelling an
event only stops new reservations, because registering requires a
published event.
"""

from collections.abc import Callable
from datetime import datetime, timedelta

import structlog

from events.domain import (
    ActingUser,
    Capacity,
    CreateEvent,
    Event,
    EventId,
    EventStatus,
    EventUpdate,
    Money,
    Schedule,
    UpdateCapacity,
    UpdateDates,
    UpdateDetails,
)
from events.domain.errors import (
    AlreadyCancelledError,
    AlreadyCompletedError,
    CapacityTooLowError,
    EventNotFoundError,
    EventStartedError,
    HasRegistrationsError,
    InvalidCapacityError,
    InvalidPriceError,
    NotDraftError,
)
from events.domain.value_objects import MAX_EVENT_DURATION
from events.services.common import parse_event_id, require_admin, utcnow
from events.stores.interfaces import EventStore

logger = structlog.get_logger(__name__)


class EventService:
    """Service for admin event operations."""

    def __init__(
        self,
        store: EventStore,
        *,
        max_duration: timedelta = MAX_EVENT_DURATION,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self._max_duration = max_duration
        self._clock = clock

    def create(self, acting_user: ActingUser, command: CreateEvent) -> Event:
        """Create an event as a draft, or published if the command asks for it.

        Raises:
            PermissionDeniedError: If the acting user is not an admin.
            DateInvalidError: If the schedule is not bookable.
            InvalidCapacityError: If capacity is outside 1..100000.
            InvalidPriceError: If the price is negative.
        """
        require_admin(acting_user)
        Schedule(command.start_date, command.end_date).check(
            self._clock(), self._max_duration
        )
        _capacity(command.capacity)
        _price(command.price)
        status = EventStatus.PUBLISHED if command.publish else EventStatus.DRAFT
        event = self._store.add_event(command, status, acting_user.id)
        logger.info(
            "event_created",
            event_id=str(event.id),
            status=status.value,
            created_by=acting_user.id,
        )
        return event

    def publish(self, acting_user: ActingUser, event_id: str | EventId) -> Event:
        """Move a draft to published.

        Raises:
            NotDraftError: If the event is not a draft.
            EventStartedError: If the start date is no longer in the future.
        """
        require_admin(acting_user)
        with self._store.atomic():
            event = self._get(event_id, for_update=True)
            if event.status is not EventStatus.DRAFT:
                raise NotDraftError()
            # A draft prepared long ago may have gone stale.
            if event.start_date <= self._clock():
                raise EventStartedError()
            event = self._store.set_status(event.id, EventStatus.PUBLISHED)
        logger.info("event_published", event_id=str(event.id))
        return event

    def cancel(self, acting_user: ActingUser, event_id: str | EventId) -> Event:
        """Cancel a draft or published event.

        Raises:
            AlreadyCancelledError: If the event is already cancelled.
            AlreadyCompletedError: If the event is completed.
        """
        require_admin(acting_user)
        with self._store.atomic():
            event = self._get(event_id, for_update=True)
            if event.status is EventStatus.CANCELLED:
                raise AlreadyCancelledError()
            if event.status is EventStatus.COMPLETED:
                raise AlreadyCompletedError()
            event = self._store.set_status(event.id, EventStatus.CANCELLED)
        logger.info(
            "event_cancelled",
            event_id=str(event.id),
            registered_count=event.registered_count,
        )
        return event

    def update(
        self, acting_user: ActingUser, event_id: str | EventId, command: EventUpdate
    ) -> Event:
        """Apply one update command.

        Raises:
            CapacityTooLowError: If the new capacity is below registered_count.
            DateInvalidError: If the patched schedule is not bookable.
        """
        require_admin(acting_user)
        with self._store.atomic():
            event = self._get(event_id, for_update=True)
            if isinstance(command, UpdateCapacity):
                event = self._update_capacity(event, command)
            elif isinstance(command, UpdateDates):
                event = self._update_dates(event, command)
            elif isinstance(command, UpdateDetails):
                event = self._update_details(event, command)
            else:
                raise TypeError(f"Unsupported event update: {command!r}")
        logger.info(
            "event_updated",
            event_id=str(event.id),
            update=type(command).__name__,
        )
        return event

    def delete(self, acting_user: ActingUser, event_id: str | EventId) -> None:
        """Delete an event that holds no registrations.

        Raises:
            HasRegistrationsError: If registered_count is not zero.
        """
        require_admin(acting_user)
        with self._store.atomic():
            # The row lock makes registrations wait until the delete commits,
            # after which they see the event as gone.
            event = self._get(event_id, for_update=True)
            if event.registered_count != 0 or not self._store.delete_if_unregistered(
                event.id
            ):
                raise HasRegistrationsError()
        logger.info("event_deleted", event_id=str(event.id))

    def _update_capacity(self, event: Event, command: UpdateCapacity) -> Event:
        capacity = _capacity(command.capacity)
        # Checked again by the conditional write, which also covers a
        # reservation landing between our read and the update.
        if capacity.value < event.registered_count or not self._store.set_capacity(
            event.id, capacity
        ):
            current = self._get(event.id)
            raise CapacityTooLowError(current.registered_count)
        return self._get(event.id)

    def _update_dates(self, event: Event, command: UpdateDates) -> Event:
        schedule = Schedule(
            start=command.start_date or event.start_date,
            end=command.end_date or event.end_date,
        )
        schedule.check(self._clock(), self._max_duration)
        return self._store.set_schedule(event.id, schedule)

    def _update_details(self, event: Event, command: UpdateDetails) -> Event:
        changes = command.changes()
        if not changes:
            return event
        if "price" in changes:
            _price(changes["price"])
        return self._store.update_details(event.id, changes)

    def _get(self, event_id: str | EventId, *, for_update: bool = False) -> Event:
        event = self._store.get_event(parse_event_id(event_id), for_update=for_update)
        if event is None:
            raise EventNotFoundError()
        return event


def _capacity(value: int) -> Capacity:
    try:
        return Capacity(value)
    except ValueError as exc:
        raise InvalidCapacityError(str(exc)) from exc


def _price(value) -> Money:
    try:
        return Money(value)
    except ValueError as exc:
        raise InvalidPriceError() from exc
