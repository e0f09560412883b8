"""Registration service - registration lifecycle and its ledger coupling.

A spot is reserved exactly once, when the registration is created (as
``confirmed``, or ``pending`` when approval is required). Every status
change goes through ``_move``, which releases the spot when a registration
leaves the ledger-active set. Status is never edited free-form.
"""

from collections.abc import Callable
from datetime import datetime

import structlog

from events.domain import (
    ActingUser,
    EventId,
    EventStatus,
    Registration,
    RegistrationId,
    RegistrationStatus,
)
from events.domain.errors import (
    AlreadyCancelledError,
    DuplicateRegistrationError,
    EventFullError,
    EventNotFoundError,
    EventNotPublishedError,
    EventNotStartedError,
    EventPastError,
    InvalidTransitionError,
    NotOwnerError,
    RegistrationNotFoundError,
)
from events.services.common import (
    parse_event_id,
    parse_registration_id,
    require_admin,
    utcnow,
)
from events.services.ledger import CapacityLedger
from events.stores.interfaces import EventStore, RegistrationStore

logger = structlog.get_logger(__name__)


class RegistrationService:
    """Service for participant and admin registration operations."""

    def __init__(
        self,
        events: EventStore,
        registrations: RegistrationStore,
        ledger: CapacityLedger,
        *,
        require_approval: bool = False,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._events = events
        self._registrations = registrations
        self._ledger = ledger
        self._require_approval = require_approval
        self._clock = clock

    @property
    def initial_status(self) -> RegistrationStatus:
        if self._require_approval:
            return RegistrationStatus.PENDING
        return RegistrationStatus.CONFIRMED

    def create(
        self,
        acting_user: ActingUser,
        event_id: str | EventId,
        notes: str | None = None,
    ) -> Registration:
        """Register the acting user for an event.

        The event row is locked for the whole unit of work; the reservation
        and the insert commit together or not at all.

        Raises:
            EventNotFoundError: If the event does not exist.
            EventNotPublishedError: If the event is not published.
            EventFullError: If no spot is left (also raised by the ledger as
                CapacityExceededError when a concurrent request took the
                last spot).
            EventPastError: If the event has already started.
            DuplicateRegistrationError: If the user already holds a
                non-cancelled registration for the event.
        """
        parsed_id = parse_event_id(event_id)
        with self._registrations.atomic():
            event = self._events.get_event(parsed_id, for_update=True)
            if event is None:
                raise EventNotFoundError()
            if event.status is not EventStatus.PUBLISHED:
                raise EventNotPublishedError()
            if event.is_full:
                raise EventFullError()
            if event.start_date <= self._clock():
                raise EventPastError()
            if self._registrations.find_open(acting_user.id, event.id) is not None:
                raise DuplicateRegistrationError()
            self._ledger.reserve(event.id)
            registration = self._registrations.add_registration(
                event.id, acting_user.id, self.initial_status, notes
            )
        logger.info(
            "registration_created",
            registration_id=str(registration.id),
            event_id=str(event.id),
            user_id=acting_user.id,
            status=registration.status.value,
        )
        return registration

    def cancel(
        self, acting_user: ActingUser, registration_id: str | RegistrationId
    ) -> Registration:
        """Cancel the acting user's own registration and free its spot.

        Raises:
            NotOwnerError: If the registration belongs to someone else.
            AlreadyCancelledError: If it is already cancelled.
            InvalidTransitionError: If the user already attended.
        """
        with self._registrations.atomic():
            registration = self._get(registration_id, for_update=True)
            if registration.user_id != acting_user.id:
                raise NotOwnerError()
            if registration.status is RegistrationStatus.CANCELLED:
                raise AlreadyCancelledError("Registration is already cancelled")
            registration = self._move(registration, RegistrationStatus.CANCELLED)
        return registration

    def validate(
        self, acting_user: ActingUser, registration_id: str | RegistrationId
    ) -> Registration:
        """Approve a pending registration; its spot is already reserved."""
        require_admin(acting_user)
        with self._registrations.atomic():
            registration = self._get(registration_id, for_update=True)
            registration = self._move(registration, RegistrationStatus.CONFIRMED)
        return registration

    def refuse(
        self, acting_user: ActingUser, registration_id: str | RegistrationId
    ) -> Registration:
        """Turn down a pending registration and free its spot."""
        require_admin(acting_user)
        with self._registrations.atomic():
            registration = self._get(registration_id, for_update=True)
            if registration.status is not RegistrationStatus.PENDING:
                raise InvalidTransitionError(
                    registration.status.value, "refused"
                )
            registration = self._move(registration, RegistrationStatus.CANCELLED)
        return registration

    def mark_attended(
        self, acting_user: ActingUser, registration_id: str | RegistrationId
    ) -> Registration:
        """Record attendance for a confirmed registration.

        Attendance settles the registration, so its spot goes back to the
        ledger here; removing it later leaves the count alone.

        Raises:
            EventNotStartedError: If the event has not started yet.
        """
        require_admin(acting_user)
        with self._registrations.atomic():
            registration = self._get(registration_id, for_update=True)
            event = self._events.get_event(registration.event_id)
            if event is None:
                raise EventNotFoundError()
            if event.start_date > self._clock():
                raise EventNotStartedError()
            registration = self._move(registration, RegistrationStatus.ATTENDED)
        return registration

    def update_notes(
        self,
        acting_user: ActingUser,
        registration_id: str | RegistrationId,
        notes: str | None,
    ) -> Registration:
        require_admin(acting_user)
        registration = self._get(registration_id)
        return self._registrations.set_notes(registration.id, notes)

    def remove(
        self, acting_user: ActingUser, registration_id: str | RegistrationId
    ) -> None:
        """Hard-delete a registration, releasing its spot if it held one."""
        require_admin(acting_user)
        with self._registrations.atomic():
            registration = self._get(registration_id, for_update=True)
            if registration.holds_spot:
                self._ledger.release(registration.event_id)
            self._registrations.delete_registration(registration.id)
        logger.info(
            "registration_removed",
            registration_id=str(registration.id),
            event_id=str(registration.event_id),
            status=registration.status.value,
        )

    def _move(
        self, registration: Registration, target: RegistrationStatus
    ) -> Registration:
        if not registration.can_move_to(target):
            raise InvalidTransitionError(registration.status.value, target.value)
        updated = self._registrations.set_status(registration.id, target)
        if registration.holds_spot and not updated.holds_spot:
            self._ledger.release(registration.event_id)
        logger.info(
            "registration_status_changed",
            registration_id=str(registration.id),
            event_id=str(registration.event_id),
            source=registration.status.value,
            target=target.value,
        )
        return updated

    def _get(
        self, registration_id: str | RegistrationId, *, for_update: bool = False
    ) -> Registration:
        registration = self._registrations.get_registration(
            parse_registration_id(registration_id), for_update=for_update
        )
        if registration is None:
            raise RegistrationNotFoundError()
        return registration
