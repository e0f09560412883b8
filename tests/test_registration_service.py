"""Unit tests for RegistrationService.

Every test checks the ledger as well as the registration status: for each
event, registered_count must equal the number of pending/confirmed rows.
Run with: pytest tests/test_registration_service.py -v
"""

from datetime import timedelta

import pytest

from events.domain import EventStatus, RegistrationStatus
from events.domain.errors import (
    AlreadyCancelledError,
    DuplicateRegistrationError,
    EventFullError,
    EventNotFoundError,
    EventNotPublishedError,
    EventNotStartedError,
    EventPastError,
    InvalidRegistrationIdError,
    InvalidTransitionError,
    NotOwnerError,
    PermissionDeniedError,
    RegistrationNotFoundError,
)


def assert_ledger_matches(event_store, registration_store, event_id):
    counts = registration_store.count_by_status(event_id)
    active = counts.get(RegistrationStatus.PENDING, 0) + counts.get(
        RegistrationStatus.CONFIRMED, 0
    )
    event = event_store.get_event(event_id)
    assert event.registered_count == active
    assert 0 <= event.registered_count <= event.capacity.value


class TestCreate:
    def test_create_confirms_and_reserves(
        self, registration_service, event_store, registration_store, participant, make_event
    ):
        event = make_event()

        registration = registration_service.create(participant, event.id, notes="Vegan")

        assert registration.status is RegistrationStatus.CONFIRMED
        assert registration.notes == "Vegan"
        assert registration.user_id == participant.id
        assert event_store.get_event(event.id).registered_count == 1
        assert_ledger_matches(event_store, registration_store, event.id)

    def test_unknown_event(self, registration_service, participant):
        with pytest.raises(EventNotFoundError):
            registration_service.create(participant, "7f1d1f9e-5f43-4a7c-9b0e-2f36c3d9a0aa")

    def test_draft_event(self, registration_service, participant, make_event):
        event = make_event(publish=False)

        with pytest.raises(EventNotPublishedError):
            registration_service.create(participant, event.id)

    def test_cancelled_event(self, registration_service, event_service, admin, participant, make_event):
        event = make_event()
        event_service.cancel(admin, event.id)

        with pytest.raises(EventNotPublishedError):
            registration_service.create(participant, event.id)

    def test_full_event(
        self, registration_service, event_store, make_participant, make_event
    ):
        event = make_event(capacity=1)
        registration_service.create(make_participant(), event.id)

        with pytest.raises(EventFullError):
            registration_service.create(make_participant(), event.id)

        assert event_store.get_event(event.id).registered_count == 1

    def test_started_event(self, registration_service, participant, make_event, clock):
        event = make_event(starts_in=timedelta(hours=1))
        clock.advance(hours=2)

        with pytest.raises(EventPastError):
            registration_service.create(participant, event.id)

    def test_duplicate_is_rejected_without_touching_ledger(
        self, registration_service, event_store, participant, make_event
    ):
        event = make_event()
        registration_service.create(participant, event.id)

        with pytest.raises(DuplicateRegistrationError):
            registration_service.create(participant, event.id)

        assert event_store.get_event(event.id).registered_count == 1

    def test_re_register_after_cancel(
        self, registration_service, event_store, registration_store, participant, make_event
    ):
        event = make_event()
        first = registration_service.create(participant, event.id)
        registration_service.cancel(participant, first.id)

        second = registration_service.create(participant, event.id)

        assert second.id != first.id
        assert event_store.get_event(event.id).registered_count == 1
        assert_ledger_matches(event_store, registration_store, event.id)

    def test_failed_insert_rolls_back_reservation(
        self, registration_service, registration_store, event_store, participant, make_event, monkeypatch
    ):
        event = make_event()

        def boom(*args, **kwargs):
            raise DuplicateRegistrationError()

        monkeypatch.setattr(registration_store, "add_registration", boom)

        with pytest.raises(DuplicateRegistrationError):
            registration_service.create(participant, event.id)

        assert event_store.get_event(event.id).registered_count == 0

    def test_approval_flow_creates_pending_and_reserves(
        self, approval_service, event_store, participant, make_event
    ):
        event = make_event()

        registration = approval_service.create(participant, event.id)

        assert registration.status is RegistrationStatus.PENDING
        assert event_store.get_event(event.id).registered_count == 1


class TestCancel:
    def test_cancel_then_cancel_again(
        self, registration_service, event_store, registration_store, participant, make_event
    ):
        event = make_event()
        registration = registration_service.create(participant, event.id)

        cancelled = registration_service.cancel(participant, registration.id)

        assert cancelled.status is RegistrationStatus.CANCELLED
        assert event_store.get_event(event.id).registered_count == 0
        with pytest.raises(AlreadyCancelledError):
            registration_service.cancel(participant, registration.id)
        assert event_store.get_event(event.id).registered_count == 0
        assert_ledger_matches(event_store, registration_store, event.id)

    def test_round_trip_restores_count(
        self, registration_service, event_store, make_participant, make_event
    ):
        event = make_event()
        registration_service.create(make_participant(), event.id)
        before = event_store.get_event(event.id).registered_count
        user = make_participant()

        registration = registration_service.create(user, event.id)
        registration_service.cancel(user, registration.id)

        assert event_store.get_event(event.id).registered_count == before

    def test_only_owner_can_cancel(
        self, registration_service, event_store, make_participant, make_event
    ):
        event = make_event()
        owner, other = make_participant(), make_participant()
        registration = registration_service.create(owner, event.id)

        with pytest.raises(NotOwnerError):
            registration_service.cancel(other, registration.id)

        assert event_store.get_event(event.id).registered_count == 1

    def test_cancel_unknown_registration(self, registration_service, participant):
        with pytest.raises(RegistrationNotFoundError):
            registration_service.cancel(participant, "7f1d1f9e-5f43-4a7c-9b0e-2f36c3d9a0aa")

    def test_cancel_malformed_id(self, registration_service, participant):
        with pytest.raises(InvalidRegistrationIdError):
            registration_service.cancel(participant, "nope")

    def test_cancel_pending_releases(self, approval_service, event_store, participant, make_event):
        event = make_event()
        registration = approval_service.create(participant, event.id)

        approval_service.cancel(participant, registration.id)

        assert event_store.get_event(event.id).registered_count == 0


class TestApproval:
    def test_validate_does_not_reserve_twice(
        self, approval_service, event_store, registration_store, admin, participant, make_event
    ):
        event = make_event()
        registration = approval_service.create(participant, event.id)

        validated = approval_service.validate(admin, registration.id)

        assert validated.status is RegistrationStatus.CONFIRMED
        assert event_store.get_event(event.id).registered_count == 1
        assert_ledger_matches(event_store, registration_store, event.id)

    def test_refuse_releases(
        self, approval_service, event_store, registration_store, admin, participant, make_event
    ):
        event = make_event()
        registration = approval_service.create(participant, event.id)

        refused = approval_service.refuse(admin, registration.id)

        assert refused.status is RegistrationStatus.CANCELLED
        assert event_store.get_event(event.id).registered_count == 0
        assert_ledger_matches(event_store, registration_store, event.id)

    def test_validate_confirmed_is_rejected(self, registration_service, admin, participant, make_event):
        registration = registration_service.create(participant, make_event().id)

        with pytest.raises(InvalidTransitionError):
            registration_service.validate(admin, registration.id)

    def test_refuse_confirmed_is_rejected(
        self, registration_service, event_store, admin, participant, make_event
    ):
        event = make_event()
        registration = registration_service.create(participant, event.id)

        with pytest.raises(InvalidTransitionError):
            registration_service.refuse(admin, registration.id)

        assert event_store.get_event(event.id).registered_count == 1

    def test_participant_cannot_validate(self, approval_service, participant, make_event):
        registration = approval_service.create(participant, make_event().id)

        with pytest.raises(PermissionDeniedError):
            approval_service.validate(participant, registration.id)


class TestAttendance:
    def test_mark_attended_after_start_releases(
        self, registration_service, event_store, registration_store, admin, participant, make_event, clock
    ):
        event = make_event(starts_in=timedelta(days=1))
        registration = registration_service.create(participant, event.id)
        clock.advance(days=1, minutes=5)

        attended = registration_service.mark_attended(admin, registration.id)

        assert attended.status is RegistrationStatus.ATTENDED
        assert_ledger_matches(event_store, registration_store, event.id)

    def test_mark_attended_before_start(self, registration_service, admin, participant, make_event):
        registration = registration_service.create(participant, make_event().id)

        with pytest.raises(EventNotStartedError):
            registration_service.mark_attended(admin, registration.id)

    def test_attended_cannot_be_cancelled(
        self, registration_service, admin, participant, make_event, clock
    ):
        registration = registration_service.create(
            participant, make_event(starts_in=timedelta(hours=1)).id
        )
        clock.advance(hours=2)
        registration_service.mark_attended(admin, registration.id)

        with pytest.raises(InvalidTransitionError):
            registration_service.cancel(participant, registration.id)


class TestAdminEdits:
    def test_update_notes_never_moves_ledger(
        self, registration_service, event_store, admin, participant, make_event
    ):
        event = make_event()
        registration = registration_service.create(participant, event.id)

        updated = registration_service.update_notes(admin, registration.id, "Front row")

        assert updated.notes == "Front row"
        assert updated.status is RegistrationStatus.CONFIRMED
        assert event_store.get_event(event.id).registered_count == 1

    def test_remove_confirmed_releases(
        self, registration_service, event_store, registration_store, admin, participant, make_event
    ):
        event = make_event()
        registration = registration_service.create(participant, event.id)

        registration_service.remove(admin, registration.id)

        assert registration_store.get_registration(registration.id) is None
        assert event_store.get_event(event.id).registered_count == 0

    def test_remove_cancelled_leaves_ledger(
        self, registration_service, event_store, admin, make_participant, make_event
    ):
        event = make_event()
        keeper, leaver = make_participant(), make_participant()
        registration_service.create(keeper, event.id)
        registration = registration_service.create(leaver, event.id)
        registration_service.cancel(leaver, registration.id)

        registration_service.remove(admin, registration.id)

        assert event_store.get_event(event.id).registered_count == 1

    def test_remove_attended_leaves_ledger(
        self, registration_service, event_store, admin, make_participant, make_event, clock
    ):
        event = make_event(starts_in=timedelta(hours=1))
        registration_service.create(make_participant(), event.id)
        registration = registration_service.create(make_participant(), event.id)
        clock.advance(hours=2)
        registration_service.mark_attended(admin, registration.id)

        registration_service.remove(admin, registration.id)

        assert event_store.get_event(event.id).registered_count == 1

    def test_remove_requires_admin(self, registration_service, participant, make_event):
        registration = registration_service.create(participant, make_event().id)

        with pytest.raises(PermissionDeniedError):
            registration_service.remove(participant, registration.id)


def test_event_status_unchanged_by_registrations(registration_service, event_store, participant, make_event):
    event = make_event()

    registration_service.create(participant, event.id)

    assert event_store.get_event(event.id).status is EventStatus.PUBLISHED
