"""Django ORM implementation of the event and registration stores."""

from contextlib import AbstractContextManager
from datetime import datetime

from django.db import IntegrityError, transaction
from django.db.models import Count, F
from django.utils import timezone

from events import cache, models
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


def to_domain_event(row: models.Event) -> Event:
    return Event(
        id=EventId(row.id),
        title=row.title,
        description=row.description,
        location=row.location,
        schedule=Schedule(start=row.start_date, end=row.end_date),
        capacity=Capacity(row.capacity),
        registered_count=row.registered_count,
        status=EventStatus(row.status),
        price=Money(row.price),
        is_featured=row.is_featured,
        image_url=row.image_url,
        created_by_id=row.created_by_id,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def to_domain_registration(row: models.Registration) -> Registration:
    return Registration(
        id=RegistrationId(row.id),
        event_id=EventId(row.event_id),
        user_id=row.user_id,
        status=RegistrationStatus(row.status),
        notes=row.notes,
        registered_at=row.registered_at,
        updated_at=row.updated_at,
    )


def to_registration_detail(row: models.Registration) -> RegistrationDetail:
    return RegistrationDetail(
        registration=to_domain_registration(row),
        event_title=row.event.title,
        event_start_date=row.event.start_date,
        event_status=EventStatus(row.event.status),
        username=row.user.get_username(),
    )


class DjangoEventStore(EventStore):
    """Relational event store using Django ORM."""

    def atomic(self) -> AbstractContextManager[None]:
        return transaction.atomic()

    def add_event(
        self, command: CreateEvent, status: EventStatus, created_by_id: int
    ) -> Event:
        row = models.Event.objects.create(
            title=command.title,
            description=command.description,
            location=command.location,
            start_date=command.start_date,
            end_date=command.end_date,
            capacity=command.capacity,
            price=command.price,
            image_url=command.image_url,
            is_featured=command.is_featured,
            status=status.value,
            created_by_id=created_by_id,
        )
        return to_domain_event(row)

    def get_event(self, event_id: EventId, *, for_update: bool = False) -> Event | None:
        queryset = models.Event.objects.all()
        if for_update:
            queryset = queryset.select_for_update()
        row = queryset.filter(pk=event_id.value).first()
        return to_domain_event(row) if row else None

    def list_events(
        self,
        *,
        status: EventStatus | None = None,
        featured: bool | None = None,
        starts_after: datetime | None = None,
        newest_first: bool = False,
        limit: int | None = None,
    ) -> list[Event]:
        queryset = models.Event.objects.all()
        if status is not None:
            queryset = queryset.filter(status=status.value)
        if featured is not None:
            queryset = queryset.filter(is_featured=featured)
        if starts_after is not None:
            queryset = queryset.filter(start_date__gt=starts_after)
        queryset = queryset.order_by("-created_at" if newest_first else "start_date")
        if limit is not None:
            queryset = queryset[:limit]
        return [to_domain_event(row) for row in queryset]

    def event_exists(self, event_id: EventId) -> bool:
        return models.Event.objects.filter(pk=event_id.value).exists()

    def set_status(self, event_id: EventId, status: EventStatus) -> Event:
        return self._save(event_id, status=status.value)

    def update_details(self, event_id: EventId, changes: dict[str, object]) -> Event:
        return self._save(event_id, **changes)

    def set_schedule(self, event_id: EventId, schedule: Schedule) -> Event:
        return self._save(event_id, start_date=schedule.start, end_date=schedule.end)

    def set_capacity(self, event_id: EventId, capacity: Capacity) -> bool:
        updated = models.Event.objects.filter(
            pk=event_id.value, registered_count__lte=capacity.value
        ).update(capacity=capacity.value, updated_at=timezone.now())
        cache.invalidate_event_on_commit(event_id)
        return updated == 1

    def increment_registered(self, event_id: EventId) -> bool:
        updated = models.Event.objects.filter(
            pk=event_id.value, registered_count__lt=F("capacity")
        ).update(registered_count=F("registered_count") + 1)
        # Queryset updates skip post_save, so the store invalidates here.
        cache.invalidate_event_on_commit(event_id)
        return updated == 1

    def decrement_registered(self, event_id: EventId) -> bool:
        updated = models.Event.objects.filter(
            pk=event_id.value, registered_count__gt=0
        ).update(registered_count=F("registered_count") - 1)
        cache.invalidate_event_on_commit(event_id)
        return updated == 1

    def delete_if_unregistered(self, event_id: EventId) -> bool:
        deleted, _ = models.Event.objects.filter(
            pk=event_id.value, registered_count=0
        ).delete()
        return deleted > 0

    def _save(self, event_id: EventId, **fields: object) -> Event:
        row = models.Event.objects.get(pk=event_id.value)
        for name, value in fields.items():
            setattr(row, name, value)
        row.save(update_fields=[*fields, "updated_at"])
        return to_domain_event(row)


class DjangoRegistrationStore(RegistrationStore):
    """Relational registration store using Django ORM."""

    def atomic(self) -> AbstractContextManager[None]:
        return transaction.atomic()

    def add_registration(
        self,
        event_id: EventId,
        user_id: int,
        status: RegistrationStatus,
        notes: str | None,
    ) -> Registration:
        try:
            # Savepoint: a unique violation must not poison the outer transaction.
            with transaction.atomic():
                row = models.Registration.objects.create(
                    event_id=event_id.value,
                    user_id=user_id,
                    status=status.value,
                    notes=notes,
                )
        except IntegrityError as exc:
            raise DuplicateRegistrationError() from exc
        return to_domain_registration(row)

    def get_registration(
        self, registration_id: RegistrationId, *, for_update: bool = False
    ) -> Registration | None:
        queryset = models.Registration.objects.all()
        if for_update:
            queryset = queryset.select_for_update()
        row = queryset.filter(pk=registration_id.value).first()
        return to_domain_registration(row) if row else None

    def find_open(self, user_id: int, event_id: EventId) -> Registration | None:
        row = (
            models.Registration.objects.filter(user_id=user_id, event_id=event_id.value)
            .exclude(status=models.Registration.Status.CANCELLED)
            .first()
        )
        return to_domain_registration(row) if row else None

    def set_status(
        self, registration_id: RegistrationId, status: RegistrationStatus
    ) -> Registration:
        return self._save(registration_id, status=status.value)

    def set_notes(self, registration_id: RegistrationId, notes: str | None) -> Registration:
        return self._save(registration_id, notes=notes)

    def delete_registration(self, registration_id: RegistrationId) -> None:
        models.Registration.objects.filter(pk=registration_id.value).delete()

    def list_details(
        self,
        *,
        event_id: EventId | None = None,
        user_id: int | None = None,
        status: RegistrationStatus | None = None,
    ) -> list[RegistrationDetail]:
        queryset = models.Registration.objects.select_related("event", "user")
        if event_id is not None:
            queryset = queryset.filter(event_id=event_id.value)
        if user_id is not None:
            queryset = queryset.filter(user_id=user_id)
        if status is not None:
            queryset = queryset.filter(status=status.value)
        return [to_registration_detail(row) for row in queryset.order_by("-registered_at")]

    def get_detail(self, registration_id: RegistrationId) -> RegistrationDetail | None:
        row = (
            models.Registration.objects.select_related("event", "user")
            .filter(pk=registration_id.value)
            .first()
        )
        return to_registration_detail(row) if row else None

    def exists_with_status(
        self, user_id: int, event_id: EventId, status: RegistrationStatus
    ) -> bool:
        return models.Registration.objects.filter(
            user_id=user_id, event_id=event_id.value, status=status.value
        ).exists()

    def count_by_status(self, event_id: EventId) -> dict[RegistrationStatus, int]:
        rows = (
            models.Registration.objects.filter(event_id=event_id.value)
            .values("status")
            .annotate(total=Count("id"))
            .order_by()
        )
        return {RegistrationStatus(row["status"]): row["total"] for row in rows}

    def _save(self, registration_id: RegistrationId, **fields: object) -> Registration:
        row = models.Registration.objects.get(pk=registration_id.value)
        for name, value in fields.items():
            setattr(row, name, value)
        row.save(update_fields=[*fields, "updated_at"])
        return to_domain_registration(row)
