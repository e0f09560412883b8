"""Builds services backed by the Django stores, configured from settings."""

from datetime import timedelta

from django.conf import settings

from events.services import (
    CapacityLedger,
    EventQueryService,
    EventService,
    RegistrationQueryService,
    RegistrationService,
)
from events.stores.django_store import DjangoEventStore, DjangoRegistrationStore


def event_service() -> EventService:
    return EventService(
        DjangoEventStore(),
        max_duration=timedelta(days=settings.REGISTRAR_MAX_EVENT_DAYS),
    )


def registration_service() -> RegistrationService:
    events = DjangoEventStore()
    return RegistrationService(
        events,
        DjangoRegistrationStore(),
        CapacityLedger(events, strict=settings.REGISTRAR_LEDGER_STRICT),
        require_approval=settings.REGISTRAR_REQUIRE_APPROVAL,
    )


def event_queries() -> EventQueryService:
    return EventQueryService(
        DjangoEventStore(), featured_limit=settings.REGISTRAR_FEATURED_LIMIT
    )


def registration_queries() -> RegistrationQueryService:
    return RegistrationQueryService(DjangoEventStore(), DjangoRegistrationStore())
