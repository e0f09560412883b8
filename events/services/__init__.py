from events.services.event_service import EventService
from events.services.ledger import CapacityLedger
from events.services.queries import EventQueryService, RegistrationQueryService
from events.services.registration_service import RegistrationService

__all__ = [
    "CapacityLedger",
    "EventQueryService",
    "EventService",
    "RegistrationQueryService",
    "RegistrationService",
]
