from events.domain.commands import (
    CreateEvent,
    EventUpdate,
    UpdateCapacity,
    UpdateDates,
    UpdateDetails,
)
from events.domain.models import (
    LEDGER_ACTIVE,
    ActingUser,
    Event,
    EventStats,
    EventStatus,
    Registration,
    RegistrationDetail,
    RegistrationStatus,
    Role,
)
from events.domain.value_objects import (
    Capacity,
    EventId,
    Money,
    RegistrationId,
    Schedule,
)

__all__ = [
    "ActingUser",
    "Capacity",
    "CreateEvent",
    "Event",
    "EventId",
    "EventStats",
    "EventStatus",
    "EventUpdate",
    "LEDGER_ACTIVE",
    "Money",
    "Registration",
    "RegistrationDetail",
    "RegistrationId",
    "RegistrationStatus",
    "Role",
    "Schedule",
    "UpdateCapacity",
    "UpdateDates",
    "UpdateDetails",
]
