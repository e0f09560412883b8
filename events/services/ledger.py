"""Capacity ledger - the only writer of ``Event.registered_count``.

The ledger does not decide whether a registration is allowed; callers run
their eligibility checks first. It only guarantees the arithmetic: a
reservation never pushes the count past capacity and a release never
pushes it below zero, even when requests race on the same event.
"""

import structlog

from events.domain import EventId
from events.domain.errors import CapacityExceededError, LedgerInvariantViolation
from events.stores.interfaces import EventStore

logger = structlog.get_logger(__name__)


class CapacityLedger:
    def __init__(self, store: EventStore, *, strict: bool = False) -> None:
        self._store = store
        self._strict = strict

    def reserve(self, event_id: EventId) -> None:
        """Claim one spot.

        Raises:
            CapacityExceededError: If no spot was free at the moment of the
                atomic increment.
        """
        if not self._store.increment_registered(event_id):
            logger.info("reservation_rejected", event_id=str(event_id))
            raise CapacityExceededError()
        logger.debug("spot_reserved", event_id=str(event_id))

    def release(self, event_id: EventId) -> None:
        """Give back one spot; the count is clamped at zero.

        Raises:
            LedgerInvariantViolation: Only in strict mode, when the count was
                already zero.
        """
        if self._store.decrement_registered(event_id):
            logger.debug("spot_released", event_id=str(event_id))
            return
        logger.error("ledger_invariant_violation", event_id=str(event_id))
        if self._strict:
            raise LedgerInvariantViolation(str(event_id))
