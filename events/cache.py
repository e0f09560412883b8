"""Cache keys for the public event catalog.

Catalog listings share a version token: bumping it orphans every cached
listing at once, so invalidation never has to enumerate list variants.
"""

from collections.abc import Callable
from typing import Any
from uuid import uuid4

from django.conf import settings
from django.core.cache import cache
from django.db import transaction

CATALOG_VERSION_KEY = "events:catalog:version"


def catalog_key(name: str) -> str:
    version = cache.get_or_set(CATALOG_VERSION_KEY, lambda: uuid4().hex, timeout=None)
    return f"events:catalog:{version}:{name}"


def event_key(event_id: object) -> str:
    return f"events:{event_id}"


def cached(key: str, producer: Callable[[], Any], timeout: int | None = None) -> Any:
    data = cache.get(key)
    if data is None:
        data = producer()
        cache.set(key, data, settings.CATALOG_CACHE_TIMEOUT if timeout is None else timeout)
    return data


def invalidate_event(event_id: object) -> None:
    """Drop the detail entry of one event and every catalog listing."""
    cache.delete(event_key(event_id))
    cache.set(CATALOG_VERSION_KEY, uuid4().hex, timeout=None)


def invalidate_event_on_commit(event_id: object) -> None:
    """Invalidate once the surrounding transaction commits, or now outside one."""
    transaction.on_commit(lambda: invalidate_event(event_id))
