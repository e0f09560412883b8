"""Django signals for cache invalidation.

Ledger movements use queryset updates, which skip these signals; the
Django event store invalidates those itself. Both wait for the commit.
"""

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from events.cache import invalidate_event_on_commit
from events.models import Event


@receiver([post_save, post_delete], sender=Event)
def invalidate_event_cache(sender, instance, **kwargs):
    """Invalidate caches when an event is saved or deleted."""
    invalidate_event_on_commit(instance.pk)
