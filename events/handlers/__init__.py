from events.handlers.views import (
    EventAdminDetailView,
    EventAdminListView,
    EventCancelView,
    EventDetailView,
    EventFeaturedView,
    EventListView,
    EventPublishView,
    EventRegistrationsView,
    EventUpcomingView,
    MyRegistrationsView,
    PendingRegistrationsView,
    RegistrationAttendView,
    RegistrationCancelView,
    RegistrationCheckView,
    RegistrationDetailView,
    RegistrationListView,
    RegistrationRefuseView,
    RegistrationStatsView,
    RegistrationValidateView,
)

__all__ = [
    "EventAdminDetailView",
    "EventAdminListView",
    "EventCancelView",
    "EventDetailView",
    "EventFeaturedView",
    "EventListView",
    "EventPublishView",
    "EventRegistrationsView",
    "EventUpcomingView",
    "MyRegistrationsView",
    "PendingRegistrationsView",
    "RegistrationAttendView",
    "RegistrationCancelView",
    "RegistrationCheckView",
    "RegistrationDetailView",
    "RegistrationListView",
    "RegistrationRefuseView",
    "RegistrationStatsView",
    "RegistrationValidateView",
]
