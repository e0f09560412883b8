from django.urls import path

from events.handlers import (
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

urlpatterns = [
    path("events", EventListView.as_view(), name="event-list"),
    path("events/admin", EventAdminListView.as_view(), name="event-admin-list"),
    path("events/upcoming", EventUpcomingView.as_view(), name="event-upcoming"),
    path("events/featured", EventFeaturedView.as_view(), name="event-featured"),
    path("events/<str:event_id>", EventDetailView.as_view(), name="event-detail"),
    path(
        "events/<str:event_id>/admin",
        EventAdminDetailView.as_view(),
        name="event-admin-detail",
    ),
    path("events/<str:event_id>/publish", EventPublishView.as_view(), name="event-publish"),
    path("events/<str:event_id>/cancel", EventCancelView.as_view(), name="event-cancel"),
    path("registrations", RegistrationListView.as_view(), name="registration-list"),
    path("registrations/mine", MyRegistrationsView.as_view(), name="registration-mine"),
    path(
        "registrations/pending",
        PendingRegistrationsView.as_view(),
        name="registration-pending",
    ),
    path(
        "registrations/event/<str:event_id>",
        EventRegistrationsView.as_view(),
        name="registration-by-event",
    ),
    path(
        "registrations/check/<str:event_id>",
        RegistrationCheckView.as_view(),
        name="registration-check",
    ),
    path(
        "registrations/stats/<str:event_id>",
        RegistrationStatsView.as_view(),
        name="registration-stats",
    ),
    path(
        "registrations/<str:registration_id>",
        RegistrationDetailView.as_view(),
        name="registration-detail",
    ),
    path(
        "registrations/<str:registration_id>/cancel",
        RegistrationCancelView.as_view(),
        name="registration-cancel",
    ),
    path(
        "registrations/<str:registration_id>/validate",
        RegistrationValidateView.as_view(),
        name="registration-validate",
    ),
    path(
        "registrations/<str:registration_id>/refuse",
        RegistrationRefuseView.as_view(),
        name="registration-refuse",
    ),
    path(
        "registrations/<str:registration_id>/attend",
        RegistrationAttendView.as_view(),
        name="registration-attend",
    ),
]
