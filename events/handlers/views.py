"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Build the acting user from the authenticated request
- Call services for business logic
- Never contain business logic
- Never expose internal error details

Domain errors propagate to ``events.handlers.errors.exception_handler``.
"""

from django.conf import settings
from rest_framework import serializers, status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from events import container
from events.cache import cached, catalog_key, event_key
from events.domain import ActingUser, EventStatus, Role
from events.handlers.serializers import (
    EventCreateSerializer,
    EventSerializer,
    EventStatsSerializer,
    EventUpdateSerializer,
    RegistrationCreateSerializer,
    RegistrationDetailSerializer,
    RegistrationNotesSerializer,
    RegistrationSerializer,
)
from events.services.common import parse_event_id
from events.services.queries import DEFAULT_UPCOMING_LIMIT

MAX_UPCOMING_LIMIT = 50


def acting_user(request: Request) -> ActingUser:
    user = request.user
    return ActingUser(id=user.pk, role=Role.ADMIN if user.is_staff else Role.PARTICIPANT)


def _status_param(request: Request) -> EventStatus | None:
    value = request.query_params.get("status")
    if not value:
        return None
    try:
        return EventStatus(value)
    except ValueError:
        raise serializers.ValidationError({"status": f"Unknown status '{value}'."})


def _limit_param(request: Request) -> int:
    value = request.query_params.get("limit", DEFAULT_UPCOMING_LIMIT)
    try:
        limit = int(value)
    except (TypeError, ValueError):
        raise serializers.ValidationError({"limit": "Must be an integer."})
    return max(1, min(limit, MAX_UPCOMING_LIMIT))


class PublicReadView(APIView):
    """GET is open to everyone, other methods need an authenticated user."""

    def get_permissions(self):
        if self.request.method == "GET":
            return [AllowAny()]
        return [IsAuthenticated()]


class EventListView(PublicReadView):
    """Handler for GET/POST /api/events"""

    def get(self, request: Request) -> Response:
        event_status = _status_param(request)
        key = catalog_key(f"list:{event_status.value if event_status else 'all'}")
        data = cached(
            key,
            lambda: EventSerializer(
                container.event_queries().list_published(event_status), many=True
            ).data,
        )
        return Response(data)

    def post(self, request: Request) -> Response:
        serializer = EventCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        event = container.event_service().create(acting_user(request), serializer.to_command())
        return Response(EventSerializer(event).data, status=status.HTTP_201_CREATED)


class EventAdminListView(APIView):
    """Handler for GET /api/events/admin"""

    def get(self, request: Request) -> Response:
        events = container.event_queries().list_for_admin(acting_user(request))
        return Response(EventSerializer(events, many=True).data)


class EventUpcomingView(APIView):
    """Handler for GET /api/events/upcoming"""

    permission_classes = [AllowAny]

    def get(self, request: Request) -> Response:
        limit = _limit_param(request)
        data = cached(
            catalog_key(f"upcoming:{limit}"),
            lambda: EventSerializer(
                container.event_queries().list_upcoming(limit), many=True
            ).data,
            timeout=settings.UPCOMING_CACHE_TIMEOUT,
        )
        return Response(data)


class EventFeaturedView(APIView):
    """Handler for GET /api/events/featured"""

    permission_classes = [AllowAny]

    def get(self, request: Request) -> Response:
        data = cached(
            catalog_key("featured"),
            lambda: EventSerializer(container.event_queries().list_featured(), many=True).data,
        )
        return Response(data)


class EventDetailView(PublicReadView):
    """Handler for GET/PATCH/DELETE /api/events/{event_id}"""

    def get(self, request: Request, event_id: str) -> Response:
        parsed_id = parse_event_id(event_id)
        data = cached(
            event_key(parsed_id),
            lambda: EventSerializer(container.event_queries().get_public(parsed_id)).data,
        )
        return Response(data)

    def patch(self, request: Request, event_id: str) -> Response:
        serializer = EventUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        event = container.event_service().update(
            acting_user(request), event_id, serializer.to_command()
        )
        return Response(EventSerializer(event).data)

    def delete(self, request: Request, event_id: str) -> Response:
        container.event_service().delete(acting_user(request), event_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class EventAdminDetailView(APIView):
    """Handler for GET /api/events/{event_id}/admin"""

    def get(self, request: Request, event_id: str) -> Response:
        event = container.event_queries().get_for_admin(acting_user(request), event_id)
        return Response(EventSerializer(event).data)


class EventPublishView(APIView):
    """Handler for POST /api/events/{event_id}/publish"""

    def post(self, request: Request, event_id: str) -> Response:
        event = container.event_service().publish(acting_user(request), event_id)
        return Response(EventSerializer(event).data)


class EventCancelView(APIView):
    """Handler for POST /api/events/{event_id}/cancel"""

    def post(self, request: Request, event_id: str) -> Response:
        event = container.event_service().cancel(acting_user(request), event_id)
        return Response(EventSerializer(event).data)


class RegistrationListView(APIView):
    """Handler for GET/POST /api/registrations"""

    def get(self, request: Request) -> Response:
        details = container.registration_queries().list_all(acting_user(request))
        return Response(RegistrationDetailSerializer(details, many=True).data)

    def post(self, request: Request) -> Response:
        serializer = RegistrationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        registration = container.registration_service().create(
            acting_user(request),
            str(serializer.validated_data["event_id"]),
            serializer.validated_data.get("notes"),
        )
        return Response(
            RegistrationSerializer(registration).data, status=status.HTTP_201_CREATED
        )


class MyRegistrationsView(APIView):
    """Handler for GET /api/registrations/mine"""

    def get(self, request: Request) -> Response:
        details = container.registration_queries().list_mine(acting_user(request))
        return Response(RegistrationDetailSerializer(details, many=True).data)


class PendingRegistrationsView(APIView):
    """Handler for GET /api/registrations/pending"""

    def get(self, request: Request) -> Response:
        details = container.registration_queries().list_pending(
            acting_user(request), request.query_params.get("event_id")
        )
        return Response(RegistrationDetailSerializer(details, many=True).data)


class EventRegistrationsView(APIView):
    """Handler for GET /api/registrations/event/{event_id}"""

    def get(self, request: Request, event_id: str) -> Response:
        details = container.registration_queries().list_by_event(acting_user(request), event_id)
        return Response(RegistrationDetailSerializer(details, many=True).data)


class RegistrationCheckView(APIView):
    """Handler for GET /api/registrations/check/{event_id}"""

    def get(self, request: Request, event_id: str) -> Response:
        registered = container.registration_queries().is_registered(
            acting_user(request), event_id
        )
        return Response({"is_registered": registered})


class RegistrationStatsView(APIView):
    """Handler for GET /api/registrations/stats/{event_id}"""

    def get(self, request: Request, event_id: str) -> Response:
        stats = container.registration_queries().event_stats(acting_user(request), event_id)
        return Response(EventStatsSerializer(stats).data)


class RegistrationDetailView(APIView):
    """Handler for GET/PATCH/DELETE /api/registrations/{registration_id}"""

    def get(self, request: Request, registration_id: str) -> Response:
        detail = container.registration_queries().get(acting_user(request), registration_id)
        return Response(RegistrationDetailSerializer(detail).data)

    def patch(self, request: Request, registration_id: str) -> Response:
        serializer = RegistrationNotesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        registration = container.registration_service().update_notes(
            acting_user(request), registration_id, serializer.validated_data["notes"]
        )
        return Response(RegistrationSerializer(registration).data)

    def delete(self, request: Request, registration_id: str) -> Response:
        container.registration_service().remove(acting_user(request), registration_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class RegistrationTransitionView(APIView):
    """POST handler that runs one named registration transition."""

    transition: str = ""

    def post(self, request: Request, registration_id: str) -> Response:
        service = container.registration_service()
        registration = getattr(service, self.transition)(acting_user(request), registration_id)
        return Response(RegistrationSerializer(registration).data)


class RegistrationCancelView(RegistrationTransitionView):
    """Handler for POST /api/registrations/{registration_id}/cancel"""

    transition = "cancel"


class RegistrationValidateView(RegistrationTransitionView):
    """Handler for POST /api/registrations/{registration_id}/validate"""

    transition = "validate"


class RegistrationRefuseView(RegistrationTransitionView):
    """Handler for POST /api/registrations/{registration_id}/refuse"""

    transition = "refuse"


class RegistrationAttendView(RegistrationTransitionView):
    """Handler for POST /api/registrations/{registration_id}/attend"""

    transition = "mark_attended"
