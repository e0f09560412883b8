"""Integration tests for the event endpoints.

Run with: pytest tests/test_event_catalog.py -v
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from rest_framework.test import APIClient

from conftest import create_event, event_payload


@pytest.mark.django_db
class TestEventList:
    """Tests for GET /api/events"""

    def test_public_list_hides_drafts(self, api_client: APIClient, staff_client: APIClient):
        published = create_event(staff_client, publish=True)
        create_event(staff_client, title="Secret draft")

        response = api_client.get("/api/events")

        assert response.status_code == 200
        assert [event["id"] for event in response.data] == [published["id"]]

    def test_empty_catalog(self, api_client: APIClient):
        response = api_client.get("/api/events")

        assert response.status_code == 200
        assert response.data == []

    def test_unknown_status_filter(self, api_client: APIClient):
        response = api_client.get("/api/events", {"status": "bogus"})

        assert response.status_code == 400

    def test_catalog_reflects_publish(
        self, api_client: APIClient, staff_client: APIClient, django_capture_on_commit_callbacks
    ):
        draft = create_event(staff_client)
        assert api_client.get("/api/events").data == []

        with django_capture_on_commit_callbacks(execute=True):
            staff_client.post(f"/api/events/{draft['id']}/publish")

        assert len(api_client.get("/api/events").data) == 1

    def test_admin_list_requires_staff(
        self, staff_client: APIClient, member_client: APIClient
    ):
        create_event(staff_client)

        assert len(staff_client.get("/api/events/admin").data) == 1
        assert member_client.get("/api/events/admin").status_code == 403


@pytest.mark.django_db
class TestEventDetail:
    """Tests for GET /api/events/{id}"""

    def test_get_event_returns_details(self, api_client: APIClient, staff_client: APIClient):
        event = create_event(staff_client, publish=True, price="12.50")

        response = api_client.get(f"/api/events/{event['id']}")

        assert response.status_code == 200
        assert response.data["title"] == "Spring Meetup"
        assert response.data["price"] == "12.50"
        assert response.data["spots_left"] == 10

    def test_get_event_not_found(self, api_client: APIClient):
        response = api_client.get(f"/api/events/{uuid.uuid4()}")

        assert response.status_code == 404
        assert response.data["code"] == "EVENT_NOT_FOUND"

    def test_get_event_invalid_id_format(self, api_client: APIClient):
        response = api_client.get("/api/events/not-a-uuid")

        assert response.status_code == 400
        assert response.data["code"] == "INVALID_EVENT_ID"

    def test_draft_is_not_public(self, api_client: APIClient, staff_client: APIClient):
        draft = create_event(staff_client)

        assert api_client.get(f"/api/events/{draft['id']}").status_code == 404
        assert staff_client.get(f"/api/events/{draft['id']}/admin").status_code == 200


@pytest.mark.django_db
class TestEventWrites:
    def test_create_requires_staff(self, api_client: APIClient, member_client: APIClient):
        assert api_client.post("/api/events", event_payload(), format="json").status_code == 403

        response = member_client.post("/api/events", event_payload(), format="json")

        assert response.status_code == 403
        assert response.data["code"] == "PERMISSION_DENIED"

    def test_create_rejects_end_before_start(self, staff_client: APIClient):
        start = datetime.now(timezone.utc) + timedelta(days=3)
        payload = event_payload(
            start_date=start.isoformat(), end_date=(start - timedelta(hours=1)).isoformat()
        )

        response = staff_client.post("/api/events", payload, format="json")

        assert response.status_code == 400
        assert response.data["code"] == "DATE_INVALID"

    def test_create_rejects_zero_capacity(self, staff_client: APIClient):
        response = staff_client.post("/api/events", event_payload(capacity=0), format="json")

        assert response.status_code == 400
        assert "capacity" in response.data

    def test_publish_twice_conflicts(self, staff_client: APIClient):
        event = create_event(staff_client)
        staff_client.post(f"/api/events/{event['id']}/publish")

        response = staff_client.post(f"/api/events/{event['id']}/publish")

        assert response.status_code == 409
        assert response.data["code"] == "NOT_DRAFT"

    def test_cancel_twice_conflicts(self, staff_client: APIClient):
        event = create_event(staff_client, publish=True)

        first = staff_client.post(f"/api/events/{event['id']}/cancel")
        second = staff_client.post(f"/api/events/{event['id']}/cancel")

        assert first.data["status"] == "cancelled"
        assert second.status_code == 409
        assert second.data["code"] == "ALREADY_CANCELLED"

    def test_patch_details(self, staff_client: APIClient):
        event = create_event(staff_client)

        response = staff_client.patch(
            f"/api/events/{event['id']}", {"title": "Autumn Meetup"}, format="json"
        )

        assert response.status_code == 200
        assert response.data["title"] == "Autumn Meetup"

    def test_patch_clears_image(self, staff_client: APIClient):
        event = create_event(staff_client, image_url="https://example.com/poster.png")

        response = staff_client.patch(
            f"/api/events/{event['id']}", {"image_url": None}, format="json"
        )

        assert response.status_code == 200
        assert response.data["image_url"] is None
        assert response.data["title"] == event["title"]

    def test_patch_mixing_groups_is_rejected(self, staff_client: APIClient):
        event = create_event(staff_client)

        response = staff_client.patch(
            f"/api/events/{event['id']}", {"title": "Autumn Meetup", "capacity": 5}, format="json"
        )

        assert response.status_code == 400

    def test_patch_capacity_below_registrations(
        self, staff_client: APIClient, member_client: APIClient, django_user_model
    ):
        event = create_event(staff_client, publish=True, capacity=3)
        other_client = APIClient()
        other_client.force_authenticate(django_user_model.objects.create_user(username="other"))
        for client in (member_client, other_client):
            client.post("/api/registrations", {"event_id": event["id"]}, format="json")

        too_low = staff_client.patch(
            f"/api/events/{event['id']}", {"capacity": 1}, format="json"
        )
        fine = staff_client.patch(f"/api/events/{event['id']}", {"capacity": 5}, format="json")

        assert too_low.status_code == 409
        assert too_low.data["code"] == "CAPACITY_TOO_LOW"
        assert fine.data["capacity"] == 5
        assert fine.data["registered_count"] == 2

    def test_delete_blocked_by_registrations(
        self, staff_client: APIClient, member_client: APIClient
    ):
        event = create_event(staff_client, publish=True)
        registration = member_client.post(
            "/api/registrations", {"event_id": event["id"]}, format="json"
        ).data

        blocked = staff_client.delete(f"/api/events/{event['id']}")
        member_client.post(f"/api/registrations/{registration['id']}/cancel")
        deleted = staff_client.delete(f"/api/events/{event['id']}")

        assert blocked.status_code == 409
        assert blocked.data["code"] == "HAS_REGISTRATIONS"
        assert deleted.status_code == 204


@pytest.mark.django_db
class TestUpcomingAndFeatured:
    def test_upcoming_limit(self, api_client: APIClient, staff_client: APIClient):
        for _ in range(3):
            create_event(staff_client, publish=True)

        response = api_client.get("/api/events/upcoming", {"limit": 2})

        assert response.status_code == 200
        assert len(response.data) == 2

    def test_featured_only(self, api_client: APIClient, staff_client: APIClient):
        featured = create_event(staff_client, publish=True, is_featured=True)
        create_event(staff_client, publish=True)

        response = api_client.get("/api/events/featured")

        assert [event["id"] for event in response.data] == [featured["id"]]
