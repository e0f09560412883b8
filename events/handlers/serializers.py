"""Serializers for request input and for rendering domain models."""

from decimal import Decimal

from rest_framework import serializers

from events.domain import CreateEvent, UpdateCapacity, UpdateDates, UpdateDetails
from events.domain.value_objects import MAX_CAPACITY, MIN_CAPACITY


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model."""

    id = serializers.UUIDField(source="id.value")
    title = serializers.CharField()
    description = serializers.CharField()
    location = serializers.CharField()
    start_date = serializers.DateTimeField(source="schedule.start")
    end_date = serializers.DateTimeField(source="schedule.end")
    capacity = serializers.IntegerField(source="capacity.value")
    registered_count = serializers.IntegerField()
    spots_left = serializers.IntegerField()
    status = serializers.CharField(source="status.value")
    price = serializers.DecimalField(max_digits=10, decimal_places=2, source="price.amount")
    is_featured = serializers.BooleanField()
    image_url = serializers.URLField(allow_null=True)
    created_by_id = serializers.IntegerField()
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


class RegistrationSerializer(serializers.Serializer):
    """Serializer for Registration domain model."""

    id = serializers.UUIDField(source="id.value")
    event_id = serializers.UUIDField(source="event_id.value")
    user_id = serializers.IntegerField()
    status = serializers.CharField(source="status.value")
    notes = serializers.CharField(allow_null=True)
    registered_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


class RegistrationDetailSerializer(serializers.Serializer):
    registration = RegistrationSerializer()
    event_title = serializers.CharField()
    event_start_date = serializers.DateTimeField()
    event_status = serializers.CharField(source="event_status.value")
    username = serializers.CharField()


class EventStatsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    pending = serializers.IntegerField()
    confirmed = serializers.IntegerField()
    cancelled = serializers.IntegerField()
    attended = serializers.IntegerField()


class EventCreateSerializer(serializers.Serializer):
    title = serializers.CharField(min_length=3, max_length=200)
    description = serializers.CharField(min_length=10)
    location = serializers.CharField(max_length=500)
    start_date = serializers.DateTimeField()
    end_date = serializers.DateTimeField()
    capacity = serializers.IntegerField(min_value=MIN_CAPACITY, max_value=MAX_CAPACITY)
    price = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal("0"), default=Decimal("0")
    )
    image_url = serializers.URLField(max_length=500, required=False, allow_null=True)
    is_featured = serializers.BooleanField(default=False)
    publish = serializers.BooleanField(default=False)

    def to_command(self) -> CreateEvent:
        return CreateEvent(**self.validated_data)


class EventUpdateSerializer(serializers.Serializer):
    """Partial event update; the fields sent pick exactly one update command."""

    DETAIL_FIELDS = ("title", "description", "location", "image_url", "price", "is_featured")
    DATE_FIELDS = ("start_date", "end_date")

    title = serializers.CharField(min_length=3, max_length=200, required=False)
    description = serializers.CharField(min_length=10, required=False)
    location = serializers.CharField(max_length=500, required=False)
    image_url = serializers.URLField(max_length=500, required=False, allow_null=True)
    price = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal("0"), required=False
    )
    is_featured = serializers.BooleanField(required=False)
    capacity = serializers.IntegerField(
        min_value=MIN_CAPACITY, max_value=MAX_CAPACITY, required=False
    )
    start_date = serializers.DateTimeField(required=False)
    end_date = serializers.DateTimeField(required=False)

    def validate(self, attrs):
        groups = [
            name
            for name, fields in (
                ("details", self.DETAIL_FIELDS),
                ("capacity", ("capacity",)),
                ("dates", self.DATE_FIELDS),
            )
            if any(field in attrs for field in fields)
        ]
        if len(groups) != 1:
            raise serializers.ValidationError(
                "Send exactly one of: descriptive fields, capacity, or dates."
            )
        return attrs

    def to_command(self) -> UpdateDetails | UpdateCapacity | UpdateDates:
        data = self.validated_data
        if "capacity" in data:
            return UpdateCapacity(capacity=data["capacity"])
        if any(field in data for field in self.DATE_FIELDS):
            return UpdateDates(
                start_date=data.get("start_date"), end_date=data.get("end_date")
            )
        if "image_url" in data and data["image_url"] is None:
            data = {**data, "clear_image_url": True}
            del data["image_url"]
        return UpdateDetails(**data)


class RegistrationCreateSerializer(serializers.Serializer):
    event_id = serializers.UUIDField()
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class RegistrationNotesSerializer(serializers.Serializer):
    notes = serializers.CharField(allow_blank=True, allow_null=True)
