from datetime import datetime, time

from django.utils import timezone
from django.utils.dateparse import parse_date
from rest_framework import serializers


class EventDateField(serializers.DateTimeField):
    """Accepts full ISO-8601 timestamps as well as plain ``YYYY-MM-DD`` dates."""

    def to_internal_value(self, value):
        if isinstance(value, str):
            try:
                parsed = parse_date(value.strip())
            except ValueError:
                parsed = None
            if parsed is not None:
                return timezone.make_aware(datetime.combine(parsed, time.min))
        return super().to_internal_value(value)


class BookingSerializer(serializers.Serializer):
    """Validates booking requests and renders stored booking records (plain dicts)."""

    bookingId = serializers.CharField(source="booking_id", read_only=True)
    name = serializers.CharField(max_length=200)
    email = serializers.EmailField()
    phone = serializers.CharField(max_length=30)
    additionalPhone = serializers.CharField(
        source="additional_phone", max_length=30, required=False, allow_blank=True, default=""
    )
    packageType = serializers.CharField(source="package_type", max_length=120)
    date = EventDateField(source="event_date")
    venue = serializers.CharField(max_length=255)
    city = serializers.CharField(max_length=120)
    customization = serializers.CharField(required=False, allow_blank=True, default="")
    bandTime = serializers.CharField(source="band_time", max_length=60, required=False, allow_blank=True, default="")
    customTimeSlot = serializers.CharField(
        source="custom_time_slot", max_length=60, required=False, allow_blank=True, default=""
    )
    numberOfPeople = serializers.IntegerField(source="number_of_people", min_value=0, required=False, default=0)
    numberOfLights = serializers.IntegerField(source="number_of_lights", min_value=0, required=False, default=0)
    numberOfDhols = serializers.IntegerField(source="number_of_dhols", min_value=0, required=False, default=0)
    ghodaBaggi = serializers.IntegerField(source="ghoda_baggi", min_value=0, required=False, default=0)
    ghodiForBaraat = serializers.BooleanField(source="ghodi_for_baraat", required=False, default=False)
    fireworks = serializers.BooleanField(required=False, default=False)
    fireworksAmount = serializers.IntegerField(source="fireworks_amount", min_value=0, required=False, default=0)
    flowerCanon = serializers.BooleanField(source="flower_canon", required=False, default=False)
    DoliForVidai = serializers.BooleanField(source="doli_for_vidai", required=False, default=False)
    amount = serializers.IntegerField()
    advancePayment = serializers.IntegerField(source="advance_payment")
    phoneVerified = serializers.BooleanField(source="phone_verified", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)


class BookingLookupSerializer(serializers.Serializer):
    booking_id = serializers.CharField(required=False, allow_blank=True)
    contact_number = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        if not attrs.get("booking_id") and not attrs.get("contact_number"):
            raise serializers.ValidationError("Either booking_id or contact_number is required")
        return attrs
