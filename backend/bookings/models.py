from django.db import models
from django.utils import timezone


class Booking(models.Model):
    """A customer's reserved event; keyed by the short code shared with the customer."""

    booking_id = models.CharField(max_length=12, primary_key=True)
    name = models.CharField(max_length=200)
    email = models.EmailField()
    phone = models.CharField(max_length=30, db_index=True)
    additional_phone = models.CharField(max_length=30, blank=True)
    package_type = models.CharField(max_length=120)
    event_date = models.DateTimeField(db_index=True)
    venue = models.CharField(max_length=255)
    city = models.CharField(max_length=120)
    customization = models.TextField(blank=True)
    band_time = models.CharField(max_length=60, blank=True)
    custom_time_slot = models.CharField(max_length=60, blank=True)
    number_of_people = models.PositiveIntegerField(default=0)
    number_of_lights = models.PositiveIntegerField(default=0)
    number_of_dhols = models.PositiveIntegerField(default=0)
    ghoda_baggi = models.PositiveIntegerField(default=0)
    ghodi_for_baraat = models.BooleanField(default=False)
    fireworks = models.BooleanField(default=False)
    fireworks_amount = models.PositiveIntegerField(default=0)
    flower_canon = models.BooleanField(default=False)
    doli_for_vidai = models.BooleanField(default=False)
    amount = models.IntegerField()
    advance_payment = models.IntegerField()
    phone_verified = models.BooleanField(default=False)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.booking_id} ({self.name}, {self.event_date:%Y-%m-%d})"
