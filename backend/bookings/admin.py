from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ("booking_id", "name", "phone", "package_type", "event_date", "city", "amount")
    list_filter = ("package_type", "city")
    search_fields = ("booking_id", "name", "phone", "email")
    ordering = ("-created_at",)
    readonly_fields = ("booking_id", "created_at")
