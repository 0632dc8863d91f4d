from rest_framework import status
from rest_framework.response import Response

from core.api import StorageAPIView

from .serializers import BookingLookupSerializer, BookingSerializer
from .services.lifecycle import (
    create_booking,
    delete_booking,
    delete_past_bookings,
    find_bookings,
    list_bookings,
)


class BookingCreateView(StorageAPIView):
    """Accept a booking request from a customer."""

    def post(self, request, *args, **kwargs):
        serializer = BookingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = create_booking(self.get_storage(), serializer.validated_data)
        return Response(
            {
                "message": "Booking created successfully",
                "booking": BookingSerializer(booking).data,
            },
            status=status.HTTP_201_CREATED,
        )


class BookingLookupView(StorageAPIView):
    """Find a booking by its code, or every booking made from a phone number."""

    def get(self, request, *args, **kwargs):
        lookup = BookingLookupSerializer(data=request.query_params)
        if not lookup.is_valid():
            return Response(
                {"error": "Either booking_id or contact_number is required"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        booking_id = lookup.validated_data.get("booking_id")
        bookings = find_bookings(
            self.get_storage(),
            booking_id=booking_id,
            contact_number=lookup.validated_data.get("contact_number"),
        )
        if not bookings:
            return Response({"error": "No bookings found"}, status=status.HTTP_404_NOT_FOUND)

        if booking_id and len(bookings) == 1:
            return Response({"booking": BookingSerializer(bookings[0]).data})
        return Response({"bookings": BookingSerializer(bookings, many=True).data})


class BookingListView(StorageAPIView):
    def get(self, request, *args, **kwargs):
        bookings = list_bookings(self.get_storage())
        return Response(
            {
                "bookings": BookingSerializer(bookings, many=True).data,
                "count": len(bookings),
            }
        )


class PastBookingsView(StorageAPIView):
    def delete(self, request, *args, **kwargs):
        deleted = delete_past_bookings(self.get_storage())
        return Response(
            {
                "message": "Past bookings (before today) deleted successfully",
                "count": deleted,
            }
        )


class BookingDetailView(StorageAPIView):
    def delete(self, request, booking_id, *args, **kwargs):
        deleted = delete_booking(self.get_storage(), booking_id)
        return Response(
            {
                "message": "Booking deleted successfully",
                "id": booking_id,
                "count": deleted,
            }
        )
