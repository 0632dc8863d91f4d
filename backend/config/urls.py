from django.contrib import admin
from django.urls import path

from accounts.api import AdminLoginView, AdminUserDetailView, AdminUserListCreateView, LoginView
from bookings.api import (
    BookingCreateView,
    BookingDetailView,
    BookingListView,
    BookingLookupView,
    PastBookingsView,
)
from core.api import HealthView
from employees.api import EmployeeDetailView, EmployeeListCreateView, PaymentCreateView, PaymentDetailView

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/health", HealthView.as_view(), name="health"),
    path("api/book", BookingCreateView.as_view(), name="booking-create"),
    path("api/booking", BookingLookupView.as_view(), name="booking-lookup"),
    path("api/bookings", BookingListView.as_view(), name="booking-list"),
    # Registered before the detail route so "past" is never read as a booking id.
    path("api/bookings/past", PastBookingsView.as_view(), name="booking-past"),
    path("api/bookings/<str:booking_id>", BookingDetailView.as_view(), name="booking-detail"),
    path("api/employees", EmployeeListCreateView.as_view(), name="employee-list"),
    path("api/employees/<str:username>", EmployeeDetailView.as_view(), name="employee-detail"),
    path(
        "api/employees/<str:username>/payments",
        PaymentCreateView.as_view(),
        name="employee-payment-create",
    ),
    path(
        "api/employees/<str:username>/payments/<str:payment_id>",
        PaymentDetailView.as_view(),
        name="employee-payment-detail",
    ),
    path("api/login", LoginView.as_view(), name="employee-login"),
    path("api/signin", AdminLoginView.as_view(), name="admin-login"),
    path("api/admin", AdminUserListCreateView.as_view(), name="admin-user-list"),
    path("api/admin/<str:username>", AdminUserDetailView.as_view(), name="admin-user-detail"),
]

handler404 = "core.api.not_found"
