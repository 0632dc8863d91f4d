from datetime import timedelta

from django.apps import apps
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from accounts.services.admins import create_admin_user
from bookings.services.lifecycle import create_booking
from core.errors import Conflict
from core.storage import BOOKINGS, EMPLOYEES
from employees.services.payments import add_payment
from employees.services.roster import create_employee

SEED_PASSWORD = "ModernBand123!"
ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "AdminModernBand123!"


class Command(BaseCommand):
    help = "Populate the configured store with sample bookings, employees and an admin user."

    def handle(self, *args, **options):
        if not settings.DEBUG:
            raise CommandError("Refusing to seed data while DEBUG is False.")

        storage = apps.get_app_config("core").storage

        self.stdout.write(self.style.MIGRATE_HEADING("Ensuring admin user"))
        self._ensure(
            create_admin_user,
            storage,
            {
                "name": "Band Admin",
                "mobile_number": "9000000000",
                "email": "admin@modernband.test",
                "username": ADMIN_USERNAME,
                "password": ADMIN_PASSWORD,
            },
        )

        self.stdout.write(self.style.MIGRATE_HEADING("Creating employees & payments"))
        for username, name, mobile in (
            ("ravi", "Ravi Kumar", "9000000001"),
            ("sunil", "Sunil Sharma", "9000000002"),
        ):
            created = self._ensure(
                create_employee,
                storage,
                {
                    "name": name,
                    "mobile_number": mobile,
                    "email": f"{username}@modernband.test",
                    "address": "Main Bazaar, Jaipur",
                    "total_amount_to_be_paid": 30000,
                    "total_amount_paid_in_advance": 5000,
                    "username": username,
                    "password": SEED_PASSWORD,
                },
            )
            if created:
                add_payment(storage, username, amount_paid=2500, paid_on=timezone.localdate())

        self.stdout.write(self.style.MIGRATE_HEADING("Creating bookings"))
        midnight = timezone.localtime().replace(hour=0, minute=0, second=0, microsecond=0)
        booking_ids = []
        for days, name, phone, venue, package in (
            (14, "Greta Guest", "9876543210", "Rambagh Palace", "Royal Baraat"),
            (30, "Aman Singh", "9876500000", "City Palace", "Silver"),
        ):
            booking = create_booking(
                storage,
                {
                    "name": name,
                    "email": f"{name.split()[0].lower()}@example.test",
                    "phone": phone,
                    "additional_phone": "",
                    "package_type": package,
                    "event_date": midnight + timedelta(days=days),
                    "venue": venue,
                    "city": "Jaipur",
                    "customization": "",
                    "band_time": "Evening",
                    "custom_time_slot": "",
                    "number_of_people": 15,
                    "number_of_lights": 20,
                    "number_of_dhols": 2,
                    "ghoda_baggi": 1,
                    "ghodi_for_baraat": True,
                    "fireworks": False,
                    "fireworks_amount": 0,
                    "flower_canon": True,
                    "doli_for_vidai": False,
                    "amount": 85000,
                    "advance_payment": 20000,
                },
            )
            booking_ids.append(booking["booking_id"])

        self.stdout.write(self.style.SUCCESS("Development seed data created."))
        self.stdout.write(
            self.style.NOTICE(
                f"{storage.count(EMPLOYEES, {})} employees, {storage.count(BOOKINGS, {})} bookings; "
                f"new booking IDs {', '.join(booking_ids)}"
            )
        )
        self.stdout.write(self.style.NOTICE(f"Employee accounts use password: {SEED_PASSWORD}"))
        self.stdout.write(self.style.NOTICE(f"Admin {ADMIN_USERNAME} password: {ADMIN_PASSWORD}"))

    def _ensure(self, create, storage, data) -> bool:
        try:
            create(storage, data)
        except Conflict:
            self.stdout.write(f"  {data['username']} already exists, skipping")
            return False
        return True
