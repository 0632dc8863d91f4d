from django.db import models
from django.utils import timezone


class AdminUser(models.Model):
    """Office administrator allowed to manage bookings, employees and payments."""

    name = models.CharField(max_length=200)
    mobile_number = models.CharField(max_length=30)
    email = models.EmailField()
    username = models.CharField(max_length=150, unique=True)
    password = models.CharField(max_length=128)
    is_admin_user = models.BooleanField(default=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return self.username
