from django.db import models
from django.utils import timezone


class Employee(models.Model):
    """Band staff member; owns the payments made to them."""

    name = models.CharField(max_length=200)
    mobile_number = models.CharField(max_length=30)
    email = models.EmailField()
    address = models.CharField(max_length=255)
    is_employee = models.BooleanField(default=True)
    total_amount_to_be_paid = models.FloatField(default=0)
    total_amount_paid_in_advance = models.FloatField(default=0)
    username = models.CharField(max_length=150, unique=True)
    password = models.CharField(max_length=128)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.name} ({self.username})"


class Payment(models.Model):
    amount_paid = models.FloatField()
    date = models.DateTimeField(db_index=True)
    employee = models.ForeignKey("Employee", on_delete=models.CASCADE, related_name="payments")
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-date", "-id"]

    def __str__(self):
        return f"{self.amount_paid} to {self.employee_id} on {self.date:%Y-%m-%d}"
