import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Booking",
            fields=[
                ("booking_id", models.CharField(max_length=12, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=200)),
                ("email", models.EmailField(max_length=254)),
                ("phone", models.CharField(db_index=True, max_length=30)),
                ("additional_phone", models.CharField(blank=True, max_length=30)),
                ("package_type", models.CharField(max_length=120)),
                ("event_date", models.DateTimeField(db_index=True)),
                ("venue", models.CharField(max_length=255)),
                ("city", models.CharField(max_length=120)),
                ("customization", models.TextField(blank=True)),
                ("band_time", models.CharField(blank=True, max_length=60)),
                ("custom_time_slot", models.CharField(blank=True, max_length=60)),
                ("number_of_people", models.PositiveIntegerField(default=0)),
                ("number_of_lights", models.PositiveIntegerField(default=0)),
                ("number_of_dhols", models.PositiveIntegerField(default=0)),
                ("ghoda_baggi", models.PositiveIntegerField(default=0)),
                ("ghodi_for_baraat", models.BooleanField(default=False)),
                ("fireworks", models.BooleanField(default=False)),
                ("fireworks_amount", models.PositiveIntegerField(default=0)),
                ("flower_canon", models.BooleanField(default=False)),
                ("doli_for_vidai", models.BooleanField(default=False)),
                ("amount", models.IntegerField()),
                ("advance_payment", models.IntegerField()),
                ("phone_verified", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
    ]
