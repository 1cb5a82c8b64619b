from decimal import Decimal

import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Room",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("pod_id", models.CharField(blank=True, max_length=20, unique=True)),
                (
                    "floor",
                    models.CharField(
                        choices=[
                            ("women-only", "Women only"),
                            ("men-only", "Men only"),
                            ("couples", "Couples"),
                            ("business", "Business"),
                        ],
                        max_length=20,
                    ),
                ),
                (
                    "quality",
                    models.CharField(
                        choices=[
                            ("classic", "Classic Pearl"),
                            ("milk", "Milk Pearl"),
                            ("golden", "Golden Pearl"),
                            ("crystal", "Crystal Boba Suite"),
                            ("matcha", "Matcha Pearl"),
                        ],
                        default="classic",
                        max_length=20,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("available", "Available"),
                            ("occupied", "Occupied"),
                            ("maintenance", "Maintenance"),
                            ("reserved", "Reserved"),
                        ],
                        default="available",
                        max_length=20,
                    ),
                ),
                (
                    "price_per_night",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                ("description", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Pod",
                "verbose_name_plural": "Pods",
                "ordering": ["floor", "pod_id"],
                "indexes": [
                    models.Index(fields=["status", "floor", "quality"], name="room_status_floor_quality_idx"),
                    models.Index(fields=["price_per_night"], name="room_price_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("price_per_night__gte", 0)),
                        name="room_price_non_negative",
                    ),
                ],
            },
        ),
    ]
