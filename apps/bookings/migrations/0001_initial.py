import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


def _money(**kwargs):
    return models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, **kwargs)


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("accommodations", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Booking",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("check_in", models.DateField()),
                (
                    "check_out",
                    models.DateField(help_text="Departure day; the night before is the last one booked."),
                ),
                (
                    "guests",
                    models.PositiveSmallIntegerField(
                        default=1,
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                ("nationality", models.CharField(blank=True, default="", max_length=50)),
                ("primary_name", models.CharField(max_length=255)),
                ("additional_names", models.TextField(blank=True, default="")),
                ("notes", models.TextField(blank=True, default="")),
                (
                    "status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("confirmed", "Confirmed"), ("cancelled", "Cancelled")],
                        default="pending",
                        max_length=20,
                    ),
                ),
                ("gross_value", _money(help_text="Amount charged to the guest.")),
                ("municipal_tax", _money()),
                ("commission", _money(help_text="Platform commission.")),
                ("bank_fee", _money()),
                ("vat", _money()),
                ("platform", models.CharField(blank=True, default="", max_length=50)),
                ("value_net_of_commissions", _money(editable=False)),
                ("value_net_of_vat", _money(editable=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "accommodation",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="bookings",
                        to="accommodations.accommodation",
                    ),
                ),
            ],
            options={
                "verbose_name": "Booking",
                "verbose_name_plural": "Bookings",
                "ordering": ["-check_in", "-id"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("check_out__gt", models.F("check_in"))),
                        name="booking_valid_dates",
                    ),
                ],
                "indexes": [
                    models.Index(fields=["accommodation", "check_in", "check_out"], name="booking_stay_idx"),
                    models.Index(fields=["status"], name="booking_status_idx"),
                ],
            },
        ),
    ]
