import django.db.models.deletion
import encrypted_fields.fields
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("boxoffice_events", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Ticket",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("reference", models.CharField(db_index=True, max_length=32)),
                ("code", models.CharField(max_length=32, unique=True)),
                (
                    "category",
                    models.CharField(
                        choices=[("adult", "Adult"), ("student", "Student"), ("child", "Child")],
                        max_length=20,
                    ),
                ),
                ("quantity", models.PositiveIntegerField(default=1)),
                (
                    "status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("active", "Active"), ("cancelled", "Cancelled")],
                        default="pending",
                        max_length=20,
                    ),
                ),
                ("purchaser_name", models.CharField(max_length=255)),
                ("purchaser_phone", encrypted_fields.fields.EncryptedCharField(max_length=32)),
                ("purchaser_email", models.EmailField(blank=True, default="", max_length=254)),
                (
                    "student_id",
                    encrypted_fields.fields.EncryptedCharField(blank=True, default=None, max_length=50, null=True),
                ),
                ("institution", models.CharField(blank=True, default="", max_length=100)),
                ("unit_price", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("total_amount", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                (
                    "hold_expires_at",
                    models.DateTimeField(
                        blank=True,
                        help_text="Unpaid pending tickets are cancelled after this time.",
                        null=True,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "session",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="tickets",
                        to="boxoffice_events.eventsession",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["session", "status"], name="ticket_session_status_idx")],
            },
        ),
    ]
