import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("boxoffice_booking", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="SMSTemplate",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100, unique=True)),
                ("description", models.TextField(blank=True, default="")),
                ("content", models.TextField()),
                (
                    "variables",
                    models.JSONField(blank=True, default=list, help_text="Filled in from the content on save."),
                ),
                (
                    "category",
                    models.CharField(
                        choices=[
                            ("purchase", "Purchase"),
                            ("verification", "Payment verification"),
                            ("reminder", "Reminder"),
                            ("general", "General"),
                        ],
                        default="general",
                        max_length=20,
                    ),
                ),
                ("language", models.CharField(default="en", max_length=10)),
                ("is_active", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["category", "name"],
                "verbose_name": "SMS template",
            },
        ),
        migrations.CreateModel(
            name="SMSLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("phone_number", models.CharField(max_length=32)),
                ("message", models.TextField()),
                (
                    "message_type",
                    models.CharField(
                        choices=[("booking", "Booking"), ("confirmation", "Confirmation"), ("other", "Other")],
                        default="other",
                        max_length=20,
                    ),
                ),
                ("status", models.CharField(choices=[("sent", "Sent"), ("failed", "Failed")], max_length=20)),
                ("provider_message_id", models.CharField(blank=True, default="", max_length=100)),
                ("error", models.TextField(blank=True, default="")),
                ("metadata", models.JSONField(blank=True, default=dict)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "ticket",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="sms_logs",
                        to="boxoffice_booking.ticket",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "verbose_name": "SMS log",
            },
        ),
    ]
