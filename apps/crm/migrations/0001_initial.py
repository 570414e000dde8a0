import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Client",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for the client",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("name", models.CharField(help_text="Client or company name", max_length=200)),
                (
                    "email",
                    models.EmailField(
                        blank=True, default="", help_text="Contact email address", max_length=254
                    ),
                ),
                (
                    "phone",
                    models.CharField(
                        blank=True, default="", help_text="Contact phone number", max_length=50
                    ),
                ),
                (
                    "tax_id",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Tax identification number (NIF/CIF)",
                        max_length=50,
                    ),
                ),
                ("address", models.TextField(blank=True, default="", help_text="Postal address")),
                (
                    "is_default",
                    models.BooleanField(
                        default=False,
                        help_text="Whether this is the fallback client for anonymous sales",
                    ),
                ),
                (
                    "is_active",
                    models.BooleanField(default=True, help_text="Whether the client is active"),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True, help_text="When the client was created"
                    ),
                ),
            ],
            options={
                "verbose_name": "Client",
                "verbose_name_plural": "Clients",
                "db_table": "clients",
                "ordering": ["name"],
                "indexes": [models.Index(fields=["is_active"], name="client_active_idx")],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("is_default", True)),
                        fields=("is_default",),
                        name="clients_single_default",
                    )
                ],
            },
        ),
    ]
