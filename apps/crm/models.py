"""
Client directory models for the POS back office.

A client is the party a sale is recorded against. Exactly one client may be
flagged as the default (the walk-in "Generic Client" used when the cashier does
not pick anyone), and that client can never be deleted.
"""

import uuid

from django.db import models
from django.db.models import Q


class Client(models.Model):
    """
    Client record referenced by every transaction.

    Optional contact fields are stored as empty strings rather than NULL,
    matching what the sale entry form submits.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the client",
    )

    name = models.CharField(
        max_length=200,
        help_text="Client or company name",
    )

    email = models.EmailField(
        blank=True,
        default="",
        help_text="Contact email address",
    )

    phone = models.CharField(
        max_length=50,
        blank=True,
        default="",
        help_text="Contact phone number",
    )

    tax_id = models.CharField(
        max_length=50,
        blank=True,
        default="",
        help_text="Tax identification number (NIF/CIF)",
    )

    address = models.TextField(
        blank=True,
        default="",
        help_text="Postal address",
    )

    is_default = models.BooleanField(
        default=False,
        help_text="Whether this is the fallback client for anonymous sales",
    )

    is_active = models.BooleanField(
        default=True,
        help_text="Whether the client is active",
    )

    created_at = models.DateTimeField(
        auto_now_add=True,
        help_text="When the client was created",
    )

    class Meta:
        db_table = "clients"
        ordering = ["name"]
        verbose_name = "Client"
        verbose_name_plural = "Clients"
        constraints = [
            models.UniqueConstraint(
                fields=["is_default"],
                condition=Q(is_default=True),
                name="clients_single_default",
            ),
        ]
        indexes = [
            models.Index(fields=["is_active"], name="client_active_idx"),
        ]

    def __str__(self):
        return f"{self.name} (default)" if self.is_default else self.name
