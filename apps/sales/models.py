"""
Sales models for the POS back office.

A ``Transaction`` is one completed sale: a header holding the client, the sale
date, the payment method and the totals, plus the ordered ``TransactionItem``
lines it owns. Header totals are always the sums of the item figures; they are
written only by ``apps.sales.services``.
"""

import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from apps.crm.models import Client

from .vat import VAT_RATE_CHOICES


class Transaction(models.Model):
    """
    Sale header.

    Deleting a transaction deletes its items; a client referenced by any
    transaction cannot be deleted.
    """

    CASH = "cash"
    CARD = "card"
    TRANSFER = "transfer"

    PAYMENT_METHOD_CHOICES = [
        (CASH, "Cash"),
        (CARD, "Card"),
        (TRANSFER, "Bank transfer"),
    ]

    PAYMENT_METHODS = (CASH, CARD, TRANSFER)

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the transaction",
    )

    client = models.ForeignKey(
        Client,
        on_delete=models.PROTECT,
        related_name="transactions",
        help_text="Client the sale was made to",
    )

    sale_date = models.DateTimeField(
        db_index=True,
        help_text="Date and time of the sale",
    )

    subtotal = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Net amount (sum of item subtotals)",
    )

    vat_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="VAT amount (sum of item VAT amounts)",
    )

    total = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Gross amount paid (sum of item totals)",
    )

    payment_method = models.CharField(
        max_length=20,
        choices=PAYMENT_METHOD_CHOICES,
        help_text="How the customer paid",
    )

    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        help_text="When the record was created",
    )

    class Meta:
        db_table = "transactions"
        ordering = ["-created_at"]
        verbose_name = "Transaction"
        verbose_name_plural = "Transactions"
        indexes = [
            models.Index(fields=["-sale_date"], name="txn_sale_date_idx"),
            models.Index(fields=["payment_method", "sale_date"], name="txn_payment_date_idx"),
        ]

    def __str__(self):
        return f"{self.sale_date:%Y-%m-%d %H:%M} - {self.total}"


class TransactionItem(models.Model):
    """
    Line item of a transaction.

    ``unit_price`` is VAT inclusive. ``total`` is ``quantity * unit_price``,
    ``subtotal`` the net base backed out of it and ``vat_amount`` the tax.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the item",
    )

    transaction = models.ForeignKey(
        Transaction,
        on_delete=models.CASCADE,
        related_name="items",
        help_text="Transaction this item belongs to",
    )

    position = models.PositiveIntegerField(
        default=0,
        help_text="Order of the item within the transaction",
    )

    product_name = models.CharField(
        max_length=200,
        help_text="Name of the product or service sold",
    )

    quantity = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        help_text="Units sold",
    )

    unit_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Unit price with VAT included",
    )

    vat_rate = models.PositiveSmallIntegerField(
        choices=VAT_RATE_CHOICES,
        help_text="VAT rate in percent",
    )

    subtotal = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text="Net amount",
    )

    vat_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text="VAT amount",
    )

    total = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text="Gross amount (quantity * unit price)",
    )

    class Meta:
        db_table = "transaction_items"
        ordering = ["position"]
        verbose_name = "Transaction Item"
        verbose_name_plural = "Transaction Items"
        indexes = [
            models.Index(fields=["transaction", "position"], name="txnitem_txn_pos_idx"),
            models.Index(fields=["vat_rate"], name="txnitem_vat_rate_idx"),
        ]

    def __str__(self):
        return f"{self.product_name} x {self.quantity}"
