import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("crm", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Transaction",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for the transaction",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "sale_date",
                    models.DateTimeField(db_index=True, help_text="Date and time of the sale"),
                ),
                (
                    "subtotal",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Net amount (sum of item subtotals)",
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "vat_amount",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="VAT amount (sum of item VAT amounts)",
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "total",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Gross amount paid (sum of item totals)",
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "payment_method",
                    models.CharField(
                        choices=[("cash", "Cash"), ("card", "Card"), ("transfer", "Bank transfer")],
                        help_text="How the customer paid",
                        max_length=20,
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True, db_index=True, help_text="When the record was created"
                    ),
                ),
                (
                    "client",
                    models.ForeignKey(
                        help_text="Client the sale was made to",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="transactions",
                        to="crm.client",
                    ),
                ),
            ],
            options={
                "verbose_name": "Transaction",
                "verbose_name_plural": "Transactions",
                "db_table": "transactions",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["-sale_date"], name="txn_sale_date_idx"),
                    models.Index(
                        fields=["payment_method", "sale_date"], name="txn_payment_date_idx"
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="TransactionItem",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for the item",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "position",
                    models.PositiveIntegerField(
                        default=0, help_text="Order of the item within the transaction"
                    ),
                ),
                (
                    "product_name",
                    models.CharField(
                        help_text="Name of the product or service sold", max_length=200
                    ),
                ),
                (
                    "quantity",
                    models.PositiveIntegerField(
                        help_text="Units sold",
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                (
                    "unit_price",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Unit price with VAT included",
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "vat_rate",
                    models.PositiveSmallIntegerField(
                        choices=[(21, "21%"), (10, "10%"), (4, "4%")],
                        help_text="VAT rate in percent",
                    ),
                ),
                (
                    "subtotal",
                    models.DecimalField(decimal_places=2, help_text="Net amount", max_digits=10),
                ),
                (
                    "vat_amount",
                    models.DecimalField(decimal_places=2, help_text="VAT amount", max_digits=10),
                ),
                (
                    "total",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Gross amount (quantity * unit price)",
                        max_digits=10,
                    ),
                ),
                (
                    "transaction",
                    models.ForeignKey(
                        help_text="Transaction this item belongs to",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="sales.transaction",
                    ),
                ),
            ],
            options={
                "verbose_name": "Transaction Item",
                "verbose_name_plural": "Transaction Items",
                "db_table": "transaction_items",
                "ordering": ["position"],
                "indexes": [
                    models.Index(fields=["transaction", "position"], name="txnitem_txn_pos_idx"),
                    models.Index(fields=["vat_rate"], name="txnitem_vat_rate_idx"),
                ],
            },
        ),
    ]
