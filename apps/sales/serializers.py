"""
Serializers for sales.

Write serializers only validate the shape of the request; the item figures
and header totals are computed server side by ``SaleItemBuilder`` and
``apps.sales.services``. Any ``subtotal``/``vatAmount``/``total`` values the
client sends are ignored.
"""

from rest_framework import serializers

from apps.crm.serializers import ClientSummarySerializer

from .models import Transaction, TransactionItem
from .vat import MAX_AMOUNT, VAT_RATES


class MoneyField(serializers.DecimalField):
    """Two-decimal currency amount, rendered as a string."""

    def __init__(self, **kwargs):
        kwargs.setdefault("max_digits", 12)
        kwargs.setdefault("decimal_places", 2)
        super().__init__(**kwargs)


class TransactionItemInputSerializer(serializers.Serializer):
    """One submitted line item."""

    productName = serializers.CharField(source="product_name", max_length=200)
    quantity = serializers.IntegerField(min_value=1)
    unitPrice = MoneyField(source="unit_price", max_digits=10, min_value=0)
    vatRate = serializers.ChoiceField(source="vat_rate", choices=VAT_RATES)

    def validate(self, attrs):
        """Validate that the line total fits the stored amount columns."""
        if attrs["unit_price"] * attrs["quantity"] > MAX_AMOUNT:
            raise serializers.ValidationError(
                {"total": [f"Line total must not exceed {MAX_AMOUNT}."]}
            )
        return attrs


class TransactionHeaderInputSerializer(serializers.Serializer):
    """Header fields of a submitted sale."""

    clientId = serializers.UUIDField(source="client_id")
    saleDate = serializers.DateTimeField(source="sale_date")
    paymentMethod = serializers.ChoiceField(
        source="payment_method", choices=Transaction.PAYMENT_METHOD_CHOICES
    )


class TransactionPatchInputSerializer(TransactionHeaderInputSerializer):
    """Header fields of an update; all optional."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for field in self.fields.values():
            field.required = False


class SaleCreateSerializer(serializers.Serializer):
    """Request body of ``POST /api/transactions``."""

    transaction = TransactionHeaderInputSerializer()
    items = TransactionItemInputSerializer(many=True)

    def validate_items(self, value):
        """Validate that at least one item is provided."""
        if not value:
            raise serializers.ValidationError("At least one item is required.")
        return value


class SaleUpdateSerializer(serializers.Serializer):
    """Request body of ``PUT /api/transactions/<id>``."""

    transaction = TransactionPatchInputSerializer(required=False)
    items = TransactionItemInputSerializer(many=True, required=False)

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError("At least one item is required.")
        return value


class CalculateTotalsSerializer(serializers.Serializer):
    """Request body of the draft preview endpoint."""

    items = TransactionItemInputSerializer(many=True, allow_empty=True)


class DraftItemSerializer(serializers.Serializer):
    """Computed draft line, as returned by the preview endpoint."""

    productName = serializers.CharField(source="product_name")
    quantity = serializers.IntegerField()
    unitPrice = MoneyField(source="unit_price")
    vatRate = serializers.IntegerField(source="vat_rate")
    subtotal = MoneyField()
    vatAmount = MoneyField(source="vat_amount")
    total = MoneyField()


class SaleTotalsSerializer(serializers.Serializer):
    subtotal = MoneyField()
    vat = MoneyField()
    total = MoneyField()


class TransactionItemSerializer(serializers.ModelSerializer):
    """Stored line item."""

    transactionId = serializers.UUIDField(source="transaction_id", read_only=True)
    productName = serializers.CharField(source="product_name")
    unitPrice = serializers.DecimalField(source="unit_price", max_digits=10, decimal_places=2)
    vatRate = serializers.IntegerField(source="vat_rate")
    vatAmount = serializers.DecimalField(source="vat_amount", max_digits=10, decimal_places=2)

    class Meta:
        model = TransactionItem
        fields = [
            "id",
            "transactionId",
            "productName",
            "quantity",
            "unitPrice",
            "vatRate",
            "subtotal",
            "vatAmount",
            "total",
        ]


class TransactionDetailSerializer(serializers.ModelSerializer):
    """Transaction with its client and items (read-only projection)."""

    clientId = serializers.UUIDField(source="client_id", read_only=True)
    saleDate = serializers.DateTimeField(source="sale_date")
    vatAmount = serializers.DecimalField(source="vat_amount", max_digits=10, decimal_places=2)
    paymentMethod = serializers.CharField(source="payment_method")
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    client = ClientSummarySerializer(read_only=True)
    items = TransactionItemSerializer(many=True, read_only=True)

    class Meta:
        model = Transaction
        fields = [
            "id",
            "clientId",
            "saleDate",
            "subtotal",
            "vatAmount",
            "total",
            "paymentMethod",
            "createdAt",
            "client",
            "items",
        ]
