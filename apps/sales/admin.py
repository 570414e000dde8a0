"""
Django admin configuration for sales models.

Transactions are read-only here: their totals must stay equal to the sums of
their items, which only ``apps.sales.services`` guarantees.
"""

from django.contrib import admin

from .models import Transaction, TransactionItem


class TransactionItemInline(admin.TabularInline):
    """Inline admin for TransactionItem model."""

    model = TransactionItem
    extra = 0
    can_delete = False
    fields = [
        "position",
        "product_name",
        "quantity",
        "unit_price",
        "vat_rate",
        "subtotal",
        "vat_amount",
        "total",
    ]
    readonly_fields = fields


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    """Admin interface for Transaction model."""

    list_display = ["sale_date", "client", "payment_method", "subtotal", "vat_amount", "total"]
    list_filter = ["payment_method", "sale_date"]
    search_fields = ["client__name", "items__product_name"]
    date_hierarchy = "sale_date"
    readonly_fields = [
        "id",
        "client",
        "sale_date",
        "payment_method",
        "subtotal",
        "vat_amount",
        "total",
        "created_at",
    ]
    inlines = [TransactionItemInline]

    fieldsets = [
        ("Sale", {"fields": ["id", "client", "sale_date", "payment_method"]}),
        ("Totals", {"fields": ["subtotal", "vat_amount", "total"]}),
        ("Timestamps", {"fields": ["created_at"]}),
    ]

    def has_add_permission(self, request):
        return False
