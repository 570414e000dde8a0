"""
Tests for the sales core: VAT arithmetic, the draft sale builder and the
atomic commit protocol.
"""

from datetime import datetime
from decimal import Decimal

from django.db import DatabaseError
from django.utils import timezone

import pytest

from apps.core.exceptions import NotFoundError, OutOfRangeError, StorageError, ValidationError
from apps.crm.models import Client

from .builder import ProductEntry, SaleItemBuilder
from .models import Transaction, TransactionItem
from .services import build_draft, commit_sale, delete_sale, get_sale, update_sale
from .vat import compute_vat, quantize_money, to_decimal


def _sale_date():
    return timezone.make_aware(datetime(2024, 3, 15, 10, 30))


class TestComputeVat:
    """Test backing net base and VAT out of tax-inclusive amounts."""

    def test_general_rate(self):
        """121.00 at 21% is 100.00 net plus 21.00 VAT."""
        result = compute_vat(Decimal("121.00"), 21)
        assert result.net == Decimal("100.00")
        assert result.vat == Decimal("21.00")
        assert result.gross == Decimal("121.00")

    def test_reduced_rate_rounds_each_part(self):
        """3.00 at 10% splits into 2.73 net and 0.27 VAT."""
        result = compute_vat("3.00", 10)
        assert result.net == Decimal("2.73")
        assert result.vat == Decimal("0.27")
        assert result.gross == Decimal("3.00")

    def test_half_cent_rounds_up(self):
        """0.13 at 4% gives an exact half cent on both parts, rounded away from zero."""
        result = compute_vat(Decimal("0.13"), 4)
        assert result.net == Decimal("0.13")
        assert result.vat == Decimal("0.01")
        assert result.net + result.vat - result.gross == Decimal("0.01")

    def test_zero_rate(self):
        """With no VAT the net base is the gross amount."""
        result = compute_vat(Decimal("9.99"), 0)
        assert result.net == Decimal("9.99")
        assert result.vat == Decimal("0.00")

    def test_zero_amount(self):
        result = compute_vat(0, 21)
        assert result == (Decimal("0.00"), Decimal("0.00"), Decimal("0.00"))

    def test_float_input_uses_decimal_text(self):
        """Floats are converted through their text form."""
        result = compute_vat(1.1, 10)
        assert result.gross == Decimal("1.10")
        assert result.net == Decimal("1.00")
        assert result.vat == Decimal("0.10")

    @pytest.mark.parametrize("rate", [4, 10, 21])
    def test_parts_stay_within_a_cent_of_gross(self, rate):
        """net + vat never drifts more than one cent from gross."""
        for cents in range(0, 5000, 7):
            gross = Decimal(cents) / 100
            result = compute_vat(gross, rate)
            assert abs(result.net + result.vat - result.gross) <= Decimal("0.01")

    @pytest.mark.parametrize("value", ["abc", "", None, True, "NaN", "Infinity"])
    def test_rejects_non_numeric_amounts(self, value):
        with pytest.raises(ValueError):
            to_decimal(value)

    def test_quantize_money(self):
        assert quantize_money("2.345") == Decimal("2.35")
        assert quantize_money(Decimal("2.344")) == Decimal("2.34")


class TestSaleItemBuilder:
    """Test draft sale accumulation."""

    def test_add_item_computes_figures(self):
        """Line gross is quantity times the VAT-inclusive unit price."""
        builder = SaleItemBuilder()
        item = builder.add_item("Coffee", 2, Decimal("1.50"), 10)

        assert item.product_name == "Coffee"
        assert item.total == Decimal("3.00")
        assert item.subtotal == Decimal("2.73")
        assert item.vat_amount == Decimal("0.27")
        assert len(builder.items) == 1

    def test_totals_are_sums_of_items(self):
        """Sale totals add up the per-item figures."""
        builder = SaleItemBuilder()
        builder.add_item("Coffee", 2, "1.50", 10)
        builder.add_item("Cake", 1, "2.50", 10)

        totals = builder.totals()
        assert totals.subtotal == Decimal("5.00")
        assert totals.vat == Decimal("0.50")
        assert totals.total == Decimal("5.50")
        assert totals.total == sum(item.total for item in builder.items)

    def test_empty_builder_has_zero_totals(self):
        builder = SaleItemBuilder()
        assert builder.items == ()
        assert builder.totals() == (Decimal("0.00"), Decimal("0.00"), Decimal("0.00"))

    def test_add_item_resets_entry(self):
        """The product-entry fields return to their defaults after each add."""
        builder = SaleItemBuilder()
        builder.entry.product_name = "Tea"
        builder.entry.quantity = 3
        builder.add_item("Tea", 3, "1.20", 10)
        assert builder.entry == ProductEntry()
        assert builder.entry.vat_rate == 21

    def test_add_item_strips_product_name(self):
        item = SaleItemBuilder().add_item("  Bread  ", 1, "1.00", 4)
        assert item.product_name == "Bread"

    @pytest.mark.parametrize(
        "name,quantity,price,rate,field",
        [
            ("", 1, "1.00", 21, "productName"),
            ("   ", 1, "1.00", 21, "productName"),
            ("Coffee", 0, "1.00", 21, "quantity"),
            ("Coffee", -2, "1.00", 21, "quantity"),
            ("Coffee", "2", "1.00", 21, "quantity"),
            ("Coffee", 1, "abc", 21, "unitPrice"),
            ("Coffee", 1, "-0.01", 21, "unitPrice"),
            ("Coffee", 1, "1.00", 7, "vatRate"),
            ("Coffee", 1_000_000, "1000.00", 21, "total"),
        ],
    )
    def test_invalid_item_is_rejected(self, name, quantity, price, rate, field):
        """An invalid line raises and leaves the draft untouched."""
        builder = SaleItemBuilder()
        builder.add_item("Water", 1, "0.80", 10)

        with pytest.raises(ValidationError) as exc_info:
            builder.add_item(name, quantity, price, rate)

        assert field in exc_info.value.errors
        assert len(builder.items) == 1

    def test_remove_item(self):
        """Removing keeps the order of the remaining items."""
        builder = SaleItemBuilder()
        builder.add_item("A", 1, "1.00", 21)
        builder.add_item("B", 1, "2.00", 21)
        builder.add_item("C", 1, "3.00", 21)

        removed = builder.remove_item(1)

        assert removed.product_name == "B"
        assert [item.product_name for item in builder.items] == ["A", "C"]
        assert builder.totals().total == Decimal("4.00")

    @pytest.mark.parametrize("index", [-1, 1, 5, True])
    def test_remove_item_out_of_range(self, index):
        builder = SaleItemBuilder()
        builder.add_item("A", 1, "1.00", 21)

        with pytest.raises(OutOfRangeError):
            builder.remove_item(index)
        assert len(builder.items) == 1

    def test_clear(self):
        builder = SaleItemBuilder()
        builder.add_item("A", 1, "1.00", 21)
        builder.entry.product_name = "half typed"
        builder.clear()
        assert builder.items == ()
        assert builder.entry == ProductEntry()

    def test_build_draft_reports_line_index(self):
        """Errors from submitted lines carry the index of the bad line."""
        lines = [
            {"product_name": "Coffee", "quantity": 1, "unit_price": Decimal("1.5"), "vat_rate": 10},
            {"product_name": "Cake", "quantity": 0, "unit_price": Decimal("2.50"), "vat_rate": 10},
        ]
        with pytest.raises(ValidationError) as exc_info:
            build_draft(lines)
        assert "quantity" in exc_info.value.errors["items"][1]


@pytest.mark.django_db
class TestCommitSale:
    """Test the atomic commit of a sale."""

    def _draft(self):
        builder = SaleItemBuilder()
        builder.add_item("Coffee", 2, "1.50", 10)
        builder.add_item("Cake", 1, "2.50", 10)
        return builder.items

    def test_commit_stores_header_and_items(self, default_client):
        """Header totals equal the sums of the stored items."""
        sale = commit_sale(default_client.id, _sale_date(), Transaction.CASH, self._draft())

        assert sale.client == default_client
        assert sale.subtotal == Decimal("5.00")
        assert sale.vat_amount == Decimal("0.50")
        assert sale.total == Decimal("5.50")
        assert sale.total == sale.subtotal + sale.vat_amount

        items = list(sale.items.all())
        assert [item.product_name for item in items] == ["Coffee", "Cake"]
        assert [item.position for item in items] == [0, 1]
        assert sum(item.total for item in items) == sale.total

    def test_commit_without_items_fails(self, default_client):
        with pytest.raises(ValidationError):
            commit_sale(default_client.id, _sale_date(), Transaction.CASH, [])
        assert Transaction.objects.count() == 0

    def test_commit_with_unknown_client_fails(self):
        import uuid

        with pytest.raises(NotFoundError):
            commit_sale(uuid.uuid4(), _sale_date(), Transaction.CARD, self._draft())
        assert Transaction.objects.count() == 0

    def test_commit_with_unknown_payment_method_fails(self, default_client):
        with pytest.raises(ValidationError) as exc_info:
            commit_sale(default_client.id, _sale_date(), "cheque", self._draft())
        assert "paymentMethod" in exc_info.value.errors

    def test_commit_with_total_too_large_fails(self, default_client):
        """Lines that fit individually can still overflow the stored header total."""
        builder = SaleItemBuilder()
        builder.add_item("Warehouse", 1, "60000000.00", 21)
        builder.add_item("Land", 1, "60000000.00", 21)

        with pytest.raises(ValidationError) as exc_info:
            commit_sale(default_client.id, _sale_date(), Transaction.TRANSFER, builder.items)

        assert "total" in exc_info.value.errors
        assert Transaction.objects.count() == 0

    def test_failed_item_insert_leaves_nothing(self, default_client, monkeypatch):
        """A failure while writing items rolls the header back too."""

        def failing_bulk_create(*args, **kwargs):
            raise DatabaseError("disk full")

        monkeypatch.setattr(TransactionItem.objects, "bulk_create", failing_bulk_create)

        with pytest.raises(StorageError):
            commit_sale(default_client.id, _sale_date(), Transaction.CASH, self._draft())

        assert Transaction.objects.count() == 0
        assert TransactionItem.objects.count() == 0

    def test_update_replaces_items_and_recomputes_totals(self, default_client, shop_client):
        sale = commit_sale(default_client.id, _sale_date(), Transaction.CASH, self._draft())

        builder = SaleItemBuilder()
        builder.add_item("Wine", 1, "12.10", 21)
        updated = update_sale(
            sale.id,
            {"client_id": shop_client.id, "payment_method": Transaction.CARD},
            items=builder.items,
        )

        assert updated.client == shop_client
        assert updated.payment_method == Transaction.CARD
        assert updated.subtotal == Decimal("10.00")
        assert updated.vat_amount == Decimal("2.10")
        assert updated.total == Decimal("12.10")
        assert [item.product_name for item in updated.items.all()] == ["Wine"]
        assert TransactionItem.objects.filter(transaction_id=sale.id).count() == 1

    def test_header_only_update_keeps_items(self, default_client):
        sale = commit_sale(default_client.id, _sale_date(), Transaction.CASH, self._draft())

        updated = update_sale(sale.id, {"payment_method": Transaction.TRANSFER})

        assert updated.payment_method == Transaction.TRANSFER
        assert updated.total == Decimal("5.50")
        assert updated.items.count() == 2

    def test_update_missing_transaction(self):
        import uuid

        with pytest.raises(NotFoundError):
            update_sale(uuid.uuid4(), {"payment_method": Transaction.CASH})

    def test_delete_removes_items(self, default_client):
        sale = commit_sale(default_client.id, _sale_date(), Transaction.CASH, self._draft())

        delete_sale(sale.id)

        assert not Transaction.objects.filter(id=sale.id).exists()
        assert TransactionItem.objects.count() == 0
        with pytest.raises(NotFoundError):
            get_sale(sale.id)
        with pytest.raises(NotFoundError):
            delete_sale(sale.id)

    def test_client_with_sales_is_protected(self, default_client):
        """The foreign key itself refuses to orphan transactions."""
        from django.db.models import ProtectedError

        client = Client.objects.create(name="Walk-in regular")
        commit_sale(client.id, _sale_date(), Transaction.CASH, self._draft())

        with pytest.raises(ProtectedError):
            client.delete()
