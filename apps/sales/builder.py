"""
Draft sale accumulation.

``SaleItemBuilder`` holds the line items of a sale that has not been committed
yet. Each item's net/VAT/gross figures are computed once, when the item is
added, and the sale totals are the plain sums of those per-item figures. That
is what lets a committed transaction header match its items exactly.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, List, NamedTuple, Tuple

from apps.core.exceptions import OutOfRangeError, ValidationError

from .vat import MAX_AMOUNT, VAT_GENERAL, VAT_RATES, ZERO, Amount, compute_vat, to_decimal


@dataclass(frozen=True)
class DraftItem:
    """A computed line item of a sale being built."""

    product_name: str
    quantity: int
    unit_price: Decimal
    vat_rate: int
    subtotal: Decimal
    vat_amount: Decimal
    total: Decimal


class SaleTotals(NamedTuple):
    subtotal: Decimal
    vat: Decimal
    total: Decimal


def sum_totals(items: Iterable[DraftItem]) -> SaleTotals:
    """Element-wise sum of item subtotal, VAT and total."""
    subtotal = vat = total = ZERO
    for item in items:
        subtotal += item.subtotal
        vat += item.vat_amount
        total += item.total
    return SaleTotals(subtotal=subtotal, vat=vat, total=total)


@dataclass
class ProductEntry:
    """Transient product-entry fields, reset after each added item."""

    product_name: str = ""
    quantity: int = 1
    unit_price: str = ""
    vat_rate: int = VAT_GENERAL


@dataclass
class SaleItemBuilder:
    """
    Ordered collection of draft line items with running totals.
    """

    _items: List[DraftItem] = field(default_factory=list)
    entry: ProductEntry = field(default_factory=ProductEntry)

    @property
    def items(self) -> Tuple[DraftItem, ...]:
        return tuple(self._items)

    def add_item(
        self,
        product_name: str,
        quantity: int,
        unit_price: Amount,
        vat_rate: int = VAT_GENERAL,
    ) -> DraftItem:
        """
        Compute and append a line item.

        ``unit_price`` is VAT inclusive; the line gross is
        ``unit_price * quantity``.

        Raises:
            ValidationError: If any field is invalid. The builder is left unchanged.
        """
        item = self.build_item(product_name, quantity, unit_price, vat_rate)
        self._items.append(item)
        self.entry = ProductEntry()
        return item

    def remove_item(self, index: int) -> DraftItem:
        """
        Remove the item at ``index``.

        Raises:
            OutOfRangeError: If ``index`` does not address an item.
        """
        valid = isinstance(index, int) and not isinstance(index, bool)
        if not valid or not 0 <= index < len(self._items):
            raise OutOfRangeError(f"No item at position {index}")
        return self._items.pop(index)

    def totals(self) -> SaleTotals:
        """Sum the per-item subtotal, VAT and total figures."""
        return sum_totals(self._items)

    def clear(self) -> None:
        """Drop every item and reset the product-entry fields."""
        self._items.clear()
        self.entry = ProductEntry()

    @staticmethod
    def build_item(product_name, quantity, unit_price, vat_rate) -> DraftItem:
        """Validate one line and compute its figures without storing it."""
        errors = {}

        name = product_name.strip() if isinstance(product_name, str) else ""
        if not name:
            errors["productName"] = ["Product name is required."]

        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            errors["quantity"] = ["Quantity must be a positive integer."]

        price = None
        try:
            price = to_decimal(unit_price)
        except ValueError:
            errors["unitPrice"] = ["Unit price must be a number."]
        else:
            if price < 0:
                errors["unitPrice"] = ["Unit price must not be negative."]

        if vat_rate not in VAT_RATES or isinstance(vat_rate, bool):
            errors["vatRate"] = [f"VAT rate must be one of {', '.join(map(str, VAT_RATES))}."]

        if not errors and price * quantity > MAX_AMOUNT:
            errors["total"] = [f"Line total must not exceed {MAX_AMOUNT}."]

        if errors:
            raise ValidationError("Invalid sale item", errors=errors)

        figures = compute_vat(price * quantity, vat_rate)
        return DraftItem(
            product_name=name,
            quantity=quantity,
            unit_price=price,
            vat_rate=int(vat_rate),
            subtotal=figures.net,
            vat_amount=figures.vat,
            total=figures.gross,
        )
