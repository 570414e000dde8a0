"""
VAT arithmetic for tax-inclusive prices.

Shop prices are entered with VAT included (the amount the customer pays), so
the net base and the tax are backed out of the gross amount:

    net = gross / (1 + rate / 100)
    vat = gross - net

Net and VAT are rounded independently to cents with ROUND_HALF_UP, so
``net + vat`` may differ from ``gross`` by at most 0.01.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import NamedTuple, Union

# Spanish VAT bands: general, reduced and super-reduced.
VAT_GENERAL = 21
VAT_REDUCED = 10
VAT_SUPER_REDUCED = 4

VAT_RATES = (VAT_GENERAL, VAT_REDUCED, VAT_SUPER_REDUCED)
VAT_RATE_CHOICES = [
    (VAT_GENERAL, "21%"),
    (VAT_REDUCED, "10%"),
    (VAT_SUPER_REDUCED, "4%"),
]

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

# Largest amount the DecimalField(max_digits=10, decimal_places=2) columns hold.
MAX_AMOUNT = Decimal("99999999.99")

Amount = Union[Decimal, int, float, str]


class VatBreakdown(NamedTuple):
    net: Decimal
    vat: Decimal
    gross: Decimal


def to_decimal(value: Amount) -> Decimal:
    """
    Convert a user supplied amount to ``Decimal``.

    Floats go through ``str()`` so 1.1 becomes Decimal("1.1") rather than its
    binary approximation.

    Raises:
        ValueError: If the value is not a finite number.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid amount: {value!r}")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            raise ValueError(f"Invalid amount: {value!r}")
    if not result.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    return result


def quantize_money(value: Amount) -> Decimal:
    """Round an amount to cents using ROUND_HALF_UP."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def compute_vat(gross: Amount, vat_rate: Amount) -> VatBreakdown:
    """
    Split a VAT-inclusive amount into net base, tax and gross.

    Any rate is accepted; restricting input to :data:`VAT_RATES` is left to
    the callers that validate user input.
    """
    gross_amount = to_decimal(gross)
    rate = to_decimal(vat_rate)

    net = gross_amount / (1 + rate / 100)
    vat = gross_amount - net

    return VatBreakdown(
        net=net.quantize(CENT, rounding=ROUND_HALF_UP),
        vat=vat.quantize(CENT, rounding=ROUND_HALF_UP),
        gross=gross_amount.quantize(CENT, rounding=ROUND_HALF_UP),
    )
