"""
Sale commit protocol.

Every write that touches a transaction header together with its items runs in
a single ``transaction.atomic()`` block: either the header and its full item
set are stored, or nothing is. Header totals are always derived from the item
set being written and never taken from the caller.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence

from django.db import DatabaseError
from django.db import transaction as db_transaction

from apps.core.exceptions import NotFoundError, StorageError, ValidationError
from apps.crm.services import ClientDirectory

from .builder import DraftItem, SaleItemBuilder, SaleTotals, sum_totals
from .models import Transaction, TransactionItem
from .vat import MAX_AMOUNT

logger = logging.getLogger(__name__)


def build_draft(lines: Iterable[Dict[str, Any]]) -> SaleItemBuilder:
    """
    Run submitted item lines through a ``SaleItemBuilder``.

    Each line carries ``product_name``, ``quantity``, ``unit_price`` and
    ``vat_rate``; any figures the client computed itself are ignored.

    Raises:
        ValidationError: With the offending line index in ``errors``.
    """
    builder = SaleItemBuilder()
    for index, line in enumerate(lines):
        try:
            builder.add_item(
                line.get("product_name"),
                line.get("quantity"),
                line.get("unit_price"),
                line.get("vat_rate"),
            )
        except ValidationError as e:
            raise ValidationError("Invalid sale item", errors={"items": {index: e.errors}})
    return builder


def sale_queryset():
    """Transactions with their client and items loaded."""
    return Transaction.objects.select_related("client").prefetch_related("items")


def get_sale(transaction_id) -> Transaction:
    """Fetch one transaction with details, or raise ``NotFoundError``."""
    try:
        return sale_queryset().get(id=transaction_id)
    except Transaction.DoesNotExist:
        raise NotFoundError("Transaction not found")


def list_sales(limit: Optional[int] = None) -> List[Transaction]:
    """All transactions, newest record first."""
    queryset = sale_queryset().order_by("-created_at")
    if limit is not None:
        queryset = queryset[:limit]
    return list(queryset)


def commit_sale(
    client_id,
    sale_date: datetime,
    payment_method: str,
    items: Sequence[DraftItem],
) -> Transaction:
    """
    Persist a completed sale and its items atomically.

    Raises:
        ValidationError: If ``items`` is empty or the payment method is unknown.
        NotFoundError: If the client does not exist.
        StorageError: If the database rejects the write.
    """
    if not items:
        raise ValidationError("no items", errors={"items": ["At least one item is required."]})
    _check_payment_method(payment_method)
    client = ClientDirectory().get(client_id)

    totals = sum_totals(items)
    _check_total(totals)
    try:
        with db_transaction.atomic():
            sale = Transaction.objects.create(
                client=client,
                sale_date=sale_date,
                payment_method=payment_method,
                subtotal=totals.subtotal,
                vat_amount=totals.vat,
                total=totals.total,
            )
            _insert_items(sale, items)
    except DatabaseError as e:
        logger.error(f"Sale commit failed for client {client.id}: {e}", exc_info=True)
        raise StorageError("Error creating transaction") from e

    logger.info(
        f"Committed transaction {sale.id}: {len(items)} items, total {totals.total} "
        f"({payment_method})"
    )
    return get_sale(sale.id)


def update_sale(
    transaction_id,
    changes: Dict[str, Any],
    items: Optional[Sequence[DraftItem]] = None,
) -> Transaction:
    """
    Patch a transaction header and optionally replace its full item set.

    ``changes`` may contain ``client_id``, ``sale_date`` and ``payment_method``.
    When ``items`` is given, every previous item is deleted, the new set
    inserted and the header totals recomputed from it, in one atomic block.
    """
    if items is not None and not items:
        raise ValidationError("no items", errors={"items": ["At least one item is required."]})
    if "payment_method" in changes:
        _check_payment_method(changes["payment_method"])
    if items is not None:
        _check_total(sum_totals(items))
    client = ClientDirectory().get(changes["client_id"]) if "client_id" in changes else None

    try:
        with db_transaction.atomic():
            try:
                sale = Transaction.objects.select_for_update().get(id=transaction_id)
            except Transaction.DoesNotExist:
                raise NotFoundError("Transaction not found")

            update_fields = []
            if client is not None:
                sale.client = client
                update_fields.append("client")
            for field in ("sale_date", "payment_method"):
                if field in changes:
                    setattr(sale, field, changes[field])
                    update_fields.append(field)

            if items is not None:
                deleted, _ = TransactionItem.objects.filter(transaction=sale).delete()
                _insert_items(sale, items)
                totals = sum_totals(items)
                sale.subtotal = totals.subtotal
                sale.vat_amount = totals.vat
                sale.total = totals.total
                update_fields += ["subtotal", "vat_amount", "total"]
                logger.info(f"Replaced {deleted} items of transaction {sale.id} with {len(items)}")

            if update_fields:
                sale.save(update_fields=update_fields)
    except DatabaseError as e:
        logger.error(f"Update of transaction {transaction_id} failed: {e}", exc_info=True)
        raise StorageError("Error updating transaction") from e

    logger.info(f"Updated transaction {transaction_id}")
    return get_sale(transaction_id)


def delete_sale(transaction_id) -> None:
    """Delete a transaction together with its items."""
    try:
        with db_transaction.atomic():
            deleted, _ = Transaction.objects.filter(id=transaction_id).delete()
    except DatabaseError as e:
        raise StorageError("Error deleting transaction") from e

    if not deleted:
        raise NotFoundError("Transaction not found")
    logger.info(f"Deleted transaction {transaction_id}")


def _insert_items(sale: Transaction, items: Sequence[DraftItem]) -> None:
    TransactionItem.objects.bulk_create(
        [
            TransactionItem(
                transaction=sale,
                position=position,
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=item.unit_price,
                vat_rate=item.vat_rate,
                subtotal=item.subtotal,
                vat_amount=item.vat_amount,
                total=item.total,
            )
            for position, item in enumerate(items)
        ]
    )


def _check_total(totals: SaleTotals) -> None:
    if totals.total > MAX_AMOUNT:
        raise ValidationError(
            "Sale total too large",
            errors={"total": [f"Sale total must not exceed {MAX_AMOUNT}."]},
        )


def _check_payment_method(payment_method: str) -> None:
    if payment_method not in Transaction.PAYMENT_METHODS:
        raise ValidationError(
            "Invalid payment method",
            errors={
                "paymentMethod": [f"Must be one of: {', '.join(Transaction.PAYMENT_METHODS)}."]
            },
        )
