"""
API views for sales.

Routes:
- GET/POST              /api/transactions
- GET/PUT/PATCH/DELETE  /api/transactions/<id>
- POST                  /api/sales/calculate-totals
"""

import logging

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.exceptions import ValidationError

from . import services
from .serializers import (
    CalculateTotalsSerializer,
    DraftItemSerializer,
    SaleCreateSerializer,
    SaleTotalsSerializer,
    SaleUpdateSerializer,
    TransactionDetailSerializer,
)

logger = logging.getLogger(__name__)


def _parse_limit(value):
    if value in (None, "", "undefined"):
        return None
    try:
        limit = int(value)
    except (TypeError, ValueError):
        limit = 0
    if limit <= 0:
        raise ValidationError("Invalid limit", errors={"limit": ["Must be a positive integer."]})
    return limit


class TransactionListView(APIView):
    """List transactions (newest first) or commit a new sale."""

    def get(self, request):
        limit = _parse_limit(request.query_params.get("limit"))
        sales = services.list_sales(limit=limit)
        return Response(TransactionDetailSerializer(sales, many=True).data)

    def post(self, request):
        """
        Commit a sale.

        Request body:
        {
            "transaction": {"clientId": "uuid", "saleDate": "...", "paymentMethod": "cash"},
            "items": [{"productName": "Coffee", "quantity": 2, "unitPrice": "1.50", "vatRate": 10}]
        }

        Item and header figures are computed server side.
        """
        serializer = SaleCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        header = serializer.validated_data["transaction"]

        draft = services.build_draft(serializer.validated_data["items"])
        sale = services.commit_sale(
            client_id=header["client_id"],
            sale_date=header["sale_date"],
            payment_method=header["payment_method"],
            items=draft.items,
        )
        return Response(TransactionDetailSerializer(sale).data, status=status.HTTP_201_CREATED)


class TransactionDetailView(APIView):
    """Retrieve, update or delete a single transaction."""

    def get(self, request, transaction_id):
        sale = services.get_sale(transaction_id)
        return Response(TransactionDetailSerializer(sale).data)

    def put(self, request, transaction_id):
        """
        Patch header fields and, when ``items`` is present, replace the whole
        item set and recompute the header totals.
        """
        serializer = SaleUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        changes = serializer.validated_data.get("transaction", {})
        items = None
        if "items" in serializer.validated_data:
            items = services.build_draft(serializer.validated_data["items"]).items

        sale = services.update_sale(transaction_id, dict(changes), items=items)
        return Response(TransactionDetailSerializer(sale).data)

    patch = put

    def delete(self, request, transaction_id):
        services.delete_sale(transaction_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(["POST"])
def calculate_totals(request):
    """
    Compute draft line figures and sale totals without storing anything.

    Lets the sale screen show live totals while the item list is built.
    An empty item list yields zero totals.
    """
    serializer = CalculateTotalsSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    draft = services.build_draft(serializer.validated_data["items"])
    return Response(
        {
            "items": DraftItemSerializer(draft.items, many=True).data,
            "totals": SaleTotalsSerializer(draft.totals()).data,
        }
    )
