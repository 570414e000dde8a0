"""
Tests for the transactions HTTP API and the draft totals preview.
"""

import uuid
from decimal import Decimal

from django.db import connection

import pytest

from apps.sales import services
from apps.sales.models import Transaction, TransactionItem


def _payload(client_id, items=None, **header):
    transaction = {
        "clientId": str(client_id),
        "saleDate": "2024-03-15T10:30:00",
        "paymentMethod": "cash",
    }
    transaction.update(header)
    return {
        "transaction": transaction,
        "items": items
        if items is not None
        else [
            {"productName": "Coffee", "quantity": 2, "unitPrice": "1.50", "vatRate": 10},
            {"productName": "Cake", "quantity": 1, "unitPrice": "2.50", "vatRate": 10},
        ],
    }


@pytest.mark.django_db
class TestCreateTransactionAPI:
    """Test POST /api/transactions."""

    def test_create_transaction(self, api_client, default_client):
        response = api_client.post(
            "/api/transactions", _payload(default_client.id), format="json"
        )

        assert response.status_code == 201
        data = response.data
        assert data["clientId"] == str(default_client.id)
        assert data["subtotal"] == "5.00"
        assert data["vatAmount"] == "0.50"
        assert data["total"] == "5.50"
        assert data["paymentMethod"] == "cash"
        assert data["client"]["name"] == "Generic Client"
        assert [item["productName"] for item in data["items"]] == ["Coffee", "Cake"]
        assert data["items"][0]["subtotal"] == "2.73"
        assert data["items"][0]["vatAmount"] == "0.27"
        assert data["items"][0]["total"] == "3.00"
        assert data["items"][0]["transactionId"] == data["id"]

    def test_client_supplied_totals_are_ignored(self, api_client, default_client):
        """Figures are always computed server side."""
        payload = _payload(
            default_client.id,
            items=[
                {
                    "productName": "Coffee",
                    "quantity": 1,
                    "unitPrice": "1.50",
                    "vatRate": 10,
                    "subtotal": "99.00",
                    "vatAmount": "99.00",
                    "total": "99.00",
                }
            ],
            subtotal="100.00",
            total="100.00",
        )

        response = api_client.post("/api/transactions", payload, format="json")

        assert response.status_code == 201
        assert response.data["total"] == "1.50"
        assert response.data["items"][0]["total"] == "1.50"

    def test_create_without_items(self, api_client, default_client):
        response = api_client.post(
            "/api/transactions", _payload(default_client.id, items=[]), format="json"
        )

        assert response.status_code == 400
        assert "items" in response.data["errors"]
        assert Transaction.objects.count() == 0

    def test_create_with_unknown_client(self, api_client):
        response = api_client.post("/api/transactions", _payload(uuid.uuid4()), format="json")

        assert response.status_code == 404
        assert response.data["message"] == "Client not found"
        assert Transaction.objects.count() == 0

    @pytest.mark.parametrize(
        "item,field",
        [
            ({"productName": "", "quantity": 1, "unitPrice": "1.00", "vatRate": 21}, "productName"),
            ({"productName": "A", "quantity": 0, "unitPrice": "1.00", "vatRate": 21}, "quantity"),
            ({"productName": "A", "quantity": 1, "unitPrice": "-1", "vatRate": 21}, "unitPrice"),
            ({"productName": "A", "quantity": 1, "unitPrice": "1.00", "vatRate": 16}, "vatRate"),
        ],
    )
    def test_create_with_invalid_item(self, api_client, default_client, item, field):
        response = api_client.post(
            "/api/transactions", _payload(default_client.id, items=[item]), format="json"
        )

        assert response.status_code == 400
        assert field in response.data["errors"]["items"][0]
        assert TransactionItem.objects.count() == 0

    def test_create_with_line_total_too_large(self, api_client, default_client):
        """A line whose total overflows the stored amounts is a 400, not a 500."""
        item = {"productName": "Pallet", "quantity": 1000000, "unitPrice": "1000.00", "vatRate": 21}

        response = api_client.post(
            "/api/transactions", _payload(default_client.id, items=[item]), format="json"
        )

        assert response.status_code == 400
        assert "total" in response.data["errors"]["items"][0]
        assert Transaction.objects.count() == 0

    def test_create_with_sale_total_too_large(self, api_client, default_client):
        items = [
            {"productName": "Warehouse", "quantity": 1, "unitPrice": "60000000.00", "vatRate": 21},
            {"productName": "Land", "quantity": 1, "unitPrice": "60000000.00", "vatRate": 21},
        ]

        response = api_client.post(
            "/api/transactions", _payload(default_client.id, items=items), format="json"
        )

        assert response.status_code == 400
        assert "total" in response.data["errors"]
        assert Transaction.objects.count() == 0

    def test_create_with_invalid_payment_method(self, api_client, default_client):
        response = api_client.post(
            "/api/transactions",
            _payload(default_client.id, paymentMethod="bitcoin"),
            format="json",
        )

        assert response.status_code == 400
        assert "paymentMethod" in response.data["errors"]["transaction"]

    def test_create_with_missing_header(self, api_client):
        response = api_client.post(
            "/api/transactions",
            {"items": [{"productName": "A", "quantity": 1, "unitPrice": "1", "vatRate": 21}]},
            format="json",
        )

        assert response.status_code == 400
        assert "transaction" in response.data["errors"]


@pytest.mark.django_db
class TestReadTransactionAPI:
    """Test GET /api/transactions and /api/transactions/<id>."""

    def test_list_transactions(self, api_client, make_sale):
        make_sale([("Coffee", 1, "1.20", 10)])
        make_sale([("Bread", 2, "1.04", 4)], payment_method="card")

        response = api_client.get("/api/transactions")

        assert response.status_code == 200
        assert len(response.data) == 2
        assert all(len(sale["items"]) == 1 for sale in response.data)

    def test_list_with_limit(self, api_client, make_sale):
        for _ in range(3):
            make_sale([("Coffee", 1, "1.20", 10)])

        response = api_client.get("/api/transactions", {"limit": 2})

        assert response.status_code == 200
        assert len(response.data) == 2

    @pytest.mark.parametrize("limit", ["0", "-3", "abc"])
    def test_list_with_bad_limit(self, api_client, limit):
        response = api_client.get("/api/transactions", {"limit": limit})

        assert response.status_code == 400
        assert "limit" in response.data["errors"]

    def test_get_transaction(self, api_client, make_sale):
        sale = make_sale([("Coffee", 2, "1.50", 10)])

        response = api_client.get(f"/api/transactions/{sale.id}")

        assert response.status_code == 200
        assert response.data["id"] == str(sale.id)
        assert response.data["total"] == "3.00"

    def test_get_missing_transaction(self, api_client):
        response = api_client.get(f"/api/transactions/{uuid.uuid4()}")

        assert response.status_code == 404
        assert response.data == {"message": "Transaction not found"}


@pytest.mark.django_db
class TestUpdateDeleteTransactionAPI:
    """Test PUT and DELETE /api/transactions/<id>."""

    def test_update_header_only(self, api_client, make_sale):
        sale = make_sale([("Coffee", 2, "1.50", 10)])

        response = api_client.put(
            f"/api/transactions/{sale.id}",
            {"transaction": {"paymentMethod": "transfer"}},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["paymentMethod"] == "transfer"
        assert response.data["total"] == "3.00"
        assert len(response.data["items"]) == 1

    def test_update_replaces_items(self, api_client, make_sale, shop_client):
        """New items replace the old set and the header totals follow."""
        sale = make_sale([("Coffee", 2, "1.50", 10), ("Cake", 1, "2.50", 10)])

        response = api_client.put(
            f"/api/transactions/{sale.id}",
            {
                "transaction": {"clientId": str(shop_client.id)},
                "items": [
                    {"productName": "Wine", "quantity": 1, "unitPrice": "12.10", "vatRate": 21}
                ],
            },
            format="json",
        )

        assert response.status_code == 200
        assert response.data["client"]["name"] == "Acme Bakery"
        assert response.data["subtotal"] == "10.00"
        assert response.data["vatAmount"] == "2.10"
        assert response.data["total"] == "12.10"
        assert [item["productName"] for item in response.data["items"]] == ["Wine"]
        assert TransactionItem.objects.filter(transaction_id=sale.id).count() == 1

    def test_update_with_empty_items(self, api_client, make_sale):
        sale = make_sale([("Coffee", 2, "1.50", 10)])

        response = api_client.put(f"/api/transactions/{sale.id}", {"items": []}, format="json")

        assert response.status_code == 400
        sale.refresh_from_db()
        assert sale.total == Decimal("3.00")
        assert sale.items.count() == 1

    def test_update_missing_transaction(self, api_client):
        response = api_client.put(
            f"/api/transactions/{uuid.uuid4()}",
            {"transaction": {"paymentMethod": "card"}},
            format="json",
        )
        assert response.status_code == 404

    def test_update_with_unknown_client(self, api_client, make_sale):
        sale = make_sale([("Coffee", 2, "1.50", 10)])

        response = api_client.put(
            f"/api/transactions/{sale.id}",
            {"transaction": {"clientId": str(uuid.uuid4())}},
            format="json",
        )

        assert response.status_code == 404

    def test_delete_transaction(self, api_client, make_sale):
        sale = make_sale([("Coffee", 2, "1.50", 10), ("Cake", 1, "2.50", 10)])

        response = api_client.delete(f"/api/transactions/{sale.id}")

        assert response.status_code == 204
        assert not Transaction.objects.filter(id=sale.id).exists()
        assert not TransactionItem.objects.filter(transaction_id=sale.id).exists()

    def test_delete_missing_transaction(self, api_client):
        response = api_client.delete(f"/api/transactions/{uuid.uuid4()}")
        assert response.status_code == 404


@pytest.mark.django_db
class TestCalculateTotalsAPI:
    """Test POST /api/sales/calculate-totals."""

    def test_preview_totals(self, api_client):
        response = api_client.post(
            "/api/sales/calculate-totals",
            {
                "items": [
                    {"productName": "Coffee", "quantity": 2, "unitPrice": "1.50", "vatRate": 10},
                    {"productName": "Cake", "quantity": 1, "unitPrice": "2.50", "vatRate": 10},
                ]
            },
            format="json",
        )

        assert response.status_code == 200
        assert response.data["totals"] == {"subtotal": "5.00", "vat": "0.50", "total": "5.50"}
        assert response.data["items"][1]["subtotal"] == "2.27"
        assert response.data["items"][1]["vatAmount"] == "0.23"
        assert Transaction.objects.count() == 0

    def test_preview_empty_draft(self, api_client):
        response = api_client.post("/api/sales/calculate-totals", {"items": []}, format="json")

        assert response.status_code == 200
        assert response.data["items"] == []
        assert response.data["totals"] == {"subtotal": "0.00", "vat": "0.00", "total": "0.00"}

    def test_preview_invalid_item(self, api_client):
        response = api_client.post(
            "/api/sales/calculate-totals",
            {"items": [{"productName": "A", "quantity": 1, "unitPrice": "1.00", "vatRate": 5}]},
            format="json",
        )

        assert response.status_code == 400
        assert "vatRate" in response.data["errors"]["items"][0]


@pytest.mark.django_db(transaction=True)
class TestRequestAtomicity:
    """Test that a failed request leaves nothing behind under ATOMIC_REQUESTS."""

    def test_failed_create_is_rolled_back(self, api_client, default_client, monkeypatch):
        """The sale is written, then reading it back fails: the 500 must not keep the rows."""
        monkeypatch.setitem(connection.settings_dict, "ATOMIC_REQUESTS", True)

        def failing_get_sale(transaction_id):
            raise RuntimeError("read back failed")

        monkeypatch.setattr(services, "get_sale", failing_get_sale)

        response = api_client.post("/api/transactions", _payload(default_client.id), format="json")

        assert response.status_code == 500
        assert response.data == {"message": "Internal server error"}
        assert Transaction.objects.count() == 0
        assert TransactionItem.objects.count() == 0

    def test_failed_update_is_rolled_back(self, api_client, make_sale, monkeypatch):
        sale = make_sale([("Coffee", 2, "1.50", 10)])
        monkeypatch.setitem(connection.settings_dict, "ATOMIC_REQUESTS", True)

        def failing_get_sale(transaction_id):
            raise RuntimeError("read back failed")

        monkeypatch.setattr(services, "get_sale", failing_get_sale)

        response = api_client.put(
            f"/api/transactions/{sale.id}",
            {
                "items": [
                    {"productName": "Wine", "quantity": 1, "unitPrice": "12.10", "vatRate": 21}
                ]
            },
            format="json",
        )

        assert response.status_code == 500
        sale.refresh_from_db()
        assert sale.total == Decimal("3.00")
        assert [item.product_name for item in sale.items.all()] == ["Coffee"]
