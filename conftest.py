"""
Pytest configuration and fixtures for the POS back office.

Every test database starts with the generic default client, created by the
``post_migrate`` bootstrap of the CRM app.
"""

from decimal import Decimal

from django.utils import timezone

import pytest


@pytest.fixture
def api_client():
    """
    Fixture for Django REST framework API client.
    """
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def default_client():
    """The bootstrapped generic client."""
    from apps.crm.models import Client

    return Client.objects.get(is_default=True)


@pytest.fixture
def shop_client():
    """A regular, non-default client."""
    from apps.crm.models import Client

    return Client.objects.create(
        name="Acme Bakery",
        email="orders@acme.test",
        phone="600111222",
        tax_id="B12345678",
        address="Calle Mayor 1, Madrid",
    )


@pytest.fixture
def make_sale(default_client):
    """
    Factory committing a sale through the service layer.

    ``lines`` are ``(product_name, quantity, unit_price, vat_rate)`` tuples.
    """
    from apps.sales.builder import SaleItemBuilder
    from apps.sales.services import commit_sale

    def _make_sale(lines, sale_date=None, payment_method="cash", client=None):
        builder = SaleItemBuilder()
        for product_name, quantity, unit_price, vat_rate in lines:
            builder.add_item(product_name, quantity, Decimal(str(unit_price)), vat_rate)
        return commit_sale(
            client_id=(client or default_client).id,
            sale_date=sale_date or timezone.now(),
            payment_method=payment_method,
            items=builder.items,
        )

    return _make_sale
