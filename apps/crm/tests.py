"""
Tests for the client directory.

Tests the client directory service including:
- Default client bootstrap
- Single default client rule
- Partial updates
- Deletion rules for the default client and clients with sales
"""

import uuid
from datetime import datetime

from django.core.management import call_command
from django.db import IntegrityError, transaction
from django.utils import timezone

import pytest

from apps.core.exceptions import ConflictError, NotFoundError

from .models import Client
from .services import ClientDirectory


@pytest.mark.django_db
class TestDefaultClientBootstrap:
    """Test creation of the generic default client."""

    def test_migrations_create_default_client(self):
        """A freshly migrated database already holds the default client."""
        default = Client.objects.get(is_default=True)
        assert default.name == "Generic Client"
        assert default.is_active is True
        assert default.email == ""
        assert default.tax_id == ""

    def test_ensure_default_is_idempotent(self):
        assert ClientDirectory().ensure_default() is None
        assert Client.objects.filter(is_default=True).count() == 1

    def test_ensure_default_recreates_missing_default(self):
        Client.objects.filter(is_default=True).delete()

        created = ClientDirectory().ensure_default()

        assert created is not None
        assert created.is_default is True
        assert Client.objects.filter(is_default=True).count() == 1

    def test_ensure_default_uses_configured_name(self, settings):
        settings.POS_DEFAULT_CLIENT_NAME = "Cliente Genérico"
        Client.objects.filter(is_default=True).delete()

        created = ClientDirectory().ensure_default()

        assert created.name == "Cliente Genérico"

    def test_management_command(self):
        Client.objects.filter(is_default=True).delete()

        call_command("init_default_client")

        assert Client.objects.filter(is_default=True).count() == 1

    def test_ensure_default_loses_race_quietly(self, monkeypatch):
        """A default inserted concurrently by another process is kept."""
        Client.objects.filter(is_default=True).delete()

        def concurrent_insert(**kwargs):
            raise IntegrityError("UNIQUE constraint failed: clients.is_default")

        monkeypatch.setattr(Client.objects, "create", concurrent_insert)

        assert ClientDirectory().ensure_default() is None

    def test_init_endpoint_survives_concurrent_bootstrap(self, api_client, monkeypatch):
        Client.objects.filter(is_default=True).delete()

        def concurrent_insert(**kwargs):
            raise IntegrityError("UNIQUE constraint failed: clients.is_default")

        monkeypatch.setattr(Client.objects, "create", concurrent_insert)

        response = api_client.post("/api/init")

        assert response.status_code == 200
        assert response.data["created"] is False

    def test_database_rejects_second_default(self):
        """The partial unique constraint backs the service rule."""
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                Client.objects.create(name="Other", is_default=True)


@pytest.mark.django_db
class TestClientDirectory:
    """Test client CRUD through the directory service."""

    def test_list_is_ordered_by_name(self):
        directory = ClientDirectory()
        directory.create({"name": "Zeta Shop"})
        directory.create({"name": "Alpha Shop"})

        names = [client.name for client in directory.list()]

        assert names == sorted(names)
        assert "Generic Client" in names

    def test_create_defaults(self):
        client = ClientDirectory().create({"name": "Acme"})

        assert client.is_default is False
        assert client.is_active is True
        assert client.phone == ""
        assert str(client) == "Acme"

    def test_new_default_replaces_previous(self):
        """Flagging a client as default clears the old default."""
        previous = Client.objects.get(is_default=True)

        client = ClientDirectory().create({"name": "House Account", "is_default": True})

        previous.refresh_from_db()
        assert client.is_default is True
        assert previous.is_default is False
        assert ClientDirectory().get_default() == client
        assert str(client) == "House Account (default)"

    def test_update_to_default_replaces_previous(self, shop_client):
        previous = Client.objects.get(is_default=True)

        ClientDirectory().update(shop_client.id, {"is_default": True})

        previous.refresh_from_db()
        shop_client.refresh_from_db()
        assert shop_client.is_default is True
        assert previous.is_default is False

    def test_partial_update_only_touches_given_fields(self, shop_client):
        updated = ClientDirectory().update(shop_client.id, {"phone": "699000000"})

        assert updated.phone == "699000000"
        assert updated.name == "Acme Bakery"
        assert updated.email == "orders@acme.test"

    def test_get_missing_client(self):
        with pytest.raises(NotFoundError):
            ClientDirectory().get(uuid.uuid4())
        with pytest.raises(NotFoundError):
            ClientDirectory().get("not-a-uuid")

    def test_get_default_when_missing(self):
        Client.objects.filter(is_default=True).delete()
        assert ClientDirectory().get_default() is None

    def test_delete(self, shop_client):
        ClientDirectory().delete(shop_client.id)
        assert not Client.objects.filter(id=shop_client.id).exists()

    def test_delete_default_client_is_refused(self, default_client):
        with pytest.raises(ConflictError):
            ClientDirectory().delete(default_client.id)
        assert Client.objects.filter(id=default_client.id).exists()

    def test_delete_client_with_sales_is_refused(self, shop_client, make_sale):
        sale_date = timezone.make_aware(datetime(2024, 5, 2, 9, 0))
        make_sale([("Bread", 1, "1.00", 4)], sale_date=sale_date, client=shop_client)

        with pytest.raises(ConflictError):
            ClientDirectory().delete(shop_client.id)
        assert Client.objects.filter(id=shop_client.id).exists()

    def test_delete_missing_client(self):
        with pytest.raises(NotFoundError):
            ClientDirectory().delete(uuid.uuid4())
