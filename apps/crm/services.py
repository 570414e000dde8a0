"""
Client directory service.

Owns every write to ``Client`` so the single-default invariant is enforced in
one place: whenever a client is flagged as default, any previous default is
cleared inside the same atomic write.
"""

import logging
from typing import Any, Dict, List, Optional

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import ProtectedError

from apps.core.exceptions import ConflictError, NotFoundError, StorageError

from .models import Client

logger = logging.getLogger(__name__)

DEFAULT_CLIENT_NAME = "Generic Client"

_EDITABLE_FIELDS = ("name", "email", "phone", "tax_id", "address", "is_default", "is_active")


def default_client_name() -> str:
    """Name given to the bootstrap client, overridable through settings."""
    return getattr(settings, "POS_DEFAULT_CLIENT_NAME", DEFAULT_CLIENT_NAME)


class ClientDirectory:
    """
    CRUD operations over clients with the default-client rules applied.
    """

    def list(self) -> List[Client]:
        return list(Client.objects.order_by("name", "created_at"))

    def get(self, client_id) -> Client:
        try:
            return Client.objects.get(id=client_id)
        except (Client.DoesNotExist, ValueError, DjangoValidationError):
            raise NotFoundError("Client not found")

    def get_default(self) -> Optional[Client]:
        return Client.objects.filter(is_default=True).first()

    def create(self, data: Dict[str, Any]) -> Client:
        """Create a client; a new default replaces the previous one."""
        values = {field: data[field] for field in _EDITABLE_FIELDS if field in data}
        try:
            with transaction.atomic():
                if values.get("is_default"):
                    self._clear_default()
                client = Client.objects.create(**values)
        except DatabaseError as e:
            raise StorageError("Error creating client") from e

        logger.info(f"Created client {client.id} ({client.name})")
        return client

    def update(self, client_id, data: Dict[str, Any]) -> Client:
        """
        Apply a partial patch to a client.

        Only the fields present in ``data`` are written.
        """
        changes = {field: data[field] for field in _EDITABLE_FIELDS if field in data}
        try:
            with transaction.atomic():
                client = self._get_for_update(client_id)
                if changes.get("is_default") and not client.is_default:
                    self._clear_default(exclude=client.id)
                for field, value in changes.items():
                    setattr(client, field, value)
                if changes:
                    client.save(update_fields=list(changes))
        except DatabaseError as e:
            raise StorageError("Error updating client") from e

        logger.info(f"Updated client {client.id}: {', '.join(sorted(changes)) or 'no changes'}")
        return client

    def delete(self, client_id) -> None:
        """
        Delete a client.

        Raises:
            NotFoundError: If the client does not exist.
            ConflictError: If the client is the default one or has transactions.
        """
        client = self.get(client_id)
        if client.is_default:
            logger.warning(f"Refused to delete default client {client.id}")
            raise ConflictError("The default client cannot be deleted")
        if client.transactions.exists():
            logger.warning(f"Refused to delete client {client.id} with transactions")
            raise ConflictError("The client has transactions and cannot be deleted")

        try:
            client.delete()
        except ProtectedError:
            raise ConflictError("The client has transactions and cannot be deleted")
        except DatabaseError as e:
            raise StorageError("Error deleting client") from e

        logger.info(f"Deleted client {client_id}")

    def ensure_default(self) -> Optional[Client]:
        """
        Create the generic default client if none exists yet.

        When another process creates the default at the same time, the partial
        unique constraint rejects this insert and the other default is kept.

        Returns:
            The newly created client, or ``None`` when a default already existed.
        """
        try:
            with transaction.atomic():
                if Client.objects.select_for_update().filter(is_default=True).exists():
                    return None
                client = Client.objects.create(
                    name=default_client_name(),
                    email="",
                    phone="",
                    tax_id="",
                    address="",
                    is_default=True,
                    is_active=True,
                )
        except IntegrityError:
            logger.warning("Default client was created concurrently; keeping the existing one")
            return None

        logger.info(f"Bootstrapped default client {client.id}")
        return client

    def _get_for_update(self, client_id) -> Client:
        try:
            return Client.objects.select_for_update().get(id=client_id)
        except (Client.DoesNotExist, ValueError, DjangoValidationError):
            raise NotFoundError("Client not found")

    def _clear_default(self, exclude=None) -> None:
        queryset = Client.objects.filter(is_default=True)
        if exclude is not None:
            queryset = queryset.exclude(id=exclude)
        cleared = queryset.update(is_default=False)
        if cleared:
            logger.info("Cleared previous default client")
