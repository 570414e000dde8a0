"""
Signal handlers for the client directory.

Bootstraps the generic default client once the ``clients`` table exists, so
every deployment (and every fresh test database) starts with a fallback client
for sales entered without picking anyone.
"""

import logging

from django.db.models.signals import post_migrate
from django.dispatch import receiver

logger = logging.getLogger(__name__)


@receiver(post_migrate, dispatch_uid="crm_bootstrap_default_client")
def bootstrap_default_client(sender, app_config=None, using="default", **kwargs):
    """Create the default client after the CRM app has been migrated."""
    if app_config is None or app_config.label != "crm":
        return

    from .services import ClientDirectory

    created = ClientDirectory().ensure_default()
    if created:
        logger.info(f"Default client created on database '{using}'")
