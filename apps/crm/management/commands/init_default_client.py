"""
Management command to bootstrap the generic default client.
"""

from django.core.management.base import BaseCommand

from apps.crm.services import ClientDirectory


class Command(BaseCommand):
    help = "Create the generic default client if no default client exists"

    def handle(self, *args, **options):
        created = ClientDirectory().ensure_default()

        if created:
            self.stdout.write(self.style.SUCCESS(f"Created default client '{created.name}'"))
        else:
            default = ClientDirectory().get_default()
            self.stdout.write(f"Default client already exists: {default.name}")
