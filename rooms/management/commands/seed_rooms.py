from django.core.management.base import BaseCommand
from rooms.inventory import seed_inventory


class Command(BaseCommand):
    help = 'Create any rooms missing from the hotel inventory.'

    def handle(self, *args, **kwargs):
        created = seed_inventory()
        self.stdout.write(self.style.SUCCESS(f"Inventory ready, {created} room(s) created."))
