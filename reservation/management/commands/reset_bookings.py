from django.core.management.base import BaseCommand
from reservation.services import get_booking_service


class Command(BaseCommand):
    help = 'Free every room and delete all bookings.'

    def handle(self, *args, **kwargs):
        freed, deleted = get_booking_service().reset()
        self.stdout.write(self.style.SUCCESS(
            f"Bookings reset: {freed} room(s) freed, {deleted} booking(s) deleted."
        ))
