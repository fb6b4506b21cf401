"""
Storage port used by the booking service.

The service only talks to a RoomLedger, so the allocation flow can be driven
against any store that offers a transaction boundary, a locked read of the
free rooms, and a conditional write of the booking.
"""
import logging
from abc import ABC, abstractmethod

from django.db import transaction

from rooms.models import Room
from .models import Booking

logger = logging.getLogger(__name__)


class BookingConflict(Exception):
    """Some of the selected rooms were booked by someone else before the write."""

    def __init__(self, room_numbers):
        self.room_numbers = list(room_numbers)
        super().__init__(f"Rooms already booked: {', '.join(self.room_numbers)}")


class RoomLedger(ABC):

    @abstractmethod
    def atomic(self):
        """Context manager wrapping one read-modify-write unit."""

    @abstractmethod
    def all_rooms(self):
        """Every room, ordered by floor then room number."""

    @abstractmethod
    def available_rooms(self, for_update=False):
        """Unbooked rooms, ordered by floor then room number."""

    @abstractmethod
    def record_booking(self, rooms, travel_time, source='request'):
        """Mark `rooms` as booked and append the matching Booking."""

    @abstractmethod
    def reset(self):
        """Free every room and delete every booking."""


class DjangoRoomLedger(RoomLedger):
    """RoomLedger backed by the Django ORM."""

    def __init__(self, using=None):
        self.using = using

    def atomic(self):
        return transaction.atomic(using=self.using)

    def _rooms(self):
        return Room.objects.using(self.using)

    def all_rooms(self):
        return list(self._rooms().order_by('floor', 'room_number'))

    def available_rooms(self, for_update=False):
        queryset = self._rooms().filter(is_booked=False).order_by('floor', 'room_number')
        if for_update:
            queryset = queryset.select_for_update()
        return list(queryset)

    def record_booking(self, rooms, travel_time, source='request'):
        room_numbers = [room.room_number for room in rooms]
        with self.atomic():
            taken = list(
                self._rooms()
                .filter(room_number__in=room_numbers, is_booked=True)
                .values_list('room_number', flat=True)
            )
            if taken:
                raise BookingConflict(taken)

            updated = (
                self._rooms()
                .filter(room_number__in=room_numbers, is_booked=False)
                .update(is_booked=True)
            )
            # A writer slipping in between the read and the update still fails here
            if updated != len(room_numbers):
                raise BookingConflict(room_numbers)

            booking = Booking(
                room_numbers=room_numbers,
                total_travel_time=travel_time,
                source=source,
            )
            booking.save(using=self.using)

        for room in rooms:
            room.is_booked = True
        return booking

    def reset(self):
        with self.atomic():
            freed = self._rooms().filter(is_booked=True).update(is_booked=False)
            deleted, _ = Booking.objects.using(self.using).delete()
        logger.info(f"Ledger reset: {freed} room(s) freed, {deleted} booking(s) deleted.")
        return freed, deleted
