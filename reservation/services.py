import logging
import random
from collections import namedtuple

from django.conf import settings

from rooms.allocation import calculate_travel_time, select_rooms
from .ledger import BookingConflict, DjangoRoomLedger

logger = logging.getLogger(__name__)

BookingResult = namedtuple('BookingResult', ['booking', 'rooms', 'travel_time'])


class BookingService:
    """Runs room allocation inside the ledger's transaction boundary."""

    def __init__(self, ledger, max_attempts=1):
        if max_attempts < 1:
            raise ValueError('max_attempts must be at least 1')
        self.ledger = ledger
        self.max_attempts = max_attempts

    def book(self, count):
        """
        Allocate and book `count` rooms.

        The read of free rooms, the selection and the write share one
        transaction. A conflicting write rolls the whole unit back and the
        allocation restarts from a fresh read, up to `max_attempts` times.
        Allocation errors propagate after the rollback.

        Returns:
            BookingResult with the stored booking, the rooms and the travel time
        """
        for attempt in range(1, self.max_attempts + 1):
            try:
                with self.ledger.atomic():
                    available = self.ledger.available_rooms(for_update=True)
                    selected = select_rooms(available, count)
                    room_numbers = [room.room_number for room in selected]
                    travel_time = calculate_travel_time(room_numbers)
                    booking = self.ledger.record_booking(selected, travel_time)
            except BookingConflict as e:
                logger.warning(f"Booking attempt {attempt}/{self.max_attempts} conflicted: {e}")
                if attempt == self.max_attempts:
                    raise
                continue

            logger.info(
                f"Booked rooms {', '.join(room_numbers)} "
                f"(travel time {travel_time}) as booking {booking.pk}"
            )
            return BookingResult(booking=booking, rooms=selected, travel_time=travel_time)

    def randomize_occupancy(self, rate, rng=None):
        """
        Mark each free room as booked with probability `rate`.

        Every room occupied this way gets its own simulated booking, so the
        ledger keeps agreeing with the room flags.
        """
        if not 0 <= rate <= 1:
            raise ValueError('rate must be between 0 and 1')
        rng = rng or random.Random()

        occupied = []
        with self.ledger.atomic():
            for room in self.ledger.available_rooms(for_update=True):
                if rng.random() < rate:
                    self.ledger.record_booking([room], 0, source='simulated')
                    occupied.append(room.room_number)

        logger.info(f"Random occupancy marked {len(occupied)} room(s) as booked.")
        return occupied

    def reset(self):
        return self.ledger.reset()


def get_booking_service():
    return BookingService(
        DjangoRoomLedger(),
        max_attempts=getattr(settings, 'BOOKING_MAX_ATTEMPTS', 3),
    )
