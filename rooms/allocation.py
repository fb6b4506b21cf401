"""
Room allocation core.

Room numbers encode their location: floors 1-9 use one floor digit followed by
a two digit position ("305" is floor 3, position 5) and floor 10 uses "10"
followed by the position ("1007" is floor 10, position 7).

Nothing in this module touches the database. Rooms are duck-typed: anything
with ``room_number`` and ``floor`` attributes can be selected, which includes
``rooms.models.Room`` instances.
"""
from collections import defaultdict, namedtuple

from .exceptions import (
    InsufficientInventory,
    InternalInconsistency,
    InvalidCount,
    MalformedIdentifier,
)

MAX_ROOMS_PER_BOOKING = 5

# Cost units per floor crossed by the elevator.
FLOOR_TRAVEL_COST = 2

TOP_FLOOR = 10


RoomLocation = namedtuple('RoomLocation', ['floor', 'position'])


def parse_room_number(identifier):
    """Decode a room number into its (floor, position) pair."""
    text = str(identifier).strip()
    if not (text.isascii() and text.isdigit()):
        raise MalformedIdentifier(identifier, 'expected digits only')

    # Only four digit numbers belong to the top floor; "101" is floor 1, position 1
    if len(text) >= 4 and text.startswith('10'):
        floor, suffix = TOP_FLOOR, text[2:]
    else:
        floor, suffix = int(text[0]), text[1:]

    if not suffix:
        raise MalformedIdentifier(identifier, 'missing position on floor')
    if not 1 <= floor <= TOP_FLOOR:
        raise MalformedIdentifier(identifier, f'floor {floor} out of range')

    return RoomLocation(floor=floor, position=int(suffix))


def _numeric_value(identifier):
    try:
        return int(str(identifier).strip())
    except ValueError:
        raise MalformedIdentifier(identifier, 'not a number')


def calculate_travel_time(room_numbers):
    """
    Travel cost between the lowest and highest numbered rooms of a booking.

    Crossing a floor costs FLOOR_TRAVEL_COST. Walking along a corridor costs one
    unit per position, and only counts when both rooms share a floor.
    """
    numbers = list(room_numbers)
    if len(numbers) <= 1:
        return 0

    ordered = sorted(numbers, key=_numeric_value)
    first = parse_room_number(ordered[0])
    last = parse_room_number(ordered[-1])

    vertical = abs(last.floor - first.floor) * FLOOR_TRAVEL_COST
    horizontal = 0
    if first.floor == last.floor:
        horizontal = abs(last.position - first.position)

    return vertical + horizontal


def _location_key(room):
    return parse_room_number(room.room_number)


def select_rooms(available_rooms, count):
    """
    Pick `count` rooms out of `available_rooms`.

    A single floor that can hold the whole booking always wins, scanning floors
    from the lowest up and keeping that floor's rooms in the order given
    (callers pass rooms sorted by floor and room number). Only when no floor
    is large enough are rooms taken from the start of the global
    (floor, position) ordering. The fallback is greedy
    and does not search for the combination with the lowest travel time.
    """
    if isinstance(count, bool) or not isinstance(count, int) or not 1 <= count <= MAX_ROOMS_PER_BOOKING:
        raise InvalidCount(count, MAX_ROOMS_PER_BOOKING)

    rooms = list(available_rooms)
    if len(rooms) < count:
        raise InsufficientInventory(count, len(rooms))

    rooms_by_floor = defaultdict(list)
    for room in rooms:
        rooms_by_floor[room.floor].append(room)

    for floor in sorted(rooms_by_floor):
        floor_rooms = rooms_by_floor[floor]
        if len(floor_rooms) >= count:
            return floor_rooms[:count]

    selected = sorted(rooms, key=_location_key)[:count]
    if len(selected) < count:
        raise InternalInconsistency(
            f"Selected {len(selected)} of {count} rooms after the inventory check passed"
        )
    return selected
