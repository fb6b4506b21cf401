"""The hotel's fixed room inventory: ten rooms on floors 1-9, seven on floor 10."""
import logging

logger = logging.getLogger(__name__)

ROOMS_PER_FLOOR = {floor: 10 for floor in range(1, 10)}
ROOMS_PER_FLOOR[10] = 7


def room_number_for(floor, position):
    return f"{floor}{position:02d}"


def inventory_layout():
    """Yield (room_number, floor) for every room in the building, lowest first."""
    for floor, positions in sorted(ROOMS_PER_FLOOR.items()):
        for position in range(1, positions + 1):
            yield room_number_for(floor, position), floor


def seed_inventory(room_model=None):
    """Create any missing rooms. Returns how many were created."""
    if room_model is None:
        from .models import Room
        room_model = Room

    existing = set(room_model.objects.values_list('room_number', flat=True))
    missing = [
        room_model(room_number=number, floor=floor)
        for number, floor in inventory_layout()
        if number not in existing
    ]
    room_model.objects.bulk_create(missing)
    if missing:
        logger.info(f"Seeded {len(missing)} room(s) into the inventory.")
    return len(missing)
