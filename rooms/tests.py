from io import StringIO

from django.core.exceptions import ValidationError
from django.core.management import call_command
from django.test import SimpleTestCase, TestCase
from django.urls import reverse

from rest_framework.test import APIClient
from rest_framework import status

from rooms.allocation import calculate_travel_time, parse_room_number, select_rooms
from rooms.exceptions import InsufficientInventory, InvalidCount, MalformedIdentifier
from rooms.inventory import inventory_layout
from rooms.models import Room


def make_rooms(*numbers):
    """Unsaved rooms, floor derived from the room number."""
    return [Room(room_number=str(n), floor=parse_room_number(n).floor) for n in numbers]


def numbers_of(rooms):
    return [room.room_number for room in rooms]


class ParseRoomNumberTest(SimpleTestCase):

    def test_floors_one_to_nine(self):
        for floor in range(1, 10):
            for position in range(1, 11):
                number = f"{floor}{position:02d}"
                self.assertEqual(parse_room_number(number), (floor, position))

    def test_floor_ten(self):
        for position in range(1, 8):
            self.assertEqual(parse_room_number(f"10{position:02d}"), (10, position))

    def test_three_digit_numbers_starting_with_ten_are_floor_one(self):
        self.assertEqual(parse_room_number('101'), (1, 1))
        self.assertEqual(parse_room_number('109'), (1, 9))
        self.assertEqual(parse_room_number('110'), (1, 10))
        self.assertEqual(parse_room_number('100'), (1, 0))
        self.assertEqual(parse_room_number(101), (1, 1))

    def test_accepts_integers(self):
        self.assertEqual(parse_room_number(305), (3, 5))
        self.assertEqual(parse_room_number(1007), (10, 7))

    def test_result_fields(self):
        location = parse_room_number('110')
        self.assertEqual(location.floor, 1)
        self.assertEqual(location.position, 10)

    def test_malformed_identifiers(self):
        for bad in ['', 'abc', '3a5', '-12', '1', '05', '0']:
            with self.assertRaises(MalformedIdentifier, msg=bad):
                parse_room_number(bad)


class TravelTimeTest(SimpleTestCase):

    def test_empty_and_single(self):
        self.assertEqual(calculate_travel_time([]), 0)
        self.assertEqual(calculate_travel_time(['305']), 0)
        self.assertEqual(calculate_travel_time(['1007']), 0)

    def test_same_floor(self):
        self.assertEqual(calculate_travel_time(['301', '305']), 4)
        self.assertEqual(calculate_travel_time(['1001', '1007']), 6)

    def test_cross_floor_ignores_positions(self):
        self.assertEqual(calculate_travel_time(['110', '305']), 4)
        self.assertEqual(calculate_travel_time(['101', '1007']), 18)

    def test_only_extremes_count(self):
        # 301 -> 310 -> 302 would be longer if every hop counted
        self.assertEqual(calculate_travel_time(['301', '310', '302']), 9)

    def test_order_does_not_matter(self):
        rooms = ['204', '101', '1003', '505']
        expected = calculate_travel_time(rooms)
        self.assertEqual(calculate_travel_time(list(reversed(rooms))), expected)
        self.assertEqual(calculate_travel_time(sorted(rooms)), expected)
        self.assertEqual(expected, 18)

    def test_numeric_not_lexical_extremes(self):
        # Lexically "1001" < "201", numerically it is the top room
        self.assertEqual(calculate_travel_time(['201', '1001']), 16)

    def test_malformed(self):
        with self.assertRaises(MalformedIdentifier):
            calculate_travel_time(['101', 'x1'])


class SelectRoomsTest(SimpleTestCase):

    def test_first_floor_with_capacity_wins(self):
        available = make_rooms('101', '102', '201', '202', '203', '204', '301')
        selected = select_rooms(available, 3)
        self.assertEqual(numbers_of(selected), ['201', '202', '203'])

    def test_single_floor_preferred_over_cheaper_cross_floor(self):
        available = make_rooms('101', '110', '201')
        selected = select_rooms(available, 2)
        self.assertEqual(numbers_of(selected), ['101', '110'])
        self.assertEqual(calculate_travel_time(numbers_of(selected)), 9)

    def test_floors_scanned_numerically(self):
        available = make_rooms('1001', '1002', '201', '202')
        self.assertEqual(numbers_of(select_rooms(available, 2)), ['201', '202'])

    def test_floor_rooms_taken_in_given_order(self):
        available = make_rooms('402', '405', '410')
        self.assertEqual(numbers_of(select_rooms(available, 2)), ['402', '405'])

    def test_first_floor_booking_from_full_inventory(self):
        available = make_rooms(*[f"1{p:02d}" for p in range(1, 11)], '201', '202')
        selected = select_rooms(available, 2)
        self.assertEqual(numbers_of(selected), ['101', '102'])
        self.assertEqual(calculate_travel_time(numbers_of(selected)), 1)

    def test_global_fallback_keeps_floor_one_order(self):
        available = make_rooms('110', '201', '101', '109')
        selected = select_rooms(available, 4)
        self.assertEqual(numbers_of(selected), ['101', '109', '110', '201'])

    def test_global_fallback(self):
        available = make_rooms('204', '101', '202', '109', '206', '105')
        selected = select_rooms(available, 4)
        self.assertEqual(numbers_of(selected), ['101', '105', '109', '202'])

    def test_global_fallback_across_top_floor(self):
        available = make_rooms('1002', '905', '1001', '901')
        self.assertEqual(numbers_of(select_rooms(available, 3)), ['901', '905', '1001'])

    def test_invalid_count(self):
        available = make_rooms('101', '102', '103', '104', '105', '106')
        for count in [0, 6, -1, '3', 2.0, True]:
            with self.assertRaises(InvalidCount, msg=repr(count)):
                select_rooms(available, count)

    def test_insufficient_inventory(self):
        with self.assertRaises(InsufficientInventory) as ctx:
            select_rooms(make_rooms('101', '201', '301'), 5)
        self.assertEqual(ctx.exception.requested, 5)
        self.assertEqual(ctx.exception.available, 3)

    def test_repeatable_and_does_not_mutate(self):
        available = make_rooms('101', '203', '202', '305')
        first = numbers_of(select_rooms(available, 3))
        second = numbers_of(select_rooms(available, 3))
        self.assertEqual(first, second)
        self.assertEqual(numbers_of(available), ['101', '203', '202', '305'])
        self.assertFalse(any(room.is_booked for room in available))


class RoomModelTest(TestCase):

    def test_inventory_is_seeded(self):
        self.assertEqual(Room.objects.count(), 97)
        self.assertEqual(Room.objects.filter(floor=10).count(), 7)
        self.assertFalse(Room.objects.filter(is_booked=True).exists())
        self.assertEqual(list(Room.objects.values_list('room_number', flat=True)),
                         [number for number, _ in inventory_layout()])

    def test_floor_derived_on_save(self):
        Room.objects.filter(room_number='1007').delete()
        room = Room.objects.create(room_number='1007')
        self.assertEqual(room.floor, 10)
        self.assertEqual(room.position, 7)

    def test_room_number_validation(self):
        room = Room(room_number='0AB', floor=1)
        with self.assertRaises(ValidationError):
            room.full_clean()

    def test_seed_rooms_command_restores_missing(self):
        Room.objects.filter(floor=3).delete()
        out = StringIO()
        call_command('seed_rooms', stdout=out)
        self.assertIn('10 room(s) created', out.getvalue())
        self.assertEqual(Room.objects.count(), 97)


class RoomsAPITest(TestCase):
    def setUp(self):
        self.client = APIClient()
        Room.objects.filter(room_number__in=['101', '102', '1001']).update(is_booked=True)

    def test_list_rooms(self):
        resp = self.client.get(reverse('room-list'))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        data = resp.data
        results = data.get('results', data) if isinstance(data, dict) else data
        self.assertEqual(len(results), 97)
        item = results[0]
        for key in ('id', 'room_number', 'floor', 'position', 'is_booked', 'status_label'):
            self.assertIn(key, item)
        self.assertEqual(item['room_number'], '101')
        self.assertEqual(item['status_label'], 'Booked')

    def test_filter_by_floor(self):
        resp = self.client.get(reverse('room-list'), {'floor': 10})
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual([r['room_number'] for r in resp.data],
                         ['1001', '1002', '1003', '1004', '1005', '1006', '1007'])

    def test_retrieve_room(self):
        resp = self.client.get(reverse('room-detail', args=['305']))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['floor'], 3)
        self.assertEqual(resp.data['position'], 5)
        self.assertFalse(resp.data['is_booked'])

    def test_available_rooms(self):
        resp = self.client.get(reverse('room-available'))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        numbers = [r['room_number'] for r in resp.data]
        self.assertEqual(len(numbers), 94)
        self.assertEqual(numbers[0], '103')
        self.assertNotIn('1001', numbers)

    def test_available_rooms_alias(self):
        resp = self.client.get(reverse('available-rooms'))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(len(resp.data), 94)

    def test_occupancy(self):
        resp = self.client.get(reverse('room-occupancy'))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['total_rooms'], 97)
        self.assertEqual(resp.data['booked_rooms'], 3)
        self.assertEqual(resp.data['available_rooms'], 94)
        floors = {row['floor']: row for row in resp.data['floors']}
        self.assertEqual(floors[1]['booked'], 2)
        self.assertEqual(floors[1]['available'], 8)
        self.assertEqual(floors[10]['total'], 7)

    def test_rooms_are_read_only(self):
        resp = self.client.post(reverse('room-list'), {'room_number': '1008'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
