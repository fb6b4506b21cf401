import random
from io import StringIO

from django.core.management import call_command
from django.test import TestCase
from django.urls import reverse

from rest_framework.test import APIClient
from rest_framework import status

from rooms.exceptions import InsufficientInventory, MalformedIdentifier
from rooms.models import Room
from reservation.ledger import BookingConflict, DjangoRoomLedger
from reservation.models import Booking
from reservation.services import BookingService


def leave_available(*numbers):
    """Book every room except `numbers`."""
    Room.objects.exclude(room_number__in=numbers).update(is_booked=True)


def booked_numbers():
    return set(Room.objects.filter(is_booked=True).values_list('room_number', flat=True))


def ledger_numbers():
    numbers = set()
    for booking in Booking.objects.all():
        numbers.update(booking.room_numbers)
    return numbers


class InterferingLedger(DjangoRoomLedger):
    """Books the first selected room behind the service's back before writing."""

    def __init__(self, interfere_times):
        super().__init__()
        self.interfere_times = interfere_times
        self.writes = 0

    def record_booking(self, rooms, travel_time, source='request'):
        self.writes += 1
        if self.writes <= self.interfere_times:
            Room.objects.filter(room_number=rooms[0].room_number).update(is_booked=True)
        return super().record_booking(rooms, travel_time, source=source)


class BookingServiceTest(TestCase):
    def setUp(self):
        self.service = BookingService(DjangoRoomLedger(), max_attempts=3)

    def test_book_same_floor(self):
        result = self.service.book(3)
        self.assertEqual(result.booking.room_numbers, ['101', '102', '103'])
        self.assertEqual(result.travel_time, 2)
        self.assertEqual(result.booking.total_travel_time, 2)
        self.assertEqual(result.booking.source, 'request')
        self.assertEqual(booked_numbers(), {'101', '102', '103'})
        self.assertTrue(all(room.is_booked for room in result.rooms))

    def test_consecutive_bookings_keep_ledger_in_sync(self):
        self.service.book(5)
        self.service.book(5)
        self.service.book(2)
        self.assertEqual(Booking.objects.count(), 3)
        self.assertEqual(booked_numbers(), ledger_numbers())
        self.assertEqual(len(booked_numbers()), 12)
        latest = Booking.objects.first()
        self.assertEqual(latest.room_numbers, ['201', '202'])

    def test_fallback_across_floors(self):
        leave_available('101', '102', '103', '201', '202', '305')
        result = self.service.book(4)
        self.assertEqual(result.booking.room_numbers, ['101', '102', '103', '201'])
        self.assertEqual(result.travel_time, 2)

    def test_insufficient_inventory_commits_nothing(self):
        leave_available('101', '505', '1007')
        with self.assertRaises(InsufficientInventory):
            self.service.book(5)
        self.assertFalse(Booking.objects.exists())
        self.assertEqual(Room.objects.filter(is_booked=False).count(), 3)

    def test_malformed_inventory_rolls_back(self):
        leave_available('305')
        Room.objects.bulk_create([Room(room_number='4X', floor=4)])
        with self.assertRaises(MalformedIdentifier):
            self.service.book(2)
        self.assertFalse(Booking.objects.exists())
        self.assertEqual(Room.objects.filter(is_booked=False).count(), 2)

    def test_conflict_is_retried(self):
        ledger = InterferingLedger(interfere_times=1)
        result = BookingService(ledger, max_attempts=3).book(2)
        self.assertEqual(ledger.writes, 2)
        self.assertEqual(result.booking.room_numbers, ['101', '102'])
        self.assertEqual(Booking.objects.count(), 1)
        self.assertEqual(booked_numbers(), {'101', '102'})

    def test_conflict_after_last_attempt_propagates(self):
        ledger = InterferingLedger(interfere_times=10)
        with self.assertRaises(BookingConflict):
            BookingService(ledger, max_attempts=2).book(2)
        self.assertEqual(ledger.writes, 2)
        self.assertFalse(Booking.objects.exists())
        self.assertEqual(booked_numbers(), set())

    def test_record_booking_rejects_booked_rooms(self):
        ledger = DjangoRoomLedger()
        rooms = list(Room.objects.filter(room_number__in=['101', '102']))
        Room.objects.filter(room_number='102').update(is_booked=True)
        with self.assertRaises(BookingConflict) as ctx:
            ledger.record_booking(rooms, 1)
        self.assertEqual(ctx.exception.room_numbers, ['102'])
        self.assertFalse(Room.objects.get(room_number='101').is_booked)

    def test_random_occupancy_records_bookings(self):
        occupied = self.service.randomize_occupancy(0.5, rng=random.Random(7))
        self.assertTrue(0 < len(occupied) < 97)
        self.assertEqual(booked_numbers(), set(occupied))
        self.assertEqual(ledger_numbers(), set(occupied))
        self.assertEqual(Booking.objects.filter(source='simulated').count(), len(occupied))
        self.assertFalse(Booking.objects.exclude(total_travel_time=0).exists())

    def test_random_occupancy_bounds(self):
        self.assertEqual(self.service.randomize_occupancy(0.0), [])
        self.assertEqual(len(self.service.randomize_occupancy(1.0)), 97)
        with self.assertRaises(ValueError):
            self.service.randomize_occupancy(1.5)

    def test_reset(self):
        self.service.book(4)
        self.service.randomize_occupancy(0.2, rng=random.Random(1))
        freed, deleted = self.service.reset()
        self.assertGreaterEqual(freed, 4)
        self.assertGreaterEqual(deleted, 1)
        self.assertFalse(Room.objects.filter(is_booked=True).exists())
        self.assertFalse(Booking.objects.exists())
        self.assertEqual(Room.objects.count(), 97)

    def test_max_attempts_must_be_positive(self):
        with self.assertRaises(ValueError):
            BookingService(DjangoRoomLedger(), max_attempts=0)


class BookingAPITest(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_book_rooms(self):
        resp = self.client.post(reverse('book-rooms'), {'num_rooms': 2}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertTrue(resp.data['success'])
        self.assertEqual([r['room_number'] for r in resp.data['selected_rooms']], ['101', '102'])
        self.assertEqual(resp.data['total_travel_time'], 1)
        self.assertEqual(resp.data['booking']['room_numbers'], ['101', '102'])
        self.assertTrue(all(r['is_booked'] for r in resp.data['selected_rooms']))
        self.assertTrue(Room.objects.get(room_number='102').is_booked)

    def test_book_accepts_camel_case_count(self):
        resp = self.client.post(reverse('book-rooms'), {'numRooms': 3}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data['booking']['room_count'], 3)

    def test_book_rejects_invalid_counts(self):
        for payload in [{}, {'num_rooms': 0}, {'num_rooms': 6}, {'num_rooms': 'many'}]:
            resp = self.client.post(reverse('book-rooms'), payload, format='json')
            self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST, payload)
            self.assertIn('error', resp.data)
        self.assertFalse(Booking.objects.exists())

    def test_book_rejects_non_integral_counts(self):
        for value in ['2.0', 2.0, 2.5, True]:
            resp = self.client.post(reverse('book-rooms'), {'num_rooms': value}, format='json')
            self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST, value)
            self.assertEqual(resp.data['error'], 'A valid integer is required.')
        self.assertFalse(Booking.objects.exists())

    def test_book_accepts_count_as_digit_string(self):
        resp = self.client.post(reverse('book-rooms'), {'num_rooms': '2'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data['booking']['room_numbers'], ['101', '102'])

    def test_book_out_of_range_message(self):
        resp = self.client.post(reverse('book-rooms'), {'num_rooms': 6}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data['error'], 'Number of rooms must be between 1 and 5')
        self.assertIn('num_rooms', resp.data['details'])

    def test_book_missing_count_message(self):
        resp = self.client.post(reverse('book-rooms'), {}, format='json')
        self.assertEqual(resp.data['error'], 'This field is required.')

    def test_book_insufficient_inventory(self):
        leave_available('101', '202', '303')
        resp = self.client.post(reverse('book-rooms'), {'num_rooms': 5}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('Not enough available rooms', resp.data['error'])
        self.assertFalse(Booking.objects.exists())

    def test_book_cross_floor_fallback(self):
        leave_available('108', '109', '110', '201', '210')
        resp = self.client.post(reverse('book-rooms'), {'num_rooms': 4}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data['booking']['room_numbers'], ['108', '109', '110', '201'])
        self.assertEqual(resp.data['total_travel_time'], 2)

    def test_book_with_malformed_inventory(self):
        leave_available('101')
        Room.objects.bulk_create([Room(room_number='9Z', floor=9)])
        resp = self.client.post(reverse('book-rooms'), {'num_rooms': 2}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertIn('Malformed room number', resp.data['error'])

    def test_list_bookings(self):
        self.client.post(reverse('book-rooms'), {'num_rooms': 1}, format='json')
        self.client.post(reverse('random-occupancy'), {'rate': 1.0}, format='json')
        resp = self.client.get(reverse('booking-list'))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(len(resp.data), 97)

        resp = self.client.get(reverse('booking-list'), {'source': 'request'})
        self.assertEqual(len(resp.data), 1)
        self.assertEqual(resp.data[0]['room_numbers'], ['101'])

        booking = Booking.objects.get(source='request')
        resp = self.client.get(reverse('booking-detail', args=[booking.pk]))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['total_travel_time'], 0)

    def test_random_occupancy(self):
        resp = self.client.post(reverse('random-occupancy'), {'rate': 1.0}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertTrue(resp.data['success'])
        self.assertEqual(len(resp.data['rooms_booked']), 97)
        self.assertEqual(resp.data['message'], 'Marked 97 rooms as booked')

    def test_random_occupancy_default_rate(self):
        resp = self.client.post(reverse('random-occupancy'))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(booked_numbers(), set(resp.data['rooms_booked']))

    def test_random_occupancy_rejects_bad_rate(self):
        resp = self.client.post(reverse('random-occupancy'), {'rate': 2}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_reset(self):
        self.client.post(reverse('book-rooms'), {'num_rooms': 5}, format='json')
        resp = self.client.post(reverse('reset'))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['message'], 'All bookings reset successfully')
        self.assertEqual(resp.data['rooms_freed'], 5)
        self.assertFalse(Room.objects.filter(is_booked=True).exists())
        self.assertFalse(Booking.objects.exists())

    def test_reset_bookings_command(self):
        self.client.post(reverse('book-rooms'), {'num_rooms': 2}, format='json')
        out = StringIO()
        call_command('reset_bookings', stdout=out)
        self.assertIn('2 room(s) freed', out.getvalue())
        self.assertFalse(Booking.objects.exists())

    def test_schema(self):
        resp = self.client.get(reverse('schema'))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
