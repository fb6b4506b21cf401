from rest_framework import serializers
from django.conf import settings

from rooms.allocation import MAX_ROOMS_PER_BOOKING
from .models import Booking


class BookingSerializer(serializers.ModelSerializer):
    room_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Booking
        fields = ['id', 'room_numbers', 'room_count', 'total_travel_time', 'source', 'created_at']
        read_only_fields = fields


class WholeNumberField(serializers.IntegerField):
    """IntegerField that refuses floats, bools and decimal strings such as "2.0"."""

    def to_internal_value(self, data):
        if isinstance(data, (bool, float)) or (isinstance(data, str) and not data.strip().lstrip('-').isdigit()):
            self.fail('invalid')
        return super().to_internal_value(data)


class BookingRequestSerializer(serializers.Serializer):
    num_rooms = WholeNumberField(
        min_value=1,
        max_value=MAX_ROOMS_PER_BOOKING,
        error_messages={
            'min_value': f'Number of rooms must be between 1 and {MAX_ROOMS_PER_BOOKING}',
            'max_value': f'Number of rooms must be between 1 and {MAX_ROOMS_PER_BOOKING}',
        },
    )

    def to_internal_value(self, data):
        # Older clients send the count as `numRooms`
        if hasattr(data, 'get') and 'num_rooms' not in data and 'numRooms' in data:
            data = {'num_rooms': data.get('numRooms')}
        return super().to_internal_value(data)


class RandomOccupancySerializer(serializers.Serializer):
    rate = serializers.FloatField(min_value=0.0, max_value=1.0, required=False)

    def validate(self, data):
        data.setdefault('rate', getattr(settings, 'RANDOM_OCCUPANCY_RATE', 0.3))
        return data
