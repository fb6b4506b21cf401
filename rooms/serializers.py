from rest_framework import serializers
from .models import Room


class RoomSerializer(serializers.ModelSerializer):
    position = serializers.IntegerField(read_only=True)
    status_label = serializers.SerializerMethodField()

    class Meta:
        model = Room
        fields = ['id', 'room_number', 'floor', 'position', 'is_booked', 'status_label', 'updated_at']
        read_only_fields = fields

    def get_status_label(self, obj):
        return 'Booked' if obj.is_booked else 'Available'


class FloorOccupancySerializer(serializers.Serializer):
    floor = serializers.IntegerField()
    total = serializers.IntegerField()
    booked = serializers.IntegerField()
    available = serializers.IntegerField()


class OccupancySerializer(serializers.Serializer):
    total_rooms = serializers.IntegerField()
    booked_rooms = serializers.IntegerField()
    available_rooms = serializers.IntegerField()
    floors = FloorOccupancySerializer(many=True)
