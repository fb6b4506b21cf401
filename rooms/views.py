from django.db.models import Count, Q
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema

from .models import Room
from .serializers import RoomSerializer, OccupancySerializer


def available_rooms_queryset():
    return Room.objects.filter(is_booked=False).order_by('floor', 'room_number')


class RoomViewSet(viewsets.ReadOnlyModelViewSet):
    """Read access to the room inventory."""
    queryset = Room.objects.all().order_by('floor', 'room_number')
    serializer_class = RoomSerializer
    lookup_field = 'room_number'
    filterset_fields = ['floor', 'is_booked']

    @extend_schema(responses=RoomSerializer(many=True))
    @action(detail=False, methods=['get'])
    def available(self, request):
        serializer = self.get_serializer(available_rooms_queryset(), many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)

    @extend_schema(responses=OccupancySerializer)
    @action(detail=False, methods=['get'])
    def occupancy(self, request):
        """Booked and free room counts per floor."""
        per_floor = (
            Room.objects.values('floor')
            .annotate(total=Count('id'), booked=Count('id', filter=Q(is_booked=True)))
            .order_by('floor')
        )
        floors = [
            {
                'floor': row['floor'],
                'total': row['total'],
                'booked': row['booked'],
                'available': row['total'] - row['booked'],
            }
            for row in per_floor
        ]
        total_rooms = sum(row['total'] for row in floors)
        booked_rooms = sum(row['booked'] for row in floors)
        serializer = OccupancySerializer({
            'total_rooms': total_rooms,
            'booked_rooms': booked_rooms,
            'available_rooms': total_rooms - booked_rooms,
            'floors': floors,
        })
        return Response(serializer.data, status=status.HTTP_200_OK)


class AvailableRoomsView(APIView):
    """Unbooked rooms, ordered by floor then room number."""

    @extend_schema(responses=RoomSerializer(many=True))
    def get(self, request):
        serializer = RoomSerializer(available_rooms_queryset(), many=True)
        return Response(serializer.data)
