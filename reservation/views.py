import logging

from rest_framework import viewsets, status
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.filters import OrderingFilter
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from rooms.exceptions import (
    InsufficientInventory,
    InternalInconsistency,
    InvalidCount,
    MalformedIdentifier,
)
from rooms.serializers import RoomSerializer
from .ledger import BookingConflict
from .models import Booking
from .serializers import BookingSerializer, BookingRequestSerializer, RandomOccupancySerializer
from .services import get_booking_service

logger = logging.getLogger(__name__)


class BookingViewSet(viewsets.ReadOnlyModelViewSet):
    """The booking ledger, newest first."""
    queryset = Booking.objects.all()
    serializer_class = BookingSerializer
    filter_backends = (DjangoFilterBackend, OrderingFilter)
    filterset_fields = ['source']
    ordering_fields = ['created_at', 'total_travel_time']

    @extend_schema(
        parameters=[
            OpenApiParameter(
                name='source',
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                description='Filter by booking source',
                enum=['request', 'simulated'],
            ),
        ]
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)


class BookRoomsView(APIView):
    """Allocate the requested number of rooms and record the booking."""

    def get_service(self):
        return get_booking_service()

    @extend_schema(request=BookingRequestSerializer, responses={201: OpenApiTypes.OBJECT, 400: OpenApiTypes.OBJECT})
    def post(self, request):
        serializer = BookingRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        num_rooms = serializer.validated_data['num_rooms']

        try:
            result = self.get_service().book(num_rooms)
        except (InvalidCount, InsufficientInventory) as e:
            return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except BookingConflict as e:
            logger.error(f"Booking for {num_rooms} room(s) kept conflicting: {e}")
            return Response(
                {"error": "Rooms were booked concurrently, please try again."},
                status=status.HTTP_409_CONFLICT
            )
        except (MalformedIdentifier, InternalInconsistency) as e:
            logger.error(f"Room allocation failed for {num_rooms} room(s): {e}")
            return Response({"error": str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response({
            "success": True,
            "booking": BookingSerializer(result.booking).data,
            "selected_rooms": RoomSerializer(result.rooms, many=True).data,
            "total_travel_time": result.travel_time,
        }, status=status.HTTP_201_CREATED)


class RandomOccupancyView(APIView):
    """Occupy a random share of the free rooms, for demos and testing."""

    def get_service(self):
        return get_booking_service()

    @extend_schema(request=RandomOccupancySerializer, responses={200: OpenApiTypes.OBJECT})
    def post(self, request):
        serializer = RandomOccupancySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        occupied = self.get_service().randomize_occupancy(serializer.validated_data['rate'])
        return Response({
            "success": True,
            "message": f"Marked {len(occupied)} rooms as booked",
            "rooms_booked": occupied,
        }, status=status.HTTP_200_OK)


class ResetView(APIView):
    """Free every room and clear the booking ledger."""

    def get_service(self):
        return get_booking_service()

    @extend_schema(request=None, responses={200: OpenApiTypes.OBJECT})
    def post(self, request):
        freed, deleted = self.get_service().reset()
        return Response({
            "success": True,
            "message": "All bookings reset successfully",
            "rooms_freed": freed,
            "bookings_deleted": deleted,
        }, status=status.HTTP_200_OK)

