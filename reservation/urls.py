from django.urls import path, include
from rest_framework.routers import SimpleRouter
from .views import BookingViewSet, BookRoomsView, RandomOccupancyView, ResetView

router = SimpleRouter()
router.register(r'bookings', BookingViewSet, basename='booking')

urlpatterns = [
    path('book/', BookRoomsView.as_view(), name='book-rooms'),
    path('random-occupancy/', RandomOccupancyView.as_view(), name='random-occupancy'),
    path('reset/', ResetView.as_view(), name='reset'),
    path('', include(router.urls)),
]
