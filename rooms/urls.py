from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import RoomViewSet, AvailableRoomsView

router = DefaultRouter()
router.register(r'rooms', RoomViewSet, basename='room')

urlpatterns = [
    path('available-rooms/', AvailableRoomsView.as_view(), name='available-rooms'),
    path('', include(router.urls)),
]
