from django.contrib import admin
from .models import Room


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ('room_number', 'floor', 'is_booked', 'updated_at')
    list_filter = ('floor', 'is_booked')
    search_fields = ('room_number',)
