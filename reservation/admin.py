from django.contrib import admin
from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ('id', 'room_numbers', 'total_travel_time', 'source', 'created_at')
    list_filter = ('source',)
    readonly_fields = ('room_numbers', 'total_travel_time', 'source', 'created_at')
