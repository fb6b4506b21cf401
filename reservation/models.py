from django.db import models


class Booking(models.Model):
    SOURCE_CHOICES = [
        ('request', 'REQUEST'),
        ('simulated', 'SIMULATED'),
    ]

    # Room numbers in the order the allocator selected them
    room_numbers = models.JSONField(default=list)
    total_travel_time = models.PositiveIntegerField(default=0)
    source = models.CharField(max_length=20, choices=SOURCE_CHOICES, default='request', db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"Booking #{self.pk}: {', '.join(self.room_numbers)}"

    @property
    def room_count(self):
        return len(self.room_numbers)
