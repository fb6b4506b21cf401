from django.core.exceptions import ValidationError
from django.db import models

from .allocation import parse_room_number
from .exceptions import MalformedIdentifier


def validate_room_number(value):
    try:
        parse_room_number(value)
    except MalformedIdentifier as exc:
        raise ValidationError(str(exc))


class Room(models.Model):
    room_number = models.CharField(max_length=4, unique=True, validators=[validate_room_number])
    floor = models.PositiveSmallIntegerField(db_index=True)  # derivable from room_number, kept for queries
    is_booked = models.BooleanField(default=False)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['floor', 'room_number']

    def __str__(self):
        return self.room_number

    @property
    def position(self):
        return parse_room_number(self.room_number).position

    def save(self, *args, **kwargs):
        if not self.floor:
            self.floor = parse_room_number(self.room_number).floor
        super().save(*args, **kwargs)
