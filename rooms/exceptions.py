class RoomAllocationError(Exception):
    """Base class for errors raised while allocating rooms."""


class MalformedIdentifier(RoomAllocationError):
    """A room number cannot be decoded into a floor and a position."""

    def __init__(self, identifier, reason=''):
        self.identifier = identifier
        message = f"Malformed room number: {identifier!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class InvalidCount(RoomAllocationError):
    """The requested number of rooms is outside the bookable range."""

    def __init__(self, count, maximum):
        self.count = count
        super().__init__(f"Number of rooms must be between 1 and {maximum}, got {count!r}")


class InsufficientInventory(RoomAllocationError):
    """Fewer rooms are available than were requested."""

    def __init__(self, requested, available):
        self.requested = requested
        self.available = available
        super().__init__(
            f"Not enough available rooms: requested {requested}, only {available} available"
        )


class InternalInconsistency(RoomAllocationError):
    """Selection could not produce a result after passing the inventory check."""
