"""
Domain Errors

Business outcomes raised by the booking core. None of them is fatal to the
process: the API layer turns each into an HTTP response so the calling
session can re-query availability and try again.
"""


class DomainError(Exception):
    """Base class for all booking domain errors."""

    default_message = "Booking operation failed."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(DomainError):
    """Malformed input rejected before any state change."""

    default_message = "Invalid booking request."


class NotFoundError(DomainError):
    """The hold, room or reservation no longer exists."""

    default_message = "Object not found."


class HoldExpiredError(NotFoundError):
    """The hold still exists physically but its expiry has passed."""

    default_message = "Hold has expired."


class HoldOwnershipError(DomainError):
    """The hold belongs to a different booking session."""

    default_message = "Hold belongs to a different session."


class RoomUnavailableError(DomainError):
    """Room conflicts with a committed reservation or another session's hold."""

    default_message = "Room is not available for the selected dates."


class ConflictError(DomainError):
    """The reservation store lost the race at commit time."""

    default_message = "Room was booked by someone else."
