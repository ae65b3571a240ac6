"""Custom exceptions for the hotel booking core."""
from __future__ import annotations

from enum import Enum
from typing import Iterable, List, Optional


class ErrorKind(str, Enum):
    """Tag carried by every booking error so callers never match on messages."""

    VALIDATION = "validation"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    STORAGE = "storage"


# Transport-level mapping for any HTTP/JSON surface built on top of the engine.
STATUS_CODES = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.STORAGE: 500,
}


class HotelBookingError(Exception):
    """Base exception for all hotel booking errors."""
    kind: Optional[ErrorKind] = None


class ConfigurationError(HotelBookingError):
    """Raised when configuration is invalid or missing."""
    pass


class ChannelError(HotelBookingError):
    """Raised when a front desk channel (Telegram) cannot be started."""
    pass


class StorageError(HotelBookingError):
    """
    Raised when the booking store is unreachable or a transaction fails
    (lock timeout, disk I/O, constraint failure). Safe to retry: the store
    never keeps a partial write.
    """
    kind = ErrorKind.STORAGE


class BookingError(HotelBookingError):
    """Base for business-rule rejections of a reservation request."""
    pass


class ValidationError(BookingError):
    """Malformed or missing dates, inverted range, unknown room."""
    kind = ErrorKind.VALIDATION


class InvalidTransitionError(ValidationError):
    """The booking's lifecycle state does not allow the requested change."""
    pass


class ConflictError(BookingError):
    """The requested stay overlaps an existing active booking of the room."""
    kind = ErrorKind.CONFLICT

    def __init__(self, room_id: int, conflicting_ids: Iterable[int] = ()):
        self.room_id = room_id
        self.conflicting_ids: List[int] = list(conflicting_ids)
        detail = ", ".join(str(i) for i in self.conflicting_ids) or "unknown"
        super().__init__(f"Room {room_id} is already booked for the requested dates (bookings: {detail})")


class NotFoundError(BookingError):
    """The targeted booking does not exist."""
    kind = ErrorKind.NOT_FOUND


def status_code_for(exc: BaseException) -> int:
    """Map an exception to the transport status code of its error kind."""
    kind = getattr(exc, "kind", None)
    return STATUS_CODES.get(kind, 500)
