from .base import BookingAdapter
from .sqlite_adapter import SQLiteBookingAdapter

__all__ = [
    "BookingAdapter",
    "SQLiteBookingAdapter",
]
