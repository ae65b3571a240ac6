from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

from hotelbooking.adapters.base import BookingAdapter
from hotelbooking.exceptions import (
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from hotelbooking.models import Booking, Room
from hotelbooking.services.availability import AvailabilityChecker
from hotelbooking.services.room_catalog import RoomCatalog

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"

# Largest value a SQLite INTEGER column can hold.
MAX_ID = 2 ** 63 - 1


# ------------------------------------
# Input validation helpers
# ------------------------------------
def parse_stay_date(value: Any, field_name: str) -> date:
    """Accepts a date, a datetime or a YYYY-MM-DD string."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field_name} is required.")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return datetime.strptime(value.strip(), DATE_FORMAT).date()
        except ValueError as e:
            raise ValidationError(f"{field_name} '{value}' is not a valid date (expected YYYY-MM-DD).") from e
    raise ValidationError(f"{field_name} must be a date or a YYYY-MM-DD string, got {type(value).__name__}.")


def parse_stay(check_in: Any, check_out: Any) -> Tuple[date, date]:
    ci = parse_stay_date(check_in, "check_in")
    co = parse_stay_date(check_out, "check_out")
    if not ci < co:
        raise ValidationError(f"Check-in ({ci}) must be before check-out ({co}).")
    return ci, co


def _coerce_id(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {field_name}: {value!r}")
    if isinstance(value, int):
        number = value
    elif isinstance(value, str) and value.strip().isdigit():
        number = int(value.strip())
    else:
        raise ValidationError(f"Invalid {field_name}: {value!r}")
    if not 0 < number <= MAX_ID:
        raise ValidationError(f"{field_name} must be between 1 and {MAX_ID}, got {number}.")
    return number


def _coerce_customer(value: Any) -> str:
    customer_id = "" if value is None else str(value).strip()
    if not customer_id:
        raise ValidationError("customer_id is required.")
    return customer_id


class ReservationEngine:
    """
    Creates, moves and cancels bookings while keeping the active bookings of
    every room pairwise non-overlapping.

    Each mutating call runs its availability check and its write inside a
    single store transaction, so concurrent requests for the same room are
    serialised. Every error kind propagates to the caller; nothing is retried
    here.
    """

    def __init__(self, adapter: BookingAdapter):
        self.adapter = adapter
        self.rooms = RoomCatalog(adapter)
        self.availability = AvailabilityChecker(adapter)

    def _require_room(self, room_id: int, conn: Any) -> None:
        if not self.rooms.room_exists(room_id, conn=conn):
            raise ValidationError(f"Room {room_id} does not exist.")

    # ------------------------------------
    # Lifecycle operations
    # ------------------------------------
    def create_booking(self, room_id: Any, customer_id: Any, check_in: Any, check_out: Any) -> int:
        """
        Book ``room_id`` for ``customer_id`` over [check_in, check_out).

        Raises ValidationError for bad dates, an inverted range or an unknown
        room, ConflictError when an active booking overlaps, StorageError when
        the store fails. Returns the new booking id.
        """
        ci, co = parse_stay(check_in, check_out)
        room_id = _coerce_id(room_id, "room_id")
        customer = _coerce_customer(customer_id)

        with self.adapter.transaction() as conn:
            self._require_room(room_id, conn)
            booking_id = self.adapter.insert_booking_if_available(conn, room_id, customer, ci, co)
            if booking_id is None:
                conflicts = self.availability.find_conflicts(room_id, ci, co, conn=conn)
                logger.warning(f"Booking rejected: room {room_id} busy between {ci} and {co}")
                raise ConflictError(room_id, [b.id for b in conflicts])

        logger.info(f"Booking {booking_id} created: room {room_id}, {ci} -> {co}, customer {customer}")
        return booking_id

    def update_booking(self, booking_id: Any, new_room_id: Any, new_check_in: Any, new_check_out: Any) -> bool:
        """
        Move a booking to a new room and/or range.

        Returns False when the booking does not exist. A cancelled booking
        raises InvalidTransitionError. The booking's own current range is not
        counted as a conflict.

        Arguments are validated before the booking is looked up: bad dates or
        a malformed id raise ValidationError even when the booking is missing.
        An unknown target room is checked after the lookup.
        """
        ci, co = parse_stay(new_check_in, new_check_out)
        booking_id = _coerce_id(booking_id, "booking_id")
        room_id = _coerce_id(new_room_id, "room_id")

        with self.adapter.transaction() as conn:
            current = self.adapter.get_booking(booking_id, conn=conn)
            if current is None:
                logger.info(f"Update skipped: booking {booking_id} not found")
                return False
            if current["status"] == Booking.STATUS_CANCELLED:
                raise InvalidTransitionError(f"Booking {booking_id} is cancelled and cannot be changed.")
            self._require_room(room_id, conn)

            if not self.adapter.replace_booking_if_available(conn, booking_id, room_id, ci, co):
                conflicts = self.availability.find_conflicts(
                    room_id, ci, co, exclude_booking_id=booking_id, conn=conn
                )
                logger.warning(f"Update of booking {booking_id} rejected: room {room_id} busy between {ci} and {co}")
                raise ConflictError(room_id, [b.id for b in conflicts])

        logger.info(f"Booking {booking_id} moved: room {room_id}, {ci} -> {co}")
        return True

    def cancel_booking(self, booking_id: Any) -> bool:
        """
        Cancel an active booking. Returns False if it was already cancelled,
        raises NotFoundError if it never existed.
        """
        booking_id = _coerce_id(booking_id, "booking_id")

        with self.adapter.transaction() as conn:
            current = self.adapter.get_booking(booking_id, conn=conn)
            if current is None:
                raise NotFoundError(f"Booking {booking_id} not found.")
            if current["status"] == Booking.STATUS_CANCELLED:
                logger.info(f"Booking {booking_id} already cancelled")
                return False
            self.adapter.mark_booking_cancelled(conn, booking_id)

        logger.info(f"Booking {booking_id} cancelled")
        return True

    # ------------------------------------
    # Reads
    # ------------------------------------
    def get_booking(self, booking_id: Any) -> Booking:
        booking_id = _coerce_id(booking_id, "booking_id")
        data = self.adapter.get_booking(booking_id)
        if data is None:
            raise NotFoundError(f"Booking {booking_id} not found.")
        return Booking.from_dict(data)

    def list_room_bookings(self, room_id: Any, include_cancelled: bool = False) -> List[Booking]:
        room_id = _coerce_id(room_id, "room_id")
        rows = self.adapter.list_bookings_for_room(room_id, include_cancelled=include_cancelled)
        return [Booking.from_dict(r) for r in rows]

    def get_booking_history(self, customer_id: Any) -> List[Dict[str, Any]]:
        """All bookings of a customer, newest stay first, with room number and type."""
        customer = _coerce_customer(customer_id)
        history = []
        for row in self.adapter.list_bookings_for_customer(customer):
            booking = Booking.from_dict(row)
            entry = booking.to_dict()
            entry["reference_code"] = booking.get_reference_code()
            entry["room_number"] = row.get("room_number")
            entry["room_type"] = row.get("room_type")
            history.append(entry)
        return history

    def find_available_rooms(self, check_in: Any, check_out: Any) -> List[Room]:
        ci, co = parse_stay(check_in, check_out)
        return self.availability.find_available_rooms(ci, co)

    def is_room_available(
        self, room_id: Any, check_in: Any, check_out: Any, exclude_booking_id: Optional[int] = None
    ) -> bool:
        ci, co = parse_stay(check_in, check_out)
        room_id = _coerce_id(room_id, "room_id")
        if not self.rooms.room_exists(room_id):
            raise ValidationError(f"Room {room_id} does not exist.")
        return self.availability.is_available(room_id, ci, co, exclude_booking_id=exclude_booking_id)
