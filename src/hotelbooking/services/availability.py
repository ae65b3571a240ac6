from __future__ import annotations

import logging
from datetime import date
from typing import Any, List, Optional

from hotelbooking.adapters.base import BookingAdapter
from hotelbooking.exceptions import ValidationError
from hotelbooking.models import Booking, Room

logger = logging.getLogger(__name__)


def intervals_overlap(a_in: date, a_out: date, b_in: date, b_out: date) -> bool:
    """Half-open overlap test: [a_in, a_out) and [b_in, b_out) share at least one night."""
    return a_in < b_out and b_in < a_out


class AvailabilityChecker:
    """
    Read-only availability queries over the booking store.

    Store failures surface as StorageError and are never reported as
    "unavailable".
    """

    def __init__(self, adapter: BookingAdapter):
        self.adapter = adapter

    @staticmethod
    def _require_range(check_in: date, check_out: date) -> None:
        if not check_in < check_out:
            raise ValidationError(f"Check-in ({check_in}) must be before check-out ({check_out}).")

    def find_conflicts(
        self,
        room_id: int,
        check_in: date,
        check_out: date,
        exclude_booking_id: Optional[int] = None,
        conn: Any = None,
    ) -> List[Booking]:
        """Active bookings of ``room_id`` overlapping the range, ``exclude_booking_id`` left out."""
        self._require_range(check_in, check_out)
        rows = self.adapter.find_conflicting_bookings(
            room_id, check_in, check_out, exclude_booking_id=exclude_booking_id, conn=conn
        )
        return [Booking.from_dict(r) for r in rows]

    def is_available(
        self,
        room_id: int,
        check_in: date,
        check_out: date,
        exclude_booking_id: Optional[int] = None,
        conn: Any = None,
    ) -> bool:
        return not self.find_conflicts(room_id, check_in, check_out, exclude_booking_id, conn=conn)

    def find_available_rooms(self, check_in: date, check_out: date) -> List[Room]:
        """Rooms with no active booking overlapping [check_in, check_out)."""
        self._require_range(check_in, check_out)
        rooms = [Room.from_dict(r) for r in self.adapter.list_available_rooms(check_in, check_out)]
        logger.info(f"{len(rooms)} room(s) free between {check_in} and {check_out}")
        return rooms
