from __future__ import annotations

from datetime import date
from typing import Any, ContextManager, Dict, List, Optional, Protocol, runtime_checkable


@runtime_checkable
class BookingAdapter(Protocol):
    """
    Storage contract of the reservation engine.

    Methods taking ``conn`` run on the connection of an open ``transaction()``
    when one is given, and on a short-lived connection of their own otherwise.
    """

    # lifecycle
    def init(self) -> None: ...
    def transaction(self) -> ContextManager[Any]: ...

    # rooms
    def create_room(self, room_number: int, room_type: str, price: float, status: str = "Available") -> Optional[Dict[str, Any]]: ...
    def get_room(self, room_id: int, conn: Any = None) -> Optional[Dict[str, Any]]: ...
    def list_rooms(self) -> List[Dict[str, Any]]: ...

    # availability
    def find_conflicting_bookings(
        self,
        room_id: int,
        check_in: date,
        check_out: date,
        exclude_booking_id: Optional[int] = None,
        conn: Any = None,
    ) -> List[Dict[str, Any]]: ...
    def list_available_rooms(self, check_in: date, check_out: date) -> List[Dict[str, Any]]: ...

    # bookings
    def insert_booking_if_available(
        self, conn: Any, room_id: int, customer_id: str, check_in: date, check_out: date
    ) -> Optional[int]: ...
    def replace_booking_if_available(
        self, conn: Any, booking_id: int, room_id: int, check_in: date, check_out: date
    ) -> bool: ...
    def mark_booking_cancelled(self, conn: Any, booking_id: int) -> bool: ...
    def get_booking(self, booking_id: int, conn: Any = None) -> Optional[Dict[str, Any]]: ...
    def list_bookings_for_room(self, room_id: int, include_cancelled: bool = False) -> List[Dict[str, Any]]: ...
    def list_bookings_for_customer(self, customer_id: str) -> List[Dict[str, Any]]: ...
