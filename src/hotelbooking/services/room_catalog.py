from __future__ import annotations

import logging
from typing import Any, List, Optional

from hotelbooking.adapters.base import BookingAdapter
from hotelbooking.models import Room

logger = logging.getLogger(__name__)


class RoomCatalog:
    """Read-only view of the static room records."""

    def __init__(self, adapter: BookingAdapter):
        self.adapter = adapter

    def get_room(self, room_id: int, conn: Any = None) -> Optional[Room]:
        data = self.adapter.get_room(room_id, conn=conn)
        return Room.from_dict(data) if data else None

    def room_exists(self, room_id: int, conn: Any = None) -> bool:
        return self.adapter.get_room(room_id, conn=conn) is not None

    def list_rooms(self) -> List[Room]:
        return [Room.from_dict(r) for r in self.adapter.list_rooms()]
