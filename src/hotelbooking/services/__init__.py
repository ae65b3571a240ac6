from .availability import AvailabilityChecker, intervals_overlap
from .room_catalog import RoomCatalog
from .reservation_service import ReservationEngine

__all__ = [
    "AvailabilityChecker",
    "RoomCatalog",
    "ReservationEngine",
    "intervals_overlap",
]
