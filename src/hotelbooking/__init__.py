"""Hotel booking core - reservation engine with a no-double-booking guarantee"""

__version__ = "0.1.0"

# Core abstractions
from .base_config import HotelBookingConfig

# Exceptions
from .exceptions import (
    HotelBookingError,
    ConfigurationError,
    ChannelError,
    StorageError,
    BookingError,
    ValidationError,
    InvalidTransitionError,
    ConflictError,
    NotFoundError,
    ErrorKind,
    status_code_for,
)

# Config management
from .config import get_config, set_config

# Models
from .models import Booking, Room

# Adapters
from .adapters.base import BookingAdapter
from .adapters.sqlite_adapter import SQLiteBookingAdapter

# Services
from .services import AvailabilityChecker, ReservationEngine, RoomCatalog, intervals_overlap

# Runtime wiring
from .app import get_adapter, set_adapter, get_engine, set_engine

__all__ = [
    # Version
    "__version__",

    # Core
    "HotelBookingConfig",

    # Exceptions
    "HotelBookingError",
    "ConfigurationError",
    "ChannelError",
    "StorageError",
    "BookingError",
    "ValidationError",
    "InvalidTransitionError",
    "ConflictError",
    "NotFoundError",
    "ErrorKind",
    "status_code_for",

    # Config
    "get_config",
    "set_config",

    # Models
    "Booking",
    "Room",

    # Adapters
    "BookingAdapter",
    "SQLiteBookingAdapter",

    # Services
    "AvailabilityChecker",
    "ReservationEngine",
    "RoomCatalog",
    "intervals_overlap",

    # Runtime
    "get_adapter",
    "set_adapter",
    "get_engine",
    "set_engine",
]
