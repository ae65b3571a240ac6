"""Process-wide adapter and engine instances, built lazily from the active config."""
from __future__ import annotations

from typing import Optional

from hotelbooking.adapters.base import BookingAdapter
from hotelbooking.config import get_config
from hotelbooking.services import ReservationEngine

_adapter: Optional[BookingAdapter] = None
_engine: Optional[ReservationEngine] = None


def get_adapter() -> BookingAdapter:
    """Returns the global store adapter, creating it from config when needed."""
    global _adapter
    if _adapter is None:
        _adapter = get_config().create_adapter()
    return _adapter


def set_adapter(adapter: Optional[BookingAdapter]) -> None:
    """Swap the global adapter (useful for tests). Resets the cached engine."""
    global _adapter, _engine
    _adapter = adapter
    _engine = None


def get_engine() -> ReservationEngine:
    global _engine
    if _engine is None:
        _engine = ReservationEngine(get_adapter())
    return _engine


def set_engine(engine: Optional[ReservationEngine]) -> None:
    global _engine
    _engine = engine
