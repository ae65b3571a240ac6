"""
Base configuration abstractions for the hotel booking core.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from hotelbooking.adapters.base import BookingAdapter


class HotelBookingConfig(ABC):
    """Abstract configuration contract for the engine and its channels."""

    @abstractmethod
    def get_database_url(self) -> str: pass

    @abstractmethod
    def get_storage_timeout(self) -> float: pass

    @abstractmethod
    def get_telegram_bot_token(self) -> Optional[str]: pass

    @abstractmethod
    def create_adapter(self) -> BookingAdapter: pass

    def get_hotel_display_name(self) -> str: return "Hotel Booking"
    def get_log_level(self) -> str: return "INFO"
