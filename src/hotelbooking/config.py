from __future__ import annotations

import importlib
import logging
import os
from typing import Optional, Type

from dotenv import load_dotenv

from hotelbooking.base_config import HotelBookingConfig
from hotelbooking.adapters.base import BookingAdapter
from hotelbooking.adapters.sqlite_adapter import DEFAULT_TIMEOUT, SQLiteBookingAdapter
from hotelbooking.exceptions import ConfigurationError

load_dotenv()

DEFAULT_CONFIG_CLASS = "hotelbooking.config.EnvironmentHotelBookingConfig"
CONFIG_ENV_KEY = "HOTELBOOKING_CONFIG"

logger = logging.getLogger(__name__)


def _import_config_class(path: str) -> Type[HotelBookingConfig]:
    try:
        module_path, class_name = path.rsplit(".", 1)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid config path '{path}'") from exc

    try:
        module = importlib.import_module(module_path)
    except ImportError as exc:
        raise ConfigurationError(f"Could not import module '{module_path}'") from exc

    try:
        cls = getattr(module, class_name)
    except AttributeError as exc:
        raise ConfigurationError(f"Config class '{class_name}' not found in '{module_path}'") from exc

    if not isinstance(cls, type) or not issubclass(cls, HotelBookingConfig):
        raise ConfigurationError(f"{path} is not a subclass of HotelBookingConfig")

    return cls


class EnvironmentHotelBookingConfig(HotelBookingConfig):
    """Default configuration that reads from environment variables."""

    def __init__(self) -> None:
        self._env = os.environ

    def get_database_url(self) -> str:
        return self._env.get("DATABASE_URL", "sqlite:///hotelbooking.db")

    def get_storage_timeout(self) -> float:
        raw = self._env.get("STORAGE_TIMEOUT", str(DEFAULT_TIMEOUT))
        try:
            timeout = float(raw)
        except (TypeError, ValueError):
            logger.warning(f"Invalid STORAGE_TIMEOUT '{raw}', using {DEFAULT_TIMEOUT}")
            return DEFAULT_TIMEOUT
        if timeout <= 0:
            logger.warning(f"STORAGE_TIMEOUT must be positive, using {DEFAULT_TIMEOUT}")
            return DEFAULT_TIMEOUT
        return timeout

    def get_telegram_bot_token(self) -> Optional[str]:
        return self._env.get("TELEGRAM_BOT_TOKEN")

    def get_hotel_display_name(self) -> str:
        return self._env.get("HOTEL_NAME", super().get_hotel_display_name())

    def get_log_level(self) -> str:
        return self._env.get("LOG_LEVEL", super().get_log_level()).upper()

    def create_adapter(self) -> BookingAdapter:
        """Builds the SQLite store and makes sure its tables exist."""
        adapter = SQLiteBookingAdapter(self.get_database_url(), timeout=self.get_storage_timeout())
        adapter.init()
        return adapter


_CONFIG: Optional[HotelBookingConfig] = None


def get_config() -> HotelBookingConfig:
    global _CONFIG
    if _CONFIG is None:
        class_path = os.getenv(CONFIG_ENV_KEY, DEFAULT_CONFIG_CLASS)
        cls = _import_config_class(class_path)
        _CONFIG = cls()
    return _CONFIG


def set_config(config: Optional[HotelBookingConfig]) -> None:
    global _CONFIG
    _CONFIG = config
