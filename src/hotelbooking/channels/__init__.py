from .front_desk import FrontDesk
from .telegram import create_telegram_app, run_telegram_bot

__all__ = [
    "FrontDesk",
    "create_telegram_app",
    "run_telegram_bot",
]
