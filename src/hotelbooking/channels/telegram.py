"""
Telegram front desk channel: command handlers on top of FrontDesk.
"""
from __future__ import annotations

import asyncio
import logging
import re
from typing import Callable, List, Optional

from telegram import Update
from telegram.ext import Application, CommandHandler, ContextTypes

from hotelbooking.app import get_engine
from hotelbooking.channels.front_desk import FrontDesk
from hotelbooking.config import get_config
from hotelbooking.exceptions import ChannelError

logger = logging.getLogger(__name__)

FRONT_DESK_KEY = "front_desk"


def escape_markdown_v2(text: str) -> str:
    """Escapes MarkdownV2 special characters."""
    escape_chars = r'_*[]()~`>#+-=|{}.!'
    return re.sub(f'([{re.escape(escape_chars)}])', r'\\\1', str(text))


def _front_desk(context: ContextTypes.DEFAULT_TYPE) -> FrontDesk:
    return context.application.bot_data[FRONT_DESK_KEY]


async def _reply(update: Update, text: str) -> None:
    await update.message.reply_text(escape_markdown_v2(text), parse_mode="MarkdownV2")


async def _answer(update: Update, call: Callable[[], str]) -> None:
    # Engine calls block on SQLite; keep them off the event loop.
    try:
        text = await asyncio.to_thread(call)
    except Exception as e:
        logger.error(f"Telegram handler error: {e}", exc_info=True)
        text = "Sorry, I cannot process your request right now. Please try again."
    await _reply(update, text)


def _args(context: ContextTypes.DEFAULT_TYPE) -> List[str]:
    return list(context.args or [])


# --- HANDLERS ---

async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    if not update.message: return
    await _reply(update, _front_desk(context).welcome())


async def rooms_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    if not update.message: return
    await _answer(update, _front_desk(context).rooms)


async def available_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    if not update.message: return
    desk, args = _front_desk(context), _args(context)
    await _answer(update, lambda: desk.available(args))


async def book_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    if not update.message: return
    desk, args = _front_desk(context), _args(context)
    customer_id = str(update.effective_chat.id)
    await _answer(update, lambda: desk.book(customer_id, args))


async def move_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    if not update.message: return
    desk, args = _front_desk(context), _args(context)
    customer_id = str(update.effective_chat.id)
    await _answer(update, lambda: desk.move(customer_id, args))


async def cancel_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    if not update.message: return
    desk, args = _front_desk(context), _args(context)
    customer_id = str(update.effective_chat.id)
    await _answer(update, lambda: desk.cancel(customer_id, args))


async def my_bookings_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    if not update.message: return
    desk = _front_desk(context)
    customer_id = str(update.effective_chat.id)
    await _answer(update, lambda: desk.my_bookings(customer_id))


def create_telegram_app(front_desk: Optional[FrontDesk] = None) -> Application:
    config = get_config()
    token = config.get_telegram_bot_token()
    if not token:
        raise ChannelError("TELEGRAM_BOT_TOKEN is missing!")

    if front_desk is None:
        front_desk = FrontDesk(get_engine(), hotel_name=config.get_hotel_display_name())

    app = Application.builder().token(token).build()
    app.bot_data[FRONT_DESK_KEY] = front_desk
    app.add_handler(CommandHandler("start", start_command))
    app.add_handler(CommandHandler("rooms", rooms_command))
    app.add_handler(CommandHandler("available", available_command))
    app.add_handler(CommandHandler("book", book_command))
    app.add_handler(CommandHandler("move", move_command))
    app.add_handler(CommandHandler("cancel", cancel_command))
    app.add_handler(CommandHandler("mybookings", my_bookings_command))
    return app


def run_telegram_bot(application: Application) -> None:
    logger.info("Front desk bot (Telegram) starting...")
    application.run_polling(drop_pending_updates=True)
