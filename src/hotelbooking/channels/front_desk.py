"""
Command logic of the front desk channel, independent of any chat transport.

Every method takes the raw command arguments and returns the reply text.
Engine errors are turned into replies here, by error kind.
"""
from __future__ import annotations

import logging
import re
from datetime import date
from typing import Any, Callable, Dict, List, Sequence, Type, TypeVar

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic import ValidationError as SchemaError

from hotelbooking.exceptions import BookingError, ErrorKind, StorageError
from hotelbooking.services import ReservationEngine

logger = logging.getLogger(__name__)

_REFERENCE_RE = re.compile(r"^BKG-(\d+)$", re.IGNORECASE)

M = TypeVar("M", bound=BaseModel)


# --- COMMAND ARGUMENT SCHEMAS ---

class StayRange(BaseModel):
    check_in: date = Field(description="Arrival date (YYYY-MM-DD)")
    check_out: date = Field(description="Departure date (YYYY-MM-DD), exclusive")

    @model_validator(mode="after")
    def check_order(self) -> "StayRange":
        if not self.check_in < self.check_out:
            raise ValueError("check-in must be before check-out")
        return self


class BookArgs(StayRange):
    room_id: int = Field(gt=0, description="Room id as shown by /rooms")


class BookingRefArgs(BaseModel):
    booking_id: int = Field(gt=0, description="Numeric id or BKG-XXXXXX reference")

    @field_validator("booking_id", mode="before")
    @classmethod
    def strip_reference(cls, value: Any) -> Any:
        if isinstance(value, str):
            match = _REFERENCE_RE.match(value.strip())
            if match:
                return int(match.group(1))
        return value


class MoveArgs(BookingRefArgs, BookArgs):
    pass


USAGE = {
    "available": "/available <check_in> <check_out>",
    "book": "/book <room_id> <check_in> <check_out>",
    "move": "/move <booking_ref> <room_id> <check_in> <check_out>",
    "cancel": "/cancel <booking_ref>",
}


class ArgumentError(Exception):
    """Command arguments did not match the command's schema."""
    pass


def parse_args(model: Type[M], names: Sequence[str], args: Sequence[str], command: str) -> M:
    if len(args) != len(names):
        raise ArgumentError(f"Usage: {USAGE[command]}")
    try:
        return model(**dict(zip(names, args)))
    except SchemaError as e:
        problems = "; ".join(err["msg"] for err in e.errors())
        raise ArgumentError(f"Invalid arguments ({problems}). Usage: {USAGE[command]}") from e


def describe_error(exc: BookingError) -> str:
    """Reply text for an engine rejection, chosen by error kind."""
    if exc.kind is ErrorKind.CONFLICT:
        return f"Sorry, those dates are taken. Try other dates or another room. ({exc})"
    if exc.kind is ErrorKind.NOT_FOUND:
        return "No such booking."
    return f"Request rejected: {exc}"


def _format_booking(entry: Dict[str, Any]) -> str:
    return (
        f"{entry['reference_code']}: room {entry['room_number']} ({entry['room_type']}), "
        f"{entry['check_in']} -> {entry['check_out']} [{entry['status']}]"
    )


class FrontDesk:
    """Turns chat commands into reservation engine calls. The chat id is the customer id."""

    def __init__(self, engine: ReservationEngine, hotel_name: str = "Hotel Booking"):
        self.engine = engine
        self.hotel_name = hotel_name

    def _run(self, action: Callable[[], str]) -> str:
        try:
            return action()
        except ArgumentError as e:
            return str(e)
        except BookingError as e:
            logger.info(f"Front desk request rejected ({e.kind.value}): {e}")
            return describe_error(e)
        except StorageError as e:
            logger.error(f"Front desk storage failure: {e}")
            return "The booking system is temporarily unavailable. Please try again."

    def _owned_booking_id(self, customer_id: str, booking_id: int) -> int:
        # Bookings of other customers are reported as missing.
        booking = self.engine.get_booking(booking_id)
        if booking.customer_id != customer_id:
            raise ArgumentError("No such booking.")
        return booking_id

    # --- COMMANDS ---

    def welcome(self) -> str:
        return (
            f"Welcome to {self.hotel_name}!\n"
            "Commands: /rooms, /available, /book, /move, /cancel, /mybookings"
        )

    def rooms(self) -> str:
        def action() -> str:
            rooms = self.engine.rooms.list_rooms()
            if not rooms:
                return "No rooms are configured."
            lines = [f"#{r.id} - room {r.room_number}, {r.room_type}, {r.price:.2f}/night ({r.status})" for r in rooms]
            return "Rooms:\n" + "\n".join(lines)
        return self._run(action)

    def available(self, args: Sequence[str]) -> str:
        def action() -> str:
            stay = parse_args(StayRange, ("check_in", "check_out"), args, "available")
            rooms = self.engine.find_available_rooms(stay.check_in, stay.check_out)
            if not rooms:
                return f"No rooms are free between {stay.check_in} and {stay.check_out}."
            lines = [f"#{r.id} - room {r.room_number}, {r.room_type}, {r.price:.2f}/night" for r in rooms]
            return f"Free between {stay.check_in} and {stay.check_out}:\n" + "\n".join(lines)
        return self._run(action)

    def book(self, customer_id: str, args: Sequence[str]) -> str:
        def action() -> str:
            cmd = parse_args(BookArgs, ("room_id", "check_in", "check_out"), args, "book")
            booking_id = self.engine.create_booking(cmd.room_id, customer_id, cmd.check_in, cmd.check_out)
            booking = self.engine.get_booking(booking_id)
            return (
                f"Booked! Reference {booking.get_reference_code()}: room #{cmd.room_id}, "
                f"{cmd.check_in} -> {cmd.check_out} ({booking.nights} night(s))."
            )
        return self._run(action)

    def move(self, customer_id: str, args: Sequence[str]) -> str:
        def action() -> str:
            cmd = parse_args(MoveArgs, ("booking_id", "room_id", "check_in", "check_out"), args, "move")
            booking_id = self._owned_booking_id(customer_id, cmd.booking_id)
            if not self.engine.update_booking(booking_id, cmd.room_id, cmd.check_in, cmd.check_out):
                return "No such booking."
            return f"Booking BKG-{booking_id:06d} moved to room #{cmd.room_id}, {cmd.check_in} -> {cmd.check_out}."
        return self._run(action)

    def cancel(self, customer_id: str, args: Sequence[str]) -> str:
        def action() -> str:
            cmd = parse_args(BookingRefArgs, ("booking_id",), args, "cancel")
            booking_id = self._owned_booking_id(customer_id, cmd.booking_id)
            if not self.engine.cancel_booking(booking_id):
                return f"Booking BKG-{booking_id:06d} was already cancelled."
            return f"Booking BKG-{booking_id:06d} cancelled."
        return self._run(action)

    def my_bookings(self, customer_id: str) -> str:
        def action() -> str:
            history: List[Dict[str, Any]] = self.engine.get_booking_history(customer_id)
            if not history:
                return "You have no bookings yet."
            return "Your bookings:\n" + "\n".join(_format_booking(e) for e in history)
        return self._run(action)
