import os
import sys

import pytest

# Add the project src directory to PYTHONPATH for tests
CURRENT_DIR = os.path.dirname(__file__)
SRC_PATH = os.path.abspath(os.path.join(CURRENT_DIR, "..", "src"))
if SRC_PATH not in sys.path:
    sys.path.insert(0, SRC_PATH)

from hotelbooking.adapters.sqlite_adapter import SQLiteBookingAdapter  # noqa: E402
from hotelbooking.services import ReservationEngine  # noqa: E402


SAMPLE_ROOMS = [
    (101, "Double", 90.0, "Available"),
    (102, "Single", 60.0, "Available"),
    (201, "Suite", 220.0, "Maintenance"),
]


def make_db_url(tmpdir) -> str:
    db_path = os.path.join(str(tmpdir), "hotel_booking_test.db")
    return f"sqlite:///{db_path}"


@pytest.fixture
def adapter(tmp_path):
    db = SQLiteBookingAdapter(make_db_url(tmp_path), timeout=10.0)
    db.init()
    return db


@pytest.fixture
def rooms(adapter):
    """Maps room number -> room id."""
    created = {}
    for number, room_type, price, status in SAMPLE_ROOMS:
        room = adapter.create_room(room_number=number, room_type=room_type, price=price, status=status)
        created[number] = room["id"]
    return created


@pytest.fixture
def engine(adapter, rooms):
    return ReservationEngine(adapter)
