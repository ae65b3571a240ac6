"""
Tests for the availability checker and the overlap predicate.
"""
from datetime import date

import pytest

from hotelbooking.exceptions import StorageError, ValidationError
from hotelbooking.services import AvailabilityChecker, intervals_overlap


D = date


class TestIntervalsOverlap:

    @pytest.mark.parametrize(
        "a, b, expected",
        [
            ((D(2025, 11, 10), D(2025, 11, 15)), (D(2025, 11, 14), D(2025, 11, 20)), True),
            ((D(2025, 11, 10), D(2025, 11, 15)), (D(2025, 11, 15), D(2025, 11, 20)), False),
            ((D(2025, 11, 15), D(2025, 11, 20)), (D(2025, 11, 10), D(2025, 11, 15)), False),
            ((D(2025, 11, 10), D(2025, 11, 20)), (D(2025, 11, 12), D(2025, 11, 13)), True),
            ((D(2025, 11, 12), D(2025, 11, 13)), (D(2025, 11, 10), D(2025, 11, 20)), True),
            ((D(2025, 11, 10), D(2025, 11, 15)), (D(2025, 11, 10), D(2025, 11, 15)), True),
            ((D(2025, 11, 1), D(2025, 11, 2)), (D(2025, 11, 5), D(2025, 11, 6)), False),
        ],
    )
    def test_half_open_overlap(self, a, b, expected):
        assert intervals_overlap(a[0], a[1], b[0], b[1]) is expected

    def test_symmetric(self):
        a = (D(2025, 1, 1), D(2025, 1, 5))
        b = (D(2025, 1, 4), D(2025, 1, 9))
        assert intervals_overlap(*a, *b) == intervals_overlap(*b, *a)


class TestAvailabilityChecker:

    def test_empty_room_is_available(self, engine, rooms):
        checker = AvailabilityChecker(engine.adapter)
        assert checker.is_available(rooms[101], D(2025, 11, 10), D(2025, 11, 15)) is True

    def test_overlap_makes_room_unavailable(self, engine, rooms):
        engine.create_booking(rooms[101], "5", "2025-11-10", "2025-11-15")
        checker = engine.availability
        assert checker.is_available(rooms[101], D(2025, 11, 14), D(2025, 11, 20)) is False
        assert checker.is_available(rooms[101], D(2025, 11, 15), D(2025, 11, 20)) is True
        assert checker.is_available(rooms[102], D(2025, 11, 14), D(2025, 11, 20)) is True

    def test_exclusion_ignores_the_booking_being_modified(self, engine, rooms):
        booking_id = engine.create_booking(rooms[101], "5", "2025-11-10", "2025-11-15")
        checker = engine.availability
        assert checker.is_available(rooms[101], D(2025, 11, 12), D(2025, 11, 18)) is False
        assert checker.is_available(rooms[101], D(2025, 11, 12), D(2025, 11, 18), exclude_booking_id=booking_id) is True

    def test_cancelled_bookings_do_not_count(self, engine, rooms):
        booking_id = engine.create_booking(rooms[101], "5", "2025-11-10", "2025-11-15")
        engine.cancel_booking(booking_id)
        assert engine.availability.is_available(rooms[101], D(2025, 11, 10), D(2025, 11, 15)) is True

    def test_find_conflicts_returns_bookings(self, engine, rooms):
        a = engine.create_booking(rooms[101], "5", "2025-11-10", "2025-11-15")
        b = engine.create_booking(rooms[101], "6", "2025-11-15", "2025-11-20")
        conflicts = engine.availability.find_conflicts(rooms[101], D(2025, 11, 12), D(2025, 11, 17))
        assert [c.id for c in conflicts] == [a, b]
        assert all(c.is_active() for c in conflicts)

    def test_inverted_range_is_rejected(self, engine, rooms):
        with pytest.raises(ValidationError):
            engine.availability.is_available(rooms[101], D(2025, 11, 15), D(2025, 11, 10))
        with pytest.raises(ValidationError):
            engine.availability.is_available(rooms[101], D(2025, 11, 15), D(2025, 11, 15))

    def test_find_available_rooms(self, engine, rooms):
        engine.create_booking(rooms[101], "5", "2025-11-10", "2025-11-15")
        free = engine.availability.find_available_rooms(D(2025, 11, 11), D(2025, 11, 12))
        assert sorted(r.room_number for r in free) == [102, 201]

    def test_store_failure_is_not_reported_as_unavailable(self, rooms):
        class BrokenAdapter:
            def find_conflicting_bookings(self, *args, **kwargs):
                raise StorageError("store unreachable")

        checker = AvailabilityChecker(BrokenAdapter())
        with pytest.raises(StorageError):
            checker.is_available(rooms[101], D(2025, 11, 10), D(2025, 11, 15))
