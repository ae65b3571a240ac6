from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from datetime import date
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from hotelbooking.exceptions import StorageError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0

# Shared by the conditional writes and the read-only conflict query.
# Parameters: room_id, requested check_out, requested check_in.
_OVERLAP_CLAUSE = "room_id = ? AND status = 'active' AND check_in < ? AND check_out > ?"


class SQLiteBookingAdapter:
    """SQLite store for rooms and bookings with explicit, lock-first transactions."""

    def __init__(self, db_url: str, timeout: float = DEFAULT_TIMEOUT):
        # Format: sqlite:///path
        if db_url.startswith("sqlite:///"):
            self.db_path = db_url.replace("sqlite:///", "")
        else:
            self.db_path = db_url
        self.timeout = timeout

        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        logger.info(f"SQLiteBookingAdapter initialised. Database path: {self.db_path}")

    def _conn(self) -> sqlite3.Connection:
        """Open a connection in autocommit mode; transactions are begun explicitly."""
        try:
            conn = sqlite3.connect(self.db_path, timeout=self.timeout, isolation_level=None)
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA foreign_keys = ON")
            return conn
        except sqlite3.Error as e:
            logger.error(f"Database connection error: {e}")
            raise StorageError(f"Could not connect to the database: {e}") from e

    @contextmanager
    def _use(self, conn: Optional[sqlite3.Connection]) -> Iterator[sqlite3.Connection]:
        if conn is not None:
            yield conn
            return
        own = self._conn()
        try:
            yield own
        finally:
            own.close()

    @staticmethod
    def _rollback(conn: sqlite3.Connection) -> None:
        if not conn.in_transaction:
            return
        try:
            conn.execute("ROLLBACK")
        except sqlite3.Error as e:
            # The original failure is still propagated by the caller.
            logger.error(f"Rollback failed: {e}")

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """
        Run a block under the database write lock.

        ``BEGIN IMMEDIATE`` acquires the reserved lock before the first read, so
        two writers can never both observe a free room and both commit. Waiting
        for the lock is bounded by ``timeout``; giving up raises StorageError.
        The transaction is rolled back and the connection closed on every
        non-commit exit.
        """
        conn = self._conn()
        try:
            conn.execute("BEGIN IMMEDIATE")
            yield conn
            conn.execute("COMMIT")
        except sqlite3.Error as e:
            self._rollback(conn)
            logger.error(f"Transaction aborted by SQLite error: {e}")
            raise StorageError(f"Transaction failed: {e}") from e
        except BaseException:
            self._rollback(conn)
            raise
        finally:
            conn.close()

    # ------------------------------------
    # Lifecycle
    # ------------------------------------
    def init(self) -> None:
        """Create tables and indexes if they do not exist."""
        logger.info("Checking/creating database tables...")
        with self.transaction() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS rooms (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    room_number INTEGER NOT NULL UNIQUE,
                    room_type TEXT NOT NULL,
                    price REAL NOT NULL CHECK (price >= 0),
                    status TEXT NOT NULL DEFAULT 'Available',
                    created_at DATETIME DEFAULT CURRENT_TIMESTAMP
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS bookings (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    room_id INTEGER NOT NULL,
                    customer_id TEXT NOT NULL,
                    check_in TEXT NOT NULL,
                    check_out TEXT NOT NULL,
                    status TEXT NOT NULL DEFAULT 'active' CHECK (status IN ('active', 'cancelled')),
                    created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
                    updated_at DATETIME,
                    cancelled_at DATETIME,
                    CHECK (check_in < check_out),
                    FOREIGN KEY(room_id) REFERENCES rooms(id)
                )
                """
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_bookings_room_status "
                "ON bookings (room_id, status, check_in)"
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_bookings_customer "
                "ON bookings (customer_id)"
            )
        logger.info("Table initialisation completed.")

    # ------------------------------------
    # Helpers
    # ------------------------------------
    def _fetch_one(self, query: str, params: tuple, conn: Optional[sqlite3.Connection] = None) -> Optional[Dict[str, Any]]:
        try:
            with self._use(conn) as c:
                row = c.execute(query, params).fetchone()
                return dict(row) if row else None
        except sqlite3.Error as e:
            logger.error(f"Query failed ({query.split()[0]}): {e}")
            raise StorageError(f"Query failed: {e}") from e

    def _fetch_all(self, query: str, params: tuple = (), conn: Optional[sqlite3.Connection] = None) -> List[Dict[str, Any]]:
        try:
            with self._use(conn) as c:
                return [dict(r) for r in c.execute(query, params).fetchall()]
        except sqlite3.Error as e:
            logger.error(f"Query failed ({query.split()[0]}): {e}")
            raise StorageError(f"Query failed: {e}") from e

    def _execute(self, conn: sqlite3.Connection, query: str, params: tuple) -> sqlite3.Cursor:
        try:
            return conn.execute(query, params)
        except sqlite3.Error as e:
            logger.error(f"Write failed ({query.split()[0]}): {e}")
            raise StorageError(f"Write failed: {e}") from e

    # ------------------------------------
    # Rooms
    # ------------------------------------
    def create_room(self, room_number: int, room_type: str, price: float, status: str = "Available") -> Optional[Dict[str, Any]]:
        logger.info(f"Creating room {room_number} ({room_type})")
        with self.transaction() as conn:
            cur = self._execute(
                conn,
                "INSERT INTO rooms (room_number, room_type, price, status) VALUES (?, ?, ?, ?)",
                (room_number, room_type, price, status),
            )
            room_id = cur.lastrowid
        return self.get_room(room_id)

    def get_room(self, room_id: int, conn: Optional[sqlite3.Connection] = None) -> Optional[Dict[str, Any]]:
        return self._fetch_one("SELECT * FROM rooms WHERE id = ?", (room_id,), conn)

    def list_rooms(self) -> List[Dict[str, Any]]:
        return self._fetch_all("SELECT * FROM rooms ORDER BY room_number")

    # ------------------------------------
    # Availability
    # ------------------------------------
    def find_conflicting_bookings(
        self,
        room_id: int,
        check_in: date,
        check_out: date,
        exclude_booking_id: Optional[int] = None,
        conn: Optional[sqlite3.Connection] = None,
    ) -> List[Dict[str, Any]]:
        """Active bookings of the room overlapping [check_in, check_out)."""
        query = f"SELECT * FROM bookings WHERE {_OVERLAP_CLAUSE}"
        params: tuple = (room_id, check_out.isoformat(), check_in.isoformat())
        if exclude_booking_id is not None:
            query += " AND id != ?"
            params += (exclude_booking_id,)
        query += " ORDER BY check_in"
        return self._fetch_all(query, params, conn)

    def list_available_rooms(self, check_in: date, check_out: date) -> List[Dict[str, Any]]:
        return self._fetch_all(
            """
            SELECT r.* FROM rooms r
            WHERE NOT EXISTS (
                SELECT 1 FROM bookings b
                WHERE b.room_id = r.id AND b.status = 'active'
                AND b.check_in < ? AND b.check_out > ?
            )
            ORDER BY r.room_number
            """,
            (check_out.isoformat(), check_in.isoformat()),
        )

    # ------------------------------------
    # Bookings
    # ------------------------------------
    def insert_booking_if_available(
        self,
        conn: sqlite3.Connection,
        room_id: int,
        customer_id: str,
        check_in: date,
        check_out: date,
    ) -> Optional[int]:
        """
        Insert an active booking only when no active booking of the room overlaps.

        Returns the new id, or None when the overlap guard rejected the row.
        """
        ci, co = check_in.isoformat(), check_out.isoformat()
        cur = self._execute(
            conn,
            f"""
            INSERT INTO bookings (room_id, customer_id, check_in, check_out, status)
            SELECT ?, ?, ?, ?, 'active'
            WHERE NOT EXISTS (SELECT 1 FROM bookings WHERE {_OVERLAP_CLAUSE})
            """,
            (room_id, customer_id, ci, co, room_id, co, ci),
        )
        if cur.rowcount != 1:
            return None
        return cur.lastrowid

    def replace_booking_if_available(
        self,
        conn: sqlite3.Connection,
        booking_id: int,
        room_id: int,
        check_in: date,
        check_out: date,
    ) -> bool:
        """Move an active booking to a new room/range unless another active booking overlaps it."""
        ci, co = check_in.isoformat(), check_out.isoformat()
        cur = self._execute(
            conn,
            f"""
            UPDATE bookings
            SET room_id = ?, check_in = ?, check_out = ?, updated_at = CURRENT_TIMESTAMP
            WHERE id = ? AND status = 'active'
            AND NOT EXISTS (SELECT 1 FROM bookings WHERE {_OVERLAP_CLAUSE} AND id != ?)
            """,
            (room_id, ci, co, booking_id, room_id, co, ci, booking_id),
        )
        return cur.rowcount == 1

    def mark_booking_cancelled(self, conn: sqlite3.Connection, booking_id: int) -> bool:
        cur = self._execute(
            conn,
            """
            UPDATE bookings
            SET status = 'cancelled', cancelled_at = CURRENT_TIMESTAMP, updated_at = CURRENT_TIMESTAMP
            WHERE id = ? AND status = 'active'
            """,
            (booking_id,),
        )
        return cur.rowcount == 1

    def get_booking(self, booking_id: int, conn: Optional[sqlite3.Connection] = None) -> Optional[Dict[str, Any]]:
        return self._fetch_one("SELECT * FROM bookings WHERE id = ?", (booking_id,), conn)

    def list_bookings_for_room(self, room_id: int, include_cancelled: bool = False) -> List[Dict[str, Any]]:
        query = "SELECT * FROM bookings WHERE room_id = ?"
        if not include_cancelled:
            query += " AND status = 'active'"
        return self._fetch_all(query + " ORDER BY check_in, id", (room_id,))

    def list_bookings_for_customer(self, customer_id: str) -> List[Dict[str, Any]]:
        """Booking history of a customer, newest stay first, with room details."""
        return self._fetch_all(
            """
            SELECT b.*, r.room_number, r.room_type
            FROM bookings b
            JOIN rooms r ON r.id = b.room_id
            WHERE b.customer_id = ?
            ORDER BY b.check_in DESC, b.id DESC
            """,
            (customer_id,),
        )
