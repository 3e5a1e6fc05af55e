"""SQLite-backed repository; the only module that speaks SQL."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional, Sequence

from inkbook.domain.booking_lifecycle import transition_status
from inkbook.domain.errors import BookingNotFoundError, StorageError
from inkbook.domain.models import (
    Availability,
    BookingDraft,
    BookingRequest,
    BookingStatus,
    Inquiry,
    TimeSlot,
)
from inkbook.utils.config import Settings, get_settings
from inkbook.utils.logger import get_logger


logger = get_logger(__name__)

_SLOT_ORDER_SQL = (
    "CASE time_slot WHEN 'morning' THEN 0 WHEN 'afternoon' THEN 1 ELSE 2 END"
)


def _row_to_availability(row: sqlite3.Row) -> Availability:
    return Availability(
        availability_id=int(row["id"]),
        date=str(row["date"]),
        time_slot=TimeSlot(row["time_slot"]),
        is_available=bool(row["is_available"]),
    )


def _row_to_booking(row: sqlite3.Row) -> BookingRequest:
    return BookingRequest(
        booking_id=int(row["id"]),
        name=str(row["name"]),
        email=str(row["email"]),
        body_part=str(row["body_part"]),
        size=str(row["size"]),
        description=str(row["description"]),
        requested_date=str(row["requested_date"]),
        status=BookingStatus(row["status"]),
        created_at=datetime.fromisoformat(str(row["created_at"])),
    )


def _row_to_inquiry(row: sqlite3.Row) -> Inquiry:
    return Inquiry(
        inquiry_id=int(row["id"]),
        name=str(row["name"]),
        email=str(row["email"]),
        message=str(row["message"]),
        created_at=datetime.fromisoformat(str(row["created_at"])),
    )


class DataRepository:
    """Encapsulates SQLite access so business logic stays storage-agnostic."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()
        self._db_path = Path(self._settings.database_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)

    def _connect(self) -> sqlite3.Connection:
        connection = sqlite3.connect(self._db_path)
        connection.row_factory = sqlite3.Row
        return connection

    @contextmanager
    def _session(self, *, immediate: bool = False) -> Iterator[sqlite3.Cursor]:
        """Yield a cursor inside one transaction; commit on success, roll back on error.

        ``immediate`` takes the write lock up front so read-then-write
        sequences cannot interleave with another writer.
        """
        try:
            connection = self._connect()
        except sqlite3.Error as exc:
            raise StorageError(f"Database unavailable: {exc}") from exc
        try:
            with connection:
                if immediate:
                    connection.execute("BEGIN IMMEDIATE;")
                yield connection.cursor()
        except sqlite3.Error as exc:
            raise StorageError(f"Database operation failed: {exc}") from exc
        finally:
            connection.close()

    def initialize_database(self) -> None:
        """Create all persistence artifacts before API startup."""
        with self._session() as cursor:
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS availability (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    date TEXT NOT NULL,
                    time_slot TEXT NOT NULL
                        CHECK (time_slot IN ('morning', 'afternoon', 'evening')),
                    is_available INTEGER NOT NULL DEFAULT 1 CHECK (is_available IN (0, 1)),
                    UNIQUE (date, time_slot)
                );
                """
            )

            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS booking_requests (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    email TEXT NOT NULL,
                    body_part TEXT NOT NULL,
                    size TEXT NOT NULL,
                    description TEXT NOT NULL,
                    requested_date TEXT NOT NULL,
                    status TEXT NOT NULL DEFAULT 'pending'
                        CHECK (status IN ('pending', 'approved', 'rejected')),
                    created_at TEXT NOT NULL
                );
                """
            )

            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS inquiries (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    email TEXT NOT NULL,
                    message TEXT NOT NULL,
                    created_at TEXT NOT NULL
                );
                """
            )

            cursor.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_booking_requests_status_date
                ON booking_requests(status, requested_date);
                """
            )
        logger.info("Database initialized at %s", self._db_path)

    # --- availability -----------------------------------------------------

    def list_availability(self) -> list[Availability]:
        with self._session() as cursor:
            cursor.execute(
                f"""
                SELECT id, date, time_slot, is_available
                FROM availability
                ORDER BY date ASC, {_SLOT_ORDER_SQL} ASC;
                """
            )
            return [_row_to_availability(row) for row in cursor.fetchall()]

    def list_availability_for_date(self, date: str) -> list[Availability]:
        with self._session() as cursor:
            return self._select_for_date(cursor, date)

    def _select_for_date(self, cursor: sqlite3.Cursor, date: str) -> list[Availability]:
        cursor.execute(
            f"""
            SELECT id, date, time_slot, is_available
            FROM availability
            WHERE date = ?
            ORDER BY {_SLOT_ORDER_SQL} ASC;
            """,
            (date,),
        )
        return [_row_to_availability(row) for row in cursor.fetchall()]

    def _write_slot(
        self,
        cursor: sqlite3.Cursor,
        date: str,
        time_slot: TimeSlot,
        is_available: bool,
    ) -> Availability:
        cursor.execute(
            """
            INSERT INTO availability (date, time_slot, is_available)
            VALUES (?, ?, ?)
            ON CONFLICT (date, time_slot)
            DO UPDATE SET is_available = excluded.is_available;
            """,
            (date, time_slot.value, int(is_available)),
        )
        cursor.execute(
            """
            SELECT id, date, time_slot, is_available
            FROM availability
            WHERE date = ? AND time_slot = ?;
            """,
            (date, time_slot.value),
        )
        return _row_to_availability(cursor.fetchone())

    def upsert_availability(
        self,
        date: str,
        time_slot: TimeSlot,
        is_available: bool,
    ) -> Availability:
        """Insert or update the single row keyed by (date, time_slot)."""
        with self._session() as cursor:
            return self._write_slot(cursor, date, time_slot, is_available)

    def replace_availability_for_date(
        self,
        date: str,
        selected_slots: Sequence[TimeSlot],
    ) -> list[Availability]:
        """Clear deselected slots, then mark the selection available, atomically."""
        with self._session(immediate=True) as cursor:
            cursor.execute(
                """
                SELECT time_slot
                FROM availability
                WHERE date = ? AND is_available = 1;
                """,
                (date,),
            )
            currently_available = {TimeSlot(row["time_slot"]) for row in cursor.fetchall()}
            selected = list(selected_slots)

            for slot in sorted(currently_available - set(selected), key=lambda s: s.order):
                self._write_slot(cursor, date, slot, False)
            for slot in selected:
                self._write_slot(cursor, date, slot, True)

            return self._select_for_date(cursor, date)

    # --- booking requests -------------------------------------------------

    def list_booking_requests(self) -> list[BookingRequest]:
        with self._session() as cursor:
            cursor.execute("SELECT * FROM booking_requests ORDER BY id ASC;")
            return [_row_to_booking(row) for row in cursor.fetchall()]

    def get_booking_request(self, booking_id: int) -> Optional[BookingRequest]:
        with self._session() as cursor:
            cursor.execute("SELECT * FROM booking_requests WHERE id = ?;", (booking_id,))
            row = cursor.fetchone()
            if row is None:
                return None
            return _row_to_booking(row)

    def create_booking_request(
        self,
        draft: BookingDraft,
        created_at: datetime,
    ) -> BookingRequest:
        """Insert a new request; status always starts as pending."""
        with self._session() as cursor:
            cursor.execute(
                """
                INSERT INTO booking_requests (
                    name,
                    email,
                    body_part,
                    size,
                    description,
                    requested_date,
                    status,
                    created_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?);
                """,
                (
                    draft.name,
                    draft.email,
                    draft.body_part,
                    draft.size,
                    draft.description,
                    draft.requested_date,
                    BookingStatus.PENDING.value,
                    created_at.isoformat(),
                ),
            )
            cursor.execute(
                "SELECT * FROM booking_requests WHERE id = ?;",
                (cursor.lastrowid,),
            )
            return _row_to_booking(cursor.fetchone())

    def update_booking_status(
        self,
        booking_id: int,
        requested_status: BookingStatus,
    ) -> BookingRequest:
        with self._session(immediate=True) as cursor:
            cursor.execute("SELECT * FROM booking_requests WHERE id = ?;", (booking_id,))
            row = cursor.fetchone()
            if row is None:
                raise BookingNotFoundError(f"Booking request {booking_id} not found")

            current = _row_to_booking(row)
            new_status = transition_status(current.status, requested_status)
            if new_status != current.status:
                cursor.execute(
                    "UPDATE booking_requests SET status = ? WHERE id = ?;",
                    (new_status.value, booking_id),
                )
            cursor.execute("SELECT * FROM booking_requests WHERE id = ?;", (booking_id,))
            return _row_to_booking(cursor.fetchone())

    # --- inquiries --------------------------------------------------------

    def list_inquiries(self) -> list[Inquiry]:
        with self._session() as cursor:
            cursor.execute("SELECT * FROM inquiries ORDER BY id ASC;")
            return [_row_to_inquiry(row) for row in cursor.fetchall()]

    def create_inquiry(
        self,
        name: str,
        email: str,
        message: str,
        created_at: datetime,
    ) -> Inquiry:
        with self._session() as cursor:
            cursor.execute(
                """
                INSERT INTO inquiries (name, email, message, created_at)
                VALUES (?, ?, ?, ?);
                """,
                (name, email, message, created_at.isoformat()),
            )
            cursor.execute("SELECT * FROM inquiries WHERE id = ?;", (cursor.lastrowid,))
            return _row_to_inquiry(cursor.fetchone())
