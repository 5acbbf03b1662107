"""Database operations and data persistence."""

from __future__ import annotations

import csv
import logging
import sqlite3
import threading
from datetime import date, datetime
from pathlib import Path
from typing import Callable

from gratitude.models import GratitudeEntry, QuoteRecord

ENTRY_COLUMNS = "id, entry_text, created_date, created_datetime, mood_rating, tags"
NEWEST_FIRST = "ORDER BY created_datetime DESC, id DESC"


class StorageError(Exception):
    """Raised when a journal storage operation fails after startup."""


def apply_sqlite_pragmas(conn: sqlite3.Connection) -> None:
    """Apply recommended PRAGMA tunings to an open SQLite connection.

    Foreign-key enforcement is mandatory and errors propagate; the WAL and
    sync/temp_store settings are tunings and only get logged when they fail.
    """
    conn.execute("PRAGMA foreign_keys = ON;")
    try:
        conn.execute("PRAGMA journal_mode=WAL;")
        conn.execute("PRAGMA synchronous=NORMAL;")
        conn.execute("PRAGMA temp_store=MEMORY;")
        logging.info(
            "Applied SQLite PRAGMAs: journal_mode=WAL, synchronous=NORMAL, temp_store=MEMORY"
        )
    except sqlite3.DatabaseError:
        logging.exception("Failed to apply SQLite PRAGMA settings.")


def create_schema(conn: sqlite3.Connection) -> None:
    """Create the entry and quote history tables if they do not exist."""
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS gratitude_entries (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            entry_text TEXT NOT NULL,
            created_date DATE NOT NULL,
            created_datetime TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            mood_rating INTEGER DEFAULT NULL,
            tags TEXT DEFAULT NULL,
            CONSTRAINT check_mood_rating CHECK (
                mood_rating IS NULL OR (mood_rating >= 1 AND mood_rating <= 5)
            )
        )
        """
    )
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS quotes_history (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            quote_text TEXT NOT NULL,
            author TEXT NOT NULL,
            date_shown DATE NOT NULL,
            api_source TEXT DEFAULT NULL,
            created_datetime TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
        """
    )
    conn.execute(
        "CREATE INDEX IF NOT EXISTS idx_entries_created_date "
        "ON gratitude_entries(created_date)"
    )


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _row_to_entry(row: sqlite3.Row) -> GratitudeEntry:
    mood = row["mood_rating"]
    return GratitudeEntry(
        id=int(row["id"]),
        entry_text=str(row["entry_text"]),
        created_date=date.fromisoformat(row["created_date"]),
        created_datetime=datetime.fromisoformat(row["created_datetime"]),
        mood_rating=int(mood) if mood is not None else None,
        tags=row["tags"],
    )


def _row_to_quote_record(row: sqlite3.Row) -> QuoteRecord:
    return QuoteRecord(
        id=int(row["id"]),
        quote_text=str(row["quote_text"]),
        author=str(row["author"]),
        date_shown=date.fromisoformat(row["date_shown"]),
        api_source=row["api_source"],
        created_datetime=datetime.fromisoformat(row["created_datetime"]),
    )


class EntryStore:
    """Owns the journal's SQLite connection and all queries against it.

    A single connection is shared by worker threads; every statement runs
    under one lock so two cursors never interleave on it.
    """

    def __init__(
        self, db_path: Path, clock: Callable[[], datetime] = datetime.now
    ) -> None:
        self.db_path = Path(db_path)
        self._clock = clock
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    def __enter__(self) -> EntryStore:
        self.initialize()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def initialize(self) -> None:
        """Open (or create) the database file and ensure the schema exists.

        Errors are logged and re-raised: the application cannot start
        without its database.
        """
        if self._conn is not None:
            return
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        conn: sqlite3.Connection | None = None
        try:
            conn = sqlite3.connect(self.db_path, check_same_thread=False)
            conn.row_factory = sqlite3.Row
            apply_sqlite_pragmas(conn)
            with conn:
                create_schema(conn)
        except sqlite3.Error:
            logging.exception("Failed to initialize journal database at %s", self.db_path)
            if conn is not None:
                conn.close()
            raise

        self._conn = conn
        logging.info("Journal database ready at %s", self.db_path)

    def is_connected(self) -> bool:
        return self._conn is not None

    def close(self) -> None:
        """Release the connection. Safe to call repeatedly or before initialize."""
        with self._lock:
            if self._conn is None:
                return
            try:
                self._conn.close()
            except sqlite3.Error:
                logging.exception("Error closing journal database connection.")
            finally:
                self._conn = None
        logging.info("Journal database connection closed.")

    def _require_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StorageError("Entry store is not open")
        return self._conn

    def _query(self, sql: str, params: tuple = ()) -> list[sqlite3.Row]:
        with self._lock:
            conn = self._require_connection()
            try:
                return conn.execute(sql, params).fetchall()
            except sqlite3.Error as exc:
                logging.exception("Journal query failed: %s", sql.split()[0])
                raise StorageError(str(exc)) from exc

    def _query_entries(
        self, where: str, params: tuple = (), limit: int | None = None
    ) -> list[GratitudeEntry]:
        sql = f"SELECT {ENTRY_COLUMNS} FROM gratitude_entries {where} {NEWEST_FIRST}"
        if limit is not None:
            sql += " LIMIT ?"
            params = params + (limit,)
        return [_row_to_entry(row) for row in self._query(sql, params)]

    def save_entry(
        self, text: str, mood_rating: int | None = None, tags: str | None = None
    ) -> int:
        """Insert a gratitude entry stamped with the current time and return its id."""
        if mood_rating is not None and (
            isinstance(mood_rating, bool) or not isinstance(mood_rating, int)
        ):
            raise StorageError(f"Mood rating must be an integer, got {mood_rating!r}")

        now = self._clock()
        with self._lock:
            conn = self._require_connection()
            try:
                with conn:
                    cursor = conn.execute(
                        """
                        INSERT INTO gratitude_entries (
                            entry_text, created_date, created_datetime, mood_rating, tags
                        ) VALUES (?, ?, ?, ?, ?)
                        """,
                        (
                            text,
                            now.date().isoformat(),
                            now.isoformat(sep=" ", timespec="microseconds"),
                            mood_rating,
                            tags,
                        ),
                    )
            except sqlite3.IntegrityError as exc:
                logging.warning("Rejected gratitude entry: %s", exc)
                raise StorageError(f"Invalid gratitude entry: {exc}") from exc
            except sqlite3.Error as exc:
                logging.exception("Failed to save gratitude entry.")
                raise StorageError(str(exc)) from exc

        if cursor.rowcount < 1 or cursor.lastrowid is None:
            raise StorageError("Failed to save gratitude entry, no ID obtained.")
        logging.info("Gratitude entry saved with ID: %d", cursor.lastrowid)
        return int(cursor.lastrowid)

    def record_quote_shown(self, text: str, author: str, source: str | None) -> None:
        """Append a shown quote to the history table. Never raises."""
        try:
            today = self._clock().date().isoformat()
            with self._lock:
                conn = self._require_connection()
                with conn:
                    conn.execute(
                        """
                        INSERT INTO quotes_history (
                            quote_text, author, date_shown, api_source, created_datetime
                        ) VALUES (?, ?, ?, ?, ?)
                        """,
                        (
                            text,
                            author,
                            today,
                            source,
                            self._clock().isoformat(sep=" ", timespec="microseconds"),
                        ),
                    )
        except (sqlite3.Error, StorageError):
            logging.exception("Failed to save quote to history.")
            return
        logging.info("Quote saved to history: %s", author)

    def get_entries_for_date(self, day: date) -> list[GratitudeEntry]:
        return self._query_entries("WHERE created_date = ?", (day.isoformat(),))

    def get_recent_entries(self, limit: int) -> list[GratitudeEntry]:
        return self._query_entries("", limit=limit)

    def search_entries(self, term: str) -> list[GratitudeEntry]:
        """Substring search over entry text; LIKE wildcards in term match literally."""
        return self._query_entries(
            "WHERE entry_text LIKE ? ESCAPE '\\'", (f"%{_escape_like(term)}%",)
        )

    def count_all(self) -> int:
        return int(self._query("SELECT COUNT(*) FROM gratitude_entries")[0][0])

    def count_for_date(self, day: date | None = None) -> int:
        if day is None:
            day = self._clock().date()
        rows = self._query(
            "SELECT COUNT(*) FROM gratitude_entries WHERE created_date = ?",
            (day.isoformat(),),
        )
        return int(rows[0][0])

    def delete_entry(self, entry_id: int) -> bool:
        """Delete an entry by id; True iff a row was removed."""
        with self._lock:
            conn = self._require_connection()
            try:
                with conn:
                    cursor = conn.execute(
                        "DELETE FROM gratitude_entries WHERE id = ?", (entry_id,)
                    )
            except sqlite3.Error as exc:
                logging.exception("Failed to delete gratitude entry %s.", entry_id)
                raise StorageError(str(exc)) from exc

        if cursor.rowcount > 0:
            logging.info("Deleted gratitude entry with ID: %s", entry_id)
            return True
        return False

    def get_quote_history(self, limit: int = 30) -> list[QuoteRecord]:
        rows = self._query(
            """
            SELECT id, quote_text, author, date_shown, api_source, created_datetime
            FROM quotes_history
            ORDER BY created_datetime DESC, id DESC
            LIMIT ?
            """,
            (limit,),
        )
        return [_row_to_quote_record(row) for row in rows]

    def export_entries_to_csv(self, csv_path: Path) -> int:
        """Write all entries, oldest first, to a CSV file and return the row count."""
        csv_path = Path(csv_path)
        csv_path.parent.mkdir(parents=True, exist_ok=True)

        with self._lock:
            conn = self._require_connection()
            try:
                cursor = conn.execute(
                    f"SELECT {ENTRY_COLUMNS} FROM gratitude_entries "
                    "ORDER BY created_datetime ASC, id ASC"
                )
                return _write_entries_to_csv(cursor, csv_path)
            except sqlite3.Error as exc:
                logging.exception("Failed to export gratitude entries from SQLite.")
                raise StorageError(str(exc)) from exc
            except OSError:
                logging.exception("Failed to write journal CSV export to %s", csv_path)
                raise


def _write_entries_to_csv(cursor: sqlite3.Cursor, csv_path: Path) -> int:
    """Write database cursor rows to CSV file using streaming approach."""
    row_count = 0
    batch_size = 1000

    with csv_path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.writer(handle)
        writer.writerow(
            ["id", "entry_text", "created_date", "created_datetime", "mood_rating", "tags"]
        )

        while True:
            rows = cursor.fetchmany(batch_size)
            if not rows:
                break

            for row in rows:
                writer.writerow(
                    [
                        row["id"],
                        row["entry_text"],
                        row["created_date"],
                        row["created_datetime"],
                        "" if row["mood_rating"] is None else row["mood_rating"],
                        row["tags"] or "",
                    ]
                )
                row_count += 1

    return row_count
