"""SQLite-backed dictionary persistence."""

import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

from epub_reader.core import Definition, DictionaryEntry, DictionaryLookup

logger = logging.getLogger(__name__)

SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS entries (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        word TEXT NOT NULL,
        reading TEXT NOT NULL DEFAULT '',
        language TEXT,
        UNIQUE(word, reading)
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS definitions (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        entry_id INTEGER NOT NULL,
        part_of_speech TEXT NOT NULL DEFAULT '',
        definition TEXT NOT NULL DEFAULT '',
        FOREIGN KEY(entry_id) REFERENCES entries(id) ON DELETE CASCADE,
        UNIQUE(entry_id, part_of_speech, definition)
    );
    """,
    "CREATE INDEX IF NOT EXISTS idx_word ON entries(word);",
    "CREATE INDEX IF NOT EXISTS idx_reading ON entries(reading);",
    "CREATE INDEX IF NOT EXISTS idx_definitions_entry ON definitions(entry_id);",
)


class DictionaryStore:
    """Owns the dictionary SQLite connection, schema and queries.

    The store has an explicit open/close lifecycle and is handed by reference
    to both the importer and the lookup index. Transactions are explicit:
    the connection runs in autocommit mode and ``transaction()`` issues
    BEGIN IMMEDIATE / COMMIT / ROLLBACK itself, so schema creation can share
    the import transaction.

    Lookups only see committed data: while a transaction is open on the
    shared connection, ``find_definitions`` reports no match.
    """

    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)
        self._connection: Optional[sqlite3.Connection] = None
        self._write_lock = threading.RLock()

    def open(self) -> "DictionaryStore":
        if self._connection is None:
            if str(self.db_path) != ":memory:":
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
            # Workers import on a pool thread while the GUI thread looks up;
            # the write lock keeps lookups out of an open import transaction.
            self._connection = sqlite3.connect(self.db_path, isolation_level=None, check_same_thread=False)
            self._connection.row_factory = sqlite3.Row
            self._connection.execute("PRAGMA foreign_keys = ON;")
            logger.debug("Opened dictionary store %s", self.db_path)
        return self

    def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None

    @property
    def is_open(self) -> bool:
        return self._connection is not None

    @property
    def connection(self) -> sqlite3.Connection:
        if self._connection is None:
            raise sqlite3.ProgrammingError(f"Dictionary store {self.db_path} is not open")
        return self._connection

    def __enter__(self) -> "DictionaryStore":
        return self.open()

    def __exit__(self, *exc_info) -> None:
        self.close()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Cursor]:
        """All-or-nothing unit of work; any exception rolls everything back."""
        with self._write_lock:
            cur = self.connection.cursor()
            cur.execute("BEGIN IMMEDIATE")
            try:
                yield cur
            except BaseException:
                if self.connection.in_transaction:
                    cur.execute("ROLLBACK")
                raise
            else:
                cur.execute("COMMIT")

    def ensure_schema(self, cur: Optional[sqlite3.Cursor] = None) -> None:
        """Create tables and indexes if they do not exist."""
        cur = cur or self.connection.cursor()
        for statement in SCHEMA:
            cur.execute(statement)

    def upsert_entry(self, cur: sqlite3.Cursor, word: str, reading: str, language: Optional[str]) -> int:
        """Insert an entry unless (word, reading) exists; return its id either way."""
        reading = reading or ""
        cur.execute(
            "INSERT OR IGNORE INTO entries (word, reading, language) VALUES (?, ?, ?)",
            (word, reading, language),
        )
        if cur.rowcount:
            return cur.lastrowid
        cur.execute("SELECT id FROM entries WHERE word = ? AND reading = ?", (word, reading))
        return cur.fetchone()["id"]

    def insert_definition(self, cur: sqlite3.Cursor, entry_id: int, part_of_speech: str, text: str) -> bool:
        """Insert a definition; returns False when the same one already exists."""
        cur.execute(
            """
            INSERT OR IGNORE INTO definitions (entry_id, part_of_speech, definition)
            VALUES (?, ?, ?)
            """,
            (entry_id, part_of_speech or "", text or ""),
        )
        return cur.rowcount > 0

    def find_definitions(self, token: str) -> List[DictionaryLookup]:
        """Every definition whose entry matches ``token`` on word or reading.

        Returns an empty list while an import transaction is open, from this
        thread or another, so rows that may still be rolled back never leak.
        """
        if not self._write_lock.acquire(blocking=False):
            logger.debug("Lookup for '%s' skipped: import in progress", token)
            return []
        try:
            if self.connection.in_transaction:
                logger.debug("Lookup for '%s' skipped: import in progress", token)
                return []
            return self._query_definitions(token)
        finally:
            self._write_lock.release()

    def _query_definitions(self, token: str) -> List[DictionaryLookup]:
        cur = self.connection.cursor()
        cur.execute(
            """
            SELECT
                e.id AS entry_id,
                e.word,
                e.reading,
                d.part_of_speech,
                d.definition
            FROM entries e
            JOIN definitions d ON d.entry_id = e.id
            WHERE e.word = ? OR e.reading = ?
            ORDER BY e.id ASC, d.id ASC
            """,
            (token, token),
        )
        return [self._row_to_lookup(row) for row in cur.fetchall()]

    def get_entry(self, word: str, reading: str = "") -> Optional[DictionaryEntry]:
        cur = self.connection.cursor()
        cur.execute(
            "SELECT id, word, reading, language FROM entries WHERE word = ? AND reading = ?",
            (word, reading or ""),
        )
        row = cur.fetchone()
        return self._row_to_entry(row) if row else None

    def list_definitions(self, entry_id: int) -> List[Definition]:
        cur = self.connection.cursor()
        cur.execute(
            """
            SELECT id, entry_id, part_of_speech, definition
            FROM definitions
            WHERE entry_id = ?
            ORDER BY id ASC
            """,
            (entry_id,),
        )
        return [self._row_to_definition(row) for row in cur.fetchall()]

    def count_entries(self) -> int:
        return self._count("entries")

    def count_definitions(self) -> int:
        return self._count("definitions")

    def _count(self, table: str) -> int:
        cur = self.connection.cursor()
        try:
            cur.execute(f"SELECT COUNT(*) FROM {table}")
        except sqlite3.OperationalError:
            # Nothing imported yet.
            return 0
        return cur.fetchone()[0]

    @staticmethod
    def _row_to_entry(row: sqlite3.Row) -> DictionaryEntry:
        return DictionaryEntry(
            id=row["id"],
            word=row["word"],
            reading=row["reading"],
            language=row["language"],
        )

    @staticmethod
    def _row_to_definition(row: sqlite3.Row) -> Definition:
        return Definition(
            id=row["id"],
            entry_id=row["entry_id"],
            part_of_speech=row["part_of_speech"],
            text=row["definition"],
        )

    @staticmethod
    def _row_to_lookup(row: sqlite3.Row) -> DictionaryLookup:
        return DictionaryLookup(
            entry_id=row["entry_id"],
            word=row["word"],
            reading=row["reading"],
            part_of_speech=row["part_of_speech"],
            definition=row["definition"],
        )
