"""Persistent Q&A history backed by SQLite"""

import logging
import sqlite3
import threading
from pathlib import Path
from typing import Optional, Union

from . import config
from .text import Language

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS chat_history (
    id INTEGER PRIMARY KEY,
    question TEXT NOT NULL,
    answer TEXT NOT NULL,
    language TEXT NOT NULL,
    timestamp DATETIME DEFAULT CURRENT_TIMESTAMP
);
CREATE INDEX IF NOT EXISTS idx_question ON chat_history(question);
CREATE INDEX IF NOT EXISTS idx_language ON chat_history(language);
"""


class HistoryStore:
    """
    Durable (question, language) → answer map.

    The first answer stored for a key wins; later upserts for the same key
    are dropped. Storage errors are logged and never raised, so a broken
    database only costs the pipeline its memory.
    """

    def __init__(self, db_path: Union[str, Path] = None):
        self.db_path = str(db_path or config.DB_PATH)
        self._lock = threading.Lock()
        self._conn: Optional[sqlite3.Connection] = None
        self._open()

    def _open(self):
        try:
            if self.db_path != ":memory:":
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.db_path, check_same_thread=False)
            conn.executescript(_SCHEMA)
            conn.commit()
            self._conn = conn
            logger.info(f"History database ready at {self.db_path}")
        except (sqlite3.Error, OSError) as e:
            logger.error(f"Failed to open history database {self.db_path}: {e}")
            self._conn = None

    @property
    def available(self) -> bool:
        return self._conn is not None

    def find(self, question: str, language: Language) -> Optional[str]:
        """Return the stored answer for (question, language), or None."""
        if self._conn is None:
            logger.error("History database not initialized")
            return None
        try:
            with self._lock:
                row = self._conn.execute(
                    "SELECT answer FROM chat_history WHERE question = ? AND language = ? LIMIT 1",
                    (question, Language(language).value),
                ).fetchone()
        except sqlite3.Error as e:
            logger.error(f"History lookup failed: {e}")
            return None
        return row[0] if row else None

    def upsert(self, question: str, answer: str, language: Language):
        """Insert the answer unless (question, language) is already stored."""
        if self._conn is None:
            logger.error("History database not initialized")
            return
        lang = Language(language).value
        try:
            with self._lock:
                exists = self._conn.execute(
                    "SELECT id FROM chat_history WHERE question = ? AND language = ? LIMIT 1",
                    (question, lang),
                ).fetchone()
                if exists:
                    logger.debug("Question already stored, skipping insert")
                    return
                self._conn.execute(
                    "INSERT INTO chat_history (question, answer, language, timestamp) "
                    "VALUES (?, ?, ?, datetime('now'))",
                    (question, answer, lang),
                )
                self._conn.commit()
        except sqlite3.Error as e:
            logger.error(f"Failed to save answer to history: {e}")

    def count(self) -> int:
        if self._conn is None:
            return 0
        try:
            with self._lock:
                return self._conn.execute("SELECT COUNT(*) FROM chat_history").fetchone()[0]
        except sqlite3.Error as e:
            logger.error(f"Failed to count history: {e}")
            return 0

    def clear(self):
        """Delete all stored answers (use with caution!)"""
        if self._conn is None:
            return
        try:
            with self._lock:
                self._conn.execute("DELETE FROM chat_history")
                self._conn.commit()
            logger.info("History cleared")
        except sqlite3.Error as e:
            logger.error(f"Failed to clear history: {e}")

    def close(self):
        if self._conn is not None:
            with self._lock:
                self._conn.close()
                self._conn = None


def reset_database(db_path: Union[str, Path] = None):
    """Remove the history database file so the next store starts empty."""
    path = Path(db_path or config.DB_PATH)
    try:
        if path.exists():
            path.unlink()
            logger.info(f"Removed history database {path}")
    except OSError as e:
        logger.error(f"Failed to remove history database {path}: {e}")
