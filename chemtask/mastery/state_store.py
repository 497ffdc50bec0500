"""
Mastery state persistence.

A single key-value map per learner: competency id -> current P(L).
Writes are last-write-wins per competency; there are no cross-competency
transactions.

Database location: ~/.chemtask/state.db
"""

from __future__ import annotations

import sqlite3
from collections.abc import Mapping
from datetime import datetime
from pathlib import Path
from typing import Protocol

from loguru import logger

from chemtask.core.bkt import BktState, utc_now


class BktStateStore(Protocol):
    """Storage interface the mastery tracker depends on."""

    def load_bkt_state(self) -> dict[str, BktState]: ...

    def save_bkt_pl(self, competency_id: str, p_l: float) -> None: ...

    def save_bkt_state(self, states: Mapping[str, float]) -> None: ...

    def has_bkt_state(self) -> bool: ...

    def clear_bkt_state(self) -> None: ...


# =============================================================================
# In-memory store
# =============================================================================


class InMemoryBktStateStore:
    """Process-local store, used by tests and one-off sessions."""

    def __init__(self, initial: Mapping[str, float] | None = None):
        self._states: dict[str, BktState] = {}
        if initial:
            self.save_bkt_state(initial)

    def load_bkt_state(self) -> dict[str, BktState]:
        return dict(self._states)

    def save_bkt_pl(self, competency_id: str, p_l: float) -> None:
        self._states[competency_id] = BktState(competency_id, p_l, utc_now())

    def save_bkt_state(self, states: Mapping[str, float]) -> None:
        for competency_id, p_l in states.items():
            self.save_bkt_pl(competency_id, p_l)

    def has_bkt_state(self) -> bool:
        return bool(self._states)

    def clear_bkt_state(self) -> None:
        self._states.clear()

    def close(self) -> None:
        pass


# =============================================================================
# SQLite store
# =============================================================================


class SQLiteBktStateStore:
    """
    SQLite-backed mastery persistence.

    Handles:
    - One P(L) row per competency with its last update time
    - Bulk save for imports
    - Full reset
    """

    DEFAULT_DB_PATH = Path.home() / ".chemtask" / "state.db"

    def __init__(self, db_path: Path | None = None):
        """
        Initialize the state store.

        Args:
            db_path: Custom database path (defaults to ~/.chemtask/state.db)
        """
        self.db_path = Path(db_path) if db_path else self.DEFAULT_DB_PATH
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._conn: sqlite3.Connection | None = None
        self._init_schema()

        logger.info(f"BKT state store initialized at {self.db_path}")

    @property
    def conn(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._conn is None:
            self._conn = sqlite3.connect(str(self.db_path))
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def _init_schema(self) -> None:
        cursor = self.conn.cursor()
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS bkt_state (
                competency_id TEXT PRIMARY KEY,
                p_l REAL NOT NULL,
                updated_at TEXT
            )
        """)
        self.conn.commit()

    # =========================================================================
    # BKT State Operations
    # =========================================================================

    def load_bkt_state(self) -> dict[str, BktState]:
        """
        Load every stored estimate.

        Returns:
            Competency id -> BktState
        """
        cursor = self.conn.cursor()
        cursor.execute("SELECT competency_id, p_l, updated_at FROM bkt_state")
        states = {}
        for row in cursor.fetchall():
            updated_at = datetime.fromisoformat(row["updated_at"]) if row["updated_at"] else None
            states[row["competency_id"]] = BktState(row["competency_id"], row["p_l"], updated_at)
        return states

    def save_bkt_pl(self, competency_id: str, p_l: float) -> None:
        """
        Save or update the estimate of one competency.

        Args:
            competency_id: Competency identifier
            p_l: New mastery probability
        """
        self._upsert([(competency_id, p_l)])
        logger.debug(f"Saved P(L)={p_l:.3f} for {competency_id}")

    def save_bkt_state(self, states: Mapping[str, float]) -> None:
        """Save several estimates at once."""
        self._upsert(list(states.items()))
        logger.info(f"Saved {len(states)} BKT estimates")

    def _upsert(self, rows: list[tuple[str, float]]) -> None:
        now = utc_now().isoformat()
        cursor = self.conn.cursor()
        cursor.executemany(
            """
            INSERT INTO bkt_state (competency_id, p_l, updated_at)
            VALUES (?, ?, ?)
            ON CONFLICT(competency_id) DO UPDATE SET
                p_l = excluded.p_l,
                updated_at = excluded.updated_at
        """,
            [(competency_id, float(p_l), now) for competency_id, p_l in rows],
        )
        self.conn.commit()

    def has_bkt_state(self) -> bool:
        cursor = self.conn.cursor()
        cursor.execute("SELECT COUNT(*) FROM bkt_state")
        return cursor.fetchone()[0] > 0

    def clear_bkt_state(self) -> None:
        """Delete every stored estimate."""
        cursor = self.conn.cursor()
        cursor.execute("DELETE FROM bkt_state")
        self.conn.commit()
        logger.info(f"Cleared {cursor.rowcount} BKT estimates")

    def close(self) -> None:
        """Close the database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None
