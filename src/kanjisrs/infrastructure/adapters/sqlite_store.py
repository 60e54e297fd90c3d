"""
SQLite Progress Store — Infrastructure adapter for a local progress database.

Implements ProgressStore on top of a single SQLite file. Stages are stored as
their integer codes; the mapping back to SRSStage lives here, not in the
engine.
"""

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path

from kanjisrs.domain.models import ItemKind, LearningItem, SRSStage
from kanjisrs.domain.ports import ProgressStore

logger = logging.getLogger(__name__)

UTC = timezone.utc

SCHEMA = """
CREATE TABLE IF NOT EXISTS progress (
    kind TEXT NOT NULL,
    item_id TEXT NOT NULL,
    srs_stage INTEGER NOT NULL DEFAULT 0,
    next_review_at TEXT,
    times_reviewed INTEGER NOT NULL DEFAULT 0,
    times_correct INTEGER NOT NULL DEFAULT 0,
    mnemonic TEXT,
    assignment_id INTEGER,
    updated_at TEXT,
    PRIMARY KEY (kind, item_id)
);
CREATE INDEX IF NOT EXISTS idx_progress_due ON progress (next_review_at);
"""

COLUMNS = (
    "kind, item_id, srs_stage, next_review_at, times_reviewed, "
    "times_correct, mnemonic, assignment_id, updated_at"
)


def _to_text(value: datetime | None) -> str | None:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    # Fixed-width UTC text so lexical order matches time order
    return value.astimezone(UTC).isoformat(timespec="microseconds")


def _from_text(value: str | None) -> datetime | None:
    if value is None:
        return None
    return datetime.fromisoformat(value)


def stage_from_code(code: int) -> SRSStage:
    """Map a stored integer onto SRSStage; unknown codes read as LESSON."""
    try:
        return SRSStage(code)
    except ValueError:
        logger.warning(f"Unknown stored SRS stage {code}, treating as Lesson")
        return SRSStage.LESSON


class SqliteProgressStore(ProgressStore):
    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self._initialized = False

    @contextmanager
    def connect(self):
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def initialize(self) -> None:
        if self._initialized:
            return
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with self.connect() as conn:
            conn.executescript(SCHEMA)
        self._initialized = True
        logger.debug(f"Progress database ready at {self.db_path}")

    async def get(self, kind: ItemKind, item_id: str) -> LearningItem | None:
        self.initialize()
        with self.connect() as conn:
            row = conn.execute(
                f"SELECT {COLUMNS} FROM progress WHERE kind = ? AND item_id = ?",
                (kind.value, item_id),
            ).fetchone()
        return self._row_to_item(row) if row else None

    async def upsert(self, item: LearningItem) -> None:
        self.initialize()
        with self.connect() as conn:
            conn.execute(
                f"""
                INSERT INTO progress ({COLUMNS})
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT (kind, item_id) DO UPDATE SET
                    srs_stage = excluded.srs_stage,
                    next_review_at = excluded.next_review_at,
                    times_reviewed = excluded.times_reviewed,
                    times_correct = excluded.times_correct,
                    mnemonic = excluded.mnemonic,
                    assignment_id = excluded.assignment_id,
                    updated_at = excluded.updated_at
                """,
                (
                    item.kind.value,
                    item.item_id,
                    int(item.stage),
                    _to_text(item.next_review_at),
                    item.times_reviewed,
                    item.times_correct,
                    item.mnemonic,
                    item.assignment_id,
                    _to_text(item.updated_at),
                ),
            )

    async def all_due(self, now: datetime, kind: ItemKind | None = None) -> list[LearningItem]:
        self.initialize()
        query = (
            f"SELECT {COLUMNS} FROM progress "
            "WHERE next_review_at IS NOT NULL AND next_review_at <= ?"
        )
        params: list = [_to_text(now)]
        if kind is not None:
            query += " AND kind = ?"
            params.append(kind.value)
        query += " ORDER BY next_review_at ASC"

        with self.connect() as conn:
            rows = conn.execute(query, params).fetchall()
        return [self._row_to_item(row) for row in rows]

    async def all_items(self, kind: ItemKind | None = None) -> list[LearningItem]:
        self.initialize()
        with self.connect() as conn:
            if kind is None:
                rows = conn.execute(f"SELECT {COLUMNS} FROM progress").fetchall()
            else:
                rows = conn.execute(
                    f"SELECT {COLUMNS} FROM progress WHERE kind = ?", (kind.value,)
                ).fetchall()
        return [self._row_to_item(row) for row in rows]

    def _row_to_item(self, row: sqlite3.Row) -> LearningItem:
        return LearningItem(
            kind=ItemKind(row["kind"]),
            item_id=row["item_id"],
            stage=stage_from_code(row["srs_stage"]),
            next_review_at=_from_text(row["next_review_at"]),
            times_reviewed=row["times_reviewed"],
            times_correct=row["times_correct"],
            mnemonic=row["mnemonic"],
            assignment_id=row["assignment_id"],
            updated_at=_from_text(row["updated_at"]),
        )
