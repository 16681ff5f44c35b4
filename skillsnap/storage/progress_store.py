from __future__ import annotations

import sqlite3
import threading
from datetime import datetime

from skillsnap.schemas.progress import ProgressEvent
from skillsnap.storage.sqlite import open_connection

_COLUMNS = (
    "progress_id",
    "analysis_id",
    "step_id",
    "resource_index",
    "skill",
    "step_title",
    "step_number",
    "resource_title",
    "resource_url",
    "resource_type",
    "resource_provider",
    "clicked_at",
)
_SELECT = f"SELECT {', '.join(_COLUMNS)} FROM progress_events"


def _row_to_event(row: tuple) -> ProgressEvent:
    data = dict(zip(_COLUMNS, row))
    data["clicked_at"] = datetime.fromisoformat(data["clicked_at"])
    return ProgressEvent(**data)


class ProgressStore:
    """Append-only log of resource clicks."""

    def __init__(self, db_path: str):
        self._lock = threading.Lock()
        self._conn = open_connection(db_path)
        with self._lock:
            self._conn.execute(
                """
                CREATE TABLE IF NOT EXISTS progress_events (
                    progress_id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    analysis_id TEXT NOT NULL,
                    step_id TEXT NOT NULL,
                    resource_index INTEGER NOT NULL,
                    skill TEXT NOT NULL,
                    step_title TEXT NOT NULL,
                    step_number INTEGER NOT NULL,
                    resource_title TEXT NOT NULL,
                    resource_url TEXT NOT NULL,
                    resource_type TEXT NOT NULL,
                    resource_provider TEXT,
                    clicked_at TEXT NOT NULL
                );
                """
            )
            self._conn.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_progress_user_clicked
                ON progress_events (user_id, clicked_at);
                """
            )
            self._conn.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_progress_analysis_clicked
                ON progress_events (analysis_id, clicked_at);
                """
            )

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def add(self, user_id: str, event: ProgressEvent) -> None:
        with self._lock:
            self._conn.execute(
                f"""
                INSERT INTO progress_events (user_id, {', '.join(_COLUMNS)})
                VALUES ({', '.join('?' for _ in range(len(_COLUMNS) + 1))})
                """,
                (
                    user_id,
                    event.progress_id,
                    event.analysis_id,
                    event.step_id,
                    event.resource_index,
                    event.skill,
                    event.step_title,
                    event.step_number,
                    event.resource_title,
                    event.resource_url,
                    event.resource_type,
                    event.resource_provider,
                    event.clicked_at.isoformat(),
                ),
            )

    def _fetch(self, where: str, params: tuple, limit: int | None = None) -> list[ProgressEvent]:
        query = f"{_SELECT} WHERE {where} ORDER BY clicked_at DESC, rowid DESC"
        if limit is not None:
            query += " LIMIT ?"
            params = params + (limit,)
        with self._lock:
            cur: sqlite3.Cursor = self._conn.execute(query, params)
            rows = cur.fetchall()
        return [_row_to_event(row) for row in rows]

    def latest_for_user(self, user_id: str) -> ProgressEvent | None:
        events = self._fetch("user_id = ?", (user_id,), limit=1)
        return events[0] if events else None

    def history_for_user(self, user_id: str, limit: int = 10) -> list[ProgressEvent]:
        return self._fetch("user_id = ?", (user_id,), limit=limit)

    def for_analysis(self, user_id: str, analysis_id: str) -> list[ProgressEvent]:
        return self._fetch("user_id = ? AND analysis_id = ?", (user_id, analysis_id))

    def delete_for_analysis(self, user_id: str, analysis_id: str) -> int:
        with self._lock:
            cur = self._conn.execute(
                "DELETE FROM progress_events WHERE user_id = ? AND analysis_id = ?",
                (user_id, analysis_id),
            )
        return int(cur.rowcount or 0)
