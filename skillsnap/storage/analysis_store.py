from __future__ import annotations

import threading

from skillsnap.schemas.analysis import AnalysisRecord
from skillsnap.storage.sqlite import open_connection

_SORT_COLUMNS = {
    "created_at": "created_at",
    "updated_at": "updated_at",
    "last_progress_update": "last_progress_update",
}


class AnalysisStore:
    """One row per analysis: the full record as JSON plus the columns we filter and sort on."""

    def __init__(self, db_path: str):
        self._lock = threading.Lock()
        self._conn = open_connection(db_path)
        with self._lock:
            self._conn.execute(
                """
                CREATE TABLE IF NOT EXISTS analyses (
                    analysis_id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    job_role TEXT NOT NULL,
                    record_json TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    last_progress_update TEXT
                );
                """
            )
            self._conn.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_analyses_user_created
                ON analyses (user_id, created_at);
                """
            )

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def create(self, record: AnalysisRecord) -> None:
        with self._lock:
            self._conn.execute(
                """
                INSERT INTO analyses (
                    analysis_id, user_id, job_role, record_json, created_at, updated_at, last_progress_update
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    record.analysis_id,
                    record.user_id,
                    record.job_role,
                    record.model_dump_json(),
                    record.created_at.isoformat(),
                    record.updated_at.isoformat(),
                    record.last_progress_update.isoformat() if record.last_progress_update else None,
                ),
            )

    def save(self, record: AnalysisRecord) -> None:
        """Overwrite the stored record; concurrent writers are not reconciled (last write wins)."""
        with self._lock:
            self._conn.execute(
                """
                UPDATE analyses
                SET record_json = ?, updated_at = ?, last_progress_update = ?
                WHERE analysis_id = ? AND user_id = ?
                """,
                (
                    record.model_dump_json(),
                    record.updated_at.isoformat(),
                    record.last_progress_update.isoformat() if record.last_progress_update else None,
                    record.analysis_id,
                    record.user_id,
                ),
            )

    def get(self, user_id: str, analysis_id: str) -> AnalysisRecord | None:
        with self._lock:
            row = self._conn.execute(
                "SELECT record_json FROM analyses WHERE analysis_id = ? AND user_id = ?",
                (analysis_id, user_id),
            ).fetchone()
        if not row:
            return None
        return AnalysisRecord.model_validate_json(row[0])

    def list_for_user(
        self,
        user_id: str,
        *,
        job_role: str | None = None,
        sort_by: str = "created_at",
        limit: int | None = None,
        offset: int = 0,
    ) -> list[AnalysisRecord]:
        column = _SORT_COLUMNS.get(sort_by, "created_at")
        query = "SELECT record_json FROM analyses WHERE user_id = ?"
        params: list[object] = [user_id]
        if job_role:
            query += " AND instr(lower(job_role), lower(?)) > 0"
            params.append(job_role)
        query += f" ORDER BY {column} DESC, rowid DESC"
        if limit is not None:
            query += " LIMIT ? OFFSET ?"
            params.extend([limit, max(0, offset)])

        with self._lock:
            rows = self._conn.execute(query, params).fetchall()
        return [AnalysisRecord.model_validate_json(row[0]) for row in rows]

    def count_for_user(self, user_id: str, *, job_role: str | None = None) -> int:
        query = "SELECT COUNT(1) FROM analyses WHERE user_id = ?"
        params: list[object] = [user_id]
        if job_role:
            query += " AND instr(lower(job_role), lower(?)) > 0"
            params.append(job_role)
        with self._lock:
            return int(self._conn.execute(query, params).fetchone()[0] or 0)

    def delete(self, user_id: str, analysis_id: str) -> bool:
        with self._lock:
            cur = self._conn.execute(
                "DELETE FROM analyses WHERE analysis_id = ? AND user_id = ?",
                (analysis_id, user_id),
            )
        return int(cur.rowcount or 0) > 0
