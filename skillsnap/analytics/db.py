from __future__ import annotations

import sqlite3
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

from skillsnap.core.config import settings


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _get_db_path() -> Path:
    return Path(settings.analytics_db_path)


def init_db() -> None:
    if not settings.analytics_enabled:
        return
    db_path = _get_db_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    with sqlite3.connect(db_path) as conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS ai_analysis_runs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                created_at TEXT NOT NULL,
                run_id TEXT NOT NULL,
                model TEXT NOT NULL,
                schema_valid INTEGER NOT NULL,
                status TEXT NOT NULL,
                error_code TEXT,
                latency_ms INTEGER,
                response_chars INTEGER
            )
            """
        )
        conn.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_ai_analysis_runs_created_at
            ON ai_analysis_runs (created_at)
            """
        )
        conn.commit()
    purge_old_records()


def log_ai_analysis_run(
    *,
    run_id: str,
    model: str,
    schema_valid: bool,
    status: str,
    error_code: str | None = None,
    latency_ms: int | None = None,
    response_chars: int | None = None,
) -> None:
    if not settings.analytics_enabled:
        return
    db_path = _get_db_path()
    with sqlite3.connect(db_path) as conn:
        conn.execute(
            """
            INSERT INTO ai_analysis_runs (
                created_at, run_id, model, schema_valid, status, error_code, latency_ms, response_chars
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                _utc_now(),
                run_id,
                model,
                1 if schema_valid else 0,
                status,
                error_code,
                latency_ms,
                response_chars,
            ),
        )
        conn.commit()


def purge_old_records() -> dict[str, int]:
    if not settings.analytics_enabled:
        return {"ai_analysis_runs": 0}

    db_path = _get_db_path()
    retention = max(1, int(settings.analytics_retention_days))
    with sqlite3.connect(db_path) as conn:
        cur = conn.execute(
            "DELETE FROM ai_analysis_runs WHERE created_at < ?",
            ((datetime.now(timezone.utc) - timedelta(days=retention)).isoformat(),),
        )
        deleted = int(cur.rowcount or 0)
        conn.commit()
    return {"ai_analysis_runs": deleted}


def _row_to_dict(cursor: sqlite3.Cursor, row: tuple) -> dict[str, Any]:
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


def get_summary() -> dict[str, Any]:
    if not settings.analytics_enabled:
        return {"enabled": False}
    db_path = _get_db_path()
    with sqlite3.connect(db_path) as conn:
        total = conn.execute("SELECT COUNT(*) FROM ai_analysis_runs").fetchone()[0]
        cur = conn.execute(
            """
            SELECT status, COUNT(*) AS count
            FROM ai_analysis_runs
            GROUP BY status
            """
        )
        by_status = {row[0]: row[1] for row in cur.fetchall()}
        cur = conn.execute(
            """
            SELECT error_code, COUNT(*) AS count
            FROM ai_analysis_runs
            WHERE error_code IS NOT NULL
            GROUP BY error_code
            """
        )
        by_error = {row[0]: row[1] for row in cur.fetchall()}
        avg_latency = conn.execute(
            "SELECT AVG(latency_ms) FROM ai_analysis_runs WHERE status = 'success'"
        ).fetchone()[0]
    return {
        "enabled": True,
        "total": total,
        "by_status": by_status,
        "by_error_code": by_error,
        "avg_success_latency_ms": round(avg_latency) if avg_latency is not None else None,
    }


def get_latest_runs(limit: int = 20) -> list[dict[str, Any]]:
    if not settings.analytics_enabled:
        return []
    db_path = _get_db_path()
    with sqlite3.connect(db_path) as conn:
        cur = conn.execute(
            """
            SELECT created_at, run_id, model, schema_valid, status, error_code, latency_ms, response_chars
            FROM ai_analysis_runs
            ORDER BY id DESC
            LIMIT ?
            """,
            (limit,),
        )
        rows = cur.fetchall()
        return [_row_to_dict(cur, row) for row in rows]
