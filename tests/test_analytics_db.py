import shutil
import sqlite3
import sys
import tempfile
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from skillsnap.analytics import db as analytics_db  # noqa: E402


class AnalyticsDbTests(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.db_path = Path(self.tmpdir) / "nested" / "analytics.db"
        fake_settings = SimpleNamespace(
            analytics_enabled=True,
            analytics_db_path=str(self.db_path),
            analytics_retention_days=30,
        )
        self.patcher = patch.object(analytics_db, "settings", fake_settings)
        self.patcher.start()
        analytics_db.init_db()

    def tearDown(self):
        self.patcher.stop()
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def _log(self, run_id: str, status: str, error_code=None, latency_ms=100):
        analytics_db.log_ai_analysis_run(
            run_id=run_id,
            model="fake-model",
            schema_valid=status == "success",
            status=status,
            error_code=error_code,
            latency_ms=latency_ms,
            response_chars=1200,
        )

    def test_summary_groups_runs(self):
        self._log("r1", "success", latency_ms=100)
        self._log("r2", "success", latency_ms=301)
        self._log("r3", "invalid_schema", error_code="incomplete_response")
        self._log("r4", "error", error_code="llm_quota")

        summary = analytics_db.get_summary()
        self.assertTrue(summary["enabled"])
        self.assertEqual(summary["total"], 4)
        self.assertEqual(summary["by_status"], {"success": 2, "invalid_schema": 1, "error": 1})
        self.assertEqual(summary["by_error_code"], {"incomplete_response": 1, "llm_quota": 1})
        self.assertEqual(summary["avg_success_latency_ms"], 200)

    def test_latest_runs_are_newest_first(self):
        for run_id in ("r1", "r2", "r3"):
            self._log(run_id, "success")
        latest = analytics_db.get_latest_runs(limit=2)
        self.assertEqual([row["run_id"] for row in latest], ["r3", "r2"])
        self.assertEqual(latest[0]["schema_valid"], 1)

    def test_purge_drops_rows_past_retention(self):
        self._log("fresh", "success")
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                """
                INSERT INTO ai_analysis_runs (created_at, run_id, model, schema_valid, status)
                VALUES ('2000-01-01T00:00:00+00:00', 'old', 'fake-model', 1, 'success')
                """
            )
            conn.commit()

        self.assertEqual(analytics_db.purge_old_records(), {"ai_analysis_runs": 1})
        self.assertEqual([row["run_id"] for row in analytics_db.get_latest_runs()], ["fresh"])

    def test_disabled_analytics_is_a_no_op(self):
        with patch.object(analytics_db, "settings", SimpleNamespace(analytics_enabled=False)):
            self._log("r1", "success")
            self.assertEqual(analytics_db.get_summary(), {"enabled": False})
            self.assertEqual(analytics_db.get_latest_runs(), [])
        self.assertEqual(analytics_db.get_summary()["total"], 0)


if __name__ == "__main__":
    unittest.main()
