import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from skillsnap.ai.errors import LLMUnavailableError
from skillsnap.ai.factory import build_ai_client
from skillsnap.analytics.db import init_db, purge_old_records
from skillsnap.core.config import settings
from skillsnap.storage import AnalysisStore, ProgressStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    app.state.analysis_store = AnalysisStore(settings.database_path)
    app.state.progress_store = ProgressStore(settings.database_path)

    try:
        app.state.ai_client = build_ai_client()
        logger.info("ai_client_ready model=%s", app.state.ai_client.model)
    except (LLMUnavailableError, ValueError) as exc:
        app.state.ai_client = None
        logger.warning("ai_client_unavailable: %s", exc)

    init_db()

    stop_event = asyncio.Event()

    async def periodic_purge() -> None:
        while not stop_event.is_set():
            try:
                deleted = purge_old_records()
                if any(deleted.values()):
                    logger.info("analytics_retention_purge deleted=%s", deleted)
            except Exception as exc:  # pragma: no cover - purge failures are retried next hour
                logger.warning("analytics_retention_purge_failed: %s", exc)
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=3600)
            except asyncio.TimeoutError:
                continue

    purge_task = asyncio.create_task(periodic_purge())
    yield
    stop_event.set()
    if not purge_task.done():
        purge_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await purge_task
    app.state.analysis_store.close()
    app.state.progress_store.close()
