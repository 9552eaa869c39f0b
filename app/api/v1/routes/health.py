"""
Health check endpoint
"""

import logging
from fastapi import APIRouter
from datetime import datetime, timezone
from app.db.sqlite import execute_query
from app.models.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter()

# Cleanup scheduler, set from the app factory on startup
_scheduler = None


def set_scheduler(sched):
    global _scheduler
    _scheduler = sched


def _database_ok() -> bool:
    try:
        execute_query("SELECT 1", fetch_one=True)
        return True
    except Exception as e:
        logger.warning(f"Health check: database unavailable: {str(e)}")
        return False


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """
    Liveness plus database and cleanup-scheduler state
    """
    database_ok = _database_ok()
    return HealthResponse(
        status="ok" if database_ok else "degraded",
        timestamp=datetime.now(timezone.utc).isoformat(),
        database=database_ok,
        scheduler_running=bool(_scheduler and _scheduler.running),
    )
