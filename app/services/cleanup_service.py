"""
Cleanup service for expired usage logs
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
from app.repositories.usage_repo import delete_usage_before
from app.db.sqlite import vacuum_database
from app.core.config import settings
from app.utils.timezone import to_utc_iso

logger = logging.getLogger(__name__)


def cleanup_old_usage(retention_days: Optional[int] = None, now: Optional[datetime] = None) -> int:
    """
    Delete usage logs older than the retention window
    
    Args:
        retention_days: Days to retain (defaults to settings.USAGE_RETENTION_DAYS)
        now: Reference time, defaults to the current UTC time
        
    Returns:
        int: Number of deleted usage logs
    """
    if retention_days is None:
        retention_days = settings.USAGE_RETENTION_DAYS
    
    now = now or datetime.now(timezone.utc)
    cutoff = to_utc_iso(now - timedelta(days=retention_days))
    
    try:
        deleted_count = delete_usage_before(cutoff)
        logger.info(f"Cleanup: Deleted {deleted_count} usage logs (retention: {retention_days} days)")
        return deleted_count
    except Exception as e:
        logger.error(f"Failed to cleanup usage logs: {str(e)}")
        raise


def run_cleanup():
    """
    Run full cleanup: old usage logs, then database optimization
    """
    try:
        logger.info("Starting cleanup process...")
        
        deleted = cleanup_old_usage()
        if deleted:
            vacuum_database()
        
        logger.info(f"Cleanup completed: {deleted} usage logs deleted")
        
    except Exception as e:
        logger.error(f"Cleanup process failed: {str(e)}")
        raise
