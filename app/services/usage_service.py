"""
Usage service - Recording and aggregating API usage
"""

import logging
from datetime import datetime, timezone
from typing import Optional
from app.models.usage import UsageStats
from app.repositories import usage_repo
from app.utils.timezone import to_utc_iso

logger = logging.getLogger(__name__)


def get_detailed_stats_by_api_key(api_key_id: int, start: datetime, end: datetime) -> UsageStats:
    """
    Aggregate usage for one API key over [start, end]
    
    Args:
        api_key_id: API key ID
        start: Aware start of the window (inclusive)
        end: Aware end of the window (inclusive)
        
    Returns:
        UsageStats: Aggregates, all zero for an empty window
    """
    row = usage_repo.aggregate_by_api_key(api_key_id, to_utc_iso(start), to_utc_iso(end))
    stats = UsageStats(**row)
    logger.debug(
        f"Usage for key {api_key_id} {start.isoformat()} -> {end.isoformat()}: "
        f"{stats.total_requests} requests"
    )
    return stats


def record_usage(api_key_id: int, model: Optional[str] = None,
                 input_tokens: int = 0, output_tokens: int = 0,
                 cache_creation_tokens: int = 0, cache_read_tokens: int = 0,
                 total_cost: float = 0.0, actual_cost: float = 0.0,
                 duration_ms: Optional[int] = None,
                 created_at: Optional[datetime] = None) -> int:
    """
    Record a single request's usage
    
    Returns:
        int: Usage log ID
    """
    created_at = created_at or datetime.now(timezone.utc)
    return usage_repo.create_usage_log(
        api_key_id=api_key_id,
        created_at=to_utc_iso(created_at),
        model=model,
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        cache_creation_tokens=cache_creation_tokens,
        cache_read_tokens=cache_read_tokens,
        total_cost=total_cost,
        actual_cost=actual_cost,
        duration_ms=duration_ms,
    )
