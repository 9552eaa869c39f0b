"""
Usage repository - Data access layer for usage logs
"""

import logging
from typing import Optional, Dict
from app.db.sqlite import execute_query, get_connection

logger = logging.getLogger(__name__)


def create_usage_log(api_key_id: int, created_at: str, model: Optional[str] = None,
                     input_tokens: int = 0, output_tokens: int = 0,
                     cache_creation_tokens: int = 0, cache_read_tokens: int = 0,
                     total_cost: float = 0.0, actual_cost: float = 0.0,
                     duration_ms: Optional[int] = None) -> int:
    """
    Insert a usage log row
    
    Args:
        api_key_id: Owning API key ID
        created_at: UTC ISO-8601 timestamp
        
    Returns:
        int: Usage log ID
    """
    query = """
        INSERT INTO usage_logs (
            api_key_id, model, input_tokens, output_tokens,
            cache_creation_tokens, cache_read_tokens,
            total_cost, actual_cost, duration_ms, created_at
        )
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
    """
    
    with get_connection() as conn:
        cursor = conn.cursor()
        cursor.execute(query, (
            api_key_id, model, input_tokens, output_tokens,
            cache_creation_tokens, cache_read_tokens,
            total_cost, actual_cost, duration_ms, created_at
        ))
        log_id = cursor.lastrowid
        conn.commit()
    
    logger.debug(f"Recorded usage log {log_id} for API key {api_key_id}")
    
    return log_id


def aggregate_by_api_key(api_key_id: int, start: str, end: str) -> Dict:
    """
    Aggregate usage logs for a key with start <= created_at <= end
    
    Args:
        api_key_id: API key ID
        start: UTC ISO-8601 lower bound (inclusive)
        end: UTC ISO-8601 upper bound (inclusive)
        
    Returns:
        dict: Aggregate counters; zeros when no rows match
    """
    query = """
        SELECT
            COUNT(*) AS total_requests,
            COALESCE(SUM(input_tokens), 0) AS total_input_tokens,
            COALESCE(SUM(output_tokens), 0) AS total_output_tokens,
            COALESCE(SUM(cache_creation_tokens), 0) AS total_cache_creation_tokens,
            COALESCE(SUM(cache_read_tokens), 0) AS total_cache_read_tokens,
            COALESCE(SUM(input_tokens + output_tokens
                         + cache_creation_tokens + cache_read_tokens), 0) AS total_tokens,
            COALESCE(SUM(total_cost), 0) AS total_cost,
            COALESCE(SUM(actual_cost), 0) AS total_actual_cost,
            COALESCE(AVG(duration_ms), 0) AS average_duration_ms
        FROM usage_logs
        WHERE api_key_id = ? AND created_at >= ? AND created_at <= ?
    """
    
    return execute_query(query, (api_key_id, start, end), fetch_one=True)


def delete_usage_before(cutoff: str) -> int:
    """
    Delete usage logs created before a UTC ISO-8601 cutoff
    
    Returns:
        int: Number of deleted rows
    """
    query = "DELETE FROM usage_logs WHERE created_at < ?"
    return execute_query(query, (cutoff,))
