"""
Business Logic Services
"""

from app.services.api_key_service import (
    create_api_key,
    get_by_key,
    list_api_keys,
    revoke_api_key,
)

from app.services.usage_service import (
    get_detailed_stats_by_api_key,
    record_usage,
)

from app.services.cleanup_service import (
    cleanup_old_usage,
    run_cleanup,
)

__all__ = [
    # API Key service
    "create_api_key",
    "get_by_key",
    "list_api_keys",
    "revoke_api_key",
    # Usage service
    "get_detailed_stats_by_api_key",
    "record_usage",
    # Cleanup service
    "cleanup_old_usage",
    "run_cleanup",
]
