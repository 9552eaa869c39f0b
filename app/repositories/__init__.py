"""
Data Access Layer (Repositories)
"""

from app.repositories.api_key_repo import (
    create_api_key,
    get_api_key_by_hash,
    list_api_keys,
    revoke_api_key,
)

from app.repositories.usage_repo import (
    create_usage_log,
    aggregate_by_api_key,
    delete_usage_before,
)

__all__ = [
    # API Key repo
    "create_api_key",
    "get_api_key_by_hash",
    "list_api_keys",
    "revoke_api_key",
    # Usage repo
    "create_usage_log",
    "aggregate_by_api_key",
    "delete_usage_before",
]
