"""
API Key service - Business logic for API keys
"""

import hashlib
import secrets
import logging
from typing import Optional, Dict, List
from datetime import datetime, timedelta, timezone
from app.core.errors import APIKeyNotFoundError
from app.models.api_key import ApiKey
from app.repositories import api_key_repo

logger = logging.getLogger(__name__)

KEY_PREFIX = "sk-"


def generate_api_key() -> str:
    """
    Generate a new API key
    
    Returns:
        str: New API key (plaintext)
    """
    return KEY_PREFIX + secrets.token_urlsafe(32)


def hash_api_key(key: str) -> str:
    """
    Hash an API key for storage
    
    Args:
        key: Plaintext API key
        
    Returns:
        str: Hashed API key
    """
    return hashlib.sha256(key.encode()).hexdigest()


def _to_model(row: Dict) -> ApiKey:
    return ApiKey(
        id=row['id'],
        name=row['name'],
        user_id=row.get('user_id'),
        expires_at=row.get('expires_at'),
        created_at=row.get('created_at'),
        active=bool(row.get('is_active', 1)),
    )


def create_api_key(name: str, user_id: Optional[int] = None,
                   expires_days: Optional[int] = None) -> Dict:
    """
    Create a new API key
    
    Args:
        name: Name/description for the key
        user_id: Optional user ID to associate with
        expires_days: Optional expiration in days
        
    Returns:
        dict: Contains 'key' (plaintext) and 'key_id'
    """
    plain_key = generate_api_key()
    key_hash = hash_api_key(plain_key)
    
    expires_at = None
    if expires_days:
        expires_at = (datetime.now(timezone.utc) + timedelta(days=expires_days)).isoformat()
    
    key_data = api_key_repo.create_api_key(key_hash, name, user_id, expires_at)
    
    # Plaintext key is only returned here
    return {
        'key_id': key_data['key_id'],
        'key': plain_key,
        'name': key_data['name'],
        'user_id': key_data['user_id'],
        'expires_at': key_data['expires_at'],
        'is_active': True
    }


def get_by_key(api_key: str) -> ApiKey:
    """
    Look up an API key by its plaintext value
    
    Inactive and expired keys are returned too; callers decide what to do
    with them via ApiKey.is_active().
    
    Raises:
        APIKeyNotFoundError: no key with this value exists
    """
    row = api_key_repo.get_api_key_by_hash(hash_api_key(api_key))
    if not row:
        raise APIKeyNotFoundError()
    return _to_model(row)


def list_api_keys(user_id: Optional[int] = None) -> List[Dict]:
    """List all API keys (without plaintext keys)"""
    return api_key_repo.list_api_keys(user_id)


def revoke_api_key(key_id: int) -> bool:
    """Revoke an API key"""
    return api_key_repo.revoke_api_key(key_id)
