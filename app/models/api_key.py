"""
API Key models
"""

from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class ApiKey(BaseModel):
    """Stored API key (never carries the plaintext key)"""
    id: int
    name: str
    user_id: Optional[int] = None
    expires_at: Optional[datetime] = None
    created_at: Optional[str] = None
    active: bool = True

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires_at is None:
            return False
        now = now or datetime.now(self.expires_at.tzinfo)
        return now > self.expires_at

    def is_active(self) -> bool:
        """Active flag set and not past its expiry"""
        return self.active and not self.is_expired()

