"""
Pydantic Models (Schemas)
"""

# API Key models
from app.models.api_key import (
    ApiKey,
)

# Usage models
from app.models.usage import (
    UsageStats,
    PublicUsageStatsResponse,
    PublicUsageEnvelope,
    RecordUsageRequest,
)

# Common models
from app.models.common import (
    HealthResponse,
    ErrorResponse,
)

__all__ = [
    # API Key
    "ApiKey",
    # Usage
    "UsageStats",
    "PublicUsageStatsResponse",
    "PublicUsageEnvelope",
    "RecordUsageRequest",
    # Common
    "HealthResponse",
    "ErrorResponse",
]
