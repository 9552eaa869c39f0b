"""
Usage models
"""

from pydantic import BaseModel, Field
from typing import Optional


class UsageStats(BaseModel):
    """Aggregate usage for one API key over a time range"""
    total_requests: int = 0
    total_input_tokens: int = 0
    total_output_tokens: int = 0
    total_cache_creation_tokens: int = 0
    total_cache_read_tokens: int = 0
    total_tokens: int = 0
    total_cost: float = 0.0
    total_actual_cost: float = 0.0
    average_duration_ms: float = 0.0


class PublicUsageStatsResponse(BaseModel):
    """Usage statistics returned by the public usage endpoint"""
    total_requests: int
    total_input_tokens: int
    total_output_tokens: int
    total_cache_creation_tokens: int
    total_cache_read_tokens: int
    total_tokens: int
    total_cost: float
    total_actual_cost: float
    average_duration_ms: float

    @classmethod
    def from_stats(cls, stats: UsageStats) -> "PublicUsageStatsResponse":
        return cls(
            total_requests=stats.total_requests,
            total_input_tokens=stats.total_input_tokens,
            total_output_tokens=stats.total_output_tokens,
            total_cache_creation_tokens=stats.total_cache_creation_tokens,
            total_cache_read_tokens=stats.total_cache_read_tokens,
            total_tokens=stats.total_tokens,
            total_cost=stats.total_cost,
            total_actual_cost=stats.total_actual_cost,
            average_duration_ms=stats.average_duration_ms,
        )


class PublicUsageEnvelope(BaseModel):
    """Success envelope for the public usage endpoint"""
    code: int = 0
    message: str = "success"
    data: PublicUsageStatsResponse


class RecordUsageRequest(BaseModel):
    """A single usage log entry"""
    api_key_id: int
    model: Optional[str] = None
    input_tokens: int = Field(0, ge=0)
    output_tokens: int = Field(0, ge=0)
    cache_creation_tokens: int = Field(0, ge=0)
    cache_read_tokens: int = Field(0, ge=0)
    total_cost: float = Field(0.0, ge=0)
    actual_cost: float = Field(0.0, ge=0)
    duration_ms: Optional[int] = Field(None, ge=0)
