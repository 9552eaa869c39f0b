"""
Common models (health, error)
"""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response"""
    status: str  # ok, degraded
    timestamp: str
    database: bool
    scheduler_running: bool


class ErrorResponse(BaseModel):
    """Error envelope"""
    code: int
    message: str
