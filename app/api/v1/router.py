"""
API Router - Main router that includes all sub-routers
"""

from fastapi import APIRouter
from app.api.v1.routes import (
    health,
    public,
)

# Main API router
api_router = APIRouter()

api_router.include_router(health.router, tags=["Health"])  # /api/health
api_router.include_router(public.router, prefix="/v1/public", tags=["Public"])  # /api/v1/public/usage
