"""
FastAPI Application Factory
Main application setup with startup/shutdown logic
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
import logging

from app.core.config import settings
from app.core.logging_config import setup_logging
from app.core.response import register_exception_handlers
from app.db import init_db
from app.api.v1.router import api_router
from app.api.v1.routes.health import set_scheduler
from app.services.cleanup_service import run_cleanup

# Configure logging
setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application
    """
    app = FastAPI(title="Public Usage Service")
    scheduler = AsyncIOScheduler()
    
    # The public endpoint is read-only; GET is all browsers need
    cors_origins = [origin for origin in settings.CORS_ORIGINS if origin != "*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )
    logger.info(f"CORS configured for origins: {cors_origins}")
    
    register_exception_handlers(app)
    
    # Include API router with prefix
    app.include_router(api_router, prefix="/api")
    
    @app.on_event("startup")
    async def startup_event():
        """Initialize database and start the cleanup scheduler"""
        init_db()
        
        set_scheduler(scheduler)
        cleanup_hour = settings.CLEANUP_RUN_HOUR
        scheduler.add_job(
            run_cleanup,
            trigger=CronTrigger(hour=cleanup_hour, minute=0),
            id='daily_usage_cleanup',
            name='Daily Cleanup Old Usage Logs',
            replace_existing=True
        )
        scheduler.start()
        logger.info(f"Cleanup job scheduled to run daily at {cleanup_hour:02d}:00")
    
    @app.on_event("shutdown")
    async def shutdown_event():
        """Stop scheduler on shutdown"""
        if scheduler.running:
            scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
    
    return app


# Create app instance
app = create_app()
