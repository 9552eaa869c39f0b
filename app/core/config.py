"""
Configuration from environment variables
"""

from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "case_sensitive": True}
    """Application settings from environment variables"""
    
    # FastAPI Configuration
    FASTAPI_HOST: str = "0.0.0.0"
    FASTAPI_PORT: int = 8000
    LOG_LEVEL: str = "INFO"
    
    # SQLite Configuration
    SQLITE_DB_PATH: str = "/app/data/usage_service.db"
    
    # Timezone used when a request does not name one (IANA name)
    DEFAULT_TIMEZONE: str = "UTC"
    
    # Usage retention
    USAGE_RETENTION_DAYS: int = 90  # Days to keep usage logs
    CLEANUP_RUN_HOUR: int = 2  # Hour of day to run cleanup (default 2 AM)
    
    # CORS Configuration
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
        # Note: "*" cannot be used with allow_credentials=True
    ]


# Global settings instance
settings = Settings()
