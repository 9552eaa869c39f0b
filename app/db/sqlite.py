"""
SQLite database module for API keys and usage logs
"""

import sqlite3
import logging
from contextlib import contextmanager
from pathlib import Path
from app.core.config import settings

logger = logging.getLogger(__name__)

# Database file path
DB_PATH = settings.SQLITE_DB_PATH

def init_db():
    """
    Initialize SQLite database with required tables
    """
    try:
        # Ensure directory exists
        db_dir = Path(DB_PATH).parent
        if db_dir and str(db_dir) != '.' and not db_dir.exists():
            db_dir.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created database directory: {db_dir}")
        
        with get_connection() as conn:
            cursor = conn.cursor()
            
            # API Keys table (only the SHA-256 hash of the key is stored)
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS api_keys (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    key_hash TEXT UNIQUE NOT NULL,
                    name TEXT NOT NULL,
                    user_id INTEGER,
                    expires_at TIMESTAMP,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    is_active INTEGER DEFAULT 1
                )
            """)
            
            # One row per proxied request; created_at is UTC ISO-8601
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS usage_logs (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    api_key_id INTEGER NOT NULL,
                    model TEXT,
                    input_tokens INTEGER NOT NULL DEFAULT 0,
                    output_tokens INTEGER NOT NULL DEFAULT 0,
                    cache_creation_tokens INTEGER NOT NULL DEFAULT 0,
                    cache_read_tokens INTEGER NOT NULL DEFAULT 0,
                    total_cost REAL NOT NULL DEFAULT 0,
                    actual_cost REAL NOT NULL DEFAULT 0,
                    duration_ms INTEGER,
                    created_at TEXT NOT NULL,
                    FOREIGN KEY (api_key_id) REFERENCES api_keys(id)
                )
            """)
            
            # Create indexes
            cursor.execute("CREATE INDEX IF NOT EXISTS idx_api_keys_key_hash ON api_keys(key_hash)")
            cursor.execute("CREATE INDEX IF NOT EXISTS idx_usage_logs_key_created ON usage_logs(api_key_id, created_at)")
            cursor.execute("CREATE INDEX IF NOT EXISTS idx_usage_logs_created_at ON usage_logs(created_at)")
            
            conn.commit()
            logger.info(f"SQLite database initialized at {DB_PATH}")
            
    except Exception as e:
        logger.error(f"Failed to initialize SQLite database: {str(e)}")
        raise

@contextmanager
def get_connection():
    """
    Get SQLite connection context manager
    """
    conn = None
    try:
        conn = sqlite3.connect(DB_PATH, check_same_thread=False)
        conn.row_factory = sqlite3.Row  # Return rows as dict-like objects
        yield conn
    except Exception as e:
        if conn:
            conn.rollback()
        logger.error(f"SQLite connection error: {str(e)}")
        raise
    finally:
        if conn:
            conn.close()

def execute_query(query, params=None, fetch_one=False, fetch_all=False):
    """
    Execute SQLite query
    
    Args:
        query: SQL query string
        params: Query parameters (tuple or dict)
        fetch_one: Return single row
        fetch_all: Return all rows
        
    Returns:
        Result based on fetch_one/fetch_all flags
    """
    with get_connection() as conn:
        cursor = conn.cursor()
        cursor.execute(query, params or ())
        
        if query.strip().upper().startswith('SELECT'):
            if fetch_one:
                row = cursor.fetchone()
                return dict(row) if row else None
            elif fetch_all:
                rows = cursor.fetchall()
                return [dict(row) for row in rows]
            else:
                return cursor.fetchone()
        else:
            conn.commit()
            return cursor.rowcount


def vacuum_database():
    """
    Reclaim space after large deletes
    """
    try:
        with get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("VACUUM")
            conn.commit()
        logger.info("Database VACUUM completed successfully")
    except Exception as e:
        logger.error(f"Failed to run VACUUM: {str(e)}")
        raise
