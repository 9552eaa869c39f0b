"""
Database connections module
"""

from app.db.sqlite import (
    get_connection,
    execute_query,
    init_db,
    vacuum_database,
)

__all__ = [
    "get_connection",
    "execute_query",
    "init_db",
    "vacuum_database",
]
