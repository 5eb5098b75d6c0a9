"""Database module for the school transcript schema.

This module provides SQLAlchemy engine configuration.
"""

from school_transcript.database.engine import (
    create_database_engine,
    dispose_engine,
    get_engine,
    init_engine,
)

__all__ = [
    "create_database_engine",
    "dispose_engine",
    "get_engine",
    "init_engine",
]
