"""SQLAlchemy engine configuration for the transcript database."""

from typing import Any, Optional

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.engine import make_url

from school_transcript.logging_config import get_logger
from school_transcript.settings import get_settings

logger = get_logger(name=__name__)

_engine: Optional[Engine] = None


def _set_sqlite_pragmas(dbapi_connection: Any, connection_record: Any) -> None:
    """Set SQLite pragmas on each new connection.

    Args:
        dbapi_connection: The raw DBAPI connection.
        connection_record: The connection record (unused but required by event signature).
    """
    cursor = dbapi_connection.cursor()
    # Foreign keys are off by default in SQLite
    cursor.execute("PRAGMA foreign_keys = ON")
    # Set busy timeout to 30 seconds to handle lock contention
    cursor.execute("PRAGMA busy_timeout = 30000")
    cursor.close()


def create_database_engine(database_url: Optional[str] = None) -> Engine:
    """Create and configure a SQLAlchemy engine.

    Args:
        database_url: URL to connect to. Defaults to the configured URL.

    Returns:
        Configured SQLAlchemy Engine instance.
    """
    settings = get_settings()
    url = make_url(database_url or settings.sqlalchemy_url)

    kwargs: dict[str, Any] = {"echo": settings.sql_echo}
    if url.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {"check_same_thread": False}

    engine = create_engine(url, **kwargs)

    if url.get_backend_name() == "sqlite":
        # Register event listener to set pragmas on connect
        event.listen(engine, "connect", _set_sqlite_pragmas)

    return engine


def init_engine(database_url: Optional[str] = None) -> Engine:
    """Create the process-wide engine, replacing any previous one."""
    global _engine
    if _engine is not None:
        _engine.dispose()
    _engine = create_database_engine(database_url)
    logger.info("Database engine initialized for {}", _engine.url.render_as_string(hide_password=True))
    return _engine


def get_engine() -> Engine:
    """Get the process-wide engine, creating it from settings on first use."""
    if _engine is None:
        return init_engine()
    return _engine


def dispose_engine() -> None:
    """Dispose the process-wide engine and release all connections."""
    global _engine
    if _engine is not None:
        _engine.dispose()
        logger.info("Database engine disposed")
    _engine = None
