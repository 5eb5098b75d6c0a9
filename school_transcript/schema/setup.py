"""Transcript schema setup and verification.

setup_schema is the single idempotent entry point:
- ensure the target database exists and bind to it
- drop StudentCourses, Courses, Students if present
- create Students, Courses, StudentCourses with every constraint

Verification helpers:
- verify_schema: ensure every table and column is present
- check_alembic_current: ensure migrations are at head
"""

from pathlib import Path
from typing import Any, Optional

from sqlalchemy import Connection, Engine, create_engine, inspect, text
from sqlalchemy.engine import URL, make_url

from school_transcript.errors import SchemaVerificationError, UnsupportedDatabaseError
from school_transcript.logging_config import get_logger
from school_transcript.schema.tables import (
    STUDENT_IDENTITY_TABLE,
    TABLES_IN_CREATION_ORDER,
    TABLES_IN_DROP_ORDER,
)

logger = get_logger(name=__name__)

# Resolve package directory (this file is at school_transcript/schema/setup.py)
_PACKAGE_DIR = Path(__file__).resolve().parent.parent

POSTGRES_MAINTENANCE_DB = "postgres"


def ensure_database(database_url: str | URL) -> None:
    """Create the target database if it does not exist yet.

    SQLite databases are files, so only the parent directory is created;
    the file appears on first connect. PostgreSQL databases are created
    through the ``postgres`` maintenance database.

    Raises:
        UnsupportedDatabaseError: For backends other than SQLite and PostgreSQL.
    """
    url = make_url(database_url)
    backend = url.get_backend_name()

    if backend == "sqlite":
        if url.database and url.database != ":memory:" and not url.database.startswith("file:"):
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)
        return

    if backend == "postgresql":
        _ensure_postgres_database(url)
        return

    raise UnsupportedDatabaseError(
        f"Cannot provision a {backend!r} database; create {url.database!r} manually."
    )


def _ensure_postgres_database(url: URL) -> None:
    admin_engine = create_engine(
        url.set(database=POSTGRES_MAINTENANCE_DB),
        isolation_level="AUTOCOMMIT",
    )
    try:
        with admin_engine.connect() as conn:
            exists = conn.scalar(
                text("SELECT 1 FROM pg_database WHERE datname = :name"),
                {"name": url.database},
            )
            if exists:
                logger.debug("Database {} already exists", url.database)
                return
            quoted = admin_engine.dialect.identifier_preparer.quote(url.database)
            conn.execute(text(f"CREATE DATABASE {quoted}"))
            logger.info("Created database {}", url.database)
    finally:
        admin_engine.dispose()


def drop_tables(conn: Connection) -> None:
    """Drop the transcript tables that exist, dependents first."""
    for table in TABLES_IN_DROP_ORDER:
        if inspect(conn).has_table(table.name):
            table.drop(conn)
            logger.debug("Dropped table {}", table.name)


def create_tables(conn: Connection) -> None:
    """Create the transcript tables, referenced tables first."""
    for table in TABLES_IN_CREATION_ORDER:
        table.create(conn)
        logger.debug("Created table {}", table.name)


def setup_schema(engine: Optional[Engine] = None) -> Engine:
    """Drop and recreate the transcript schema.

    Running it again from any state yields the same schema; rows already
    in the three tables are discarded.

    Args:
        engine: Engine bound to the target database. Defaults to the
            process-wide engine built from settings.

    Returns:
        The engine the schema was created through.
    """
    if engine is None:
        from school_transcript.database.engine import get_engine

        engine = get_engine()

    ensure_database(engine.url)

    logger.info("Setting up transcript schema in {}", engine.url.database)
    with engine.begin() as conn:
        drop_tables(conn)
        create_tables(conn)

    logger.info(
        "Transcript schema ready: {}",
        ", ".join(table.name for table in TABLES_IN_CREATION_ORDER),
    )
    return engine


def describe_schema(engine: Engine | Connection) -> dict[str, Any]:
    """Reflect the transcript tables into a comparable snapshot.

    Missing tables are left out of the result.
    """
    inspector = inspect(engine)
    snapshot: dict[str, Any] = {}
    for table in TABLES_IN_CREATION_ORDER:
        if not inspector.has_table(table.name):
            continue
        snapshot[table.name] = {
            "columns": [
                (col["name"], str(col["type"]), col["nullable"], col.get("default"))
                for col in inspector.get_columns(table.name)
            ],
            "primary_key": inspector.get_pk_constraint(table.name)["constrained_columns"],
            "foreign_keys": sorted(
                (tuple(fk["constrained_columns"]), fk["referred_table"], tuple(fk["referred_columns"]))
                for fk in inspector.get_foreign_keys(table.name)
            ),
            "check_constraints": sorted(
                ck["sqltext"] for ck in inspector.get_check_constraints(table.name)
            ),
        }
    return snapshot


def verify_schema(engine: Engine | Connection) -> None:
    """Verify that every transcript table and column exists.

    Raises:
        SchemaVerificationError: Listing each missing table or column.
    """
    snapshot = describe_schema(engine)
    missing = []
    for table in TABLES_IN_CREATION_ORDER:
        if table.name not in snapshot:
            missing.append(f"table {table.name}")
            continue
        present = {name for name, *_ in snapshot[table.name]["columns"]}
        missing.extend(
            f"column {table.name}.{col.name}"
            for col in table.columns
            if col.name not in present
        )

    # SQLite numbers StudentID from its own table
    if "Students" in snapshot and engine.dialect.name == "sqlite":
        if not inspect(engine).has_table(STUDENT_IDENTITY_TABLE):
            missing.append(f"table {STUDENT_IDENTITY_TABLE}")

    if missing:
        error_msg = "Transcript schema incomplete: {}. Run setup first.".format(", ".join(missing))
        logger.error(error_msg)
        raise SchemaVerificationError(error_msg)

    logger.info("Transcript schema verified: {} tables", len(snapshot))


def get_alembic_config(database_url: Optional[str] = None):
    """Build an Alembic config pointing at the packaged migrations."""
    from alembic.config import Config

    cfg = Config(str(_PACKAGE_DIR / "alembic.ini"))
    # Override script_location to absolute path so it works from any cwd
    cfg.set_main_option("script_location", str(_PACKAGE_DIR / "alembic"))
    if database_url is not None:
        cfg.set_main_option("sqlalchemy.url", database_url)
    return cfg


def check_alembic_current(engine: Engine) -> None:
    """Verify that the database is at the latest Alembic migration head.

    Raises:
        SchemaVerificationError: If the alembic_version table is missing or not at head.
    """
    from alembic.script import ScriptDirectory

    script = ScriptDirectory.from_config(get_alembic_config())
    expected_head = script.get_current_head()

    with engine.connect() as conn:
        if not inspect(conn).has_table("alembic_version"):
            raise SchemaVerificationError(
                "alembic_version table not found. Run 'alembic upgrade head' first."
            )
        current = conn.scalar(text("SELECT version_num FROM alembic_version LIMIT 1"))

    if current is None:
        raise SchemaVerificationError(
            "No Alembic version found. Run 'alembic upgrade head' first."
        )

    if current != expected_head:
        raise SchemaVerificationError(
            f"Database is at Alembic revision {current!r}, but head is {expected_head!r}. "
            f"Run 'alembic upgrade head'."
        )

    logger.info("Alembic migration is current (revision {})", current)
