#!/usr/bin/env python3
"""
Transcript schema setup CLI

Usage:
    transcript-setup                                   # Drop and recreate the tables
    transcript-setup --database-url sqlite:///x.db     # Target another database
    transcript-setup --migrate                         # Apply Alembic migrations instead
    transcript-setup --verify-only                     # Check the tables are present
"""

import argparse
import sys
from typing import Optional, Sequence

from school_transcript.database.engine import dispose_engine, init_engine
from school_transcript.errors import SchemaVerificationError, UnsupportedDatabaseError
from school_transcript.logging_config import configure_logging, get_logger
from school_transcript.schema.setup import (
    check_alembic_current,
    ensure_database,
    get_alembic_config,
    setup_schema,
    verify_schema,
)

logger = get_logger(name=__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="transcript-setup",
        description="Create the school transcript schema (Students, Courses, StudentCourses).",
    )
    parser.add_argument(
        "--database-url",
        help="SQLAlchemy URL of the target database (defaults to settings)",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--migrate",
        action="store_true",
        help="Apply Alembic migrations up to head instead of dropping and recreating",
    )
    mode.add_argument(
        "--verify-only",
        action="store_true",
        help="Only verify that the schema is present",
    )
    parser.add_argument("--log-level", help="Override LOG_LEVEL")
    return parser


def run_migrations(engine) -> None:
    """Upgrade the database behind ``engine`` to the Alembic head."""
    from alembic import command

    ensure_database(engine.url)
    cfg = get_alembic_config()
    with engine.begin() as connection:
        cfg.attributes["connection"] = connection
        command.upgrade(cfg, "head")
    check_alembic_current(engine)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    engine = init_engine(args.database_url)
    try:
        if args.verify_only:
            verify_schema(engine)
        elif args.migrate:
            run_migrations(engine)
        else:
            setup_schema(engine)
            verify_schema(engine)
    except (SchemaVerificationError, UnsupportedDatabaseError) as e:
        logger.error(str(e))
        return 1
    finally:
        dispose_engine()
    return 0


if __name__ == "__main__":
    sys.exit(main())
