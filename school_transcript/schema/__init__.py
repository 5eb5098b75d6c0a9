"""Transcript schema package.

Table definitions live in ``tables`` (SQLAlchemy Core) and register on the
shared metadata from ``base``. ``setup`` drops and recreates them and
verifies what is in the database:

    from school_transcript.schema import setup_schema, students
"""

from school_transcript.schema.base import metadata
from school_transcript.schema.setup import (
    check_alembic_current,
    create_tables,
    describe_schema,
    drop_tables,
    ensure_database,
    setup_schema,
    verify_schema,
)
from school_transcript.schema.tables import (
    TABLES_IN_CREATION_ORDER,
    TABLES_IN_DROP_ORDER,
    TRANSCRIPT_TABLES,
    courses,
    student_courses,
    students,
)

__all__ = [
    "metadata",
    "students",
    "courses",
    "student_courses",
    "TABLES_IN_CREATION_ORDER",
    "TABLES_IN_DROP_ORDER",
    "TRANSCRIPT_TABLES",
    "ensure_database",
    "drop_tables",
    "create_tables",
    "setup_schema",
    "describe_schema",
    "verify_schema",
    "check_alembic_current",
]
