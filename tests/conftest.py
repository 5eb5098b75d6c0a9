"""
Pytest configuration and shared fixtures for school_transcript tests.

Every test gets its own SQLite file under pytest's tmp_path, so tests never
share rows or schema state.
"""

import sys
from pathlib import Path

import pytest
from sqlalchemy import insert

# Make tests/factories.py importable from every test module
sys.path.insert(0, str(Path(__file__).parent))

from factories import course_row, student_row  # noqa: E402

from school_transcript.database.engine import create_database_engine  # noqa: E402
from school_transcript.schema.setup import ensure_database, setup_schema  # noqa: E402
from school_transcript.schema.tables import courses, students  # noqa: E402


@pytest.fixture
def database_url(tmp_path):
    """URL of a SQLite database that does not exist yet."""
    return f"sqlite:///{tmp_path / 'db' / 'SchoolTranscript.db'}"


@pytest.fixture
def engine(database_url):
    """Engine bound to the temporary database, with no schema applied."""
    ensure_database(database_url)
    engine = create_database_engine(database_url)
    yield engine
    engine.dispose()


@pytest.fixture
def schema_engine(engine):
    """Engine whose database carries a freshly created transcript schema."""
    return setup_schema(engine)


@pytest.fixture
def conn(schema_engine):
    """Connection inside a transaction on the freshly created schema."""
    with schema_engine.begin() as connection:
        yield connection


@pytest.fixture
def student_id(conn):
    """StudentID of one inserted student."""
    result = conn.execute(insert(students).values(**student_row()))
    return result.inserted_primary_key[0]


@pytest.fixture
def course_number(conn):
    """Number of one inserted course."""
    conn.execute(insert(courses).values(**course_row()))
    return "MATH-1234"
