"""Error taxonomy for constraint violations raised by the storage engine.

The engine enforces every key, reference and CHECK rule; this module only
names the failure so callers can tell a duplicate key from a bad course
number without parsing driver messages themselves.
"""

import re
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy.exc import IntegrityError

from school_transcript.logging_config import get_logger

logger = get_logger(name=__name__)

# PostgreSQL SQLSTATE codes (class 23, integrity constraint violation)
PG_UNIQUE_VIOLATION = "23505"
PG_FOREIGN_KEY_VIOLATION = "23503"
PG_CHECK_VIOLATION = "23514"
PG_NOT_NULL_VIOLATION = "23502"

_SQLITE_CHECK_NAME = re.compile(r"CHECK constraint failed: (\w+)")
_SQLITE_COLUMN_NAME = re.compile(r"constraint failed: ([\w.]+(?:, [\w.]+)*)")


class ConstraintViolation(Exception):
    """Raised when a statement breaks a schema constraint.

    Attributes:
        constraint: Name of the violated constraint or column, when the
            driver reports one.
        orig: The DBAPI exception the driver raised.
    """

    def __init__(
        self,
        message: str,
        constraint: Optional[str] = None,
        orig: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.constraint = constraint
        self.orig = orig


class UniquenessViolation(ConstraintViolation):
    """Duplicate primary key or composite key."""


class ReferentialViolation(ConstraintViolation):
    """Foreign key points to a missing row, or a referenced row is still in use."""


class DomainViolation(ConstraintViolation):
    """A CHECK constraint rejected the value."""


class NullabilityViolation(ConstraintViolation):
    """A required column was left empty."""


class SchemaVerificationError(RuntimeError):
    """Raised when the database does not carry the expected schema."""


class UnsupportedDatabaseError(RuntimeError):
    """Raised when a database backend cannot be provisioned automatically."""


def _sqlstate(orig: BaseException) -> Optional[str]:
    # psycopg exposes .sqlstate, psycopg2 exposes .pgcode
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def _pg_constraint_name(orig: BaseException) -> Optional[str]:
    diag = getattr(orig, "diag", None)
    return getattr(diag, "constraint_name", None) if diag is not None else None


def classify_integrity_error(exc: IntegrityError) -> ConstraintViolation:
    """Map an IntegrityError onto the violation taxonomy.

    PostgreSQL errors are classified by SQLSTATE, SQLite errors by message.

    Args:
        exc: The error raised by SQLAlchemy.

    Returns:
        The matching ConstraintViolation subclass instance. Errors that
        cannot be classified come back as a plain ConstraintViolation.
    """
    orig = exc.orig if exc.orig is not None else exc
    message = str(orig)

    state = _sqlstate(orig)
    if state is not None:
        constraint = _pg_constraint_name(orig)
        by_state = {
            PG_UNIQUE_VIOLATION: UniquenessViolation,
            PG_FOREIGN_KEY_VIOLATION: ReferentialViolation,
            PG_CHECK_VIOLATION: DomainViolation,
            PG_NOT_NULL_VIOLATION: NullabilityViolation,
        }
        return by_state.get(state, ConstraintViolation)(message, constraint, orig)

    if "UNIQUE constraint failed" in message or "PRIMARY KEY" in message:
        match = _SQLITE_COLUMN_NAME.search(message)
        return UniquenessViolation(message, match.group(1) if match else None, orig)
    if "FOREIGN KEY constraint failed" in message:
        return ReferentialViolation(message, orig=orig)
    if "CHECK constraint failed" in message:
        match = _SQLITE_CHECK_NAME.search(message)
        return DomainViolation(message, match.group(1) if match else None, orig)
    if "NOT NULL constraint failed" in message:
        match = _SQLITE_COLUMN_NAME.search(message)
        return NullabilityViolation(message, match.group(1) if match else None, orig)

    return ConstraintViolation(message, orig=orig)


@contextmanager
def translate_integrity_errors() -> Iterator[None]:
    """Re-raise IntegrityError from the wrapped block as a ConstraintViolation.

    Usage::

        with translate_integrity_errors():
            conn.execute(insert(courses).values(...))
    """
    try:
        yield
    except IntegrityError as exc:
        violation = classify_integrity_error(exc)
        logger.warning(
            "{} rejected statement: {}",
            type(violation).__name__,
            violation.constraint or str(violation),
        )
        raise violation from exc
