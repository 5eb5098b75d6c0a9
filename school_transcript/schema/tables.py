"""Transcript schema (SQLAlchemy Table objects).

3 tables: Students, Courses and the StudentCourses junction between them.

Constraint names follow one convention:
    PK_<Table>_<Column>, CK_<Table>_<Column>, DF_<Table>_<Column>
    FK_<Table>_<RelatedTable>

Pattern checks are built from ``regexp_match`` so they render per dialect
(``REGEXP`` on SQLite, ``~`` on PostgreSQL). Everything else is plain SQL.

StudentID is an identity column. PostgreSQL renders it as
``GENERATED BY DEFAULT AS IDENTITY``. SQLite has no identity columns, so
the last issued value lives in the one-row StudentIdentity table and a
trigger numbers every row inserted without an issued value.
"""

from sqlalchemy import (
    DDL,
    Boolean,
    CHAR,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKeyConstraint,
    Identity,
    Integer,
    Numeric,
    PrimaryKeyConstraint,
    SmallInteger,
    String,
    Table,
    column,
    event,
    text,
    true,
)

from school_transcript.schema.base import metadata

STUDENT_ID_SEED = 2000
STUDENT_ID_INCREMENT = 5
STUDENT_IDENTITY_TABLE = "StudentIdentity"

GIVEN_NAME_PATTERN = r"^[A-Za-z]{2}"
COURSE_NUMBER_PATTERN = r"^[A-Za-z]{4}-[0-9]{4}$"

NAME_MAX_LENGTH = 50
TERM_LENGTH = 3
CREDIT_VALUES = (3, 4.5, 6)
HOUR_VALUES = (60, 90, 120)
MIN_COST = 400
MAX_COST = 1500
STATUS_CODES = ("A", "W", "E")


def next_student_id(context) -> int:
    """Column default issuing StudentID values 2000, 2005, 2010, ...

    Values come from the database: the identity sequence on PostgreSQL,
    the StudentIdentity table on SQLite. The last issued value is kept on
    the execution context so that a multi-row insert hands out consecutive
    identities before the first row reaches the trigger.
    """
    conn = context.connection
    if context.dialect.name == "postgresql":
        return conn.scalar(
            text("SELECT nextval(pg_get_serial_sequence('\"Students\"', 'StudentID'))")
        )

    issued = getattr(context, "_issued_student_id", None)
    if issued is None:
        issued = conn.scalar(text(f'SELECT "LastValue" FROM "{STUDENT_IDENTITY_TABLE}"'))
    issued += STUDENT_ID_INCREMENT
    context._issued_student_id = issued
    return issued


# ── 1. Students ─────────────────────────────────────────────────────────────

students = Table(
    "Students",
    metadata,
    Column(
        "StudentID",
        Integer,
        Identity(start=STUDENT_ID_SEED, increment=STUDENT_ID_INCREMENT),
        nullable=False,
        default=next_student_id,
    ),
    Column("GivenName", String(50), nullable=False),
    Column("Surname", String(50), nullable=False),
    Column("DateOfBirth", DateTime, nullable=False),
    Column("Enrolled", Boolean, nullable=False, server_default=true()),
    PrimaryKeyConstraint("StudentID", name="PK_Students_StudentID"),
    CheckConstraint(
        column("GivenName").regexp_match(GIVEN_NAME_PATTERN),
        name="CK_Students_GivenName",
    ),
    CheckConstraint(
        f'length("GivenName") <= {NAME_MAX_LENGTH}',
        name="CK_Students_GivenName_Length",
    ),
    CheckConstraint(
        f'length("Surname") BETWEEN 2 AND {NAME_MAX_LENGTH}',
        name="CK_Students_Surname",
    ),
)

# A supplied StudentID is kept when it lies on the 2000 + 5n sequence past
# the last issued value. Any other row, raw inserts included, is renumbered
# to the next value. Issued values are never handed out again.
SQLITE_STUDENT_IDENTITY_DROP = DDL(f'DROP TABLE IF EXISTS "{STUDENT_IDENTITY_TABLE}"')
SQLITE_STUDENT_IDENTITY_DDL = (
    SQLITE_STUDENT_IDENTITY_DROP,
    DDL(f'CREATE TABLE "{STUDENT_IDENTITY_TABLE}" ("LastValue" INTEGER NOT NULL)'),
    DDL(
        f'INSERT INTO "{STUDENT_IDENTITY_TABLE}" ("LastValue") '
        f"VALUES ({STUDENT_ID_SEED - STUDENT_ID_INCREMENT})"
    ),
    DDL(
        f"""CREATE TRIGGER "TR_Students_StudentID" AFTER INSERT ON "Students"
BEGIN
    UPDATE "{STUDENT_IDENTITY_TABLE}" SET "LastValue" = CASE
        WHEN NEW."StudentID" > "LastValue"
            AND (NEW."StudentID" - {STUDENT_ID_SEED}) %% {STUDENT_ID_INCREMENT} = 0
        THEN NEW."StudentID"
        ELSE "LastValue" + {STUDENT_ID_INCREMENT}
    END;
    UPDATE "Students"
    SET "StudentID" = (SELECT "LastValue" FROM "{STUDENT_IDENTITY_TABLE}")
    WHERE "StudentID" = NEW."StudentID"
        AND NEW."StudentID" <> (SELECT "LastValue" FROM "{STUDENT_IDENTITY_TABLE}");
END"""
    ),
)

for _ddl in SQLITE_STUDENT_IDENTITY_DDL:
    event.listen(students, "after_create", _ddl.execute_if(dialect="sqlite"))
event.listen(students, "after_drop", SQLITE_STUDENT_IDENTITY_DROP.execute_if(dialect="sqlite"))

# ── 2. Courses ──────────────────────────────────────────────────────────────

courses = Table(
    "Courses",
    metadata,
    Column("Number", String(10), nullable=False),
    Column("Name", String(50), nullable=False),
    Column("Credits", Numeric(3, 1), nullable=False),
    Column("Hours", SmallInteger, nullable=False),
    Column("Active", Boolean, nullable=False),
    Column("Cost", Numeric(19, 4), nullable=False),
    PrimaryKeyConstraint("Number", name="PK_Courses_Number"),
    CheckConstraint(
        column("Number").regexp_match(COURSE_NUMBER_PATTERN),
        name="CK_Courses_Number",
    ),
    CheckConstraint(f'length("Name") <= {NAME_MAX_LENGTH}', name="CK_Courses_Name_Length"),
    CheckConstraint('"Credits" IN (3, 4.5, 6)', name="CK_Courses_Credits"),
    CheckConstraint('"Hours" IN (60, 90, 120)', name="CK_Courses_Hours"),
    CheckConstraint('"Cost" BETWEEN 400.00 AND 1500.00', name="CK_Courses_Cost"),
    # Hours and Credits are coupled
    CheckConstraint(
        '("Hours" IN (60, 90) AND "Credits" IN (3, 4.5)) '
        'OR ("Hours" = 120 AND "Credits" = 6)',
        name="CK_Courses_Credits_Hours",
    ),
)

# ── 3. StudentCourses (junction) ────────────────────────────────────────────

student_courses = Table(
    "StudentCourses",
    metadata,
    Column("StudentID", Integer, nullable=False, autoincrement=False),
    Column("CourseNumber", String(10), nullable=False),
    Column("Year", SmallInteger, nullable=False),
    Column("Term", CHAR(3), nullable=False),
    Column("FinalMark", SmallInteger, nullable=True),
    Column("Status", CHAR(1), nullable=False),
    PrimaryKeyConstraint(
        "StudentID",
        "CourseNumber",
        name="PK_StudentCourses_StudentID_CourseNumber",
    ),
    ForeignKeyConstraint(
        ["StudentID"],
        ["Students.StudentID"],
        name="FK_StudentCourses_Students",
    ),
    ForeignKeyConstraint(
        ["CourseNumber"],
        ["Courses.Number"],
        name="FK_StudentCourses_Courses",
    ),
    CheckConstraint('"Year" > 2010', name="CK_StudentCourses_Year"),
    CheckConstraint(f'length("Term") = {TERM_LENGTH}', name="CK_StudentCourses_Term"),
    CheckConstraint('"FinalMark" BETWEEN 0 AND 100', name="CK_StudentCourses_FinalMark"),
    CheckConstraint("\"Status\" IN ('A', 'W', 'E')", name="CK_StudentCourses_Status"),
)

# Referenced tables come before the tables referencing them
TABLES_IN_CREATION_ORDER = (students, courses, student_courses)
TABLES_IN_DROP_ORDER = tuple(reversed(TABLES_IN_CREATION_ORDER))

TRANSCRIPT_TABLES = [table.name for table in TABLES_IN_CREATION_ORDER]
