"""Initial schema: Students, Courses, StudentCourses.

Revision ID: 001
Revises: None
Create Date: 2026-10-18
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from school_transcript.schema.tables import (
    SQLITE_STUDENT_IDENTITY_DDL,
    SQLITE_STUDENT_IDENTITY_DROP,
)

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _is_sqlite() -> bool:
    return op.get_bind().dialect.name == "sqlite"


def upgrade() -> None:
    op.create_table(
        "Students",
        sa.Column("StudentID", sa.Integer, sa.Identity(start=2000, increment=5), nullable=False),
        sa.Column("GivenName", sa.String(50), nullable=False),
        sa.Column("Surname", sa.String(50), nullable=False),
        sa.Column("DateOfBirth", sa.DateTime, nullable=False),
        sa.Column("Enrolled", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint("StudentID", name="PK_Students_StudentID"),
        sa.CheckConstraint(sa.column("GivenName").regexp_match(r"^[A-Za-z]{2}"), name="CK_Students_GivenName"),
        sa.CheckConstraint('length("GivenName") <= 50', name="CK_Students_GivenName_Length"),
        sa.CheckConstraint('length("Surname") BETWEEN 2 AND 50', name="CK_Students_Surname"),
    )
    if _is_sqlite():
        for ddl in SQLITE_STUDENT_IDENTITY_DDL:
            op.execute(ddl)

    op.create_table(
        "Courses",
        sa.Column("Number", sa.String(10), nullable=False),
        sa.Column("Name", sa.String(50), nullable=False),
        sa.Column("Credits", sa.Numeric(3, 1), nullable=False),
        sa.Column("Hours", sa.SmallInteger, nullable=False),
        sa.Column("Active", sa.Boolean, nullable=False),
        sa.Column("Cost", sa.Numeric(19, 4), nullable=False),
        sa.PrimaryKeyConstraint("Number", name="PK_Courses_Number"),
        sa.CheckConstraint(sa.column("Number").regexp_match(r"^[A-Za-z]{4}-[0-9]{4}$"), name="CK_Courses_Number"),
        sa.CheckConstraint('length("Name") <= 50', name="CK_Courses_Name_Length"),
        sa.CheckConstraint('"Credits" IN (3, 4.5, 6)', name="CK_Courses_Credits"),
        sa.CheckConstraint('"Hours" IN (60, 90, 120)', name="CK_Courses_Hours"),
        sa.CheckConstraint('"Cost" BETWEEN 400.00 AND 1500.00', name="CK_Courses_Cost"),
        sa.CheckConstraint(
            '("Hours" IN (60, 90) AND "Credits" IN (3, 4.5)) OR ("Hours" = 120 AND "Credits" = 6)',
            name="CK_Courses_Credits_Hours",
        ),
    )

    op.create_table(
        "StudentCourses",
        sa.Column("StudentID", sa.Integer, nullable=False, autoincrement=False),
        sa.Column("CourseNumber", sa.String(10), nullable=False),
        sa.Column("Year", sa.SmallInteger, nullable=False),
        sa.Column("Term", sa.CHAR(3), nullable=False),
        sa.Column("FinalMark", sa.SmallInteger, nullable=True),
        sa.Column("Status", sa.CHAR(1), nullable=False),
        sa.PrimaryKeyConstraint("StudentID", "CourseNumber", name="PK_StudentCourses_StudentID_CourseNumber"),
        sa.ForeignKeyConstraint(["StudentID"], ["Students.StudentID"], name="FK_StudentCourses_Students"),
        sa.ForeignKeyConstraint(["CourseNumber"], ["Courses.Number"], name="FK_StudentCourses_Courses"),
        sa.CheckConstraint('"Year" > 2010', name="CK_StudentCourses_Year"),
        sa.CheckConstraint('length("Term") = 3', name="CK_StudentCourses_Term"),
        sa.CheckConstraint('"FinalMark" BETWEEN 0 AND 100', name="CK_StudentCourses_FinalMark"),
        sa.CheckConstraint("\"Status\" IN ('A', 'W', 'E')", name="CK_StudentCourses_Status"),
    )


def downgrade() -> None:
    op.drop_table("StudentCourses")
    op.drop_table("Courses")
    op.drop_table("Students")
    if _is_sqlite():
        op.execute(SQLITE_STUDENT_IDENTITY_DROP)
