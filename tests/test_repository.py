"""Tests for the record insert helpers."""

from datetime import datetime

import pytest
from sqlalchemy import select

from school_transcript.errors import ReferentialViolation, UniquenessViolation
from school_transcript.records import CourseRecord, EnrollmentRecord, StudentRecord
from school_transcript.repository import add_course, add_student, enroll
from school_transcript.schema.tables import student_courses, students


def _student(name="Dan"):
    return StudentRecord(given_name=name, surname="Gilleland", date_of_birth=datetime(2001, 4, 12))


def _course(number="MATH-1234"):
    return CourseRecord(number=number, name="Calculus I", credits=6, hours=120, active=True, cost=1200)


def test_add_student_returns_issued_ids(conn):
    assert [add_student(conn, _student(name)) for name in ("Ann", "Bob")] == [2000, 2005]
    assert conn.scalar(select(students.c.Enrolled).where(students.c.StudentID == 2000)) is True


def test_full_transcript_row(conn):
    student_id = add_student(conn, _student())
    number = add_course(conn, _course())

    key = enroll(
        conn,
        EnrollmentRecord(student_id=student_id, course_number=number, year=2024, term="WIN", final_mark=88, status="E"),
    )

    assert key == (2000, "MATH-1234")
    row = conn.execute(select(student_courses)).one()
    assert (row.Term, row.FinalMark, row.Status) == ("WIN", 88, "E")


def test_add_course_twice_raises_uniqueness_violation(conn):
    add_course(conn, _course())

    with pytest.raises(UniquenessViolation):
        add_course(conn, _course())


def test_enroll_in_missing_course_raises_referential_violation(conn):
    student_id = add_student(conn, _student())

    with pytest.raises(ReferentialViolation):
        enroll(
            conn,
            EnrollmentRecord(student_id=student_id, course_number="NOPE-0000", year=2024, term="FAL", status="A"),
        )
