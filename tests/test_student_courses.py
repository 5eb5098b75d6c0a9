"""Tests for the StudentCourses junction: keys, references and checks."""

import pytest
from sqlalchemy import delete, insert, select

from factories import course_row, enrollment_row
from school_transcript.errors import (
    DomainViolation,
    NullabilityViolation,
    ReferentialViolation,
    UniquenessViolation,
    translate_integrity_errors,
)
from school_transcript.schema.tables import courses, student_courses, students


def _enroll(conn, student_id, course_number="MATH-1234", **overrides):
    with translate_integrity_errors():
        conn.execute(insert(student_courses).values(**enrollment_row(student_id, course_number, **overrides)))


class TestReferences:
    def test_enrollment_of_existing_student_and_course_is_accepted(self, conn, student_id, course_number):
        _enroll(conn, student_id, course_number)

        row = conn.execute(select(student_courses)).one()
        assert row.StudentID == student_id
        assert row.CourseNumber == course_number
        assert row.FinalMark is None

    def test_unknown_course_is_rejected(self, conn, student_id, course_number):
        with pytest.raises(ReferentialViolation):
            _enroll(conn, student_id, "NOPE-9999")

    def test_unknown_student_is_rejected(self, conn, student_id, course_number):
        with pytest.raises(ReferentialViolation):
            _enroll(conn, student_id + 1, course_number)

    def test_deleting_enrolled_student_is_restricted(self, conn, student_id, course_number):
        _enroll(conn, student_id, course_number)

        with pytest.raises(ReferentialViolation):
            with translate_integrity_errors():
                conn.execute(delete(students).where(students.c.StudentID == student_id))

        assert conn.scalar(select(students.c.StudentID)) == student_id

    def test_deleting_course_in_use_is_restricted(self, conn, student_id, course_number):
        _enroll(conn, student_id, course_number)

        with pytest.raises(ReferentialViolation):
            with translate_integrity_errors():
                conn.execute(delete(courses).where(courses.c.Number == course_number))

    def test_student_may_take_many_courses(self, conn, student_id, course_number):
        conn.execute(insert(courses).values(**course_row(Number="DMIT-1508", Hours=120, Credits=6)))

        _enroll(conn, student_id, course_number)
        _enroll(conn, student_id, "DMIT-1508")

        assert len(conn.execute(select(student_courses)).all()) == 2


class TestCompositeKey:
    def test_same_student_and_course_twice_is_rejected(self, conn, student_id, course_number):
        _enroll(conn, student_id, course_number)

        with pytest.raises(UniquenessViolation):
            _enroll(conn, student_id, course_number, Year=2025)


class TestEnrollmentChecks:
    @pytest.mark.parametrize("status", ["A", "W", "E"])
    def test_known_status_is_accepted(self, conn, student_id, course_number, status):
        _enroll(conn, student_id, course_number, Status=status)

    @pytest.mark.parametrize("status", ["X", "a", " "])
    def test_unknown_status_is_rejected(self, conn, student_id, course_number, status):
        with pytest.raises(DomainViolation):
            _enroll(conn, student_id, course_number, Status=status)

    def test_year_after_2010_is_accepted(self, conn, student_id, course_number):
        _enroll(conn, student_id, course_number, Year=2011)

    @pytest.mark.parametrize("year", [2010, 1999])
    def test_year_2010_or_earlier_is_rejected(self, conn, student_id, course_number, year):
        with pytest.raises(DomainViolation):
            _enroll(conn, student_id, course_number, Year=year)

    @pytest.mark.parametrize("term", ["FAL", "WIN", "SPR"])
    def test_three_character_term_is_accepted(self, conn, student_id, course_number, term):
        _enroll(conn, student_id, course_number, Term=term)

    @pytest.mark.parametrize("term", ["F", "FA", "FALLTERM2024", ""])
    def test_term_of_other_length_is_rejected(self, conn, student_id, course_number, term):
        with pytest.raises(DomainViolation) as excinfo:
            _enroll(conn, student_id, course_number, Term=term)

        assert excinfo.value.constraint == "CK_StudentCourses_Term"

    @pytest.mark.parametrize("mark", [0, 67, 100])
    def test_final_mark_in_range_is_accepted(self, conn, student_id, course_number, mark):
        _enroll(conn, student_id, course_number, FinalMark=mark)

        assert conn.scalar(select(student_courses.c.FinalMark)) == mark

    @pytest.mark.parametrize("mark", [-1, 101])
    def test_final_mark_out_of_range_is_rejected(self, conn, student_id, course_number, mark):
        with pytest.raises(DomainViolation):
            _enroll(conn, student_id, course_number, FinalMark=mark)

    @pytest.mark.parametrize("column", ["Year", "Term", "Status"])
    def test_missing_required_column_is_rejected(self, conn, student_id, course_number, column):
        row = enrollment_row(student_id, course_number)
        del row[column]

        with pytest.raises(NullabilityViolation):
            with translate_integrity_errors():
                conn.execute(insert(student_courses).values(**row))
