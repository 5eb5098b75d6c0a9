"""Insert helpers for the transcript tables.

Each helper writes one validated record and returns the new row's key.
Constraint failures surface as ``school_transcript.errors`` violations;
the caller owns the transaction.
"""

from sqlalchemy import Connection, insert

from school_transcript.errors import translate_integrity_errors
from school_transcript.logging_config import get_logger
from school_transcript.records import CourseRecord, EnrollmentRecord, StudentRecord
from school_transcript.schema.tables import courses, student_courses, students

logger = get_logger(name=__name__)


def add_student(conn: Connection, record: StudentRecord) -> int:
    """Insert a student and return the StudentID the storage layer issued."""
    with translate_integrity_errors():
        result = conn.execute(insert(students).values(**record.to_row()))
    student_id = result.inserted_primary_key[0]
    logger.debug("Added student {} {} as {}", record.given_name, record.surname, student_id)
    return student_id


def add_course(conn: Connection, record: CourseRecord) -> str:
    """Insert a course and return its Number."""
    with translate_integrity_errors():
        conn.execute(insert(courses).values(**record.to_row()))
    logger.debug("Added course {}", record.number)
    return record.number


def enroll(conn: Connection, record: EnrollmentRecord) -> tuple[int, str]:
    """Insert a StudentCourses row and return its (StudentID, CourseNumber) key."""
    with translate_integrity_errors():
        conn.execute(insert(student_courses).values(**record.to_row()))
    logger.debug("Enrolled student {} in {}", record.student_id, record.course_number)
    return record.student_id, record.course_number
