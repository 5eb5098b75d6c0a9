"""Row factories for transcript tests.

Each factory returns a column-keyed dict that satisfies every constraint;
pass keyword overrides to break exactly one rule.
"""

from datetime import datetime
from decimal import Decimal


def student_row(**overrides):
    row = {
        "GivenName": "Dan",
        "Surname": "Gilleland",
        "DateOfBirth": datetime(2001, 4, 12),
    }
    row.update(overrides)
    return row


def course_row(**overrides):
    row = {
        "Number": "MATH-1234",
        "Name": "Calculus I",
        "Credits": Decimal("4.5"),
        "Hours": 90,
        "Active": True,
        "Cost": Decimal("850.00"),
    }
    row.update(overrides)
    return row


def enrollment_row(student_id, course_number="MATH-1234", **overrides):
    row = {
        "StudentID": student_id,
        "CourseNumber": course_number,
        "Year": 2024,
        "Term": "FAL",
        "Status": "A",
    }
    row.update(overrides)
    return row
