"""Pydantic records mirroring the transcript table constraints.

Each validator restates one CHECK constraint from
``school_transcript.schema.tables`` so a row can be rejected before it
reaches the engine. The engine still enforces every rule on its own.
"""

from __future__ import annotations

import re
from datetime import datetime
from decimal import Decimal
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from school_transcript.schema.tables import (
    COURSE_NUMBER_PATTERN,
    CREDIT_VALUES,
    GIVEN_NAME_PATTERN,
    HOUR_VALUES,
    MAX_COST,
    MIN_COST,
)

_GIVEN_NAME_RE = re.compile(GIVEN_NAME_PATTERN)
_COURSE_NUMBER_RE = re.compile(COURSE_NUMBER_PATTERN)
_CREDITS = {Decimal(str(value)) for value in CREDIT_VALUES}


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_row(self) -> dict[str, Any]:
        """Column-keyed values for an INSERT.

        Fields left at their default are omitted so the server default
        applies instead.
        """
        return self.model_dump(by_alias=True, exclude_unset=True)


class StudentRecord(_Record):
    """A row of Students. StudentID is issued by the storage layer."""

    given_name: str = Field(alias="GivenName", max_length=50)
    surname: str = Field(alias="Surname", min_length=2, max_length=50)
    date_of_birth: datetime = Field(alias="DateOfBirth")
    enrolled: bool = Field(default=True, alias="Enrolled")

    @field_validator("given_name")
    @classmethod
    def given_name_starts_with_two_letters(cls, v: str) -> str:
        if not _GIVEN_NAME_RE.match(v):
            raise ValueError("GivenName must start with two letters")
        return v


class CourseRecord(_Record):
    """A row of Courses."""

    number: str = Field(alias="Number", max_length=10)
    name: str = Field(alias="Name", max_length=50)
    credits: Decimal = Field(alias="Credits", max_digits=3, decimal_places=1)
    hours: int = Field(alias="Hours")
    active: bool = Field(alias="Active")
    cost: Decimal = Field(alias="Cost", ge=MIN_COST, le=MAX_COST, decimal_places=4)

    @field_validator("number")
    @classmethod
    def number_matches_pattern(cls, v: str) -> str:
        if not _COURSE_NUMBER_RE.match(v):
            raise ValueError("Number must be four letters, a hyphen and four digits")
        return v

    @field_validator("credits")
    @classmethod
    def credits_allowed(cls, v: Decimal) -> Decimal:
        if v not in _CREDITS:
            raise ValueError(f"Credits must be one of {CREDIT_VALUES}")
        return v

    @field_validator("hours")
    @classmethod
    def hours_allowed(cls, v: int) -> int:
        if v not in HOUR_VALUES:
            raise ValueError(f"Hours must be one of {HOUR_VALUES}")
        return v

    @model_validator(mode="after")
    def hours_match_credits(self) -> CourseRecord:
        if self.hours in (60, 90) and self.credits in (Decimal(3), Decimal("4.5")):
            return self
        if self.hours == 120 and self.credits == Decimal(6):
            return self
        raise ValueError(
            f"{self.hours} hours cannot carry {self.credits} credits; "
            "60 or 90 hours carry 3 or 4.5 credits, 120 hours carry 6"
        )


class EnrollmentRecord(_Record):
    """A row of StudentCourses."""

    student_id: int = Field(alias="StudentID")
    course_number: str = Field(alias="CourseNumber", max_length=10)
    year: int = Field(alias="Year", gt=2010)
    term: str = Field(alias="Term", min_length=3, max_length=3)
    final_mark: Optional[int] = Field(default=None, alias="FinalMark", ge=0, le=100)
    # A = active, W = withdrawn, E = excused
    status: Literal["A", "W", "E"] = Field(alias="Status")
