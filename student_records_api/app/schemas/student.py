"""
Pydantic models for student records.

``StudentCreate`` validates request bodies for both ``POST /students``
and ``PUT /students/{id}``: the body must be a JSON object whose
``name`` and ``program`` are non-empty, single-line strings.  Numbers,
objects and arrays are rejected instead of being coerced.  Unknown
keys are ignored.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class StudentBase(BaseModel):
    name: str = Field(..., examples=["Mickey Mouse"])
    program: str = Field(..., examples=["CS"])


class StudentCreate(StudentBase):
    """Schema for creating a student."""

    model_config = ConfigDict(strict=True, str_strip_whitespace=True)

    name: str = Field(..., min_length=1, examples=["Mickey Mouse"])
    program: str = Field(..., min_length=1, examples=["CS"])

    @field_validator("name", "program")
    @classmethod
    def single_line(cls, value: str) -> str:
        # Each stored record occupies exactly one line of the students file.
        if "\r" in value or "\n" in value:
            raise ValueError("must not contain line breaks")
        return value


class StudentUpdate(StudentCreate):
    """Schema for updating a student.

    Updates replace both mutable fields; there is no partial update.
    """


class StudentRead(StudentBase):
    """A stored student as returned by the API."""

    model_config = ConfigDict(frozen=True)

    id: int
