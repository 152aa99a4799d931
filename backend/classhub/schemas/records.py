"""Records served by the school's spreadsheet API.

Field names on the wire are camelCase (``classId``, ``dueDate``...); the models accept
either spelling. Sheets hand numbers back as strings or floats, so point fields are
coerced leniently.
"""

from __future__ import annotations

import math
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


ALL_CLASSES = "all"


Number = Union[int, float]


def _coerce_number(v: Any) -> Number:
    """Spreadsheet cell to a finite number; whole values come back as ``int``."""
    if v is None or v == "":
        return 0
    if isinstance(v, bool):
        return int(v)
    try:
        f = float(v)
    except OverflowError:
        raise ValueError(f"number out of range: {v!r}")
    if not math.isfinite(f):
        raise ValueError(f"not a finite number: {v!r}")
    return int(f) if f.is_integer() else f


def _coerce_int(v: Any) -> int:
    return int(round(_coerce_number(v)))


def _coerce_bool(v: Any) -> bool:
    if isinstance(v, str):
        return v.strip().lower() in {"true", "1", "yes", "x"}
    return bool(v)


class SheetRecord(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )

    id: str = Field(min_length=1)


class Student(SheetRecord):
    class_id: str = ""
    full_name: str = ""
    parent_id: Optional[str] = None
    status: str = "Active"
    avatar: Optional[str] = None
    points: Number = 0

    @field_validator("points", mode="before")
    @classmethod
    def _points(cls, v):
        return _coerce_number(v)


class ClassInfo(SheetRecord):
    class_name: str = ""
    school_year: Optional[str] = None
    homeroom_teacher: Optional[str] = None
    level: Optional[str] = None


class Task(SheetRecord):
    class_id: str = Field(min_length=1)
    title: str = ""
    due_date: Optional[str] = None
    created_at: Optional[str] = None
    grade: Optional[str] = None
    unit: Optional[str] = None
    points: Optional[int] = None
    require_reply: bool = False

    @field_validator("require_reply", mode="before")
    @classmethod
    def _require_reply(cls, v):
        return _coerce_bool(v)

    @field_validator("points", mode="before")
    @classmethod
    def _points(cls, v):
        if v is None or v == "":
            return None
        return _coerce_int(v)


class TaskReply(SheetRecord):
    task_id: str = Field(min_length=1)
    student_id: str = Field(min_length=1)
    submitted_at: Optional[str] = None
    grade: Optional[float] = None

    @field_validator("grade", mode="before")
    @classmethod
    def _grade(cls, v):
        if v is None or v == "":
            return None
        return float(v)


class Behavior(SheetRecord):
    student_id: str = Field(min_length=1)
    date: str = ""
    type: Literal["PRAISE", "WARN"]
    points: Number = 0
    content: str = ""

    @field_validator("type", mode="before")
    @classmethod
    def _type(cls, v):
        return str(v or "").strip().upper()

    @field_validator("points", mode="before")
    @classmethod
    def _points(cls, v):
        return _coerce_number(v)


class Attendance(SheetRecord):
    class_id: str = ""
    student_id: str = Field(min_length=1)
    date: str = ""
    status: Literal["PRESENT", "ABSENT", "LATE"]
    note: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, v):
        return str(v or "").strip().upper()


class Announcement(SheetRecord):
    class_id: str = ALL_CLASSES
    title: str = ""
    content: str = ""
    created_at: Optional[str] = None
    author: Optional[str] = None
    target: str = "all"
    pinned: bool = False

    @field_validator("pinned", mode="before")
    @classmethod
    def _pinned(cls, v):
        return _coerce_bool(v)


class Document(SheetRecord):
    class_id: str = ALL_CLASSES
    title: str = ""
    url: str = ""
    category: str = ""
    created_at: Optional[str] = None
    grade: Optional[str] = None
    unit: Optional[str] = None


class DocumentProgress(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)

    student_id: str = Field(min_length=1)
    document_id: str = Field(min_length=1)
    completed: bool = False
    time_spent: int = 0
    last_viewed_at: Optional[str] = None

    @field_validator("completed", mode="before")
    @classmethod
    def _completed(cls, v):
        return _coerce_bool(v)

    @field_validator("time_spent", mode="before")
    @classmethod
    def _time_spent(cls, v):
        return _coerce_int(v)
