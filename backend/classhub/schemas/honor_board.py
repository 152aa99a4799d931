from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from classhub.schemas.records import Number, Student


class BadgeOut(BaseModel):
    id: str
    label: str
    description: str


class StudentStats(BaseModel):
    student: Student
    class_name: str = ""
    points: Number = 0
    total_tasks: int = 0
    completed_tasks: int = 0
    progress_percent: int = 0
    badges: List[str] = Field(default_factory=list)


class ClassOut(BaseModel):
    id: str
    class_name: str
    level: Optional[str] = None


class HonorBoardOut(BaseModel):
    class_id: str = "all"
    students: List[StudentStats] = Field(default_factory=list)
    leaderboards: Dict[str, List[StudentStats]] = Field(default_factory=dict)
    badges: List[BadgeOut] = Field(default_factory=list)
    classes: List[ClassOut] = Field(default_factory=list)


class RankedStudent(BaseModel):
    rank: int
    id: str
    full_name: str
    class_id: str
    class_name: str = ""
    points: Number = 0
    avatar: Optional[str] = None
