from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from classhub.schemas.honor_board import StudentStats
from classhub.schemas.records import Attendance, Number


class DocumentProgressSummary(BaseModel):
    documents_total: int = 0
    documents_completed: int = 0
    progress_percent: int = 0


class StudentProfileOut(BaseModel):
    stats: StudentStats
    praise_count: int = 0
    warn_count: int = 0
    behavior_points: Number = 0
    documents: DocumentProgressSummary = Field(default_factory=DocumentProgressSummary)


class StudentTaskRow(BaseModel):
    id: str
    class_id: str
    title: str
    due_date: Optional[str] = None
    created_at: Optional[str] = None
    grade: Optional[str] = None
    unit: Optional[str] = None
    max_points: Optional[int] = None
    scope: str = "class"
    completed: bool = False
    submitted_at: Optional[str] = None
    reply_grade: Optional[float] = None


class UnitProgress(BaseModel):
    unit: str
    total: int
    completed: int
    done: bool


class StudentTasksOut(BaseModel):
    student_id: str
    grade: Optional[str] = None
    total_tasks: int = 0
    completed_tasks: int = 0
    progress_percent: int = 0
    tasks: List[StudentTaskRow] = Field(default_factory=list)
    units: List[UnitProgress] = Field(default_factory=list)


class AttendanceHistoryOut(BaseModel):
    student_id: str
    start: Optional[str] = None
    end: Optional[str] = None
    counts: Dict[str, int] = Field(default_factory=dict)
    records: List[Attendance] = Field(default_factory=list)
