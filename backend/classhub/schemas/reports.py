from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from classhub.schemas.honor_board import RankedStudent
from classhub.schemas.records import Number


class AttendanceSummary(BaseModel):
    rate: int = 0
    present_count: int = 0
    absent_count: int = 0
    late_count: int = 0
    total_records: int = 0


class TopStudent(BaseModel):
    name: str
    points: Number


class BehaviorSummary(BaseModel):
    total_points: Number = 0
    praise_count: int = 0
    warn_count: int = 0
    top_students: List[TopStudent] = Field(default_factory=list)


class TaskSummary(BaseModel):
    completion_rate: int = 0
    parent_replies: int = 0
    assigned_tasks: int = 0
    submitted_replies: int = 0


class PeriodReport(BaseModel):
    class_id: str
    type: Literal["weekly", "monthly"]
    period: str
    start: str
    end: str
    student_count: int = 0
    attendance: AttendanceSummary = Field(default_factory=AttendanceSummary)
    behavior: BehaviorSummary = Field(default_factory=BehaviorSummary)
    tasks: TaskSummary = Field(default_factory=TaskSummary)


class AttendanceToday(BaseModel):
    date: str
    present: float = 0.0
    total: int = 0
    rate: int = 0
    has_data: bool = False


class DashboardTask(BaseModel):
    id: str
    class_id: str
    title: str
    due_date: Optional[str] = None


class DashboardAnnouncement(BaseModel):
    id: str
    class_id: str
    title: str
    created_at: Optional[str] = None
    pinned: bool = False


class DashboardOverview(BaseModel):
    classes_count: int = 0
    students_count: int = 0
    attendance_today: AttendanceToday
    total_praise_points: Number = 0
    top_students: List[RankedStudent] = Field(default_factory=list)
    announcements: List[DashboardAnnouncement] = Field(default_factory=list)
    upcoming_tasks: List[DashboardTask] = Field(default_factory=list)
