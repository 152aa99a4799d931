"""Weekly / monthly class reports.

completion_rate and parent_replies follow these rules:

* assigned tasks: the class's own tasks plus global ones (grade-matched against the
  class grade) whose due date falls inside the period;
* completion_rate = distinct (task, student) replies from the class to those tasks,
  over ``assigned tasks x class students``;
* parent_replies = replies from the class's students submitted inside the period.
"""

from __future__ import annotations

import logging
from typing import List, Set, Tuple

from classhub.core.config import settings
from classhub.schemas.reports import AttendanceSummary, BehaviorSummary, PeriodReport, TaskSummary, TopStudent
from classhub.schemas.records import Student, Task
from classhub.services.behavior_service import aggregate_by_student, in_range
from classhub.services.periods import ReportPeriod, month_of, percent, round_half_up, week_of
from classhub.services.ranking_service import top_n
from classhub.services.snapshot_service import Snapshot
from classhub.services.task_completion_service import class_grade, is_task_assigned, unique_tasks

logger = logging.getLogger(__name__)

REPORT_COLLECTIONS = ("students", "classes", "tasks", "task_replies", "behaviors", "attendance")


def _attendance_summary(snapshot: Snapshot, class_id: str, period: ReportPeriod) -> AttendanceSummary:
    counts = {"PRESENT": 0, "ABSENT": 0, "LATE": 0}
    for a in snapshot.attendance:
        if a.class_id != class_id:
            continue
        if not period.range.contains(a.date, collection="attendance", record_id=a.id):
            continue
        counts[a.status] += 1

    total = sum(counts.values())
    rate = round_half_up(100.0 * (counts["PRESENT"] + 0.5 * counts["LATE"]) / total) if total else 0
    return AttendanceSummary(
        rate=rate,
        present_count=counts["PRESENT"],
        absent_count=counts["ABSENT"],
        late_count=counts["LATE"],
        total_records=total,
    )


def _behavior_summary(snapshot: Snapshot, students: List[Student], period: ReportPeriod) -> BehaviorSummary:
    ids = {s.id for s in students}
    names = {s.id: s.full_name for s in students}
    records = [b for b in in_range(snapshot.behaviors, period.range) if b.student_id in ids]

    per_student = aggregate_by_student(records)
    ranked: List[Tuple[str, int]] = top_n(
        per_student.items(),
        int(settings.REPORT_TOP_STUDENTS),
        points=lambda kv: kv[1].total_points,
    )
    return BehaviorSummary(
        total_points=sum(t.total_points for t in per_student.values()),
        praise_count=sum(t.praise_count for t in per_student.values()),
        warn_count=sum(t.warn_count for t in per_student.values()),
        top_students=[TopStudent(name=names.get(sid) or "Unknown", points=t.total_points) for sid, t in ranked],
    )


def _period_tasks(snapshot: Snapshot, class_id: str, period: ReportPeriod) -> List[Task]:
    # The class itself stands in for a student when resolving grade-scoped global tasks.
    proxy = Student(id="__class__", class_id=class_id)
    grade = class_grade(snapshot.class_by_id().get(class_id))
    return [
        t
        for t in unique_tasks(snapshot.tasks)
        if is_task_assigned(t, proxy, grade=grade, grade_scoped=True)
        and period.range.contains(t.due_date, collection="tasks", record_id=t.id)
    ]


def _task_summary(snapshot: Snapshot, class_id: str, students: List[Student], period: ReportPeriod) -> TaskSummary:
    ids = {s.id for s in students}
    tasks = _period_tasks(snapshot, class_id, period)
    task_ids = {t.id for t in tasks}

    submitted: Set[Tuple[str, str]] = set()
    in_period = 0
    for r in snapshot.task_replies:
        if r.student_id not in ids:
            continue
        if r.task_id in task_ids:
            submitted.add((r.task_id, r.student_id))
        if period.range.contains(r.submitted_at, collection="taskReplies", record_id=r.id):
            in_period += 1

    return TaskSummary(
        completion_rate=min(100, percent(len(submitted), len(tasks) * len(students))),
        parent_replies=in_period,
        assigned_tasks=len(tasks),
        submitted_replies=len(submitted),
    )


def build_period_report(snapshot: Snapshot, class_id: str, period: ReportPeriod) -> PeriodReport:
    cid = str(class_id)
    students = [s for s in snapshot.students if s.class_id == cid]
    report = PeriodReport(
        class_id=cid,
        type=period.type,
        period=period.label,
        start=period.range.start.isoformat(),
        end=period.range.end.isoformat(),
        student_count=len(students),
        attendance=_attendance_summary(snapshot, cid, period),
        behavior=_behavior_summary(snapshot, students, period),
        tasks=_task_summary(snapshot, cid, students, period),
    )
    logger.info(
        "%s report class=%s period=%s attendance_rate=%s completion_rate=%s",
        period.type,
        cid,
        period.label,
        report.attendance.rate,
        report.tasks.completion_rate,
    )
    return report


def build_weekly_report(snapshot: Snapshot, class_id: str, anchor_date: str) -> PeriodReport:
    return build_period_report(snapshot, class_id, week_of(anchor_date))


def build_monthly_report(snapshot: Snapshot, class_id: str, month: str) -> PeriodReport:
    return build_period_report(snapshot, class_id, month_of(month))

