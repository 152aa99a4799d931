from __future__ import annotations

from typing import List, Optional

from classhub.schemas.records import ALL_CLASSES, Attendance, Student
from classhub.schemas.students import (
    AttendanceHistoryOut,
    DocumentProgressSummary,
    StudentProfileOut,
    StudentTaskRow,
    StudentTasksOut,
    UnitProgress,
)
from classhub.services.behavior_service import aggregate_behaviors
from classhub.services.honor_board_service import compute_student_stats
from classhub.services.periods import parse_iso_date, percent
from classhub.services.snapshot_service import Snapshot
from classhub.services.task_completion_service import (
    class_grade,
    progress_percent,
    resolve_task_completion,
    unit_progress,
)

PROFILE_COLLECTIONS = ("students", "classes", "tasks", "task_replies", "behaviors")
TASK_LIST_COLLECTIONS = ("students", "classes", "tasks", "task_replies")


def find_student(snapshot: Snapshot, student_id: str) -> Optional[Student]:
    return snapshot.student_by_id().get(str(student_id))


def build_student_profile(snapshot: Snapshot, student_id: str) -> Optional[StudentProfileOut]:
    """Honor-board stats for one student; badges need the whole population for the top-3."""
    stats = next((s for s in compute_student_stats(snapshot) if s.student.id == str(student_id)), None)
    if stats is None:
        return None

    b = aggregate_behaviors(snapshot.behaviors, stats.student.id)

    visible = {d.id for d in snapshot.documents if d.class_id in {ALL_CLASSES, stats.student.class_id}}
    done = {p.document_id for p in snapshot.document_progress if p.completed and p.student_id == stats.student.id}
    completed_docs = len(visible & done)

    return StudentProfileOut(
        stats=stats,
        praise_count=b.praise_count,
        warn_count=b.warn_count,
        behavior_points=b.total_points,
        documents=DocumentProgressSummary(
            documents_total=len(visible),
            documents_completed=completed_docs,
            progress_percent=percent(completed_docs, len(visible)),
        ),
    )


def build_student_tasks(snapshot: Snapshot, student_id: str) -> Optional[StudentTasksOut]:
    student = find_student(snapshot, student_id)
    if student is None:
        return None

    grade = class_grade(snapshot.class_by_id().get(student.class_id))
    assigned, completed = resolve_task_completion(
        snapshot.tasks,
        snapshot.task_replies,
        student,
        grade=grade,
        grade_scoped=True,
    )

    mine = {}
    for r in snapshot.task_replies:
        if r.student_id == student.id:
            mine.setdefault(r.task_id, r)

    rows: List[StudentTaskRow] = []
    for t in sorted(assigned, key=lambda x: x.created_at or "", reverse=True):
        reply = mine.get(t.id)
        if t.class_id != ALL_CLASSES:
            scope = "class"
        elif str(t.grade or "").strip() and str(t.grade).strip().lower() != ALL_CLASSES:
            scope = "grade"
        else:
            scope = "all"
        rows.append(
            StudentTaskRow(
                id=t.id,
                class_id=t.class_id,
                title=t.title,
                due_date=t.due_date,
                created_at=t.created_at,
                grade=t.grade,
                unit=t.unit,
                max_points=t.points,
                scope=scope,
                completed=reply is not None,
                submitted_at=reply.submitted_at if reply else None,
                reply_grade=reply.grade if reply else None,
            )
        )

    return StudentTasksOut(
        student_id=student.id,
        grade=grade,
        total_tasks=len(assigned),
        completed_tasks=completed,
        progress_percent=progress_percent(completed, len(assigned)),
        tasks=rows,
        units=[UnitProgress(**u) for u in unit_progress(assigned, set(mine))],
    )


def build_attendance_history(
    records: List[Attendance],
    student_id: str,
    *,
    start: Optional[str] = None,
    end: Optional[str] = None,
) -> AttendanceHistoryOut:
    """One student's attendance inside the inclusive [start, end] bounds, newest first."""
    lo = parse_iso_date(start) if start else None
    hi = parse_iso_date(end) if end else None
    if (start and lo is None) or (end and hi is None):
        raise ValueError("start/end must be YYYY-MM-DD")
    if lo and hi and lo > hi:
        raise ValueError("start must not be after end")

    rows: List[Attendance] = []
    for a in records:
        if a.student_id != str(student_id):
            continue
        d = parse_iso_date(a.date)
        if (lo or hi) and d is None:
            continue
        if (lo and d < lo) or (hi and d > hi):
            continue
        rows.append(a)
    rows.sort(key=lambda a: a.date or "", reverse=True)

    counts = {"PRESENT": 0, "ABSENT": 0, "LATE": 0}
    for a in rows:
        counts[a.status] += 1

    return AttendanceHistoryOut(
        student_id=str(student_id),
        start=lo.isoformat() if lo else None,
        end=hi.isoformat() if hi else None,
        counts=counts,
        records=rows,
    )
