from __future__ import annotations

from datetime import date
from typing import List, Optional

from classhub.core.config import settings
from classhub.schemas.reports import AttendanceToday, DashboardAnnouncement, DashboardOverview, DashboardTask
from classhub.services.honor_board_service import rank_students
from classhub.services.periods import parse_iso_date, percent
from classhub.services.snapshot_service import Snapshot
from classhub.services.task_completion_service import unique_tasks

DASHBOARD_COLLECTIONS = ("students", "classes", "behaviors", "announcements", "tasks", "attendance")

# LATE counts as half a presence
_PRESENCE_WEIGHT = {"PRESENT": 1.0, "LATE": 0.5, "ABSENT": 0.0}


def _attendance_on(snapshot: Snapshot, day: date) -> AttendanceToday:
    class_ids = {c.id for c in snapshot.classes}
    present = 0.0
    total = 0
    for a in snapshot.attendance:
        if a.class_id not in class_ids or parse_iso_date(a.date) != day:
            continue
        total += 1
        present += _PRESENCE_WEIGHT[a.status]
    return AttendanceToday(
        date=day.isoformat(),
        present=present,
        total=total,
        rate=percent(present, total),
        has_data=total > 0,
    )


def _upcoming_tasks(snapshot: Snapshot, day: date, limit: int) -> List[DashboardTask]:
    dated = []
    for t in unique_tasks(snapshot.tasks):
        due = parse_iso_date(t.due_date)
        if due is not None and due >= day:
            dated.append((due, t))
    dated.sort(key=lambda x: x[0])
    return [
        DashboardTask(id=t.id, class_id=t.class_id, title=t.title, due_date=t.due_date)
        for _, t in dated[: max(0, int(limit))]
    ]


def _latest_announcements(snapshot: Snapshot, limit: int) -> List[DashboardAnnouncement]:
    rows = sorted(snapshot.announcements, key=lambda a: a.created_at or "", reverse=True)
    return [
        DashboardAnnouncement(id=a.id, class_id=a.class_id, title=a.title, created_at=a.created_at, pinned=a.pinned)
        for a in rows[: max(0, int(limit))]
    ]


def build_dashboard(snapshot: Snapshot, *, today: Optional[date] = None, top: int = 5) -> DashboardOverview:
    day = today or date.today()
    return DashboardOverview(
        classes_count=len(snapshot.classes),
        students_count=len(snapshot.students),
        attendance_today=_attendance_on(snapshot, day),
        total_praise_points=sum(b.points for b in snapshot.behaviors if b.type == "PRAISE"),
        top_students=rank_students(snapshot.students, snapshot, top),
        announcements=_latest_announcements(snapshot, settings.DASHBOARD_ANNOUNCEMENTS),
        upcoming_tasks=_upcoming_tasks(snapshot, day, settings.DASHBOARD_UPCOMING_TASKS),
    )
