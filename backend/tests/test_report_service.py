from classhub.schemas.records import Attendance, Behavior, ClassInfo, Student, Task, TaskReply
from classhub.services.report_service import build_monthly_report, build_weekly_report
from classhub.services.snapshot_service import Snapshot


def _snapshot():
    return Snapshot(
        students=[
            Student(id="s1", class_id="c1", full_name="An"),
            Student(id="s2", class_id="c1", full_name="Bình"),
            Student(id="s3", class_id="c2", full_name="Chi"),
        ],
        classes=[ClassInfo(id="c1", class_name="5A", level="Lớp 5"), ClassInfo(id="c2", class_name="6B")],
        attendance=[
            Attendance(id="a1", class_id="c1", student_id="s1", date="2024-05-07", status="PRESENT"),
            Attendance(id="a2", class_id="c1", student_id="s2", date="2024-05-07", status="PRESENT"),
            Attendance(id="a3", class_id="c1", student_id="s1", date="2024-05-08", status="LATE"),
            Attendance(id="a4", class_id="c1", student_id="s2", date="2024-05-08", status="ABSENT"),
            Attendance(id="a5", class_id="c1", student_id="s1", date="2024-05-20", status="ABSENT"),
            Attendance(id="a6", class_id="c2", student_id="s3", date="2024-05-07", status="ABSENT"),
        ],
        behaviors=[
            Behavior(id="b1", student_id="s1", type="PRAISE", points=5, date="2024-05-07"),
            Behavior(id="b2", student_id="s2", type="PRAISE", points=3, date="2024-05-08"),
            Behavior(id="b3", student_id="s1", type="WARN", points=-2, date="2024-05-09"),
            Behavior(id="b4", student_id="s3", type="PRAISE", points=10, date="2024-05-07"),
            Behavior(id="b5", student_id="s1", type="PRAISE", points=4, date="2024-04-01"),
        ],
        tasks=[
            Task(id="t1", class_id="c1", due_date="2024-05-08"),
            Task(id="t2", class_id="all", due_date="2024-05-10"),
            Task(id="t3", class_id="all", grade="6", due_date="2024-05-09"),
            Task(id="t4", class_id="c1", due_date="2024-05-20"),
            Task(id="t5", class_id="c2", due_date="2024-05-08"),
        ],
        task_replies=[
            TaskReply(id="r1", task_id="t1", student_id="s1", submitted_at="2024-05-08T10:00:00Z"),
            TaskReply(id="r2", task_id="t1", student_id="s1", submitted_at="2024-05-08T11:00:00Z"),
            TaskReply(id="r3", task_id="t2", student_id="s2", submitted_at="2024-04-30"),
            TaskReply(id="r4", task_id="t4", student_id="s1", submitted_at="2024-05-07"),
            TaskReply(id="r5", task_id="t5", student_id="s3", submitted_at="2024-05-07"),
        ],
    )


def test_weekly_report_aggregates_one_class_week():
    r = build_weekly_report(_snapshot(), "c1", "2024-05-09")

    assert r.type == "weekly"
    assert (r.start, r.end) == ("2024-05-06", "2024-05-12")
    assert r.student_count == 2

    # PRESENT, PRESENT, LATE, ABSENT -> round(100 * 2.5 / 4)
    assert r.attendance.rate == 63
    assert (r.attendance.present_count, r.attendance.late_count, r.attendance.absent_count) == (2, 1, 1)
    assert r.attendance.total_records == 4

    assert r.behavior.total_points == 6
    assert (r.behavior.praise_count, r.behavior.warn_count) == (2, 1)
    assert [(t.name, t.points) for t in r.behavior.top_students] == [("An", 3), ("Bình", 3)]

    # t1 and t2 are due this week; t3 is for grade 6
    assert r.tasks.assigned_tasks == 2
    assert r.tasks.submitted_replies == 2
    assert r.tasks.completion_rate == 50
    assert r.tasks.parent_replies == 3


def test_monthly_report_uses_calendar_month():
    r = build_monthly_report(_snapshot(), "c1", "2024-05")
    assert r.period == "Tháng 2024-05"
    assert r.attendance.total_records == 5
    assert r.tasks.assigned_tasks == 3


def test_report_for_empty_class_is_all_zero():
    r = build_weekly_report(_snapshot(), "c404", "2024-05-09")
    assert r.student_count == 0
    assert r.attendance.rate == 0
    assert r.behavior.top_students == []
    assert r.tasks.completion_rate == 0


def test_report_top_students_fall_back_to_unknown_name():
    snap = _snapshot()
    snap.students[0] = Student(id="s1", class_id="c1")
    r = build_weekly_report(snap, "c1", "2024-05-09")
    assert r.behavior.top_students[0].name == "Unknown"


def test_report_top_students_size_follows_settings(monkeypatch):
    from classhub.core.config import settings

    monkeypatch.setattr(settings, "REPORT_TOP_STUDENTS", 1)
    r = build_weekly_report(_snapshot(), "c1", "2024-05-09")
    assert [t.name for t in r.behavior.top_students] == ["An"]
