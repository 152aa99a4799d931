import pytest

from classhub.schemas.records import Attendance, ClassInfo, Student, Task, TaskReply
from classhub.services.snapshot_service import Snapshot
from classhub.services.student_service import build_attendance_history, build_student_tasks


def _snapshot():
    return Snapshot(
        students=[Student(id="s1", class_id="c1", full_name="An")],
        classes=[ClassInfo(id="c1", class_name="5A", level="Lớp 5")],
        tasks=[
            Task(id="t1", class_id="c1", unit="Unit 2", created_at="2024-05-01"),
            Task(id="t2", class_id="all", grade="5", unit="Unit 10", created_at="2024-05-03"),
            Task(id="t3", class_id="all", grade="6", created_at="2024-05-04"),
            Task(id="t4", class_id="all", unit="Unit 2", created_at="2024-05-02"),
        ],
        task_replies=[TaskReply(id="r1", task_id="t1", student_id="s1", grade=9, submitted_at="2024-05-02")],
    )


def test_student_tasks_are_grade_scoped_and_newest_first():
    out = build_student_tasks(_snapshot(), "s1")

    assert out.grade == "5"
    assert [t.id for t in out.tasks] == ["t2", "t4", "t1"]
    assert [t.scope for t in out.tasks] == ["grade", "all", "class"]
    assert (out.total_tasks, out.completed_tasks, out.progress_percent) == (3, 1, 33)

    t1 = out.tasks[-1]
    assert t1.completed is True
    assert t1.reply_grade == 9.0
    assert t1.submitted_at == "2024-05-02"

    assert [(u.unit, u.total, u.completed, u.done) for u in out.units] == [
        ("Unit 2", 2, 1, False),
        ("Unit 10", 1, 0, False),
    ]


def test_student_tasks_for_unknown_student_is_none():
    assert build_student_tasks(_snapshot(), "nobody") is None


def _attendance():
    return [
        Attendance(id="a1", class_id="c1", student_id="s1", date="2024-05-06", status="PRESENT"),
        Attendance(id="a2", class_id="c1", student_id="s1", date="2024-05-07", status="LATE"),
        Attendance(id="a3", class_id="c1", student_id="s1", date="2024-05-08", status="ABSENT"),
        Attendance(id="a4", class_id="c1", student_id="s1", date="2024-04-01", status="PRESENT"),
        Attendance(id="a5", class_id="c1", student_id="s2", date="2024-05-06", status="ABSENT"),
    ]


def test_attendance_history_is_bounded_and_newest_first():
    out = build_attendance_history(_attendance(), "s1", start="2024-05-01", end="2024-05-07")
    assert [a.id for a in out.records] == ["a2", "a1"]
    assert out.counts == {"PRESENT": 1, "ABSENT": 0, "LATE": 1}
    assert (out.start, out.end) == ("2024-05-01", "2024-05-07")


def test_attendance_history_without_bounds_returns_everything():
    out = build_attendance_history(_attendance(), "s1")
    assert len(out.records) == 4
    assert out.records[0].id == "a3"


@pytest.mark.parametrize("kw", [{"start": "05/01/2024"}, {"start": "2024-05-08", "end": "2024-05-01"}])
def test_attendance_history_rejects_bad_bounds(kw):
    with pytest.raises(ValueError):
        build_attendance_history(_attendance(), "s1", **kw)
