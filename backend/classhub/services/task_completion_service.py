from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from classhub.schemas.records import ALL_CLASSES, ClassInfo, Student, Task, TaskReply
from classhub.services.periods import percent

_GRADE_RE = re.compile(r"(\d+)")


def class_grade(class_info: Optional[ClassInfo]) -> Optional[str]:
    """Grade number of a class: digits in ``level`` ("Lớp 5"), else in the name ("5A")."""
    if class_info is None:
        return None
    for source in (class_info.level, class_info.class_name):
        m = _GRADE_RE.search(str(source or ""))
        if m:
            return m.group(1)
    return None


def _is_grade_free(task: Task) -> bool:
    g = str(task.grade or "").strip()
    return not g or g.lower() == ALL_CLASSES


def is_task_assigned(
    task: Task,
    student: Student,
    *,
    grade: Optional[str] = None,
    grade_scoped: bool = False,
) -> bool:
    if task.class_id == student.class_id:
        return True
    if task.class_id != ALL_CLASSES:
        return False
    if not grade_scoped or _is_grade_free(task):
        return True
    # a grade-specific global task is hidden when the student's grade is unknown
    return grade is not None and str(task.grade).strip() == str(grade)


def unique_tasks(tasks: Iterable[Task]) -> List[Task]:
    seen: Dict[str, Task] = {}
    for t in tasks:
        seen.setdefault(t.id, t)
    return list(seen.values())


def replied_task_ids(replies: Iterable[TaskReply], student_id: str) -> Set[str]:
    return {r.task_id for r in replies if r.student_id == str(student_id)}


def resolve_task_completion(
    tasks: Iterable[Task],
    replies: Iterable[TaskReply],
    student: Student,
    *,
    grade: Optional[str] = None,
    grade_scoped: bool = False,
) -> Tuple[List[Task], int]:
    """Tasks assigned to ``student`` and how many of them have at least one reply."""
    assigned = [
        t for t in unique_tasks(tasks)
        if is_task_assigned(t, student, grade=grade, grade_scoped=grade_scoped)
    ]
    done = replied_task_ids(replies, student.id)
    completed = sum(1 for t in assigned if t.id in done)
    return assigned, completed


def progress_percent(completed: int, total: int) -> int:
    return percent(completed, total) if total > 0 else 0


def _unit_sort_key(unit: str) -> Tuple[int, str]:
    m = _GRADE_RE.search(unit)
    return (int(m.group(1)) if m else 10**9, unit)


def unit_progress(tasks: Iterable[Task], completed_ids: Set[str]) -> List[Dict[str, Any]]:
    """Per-unit task counts; a unit is done once every task in it has a reply."""
    counts: Dict[str, List[int]] = {}
    for t in tasks:
        unit = str(t.unit or "").strip()
        if not unit:
            continue
        c = counts.setdefault(unit, [0, 0])
        c[0] += 1
        if t.id in completed_ids:
            c[1] += 1

    out: List[Dict[str, Any]] = []
    for unit in sorted(counts, key=_unit_sort_key):
        total, completed = counts[unit]
        out.append(
            {
                "unit": unit,
                "total": total,
                "completed": completed,
                "done": total > 0 and total == completed,
            }
        )
    return out
