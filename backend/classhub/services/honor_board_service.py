from __future__ import annotations

import logging
from typing import List, Optional

from classhub.schemas.honor_board import BadgeOut, ClassOut, HonorBoardOut, RankedStudent, StudentStats
from classhub.schemas.records import ALL_CLASSES, Student
from classhub.services.badge_service import BADGE_IDS, BadgeInput, badge_catalogue, evaluate_badges, top_point_ids
from classhub.services.behavior_service import aggregate_by_student, BehaviorTotals
from classhub.services.ranking_service import TOP_N_CHOICES, badge_leaderboards, top_n
from classhub.services.snapshot_service import Snapshot
from classhub.services.task_completion_service import (
    class_grade,
    progress_percent,
    resolve_task_completion,
    unique_tasks,
)

logger = logging.getLogger(__name__)

HONOR_BOARD_COLLECTIONS = ("students", "classes", "tasks", "task_replies", "behaviors")


def compute_student_stats(snapshot: Snapshot, *, grade_scoped: bool = False) -> List[StudentStats]:
    """StudentStats for the whole population, in the order students were listed."""
    classes = snapshot.class_by_id()
    tasks = unique_tasks(snapshot.tasks)
    behavior = aggregate_by_student(snapshot.behaviors)
    top_ids = top_point_ids(snapshot.students)

    out: List[StudentStats] = []
    for s in snapshot.students:
        c = classes.get(s.class_id)
        assigned, completed = resolve_task_completion(
            tasks,
            snapshot.task_replies,
            s,
            grade=class_grade(c),
            grade_scoped=grade_scoped,
        )
        b = behavior.get(s.id, BehaviorTotals())
        badges = evaluate_badges(
            BadgeInput(
                student_id=s.id,
                points=s.points,
                completed_count=completed,
                praise_count=b.praise_count,
                warn_count=b.warn_count,
            ),
            top_ids,
        )
        out.append(
            StudentStats(
                student=s,
                class_name=c.class_name if c else "",
                points=s.points,
                total_tasks=len(assigned),
                completed_tasks=completed,
                progress_percent=progress_percent(completed, len(assigned)),
                badges=badges,
            )
        )
    return out


def build_honor_board(
    snapshot: Snapshot,
    *,
    class_id: Optional[str] = ALL_CLASSES,
    grade_scoped: bool = False,
) -> HonorBoardOut:
    stats = compute_student_stats(snapshot, grade_scoped=grade_scoped)
    cid = str(class_id or ALL_CLASSES)
    visible = stats if cid == ALL_CLASSES else [s for s in stats if s.student.class_id == cid]
    logger.debug("honor board: %d students (%d shown for class=%s)", len(stats), len(visible), cid)

    return HonorBoardOut(
        class_id=cid,
        students=visible,
        leaderboards=badge_leaderboards(visible, BADGE_IDS),
        badges=[BadgeOut(**b) for b in badge_catalogue()],
        classes=[ClassOut(id=c.id, class_name=c.class_name, level=c.level) for c in snapshot.classes],
    )


def rank_students(students: List[Student], snapshot: Snapshot, n: int) -> List[RankedStudent]:
    if n not in TOP_N_CHOICES:
        raise ValueError(f"n must be one of {TOP_N_CHOICES}")
    classes = snapshot.class_by_id()
    out: List[RankedStudent] = []
    for i, s in enumerate(top_n(students, n), start=1):
        c = classes.get(s.class_id)
        out.append(
            RankedStudent(
                rank=i,
                id=s.id,
                full_name=s.full_name,
                class_id=s.class_id,
                class_name=c.class_name if c else "",
                points=s.points,
                avatar=s.avatar,
            )
        )
    return out
