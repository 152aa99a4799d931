from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from classhub.schemas.records import Behavior, Number
from classhub.services.periods import DateRange


@dataclass(frozen=True)
class BehaviorTotals:
    praise_count: int = 0
    warn_count: int = 0
    total_points: Number = 0

    def add(self, b: Behavior) -> "BehaviorTotals":
        return BehaviorTotals(
            praise_count=self.praise_count + (1 if b.type == "PRAISE" else 0),
            warn_count=self.warn_count + (1 if b.type == "WARN" else 0),
            total_points=self.total_points + b.points,
        )


def in_range(behaviors: Iterable[Behavior], period: Optional[DateRange]) -> List[Behavior]:
    if period is None:
        return list(behaviors)
    return [b for b in behaviors if period.contains(b.date, collection="behaviors", record_id=b.id)]


def aggregate_behaviors(behaviors: Iterable[Behavior], student_id: str) -> BehaviorTotals:
    """Praise/warn counts and the signed point sum for one student.

    Points are summed as recorded; a WARN entry's sign comes from whoever logged it.
    """
    totals = BehaviorTotals()
    for b in behaviors:
        if b.student_id == str(student_id):
            totals = totals.add(b)
    return totals


def aggregate_by_student(behaviors: Iterable[Behavior]) -> Dict[str, BehaviorTotals]:
    """Totals for every student seen, keyed in order of first appearance."""
    out: Dict[str, BehaviorTotals] = {}
    for b in behaviors:
        out[b.student_id] = out.get(b.student_id, BehaviorTotals()).add(b)
    return out
