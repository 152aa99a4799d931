"""Honor-board badges.

Each badge is an independent predicate over one student's aggregates; a student can
hold any subset. ``perfect_attendance`` and ``digital_citizen`` both require zero
warnings and routinely appear together.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, Iterable, List, Tuple

from classhub.schemas.records import Number, Student
from classhub.services.ranking_service import top_n

VOCAB_WARRIOR_RANK = 3


@dataclass(frozen=True)
class BadgeInput:
    student_id: str
    points: Number
    completed_count: int
    praise_count: int
    warn_count: int


@dataclass(frozen=True)
class BadgeRule:
    id: str
    label: str
    description: str
    earned: Callable[[BadgeInput, FrozenSet[str]], bool]


# Display order.
BADGE_RULES: Tuple[BadgeRule, ...] = (
    BadgeRule(
        "language_expert",
        "Chuyên gia Ngôn ngữ",
        "Hoàn thành tốt các bài tập ngôn ngữ",
        lambda a, top: a.completed_count >= 10,
    ),
    BadgeRule(
        "digital_researcher",
        "Mọt sách Công nghệ",
        "Tích cực nghiên cứu tài liệu số",
        lambda a, top: a.points > 15,
    ),
    BadgeRule(
        "vocab_warrior",
        "Chiến thần Từ vựng",
        "Đạt điểm cao trong Game học tập",
        lambda a, top: a.student_id in top,
    ),
    BadgeRule(
        "communicator",
        "Người truyền cảm hứng",
        "Tương tác và phát âm xuất sắc",
        lambda a, top: a.praise_count >= 3,
    ),
    BadgeRule(
        "perfect_attendance",
        "Đúng giờ như đồng hồ",
        "Chuyên cần tuyệt đối",
        lambda a, top: a.warn_count == 0,
    ),
    BadgeRule(
        "civility_ambassador",
        "Đại sứ Văn minh",
        "Hành vi và nề nếp gương mẫu",
        lambda a, top: a.praise_count >= 5,
    ),
    BadgeRule(
        "digital_citizen",
        "Công dân số gương mẫu",
        "Giao tiếp lịch sự, văn minh",
        lambda a, top: a.warn_count == 0 and a.completed_count > 0,
    ),
)

BADGE_IDS: Tuple[str, ...] = tuple(r.id for r in BADGE_RULES)


def top_point_ids(students: Iterable[Student], n: int = VOCAB_WARRIOR_RANK) -> FrozenSet[str]:
    """Ids of the global top-``n`` students by running points (computed once per refresh)."""
    return frozenset(s.id for s in top_n(students, n))


def evaluate_badges(inp: BadgeInput, top_ids: FrozenSet[str]) -> List[str]:
    return [r.id for r in BADGE_RULES if r.earned(inp, top_ids)]


def badge_catalogue() -> List[Dict[str, str]]:
    return [{"id": r.id, "label": r.label, "description": r.description} for r in BADGE_RULES]
