from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Sequence, TypeVar

T = TypeVar("T")

TOP_N_CHOICES = (3, 5, 10)
BADGE_LEADERBOARD_SIZE = 3


def _points(item) -> float:
    return float(getattr(item, "points", 0) or 0)


def rank_by_points(items: Iterable[T], *, points: Callable[[T], float] = _points) -> List[T]:
    # sorted(reverse=True) is stable: equal points keep their input order
    return sorted(items, key=points, reverse=True)


def top_n(items: Iterable[T], n: int, *, points: Callable[[T], float] = _points) -> List[T]:
    if n <= 0:
        return []
    return rank_by_points(items, points=points)[: int(n)]


def top_for_badge(stats: Iterable[T], badge: str, *, limit: int = BADGE_LEADERBOARD_SIZE) -> List[T]:
    holders = [s for s in stats if badge in (getattr(s, "badges", None) or [])]
    return top_n(holders, limit)


def badge_leaderboards(stats: Sequence[T], badges: Iterable[str]) -> Dict[str, List[T]]:
    return {b: top_for_badge(stats, b) for b in badges}
