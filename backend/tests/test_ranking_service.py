from classhub.schemas.records import Student
from classhub.services.ranking_service import badge_leaderboards, rank_by_points, top_for_badge, top_n


def test_top_three_keeps_input_order_for_ties():
    students = [
        Student(id="a", points=20),
        Student(id="b", points=20),
        Student(id="c", points=15),
        Student(id="d", points=10),
    ]
    assert [s.id for s in top_n(students, 3)] == ["a", "b", "c"]
    # reversed input, reversed tie order
    assert [s.id for s in top_n(list(reversed(students)), 2)] == ["b", "a"]


def test_top_n_handles_short_and_empty_lists():
    assert top_n([], 5) == []
    assert [s.id for s in top_n([Student(id="x", points=1)], 10)] == ["x"]
    assert top_n([Student(id="x", points=1)], 0) == []


def test_rank_by_points_accepts_a_custom_key():
    rows = [("s1", 3), ("s2", 7), ("s3", 3)]
    assert rank_by_points(rows, points=lambda r: r[1]) == [("s2", 7), ("s1", 3), ("s3", 3)]


class _Stats:
    def __init__(self, id, points, badges):
        self.id = id
        self.points = points
        self.badges = badges


def test_badge_leaderboards_take_top_three_holders():
    stats = [
        _Stats("a", 5, ["communicator"]),
        _Stats("b", 9, ["communicator", "perfect_attendance"]),
        _Stats("c", 1, ["communicator"]),
        _Stats("d", 7, ["communicator"]),
    ]
    assert [s.id for s in top_for_badge(stats, "communicator")] == ["b", "d", "a"]

    boards = badge_leaderboards(stats, ["communicator", "perfect_attendance", "vocab_warrior"])
    assert [s.id for s in boards["perfect_attendance"]] == ["b"]
    assert boards["vocab_warrior"] == []
