import pytest

from classhub.services.data_provider import DataProviderError, InMemoryDataProvider
from classhub.services.snapshot_service import load_snapshot


def _provider():
    return InMemoryDataProvider(
        {
            "students": [{"id": "s1", "classId": "c1"}],
            "classes": [{"id": "c1", "className": "5A"}],
            "taskReplies": [{"id": "r1", "taskId": "t1", "studentId": "s1"}],
        }
    )


def test_load_snapshot_fetches_requested_collections():
    snap = load_snapshot(_provider(), ["students", "classes", "task_replies", "students"])
    assert [s.id for s in snap.students] == ["s1"]
    assert snap.class_by_id()["c1"].class_name == "5A"
    assert snap.task_replies[0].task_id == "t1"
    assert snap.behaviors == []


def test_load_snapshot_runs_extra_loaders():
    snap = load_snapshot(_provider(), ["students"], extra={"documents": lambda: ["d"]})
    assert snap.documents == ["d"]


def test_load_snapshot_rejects_unknown_names():
    with pytest.raises(ValueError):
        load_snapshot(_provider(), ["grades"])
    with pytest.raises(ValueError):
        load_snapshot(_provider(), [], extra={"grades": list})


def test_load_snapshot_propagates_fetch_errors():
    class Broken(InMemoryDataProvider):
        def fetch(self, collection, filters=None):
            if collection == "behaviors":
                raise DataProviderError("behaviors.list", "timeout")
            return super().fetch(collection, filters)

    with pytest.raises(DataProviderError):
        load_snapshot(Broken({}), ["students", "behaviors"])
