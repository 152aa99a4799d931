import json
import logging

import httpx
import pytest

from classhub.core.config import Settings
from classhub.schemas.records import Behavior
from classhub.services.data_provider import (
    DataProviderError,
    InMemoryDataProvider,
    SheetsDataProvider,
    build_data_provider,
    parse_records,
)

API_URL = "https://script.example.com/macros/s/abc/exec"


def _sheets(handler):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return SheetsDataProvider(API_URL, client=client)


def test_sheets_provider_posts_action_and_filter():
    seen = {}

    def handler(request: httpx.Request):
        seen["body"] = json.loads(request.content.decode("utf-8"))
        seen["content_type"] = request.headers["content-type"]
        return httpx.Response(
            200,
            json={"ok": True, "data": [{"id": 7, "classId": "c1", "title": "Bài 1", "dueDate": "2024-05-08"}]},
        )

    tasks = _sheets(handler).list_tasks(class_id="c1")

    assert seen["body"] == {"action": "tasks.list", "payload": {"filter": {"classId": "c1"}}}
    assert seen["content_type"].startswith("text/plain")
    assert len(tasks) == 1
    assert tasks[0].id == "7"
    assert tasks[0].due_date == "2024-05-08"


def test_sheets_provider_document_progress_action():
    def handler(request: httpx.Request):
        body = json.loads(request.content.decode("utf-8"))
        assert body == {"action": "documents.getProgress", "payload": {"studentId": "s1"}}
        return httpx.Response(200, json={"ok": True, "data": [{"studentId": "s1", "documentId": "d1", "completed": "TRUE"}]})

    rows = _sheets(handler).list_document_progress("s1")
    assert rows[0].completed is True


def test_sheets_provider_error_payload_raises():
    def handler(request):
        return httpx.Response(200, json={"ok": False, "error": "Sheet not found"})

    with pytest.raises(DataProviderError) as exc:
        _sheets(handler).list_students()
    assert exc.value.action == "students.list"
    assert "Sheet not found" in exc.value.message


def test_sheets_provider_http_failure_and_bad_json_raise():
    with pytest.raises(DataProviderError):
        _sheets(lambda r: httpx.Response(503, text="busy")).list_classes()
    with pytest.raises(DataProviderError):
        _sheets(lambda r: httpx.Response(200, text="<html>login</html>")).list_classes()


def test_sheets_provider_needs_url():
    with pytest.raises(ValueError):
        SheetsDataProvider("  ")


def test_parse_records_skips_malformed_rows(caplog):
    rows = [
        {"id": "b1", "studentId": "s1", "type": "praise", "points": "2"},
        {"id": "b2", "studentId": "s1", "type": "MAYBE"},
        {"id": "", "studentId": "s1", "type": "WARN"},
        {"id": "b4", "type": "WARN"},
        "junk",
    ]
    with caplog.at_level(logging.WARNING):
        out = parse_records(Behavior, rows, collection="behaviors")
    assert [b.id for b in out] == ["b1"]
    assert out[0].points == 2
    assert "Skipping malformed behaviors record id=b2" in caplog.text


def test_in_memory_provider_filters_by_equality():
    provider = InMemoryDataProvider(
        {
            "students": [{"id": 1, "classId": "c1"}, {"id": 2, "classId": "c2"}],
            "attendance": [
                {"id": "a1", "classId": "c1", "studentId": "1", "date": "2024-05-06", "status": "PRESENT"},
                {"id": "a2", "classId": "c1", "studentId": "1", "date": "2024-05-07", "status": "late"},
                {"id": "a3", "classId": "c2", "studentId": "2", "date": "2024-05-06", "status": "ABSENT"},
            ],
            "announcements": [
                {"id": "n1", "classId": "all"},
                {"id": "n2", "classId": "c1"},
                {"id": "n3", "classId": "c2"},
            ],
        }
    )

    assert provider.get_student("2").class_id == "c2"
    assert provider.get_student("9") is None
    assert [a.id for a in provider.list_attendance(student_id="1")] == ["a1", "a2"]
    assert [a.id for a in provider.list_attendance(class_id="c1", date="2024-05-07")] == ["a2"]
    assert [n.id for n in provider.list_announcements(class_id="c1")] == ["n1", "n2"]
    assert provider.list_tasks() == []


def test_build_data_provider_memory_from_seed_file(tmp_path):
    seed = tmp_path / "seed.json"
    seed.write_text(json.dumps({"classes": [{"id": "c1", "className": "5A"}]}), encoding="utf-8")

    provider = build_data_provider(Settings(DATA_BACKEND="Memory", DATA_SEED_FILE=str(seed)))

    assert isinstance(provider, InMemoryDataProvider)
    assert provider.list_classes()[0].class_name == "5A"


def test_build_data_provider_remote():
    provider = build_data_provider(Settings(DATA_BACKEND="remote", DATA_API_URL=API_URL))
    assert isinstance(provider, SheetsDataProvider)
    provider.close()


def test_parse_records_skips_non_finite_points(caplog):
    from classhub.schemas.records import Student

    rows = [
        {"id": "s1", "points": 3},
        {"id": "s2", "points": "Infinity"},
        {"id": "s3", "points": "1e400"},
        {"id": "s4", "points": "NaN"},
        {"id": "s5", "points": 10**400},
    ]
    with caplog.at_level(logging.WARNING):
        out = parse_records(Student, rows, collection="students")
    assert [s.id for s in out] == ["s1"]
    assert "Skipping malformed students record id=s2" in caplog.text


def test_parse_records_keeps_fractional_points():
    from classhub.schemas.records import Student

    out = parse_records(Student, [{"id": "s1", "points": "15.4"}, {"id": "s2", "points": "7"}], collection="students")
    assert out[0].points == 15.4
    assert out[1].points == 7
    assert isinstance(out[1].points, int)


def test_task_without_class_is_skipped():
    provider = InMemoryDataProvider(
        {"tasks": [{"id": "t1", "classId": "c1"}, {"id": "t2", "title": "no class"}, {"id": "t3", "classId": ""}]}
    )
    assert [t.id for t in provider.list_tasks()] == ["t1"]


def test_provider_without_fetch_cannot_be_created():
    from classhub.services.data_provider import DataProvider

    class Half(DataProvider):
        def fetch_document_progress(self, student_id):
            return []

    with pytest.raises(TypeError):
        Half()
