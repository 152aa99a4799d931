"""Read access to the school's collections.

The production data lives in a spreadsheet published as a web app. Every call is a
single POST with a JSON body ``{"action": "<collection>.list", "payload": {...}}`` and
the web app answers ``{"ok": bool, "data": ..., "error": str}``.

``InMemoryDataProvider`` serves the same collections from a dict (or a JSON seed file)
for demos and tests.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from classhub.core.config import Settings
from classhub.schemas.records import (
    ALL_CLASSES,
    Announcement,
    Attendance,
    Behavior,
    ClassInfo,
    Document,
    DocumentProgress,
    Student,
    Task,
    TaskReply,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class DataProviderError(RuntimeError):
    """The data API could not deliver a collection."""

    def __init__(self, action: str, message: str):
        super().__init__(f"{action}: {message}")
        self.action = action
        self.message = message


def parse_records(model: Type[M], rows: Any, *, collection: str) -> List[M]:
    """Validate raw rows, skipping (and logging) the ones that do not fit ``model``."""
    if not isinstance(rows, list):
        return []

    out: List[M] = []
    for row in rows:
        if not isinstance(row, dict):
            logger.warning("Skipping non-object row in %s: %r", collection, row)
            continue
        try:
            out.append(model.model_validate(row))
        except ValidationError as exc:
            first = (exc.errors() or [{}])[0]
            logger.warning(
                "Skipping malformed %s record id=%s (%s: %s)",
                collection,
                row.get("id"),
                ".".join(str(p) for p in first.get("loc", ())),
                first.get("msg"),
            )
    return out


def _visible_to_class(rows: List[M], class_id: Optional[str]) -> List[M]:
    if not class_id:
        return rows
    return [r for r in rows if getattr(r, "class_id", None) in {ALL_CLASSES, str(class_id)}]


class DataProvider(ABC):
    """Typed list operations on top of a single ``fetch`` primitive."""

    name = "base"

    @abstractmethod
    def fetch(self, collection: str, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Raw rows of ``collection`` matching every ``filters`` key by equality."""

    @abstractmethod
    def fetch_document_progress(self, student_id: str) -> List[Dict[str, Any]]:
        """Raw progress rows of one student."""

    def list_students(self) -> List[Student]:
        return parse_records(Student, self.fetch("students"), collection="students")

    def get_student(self, student_id: str) -> Optional[Student]:
        rows = parse_records(Student, self.fetch("students", {"id": str(student_id)}), collection="students")
        return next((s for s in rows if s.id == str(student_id)), None)

    def list_classes(self) -> List[ClassInfo]:
        return parse_records(ClassInfo, self.fetch("classes"), collection="classes")

    def list_tasks(self, class_id: Optional[str] = None) -> List[Task]:
        filters = {"classId": str(class_id)} if class_id else None
        return parse_records(Task, self.fetch("tasks", filters), collection="tasks")

    def list_task_replies(self, task_id: Optional[str] = None) -> List[TaskReply]:
        filters = {"taskId": str(task_id)} if task_id else None
        return parse_records(TaskReply, self.fetch("taskReplies", filters), collection="taskReplies")

    def list_behaviors(self, student_id: Optional[str] = None) -> List[Behavior]:
        filters = {"studentId": str(student_id)} if student_id else None
        return parse_records(Behavior, self.fetch("behaviors", filters), collection="behaviors")

    def list_attendance(
        self,
        class_id: Optional[str] = None,
        student_id: Optional[str] = None,
        date: Optional[str] = None,
    ) -> List[Attendance]:
        filters: Dict[str, Any] = {}
        if class_id:
            filters["classId"] = str(class_id)
        if student_id:
            filters["studentId"] = str(student_id)
        if date:
            filters["date"] = str(date)
        return parse_records(Attendance, self.fetch("attendance", filters or None), collection="attendance")

    def list_announcements(self, class_id: Optional[str] = None) -> List[Announcement]:
        rows = parse_records(Announcement, self.fetch("announcements"), collection="announcements")
        return _visible_to_class(rows, class_id)

    def list_documents(self, class_id: Optional[str] = None) -> List[Document]:
        rows = parse_records(Document, self.fetch("documents"), collection="documents")
        return _visible_to_class(rows, class_id)

    def list_document_progress(self, student_id: str) -> List[DocumentProgress]:
        return parse_records(
            DocumentProgress,
            self.fetch_document_progress(str(student_id)),
            collection="documentProgress",
        )


class SheetsDataProvider(DataProvider):
    name = "remote"

    def __init__(self, api_url: str, *, timeout: float = 30.0, client: Optional[httpx.Client] = None):
        if not (api_url or "").strip():
            raise ValueError("DATA_API_URL is not configured")
        self.api_url = api_url.strip()
        # Apps Script answers the POST with a redirect to the rendered result.
        self._client = client or httpx.Client(timeout=float(timeout), follow_redirects=True)

    def call(self, action: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        body = json.dumps({"action": action, "payload": payload or {}}, ensure_ascii=False)
        logger.debug("data api request action=%s payload=%s", action, payload)
        try:
            res = self._client.post(
                self.api_url,
                content=body.encode("utf-8"),
                headers={"Content-Type": "text/plain;charset=utf-8"},
            )
            res.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("data api call failed action=%s: %s", action, exc)
            raise DataProviderError(action, str(exc)) from exc

        try:
            out = res.json()
        except ValueError as exc:
            logger.warning("data api returned non-JSON for action=%s: %s", action, res.text[:500])
            raise DataProviderError(action, "Non-JSON response from data API") from exc

        if not isinstance(out, dict) or not out.get("ok"):
            err = out.get("error") if isinstance(out, dict) else None
            logger.warning("data api error action=%s: %s", action, err)
            raise DataProviderError(action, str(err or "API Error"))

        return out.get("data")

    def fetch(self, collection: str, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        payload = {"filter": filters} if filters else {}
        data = self.call(f"{collection}.list", payload)
        return data if isinstance(data, list) else []

    def fetch_document_progress(self, student_id: str) -> List[Dict[str, Any]]:
        data = self.call("documents.getProgress", {"studentId": str(student_id)})
        return data if isinstance(data, list) else []

    def close(self) -> None:
        self._client.close()


class InMemoryDataProvider(DataProvider):
    name = "memory"

    def __init__(self, collections: Optional[Dict[str, List[Dict[str, Any]]]] = None):
        self._collections: Dict[str, List[Dict[str, Any]]] = {
            str(k): list(v or []) for k, v in (collections or {}).items()
        }

    @classmethod
    def from_file(cls, path: str | Path) -> "InMemoryDataProvider":
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            raise ValueError(f"Seed file must contain a JSON object of collections: {path}")
        return cls(raw)

    def fetch(self, collection: str, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        rows = self._collections.get(collection, [])
        if not filters:
            return [dict(r) for r in rows]
        return [
            dict(r)
            for r in rows
            if isinstance(r, dict) and all(str(r.get(k)) == str(v) for k, v in filters.items())
        ]

    def fetch_document_progress(self, student_id: str) -> List[Dict[str, Any]]:
        return self.fetch("documentProgress", {"studentId": str(student_id)})


def build_data_provider(settings: Settings) -> DataProvider:
    if settings.DATA_BACKEND == "memory":
        if settings.DATA_SEED_FILE:
            return InMemoryDataProvider.from_file(settings.DATA_SEED_FILE)
        logger.warning("DATA_BACKEND=memory without DATA_SEED_FILE; serving empty collections")
        return InMemoryDataProvider()
    return SheetsDataProvider(settings.DATA_API_URL or "", timeout=settings.DATA_API_TIMEOUT_SEC)
