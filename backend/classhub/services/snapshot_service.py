from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional

from classhub.core.config import settings
from classhub.schemas.records import (
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
from classhub.services.data_provider import DataProvider


@dataclass
class Snapshot:
    """Collections fetched for one request. Never cached: every request reloads."""

    students: List[Student] = field(default_factory=list)
    classes: List[ClassInfo] = field(default_factory=list)
    tasks: List[Task] = field(default_factory=list)
    task_replies: List[TaskReply] = field(default_factory=list)
    behaviors: List[Behavior] = field(default_factory=list)
    attendance: List[Attendance] = field(default_factory=list)
    announcements: List[Announcement] = field(default_factory=list)
    documents: List[Document] = field(default_factory=list)
    document_progress: List[DocumentProgress] = field(default_factory=list)

    def class_by_id(self) -> Dict[str, ClassInfo]:
        return {c.id: c for c in self.classes}

    def student_by_id(self) -> Dict[str, Student]:
        return {s.id: s for s in self.students}


_LOADERS: Dict[str, Callable[[DataProvider], List[Any]]] = {
    "students": lambda p: p.list_students(),
    "classes": lambda p: p.list_classes(),
    "tasks": lambda p: p.list_tasks(),
    "task_replies": lambda p: p.list_task_replies(),
    "behaviors": lambda p: p.list_behaviors(),
    "attendance": lambda p: p.list_attendance(),
    "announcements": lambda p: p.list_announcements(),
    "documents": lambda p: p.list_documents(),
}


def load_snapshot(
    provider: DataProvider,
    collections: Iterable[str],
    *,
    extra: Optional[Dict[str, Callable[[], List[Any]]]] = None,
    max_workers: Optional[int] = None,
) -> Snapshot:
    """Fetch the named collections in parallel.

    ``extra`` maps further Snapshot fields to zero-argument loaders (e.g. one student's
    document progress). The first fetch error propagates once all fetches settle.
    """
    jobs: Dict[str, Callable[[], List[Any]]] = {}
    for name in dict.fromkeys(collections):
        if name not in _LOADERS:
            raise ValueError(f"Unknown collection: {name}")
        jobs[name] = (lambda loader: lambda: loader(provider))(_LOADERS[name])
    for name, fn in (extra or {}).items():
        if name not in Snapshot.__dataclass_fields__:
            raise ValueError(f"Unknown snapshot field: {name}")
        jobs[name] = fn

    snap = Snapshot()
    if not jobs:
        return snap

    workers = max(1, min(len(jobs), int(max_workers or settings.FETCH_MAX_WORKERS)))
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = {name: pool.submit(fn) for name, fn in jobs.items()}
        for name, fut in futures.items():
            setattr(snap, name, fut.result())
    return snap
