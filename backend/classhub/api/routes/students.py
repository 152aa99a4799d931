from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from classhub.api.deps import get_data_provider
from classhub.services.data_provider import DataProvider
from classhub.services.snapshot_service import load_snapshot
from classhub.services.student_service import (
    PROFILE_COLLECTIONS,
    TASK_LIST_COLLECTIONS,
    build_attendance_history,
    build_student_profile,
    build_student_tasks,
)

router = APIRouter(tags=["students"])


def _not_found(student_id: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"Student not found: {student_id}")


@router.get("/students/{student_id}/profile")
def student_profile(
    request: Request,
    student_id: str,
    provider: DataProvider = Depends(get_data_provider),
):
    snap = load_snapshot(
        provider,
        PROFILE_COLLECTIONS,
        extra={
            "documents": provider.list_documents,
            "document_progress": lambda: provider.list_document_progress(student_id),
        },
    )
    data = build_student_profile(snap, student_id)
    if data is None:
        raise _not_found(student_id)
    return {"request_id": request.state.request_id, "data": data.model_dump(), "error": None}


@router.get("/students/{student_id}/tasks")
def student_tasks(
    request: Request,
    student_id: str,
    provider: DataProvider = Depends(get_data_provider),
):
    snap = load_snapshot(provider, TASK_LIST_COLLECTIONS)
    data = build_student_tasks(snap, student_id)
    if data is None:
        raise _not_found(student_id)
    return {"request_id": request.state.request_id, "data": data.model_dump(), "error": None}


@router.get("/students/{student_id}/attendance")
def student_attendance(
    request: Request,
    student_id: str,
    start: Optional[str] = Query(default=None),
    end: Optional[str] = Query(default=None),
    provider: DataProvider = Depends(get_data_provider),
):
    if provider.get_student(student_id) is None:
        raise _not_found(student_id)
    try:
        data = build_attendance_history(provider.list_attendance(student_id=student_id), student_id, start=start, end=end)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return {"request_id": request.state.request_id, "data": data.model_dump(), "error": None}
