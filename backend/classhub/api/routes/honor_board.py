from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from classhub.api.deps import get_data_provider
from classhub.schemas.records import ALL_CLASSES
from classhub.services.data_provider import DataProvider
from classhub.services.honor_board_service import HONOR_BOARD_COLLECTIONS, build_honor_board, rank_students
from classhub.services.snapshot_service import load_snapshot

router = APIRouter(tags=["honor-board"])


@router.get("/honor-board")
def honor_board(
    request: Request,
    class_id: str = Query(default=ALL_CLASSES),
    grade_scoped: bool = Query(default=False),
    provider: DataProvider = Depends(get_data_provider),
):
    snap = load_snapshot(provider, HONOR_BOARD_COLLECTIONS)
    data = build_honor_board(snap, class_id=class_id, grade_scoped=grade_scoped)
    return {"request_id": request.state.request_id, "data": data.model_dump(), "error": None}


@router.get("/honor-board/top")
def honor_board_top(
    request: Request,
    n: int = Query(default=5),
    provider: DataProvider = Depends(get_data_provider),
):
    snap = load_snapshot(provider, ("students", "classes"))
    try:
        ranked = rank_students(snap.students, snap, n)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return {"request_id": request.state.request_id, "data": [r.model_dump() for r in ranked], "error": None}
