from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from classhub.api.deps import get_data_provider
from classhub.services.dashboard_service import DASHBOARD_COLLECTIONS, build_dashboard
from classhub.services.data_provider import DataProvider
from classhub.services.periods import parse_iso_date
from classhub.services.snapshot_service import load_snapshot

router = APIRouter(tags=["dashboard"])


@router.get("/dashboard")
def dashboard(
    request: Request,
    date_: Optional[str] = Query(default=None, alias="date"),
    top: int = Query(default=5),
    provider: DataProvider = Depends(get_data_provider),
):
    today = None
    if date_:
        today = parse_iso_date(date_)
        if today is None:
            raise HTTPException(status_code=422, detail=f"Invalid date: {date_!r} (expected YYYY-MM-DD)")

    snap = load_snapshot(provider, DASHBOARD_COLLECTIONS)
    try:
        data = build_dashboard(snap, today=today, top=top)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return {"request_id": request.state.request_id, "data": data.model_dump(), "error": None}
