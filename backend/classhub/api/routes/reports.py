from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from classhub.api.deps import get_data_provider
from classhub.services.data_provider import DataProvider
from classhub.services.periods import ReportPeriod, month_of, week_of
from classhub.services.report_service import REPORT_COLLECTIONS, build_period_report
from classhub.services.snapshot_service import load_snapshot

router = APIRouter(tags=["reports"])


def _report(request: Request, provider: DataProvider, class_id: str, period: ReportPeriod):
    snap = load_snapshot(provider, REPORT_COLLECTIONS)
    data = build_period_report(snap, class_id, period)
    return {"request_id": request.state.request_id, "data": data.model_dump(), "error": None}


@router.get("/reports/weekly")
def weekly_report(
    request: Request,
    class_id: str = Query(..., min_length=1),
    date_: Optional[str] = Query(default=None, alias="date"),
    provider: DataProvider = Depends(get_data_provider),
):
    try:
        period = week_of(date_ or date.today())
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _report(request, provider, class_id, period)


@router.get("/reports/monthly")
def monthly_report(
    request: Request,
    class_id: str = Query(..., min_length=1),
    month: Optional[str] = Query(default=None),
    provider: DataProvider = Depends(get_data_provider),
):
    try:
        period = month_of(month or date.today().strftime("%Y-%m"))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _report(request, provider, class_id, period)
