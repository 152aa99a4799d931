from fastapi import APIRouter, Request

from classhub import __version__
from classhub.core.config import settings


router = APIRouter(tags=["health"])


@router.get("/health")
def health(request: Request):
    data = {"status": "ok", "version": __version__, "data_backend": settings.DATA_BACKEND}
    return {"request_id": request.state.request_id, "data": data, "error": None}
