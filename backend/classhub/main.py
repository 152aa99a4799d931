from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from classhub import __version__
from classhub.core.config import settings
from classhub.api.routes.health import router as health_router
from classhub.api.routes.honor_board import router as honor_board_router
from classhub.api.routes.students import router as students_router
from classhub.api.routes.reports import router as reports_router
from classhub.api.routes.dashboard import router as dashboard_router
from classhub.services.data_provider import DataProviderError

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


def envelope(request_id: str, data: Any = None, error: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return {"request_id": request_id, "data": data, "error": error}


app = FastAPI(
    title=settings.APP_NAME,
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = req_id
    response = await call_next(request)
    response.headers["X-Request-ID"] = req_id
    return response


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    req_id = getattr(request.state, "request_id", str(uuid.uuid4()))

    detail = exc.detail
    if isinstance(detail, dict):
        code = str(detail.get("code") or "HTTP_ERROR")
        message = detail.get("message") or str(detail)
        error = {"code": code, "message": message, "details": detail}
    else:
        error = {"code": "HTTP_ERROR", "message": str(detail)}

    return JSONResponse(
        status_code=exc.status_code,
        content=envelope(request_id=req_id, data=None, error=error),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    req_id = getattr(request.state, "request_id", str(uuid.uuid4()))
    return JSONResponse(
        status_code=422,
        content=envelope(
            request_id=req_id,
            data=None,
            error={
                "code": "VALIDATION_ERROR",
                "message": "Invalid request",
                "details": {"errors": exc.errors()},
            },
        ),
    )


@app.exception_handler(DataProviderError)
async def data_provider_exception_handler(request: Request, exc: DataProviderError):
    req_id = getattr(request.state, "request_id", str(uuid.uuid4()))
    logger.error("Data API failure on %s: %s", exc.action, exc.message)
    return JSONResponse(
        status_code=502,
        content=envelope(
            request_id=req_id,
            data=None,
            error={"code": "DATA_UNAVAILABLE", "message": exc.message, "details": {"action": exc.action}},
        ),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    req_id = getattr(request.state, "request_id", str(uuid.uuid4()))
    logger.exception("Unhandled error (request_id=%s)", req_id)
    return JSONResponse(
        status_code=500,
        content=envelope(
            request_id=req_id,
            data=None,
            error={"code": "INTERNAL_ERROR", "message": str(exc)},
        ),
    )


app.include_router(health_router, prefix="/api")
app.include_router(honor_board_router, prefix="/api")
app.include_router(students_router, prefix="/api")
app.include_router(reports_router, prefix="/api")
app.include_router(dashboard_router, prefix="/api")
