"""
main.py — FastAPI application for the inquiry assignment service

Wires middleware, error handlers and routers. Route logic lives in
routers/, business logic in services/ and assignments/.

Business Rules:
- Every response carries X-Request-ID (8 chars) and baseline security headers
- Every error response is an ErrorResponse with a stable `code`
- Requests are logged with method, path, status and duration
- Schema creation is left to Alembic (alembic upgrade head)

Called by: uvicorn (app.main:app)
Depends on: config, logging_config, rate_limit, routers/*
"""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from .config import settings
from .logging_config import setup_logging
from .rate_limit import limiter
from .routers import assignments, directory, items, workload
from .schemas.errors import RATE_LIMITED, SERVER, VALIDATION, ErrorResponse, code_for_status
from .schemas.responses import HealthResponse


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("Inquiry assignment service starting", version=settings.app_version)
    yield
    logger.info("Inquiry assignment service stopped")


app = FastAPI(title="Inquiry Assignments", version=settings.app_version, lifespan=lifespan)
app.state.limiter = limiter
app.add_middleware(SessionMiddleware, secret_key=settings.secret_key, same_site="lax")


_SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    request_id = uuid.uuid4().hex[:8]
    request.state.request_id = request_id
    start = time.perf_counter()
    with logger.contextualize(request_id=request_id):
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.debug(
            "{} {} -> {} ({:.0f}ms)", request.method, request.url.path, response.status_code, elapsed_ms
        )
    response.headers["X-Request-ID"] = request_id
    for header, value in _SECURITY_HEADERS.items():
        response.headers.setdefault(header, value)
    return response


def _error(request: Request, status_code: int, message: str, code: str, detail=None) -> JSONResponse:
    body = ErrorResponse(
        error=message,
        status_code=status_code,
        code=code,
        request_id=getattr(request.state, "request_id", ""),
        detail=detail,
    )
    return JSONResponse(body.model_dump(exclude_none=True), status_code=status_code)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    code = (exc.headers or {}).get("X-Error-Code") or code_for_status(exc.status_code)
    return _error(request, exc.status_code, str(exc.detail), code)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    detail = [
        {"loc": list(err.get("loc", [])), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]
    return _error(request, 422, "Validation error", VALIDATION, detail)


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return _error(request, 429, f"Rate limit exceeded: {exc.detail}", RATE_LIMITED)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on {} {}", request.method, request.url.path)
    return _error(request, 500, "Internal server error", SERVER)


app.include_router(items.router)
app.include_router(directory.router)
app.include_router(workload.router)
app.include_router(assignments.router)


@app.get("/health", response_model=HealthResponse)
async def health():
    return {"status": "ok", "version": settings.app_version}
