"""FastAPI application entry point."""

import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import settings
from .routes import documents, funders, health, loans
from .schemas.error import ErrorResponse
from .services.disposition import (
    DispositionError,
    DocumentNotFoundError,
    EmptyCategoryError,
    EmptyUploadError,
    InvalidRequirementError,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Application startup/shutdown lifecycle."""
    from .services.requirements import init_requirement_resolver
    from .services.storage import init_storage_service

    init_requirement_resolver(settings)
    init_storage_service(settings)
    yield


app = FastAPI(
    title="DSCR Document Package API",
    description="Funder requirement tracking and document completeness for DSCR loans",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_HOSTS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)

_HTTP_STATUS_TITLES: dict[int, str] = {
    400: "Bad Request",
    404: "Not Found",
    409: "Conflict",
    413: "Payload Too Large",
    422: "Unprocessable Entity",
    500: "Internal Server Error",
    502: "Bad Gateway",
}

# Stale-state failures are conflicts; malformed choices are unprocessable.
_DISPOSITION_STATUS: dict[type[DispositionError], int] = {
    InvalidRequirementError: 409,
    DocumentNotFoundError: 409,
    EmptyCategoryError: 422,
    EmptyUploadError: 422,
}


def _build_error(
    status_code: int, detail: str, request_id: str, code: str | None = None
) -> ErrorResponse:
    return ErrorResponse(
        type="about:blank",
        title=_HTTP_STATUS_TITLES.get(status_code, "Error"),
        status=status_code,
        detail=detail,
        code=code,
        request_id=request_id,
    )


def _request_id(request: Request) -> str:
    return request.headers.get("x-request-id", str(uuid.uuid4()))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Convert HTTPException to RFC 7807 Problem Details."""
    body = _build_error(exc.status_code, str(exc.detail), _request_id(request))
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


@app.exception_handler(DispositionError)
async def disposition_exception_handler(request: Request, exc: DispositionError):
    """Rejected upload disposition -> Problem Details carrying the error code."""
    status_code = _DISPOSITION_STATUS.get(type(exc), 422)
    body = _build_error(status_code, str(exc), _request_id(request), code=exc.code)
    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Convert Pydantic validation errors to RFC 7807 Problem Details."""
    body = _build_error(422, str(exc.errors()), _request_id(request))
    return JSONResponse(status_code=422, content=body.model_dump())


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Catch-all for unhandled exceptions -- log and return 500."""
    request_id = _request_id(request)
    logger.exception("Unhandled exception (request_id=%s)", request_id)
    body = _build_error(500, "An unexpected error occurred.", request_id)
    return JSONResponse(status_code=500, content=body.model_dump())


# Include routers
app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(funders.router, prefix="/api", tags=["requirements"])
app.include_router(loans.router, prefix="/api/loans", tags=["loans"])
app.include_router(documents.router, prefix="/api", tags=["documents"])


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint"""
    return {"message": "DSCR Document Package API"}
