import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)


class UpstreamError(Exception):
    """
    A hosted AI provider (FAL, Gemini, Replicate) failed or returned nothing usable.

    `message` is what the client sees as `error`; the provider's own text goes
    into `details`.
    """

    def __init__(self, message: str, details: Optional[str] = None, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.details = details
        self.status_code = status_code


def error_body(message: str, details: Any = None) -> dict:
    body = {"error": message}
    if details is not None:
        body["details"] = details
    return body


def _field_name(err: dict) -> str:
    loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
    return ".".join(loc) or "body"


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.detail))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    message = f"Missing or invalid field: {_field_name(first)}"
    details = [
        {"field": _field_name(e), "message": e.get("msg", "")}
        for e in errors
    ]
    return JSONResponse(status_code=400, content=error_body(message, details))


async def upstream_exception_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    logger.error("%s %s failed upstream: %s (%s)", request.method, request.url.path, exc.message, exc.details)
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message, exc.details))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(UpstreamError, upstream_exception_handler)
