"""Translate domain and framework errors into the JSON error envelope."""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from partstore.shared.errors import PartStoreError

logger = structlog.get_logger(__name__)


def error_response(status_code: int, message: str, errors=None) -> JSONResponse:
    body = {"success": False, "error": message}
    if errors:
        body["errors"] = errors
    return JSONResponse(status_code=status_code, content=body)


def _first_message(messages: dict) -> str:
    for value in messages.values():
        if isinstance(value, list) and value:
            return str(value[0])
        if value:
            return str(value)
    return "Validation failed"


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    messages = exc.messages if isinstance(exc.messages, dict) else {"error": [str(exc.messages)]}
    return error_response(400, _first_message(messages), messages)


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = {}
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"] if part not in ("body", "query", "path"))
        errors.setdefault(field or "request", []).append(err["msg"])
    return error_response(400, "Validation failed", errors)


async def not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    message = exc.args[0] if exc.args and isinstance(exc.args[0], str) else "Resource not found"
    return error_response(404, message)


async def version_conflict_handler(request: Request, exc: ExpectedVersionError) -> JSONResponse:
    logger.warning("version_conflict", path=request.url.path, error=str(exc))
    return error_response(409, "The record was changed by another request, please retry")


async def partstore_error_handler(request: Request, exc: PartStoreError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request_failed", path=request.url.path, error=exc.message)
    return error_response(exc.status_code, exc.message, exc.errors)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", path=request.url.path, method=request.method)
    return error_response(500, "Internal server error")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(ObjectNotFoundError, not_found_handler)
    app.add_exception_handler(ExpectedVersionError, version_conflict_handler)
    app.add_exception_handler(PartStoreError, partstore_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
