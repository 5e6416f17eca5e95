"""JSON envelope and exception translation for the HTTP surface.

Every response leaves the service as ``{"success", "message", "data"?,
"errors"?}``. Route handlers build success envelopes with ``envelope()``;
failures propagate as exceptions and are translated once, here.
"""

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import (
    ExpectedVersionError,
    InvalidOperationError,
    ObjectNotFoundError,
    ValidationError,
)
from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from shared.errors import InsufficientStock, MarketplaceError
from shared.logging import add_context, clear_context

logger = structlog.get_logger(__name__)

_HTTP_MESSAGES = {
    404: "Not found",
    405: "Method not allowed",
}


def envelope(message: str, data: Any = None, status_code: int = 200, errors: Any = None) -> JSONResponse:
    content: dict[str, Any] = {"success": status_code < 400, "message": message}
    if data is not None:
        content["data"] = jsonable_encoder(data)
    if errors:
        content["errors"] = jsonable_encoder(errors)
    return JSONResponse(status_code=status_code, content=content)


def parse_body(model: type[BaseModel], payload: Any) -> BaseModel:
    """Validate a raw JSON body against ``model`` for routes whose body shape depends on the query."""
    try:
        return model.model_validate(payload if payload is not None else {})
    except SchemaValidationError as exc:
        raise RequestValidationError(exc.errors()) from exc


def first_message(messages: Any, default: str = "Validation failed") -> str:
    """Pick the first human readable message out of a Protean error payload."""
    if isinstance(messages, dict):
        for value in messages.values():
            if isinstance(value, (list, tuple)) and value:
                return str(value[0])
            if value:
                return str(value)
    if isinstance(messages, (list, tuple)) and messages:
        return str(messages[0])
    if isinstance(messages, str) and messages:
        return messages
    return default


async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    if isinstance(exc, InsufficientStock):
        return envelope(exc.message, status_code=400, errors={"out_of_stock_items": exc.lines})
    return envelope(first_message(exc.messages), status_code=400, errors=exc.messages)


async def _request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body") or "body"
        errors.setdefault(location, []).append(error.get("msg", "Invalid value"))
    return envelope("Validation failed", status_code=400, errors=errors)


async def _not_found(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    message = str(exc.args[0]) if exc.args and isinstance(exc.args[0], str) else "Not found"
    return envelope(message, status_code=404)


async def _invalid_operation(request: Request, exc: InvalidOperationError) -> JSONResponse:
    return envelope(first_message(exc.args[0] if exc.args else None, "Invalid operation"), status_code=400)


async def _version_conflict(request: Request, exc: ExpectedVersionError) -> JSONResponse:
    logger.warning("Concurrent modification rejected", path=request.url.path)
    return envelope("The resource was modified concurrently, please retry", status_code=409)


async def _marketplace_error(request: Request, exc: MarketplaceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Request failed", path=request.url.path, error=exc.message)
    return envelope(exc.message, status_code=exc.status_code)


async def _persistence_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Persistence failure", path=request.url.path, method=request.method)
    return envelope("Internal server error", status_code=500)


async def _http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = _HTTP_MESSAGES.get(exc.status_code, str(exc.detail))
    return envelope(message, status_code=exc.status_code)


async def _unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", path=request.url.path, method=request.method)
    return envelope("Internal server error", status_code=500)


def register_envelope_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, _validation_error)
    app.add_exception_handler(RequestValidationError, _request_validation_error)
    app.add_exception_handler(ObjectNotFoundError, _not_found)
    app.add_exception_handler(InvalidOperationError, _invalid_operation)
    app.add_exception_handler(ExpectedVersionError, _version_conflict)
    app.add_exception_handler(MarketplaceError, _marketplace_error)
    app.add_exception_handler(SQLAlchemyError, _persistence_error)
    app.add_exception_handler(StarletteHTTPException, _http_exception)
    app.add_exception_handler(Exception, _unexpected_error)


def domain_context_middleware(route_domains: dict):
    """Build an HTTP middleware that pushes the Protean domain owning the path.

    ``route_domains`` maps URL prefixes to domains; the longest matching
    prefix wins. Paths without a domain (health, docs) pass straight through.
    """
    prefixes = sorted(route_domains, key=len, reverse=True)

    def resolve(path: str):
        for prefix in prefixes:
            if path == prefix or path.startswith(prefix + "/"):
                return route_domains[prefix]
        return None

    async def middleware(request: Request, call_next):
        add_context(method=request.method, path=request.url.path)
        try:
            domain = resolve(request.url.path)
            if domain is None:
                return await call_next(request)
            with domain.domain_context():
                return await call_next(request)
        finally:
            clear_context()

    return middleware
