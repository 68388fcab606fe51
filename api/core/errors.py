"""API error taxonomy and the JSON error envelope.

Every error leaves the service as::

    {"statusCode": 409, "status": "CONFLICT", "message": "Conflict detected",
     "details": [{"field": "artistName", "message": "..."}]}

Services raise the ApiError subclasses below; main.py registers the handlers.
"""

from collections.abc import Iterable, Mapping, Sequence
from http import HTTPStatus
from typing import Any, NamedTuple

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

from core.logger import get_logger
from core.wide_event import set_wide_event_fields

logger = get_logger(__name__)

VALIDATION_FAILED = "Validation failed"


class ErrorDetail(NamedTuple):
    """A single field-level problem reported in ``details``."""

    field: str
    message: str


class ApiError(Exception):
    """Base class for errors surfaced directly to the caller."""

    status_code: int = 500
    default_message: str = "An unexpected error occurred."

    def __init__(
        self,
        message: str | None = None,
        details: Sequence[ErrorDetail] | None = None,
    ):
        self.message = message or self.default_message
        self.details = list(details) if details else []
        super().__init__(self.message)


class BadRequestError(ApiError):
    status_code = 400
    default_message = "Bad Request"


class UnauthorizedError(ApiError):
    status_code = 401
    default_message = "Authentication failed"


class NotFoundError(ApiError):
    """Raised when a non-deleted row with the requested id does not exist."""

    status_code = 404
    default_message = "Resource not found"

    def __init__(self, resource: str, resource_id: int):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} not found for id: {resource_id}")


class ConflictError(ApiError):
    """Raised when a write would duplicate a unique key among non-deleted rows."""

    status_code = 409
    default_message = "Conflict detected"


def status_name(status_code: int) -> str:
    """HTTP reason in upper snake case, e.g. 404 -> "NOT_FOUND"."""
    try:
        return HTTPStatus(status_code).name
    except ValueError:
        return "UNKNOWN"


def error_body(
    status_code: int,
    message: str,
    details: Iterable[ErrorDetail] | None = None,
) -> dict[str, Any]:
    body: dict[str, Any] = {
        "statusCode": status_code,
        "status": status_name(status_code),
        "message": message,
    }
    if details:
        body["details"] = [detail._asdict() for detail in details]
    return body


def error_response(
    status_code: int,
    message: str,
    details: Iterable[ErrorDetail] | None = None,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=error_body(status_code, message, details),
        headers=dict(headers) if headers else None,
    )


def describe_validation_errors(
    errors: Sequence[Mapping[str, Any]],
    messages: Mapping[tuple[str, str], str] | None = None,
) -> list[ErrorDetail]:
    """Flatten pydantic/FastAPI error dicts into field-level details.

    ``messages`` maps ``(field, error_type)`` to a friendlier message; value
    errors raised by validators keep their own text without pydantic's
    "Value error, " prefix.
    """
    messages = messages or {}
    details: list[ErrorDetail] = []
    for err in errors:
        error_type = str(err.get("type", ""))
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        field = loc[-1] if loc and error_type != "json_invalid" else "body"

        message = messages.get((field, error_type))
        if message is None and error_type == "value_error":
            ctx_error = (err.get("ctx") or {}).get("error")
            if ctx_error is not None:
                message = str(ctx_error)
        if message is None:
            message = str(err.get("msg", "Invalid value"))

        details.append(ErrorDetail(field=field, message=message))
    return details


async def api_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render ApiError subclasses into the error envelope."""
    if not isinstance(exc, ApiError):
        return error_response(500, ApiError.default_message)

    logger.warning(
        "request.api_error",
        error_type=type(exc).__name__,
        status_code=exc.status_code,
        message=exc.message,
        path=request.url.path,
        method=request.method,
    )
    set_wide_event_fields(error_type=type(exc).__name__, error_message=exc.message)
    return error_response(exc.status_code, exc.message, exc.details)


async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Unknown routes, wrong methods and explicit HTTPExceptions."""
    if not isinstance(exc, StarletteHTTPException):
        return error_response(500, ApiError.default_message)

    message = exc.detail if isinstance(exc.detail, str) else status_name(exc.status_code)
    return error_response(exc.status_code, message, headers=exc.headers)


def make_validation_exception_handler(
    messages: Mapping[tuple[str, str], str] | None = None,
):
    """Build a handler turning FastAPI's 422 into a 400 envelope."""

    async def validation_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        if not isinstance(exc, RequestValidationError):
            return error_response(500, ApiError.default_message)

        details = describe_validation_errors(exc.errors(), messages)
        logger.warning(
            "request.validation_error",
            path=request.url.path,
            method=request.method,
            error_count=len(details),
            fields=[detail.field for detail in details],
        )
        return error_response(400, VALIDATION_FAILED, details)

    return validation_exception_handler
