"""Request timing and operation tracking."""

import os
import time
import uuid
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from core.logger import get_logger
from core.wide_event import (
    clear_wide_event,
    get_wide_event,
    init_wide_event,
    set_wide_event_fields,
)

logger = get_logger(__name__)

SERVICE_NAME = os.getenv("SERVICE_NAME", "prsk-master-api")
SERVICE_VERSION = os.getenv("SERVICE_VERSION", "0.1.0")

# Requests slower than this are always logged
SLOW_REQUEST_THRESHOLD_MS = 1000

# Inbound request ids longer than this are replaced with a fresh uuid
MAX_REQUEST_ID_LENGTH = 128

P = ParamSpec("P")
R = TypeVar("R")


def _request_id_from(scope: Scope) -> str:
    """Reuse a caller-supplied X-Request-Id when it is sane, else mint one."""
    for name, value in scope.get("headers", []):
        if name == b"x-request-id":
            candidate = value.decode("latin-1").strip()
            if candidate and len(candidate) <= MAX_REQUEST_ID_LENGTH:
                return candidate
    return str(uuid.uuid4())


def _route_template(scope: Scope) -> str:
    route = scope.get("route")
    return getattr(route, "path", None) or scope.get("path", "")


class RequestTimingMiddleware:
    """Times each request and emits the wide event at request end.

    - One ``request.completed`` line per request (canonical log line)
    - Always emitted for errors and slow requests, skipped for fast 2xx/3xx
    - Adds x-request-duration-ms and x-request-id response headers
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start_time = time.perf_counter()
        client = scope.get("client")
        request_id = _request_id_from(scope)

        init_wide_event().update(
            service_name=SERVICE_NAME,
            service_version=SERVICE_VERSION,
            request_id=request_id,
            http_method=scope.get("method", "UNKNOWN"),
            http_path=scope.get("path", ""),
            http_client_ip=client[0] if client else "unknown",
        )

        response_status: int | None = None

        def elapsed_ms() -> float:
            return (time.perf_counter() - start_time) * 1000

        def finish(emit: bool, **fields: object) -> None:
            event = get_wide_event()
            event.update(
                http_route=_route_template(scope),
                duration_ms=round(elapsed_ms(), 2),
                **fields,
            )
            if emit:
                logger.info("request.completed", **event)
            clear_wide_event()

        async def send_wrapper(message: Message) -> None:
            nonlocal response_status

            if message["type"] == "http.response.start":
                response_status = int(message.get("status", 0))
                headers: list[tuple[bytes, bytes]] = list(message.get("headers", []))
                headers.append((b"x-request-duration-ms", f"{elapsed_ms():.2f}".encode()))
                headers.append((b"x-request-id", request_id.encode("latin-1")))
                message["headers"] = headers

            elif message["type"] == "http.response.body" and not message.get(
                "more_body", False
            ):
                failed = response_status is None or response_status >= 400
                finish(
                    failed or elapsed_ms() > SLOW_REQUEST_THRESHOLD_MS,
                    http_status_code=response_status,
                    outcome="error" if failed else "success",
                )

            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as exc:
            finish(True, outcome="exception", exception_type=type(exc).__name__)
            raise


def track_operation(
    operation_name: str,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Record a business operation's name, duration and outcome on the wide event.

    Usage:
        @track_operation("artist_create")
        async def create_artist(db, request): ...
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            start_time = time.perf_counter()
            success = False
            try:
                result = await func(*args, **kwargs)
                success = True
                return result
            finally:
                duration_ms = (time.perf_counter() - start_time) * 1000
                set_wide_event_fields(
                    operation=operation_name,
                    operation_success=success,
                    operation_duration_ms=round(duration_ms, 2),
                )

        return wrapper

    return decorator
