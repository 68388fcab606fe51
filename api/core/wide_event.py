"""Request-scoped wide event for canonical log lines.

Services add context (resource ids, outcomes) while a request runs and
RequestTimingMiddleware emits everything as one ``request.completed`` line.

Usage:
    from core.wide_event import set_wide_event_fields

    set_wide_event_fields(artist_id=artist.id)
    set_wide_event_nested("conflict", resource="track", fields=["title"])
"""

from contextvars import ContextVar
from typing import Any

_wide_event: ContextVar[dict[str, Any]] = ContextVar("wide_event")


def init_wide_event() -> dict[str, Any]:
    """Start a fresh event dict for the current async context."""
    event: dict[str, Any] = {}
    _wide_event.set(event)
    return event


def get_wide_event() -> dict[str, Any]:
    """Get the current wide event dict. Returns empty dict if not initialized."""
    try:
        return _wide_event.get()
    except LookupError:
        return {}


def set_wide_event_fields(**kwargs: Any) -> None:
    """Set multiple fields on the current wide event.

    No-op outside a request (CLI, migrations, unit tests).
    """
    event = get_wide_event()
    if event:
        event.update(kwargs)


def set_wide_event_nested(category: str, **kwargs: Any) -> None:
    """Set fields under a nested key, e.g. {"conflict": {"resource": "artist"}}.

    No-op outside a request.
    """
    event = get_wide_event()
    if not event:
        return
    event.setdefault(category, {}).update(kwargs)


def clear_wide_event() -> None:
    """Reset the event once RequestTimingMiddleware has emitted it."""
    _wide_event.set({})
