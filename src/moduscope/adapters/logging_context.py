"""Request-scoped logging context.

Values set here are attached to every record the SinkHandler writes while
the context is active, e.g. the request id set by the ASGI middleware.
"""

from contextvars import ContextVar
from typing import Any

_log_context: ContextVar[dict[str, Any] | None] = ContextVar(
    "moduscope_log_context", default=None
)


def get_log_context() -> dict[str, Any]:
    """Return a copy of the current context."""
    return dict(_log_context.get() or {})


def set_log_context(**values: Any) -> None:
    """Replace the current context with values."""
    _log_context.set(dict(values))


def update_log_context(**values: Any) -> None:
    """Add values to the current context."""
    _log_context.set({**(_log_context.get() or {}), **values})


def clear_log_context() -> None:
    _log_context.set(None)
