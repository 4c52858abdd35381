"""Python logging handler adapter for moduscope sinks.

This adapter bridges Python's standard library logging module to any
LogSinkPort, so application logs end up in the same sink as request logs.
"""

import logging
import traceback
from collections.abc import Callable
from typing import Any

from moduscope.adapters.logging_context import get_log_context
from moduscope.core.models import LogEntry
from moduscope.core.ports import LogSinkPort

# Standard LogRecord attributes that should not be treated as extra fields
_STANDARD_LOGRECORD_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)

_DEFAULT_INCLUDE_ATTRS = ["module", "funcName", "lineno", "pathname"]


class SinkHandler(logging.Handler):
    """Logging handler that writes log records to a sink.

    Example:
        ```python
        from moduscope import InMemorySink, SinkHandler

        sink = InMemorySink()
        logging.getLogger().addHandler(SinkHandler(sink))
        ```
    """

    def __init__(
        self,
        sink: LogSinkPort,
        include_attrs: list[str] | None = None,
        context_provider: Callable[[], dict[str, Any]] | None = get_log_context,
        level: int = logging.NOTSET,
    ) -> None:
        """Initialize the handler with a sink.

        Args:
            sink: Destination implementing LogSinkPort.
            include_attrs: LogRecord attributes to include. Defaults to
                ["module", "funcName", "lineno", "pathname"].
            context_provider: Callable returning extra fields merged into
                every record; the request log context by default.
            level: Minimum level handled.
        """
        super().__init__(level)
        self._sink = sink
        self._include_attrs = include_attrs or _DEFAULT_INCLUDE_ATTRS
        self._context_provider = context_provider

    def _build_entry(self, record: logging.LogRecord) -> LogEntry:
        attr_mapping: dict[str, Any] = {
            "module": record.name,
            "funcName": record.funcName or "",
            "lineno": record.lineno,
            "pathname": record.pathname,
        }
        extra: dict[str, Any] = {
            key: attr_mapping[key] for key in self._include_attrs if key in attr_mapping
        }
        if self._context_provider is not None:
            extra.update(self._context_provider())

        # Extra values passed via the logging call
        for key, value in record.__dict__.items():
            if key not in _STANDARD_LOGRECORD_ATTRS and isinstance(
                value, (str, int, float, bool)
            ):
                extra[key] = value

        if record.exc_info:
            exc_type, exc_value, exc_tb = record.exc_info
            if exc_type is not None:
                extra["exc_type"] = exc_type.__name__
            if exc_value is not None:
                extra["exc_message"] = str(exc_value)
            if exc_tb is not None:
                extra["exc_traceback"] = "".join(
                    traceback.format_exception(exc_type, exc_value, exc_tb)
                )

        return LogEntry(
            timestamp=record.created,
            level=record.levelname,
            message=record.getMessage(),
            extra=extra,
        )

    def emit(self, record: logging.LogRecord) -> None:
        """Write a log record to the sink."""
        self._sink.write(self._build_entry(record))


def configure_logging(
    sink: LogSinkPort, level: int = logging.INFO, logger_name: str = "moduscope"
) -> SinkHandler:
    """Attach a SinkHandler to a logger (the package logger by default).

    Safe to call repeatedly; an earlier SinkHandler on the logger is replaced.
    """
    logger = logging.getLogger(logger_name)
    for existing in [h for h in logger.handlers if isinstance(h, SinkHandler)]:
        logger.removeHandler(existing)
    handler = SinkHandler(sink, level=level)
    logger.addHandler(handler)
    logger.setLevel(level)
    return handler
