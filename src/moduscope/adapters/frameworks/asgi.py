"""ASGI middleware that drives the request lifecycle events.

The middleware triggers ``route`` before the wrapped application runs,
``dispatch.error`` when it raises, and ``finish`` once the response is
complete. Listeners (such as a Profiler) observe these events through the
EventChannels they subscribed to. A request log record is then written to
the configured sink.

Every event carries the ``request_id`` param. The middleware also stores
the request id and whether events are enabled in the ASGI ``state`` of the
request, so endpoints further down can tag their own events.
"""

import fnmatch
import time
import uuid
from collections.abc import Callable, Coroutine
from typing import Any

from moduscope.adapters.logging_context import clear_log_context, set_log_context
from moduscope.core.collectors.memory import MemoryCollector
from moduscope.core.collectors.profiler import FINISH_EVENT, Profiler
from moduscope.core.events.channels import EventChannels
from moduscope.core.logs import log, log_exception
from moduscope.core.ports import LogSinkPort

# ASGI type aliases
Scope = dict[str, Any]
Receive = Callable[[], Coroutine[Any, Any, dict[str, Any]]]
Send = Callable[[dict[str, Any]], Coroutine[Any, Any, None]]
ASGIApp = Callable[[Scope, Receive, Send], Coroutine[Any, Any, None]]

ROUTE_EVENT = "route"
DISPATCH_ERROR_EVENT = "dispatch.error"

# Keys of scope["state"] set for every http request
STATE_EVENTS_ENABLED = "moduscope.events"
STATE_REQUEST_ID = "moduscope.request_id"

# Request log level by status class; anything else logs as INFO
STATUS_CLASS_LEVELS = {4: "WARN", 5: "ERROR"}


def request_state(scope: Scope) -> dict[str, Any]:
    """Return the mutable per-request state dict of an ASGI scope."""
    return scope.setdefault("state", {})


class _ResponseRecorder:
    """Send wrapper remembering the response status and body size."""

    def __init__(self, send: Send) -> None:
        self._send = send
        self.status = 0
        self.body_size = 0

    async def __call__(self, message: dict[str, Any]) -> None:
        if message["type"] == "http.response.start":
            self.status = message["status"]
        elif message["type"] == "http.response.body":
            self.body_size += len(message.get("body", b""))
        await self._send(message)


class ASGILifecycleMiddleware:
    """ASGI middleware that fires lifecycle events and logs each request.

    Args:
        app: The ASGI application to wrap.
        channels: Event channels the lifecycle events are triggered on.
        sink: Destination for request log records (optional).
        profiler_factory: Called with the request id to create that
            request's Profiler. It is attached to the channels for the
            duration of the request and its report is kept in
            ``last_report``.
        exclude_paths: Paths (exact or fnmatch patterns) that bypass events
            and logging.
        request_id_header: Header carrying the request id; a UUID is used
            when it is missing.
    """

    def __init__(
        self,
        app: ASGIApp,
        channels: EventChannels,
        sink: LogSinkPort | None = None,
        profiler_factory: Callable[[str], Profiler] | None = None,
        exclude_paths: list[str] | None = None,
        request_id_header: str = "X-Request-ID",
    ) -> None:
        self.app = app
        self.channels = channels
        self.sink = sink
        self.profiler_factory = profiler_factory
        self.exclude_paths = exclude_paths or []
        self.request_id_header = request_id_header
        self.last_report: dict[str, Any] | None = None

    def _path_excluded(self, path: str) -> bool:
        return any(fnmatch.fnmatch(path, pattern) for pattern in self.exclude_paths)

    def _request_id(self, scope: Scope) -> str:
        wanted = self.request_id_header.lower().encode()
        for name, value in scope.get("headers", []):
            if name.lower() == wanted:
                return value.decode("utf-8", errors="replace")
        return str(uuid.uuid4())

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return
        if self._path_excluded(scope["path"]):
            request_state(scope)[STATE_EVENTS_ENABLED] = False
            await self.app(scope, receive, send)
            return

        started = time.perf_counter()
        request_id = self._request_id(scope)
        state = request_state(scope)
        state[STATE_EVENTS_ENABLED] = True
        state[STATE_REQUEST_ID] = request_id
        params = {"request_id": request_id, "method": scope["method"], "path": scope["path"]}
        response = _ResponseRecorder(send)
        failure: Exception | None = None

        profiler = self.profiler_factory(request_id) if self.profiler_factory else None
        if profiler is not None:
            profiler.attach(self.channels)
        set_log_context(request_id=request_id)
        try:
            self.channels.trigger(ROUTE_EVENT, target=self, params=params)
            try:
                await self.app(scope, receive, response)
            except Exception as e:
                log_exception(
                    f"Unhandled error in {scope['method']} {scope['path']}",
                    request_id=request_id,
                )
                failure = e
                self.channels.trigger(
                    DISPATCH_ERROR_EVENT, target=self, params={**params, "exception": e}
                )

            request_data: dict[str, Any] = {
                **params,
                "status_code": 500 if failure is not None else response.status,
                "response_body_size": response.body_size,
                "duration_ms": (time.perf_counter() - started) * 1000,
            }
            self.channels.trigger(FINISH_EVENT, target=self, params=request_data)
            if profiler is not None:
                self.last_report = profiler.report()
                request_data.update(self._memory_summary(profiler))
            if failure is not None:
                request_data["exception"] = f"{type(failure).__name__}: {failure!s}"
            self._write_log_entry(request_data)
        finally:
            clear_log_context()
            if profiler is not None:
                profiler.detach()

        if failure is not None:
            raise failure

    @staticmethod
    def _memory_summary(profiler: Profiler) -> dict[str, Any]:
        collector = profiler.get_collector(MemoryCollector.name)
        if not isinstance(collector, MemoryCollector) or collector.get_memory() is None:
            return {}
        return {
            "memory_peak": collector.get_memory(),
            "memory_end": collector.data.get("end"),
        }

    def _write_log_entry(self, request_data: dict[str, Any]) -> None:
        if self.sink is None:
            return
        status = request_data["status_code"]
        level = STATUS_CLASS_LEVELS.get(status // 100, "INFO")
        self.sink.write(
            log(level, f"{request_data['method']} {request_data['path']}", **request_data)
        )
