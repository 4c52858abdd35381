"""Shared test fixtures for all test modules."""

from collections.abc import Iterable
from unittest.mock import MagicMock

import pymongo
import pytest

from moduscope.adapters.sinks.in_memory import InMemorySink
from moduscope.core.events.channels import EventChannels


class FakeMemoryProbe:
    """Memory probe returning scripted readings.

    ``current()`` walks through the given readings and repeats the last one
    once they are exhausted. ``peak()`` is the fixed peak when one was given,
    otherwise the highest reading handed out so far.
    """

    def __init__(self, readings: Iterable[int] = (1024,), peak: int | None = None) -> None:
        self._readings = list(readings) or [0]
        self._index = 0
        self._seen: list[int] = []
        self._peak = peak

    def current(self) -> int:
        value = self._readings[min(self._index, len(self._readings) - 1)]
        self._index += 1
        self._seen.append(value)
        return value

    def peak(self) -> int:
        if self._peak is not None:
            return self._peak
        return max(self._seen or self._readings)


@pytest.fixture
def memory_probe() -> FakeMemoryProbe:
    """Probe with readings that grow, shrink and grow again."""
    return FakeMemoryProbe([1000, 1500, 1200, 4000], peak=8000)


@pytest.fixture
def channels() -> EventChannels:
    return EventChannels()


@pytest.fixture
def sink() -> InMemorySink:
    return InMemorySink()


@pytest.fixture
def mongo_client() -> MagicMock:
    """A MagicMock that passes isinstance checks for pymongo.MongoClient."""
    return MagicMock(spec=pymongo.MongoClient)


@pytest.fixture
def mongo_collection(mongo_client: MagicMock) -> MagicMock:
    """The collection a sink binds to when no write concern is set."""
    return mongo_client.get_database.return_value.get_collection.return_value


@pytest.fixture
def basic_asgi_app():
    """Basic ASGI app fixture that returns 200 OK."""
    from moduscope.adapters.frameworks.asgi import Receive, Scope, Send

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        await send({"type": "http.response.start", "status": 200, "headers": []})
        await send({"type": "http.response.body", "body": b"OK"})

    return app


@pytest.fixture
def asgi_scope():
    """Factory fixture for creating ASGI scope dicts."""
    from moduscope.adapters.frameworks.asgi import Scope

    def _scope(method: str = "GET", path: str = "/test") -> Scope:
        return {
            "type": "http",
            "method": method,
            "path": path,
            "query_string": b"",
            "headers": [],
        }

    return _scope


@pytest.fixture
def asgi_receive():
    async def receive():
        return {"type": "http.request", "body": b""}

    return receive


@pytest.fixture
def asgi_send_capture():
    """Fixture that returns a send callable and a responses list for capture."""

    responses: list[dict[str, object]] = []

    async def send(message: dict[str, object]) -> None:
        responses.append(message)

    return send, responses
