"""Step definitions for the request lifecycle feature."""

from dataclasses import dataclass, field
from typing import Any

import pytest
from fastapi.testclient import TestClient
from pytest_bdd import given, parsers, then, when

from moduscope.adapters.frameworks.asgi import ASGILifecycleMiddleware
from moduscope.adapters.sinks.in_memory import InMemorySink
from moduscope.application import Application
from tests.conftest import FakeMemoryProbe
from usuarios import Module


@dataclass
class LifecycleScenarioContext:
    modules: list[Any] = field(default_factory=list)
    sink: InMemorySink | None = None
    middleware: ASGILifecycleMiddleware | None = None
    response: Any = None


@pytest.fixture
def ctx() -> LifecycleScenarioContext:
    """Fresh scenario context for each test."""
    return LifecycleScenarioContext()


@given("the usuarios module is loaded")
def step_usuarios_module(ctx: LifecycleScenarioContext) -> None:
    ctx.modules.append(Module())


@given("an in-memory request log sink")
def step_memory_sink(ctx: LifecycleScenarioContext) -> None:
    ctx.sink = InMemorySink()


@when(parsers.parse('a GET request is made to "{path}"'))
def step_get_request(ctx: LifecycleScenarioContext, path: str) -> None:
    app = Application.from_modules(
        ctx.modules,
        sink=ctx.sink,
        probe=FakeMemoryProbe([4096, 8192, 12288, 16384], peak=65536),
    )
    ctx.middleware = app.create_asgi_app()
    ctx.response = TestClient(ctx.middleware).get(path)


@then(parsers.parse("the response status is {code:d}"))
def step_response_status(ctx: LifecycleScenarioContext, code: int) -> None:
    assert ctx.response.status_code == code


@then(parsers.parse('the response names the "{action}" action'))
def step_response_action(ctx: LifecycleScenarioContext, action: str) -> None:
    assert ctx.response.json()["action"] == action


@then(parsers.parse('the application events are "{names}"'))
def step_application_events(ctx: LifecycleScenarioContext, names: str) -> None:
    events = ctx.middleware.last_report["memory"]["event"]["application"]
    assert [e["name"] for e in events] == [n.strip() for n in names.split(",")]


@then(parsers.parse("the memory peak is {peak:d} bytes"))
def step_memory_peak(ctx: LifecycleScenarioContext, peak: int) -> None:
    assert ctx.middleware.last_report["memory"]["memory"] == peak


@then(parsers.parse('the request log record has level "{level}"'))
def step_record_level(ctx: LifecycleScenarioContext, level: str) -> None:
    assert ctx.sink.records[-1]["level"] == level


@then("the request log record carries the memory peak")
def step_record_memory(ctx: LifecycleScenarioContext) -> None:
    record = ctx.sink.records[-1]
    assert record["extra"]["memory_peak"] == ctx.middleware.last_report["memory"]["memory"]
