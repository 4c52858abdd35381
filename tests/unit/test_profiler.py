"""Tests for Profiler."""

from typing import Any

import pytest

from moduscope.core.collectors.base import AbstractCollector
from moduscope.core.collectors.memory import MemoryCollector
from moduscope.core.collectors.profiler import Profiler
from moduscope.core.events.channels import EventChannels
from moduscope.core.events.models import EventContext
from tests.conftest import FakeMemoryProbe


class RecordingCollector(AbstractCollector):
    """Collector that records the order in which collect() ran."""

    def __init__(self, name: str, priority: int, calls: list[str]) -> None:
        super().__init__()
        self.name = name
        self.priority = priority
        self._calls = calls

    def collect(self, context: EventContext) -> None:
        self._calls.append(self.name)
        self.data["collected"] = context.name


@pytest.mark.core
class TestProfiler:
    """Tests for collector registration and ordering."""

    def test_duplicate_collector_raises(self) -> None:
        profiler = Profiler([MemoryCollector(FakeMemoryProbe())])
        with pytest.raises(ValueError, match="already registered"):
            profiler.add_collector(MemoryCollector(FakeMemoryProbe()))

    def test_get_collector_by_name(self) -> None:
        collector = MemoryCollector(FakeMemoryProbe())
        profiler = Profiler([collector])
        assert profiler.get_collector("memory") is collector
        assert profiler.get_collector("time") is None

    def test_collect_runs_by_descending_priority(self) -> None:
        calls: list[str] = []
        profiler = Profiler(
            [
                RecordingCollector("low", 1, calls),
                RecordingCollector("high", 100, calls),
                RecordingCollector("mid", 50, calls),
            ]
        )

        profiler.collect(EventContext(name="finish", timestamp=0.0))

        assert calls == ["high", "mid", "low"]

    def test_collect_event_skips_plain_collectors(self) -> None:
        calls: list[str] = []
        memory = MemoryCollector(FakeMemoryProbe([64]))
        profiler = Profiler([memory, RecordingCollector("plain", 1, calls)])

        profiler.collect_event("application", EventContext(name="route", timestamp=0.0))

        assert memory.has_event_memory() is True
        assert calls == []

    def test_report_is_a_snapshot(self) -> None:
        memory = MemoryCollector(FakeMemoryProbe([64], peak=128))
        profiler = Profiler([memory])
        profiler.collect(EventContext(name="finish", timestamp=0.0))

        report: dict[str, Any] = profiler.report()
        report["memory"]["memory"] = 0

        assert memory.get_memory() == 128


@pytest.mark.core
class TestProfilerAttach:
    """Tests for wiring a profiler to event channels."""

    def test_events_are_recorded_under_application(self, channels: EventChannels) -> None:
        memory = MemoryCollector(FakeMemoryProbe([10, 30, 35]))
        Profiler([memory]).attach(channels)

        channels.trigger("route", target="app")
        channels.trigger("dispatch", target="app")

        names = [e["name"] for e in memory.get_application_event_memory()]
        assert names == ["route", "dispatch"]

    def test_finish_runs_collect(self, channels: EventChannels) -> None:
        memory = MemoryCollector(FakeMemoryProbe([10], peak=99))
        Profiler([memory]).attach(channels)

        channels.trigger("finish")

        assert memory.get_memory() == 99
        assert [e["name"] for e in memory.get_application_event_memory()] == ["finish"]

    def test_collect_runs_after_regular_finish_listeners(
        self, channels: EventChannels
    ) -> None:
        order: list[str] = []
        calls: list[str] = []
        Profiler([RecordingCollector("rec", 1, calls)]).attach(channels)
        channels.subscribe("finish", lambda ctx: order.append(f"listener:{calls}"))

        channels.trigger("finish")

        assert order == ["listener:[]"]
        assert calls == ["rec"]

    def test_detach_stops_collection(self, channels: EventChannels) -> None:
        memory = MemoryCollector(FakeMemoryProbe())
        profiler = Profiler([memory]).attach(channels)

        profiler.detach()
        channels.trigger("route")
        channels.trigger("finish")

        assert memory.has_event_memory() is False
        assert memory.get_memory() is None


@pytest.mark.core
class TestRequestScopedProfiler:
    """Profilers bound to a request id ignore other requests' events."""

    def test_unbound_profiler_observes_everything(self, channels: EventChannels) -> None:
        memory = MemoryCollector(FakeMemoryProbe())
        Profiler([memory]).attach(channels)

        channels.trigger("route", params={"request_id": "a"})
        channels.trigger("route")

        assert len(memory.get_application_event_memory()) == 2

    def test_events_of_other_requests_are_ignored(self, channels: EventChannels) -> None:
        memory = MemoryCollector(FakeMemoryProbe([10, 20, 30]))
        Profiler([memory], request_id="a").attach(channels)

        channels.trigger("route", params={"request_id": "a"})
        channels.trigger("route", params={"request_id": "b"})
        channels.trigger("route")

        events = memory.get_application_event_memory()
        assert [e["memory"] for e in events] == [10]

    def test_finish_of_other_request_does_not_collect(
        self, channels: EventChannels
    ) -> None:
        memory = MemoryCollector(FakeMemoryProbe([10], peak=99))
        Profiler([memory], request_id="a").attach(channels)

        channels.trigger("finish", params={"request_id": "b"})
        assert memory.get_memory() is None

        channels.trigger("finish", params={"request_id": "a"})
        assert memory.get_memory() == 99

    def test_overlapping_profilers_share_channels(self, channels: EventChannels) -> None:
        first = MemoryCollector(FakeMemoryProbe())
        second = MemoryCollector(FakeMemoryProbe())
        Profiler([first], request_id="a").attach(channels)
        Profiler([second], request_id="b").attach(channels)

        channels.trigger("route", params={"request_id": "a"})
        channels.trigger("route", params={"request_id": "b"})
        channels.trigger("finish", params={"request_id": "b"})
        channels.trigger("finish", params={"request_id": "a"})

        assert [e["name"] for e in first.get_application_event_memory()] == [
            "route",
            "finish",
        ]
        assert [e["name"] for e in second.get_application_event_memory()] == [
            "route",
            "finish",
        ]
