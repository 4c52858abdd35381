"""Profiling collectors."""

from moduscope.core.collectors.base import AbstractCollector
from moduscope.core.collectors.memory import (
    APPLICATION_EVENT_ID,
    MemoryCollector,
    MemoryProbe,
    ProcessMemoryProbe,
)
from moduscope.core.collectors.profiler import FINISH_EVENT, Profiler

__all__ = [
    "APPLICATION_EVENT_ID",
    "FINISH_EVENT",
    "AbstractCollector",
    "MemoryCollector",
    "MemoryProbe",
    "ProcessMemoryProbe",
    "Profiler",
]
