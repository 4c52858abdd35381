"""NDJSON stream sink."""

import sys
from collections.abc import Mapping
from typing import Any, TextIO

from moduscope.adapters.sinks.base import AbstractSink
from moduscope.core.encoding.ndjson import encode_record
from moduscope.core.ports import ServiceLocatorPort


class StreamSink(AbstractSink):
    """Writes one line per record to a text stream.

    Lines are NDJSON unless another formatter is set.
    """

    def __init__(
        self,
        stream: TextIO | None = None,
        options: Mapping[str, Any] | None = None,
        filter_manager: ServiceLocatorPort | None = None,
    ) -> None:
        self._stream = stream if stream is not None else sys.stderr
        super().__init__(options, filter_manager)
        if self._formatter is None:
            self._formatter = encode_record

    def _do_write(self, event: dict[str, Any]) -> None:
        line = self._formatter(event) if self._formatter else encode_record(event)
        self._stream.write(f"{line}\n")
        self._stream.flush()
