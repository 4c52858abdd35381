"""Tests for NDJSON log encoder."""

import json
from datetime import datetime, timezone

import pytest

from moduscope.core.encoding.ndjson import encode_record, encode_records
from moduscope.core.models import LogEntry


class TestNdjsonEncoder:
    """Tests for NDJSON encoding of log records."""

    @pytest.mark.encoding
    def test_encode_single_entry(self) -> None:
        """Single LogEntry encodes to one JSON line."""
        entry = LogEntry(
            timestamp=1702300000.0,
            level="INFO",
            message="Application started",
        )

        result = encode_records([entry])

        parsed = json.loads(result.strip())
        assert parsed["timestamp"] == 1702300000.0
        assert parsed["level"] == "INFO"
        assert parsed["message"] == "Application started"
        assert parsed["extra"] == {}

    @pytest.mark.encoding
    def test_encode_multiple_entries(self) -> None:
        """Multiple records are newline-delimited."""
        entries = [
            LogEntry(timestamp=1702300000.0, level="INFO", message="First"),
            {"level": "ERROR", "message": "Second"},
        ]

        result = encode_records(entries)

        lines = result.strip().split("\n")
        assert len(lines) == 2
        assert json.loads(lines[0])["message"] == "First"
        assert json.loads(lines[1])["message"] == "Second"

    @pytest.mark.encoding
    def test_encode_empty_iterable(self) -> None:
        """Empty input returns empty string."""
        assert encode_records([]) == ""

    @pytest.mark.encoding
    def test_datetimes_are_iso_formatted(self) -> None:
        moment = datetime(2024, 1, 1, tzinfo=timezone.utc)
        parsed = json.loads(encode_record({"timestamp": moment}))
        assert parsed["timestamp"] == "2024-01-01T00:00:00+00:00"

    @pytest.mark.encoding
    def test_unknown_values_are_stringified(self) -> None:
        parsed = json.loads(encode_record({"error": ValueError("bad")}))
        assert parsed["error"] == "bad"
