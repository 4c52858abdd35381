"""NDJSON encoder for log records."""

import json
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from moduscope.core.models import LogEntry


def _default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def encode_record(record: LogEntry | Mapping[str, Any]) -> str:
    """Encode a single log record as one JSON line (without newline)."""
    document = record.to_dict() if isinstance(record, LogEntry) else dict(record)
    return json.dumps(document, default=_default)


def encode_records(records: Iterable[LogEntry | Mapping[str, Any]]) -> str:
    """Encode log records to newline-delimited JSON.

    Args:
        records: An iterable of LogEntry objects or plain documents.

    Returns:
        NDJSON string with one JSON object per line.
        Empty string if no records.
    """
    lines = [encode_record(record) for record in records]

    if not lines:
        return ""

    return "\n".join(lines) + "\n"
