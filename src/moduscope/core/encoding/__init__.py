"""Encoders for log records."""

from moduscope.core.encoding.ndjson import encode_record, encode_records

__all__ = ["encode_record", "encode_records"]
