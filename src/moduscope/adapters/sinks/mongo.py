"""MongoDB log sink.

Appends every record as one document to a collection. The ``timestamp``
field is stored as a BSON date; all other fields pass through unchanged.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any

from moduscope.adapters.sinks.base import AbstractSink, Formatter
from moduscope.core.exceptions import (
    ExtensionNotLoadedError,
    InvalidArgumentError,
    SinkRuntimeError,
)
from moduscope.core.logs import get_logger
from moduscope.core.ports import ServiceLocatorPort

logger = get_logger(__name__)

try:
    import pymongo
except ImportError:
    pymongo = None  # type: ignore[assignment]

# save_options keys applied as the collection's write concern
WRITE_CONCERN_OPTIONS = frozenset({"w", "wtimeout", "j", "fsync"})
# save_options keys passed to insert_one()
INSERT_OPTIONS = frozenset({"bypass_document_validation", "comment"})


@dataclass(frozen=True)
class MongoSinkConfig:
    """Options recognized by MongoSink.

    Attributes:
        mongo: A ``pymongo.MongoClient``.
        database: Database name.
        collection: Collection name.
        save_options: Write concern keys (w, wtimeout, j, fsync) and
            insert_one keywords (bypass_document_validation, comment).
        filters: Filter specs, see AbstractSink.
    """

    mongo: Any
    database: str | None = None
    collection: str | None = None
    save_options: Mapping[str, Any] = field(default_factory=dict)
    filters: tuple[Any, ...] = ()

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "MongoSinkConfig":
        return cls(
            mongo=mapping.get("mongo"),
            database=mapping.get("database"),
            collection=mapping.get("collection"),
            save_options=dict(mapping.get("save_options") or {}),
            filters=tuple(mapping.get("filters") or ()),
        )

    def validate(self) -> None:
        """Check names, client type and save options.

        Raises:
            InvalidArgumentError: If any option is missing or invalid.
        """
        if not self.collection:
            raise InvalidArgumentError("The collection parameter cannot be empty")
        if not self.database:
            raise InvalidArgumentError("The database parameter cannot be empty")
        if not isinstance(self.mongo, pymongo.MongoClient):
            raise InvalidArgumentError(
                f"Parameter of type {type(self.mongo).__name__} is invalid; "
                "must be pymongo.MongoClient"
            )
        unknown = set(self.save_options) - WRITE_CONCERN_OPTIONS - INSERT_OPTIONS
        if unknown:
            raise InvalidArgumentError(
                f"Unsupported save options: {', '.join(sorted(unknown))}"
            )


def to_bson_date(value: Any) -> Any:
    """Convert a timestamp to a UTC datetime, leaving other values alone.

    Naive datetimes are taken to be UTC, numbers are unix seconds.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    return value


class MongoSink(AbstractSink):
    """Sink that inserts log records into a MongoDB collection.

    Example:
        ```python
        client = pymongo.MongoClient("mongodb://localhost:27017")
        sink = MongoSink(client, "logs", "app", save_options={"w": 1})
        sink.write(log("INFO", "started"))
        ```

    The client may also be passed as a config mapping with the keys
    ``mongo``, ``database``, ``collection``, ``save_options`` and
    ``filters``.
    """

    _collection: Any = None
    _insert_options: Mapping[str, Any] = MappingProxyType({})

    def __init__(
        self,
        mongo: Any,
        database: str | None = None,
        collection: str | None = None,
        save_options: Mapping[str, Any] | None = None,
        filter_manager: ServiceLocatorPort | None = None,
    ) -> None:
        if pymongo is None:
            raise ExtensionNotLoadedError("Missing pymongo")

        if isinstance(mongo, Mapping):
            config = MongoSinkConfig.from_mapping(mongo)
        else:
            config = MongoSinkConfig(
                mongo=mongo,
                database=database,
                collection=collection,
                save_options=dict(save_options or {}),
            )
        config.validate()

        super().__init__({"filters": list(config.filters)}, filter_manager)
        target = config.mongo.get_database(config.database).get_collection(
            config.collection
        )
        write_concern = {
            key: value
            for key, value in config.save_options.items()
            if key in WRITE_CONCERN_OPTIONS
        }
        if write_concern:
            target = target.with_options(
                write_concern=pymongo.WriteConcern(**write_concern)
            )
        self._collection = target
        self._insert_options = {
            key: value
            for key, value in config.save_options.items()
            if key in INSERT_OPTIONS
        }
        logger.debug("Mongo sink bound to %s.%s", config.database, config.collection)

    def set_formatter(self, formatter: Formatter) -> "MongoSink":
        """This sink does not support formatting; the formatter is ignored."""
        return self

    def _do_write(self, event: dict[str, Any]) -> None:
        if self._collection is None:
            raise SinkRuntimeError("Mongo collection must be defined")

        if "timestamp" in event:
            event["timestamp"] = to_bson_date(event["timestamp"])

        self._collection.insert_one(event, **self._insert_options)
