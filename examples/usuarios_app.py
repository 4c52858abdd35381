"""Example application serving the usuarios module.

Run with:
    uvicorn examples.usuarios_app:app --reload

Endpoints:
    /usuarios   - index action of UsuariosController

Request logs:
    Every request is written as one NDJSON line to stderr, including the
    peak and current process memory. Set MONGO_URI to store the records in
    the ``logs.requests`` MongoDB collection instead.
"""

import logging
import os

import pymongo

from moduscope import Application, MongoSink, StreamSink, configure_logging
from usuarios import Module

mongo_uri = os.environ.get("MONGO_URI")
if mongo_uri:
    sink = MongoSink(
        pymongo.MongoClient(mongo_uri),
        database="logs",
        collection="requests",
        save_options={"w": 1},
    )
else:
    sink = StreamSink(options={"filters": [{"name": "priority", "options": {"priority": "INFO"}}]})

# Route the package's own log messages through the same sink
configure_logging(sink, level=logging.DEBUG)

application = Application.from_modules([Module()], sink=sink)
app = application.create_asgi_app(title="usuarios", exclude_paths=["/favicon.ico"])
