"""Event channels and the immutable contexts they deliver."""

from moduscope.core.events.channels import WILDCARD, EventChannels, Listener
from moduscope.core.events.context import EventContextProvider, target_identifier
from moduscope.core.events.models import EventContext

__all__ = [
    "WILDCARD",
    "EventChannels",
    "EventContext",
    "EventContextProvider",
    "Listener",
    "target_identifier",
]
