"""Explicit event channel registry.

Listeners subscribe to named channels (or to every channel through the
wildcard ``"*"``) and receive an immutable EventContext for each trigger.
"""

import inspect
import itertools
import time
from collections import defaultdict
from collections.abc import Callable, Mapping
from typing import Any

from moduscope.core.events.models import EventContext
from moduscope.core.logs import get_logger

logger = get_logger(__name__)

WILDCARD = "*"

Listener = Callable[[EventContext], Any]


class EventChannels:
    """Registry of listeners keyed by event name.

    Example:
        ```python
        channels = EventChannels()
        channels.subscribe("finish", lambda ctx: print(ctx.name))
        channels.trigger("finish", target=app)
        ```
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[tuple[int, int, Listener]]] = defaultdict(
            list
        )
        self._sequence = itertools.count()

    def subscribe(self, name: str, listener: Listener, priority: int = 1) -> Listener:
        """Register listener on a channel.

        Args:
            name: Channel name, or "*" for every channel.
            listener: Callable receiving the EventContext.
            priority: Higher priorities run first; equal priorities run in
                registration order.

        Returns:
            The listener, so it can be passed to unsubscribe() later.

        Raises:
            TypeError: If listener is not callable.
        """
        if not callable(listener):
            raise TypeError(f"listener must be callable, got {type(listener).__name__}")
        self._listeners[name].append((priority, next(self._sequence), listener))
        return listener

    def unsubscribe(self, name: str, listener: Listener) -> bool:
        """Remove listener from a channel. Returns True if it was registered."""
        entries = self._listeners.get(name, [])
        for entry in entries:
            if entry[2] is listener:
                entries.remove(entry)
                return True
        return False

    def listeners(self, name: str) -> list[Listener]:
        """Return listeners for name (wildcard listeners included) in call order."""
        entries = list(self._listeners.get(name, []))
        if name != WILDCARD:
            entries.extend(self._listeners.get(WILDCARD, []))
        entries.sort(key=lambda entry: (-entry[0], entry[1]))
        return [entry[2] for entry in entries]

    def trigger(
        self,
        name: str,
        target: Any = None,
        params: Mapping[str, Any] | None = None,
        stacklevel: int = 1,
    ) -> EventContext:
        """Build an EventContext for the caller's location and dispatch it.

        Args:
            name: Channel name.
            target: Object the event is about.
            params: Event payload.
            stacklevel: Which caller frame to record as the trigger location;
                1 is the direct caller of trigger().

        Returns:
            The dispatched EventContext.
        """
        frame = inspect.currentframe()
        try:
            for _ in range(stacklevel):
                if frame is None or frame.f_back is None:
                    break
                frame = frame.f_back
            file = frame.f_code.co_filename if frame is not None else ""
            line = frame.f_lineno if frame is not None else 0
        finally:
            del frame
        context = EventContext(
            name=name,
            timestamp=time.time(),
            target=target,
            file=file,
            line=line,
            params=params or {},
        )
        self.dispatch(context)
        return context

    def dispatch(self, context: EventContext) -> None:
        """Deliver an already-built context to the channel's listeners."""
        listeners = self.listeners(context.name)
        logger.debug("Dispatching %s to %d listener(s)", context.name, len(listeners))
        for listener in listeners:
            listener(context)
