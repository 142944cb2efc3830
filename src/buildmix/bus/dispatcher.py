"""Ordered in-process event dispatcher.

No external dependencies. Handlers for an event are awaited one after the
other in registration order. Unlike a fan-out bus, a failing handler is not
isolated: the first exception aborts the remaining handlers and propagates
to whoever fired the event, so a broken component halts the build instead
of emitting a partial configuration.
"""

from __future__ import annotations

import inspect
import logging
from collections import defaultdict
from typing import Any

from buildmix.core.interfaces import Handler

logger = logging.getLogger(__name__)


class EventDispatcher:
    """Named-event registry. Safe within a single asyncio event loop.

    Usage::

        dispatcher = EventDispatcher()
        dispatcher.listen("init", on_init)
        await dispatcher.fire("init", mix)
    """

    def __init__(self) -> None:
        # event → ordered handlers (duplicates allowed)
        self._handlers: dict[str, list[Handler]] = defaultdict(list)
        self._history: list[str] = []

    def listen(self, event: str, handler: Handler) -> None:
        """Append ``handler`` to the handlers of ``event``."""
        self._handlers[event].append(handler)

    async def fire(self, event: str, *args: Any) -> None:
        """Invoke every handler of ``event`` sequentially with ``args``.

        The handler list is snapshotted first: handlers registered while the
        event is firing run on the next ``fire`` call, not this one.
        """
        self._history.append(event)

        handlers = list(self._handlers.get(event, ()))
        for handler in handlers:
            try:
                result = handler(*args)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.error(
                    "Handler %s failed on event=%s",
                    getattr(handler, "__qualname__", repr(handler)),
                    event,
                )
                raise

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def has_listeners(self, event: str) -> bool:
        return bool(self._handlers.get(event))

    def listener_count(self, event: str) -> int:
        return len(self._handlers.get(event, ()))

    def events(self) -> list[str]:
        """Event names with at least one handler, in first-listen order."""
        return [name for name, handlers in self._handlers.items() if handlers]

    # ------------------------------------------------------------------
    # Testing helpers
    # ------------------------------------------------------------------

    def get_history(self, event: str | None = None) -> list[str]:
        """Names of fired events, optionally filtered. For testing."""
        if event is None:
            return list(self._history)
        return [name for name in self._history if name == event]

    def clear_history(self) -> None:
        """Clear fired-event history. For testing."""
        self._history.clear()
