"""Synchronous notification channel.

EventChannel keeps an ordered list of listeners per event name and calls them
in registration order when an event is emitted. BufferCache composes one of
these rather than inheriting broadcast behavior.
"""

import asyncio
import inspect
from typing import Any, Callable, Dict, List, Optional, Set
from loguru import logger

Handler = Callable[..., Any]


class _Listener:
    __slots__ = ("handler", "once")

    def __init__(self, handler: Handler, once: bool):
        self.handler = handler
        self.once = once


class EventChannel:
    """Ordered multi-listener dispatch with persistent and one-shot listeners.

    Each listener runs in isolation: an exception raised by one handler is
    logged and counted, and the remaining handlers still run. Handlers that
    return an awaitable have it scheduled on the running event loop.
    """

    def __init__(self, name: Optional[str] = None):
        """Initialize the channel.

        Args:
            name: Owner name used in log messages
        """
        self.name = name or "channel"
        self._listeners: Dict[str, List[_Listener]] = {}
        self._pending: Set[asyncio.Future] = set()
        self.error_count = 0

    def on(self, event: str, handler: Handler) -> None:
        """Register a handler called on every emission of event."""
        self._add(event, handler, once=False)

    def once(self, event: str, handler: Handler) -> None:
        """Register a handler called on the next emission of event only."""
        self._add(event, handler, once=True)

    def _add(self, event: str, handler: Handler, once: bool) -> None:
        if not callable(handler):
            raise TypeError(f"{self.name}: handler for '{event}' must be callable")
        self._listeners.setdefault(event, []).append(_Listener(handler, once))

    def off(self, event: str, handler: Handler) -> bool:
        """Remove every registration of handler for event.

        Returns:
            True if at least one registration was removed
        """
        listeners = self._listeners.get(event)
        if not listeners:
            return False

        # Bound methods are recreated on each access, so compare by equality
        remaining = [entry for entry in listeners if entry.handler != handler]
        removed = len(remaining) != len(listeners)
        if remaining:
            self._listeners[event] = remaining
        else:
            del self._listeners[event]
        return removed

    def listener_count(self, event: str) -> int:
        """Number of handlers currently registered for event."""
        return len(self._listeners.get(event, ()))

    def remove_all(self, event: Optional[str] = None) -> None:
        """Drop all listeners for event, or for every event when None."""
        if event is None:
            self._listeners.clear()
        else:
            self._listeners.pop(event, None)

    def emit(self, event: str, *args: Any) -> bool:
        """Call every listener registered for event with args.

        One-shot listeners are deregistered before any handler runs, so a
        handler that emits the same event again will not see them twice.

        Returns:
            True if the event had listeners
        """
        listeners = self._listeners.get(event)
        if not listeners:
            return False

        snapshot = list(listeners)
        if any(entry.once for entry in snapshot):
            persistent = [entry for entry in listeners if not entry.once]
            if persistent:
                self._listeners[event] = persistent
            else:
                del self._listeners[event]

        for entry in snapshot:
            try:
                result = entry.handler(*args)
            except Exception:
                self.error_count += 1
                logger.exception(f"{self.name}: '{event}' handler {entry.handler!r} raised")
                continue

            if inspect.isawaitable(result):
                self._schedule(event, result)

        return True

    def _schedule(self, event: str, awaitable: Any) -> None:
        """Run an awaitable handler result on the current loop without waiting for it."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No running loop: the coroutine can never run
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            self.error_count += 1
            logger.error(f"{self.name}: async '{event}' handler needs a running event loop")
            return

        future = asyncio.ensure_future(awaitable, loop=loop)
        self._pending.add(future)
        future.add_done_callback(lambda fut: self._on_done(event, fut))

    def _on_done(self, event: str, future: asyncio.Future) -> None:
        self._pending.discard(future)
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            self.error_count += 1
            logger.opt(exception=exc).error(f"{self.name}: async '{event}' handler failed")

    async def drain(self) -> None:
        """Wait for scheduled async handler results to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
