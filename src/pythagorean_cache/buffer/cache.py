"""BufferCache implementation for pythagorean_cache.

A BufferCache collects items pushed by a producer and releases them as a batch
(a "dump") when either of two triggers fires:

1. Size trigger:
   Checked synchronously on every push. When the number of buffered items
   reaches ``size`` the cache dumps before ``push`` returns.
2. Interval trigger:
   A recurring asyncio task dumps every ``interval`` milliseconds. A dump with
   nothing buffered does nothing.

Both triggers, and manual calls to ``dump()``, go through the same extraction:
at most ``size`` items (or everything, without a size limit) are removed from
the front of the queue, and only then are the observers notified with that
batch. Observers are plain callables registered with ``on``/``once``.

Everything runs on one event loop. ``push`` and ``dump`` never await, so a dump
can never interleave with another operation on the same cache.
"""

import asyncio
import time
from collections import deque
from typing import Any, Callable, Deque, Dict, Generic, List, Optional, TypeVar
from loguru import logger

from ..interfaces import BufferCacheInterface
from ..models.config import (
    DUMP_EVENT,
    SUPPORTED_EVENTS,
    TRIGGER_INTERVAL,
    TRIGGER_MANUAL,
    TRIGGER_SIZE,
)
from ..utils.config import load_cache_options
from ..utils.error_handling import validate_interval, validate_size, validate_triggers
from ..utils.events import EventChannel

T = TypeVar('T')  # Item type


class BufferCache(BufferCacheInterface, Generic[T]):
    """Buffer that dumps its items on a size limit, an interval, or both.

    Named after the Pythagorean cup: fill it to the line and it empties itself.

    Features:
    - Size-triggered dumps, evaluated on every push
    - Interval-triggered dumps on an instance-owned timer task
    - Manual dumps at any time
    - Runtime reconfiguration of size and interval
    - Persistent and one-shot observers, isolated from each other
    - Statistics tracking
    """

    def __init__(
        self,
        size: Optional[int] = None,
        interval: Optional[int] = None,
        *,
        name: Optional[str] = None,
    ):
        """Initialize the cache.

        Arming the interval timer needs a running event loop, so a cache with
        an interval must be created from inside one.

        Args:
            size: Dump when this many items are buffered
            interval: Dump every this many milliseconds
            name: Name used in log messages

        Raises:
            ConfigurationError: If neither trigger is set or a value is invalid
        """
        self._size = validate_size(size)
        self._interval = validate_interval(interval)
        validate_triggers(self._size, self._interval)

        self.name = name or f"BufferCache@{id(self):x}"
        self._queue: Deque[T] = deque()
        self._events = EventChannel(self.name)
        self._timer: Optional[asyncio.Task] = None

        # Statistics
        self.total_items_added = 0
        self.total_items_dumped = 0
        self.total_dumps = 0
        self.dumps_by_trigger: Dict[str, int] = {
            TRIGGER_SIZE: 0,
            TRIGGER_INTERVAL: 0,
            TRIGGER_MANUAL: 0,
        }
        self.last_dump_time: Optional[float] = None

        interval_text = f"{self._interval}ms" if self._interval else "none"
        logger.debug(f"{self.name}: Initialized with size={self._size}, interval={interval_text}")

        self.start_interval()

    @classmethod
    def from_config(cls, cfg: Any, name: Optional[str] = None) -> "BufferCache":
        """Build a cache from a DictConfig or mapping with ``size``/``interval`` keys."""
        size, interval = load_cache_options(cfg)
        return cls(size=size, interval=interval, name=name)

    # ------------------------------------------------------------------
    # Queue
    # ------------------------------------------------------------------

    @property
    def length(self) -> int:
        return len(self._queue)

    def __len__(self) -> int:
        # An empty cache is falsy; test lookups against None, not truthiness
        return len(self._queue)

    @property
    def size(self) -> Optional[int]:
        return self._size

    @property
    def interval(self) -> Optional[int]:
        return self._interval

    def push(self, *items: T) -> int:
        """Push items onto the cache.

        Args:
            items: The items to push, kept in call order

        Returns:
            The length of the cache after any dump this push caused
        """
        self._queue.extend(items)
        self.total_items_added += len(items)
        if self.check_limit():
            self._dump(TRIGGER_SIZE)
        return self.length

    def check_limit(self) -> bool:
        """Check if the cache has reached its size limit.

        Returns:
            True if a size limit is set and the cache holds at least that many items
        """
        return self._size is not None and len(self._queue) >= self._size

    # ------------------------------------------------------------------
    # Dump
    # ------------------------------------------------------------------

    def dump(self) -> None:
        """Emit the items in the cache. Does nothing if the cache is empty."""
        self._dump(TRIGGER_MANUAL)

    def _dump(self, trigger: str) -> int:
        """Extract one batch and notify observers. Returns the batch length."""
        if not self._queue:
            return 0

        width = self._size if self._size is not None else len(self._queue)
        batch: List[T] = [self._queue.popleft() for _ in range(min(width, len(self._queue)))]

        self.total_dumps += 1
        self.total_items_dumped += len(batch)
        self.dumps_by_trigger[trigger] = self.dumps_by_trigger.get(trigger, 0) + 1
        self.last_dump_time = time.time()
        logger.debug(
            f"{self.name}: Dumping {len(batch)} items ({trigger}), {len(self._queue)} remain")

        # Queue state is final before any observer runs
        self._events.emit(DUMP_EVENT, batch)
        return len(batch)

    # ------------------------------------------------------------------
    # Reconfiguration
    # ------------------------------------------------------------------

    def set_size(self, size: Optional[int]) -> None:
        """Change the size. Dumps at once if the cache already holds that many items.

        Args:
            size: The new size limit, or None to disable the size trigger
        """
        self._size = validate_size(size)
        if self._size is None and not self._interval:
            logger.warning(f"{self.name}: No size or interval set; only manual dumps will occur")
        if self.check_limit():
            self._dump(TRIGGER_SIZE)

    def set_interval(self, interval: Optional[int]) -> None:
        """Change the interval. The timer restarts at zero.

        Args:
            interval: The new interval in milliseconds; 0 or None stops the timer
        """
        interval = validate_interval(interval)
        if interval:
            # Fails before any state changes when no loop is running
            asyncio.get_running_loop()
        self._interval = interval
        if self._size is None and not self._interval:
            logger.warning(f"{self.name}: No size or interval set; only manual dumps will occur")
        self.start_interval()

    # ------------------------------------------------------------------
    # Interval timer
    # ------------------------------------------------------------------

    @property
    def is_interval_running(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def start_interval(self) -> None:
        """Start the interval dump (if an interval is set), replacing any running timer."""
        loop = asyncio.get_running_loop() if self._interval else None
        self.stop_interval()

        if loop is not None:
            self._timer = loop.create_task(
                self._interval_loop(self._interval))
            logger.debug(f"{self.name}: Interval timer armed at {self._interval}ms")

    def stop_interval(self) -> None:
        """Stop the interval timer. Safe to call when no timer is running."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
            logger.debug(f"{self.name}: Interval timer stopped")

    async def _interval_loop(self, interval: int) -> None:
        """Background task that dumps the cache every interval milliseconds."""
        period = interval / 1000
        while True:
            try:
                await asyncio.sleep(period)
                self._dump(TRIGGER_INTERVAL)
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"{self.name}: Error in interval dump: {e}")

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def _check_event(self, event: str) -> None:
        if event not in SUPPORTED_EVENTS:
            raise ValueError(
                f"Unknown event '{event}'. Supported events: {', '.join(SUPPORTED_EVENTS)}")

    def on(self, event: str, handler: Callable[[List[T]], Any]) -> None:
        """Call handler with every dumped batch until it is removed with ``off``."""
        self._check_event(event)
        self._events.on(event, handler)

    def once(self, event: str, handler: Callable[[List[T]], Any]) -> None:
        """Call handler with the next dumped batch only."""
        self._check_event(event)
        self._events.once(event, handler)

    def off(self, event: str, handler: Callable[[List[T]], Any]) -> bool:
        """Remove a handler. Returns True if it was registered."""
        self._check_event(event)
        return self._events.off(event, handler)

    def listener_count(self, event: str = DUMP_EVENT) -> int:
        self._check_event(event)
        return self._events.listener_count(event)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Stop the timer and dump the items queued when close was called.

        With a size limit those items may go out as several batches. Items that
        observers push during the drain stay queued.
        Also waits for any async observer work started by earlier dumps.
        """
        logger.debug(f"{self.name}: Closing cache")
        self.stop_interval()

        pending = len(self._queue)
        while pending > 0:
            dumped = self._dump(TRIGGER_MANUAL)
            if not dumped:
                break
            pending -= dumped

        await self._events.drain()
        logger.debug(f"{self.name}: Cache closed")

    async def __aenter__(self) -> "BufferCache":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics.

        Returns:
            Dictionary with cache statistics
        """
        return {
            "name": self.name,
            "current_size": len(self._queue),
            "size": self._size,
            "interval": self._interval,
            "interval_running": self.is_interval_running,
            "listeners": self._events.listener_count(DUMP_EVENT),
            "total_items_added": self.total_items_added,
            "total_items_dumped": self.total_items_dumped,
            "total_dumps": self.total_dumps,
            "dumps_by_trigger": dict(self.dumps_by_trigger),
            "observer_errors": self._events.error_count,
            "time_since_last_dump": (
                time.time() - self.last_dump_time if self.last_dump_time is not None else None
            ),
        }

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(name={self.name!r}, size={self._size}, "
                f"interval={self._interval}, length={len(self._queue)})")
