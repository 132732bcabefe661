"""Buffer interface for pythagorean_cache."""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional


class BufferCacheInterface(ABC):
    """Interface for size/interval triggered buffers.

    This interface defines the methods that must be implemented by any
    buffer that releases its items to observers as batches.
    """

    @property
    @abstractmethod
    def length(self) -> int:
        """Number of items currently buffered."""
        pass

    @abstractmethod
    def push(self, *items: Any) -> int:
        """Append items to the buffer.

        Args:
            items: The items to append, in order

        Returns:
            The buffered length after any dump the push triggered
        """
        pass

    @abstractmethod
    def dump(self) -> None:
        """Release a batch to observers, doing nothing if the buffer is empty."""
        pass

    @abstractmethod
    def set_size(self, size: Optional[int]) -> None:
        """Replace the size limit, dumping immediately if it is now reached."""
        pass

    @abstractmethod
    def set_interval(self, interval: Optional[int]) -> None:
        """Replace the interval in milliseconds and restart the timer."""
        pass

    @abstractmethod
    def start_interval(self) -> None:
        """(Re)arm the interval timer from the current configuration."""
        pass

    @abstractmethod
    def stop_interval(self) -> None:
        """Cancel the interval timer. Safe to call when none is running."""
        pass

    @abstractmethod
    def on(self, event: str, handler: Callable[..., Any]) -> None:
        """Register a persistent observer."""
        pass

    @abstractmethod
    def once(self, event: str, handler: Callable[..., Any]) -> None:
        """Register a one-shot observer."""
        pass
