"""Buffer system for pythagorean_cache.

BufferCache queues incoming items and releases them to observers in batches,
either when a size limit is reached or on a recurring interval.
"""

from .cache import BufferCache

__all__ = [
    "BufferCache",
]
