"""pythagorean_cache: size- and interval-triggered batching buffer.

Push items in, get batches out through "dump" observers.
"""

from .buffer import BufferCache
from .utils.error_handling import ConfigurationError
from .utils.events import EventChannel
from .models.config import DUMP_EVENT

__version__ = "0.1.0"

__all__ = [
    "BufferCache",
    "ConfigurationError",
    "EventChannel",
    "DUMP_EVENT",
]
