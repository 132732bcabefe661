"""Configuration constants for pythagorean_cache.

This module contains constants and default configuration values used throughout
the package. These constants define default behavior when not overridden
by user configuration.
"""

from typing import Tuple

# Event emitted by a BufferCache each time a batch is released
DUMP_EVENT = "dump"
SUPPORTED_EVENTS: Tuple[str, ...] = (DUMP_EVENT,)

# Dump triggers, used for statistics
TRIGGER_SIZE = "size"
TRIGGER_INTERVAL = "interval"
TRIGGER_MANUAL = "manual"

# Logging
DEFAULT_LOG_LEVEL = "INFO"
DEBUG_LOG_LEVEL = "DEBUG"
LOG_FILE_ROTATION = "10 MB"
LOG_FILE_RETENTION = "1 week"

CONSOLE_LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

FILE_LOG_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
    "{level: <8} | "
    "{name}:{function}:{line} - "
    "{message}"
)
