"""Constants and defaults for pythagorean_cache."""

from .config import (
    DUMP_EVENT,
    SUPPORTED_EVENTS,
    TRIGGER_SIZE,
    TRIGGER_INTERVAL,
    TRIGGER_MANUAL,
)

__all__ = [
    "DUMP_EVENT",
    "SUPPORTED_EVENTS",
    "TRIGGER_SIZE",
    "TRIGGER_INTERVAL",
    "TRIGGER_MANUAL",
]
