"""Utility functions for pythagorean_cache."""

from .error_handling import (
    ConfigurationError,
    validate_size,
    validate_interval,
    validate_triggers,
)
from .events import EventChannel

# Configuration utilities
from .config import (
    config_manager,
    ConfigManager,
    load_cache_options,
)

__all__ = [
    # From error_handling
    "ConfigurationError",
    "validate_size",
    "validate_interval",
    "validate_triggers",
    # From events
    "EventChannel",
    # From config
    "config_manager",
    "ConfigManager",
    "load_cache_options",
]
