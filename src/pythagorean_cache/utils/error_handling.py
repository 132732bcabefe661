"""Error types and argument validation for pythagorean_cache."""

from typing import Any, Optional


class ConfigurationError(ValueError):
    """Raised when a BufferCache is given an unusable configuration."""


def validate_size(size: Any) -> Optional[int]:
    """Validate a size limit.

    Args:
        size: Candidate size limit, or None for no size trigger

    Returns:
        The validated size limit

    Raises:
        ConfigurationError: If size is not a positive integer
    """
    if size is None:
        return None
    # bool is an int subclass; True would silently mean "dump on every push"
    if isinstance(size, bool) or not isinstance(size, int):
        raise ConfigurationError(f"size must be a positive integer, got {size!r}")
    if size <= 0:
        raise ConfigurationError(f"size must be a positive integer, got {size}")
    return size


def validate_interval(interval: Any) -> Optional[int]:
    """Validate an interval in milliseconds.

    Zero is accepted and means the same as None: no interval trigger.

    Args:
        interval: Candidate interval in milliseconds, or None

    Returns:
        The validated interval

    Raises:
        ConfigurationError: If interval is negative or not an integer
    """
    if interval is None:
        return None
    if isinstance(interval, bool) or not isinstance(interval, int):
        raise ConfigurationError(
            f"interval must be a non-negative integer of milliseconds, got {interval!r}")
    if interval < 0:
        raise ConfigurationError(
            f"interval must be a non-negative integer of milliseconds, got {interval}")
    return interval


def validate_triggers(size: Optional[int], interval: Optional[int]) -> None:
    """Ensure at least one dump trigger is configured.

    Raises:
        ConfigurationError: If neither a size nor an interval is set
    """
    if not size and not interval:
        raise ConfigurationError("You must specify either a size or interval (or both)")
