"""Configuration management for pythagorean_cache.

Configuration is held as a plain dictionary resolved from an OmegaConf
DictConfig (typically produced by Hydra in the demo runner). Values in YAML
may pull from the environment with ``${oc.env:NAME,default}``; a local
``.env`` file is loaded on import so those lookups see it.

It also includes helpers for turning a cache section into BufferCache options.
"""

from loguru import logger
from typing import Any, Dict, Mapping, Optional, Tuple
from omegaconf import DictConfig, OmegaConf
import dotenv

from .error_handling import ConfigurationError, validate_interval, validate_size

dotenv.load_dotenv()


def _to_container(cfg: Any) -> Dict[str, Any]:
    """Convert a DictConfig (or any mapping) to a resolved plain dict."""
    if cfg is None:
        return {}
    if isinstance(cfg, DictConfig):
        return OmegaConf.to_container(cfg, resolve=True)
    if isinstance(cfg, Mapping):
        return dict(cfg)
    raise ConfigurationError(f"Expected a mapping for configuration, got {type(cfg).__name__}")


def _coerce_int(key: str, value: Any) -> Optional[int]:
    """Accept ints and integer strings (as produced by env interpolation)."""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            raise ConfigurationError(f"{key} must be an integer, got {value!r}") from None
    return value


def load_cache_options(cfg: Any) -> Tuple[Optional[int], Optional[int]]:
    """Read ``size`` and ``interval`` from a cache configuration section.

    Args:
        cfg: DictConfig or mapping with optional ``size`` and ``interval`` keys

    Returns:
        Tuple of (size, interval) with interval in milliseconds

    Raises:
        ConfigurationError: If either value is invalid
    """
    options = _to_container(cfg)
    unknown = set(options) - {"size", "interval"}
    if unknown:
        logger.warning(f"Ignoring unknown cache options: {', '.join(sorted(unknown))}")

    size = validate_size(_coerce_int("size", options.get("size")))
    interval = validate_interval(_coerce_int("interval", options.get("interval")))
    return size, interval


class ConfigManager:
    """Configuration manager for pythagorean_cache.

    This class provides a singleton instance for accessing the configuration.
    It expects the configuration to be set from outside, typically from the
    Hydra-decorated main function.
    """

    _instance = None
    _cfg = None

    def __new__(cls):
        """Create a singleton instance."""
        if cls._instance is None:
            cls._instance = super(ConfigManager, cls).__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize the configuration manager."""
        if ConfigManager._cfg is None:
            ConfigManager._cfg = {}

    def set_config(self, cfg: Any):
        """Set the configuration.

        Args:
            cfg: Configuration object (DictConfig or dict)
        """
        ConfigManager._cfg = _to_container(cfg)
        logger.info("Configuration set successfully")

    def get_config(self) -> Dict[str, Any]:
        """Get the configuration.

        Returns:
            Configuration dictionary
        """
        return ConfigManager._cfg

    def is_debug(self) -> bool:
        """Whether debug logging is requested."""
        return bool(self.get_config().get("debug", False))

    def get_log_file(self) -> Optional[str]:
        """Path of the rotating log file, or None for console only."""
        return self.get_config().get("log_file") or None

    def get_cache_options(self) -> Tuple[Optional[int], Optional[int]]:
        """Options for the default cache section.

        Returns:
            Tuple of (size, interval)
        """
        return load_cache_options(self.get_config().get("cache", {}))

    def get_named_caches(self) -> Dict[str, Tuple[Optional[int], Optional[int]]]:
        """Options for every entry under ``caches``.

        Returns:
            Mapping of cache name to (size, interval)
        """
        caches = self.get_config().get("caches") or {}
        return {name: load_cache_options(section) for name, section in caches.items()}

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary.

        Returns:
            Configuration dictionary
        """
        return dict(self.get_config())


# Create a singleton instance of the configuration manager
config_manager = ConfigManager()
