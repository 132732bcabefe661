"""Cache service for pythagorean_cache.

Owns a set of named BufferCache instances built from configuration and takes
care of their timers: at shutdown every cache has its timer stopped and its
remaining items dumped.
"""

from typing import Any, Dict, Optional
from omegaconf import DictConfig
from loguru import logger

from .base_service import BaseService
from ..buffer import BufferCache
from ..utils.config import load_cache_options


class CacheService(BaseService):
    """Service holding named BufferCache instances."""

    def __init__(self):
        """Initialize the cache service."""
        super().__init__("cache")
        self._caches: Dict[str, BufferCache] = {}

    async def initialize(self, cfg: Optional[DictConfig] = None) -> bool:
        """Create one cache per entry under ``caches`` in the configuration.

        Args:
            cfg: Configuration for the service

        Returns:
            True if initialization was successful, False otherwise
        """
        if cfg is not None:
            self.set_config(cfg)

        caches = (cfg.get("caches") if cfg is not None else None) or {}
        try:
            for name, section in caches.items():
                size, interval = load_cache_options(section)
                self.create_cache(name, size=size, interval=interval)
        except Exception as e:
            logger.error(f"Failed to initialize cache service: {e}")
            await self._close_all()
            return False

        self._mark_initialized()
        return True

    async def shutdown(self) -> bool:
        """Stop every cache timer and flush the remaining items.

        Returns:
            True if shutdown was successful, False otherwise
        """
        try:
            await self._close_all()
            self._mark_shutdown()
            return True
        except Exception as e:
            logger.error(f"Failed to shutdown cache service: {e}")
            return False

    async def _close_all(self) -> None:
        for name, cache in list(self._caches.items()):
            logger.debug(f"Closing cache '{name}' with {cache.length} items")
            await cache.close()
        self._caches.clear()

    def create_cache(
        self,
        name: str,
        size: Optional[int] = None,
        interval: Optional[int] = None,
    ) -> BufferCache:
        """Create and register a cache.

        Args:
            name: Unique cache name
            size: Dump when this many items are buffered
            interval: Dump every this many milliseconds

        Returns:
            The new cache

        Raises:
            ValueError: If a cache with this name already exists
            ConfigurationError: If the options are invalid
        """
        if name in self._caches:
            raise ValueError(f"Cache '{name}' already exists")

        cache: BufferCache[Any] = BufferCache(size=size, interval=interval, name=name)
        self._caches[name] = cache
        logger.info(f"Created cache '{name}' (size={size}, interval={interval}ms)")
        return cache

    def get_cache(self, name: str) -> Optional[BufferCache]:
        """Look up a cache by name.

        Returns:
            The cache, or None if unknown. An empty cache is falsy, so callers
            should compare the result with None.
        """
        return self._caches.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._caches

    async def remove_cache(self, name: str) -> bool:
        """Close and forget a cache.

        Returns:
            True if the cache existed
        """
        cache = self._caches.pop(name, None)
        if cache is None:
            return False
        await cache.close()
        return True

    def cache_names(self) -> list[str]:
        return list(self._caches)

    def get_stats(self) -> Dict[str, Dict[str, Any]]:
        """Statistics for every cache, keyed by name."""
        return {name: cache.get_stats() for name, cache in self._caches.items()}


# Global cache service instance
_cache_service: Optional[CacheService] = None


def get_cache_service() -> CacheService:
    """Get the global cache service instance.

    Returns:
        CacheService instance
    """
    global _cache_service
    if _cache_service is None:
        _cache_service = CacheService()
    return _cache_service
