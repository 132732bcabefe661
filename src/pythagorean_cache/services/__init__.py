"""Services for pythagorean_cache."""

from .base_service import BaseService
from .logging_service import LoggingService, get_logging_service
from .cache_service import CacheService, get_cache_service

__all__ = [
    # Base class
    "BaseService",

    # Services
    "LoggingService",
    "get_logging_service",
    "CacheService",
    "get_cache_service",
]
