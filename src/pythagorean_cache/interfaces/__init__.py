"""Interfaces for pythagorean_cache."""

from .buffer_interface import BufferCacheInterface

__all__ = [
    "BufferCacheInterface",
]
