"""Logging service for pythagorean_cache.

This module provides centralized loguru configuration.
"""

import sys
from typing import Optional
from omegaconf import DictConfig
from loguru import logger

from .base_service import BaseService
from ..models.config import (
    CONSOLE_LOG_FORMAT,
    DEBUG_LOG_LEVEL,
    DEFAULT_LOG_LEVEL,
    FILE_LOG_FORMAT,
    LOG_FILE_RETENTION,
    LOG_FILE_ROTATION,
)


# Id of loguru's stock stderr sink; replaced when shutdown restores it
_default_handler_id: Optional[int] = 0


class LoggingService(BaseService):
    """Service for managing logging configuration."""

    def __init__(self):
        """Initialize the logging service."""
        super().__init__("logging")
        self._removed_default = False
        self._handler_ids: list[int] = []

    async def initialize(self, cfg: Optional[DictConfig] = None) -> bool:
        """Initialize the logging service.

        Args:
            cfg: Configuration for the service

        Returns:
            True if initialization was successful, False otherwise
        """
        try:
            if cfg is not None:
                self.set_config(cfg)

            self._configure_logging(cfg if cfg is not None else DictConfig({}))

            self._mark_initialized()
            return True
        except Exception as e:
            logger.error(f"Failed to initialize logging service: {e}")
            return False

    async def shutdown(self) -> bool:
        """Shutdown the logging service.

        Removes the sinks this service added and puts back loguru's default
        stderr sink if initialize took it away.

        Returns:
            True if shutdown was successful, False otherwise
        """
        global _default_handler_id
        try:
            self._remove_own_sinks()
            if self._removed_default:
                _default_handler_id = logger.add(sys.stderr)
                self._removed_default = False
            self._mark_shutdown()
            return True
        except Exception as e:
            logger.error(f"Failed to shutdown logging service: {e}")
            return False

    def get_log_level(self, cfg: DictConfig) -> str:
        return DEBUG_LOG_LEVEL if cfg.get("debug", False) else DEFAULT_LOG_LEVEL

    def _remove_own_sinks(self) -> None:
        for handler_id in self._handler_ids:
            logger.remove(handler_id)
        self._handler_ids.clear()

    def _remove_default_sink(self) -> None:
        """Drop only loguru's default stderr sink; sinks added elsewhere stay."""
        global _default_handler_id
        if self._removed_default or _default_handler_id is None:
            return
        try:
            logger.remove(_default_handler_id)
        except ValueError:
            # Already removed by someone else
            _default_handler_id = None
            return
        _default_handler_id = None
        self._removed_default = True

    def _configure_logging(self, cfg: DictConfig) -> None:
        """Configure logging with loguru.

        Args:
            cfg: Configuration with optional ``debug`` and ``log_file`` keys
        """
        log_level = self.get_log_level(cfg)

        self._remove_own_sinks()
        self._remove_default_sink()

        self._handler_ids.append(logger.add(
            sys.stderr,
            level=log_level,
            format=CONSOLE_LOG_FORMAT,
            colorize=True
        ))

        log_file = cfg.get("log_file")
        if log_file:
            self._handler_ids.append(logger.add(
                log_file,
                rotation=LOG_FILE_ROTATION,
                retention=LOG_FILE_RETENTION,
                level=log_level,
                format=FILE_LOG_FORMAT,
                backtrace=True,
                diagnose=True
            ))

        logger.info(f"Logging system configured at level {log_level}")


# Global logging service instance
_logging_service: Optional[LoggingService] = None


def get_logging_service() -> LoggingService:
    """Get the global logging service instance.

    Returns:
        LoggingService instance
    """
    global _logging_service
    if _logging_service is None:
        _logging_service = LoggingService()
    return _logging_service
