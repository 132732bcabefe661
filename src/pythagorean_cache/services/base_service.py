"""Base class for pythagorean_cache services."""

from abc import ABC, abstractmethod
from typing import Optional
from omegaconf import DictConfig
from loguru import logger


class BaseService(ABC):
    """Async initialize/shutdown lifecycle shared by the logging and cache services."""

    def __init__(self, name: str):
        self.name = name
        self._initialized = False
        self._config: Optional[DictConfig] = None

    @abstractmethod
    async def initialize(self, cfg: Optional[DictConfig] = None) -> bool:
        """Initialize the service.

        Returns:
            True if initialization was successful, False otherwise
        """
        pass

    @abstractmethod
    async def shutdown(self) -> bool:
        """Release everything the service owns.

        Returns:
            True if shutdown was successful, False otherwise
        """
        pass

    def is_initialized(self) -> bool:
        return self._initialized

    def set_config(self, cfg: DictConfig) -> None:
        self._config = cfg
        logger.debug(f"{self.name} service configuration updated")

    def _mark_initialized(self) -> None:
        self._initialized = True
        logger.info(f"{self.name} service initialized")

    def _mark_shutdown(self) -> None:
        self._initialized = False
        logger.info(f"{self.name} service shut down")
