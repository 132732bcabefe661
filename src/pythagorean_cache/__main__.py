"""
Entry point for running the pythagorean_cache demo as a module.
This allows running the demo with `python -m pythagorean_cache`.

The demo pushes a stream of sample events into a BufferCache configured from
the ``cache`` section and logs every batch it dumps.
"""

import asyncio
from typing import Any, List

import hydra
from loguru import logger
from omegaconf import DictConfig

from .buffer import BufferCache
from .models.config import DUMP_EVENT
from .services import get_logging_service
from .utils.config import config_manager


async def run_demo(cfg: DictConfig) -> List[List[Any]]:
    """Push sample events through a cache and collect the batches.

    Args:
        cfg: Configuration with ``cache`` and ``demo`` sections

    Returns:
        Every batch that was dumped, in order
    """
    logging_service = get_logging_service()
    await logging_service.initialize(cfg)
    config_manager.set_config(cfg)

    demo = cfg.get("demo", {})
    events = int(demo.get("events", 25))
    rate = float(demo.get("rate", 20))

    batches: List[List[Any]] = []

    def on_dump(batch: List[Any]) -> None:
        batches.append(batch)
        logger.info(f"Dumped batch #{len(batches)} with {len(batch)} events: {batch}")

    size, interval = config_manager.get_cache_options()
    async with BufferCache(size=size, interval=interval, name="demo") as cache:
        cache.on(DUMP_EVENT, on_dump)
        for i in range(events):
            remaining = cache.push({"seq": i})
            logger.debug(f"Pushed event {i}, {remaining} buffered")
            if rate > 0:
                await asyncio.sleep(1 / rate)
        logger.info(f"Cache stats before close: {cache.get_stats()}")

    await logging_service.shutdown()
    return batches


@hydra.main(version_base=None, config_path="../../config", config_name="config")
def main(cfg: DictConfig) -> None:
    """Run the demo with Hydra configuration.

    Args:
        cfg: Configuration from Hydra
    """
    asyncio.run(run_demo(cfg))


if __name__ == "__main__":
    main()
