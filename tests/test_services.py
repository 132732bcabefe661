import sys

import pytest
from loguru import logger
from omegaconf import OmegaConf

from pythagorean_cache import BufferCache, ConfigurationError
from pythagorean_cache.__main__ import run_demo
from pythagorean_cache.services import logging_service
from pythagorean_cache.services import (
    CacheService,
    LoggingService,
    get_cache_service,
    get_logging_service,
)


@pytest.mark.asyncio
async def test_cache_service_builds_caches_from_config():
    service = CacheService()
    cfg = OmegaConf.create({
        "caches": {
            "orders": {"size": 2},
            "clicks": {"size": 10, "interval": 1000},
        }
    })

    assert await service.initialize(cfg) is True
    assert service.is_initialized()
    assert sorted(service.cache_names()) == ["clicks", "orders"]
    assert "orders" in service

    clicks = service.get_cache("clicks")
    assert isinstance(clicks, BufferCache)
    assert clicks.is_interval_running

    assert await service.shutdown() is True
    assert not clicks.is_interval_running
    assert service.cache_names() == []
    assert "orders" not in service


@pytest.mark.asyncio
async def test_cache_service_shutdown_flushes_remaining_items():
    service = CacheService()
    await service.initialize()
    cache = service.create_cache("events", size=3, interval=1000)
    batches = []
    cache.on("dump", batches.append)
    cache.push("a", "b")

    await service.shutdown()

    assert batches == [["a", "b"]]


@pytest.mark.asyncio
async def test_cache_service_rejects_bad_config():
    service = CacheService()
    cfg = OmegaConf.create({"caches": {"good": {"size": 1, "interval": 1000}, "bad": {}}})

    assert await service.initialize(cfg) is False
    assert not service.is_initialized()
    assert service.cache_names() == []


def test_create_cache_rejects_duplicates():
    service = CacheService()
    service.create_cache("orders", size=5)
    with pytest.raises(ValueError, match="already exists"):
        service.create_cache("orders", size=5)


def test_create_cache_validates_options():
    service = CacheService()
    with pytest.raises(ConfigurationError):
        service.create_cache("empty")


@pytest.mark.asyncio
async def test_remove_cache_closes_it():
    service = CacheService()
    cache = service.create_cache("orders", size=5)
    batches = []
    cache.on("dump", batches.append)
    cache.push(1)

    assert await service.remove_cache("orders") is True
    assert await service.remove_cache("orders") is False
    assert batches == [[1]]


def test_get_stats_per_cache():
    service = CacheService()
    service.create_cache("a", size=2).push(1, 2)
    service.create_cache("b", size=5).push(1)

    stats = service.get_stats()
    assert stats["a"]["total_dumps"] == 1
    assert stats["b"]["current_size"] == 1


def test_global_services_are_shared():
    assert get_cache_service() is get_cache_service()
    assert get_logging_service() is get_logging_service()


@pytest.mark.asyncio
async def test_logging_service_levels(tmp_path):
    service = LoggingService()
    log_file = tmp_path / "cache.log"
    cfg = OmegaConf.create({"debug": True, "log_file": str(log_file)})

    assert await service.initialize(cfg) is True
    assert service.get_log_level(cfg) == "DEBUG"
    assert service.get_log_level(OmegaConf.create({})) == "INFO"
    assert await service.shutdown() is True
    assert log_file.exists()


@pytest.mark.asyncio
async def test_run_demo_collects_batches():
    cfg = OmegaConf.create({
        "debug": False,
        "log_file": None,
        "cache": {"size": 5, "interval": 1000},
        "demo": {"events": 12, "rate": 0},
    })

    batches = await run_demo(cfg)

    assert [len(batch) for batch in batches] == [5, 5, 2]
    assert batches[0][0] == {"seq": 0}
    assert batches[-1][-1] == {"seq": 11}


def test_empty_cache_is_found_by_name():
    service = CacheService()
    service.create_cache("idle", size=5)

    cache = service.get_cache("idle")
    assert cache is not None
    assert len(cache) == 0
    assert "idle" in service
    assert service.get_cache("missing") is None


@pytest.mark.asyncio
async def test_logging_service_keeps_foreign_sinks():
    messages = []
    sink_id = logger.add(messages.append, format="{message}")
    service = LoggingService()
    try:
        assert await service.initialize(OmegaConf.create({})) is True
        logger.info("still delivered")
        assert await service.shutdown() is True
    finally:
        logger.remove(sink_id)

    assert any("still delivered" in message for message in messages)


@pytest.mark.asyncio
async def test_logging_service_restores_default_sink(monkeypatch, capsys):
    default_id = logger.add(sys.stderr, format="{message}")
    monkeypatch.setattr(logging_service, "_default_handler_id", default_id)
    service = LoggingService()

    await service.initialize(OmegaConf.create({}))
    await service.shutdown()
    capsys.readouterr()

    logger.info("back on the default sink")
    restored_id = logging_service._default_handler_id
    logger.remove(restored_id)

    assert restored_id not in (None, default_id)
    assert "back on the default sink" in capsys.readouterr().err
