import pytest
from omegaconf import OmegaConf

from pythagorean_cache import BufferCache, ConfigurationError
from pythagorean_cache.utils.config import ConfigManager, config_manager, load_cache_options


def test_load_cache_options_from_dict():
    assert load_cache_options({"size": 10, "interval": 500}) == (10, 500)
    assert load_cache_options({"size": 3}) == (3, None)
    assert load_cache_options({}) == (None, None)
    assert load_cache_options(None) == (None, None)


def test_load_cache_options_from_dictconfig():
    cfg = OmegaConf.create({"size": 4, "interval": None})
    assert load_cache_options(cfg) == (4, None)


def test_load_cache_options_accepts_integer_strings():
    assert load_cache_options({"size": " 7 ", "interval": "250"}) == (7, 250)
    assert load_cache_options({"size": "", "interval": "100"}) == (None, 100)


def test_load_cache_options_resolves_env(monkeypatch):
    monkeypatch.setenv("TEST_CACHE_SIZE", "12")
    cfg = OmegaConf.create({"size": "${oc.env:TEST_CACHE_SIZE,3}"})
    assert load_cache_options(cfg) == (12, None)


@pytest.mark.parametrize("options", [
    {"size": "ten"},
    {"size": 0},
    {"interval": -5},
    {"interval": 1.5},
])
def test_load_cache_options_rejects_invalid(options):
    with pytest.raises(ConfigurationError):
        load_cache_options(options)


def test_load_cache_options_rejects_non_mapping():
    with pytest.raises(ConfigurationError):
        load_cache_options([("size", 1)])


def test_from_config_builds_cache():
    cache = BufferCache.from_config(OmegaConf.create({"size": 2}), name="cfg")
    assert cache.size == 2
    assert cache.name == "cfg"


def test_from_config_without_triggers_fails():
    with pytest.raises(ConfigurationError):
        BufferCache.from_config({})


def test_config_manager_is_singleton():
    assert ConfigManager() is config_manager


def test_config_manager_reads_sections():
    manager = ConfigManager()
    manager.set_config(OmegaConf.create({
        "debug": True,
        "log_file": None,
        "cache": {"size": 5, "interval": 100},
        "caches": {"orders": {"size": 50}, "clicks": {"interval": 250}},
    }))

    assert manager.is_debug() is True
    assert manager.get_log_file() is None
    assert manager.get_cache_options() == (5, 100)
    assert manager.get_named_caches() == {"orders": (50, None), "clicks": (None, 250)}
    assert manager.to_dict()["cache"] == {"size": 5, "interval": 100}
