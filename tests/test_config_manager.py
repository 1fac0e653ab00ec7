import pytest
import yaml

from revdash.managers.config_manager import ConfigManager
from revdash.models.config import SimulationConfig
from revdash.models.enums import TransactionCategory


def write_yaml(path, data):
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


def test_bundled_config_matches_defaults():
    manager = ConfigManager()
    config = manager.load()

    assert not manager.used_fallback
    assert config == SimulationConfig()


def test_bundled_factory_defaults_match_defaults():
    manager = ConfigManager(config_path=ConfigManager().factory_defaults_path)
    assert manager.load() == SimulationConfig()


def test_partial_override(tmp_path):
    path = write_yaml(tmp_path / "sim.yaml", {
        "revenue": {"initial": 1000.0, "per_tick": 1.5},
        "feed": {"capacity": 3},
    })

    config = ConfigManager(path).load()

    assert config.initial_revenue == 1000.0
    assert config.revenue_per_tick == 1.5
    assert config.feed_capacity == 3
    assert config.burst_count == 5


def test_catalog_override(tmp_path):
    tiers = {"descriptions": ["Only"], "amounts": [1.0]}
    path = write_yaml(tmp_path / "sim.yaml", {
        "catalog": {"subscription": tiers, "one-time": tiers, "ENTERPRISE": tiers},
    })

    config = ConfigManager(path).load()

    assert config.catalog.for_category(TransactionCategory.ENTERPRISE).amounts == (1.0,)


def test_missing_file_falls_back(tmp_path):
    manager = ConfigManager(tmp_path / "missing.yaml")
    config = manager.load()

    assert manager.used_fallback
    assert config == SimulationConfig()


def test_malformed_yaml_falls_back(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("revenue: [unclosed", encoding="utf-8")

    manager = ConfigManager(path)
    manager.load()

    assert manager.used_fallback


@pytest.mark.parametrize("data", [
    {"schedule": {"min_delay_ms": 9000, "max_delay_ms": 8000}},
    {"feed": {"capacity": 0}},
    {"catalog": {"subscription": {"descriptions": ["x"], "amounts": [-1]}}},
    {"catalog": {"subscription": {"descriptions": ["x"], "amounts": [1]}}},
    {"revenue": "not a mapping"},
])
def test_invalid_values_fall_back(tmp_path, data):
    manager = ConfigManager(write_yaml(tmp_path / "sim.yaml", data))
    config = manager.load()

    assert manager.used_fallback
    assert config == SimulationConfig()


def test_broken_defaults_propagate(tmp_path):
    manager = ConfigManager(tmp_path / "missing.yaml", defaults_path=tmp_path / "also_missing.yaml")

    with pytest.raises(OSError):
        manager.load()
