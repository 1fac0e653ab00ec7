"""
Config Manager

Loads the simulation YAML file into a frozen SimulationConfig.
Falls back to factory defaults when the main file is missing or invalid.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from revdash.models.config import SimulationConfig
from revdash.models.errors import TransactionCatalogError
from revdash.models.transaction import CategoryTiers, TransactionCatalog
from revdash.utils.logger import get_logger, LogCategory
from revdash.utils.serialization import Serializer

log = get_logger().for_category(LogCategory.CONFIG)

CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"


class ConfigManager:
    """
    Simulation configuration manager

    Sections of simulation.yaml map onto SimulationConfig fields; any key
    left out keeps the dataclass default.

    Example:
        config_manager = ConfigManager()
        config = config_manager.load()

        config.revenue_per_tick        # 0.23
        config.catalog.categories      # (SUBSCRIPTION, ONE_TIME, ENTERPRISE)
    """

    # section → {yaml key: SimulationConfig field}
    FIELD_MAP: Dict[str, Dict[str, str]] = {
        "revenue": {
            "initial": "initial_revenue",
            "per_tick": "revenue_per_tick",
            "tick_interval_ms": "tick_interval_ms",
        },
        "metrics": {
            "today_factor": "today_factor",
            "month_factor": "month_factor",
            "days_per_month": "days_per_month",
            "growth_percent": "growth_percent",
        },
        "animation": {
            "duration_ms": "animation_duration_ms",
            "render_fps": "render_fps",
        },
        "feed": {
            "capacity": "feed_capacity",
        },
        "schedule": {
            "burst_count": "burst_count",
            "burst_spacing_ms": "burst_spacing_ms",
            "min_delay_ms": "min_delay_ms",
            "max_delay_ms": "max_delay_ms",
        },
    }

    def __init__(
        self,
        config_path: Union[str, Path, None] = None,
        defaults_path: Union[str, Path, None] = None,
    ):
        """
        Args:
            config_path: Path to simulation.yaml (default: bundled config/)
            defaults_path: Path to factory defaults fallback
        """
        self.config_path = Path(config_path) if config_path else CONFIG_DIR / "simulation.yaml"
        self.factory_defaults_path = Path(defaults_path) if defaults_path else CONFIG_DIR / "factory_defaults.yaml"
        self.data: Dict[str, Any] = {}
        self.config: Optional[SimulationConfig] = None
        self.used_fallback = False

    def load(self) -> SimulationConfig:
        """
        Load configuration

        Process:
        1. Load and parse main simulation.yaml
        2. On any failure, log it and load factory_defaults.yaml instead
        3. Failure of the defaults file propagates

        Returns:
            Validated SimulationConfig
        """
        try:
            self.data = self._read_yaml(self.config_path)
            self.config = self.parse(self.data)
            self.used_fallback = False
            log.info("Configuration loaded", path=str(self.config_path))

        except (OSError, yaml.YAMLError, ValueError, TypeError, TransactionCatalogError) as ex:
            log.error("Failed to load simulation config", error=str(ex), error_type=type(ex).__name__)
            log.warn("Falling back to factory defaults", path=str(self.factory_defaults_path))

            self.data = self._read_yaml(self.factory_defaults_path)
            self.config = self.parse(self.data)
            self.used_fallback = True

        return self.config

    @staticmethod
    def _read_yaml(path: Path) -> Dict[str, Any]:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"{path.name}: top level must be a mapping")
        return data

    @classmethod
    def parse(cls, data: Dict[str, Any]) -> SimulationConfig:
        """Build a SimulationConfig from an already-loaded YAML dict"""
        kwargs: Dict[str, Any] = {}

        for section, fields in cls.FIELD_MAP.items():
            values = data.get(section) or {}
            if not isinstance(values, dict):
                raise ValueError(f"Section '{section}' must be a mapping")
            for key, field_name in fields.items():
                if key in values:
                    kwargs[field_name] = values[key]

        if "catalog" in data:
            kwargs["catalog"] = cls._parse_catalog(data["catalog"])

        config = SimulationConfig(**kwargs)
        log.debug("Config parsed", overrides=len(kwargs))
        return config

    @staticmethod
    def _parse_catalog(raw: Any) -> TransactionCatalog:
        if not isinstance(raw, dict):
            raise TransactionCatalogError("catalog must be a mapping of category → tiers")

        tiers = {}
        for name, entry in raw.items():
            category = Serializer.category_from_str(str(name))
            if not isinstance(entry, dict):
                raise TransactionCatalogError(f"{name}: expected descriptions/amounts mapping")

            tiers[category] = CategoryTiers(
                category=category,
                descriptions=tuple(str(d) for d in entry.get("descriptions") or ()),
                amounts=tuple(float(a) for a in entry.get("amounts") or ()),
            )
            log.debug(f"Catalog loaded: {category.value}", tiers=len(tiers[category].amounts))

        return TransactionCatalog(tiers=tiers)
