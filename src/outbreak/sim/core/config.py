from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}

# camelCase keys accepted alongside the field names
_CITY_ALIASES = {
    "populationPercentage": "population_percentage",
    "blockSize": "block_size",
    "buildingSize": "building_size",
    "roomSize": "room_size",
    "numberExits": "number_exits",
    "darkChance": "dark_chance",
    "subdivisionDepth": "subdivision_depth",
}


@dataclass(frozen=True)
class SizeRange:
    min: int
    max: int

    def __post_init__(self) -> None:
        if self.min < 0 or self.max < self.min:
            raise ValueError(f"invalid range {self.min}..{self.max}")


@dataclass
class CityConfig:
    population_percentage: float = 0.05
    block_size: SizeRange = field(default_factory=lambda: SizeRange(15, 40))
    building_size: SizeRange = field(default_factory=lambda: SizeRange(10, 25))
    room_size: SizeRange = field(default_factory=lambda: SizeRange(3, 5))
    number_exits: SizeRange = field(default_factory=lambda: SizeRange(2, 10))
    dark_chance: float = 0.3
    subdivision_depth: Optional[int] = None

    def __post_init__(self) -> None:
        if not 0.0 <= self.population_percentage <= 1.0:
            raise ValueError(f"population_percentage must be in [0, 1], got {self.population_percentage}")
        if not 0.0 <= self.dark_chance <= 1.0:
            raise ValueError(f"dark_chance must be in [0, 1], got {self.dark_chance}")
        if self.subdivision_depth is not None and self.subdivision_depth < 0:
            raise ValueError("subdivision_depth must be >= 0")
        # a zero split threshold never yields a leaf
        for name in ("block_size", "building_size"):
            if getattr(self, name).min < 1:
                raise ValueError(f"{name}.min must be >= 1, got {getattr(self, name).min}")


@dataclass
class SimulationConfig:
    width: int = 150
    height: int = 100
    map_seed: Optional[str] = None
    config_version: str = "v1"
    city: CityConfig = field(default_factory=CityConfig)

    def __post_init__(self) -> None:
        if self.width < 3 or self.height < 3:
            raise ValueError(f"city must be at least 3x3 cells, got {self.width}x{self.height}")
        if self.map_seed is not None:
            self.map_seed = str(self.map_seed)

    @staticmethod
    def from_yaml(path: Path) -> "SimulationConfig":
        data = yaml.safe_load(Path(path).read_text()) or {}
        return load_config(data)


@dataclass
class AppConfig:
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    broadcast_interval: int = 2
    ticks_per_second: float = 100.0
    scale: int = 4
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        self.log_level = self.log_level.upper()
        if self.log_level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level}")
        if self.ticks_per_second <= 0:
            raise ValueError("ticks_per_second must be positive")

    @staticmethod
    def from_yaml(path: Path) -> "AppConfig":
        data = yaml.safe_load(Path(path).read_text()) or {}
        return load_app_config(data)


def _size_range(value: Any, default: SizeRange) -> SizeRange:
    if value is None:
        return default
    if isinstance(value, Mapping):
        return SizeRange(int(value.get("min", default.min)), int(value.get("max", default.max)))
    if isinstance(value, (tuple, list)) and len(value) == 2:
        return SizeRange(int(value[0]), int(value[1]))
    raise ValueError(f"expected {{min, max}} or a pair, got {value!r}")


def load_city_config(raw: Mapping[str, Any]) -> CityConfig:
    values: Dict[str, Any] = {_CITY_ALIASES.get(key, key): value for key, value in raw.items()}
    defaults = CityConfig()
    for name in ("block_size", "building_size", "room_size", "number_exits"):
        values[name] = _size_range(values.get(name), getattr(defaults, name))
    return CityConfig(**values)


def load_config(raw: Mapping[str, Any]) -> SimulationConfig:
    city = load_city_config(raw.get("city", {}) or {})
    sim_values = {k: v for k, v in raw.items() if k != "city"}
    return SimulationConfig(city=city, **sim_values)


def load_app_config(raw: Mapping[str, Any]) -> AppConfig:
    simulation = load_config(raw.get("simulation", {}) or {})
    app_values = {k: v for k, v in raw.items() if k != "simulation"}
    return AppConfig(simulation=simulation, **app_values)
