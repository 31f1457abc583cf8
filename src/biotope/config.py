from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import yaml


@dataclass
class EcologyConfig:
    feed_death_probability: float = 0.04
    hunger_energy_limit: float = 100.0
    maintenance_energy_cost: float = 1.0
    maintenance_death_probability: float = 0.0


@dataclass
class PopulationConfig:
    initial_individuals: int = 20
    initial_energy: float = 10.0
    reproduction_energy_threshold: float = 20.0
    reproduction_probability: float = 0.3
    mutability_ratio: float = 0.05


@dataclass
class SourceConfig:
    type: str = "Constant"
    resource_id: str = "Food"
    units: Optional[int] = None
    max_units: Optional[int] = None
    increment: int = 1
    growth_ratio: float = 0.0


def _default_sources() -> List[SourceConfig]:
    return [SourceConfig(type="Constant", resource_id="Food", units=50, max_units=50)]


@dataclass
class SimulationConfig:
    seed: int = 42
    cycles: int = 100
    location_file: Optional[str] = None
    tick_interval: float = 0.1
    broadcast_interval: int = 1
    ecology: EcologyConfig = field(default_factory=EcologyConfig)
    population: PopulationConfig = field(default_factory=PopulationConfig)
    sources: List[SourceConfig] = field(default_factory=_default_sources)

    @staticmethod
    def from_yaml(path: Path) -> "SimulationConfig":
        data = yaml.safe_load(Path(path).read_text()) or {}
        return load_config(data)


def load_config(raw: dict) -> SimulationConfig:
    ecology = EcologyConfig(**raw.get("ecology", {}))
    population = PopulationConfig(**raw.get("population", {}))
    if "sources" in raw:
        sources = [SourceConfig(**source) for source in raw["sources"] or []]
    else:
        sources = _default_sources()
    sim_values = {k: v for k, v in raw.items() if k not in {"ecology", "population", "sources"}}
    return SimulationConfig(ecology=ecology, population=population, sources=sources, **sim_values)
