from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from dataclasses import fields as dataclass_fields
from pathlib import Path
from time import perf_counter
from typing import Any, Deque, Dict, List, Optional, Union

from .config import SimulationConfig, SourceConfig
from .errors import DataFormatError
from .genotype import Genotype
from .individual import Individual
from .location import XML_MAIN_NODE_NAME, Location
from .metrics import CycleMetrics, create_metrics
from .phenotype import Phenotype
from .rng import DeterministicRng
from .source_factory import SOURCE_TYPES
from .sources import ConstantSource, Source
from .xml_node import XmlDocument

logger = logging.getLogger(__name__)

METRICS_HISTORY_LENGTH = 1000


@dataclass(slots=True)
class Snapshot:
    tick: int
    seed: int
    metrics: CycleMetrics
    sources: List[Dict[str, Any]]
    individuals: List[Dict[str, Any]]


def build_source(config: SourceConfig) -> Source:
    source_type = SOURCE_TYPES.get(config.type)
    if source_type is None:
        raise DataFormatError(f"unknown source type {config.type!r}")
    field_names = {item.name for item in dataclass_fields(source_type)}
    values: Dict[str, Any] = {}
    if config.max_units is not None and "max_units" in field_names:
        values["max_units"] = config.max_units
    elif source_type is ConstantSource and config.units is not None:
        # A constant source without an explicit cap refills to its initial stock.
        values["max_units"] = config.units
    if "increment" in field_names:
        values["increment"] = config.increment
    if "growth_ratio" in field_names:
        values["growth_ratio"] = config.growth_ratio
    units = config.units if config.units is not None else source_type.default_unit_count(values)
    if units is None:
        raise DataFormatError(f"source {config.resource_id!r} of type {config.type!r} needs an initial unit count")
    return source_type(config.resource_id, units, **values)


def build_location(config: SimulationConfig) -> Location:
    population = config.population
    genotype = Genotype(
        reproduction_energy_threshold=population.reproduction_energy_threshold,
        reproduction_probability=population.reproduction_probability,
        mutability_ratio=population.mutability_ratio,
    )
    individuals = [
        Individual(genotype=genotype, phenotype=Phenotype(population.initial_energy))
        for _ in range(population.initial_individuals)
    ]
    return Location([build_source(source) for source in config.sources], individuals, config.ecology)


def load_location(path: Union[str, Path], config: Optional[SimulationConfig] = None) -> Location:
    ecology = config.ecology if config is not None else None
    document = XmlDocument.load(path)
    root = document.root
    if root.name != XML_MAIN_NODE_NAME:
        raise DataFormatError(f"expected <{XML_MAIN_NODE_NAME}> root node in {path}, found <{root.name}>")
    return Location.from_xml(root, ecology)


def save_location(location: Location, path: Union[str, Path]) -> None:
    document = XmlDocument.create(XML_MAIN_NODE_NAME)
    location.save(document.root)
    document.save(path)


def location_to_xml(location: Location) -> str:
    document = XmlDocument.create(XML_MAIN_NODE_NAME)
    location.save(document.root)
    return document.to_string()


class World:
    def __init__(self, config: SimulationConfig, location: Optional[Location] = None):
        self._config = config
        self._rng = DeterministicRng(config.seed)
        if location is None:
            if config.location_file:
                location = load_location(config.location_file, config)
            else:
                location = build_location(config)
        self._initial_location = location.copy()
        self._location = location
        self.metrics: Deque[CycleMetrics] = deque(maxlen=METRICS_HISTORY_LENGTH)
        logger.info(
            "World seeded with %d, %d sources, %d individuals",
            config.seed,
            len(location.sources),
            len(location.individuals),
        )

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def location(self) -> Location:
        return self._location

    @property
    def rng(self) -> DeterministicRng:
        return self._rng

    def reset(self) -> None:
        self._rng.reset()
        self._location = self._initial_location.copy()
        self.metrics.clear()

    def step(self, tick: int) -> CycleMetrics:
        start = perf_counter()
        metrics = self._location.cycle(self._rng, tick)
        logger.debug("tick %d took %.3f ms", tick, (perf_counter() - start) * 1000.0)
        self.metrics.append(metrics)
        return metrics

    def snapshot(self, tick: int) -> Snapshot:
        location = self._location
        metrics = self.metrics[-1] if self.metrics else create_metrics(
            tick, 0, 0, 0, location.individuals, location.sources
        )
        return Snapshot(
            tick=tick,
            seed=self._config.seed,
            metrics=metrics,
            sources=[
                {
                    "type": source.TYPE,
                    "resource_id": source.resource_id,
                    "units": None if source.is_unlimited() else source.current_unit_count,
                }
                for source in location.sources
            ],
            individuals=[
                {
                    "energy": individual.energy,
                    "reproduction_energy_threshold": individual.genotype.reproduction_energy_threshold,
                    "reproduction_probability": individual.genotype.reproduction_probability,
                    "mutability_ratio": individual.genotype.mutability_ratio,
                }
                for individual in location.individuals
            ],
        )
