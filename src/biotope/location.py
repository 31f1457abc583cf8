from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Iterable, List, Optional, Tuple

from .config import EcologyConfig
from .individual import XML_MAIN_NODE_NAME as XML_INDIVIDUAL_NODE_NAME
from .individual import Individual
from .metrics import CycleMetrics, create_metrics
from .source_factory import XML_MAIN_NODE_NAME as XML_SOURCE_NODE_NAME
from .source_factory import create_source, save_source
from .sources import Source
from .utils import indent
from .xml_node import XmlNode

if TYPE_CHECKING:
    from .rng import DeterministicRng

logger = logging.getLogger(__name__)

XML_MAIN_NODE_NAME = "Location"
XML_RESOURCES_NODE_NAME = "Resources"
XML_INDIVIDUALS_NODE_NAME = "Individuals"


class Location:
    """Owns a set of sources and the individuals competing for them.

    A cycle runs three phases in a fixed order: resources, maintenance and
    reproduction. Dead individuals are removed only at the end of each phase,
    so indices taken during a phase stay valid until the phase completes.
    Every random draw goes through the shared ``DeterministicRng`` in
    iteration order, which makes a run reproducible from its seed.
    """

    def __init__(
        self,
        sources: Optional[Iterable[Source]] = None,
        individuals: Optional[Iterable[Individual]] = None,
        ecology: Optional[EcologyConfig] = None,
    ):
        self._sources: List[Source] = list(sources or [])
        self._individuals: List[Individual] = list(individuals or [])
        self._ecology = ecology if ecology is not None else EcologyConfig()

    @classmethod
    def from_xml(cls, node: XmlNode, ecology: Optional[EcologyConfig] = None) -> Location:
        sources = [
            create_source(source_node)
            for source_node in node.get_child_node(XML_RESOURCES_NODE_NAME).get_child_nodes(XML_SOURCE_NODE_NAME)
        ]
        individuals = [
            Individual.from_xml(individual_node)
            for individual_node in node.get_child_node(XML_INDIVIDUALS_NODE_NAME).get_child_nodes(
                XML_INDIVIDUAL_NODE_NAME
            )
        ]
        logger.debug("Loaded location with %d sources and %d individuals", len(sources), len(individuals))
        return cls(sources, individuals, ecology)

    def save(self, node: XmlNode) -> None:
        resources_node = node.append_child_node(XML_RESOURCES_NODE_NAME)
        for source in self._sources:
            save_source(source, resources_node.append_child_node(XML_SOURCE_NODE_NAME))
        individuals_node = node.append_child_node(XML_INDIVIDUALS_NODE_NAME)
        for individual in self._individuals:
            individual.save(individuals_node.append_child_node(XML_INDIVIDUAL_NODE_NAME))

    @property
    def ecology(self) -> EcologyConfig:
        return self._ecology

    @property
    def sources(self) -> Tuple[Source, ...]:
        return tuple(self._sources)

    @property
    def individuals(self) -> Tuple[Individual, ...]:
        return tuple(self._individuals)

    def add_source(self, source: Source) -> None:
        self._sources.append(source)

    def add_individual(self, individual: Individual) -> None:
        self._individuals.append(individual)

    def copy(self) -> Location:
        return Location(
            sources=[source.clone() for source in self._sources],
            individuals=[individual.copy() for individual in self._individuals],
            ecology=replace(self._ecology),
        )

    def __copy__(self) -> Location:
        return self.copy()

    def __deepcopy__(self, memo: dict) -> Location:
        return self.copy()

    def _clean_dead_individuals(self) -> int:
        before = len(self._individuals)
        self._individuals = [individual for individual in self._individuals if individual.alive]
        return before - len(self._individuals)

    def _split_resources(self, rng: DeterministicRng) -> int:
        # Single resource type: every individual competes for every source.
        hunger_limit = self._ecology.hunger_energy_limit
        feed_death_probability = self._ecology.feed_death_probability
        consumed = 0
        for source in self._sources:
            while not source.empty():
                weights = [individual.competitive_weight(hunger_limit) for individual in self._individuals]
                if sum(weights) == 0:
                    break
                winner = self._individuals[rng.next_weighted_index(weights)]
                winner.feed(1)
                consumed += source.consume(1)
                if rng.next_bernoulli(feed_death_probability):
                    winner.die()
        return consumed

    def resource_phase(self, rng: DeterministicRng) -> int:
        consumed = self._split_resources(rng)
        self._clean_dead_individuals()
        for source in self._sources:
            source.regenerate()
        return consumed

    def maintenance_phase(self, rng: DeterministicRng) -> int:
        for individual in self._individuals:
            individual.perform_maintenance(
                rng,
                self._ecology.maintenance_energy_cost,
                self._ecology.maintenance_death_probability,
            )
        return self._clean_dead_individuals()

    def reproduction_phase(self, rng: DeterministicRng) -> int:
        offspring: List[Individual] = []
        for individual in self._individuals:
            if individual.will_reproduce(rng):
                offspring.append(individual.reproduce(rng))
        self._individuals.extend(offspring)
        self._clean_dead_individuals()
        return len(offspring)

    def cycle(self, rng: DeterministicRng, tick: int = 0) -> CycleMetrics:
        population_before = len(self._individuals)
        consumed = self.resource_phase(rng)
        self.maintenance_phase(rng)
        births = self.reproduction_phase(rng)
        deaths = population_before + births - len(self._individuals)
        metrics = create_metrics(tick, births, deaths, consumed, self._individuals, self._sources)
        logger.debug(
            "tick=%d population=%d births=%d deaths=%d consumed=%d",
            tick,
            metrics.population,
            births,
            deaths,
            consumed,
        )
        return metrics

    def describe(self, indent_level: int = 0) -> str:
        lines = [f"{indent(indent_level)}Location:\n", f"{indent(indent_level)}-Sources:\n"]
        lines.extend(source.describe(indent_level + 1) for source in self._sources)
        lines.append(f"{indent(indent_level)}-Individuals:\n")
        lines.extend(individual.describe(indent_level + 1) for individual in self._individuals)
        return "".join(lines)

    def __str__(self) -> str:
        return self.describe()
