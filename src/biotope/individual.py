from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .genotype import Genotype
from .phenotype import Phenotype
from .utils import indent
from .xml_node import XmlNode

if TYPE_CHECKING:
    from .rng import DeterministicRng

XML_MAIN_NODE_NAME = "Individual"
XML_GENOTYPE_NAME = "Genotype"
XML_PHENOTYPE_NAME = "Phenotype"


@dataclass(slots=True)
class Individual:
    genotype: Genotype
    phenotype: Phenotype = field(default_factory=Phenotype)
    alive: bool = True

    @classmethod
    def from_xml(cls, node: XmlNode) -> Individual:
        return cls(
            genotype=Genotype.from_xml(node.get_child_node(XML_GENOTYPE_NAME)),
            phenotype=Phenotype.from_xml(node.get_child_node(XML_PHENOTYPE_NAME)),
        )

    def save(self, node: XmlNode) -> None:
        self.genotype.save(node.append_child_node(XML_GENOTYPE_NAME))
        self.phenotype.save(node.append_child_node(XML_PHENOTYPE_NAME))

    @property
    def energy(self) -> float:
        return self.phenotype.energy

    def is_dead(self) -> bool:
        return not self.alive

    def die(self) -> None:
        self.alive = False

    def is_hungry(self, hunger_energy_limit: float) -> bool:
        return self.alive and self.phenotype.energy < hunger_energy_limit

    def competitive_weight(self, hunger_energy_limit: float) -> float:
        if not self.is_hungry(hunger_energy_limit):
            return 0.0
        return self.phenotype.energy

    def feed(self, units: int) -> None:
        if not self.alive:
            return
        self.phenotype.feed(units)

    def perform_maintenance(
        self, rng: DeterministicRng, energy_cost: float, death_probability: float = 0.0
    ) -> None:
        if not self.alive:
            return
        if not self.phenotype.spend(energy_cost) or self.phenotype.energy <= 0.0:
            self.die()
            return
        if death_probability > 0.0 and rng.next_bernoulli(death_probability):
            self.die()

    def will_reproduce(self, rng: DeterministicRng) -> bool:
        if not self.alive:
            return False
        return self.genotype.will_reproduce(self.phenotype, rng)

    def reproduce(self, rng: DeterministicRng) -> Individual:
        child_phenotype = self.phenotype.split()
        return Individual(genotype=self.genotype.mutate(rng), phenotype=child_phenotype)

    def copy(self) -> Individual:
        return Individual(genotype=self.genotype, phenotype=self.phenotype.copy(), alive=self.alive)

    def describe(self, indent_level: int = 0) -> str:
        return (
            f"{indent(indent_level)}Individual{'' if self.alive else ' (dead)'}:\n"
            f"{indent(indent_level)}-Genotype:\n"
            f"{self.genotype.describe(indent_level + 1)}"
            f"{indent(indent_level)}-Phenotype:\n"
            f"{self.phenotype.describe(indent_level + 1)}"
        )
