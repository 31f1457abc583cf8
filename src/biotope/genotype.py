from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .errors import DataFormatError
from .utils import clamp_unit, indent
from .xml_node import XmlNode

if TYPE_CHECKING:
    from .phenotype import Phenotype
    from .rng import DeterministicRng

XML_THRESHOLD_NAME = "ReproductionEnergyThreshold"
XML_PROBABILITY_NAME = "ReproductionProbability"
XML_MUTABILITY_NAME = "MutabilityRatio"


@dataclass(frozen=True, slots=True)
class Genotype:
    reproduction_energy_threshold: float
    reproduction_probability: float
    mutability_ratio: float

    def __post_init__(self) -> None:
        if self.reproduction_energy_threshold < 0:
            raise ValueError(
                f"reproduction energy threshold must be non-negative, got {self.reproduction_energy_threshold}"
            )
        if not 0.0 <= self.reproduction_probability <= 1.0:
            raise ValueError(f"reproduction probability must be in [0, 1], got {self.reproduction_probability}")
        if not 0.0 <= self.mutability_ratio <= 1.0:
            raise ValueError(f"mutability ratio must be in [0, 1], got {self.mutability_ratio}")

    @classmethod
    def from_xml(cls, node: XmlNode) -> Genotype:
        threshold = node.get_child_node_text_as(XML_THRESHOLD_NAME, float)
        probability = node.get_child_node_text_as(XML_PROBABILITY_NAME, float)
        mutability = node.get_child_node_text_as(XML_MUTABILITY_NAME, float)
        try:
            return cls(threshold, probability, mutability)
        except ValueError as exc:
            raise DataFormatError(f"invalid genotype in <{node.name}>: {exc}") from exc

    def save(self, node: XmlNode) -> None:
        node.append_child_node(XML_THRESHOLD_NAME).set_text(float(self.reproduction_energy_threshold))
        node.append_child_node(XML_PROBABILITY_NAME).set_text(float(self.reproduction_probability))
        node.append_child_node(XML_MUTABILITY_NAME).set_text(float(self.mutability_ratio))

    def will_reproduce(self, phenotype: Phenotype, rng: DeterministicRng) -> bool:
        if phenotype.energy < self.reproduction_energy_threshold:
            return False
        return rng.next_bernoulli(self.reproduction_probability)

    def mutate(self, rng: DeterministicRng) -> Genotype:
        ratio = self.mutability_ratio
        threshold = self.reproduction_energy_threshold
        # Draw order is fixed: threshold, probability, mutability.
        threshold_delta = rng.next_range(-ratio, ratio)
        probability_delta = rng.next_range(-ratio, ratio)
        mutability_delta = rng.next_range(-ratio, ratio)
        return Genotype(
            reproduction_energy_threshold=max(0.0, threshold + threshold_delta * max(threshold, 1.0)),
            reproduction_probability=clamp_unit(self.reproduction_probability + probability_delta),
            mutability_ratio=clamp_unit(self.mutability_ratio + mutability_delta),
        )

    def describe(self, indent_level: int = 0) -> str:
        pad = indent(indent_level)
        return (
            f"{pad}Reproduction energy threshold: {self.reproduction_energy_threshold:g}\n"
            f"{pad}Reproduction probability: {self.reproduction_probability:g}\n"
            f"{pad}Mutability ratio: {self.mutability_ratio:g}\n"
        )
