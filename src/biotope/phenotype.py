from __future__ import annotations

from dataclasses import dataclass

from .utils import indent
from .xml_node import XmlNode

XML_ENERGY_NAME = "Energy"


@dataclass(slots=True)
class Phenotype:
    energy: float = 0.0

    @classmethod
    def from_xml(cls, node: XmlNode) -> Phenotype:
        return cls(energy=node.get_child_node_text_as(XML_ENERGY_NAME, float))

    def save(self, node: XmlNode) -> None:
        node.append_child_node(XML_ENERGY_NAME).set_text(float(self.energy))

    def feed(self, units: int) -> None:
        if units < 0:
            raise ValueError(f"cannot feed a negative number of units ({units})")
        # One energy unit per resource unit.
        self.energy += units

    def spend(self, amount: float) -> bool:
        if amount <= self.energy:
            self.energy -= amount
            return True
        self.energy = 0.0
        return False

    def split(self) -> Phenotype:
        self.energy *= 0.5
        return Phenotype(self.energy)

    def copy(self) -> Phenotype:
        return Phenotype(self.energy)

    def describe(self, indent_level: int = 0) -> str:
        return f"{indent(indent_level)}Energy: {self.energy:g}\n"
