from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Any, ClassVar, Dict, Optional

from .utils import indent
from .xml_node import XmlNode

# Count reported by sources that never deplete.
INFINITE_UNITS = 2**32 - 1


def units_to_string(units: int) -> str:
    return "Infinite" if units >= INFINITE_UNITS else str(units)


@dataclass
class Source(ABC):
    TYPE: ClassVar[str] = ""

    resource_id: str
    current_unit_count: int

    def __post_init__(self) -> None:
        if self.current_unit_count < 0:
            raise ValueError(f"unit count must be non-negative, got {self.current_unit_count}")
        self.current_unit_count = min(int(self.current_unit_count), INFINITE_UNITS)

    def empty(self) -> bool:
        return self.current_unit_count == 0

    def is_unlimited(self) -> bool:
        return self.current_unit_count == INFINITE_UNITS

    def consume(self, required_units: int) -> int:
        if required_units < 0:
            raise ValueError(f"cannot consume a negative number of units ({required_units})")
        if self.is_unlimited():
            return required_units
        consumed = min(required_units, self.current_unit_count)
        self.current_unit_count -= consumed
        return consumed

    @abstractmethod
    def regenerate(self) -> None:
        ...

    def clone(self) -> Source:
        return replace(self)

    @classmethod
    def load_fields(cls, node: XmlNode) -> Dict[str, Any]:
        return {}

    @classmethod
    def default_unit_count(cls, fields: Dict[str, Any]) -> Optional[int]:
        return None

    def save_fields(self, node: XmlNode) -> None:
        pass

    def _set_unit_count(self, units: int) -> None:
        self.current_unit_count = max(0, min(int(units), INFINITE_UNITS))

    def describe(self, indent_level: int = 0) -> str:
        return (
            f"{indent(indent_level)}Source ({self.TYPE}):\n"
            f"{indent(indent_level + 1)}Resource: {self.resource_id}\n"
            f"{indent(indent_level + 1)}Units: {units_to_string(self.current_unit_count)}\n"
        )


@dataclass
class DepletableSource(Source):
    TYPE: ClassVar[str] = "Depletable"

    def regenerate(self) -> None:
        pass


@dataclass
class ConstantSource(Source):
    TYPE: ClassVar[str] = "Constant"

    max_units: int

    def regenerate(self) -> None:
        self._set_unit_count(self.max_units)

    @classmethod
    def load_fields(cls, node: XmlNode) -> Dict[str, Any]:
        return {"max_units": node.get_attribute_as("MaxUnits", int)}

    @classmethod
    def default_unit_count(cls, fields: Dict[str, Any]) -> Optional[int]:
        return fields.get("max_units")

    def save_fields(self, node: XmlNode) -> None:
        node.set_attribute("MaxUnits", self.max_units)


@dataclass
class IncrementalSource(Source):
    TYPE: ClassVar[str] = "Incremental"

    increment: int = 1
    max_units: int = INFINITE_UNITS

    def regenerate(self) -> None:
        self._set_unit_count(min(self.max_units, self.current_unit_count + self.increment))

    @classmethod
    def load_fields(cls, node: XmlNode) -> Dict[str, Any]:
        return {
            "increment": node.get_attribute_as("Increment", int),
            "max_units": node.get_optional_attribute_as("MaxUnits", int, INFINITE_UNITS),
        }

    def save_fields(self, node: XmlNode) -> None:
        node.set_attribute("Increment", self.increment)
        if self.max_units < INFINITE_UNITS:
            node.set_attribute("MaxUnits", self.max_units)


@dataclass
class ProportionalSource(Source):
    TYPE: ClassVar[str] = "Proportional"

    growth_ratio: float = 0.0
    max_units: int = INFINITE_UNITS

    def regenerate(self) -> None:
        growth = math.floor(self.current_unit_count * self.growth_ratio)
        self._set_unit_count(min(self.max_units, self.current_unit_count + growth))

    @classmethod
    def load_fields(cls, node: XmlNode) -> Dict[str, Any]:
        return {
            "growth_ratio": node.get_attribute_as("GrowthRatio", float),
            "max_units": node.get_optional_attribute_as("MaxUnits", int, INFINITE_UNITS),
        }

    def save_fields(self, node: XmlNode) -> None:
        node.set_attribute("GrowthRatio", float(self.growth_ratio))
        if self.max_units < INFINITE_UNITS:
            node.set_attribute("MaxUnits", self.max_units)


@dataclass
class UnlimitedSource(Source):
    TYPE: ClassVar[str] = "Unlimited"

    current_unit_count: int = INFINITE_UNITS

    def __post_init__(self) -> None:
        self.current_unit_count = INFINITE_UNITS

    @classmethod
    def default_unit_count(cls, fields: Dict[str, Any]) -> Optional[int]:
        return INFINITE_UNITS

    def regenerate(self) -> None:
        pass

