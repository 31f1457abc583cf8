from __future__ import annotations

from typing import Dict, Type

from .errors import DataFormatError
from .sources import (
    INFINITE_UNITS,
    ConstantSource,
    DepletableSource,
    IncrementalSource,
    ProportionalSource,
    Source,
    UnlimitedSource,
    units_to_string,
)
from .xml_node import XmlNode

XML_MAIN_NODE_NAME = "Source"
XML_SOURCE_TYPE_ATTRIBUTE_NAME = "Type"
XML_RESOURCE_ID_ATTRIBUTE_NAME = "ResourceId"
XML_UNITS_ATTRIBUTE_NAME = "Units"

SOURCE_TYPES: Dict[str, Type[Source]] = {}


def register_source_type(source_type: Type[Source]) -> Type[Source]:
    if not source_type.TYPE:
        raise ValueError(f"{source_type.__name__} does not declare a TYPE discriminator")
    SOURCE_TYPES[source_type.TYPE] = source_type
    return source_type


for _source_type in (DepletableSource, ConstantSource, IncrementalSource, ProportionalSource, UnlimitedSource):
    register_source_type(_source_type)


def _parse_units(node: XmlNode) -> int:
    text = node.get_attribute(XML_UNITS_ATTRIBUTE_NAME).strip()
    if text.lower() in {"infinite", "inf"}:
        return INFINITE_UNITS
    units = node.get_attribute_as(XML_UNITS_ATTRIBUTE_NAME, int)
    if units < 0:
        raise DataFormatError(f"source unit count must be non-negative, got {units}")
    return min(units, INFINITE_UNITS)


def create_source(node: XmlNode) -> Source:
    type_name = node.get_attribute(XML_SOURCE_TYPE_ATTRIBUTE_NAME)
    source_type = SOURCE_TYPES.get(type_name)
    if source_type is None:
        raise DataFormatError(f"unknown source type {type_name!r}")

    resource_id = node.get_attribute(XML_RESOURCE_ID_ATTRIBUTE_NAME)
    fields = source_type.load_fields(node)
    if node.has_attribute(XML_UNITS_ATTRIBUTE_NAME):
        units = _parse_units(node)
    else:
        default = source_type.default_unit_count(fields)
        if default is None:
            raise DataFormatError(f"source {resource_id!r} of type {type_name!r} has no {XML_UNITS_ATTRIBUTE_NAME}")
        units = default

    try:
        return source_type(resource_id, units, **fields)
    except (TypeError, ValueError) as exc:
        raise DataFormatError(f"invalid source {resource_id!r}: {exc}") from exc


def save_source(source: Source, node: XmlNode) -> None:
    node.set_attribute(XML_SOURCE_TYPE_ATTRIBUTE_NAME, source.TYPE)
    node.set_attribute(XML_RESOURCE_ID_ATTRIBUTE_NAME, source.resource_id)
    node.set_attribute(XML_UNITS_ATTRIBUTE_NAME, units_to_string(source.current_unit_count))
    source.save_fields(node)
