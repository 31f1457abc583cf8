from __future__ import annotations

import logging
import xml.etree.ElementTree as ElementTree
from pathlib import Path
from typing import Callable, Dict, List, Optional, Type, TypeVar, Union

from .errors import DataFormatError

logger = logging.getLogger(__name__)

T = TypeVar("T", str, int, float, bool)

_TRUE_VALUES = {"true", "1"}
_FALSE_VALUES = {"false", "0"}


def _parse_bool(text: str) -> bool:
    lowered = text.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"invalid boolean literal {text!r}")


_PARSERS: Dict[type, Callable[[str], object]] = {
    str: str,
    int: lambda text: int(text.strip()),
    float: lambda text: float(text.strip()),
    bool: _parse_bool,
}


def _parse(text: str, value_type: Type[T], what: str) -> T:
    parser = _PARSERS.get(value_type)
    if parser is None:
        raise TypeError(f"unsupported value type {value_type.__name__}")
    try:
        return parser(text)  # type: ignore[return-value]
    except ValueError as exc:
        raise DataFormatError(f"cannot parse {what} value {text!r} as {value_type.__name__}") from exc


def _format(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return repr(value)
    return str(value)


class XmlNode:
    def __init__(self, element: ElementTree.Element):
        self._element = element

    @property
    def name(self) -> str:
        return self._element.tag

    @property
    def element(self) -> ElementTree.Element:
        return self._element

    def has_attribute(self, name: str) -> bool:
        return name in self._element.attrib

    def get_attribute(self, name: str) -> str:
        value = self._element.get(name)
        if value is None:
            raise DataFormatError(f"node <{self.name}> has no attribute {name!r}")
        return value

    def get_optional_attribute(self, name: str, default: str) -> str:
        return self._element.get(name, default)

    def get_attribute_as(self, name: str, value_type: Type[T]) -> T:
        return _parse(self.get_attribute(name), value_type, f"attribute {name!r} of <{self.name}>")

    def get_optional_attribute_as(self, name: str, value_type: Type[T], default: T) -> T:
        if not self.has_attribute(name):
            return default
        return self.get_attribute_as(name, value_type)

    def has_child_node(self, name: Optional[str] = None) -> bool:
        if name is None:
            return len(self._element) > 0
        return self._element.find(name) is not None

    def get_child_node(self, name: Optional[str] = None) -> XmlNode:
        if name is None:
            if len(self._element) == 0:
                raise DataFormatError(f"node <{self.name}> has no child nodes")
            return XmlNode(self._element[0])
        child = self._element.find(name)
        if child is None:
            raise DataFormatError(f"node <{self.name}> has no child node <{name}>")
        return XmlNode(child)

    def get_child_nodes(self, name: Optional[str] = None) -> List[XmlNode]:
        if name is None:
            return [XmlNode(child) for child in self._element]
        return [XmlNode(child) for child in self._element.findall(name)]

    def get_text(self) -> str:
        text = self._element.text
        if text is None or not text.strip():
            raise DataFormatError(f"node <{self.name}> has no text")
        return text.strip()

    def get_optional_text(self, default: str) -> str:
        text = self._element.text
        if text is None or not text.strip():
            return default
        return text.strip()

    def get_text_as(self, value_type: Type[T]) -> T:
        return _parse(self.get_text(), value_type, f"text of <{self.name}>")

    def get_optional_text_as(self, value_type: Type[T], default: T) -> T:
        text = self.get_optional_text("")
        if not text:
            return default
        return _parse(text, value_type, f"text of <{self.name}>")

    def get_child_node_text(self, name: Optional[str] = None) -> str:
        return self.get_child_node(name).get_text()

    def get_child_node_text_as(self, name: str, value_type: Type[T]) -> T:
        return self.get_child_node(name).get_text_as(value_type)

    def get_optional_child_node_text_as(self, name: str, value_type: Type[T], default: T) -> T:
        if not self.has_child_node(name):
            return default
        return self.get_child_node(name).get_optional_text_as(value_type, default)

    def set_attribute(self, name: str, value: object) -> None:
        self._element.set(name, _format(value))

    def set_text(self, value: object) -> None:
        self._element.text = _format(value)

    def append_child_node(self, name: str) -> XmlNode:
        return XmlNode(ElementTree.SubElement(self._element, name))


class XmlDocument:
    def __init__(self, root: ElementTree.Element):
        self._tree = ElementTree.ElementTree(root)

    @classmethod
    def create(cls, root_name: str) -> XmlDocument:
        return cls(ElementTree.Element(root_name))

    @classmethod
    def load(cls, path: Union[str, Path]) -> XmlDocument:
        path = Path(path)
        try:
            tree = ElementTree.parse(path)
        except OSError as exc:
            raise DataFormatError(f"cannot read XML document {path}: {exc}") from exc
        except ElementTree.ParseError as exc:
            raise DataFormatError(f"malformed XML document {path}: {exc}") from exc
        logger.info("Loaded XML document %s", path)
        return cls(tree.getroot())

    @classmethod
    def from_string(cls, text: str) -> XmlDocument:
        try:
            return cls(ElementTree.fromstring(text))
        except ElementTree.ParseError as exc:
            raise DataFormatError(f"malformed XML text: {exc}") from exc

    @property
    def root(self) -> XmlNode:
        return XmlNode(self._tree.getroot())

    def to_string(self, pretty: bool = True) -> str:
        root = self._tree.getroot()
        if pretty:
            ElementTree.indent(root)
        return ElementTree.tostring(root, encoding="unicode")

    def save(self, path: Union[str, Path], pretty: bool = True) -> None:
        path = Path(path)
        path.write_text(self.to_string(pretty) + "\n", encoding="utf-8")
        logger.info("Saved XML document %s", path)
