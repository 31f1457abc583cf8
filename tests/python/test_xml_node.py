from __future__ import annotations

import pytest
from pytest import approx

from biotope.errors import DataFormatError
from biotope.xml_node import XmlDocument

EXAMPLE = """
<Root Name="example" Count="3" Ratio="0.25" Enabled="true" Broken="maybe">
  <Child Index="0">first</Child>
  <Child Index="1">second</Child>
  <Value>42</Value>
  <Flag>false</Flag>
  <Empty/>
</Root>
"""


@pytest.fixture
def root():
    return XmlDocument.from_string(EXAMPLE).root


def test_attributes(root):
    assert root.name == "Root"
    assert root.has_attribute("Name")
    assert not root.has_attribute("Missing")
    assert root.get_attribute("Name") == "example"
    assert root.get_optional_attribute("Missing", "fallback") == "fallback"
    assert root.get_attribute_as("Count", int) == 3
    assert root.get_attribute_as("Ratio", float) == approx(0.25)
    assert root.get_attribute_as("Enabled", bool) is True
    assert root.get_optional_attribute_as("Missing", int, 7) == 7
    assert root.get_optional_attribute_as("Count", int, 7) == 3


def test_attribute_errors(root):
    with pytest.raises(DataFormatError):
        root.get_attribute("Missing")
    with pytest.raises(DataFormatError):
        root.get_attribute_as("Name", int)
    with pytest.raises(DataFormatError):
        root.get_attribute_as("Broken", bool)


def test_child_lookup(root):
    assert root.has_child_node()
    assert root.has_child_node("Child")
    assert not root.has_child_node("Missing")
    assert root.get_child_node().get_text() == "first"
    assert root.get_child_node("Child").get_attribute("Index") == "0"
    assert [child.get_text() for child in root.get_child_nodes("Child")] == ["first", "second"]
    assert len(root.get_child_nodes()) == 5
    assert root.get_child_nodes("Missing") == []
    with pytest.raises(DataFormatError):
        root.get_child_node("Missing")
    with pytest.raises(DataFormatError):
        root.get_child_node("Empty").get_child_node()


def test_text_helpers(root):
    assert root.get_child_node_text("Value") == "42"
    assert root.get_child_node_text_as("Value", int) == 42
    assert root.get_child_node_text_as("Flag", bool) is False
    assert root.get_optional_child_node_text_as("Missing", float, 1.5) == approx(1.5)
    assert root.get_optional_child_node_text_as("Empty", int, 9) == 9
    assert root.get_child_node("Empty").get_optional_text("none") == "none"
    with pytest.raises(DataFormatError):
        root.get_child_node("Empty").get_text()
    with pytest.raises(DataFormatError):
        root.get_child_node_text_as("Child", float)


def test_building_nodes():
    document = XmlDocument.create("Root")
    child = document.root.append_child_node("Child")
    child.set_attribute("Ratio", 0.1)
    child.set_attribute("Enabled", False)
    child.set_text(3)

    loaded = XmlDocument.from_string(document.to_string()).root.get_child_node("Child")
    assert loaded.get_attribute("Enabled") == "false"
    assert loaded.get_attribute_as("Ratio", float) == 0.1
    assert loaded.get_text_as(int) == 3


def test_save_and_load(tmp_path):
    document = XmlDocument.from_string(EXAMPLE)
    path = tmp_path / "example.xml"
    document.save(path)

    loaded = XmlDocument.load(path)
    assert loaded.root.get_attribute_as("Count", int) == 3
    assert loaded.to_string(pretty=False) == document.to_string(pretty=False)


def test_raw_output_has_no_added_whitespace():
    document = XmlDocument.create("Root")
    document.root.append_child_node("Child").set_text("x")
    assert document.to_string(pretty=False) == "<Root><Child>x</Child></Root>"


def test_load_errors(tmp_path):
    with pytest.raises(DataFormatError):
        XmlDocument.load(tmp_path / "missing.xml")
    broken = tmp_path / "broken.xml"
    broken.write_text("<Root><Child></Root>")
    with pytest.raises(DataFormatError):
        XmlDocument.load(broken)
    with pytest.raises(DataFormatError):
        XmlDocument.from_string("not xml")
