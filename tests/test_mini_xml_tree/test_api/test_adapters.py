"""Tests for lxml and ElementTree integration adapters."""

import xml.etree.ElementTree as ET
from concurrent.futures import ThreadPoolExecutor

import pytest

from mini_xml_tree.api import (
    ElementTreeAdapter,
    IntegrationAdapter,
    LxmlAdapter,
    get_adapter,
    list_available_adapters,
    parse,
    register_adapter,
    serialize,
)
from mini_xml_tree.tree import Element, Text

MIXED_CONTENT = '<a x="1">head<b/>middle<c>inner</c>tail</a>'


class TestElementTreeAdapter:
    """Test conversion to and from xml.etree.ElementTree."""

    def test_to_target_maps_text_and_tail(self) -> None:
        """Test text children land in .text and .tail slots."""
        converted = ElementTreeAdapter().to_target(parse(MIXED_CONTENT))

        assert converted.tag == "a"
        assert converted.attrib == {"x": "1"}
        assert converted.text == "head"
        assert [child.tag for child in converted] == ["b", "c"]
        assert converted[0].tail == "middle"
        assert converted[1].text == "inner"
        assert converted[1].tail == "tail"
        assert ET.tostring(converted, encoding="unicode") == MIXED_CONTENT.replace("<b/>", "<b />")

    def test_from_target_rebuilds_children_in_order(self) -> None:
        """Test .text and .tail become ordered text nodes."""
        element = ElementTreeAdapter().from_target(ET.fromstring(MIXED_CONTENT))

        assert element == parse(MIXED_CONTENT)

    def test_from_target_skips_comments_but_keeps_tails(self) -> None:
        """Test comment nodes are dropped without losing surrounding text."""
        root = ET.Element("a")
        comment = ET.Comment("note")
        comment.tail = "after"
        root.append(comment)

        element = ElementTreeAdapter().from_target(root)

        assert element.children == [Text("after")]

    def test_rejects_wrong_types(self) -> None:
        """Test conversions validate their inputs."""
        adapter = ElementTreeAdapter()

        with pytest.raises(TypeError, match="Expected Element"):
            adapter.to_target("<a/>")  # type: ignore[arg-type]
        with pytest.raises(TypeError, match="element expected"):
            adapter.from_target("<a/>")

    def test_deep_tree_does_not_recurse(self) -> None:
        """Test conversion depth is not bounded by the recursion limit."""
        adapter = ElementTreeAdapter()
        depth = 1000

        converted = adapter.to_target(parse("<n>" * depth + "</n>" * depth))

        levels = 1
        node = converted
        while len(node):
            node = node[0]
            levels += 1
        assert levels == depth

    def test_deep_foreign_tree_does_not_recurse(self) -> None:
        """Test deep ElementTree input converts without recursion."""
        depth = 1500
        root = ET.Element("n")
        node = root
        for _ in range(depth - 1):
            node = ET.SubElement(node, "n")
        node.text = "leaf"

        element = ElementTreeAdapter().from_target(root)

        assert serialize(element) == "<n>" * depth + "leaf" + "</n>" * depth


class TestLxmlAdapter:
    """Test conversion to and from lxml.etree."""

    def test_round_trip_through_lxml(self) -> None:
        """Test an element survives conversion to lxml and back."""
        etree = pytest.importorskip("lxml.etree")
        adapter = LxmlAdapter()
        original = parse(MIXED_CONTENT)

        converted = adapter.to_target(original)

        assert etree.tostring(converted, encoding="unicode") == MIXED_CONTENT
        assert adapter.from_target(converted) == original

    def test_from_lxml_parsed_tree(self) -> None:
        """Test trees parsed by lxml convert with comments skipped."""
        etree = pytest.importorskip("lxml.etree")
        node = etree.fromstring("<a>x<!-- c -->y<b/></a>")

        element = LxmlAdapter().from_target(node)

        assert element == Element("a", children=[Text("x"), Text("y"), Element("b")])
        assert serialize(element) == "<a>xy<b/></a>"

    def test_is_available(self) -> None:
        """Test availability reflects an importable lxml."""
        pytest.importorskip("lxml")

        assert LxmlAdapter().is_available()


class TestAdapterRegistry:
    """Test adapter lookup."""

    def test_get_adapter(self) -> None:
        """Test built-in adapters are registered by name."""
        assert isinstance(get_adapter("lxml"), LxmlAdapter)
        assert isinstance(get_adapter("elementtree", correlation_id="c"), ElementTreeAdapter)

    def test_unknown_adapter(self) -> None:
        """Test unknown names raise KeyError listing available adapters."""
        with pytest.raises(KeyError, match="elementtree"):
            get_adapter("bs4")

    def test_list_available_adapters(self) -> None:
        """Test available adapters are listed with metadata."""
        names = [metadata.name for metadata in list_available_adapters()]

        assert "elementtree" in names

    def test_register_adapter_requires_subclass(self) -> None:
        """Test only IntegrationAdapter subclasses can be registered."""
        with pytest.raises(TypeError, match="IntegrationAdapter"):
            register_adapter("bogus", object)  # type: ignore[arg-type]

    def test_register_custom_adapter(self) -> None:
        """Test registering an additional adapter."""

        class CustomAdapter(ElementTreeAdapter):
            pass

        register_adapter("custom", CustomAdapter)

        assert isinstance(get_adapter("custom"), IntegrationAdapter)

    def test_concurrent_registration(self) -> None:
        """Test adapters registered from several threads are all retained."""
        names = [f"threaded-{index}" for index in range(20)]

        with ThreadPoolExecutor(max_workers=4) as executor:
            list(executor.map(lambda name: register_adapter(name, ElementTreeAdapter), names))

        for name in names:
            assert isinstance(get_adapter(name), ElementTreeAdapter)
