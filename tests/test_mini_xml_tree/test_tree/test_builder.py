"""Tests for the tree building engine.

Covers the stack-based construction algorithm, the empty-root short-circuit and
every structural error.
"""

import pytest

from mini_xml_tree.shared import (
    DepthLimitExceededError,
    EmptyDocumentError,
    MismatchedTagError,
    ParserConfig,
    TokenizationError,
    UnexpectedEndOfInputError,
)
from mini_xml_tree.tokenization import Event, EventType, iter_events
from mini_xml_tree.tree import Element, Text, XMLTreeBuilder


def build(text: str, config: ParserConfig = None) -> Element:
    return XMLTreeBuilder(config).build(iter_events(text))


class TestTreeConstruction:
    """Test tree construction from well-formed event streams."""

    def test_nested_elements_in_order(self) -> None:
        """Test children are attached in document order."""
        root = build("<a><b/><c/></a>")

        assert root.name == "a"
        assert root.children == [Element("b"), Element("c")]

    def test_whitespace_text_nodes_are_preserved(self) -> None:
        """Test whitespace-only text between tags becomes text nodes."""
        root = build("<a> <b/> </a>")

        assert root.children == [Text(" "), Element("b"), Text(" ")]

    def test_deep_nesting(self) -> None:
        """Test start tags nest through the stack."""
        root = build("<a><b><c>x</c></b><d/></a>")

        assert root == Element("a", children=[
            Element("b", children=[Element("c", children=[Text("x")])]),
            Element("d"),
        ])

    def test_attributes_become_mapping(self) -> None:
        """Test attributes are collected into a dict."""
        root = build('<a x="1" y="2"/>')

        assert root.attrs == {"x": "1", "y": "2"}

    def test_duplicate_attributes_overwrite(self) -> None:
        """Test later duplicate attribute values win."""
        root = XMLTreeBuilder().build([Event.empty("a", (("x", "1"), ("x", "2")))])

        assert root.attrs == {"x": "2"}

    def test_leading_non_tag_events_are_skipped(self) -> None:
        """Test declarations, comments, doctype and text before the root."""
        root = build('<?xml version="1.0"?>\n<!DOCTYPE a>\n<!-- c --><a/>')

        assert root == Element("a")

    def test_leading_end_tag_is_skipped(self) -> None:
        """Test an end tag before any start tag is ignored."""
        root = XMLTreeBuilder().build([Event.end("x"), Event.empty("a")])

        assert root.name == "a"

    def test_ignorable_events_produce_no_nodes(self) -> None:
        """Test comments, CDATA and processing instructions inside elements."""
        root = build("<a><!-- c --><![CDATA[d]]><?pi x?><b/></a>")

        assert root.children == [Element("b")]

    def test_text_split_by_comment_gives_two_nodes(self) -> None:
        """Test text on both sides of a comment stays separate."""
        root = build("<a>x<!-- c -->y</a>")

        assert root.children == [Text("x"), Text("y")]

    def test_empty_text_events_are_dropped(self) -> None:
        """Test zero-length text never becomes a node."""
        events = [Event.start("a"), Event.text_event(""), Event.end("a")]

        root = XMLTreeBuilder().build(events)

        assert root.children == []

    def test_explicit_empty_element_has_no_children(self) -> None:
        """Test start/end pairs without content produce childless elements."""
        root = build("<a><b></b></a>")

        assert root.children == [Element("b")]
        assert root.children[0].is_empty


class TestRootCompletion:
    """Test which events the builder consumes."""

    def test_empty_root_short_circuits(self) -> None:
        """Test an empty first tag is returned without consuming more events."""
        events = iter([Event.empty("a"), Event.empty("b"), Event.start("c")])

        root = XMLTreeBuilder().build(events)

        assert root == Element("a")
        assert next(events) == Event.empty("b")

    def test_trailing_siblings_are_ignored(self) -> None:
        """Test only the first top-level element is returned."""
        assert build("<a/><b/>") == Element("a")
        assert build("<a></a><b></b>") == Element("a")

    def test_events_after_root_close_are_not_consumed(self) -> None:
        """Test the builder stops right after the root end tag."""
        events = iter([Event.start("a"), Event.end("a"), Event.text_event("rest")])

        XMLTreeBuilder().build(events)

        assert next(events) == Event.text_event("rest")

    def test_malformed_trailing_content_is_never_lexed(self) -> None:
        """Test lazily lexed garbage after the root is not reached."""
        assert build("<a>x</a><<<") == Element("a", children=[Text("x")])


class TestStructuralErrors:
    """Test structural error reporting."""

    def test_mismatched_end_tag(self) -> None:
        """Test mismatched nested tags raise with expected and found names."""
        with pytest.raises(MismatchedTagError) as exc_info:
            build("<a><b></c></a>")

        assert exc_info.value.expected == "b"
        assert exc_info.value.found == "c"
        assert exc_info.value.position.column == 7

    def test_mismatched_root_end_tag(self) -> None:
        """Test the root end tag is checked too."""
        with pytest.raises(MismatchedTagError, match="expected </a>, found </b>"):
            build("<a></b>")

    def test_unexpected_end_of_input(self) -> None:
        """Test unclosed elements raise in strict mode."""
        with pytest.raises(UnexpectedEndOfInputError) as exc_info:
            build("<a><b>text")

        assert exc_info.value.open_elements == ["a", "b"]

    def test_lenient_end_of_input_closes_open_elements(self) -> None:
        """Test lenient mode folds the open elements into the root."""
        root = build("<a><b>text<c/>", ParserConfig.lenient())

        assert root == Element("a", children=[
            Element("b", children=[Text("text"), Element("c")]),
        ])

    @pytest.mark.parametrize("text", ["", "   ", "just text", "<!-- c -->", "</a>"])
    def test_empty_document(self, text: str) -> None:
        """Test inputs without any start or empty tag."""
        with pytest.raises(EmptyDocumentError):
            build(text)

    def test_depth_limit(self) -> None:
        """Test nesting beyond max_depth raises."""
        config = ParserConfig(max_depth=2)

        assert build("<a><b><c/></b></a>", config).name == "a"
        with pytest.raises(DepthLimitExceededError) as exc_info:
            build("<a><b><c></c></b></a>", config)

        assert exc_info.value.max_depth == 2

    def test_tokenization_errors_propagate(self) -> None:
        """Test reader errors surface through the builder unchanged."""
        with pytest.raises(TokenizationError):
            build("<a><b x=1/></a>")


class TestBuilderStatistics:
    """Test per-build statistics."""

    def test_statistics_are_reset_per_build(self) -> None:
        """Test element and event counts reflect the latest build."""
        builder = XMLTreeBuilder()

        builder.build(iter_events("<a><b/><c>t</c></a>"))
        assert builder.elements_created == 3
        assert builder.events_processed == 6

        builder.build(iter_events("<x/>"))
        assert builder.elements_created == 1
        assert builder.events_processed == 1

    def test_event_types_are_enum_members(self) -> None:
        """Test builder accepts hand-made event lists."""
        events = [
            Event(EventType.START_TAG, name="a"),
            Event(EventType.TEXT, text="t"),
            Event(EventType.END_TAG, name="a"),
        ]

        assert XMLTreeBuilder().build(events) == Element("a", children=[Text("t")])
