"""Document model: elements and text nodes.

A tree is a single root ``Element``. Each element exclusively owns its
``children`` list; there are no parent pointers, so trees are plain nested
values that compare structurally.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple, Union


@dataclass(frozen=True)
class Text:
    """Literal character data between tags."""

    value: str

    def __post_init__(self) -> None:
        """Validate text content."""
        if not isinstance(self.value, str):
            raise TypeError(f"Text value must be str, got {type(self.value).__name__}")
        if not self.value:
            raise ValueError("Text node cannot be empty")

    def __str__(self) -> str:
        return self.value


@dataclass
class Element:
    """A single XML element and its subtree.

    Attributes:
        name: Tag name as written in the source, prefix included
        attrs: Attribute values keyed by name, in source order
        children: Ordered ``Text`` and ``Element`` nodes

    An element without children serializes as an empty tag (``<a/>``); an
    element with children serializes as a start tag, its children and an end
    tag.
    """

    name: str
    attrs: Dict[str, str] = field(default_factory=dict)
    children: List["Node"] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate element values."""
        if not self.name:
            raise ValueError("Element name cannot be empty")

    @property
    def is_empty(self) -> bool:
        """Check if this element serializes as an empty tag."""
        return not self.children

    def __str__(self) -> str:
        from .serializer import XMLSerializer

        return XMLSerializer().serialize(self)

    @classmethod
    def from_string(cls, text: str) -> "Element":
        """Parse ``text`` into an element tree.

        Raises:
            XMLTreeError: If the text is not a well-formed XML fragment
        """
        from mini_xml_tree.api import parse_string

        return parse_string(text)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the subtree to nested dictionaries.

        Text children become plain strings, element children become
        ``{"name", "attrs", "children"}`` dictionaries.
        """
        root: Dict[str, Any] = {"name": self.name, "attrs": dict(self.attrs), "children": []}
        stack: List[Tuple["Element", Dict[str, Any]]] = [(self, root)]
        while stack:
            element, converted = stack.pop()
            for child in element.children:
                if isinstance(child, Text):
                    converted["children"].append(child.value)
                else:
                    child_dict: Dict[str, Any] = {
                        "name": child.name,
                        "attrs": dict(child.attrs),
                        "children": [],
                    }
                    converted["children"].append(child_dict)
                    stack.append((child, child_dict))
        return root


Node = Union[Text, Element]
