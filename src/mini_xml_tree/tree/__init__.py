"""Document model, tree building and serialization.

Key Components:
    Element: XML element with a name, attributes and ordered children
    Text: Literal character data node
    Node: Either a Text or an Element
    XMLTreeBuilder: Builds a rooted tree from an event stream
    XMLSerializer: Turns a tree back into events and text
"""

from .builder import XMLTreeBuilder
from .model import Element, Node, Text
from .serializer import XMLSerializer

__all__ = [
    "Element",
    "Node",
    "Text",
    "XMLSerializer",
    "XMLTreeBuilder",
]
