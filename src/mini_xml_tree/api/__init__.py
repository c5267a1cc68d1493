"""Public API for XML tree parsing and serialization."""

from .adapters import (
    AdapterMetadata,
    ElementTreeAdapter,
    IntegrationAdapter,
    LxmlAdapter,
    get_adapter,
    list_available_adapters,
    register_adapter,
)
from .parser import (
    XMLTreeParser,
    parse,
    parse_file,
    parse_string,
    serialize,
    to_display_string,
    to_text,
)

__all__ = [
    "AdapterMetadata",
    "ElementTreeAdapter",
    "IntegrationAdapter",
    "LxmlAdapter",
    "XMLTreeParser",
    "get_adapter",
    "list_available_adapters",
    "parse",
    "parse_file",
    "parse_string",
    "register_adapter",
    "serialize",
    "to_display_string",
    "to_text",
]
