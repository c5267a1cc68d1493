"""Mini XML Tree.

A minimal in-memory XML document model. ``parse`` turns an XML fragment into a
tree of ``Element`` and ``Text`` nodes, ``serialize`` turns the tree back into
text. Well-formed input that writes childless elements as empty tags
round-trips exactly.

Progressive API Disclosure:
- Level 1: Simple functions - parse(), parse_string(), parse_file(), serialize()
- Level 2: Configured parser - XMLTreeParser class with ParserConfig
- Level 3: Building blocks - XMLEventReader, XMLTreeBuilder, XMLSerializer
"""

__version__ = "0.1.0"
__author__ = "Mini XML Tree Team"

from .api import (
    XMLTreeParser,
    parse,
    parse_file,
    parse_string,
    serialize,
    to_display_string,
    to_text,
)
from .shared import (
    ConfigError,
    ConfigValidationError,
    DepthLimitExceededError,
    EmptyDocumentError,
    MismatchedTagError,
    ParserConfig,
    StructureError,
    TokenizationError,
    UnexpectedEndOfInputError,
    XMLTreeError,
)
from .tokenization import Event, EventType, XMLEventReader, XMLEventWriter
from .tree import Element, Node, Text, XMLSerializer, XMLTreeBuilder

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple functions
    "parse",
    "parse_string",
    "parse_file",
    "serialize",
    "to_text",
    "to_display_string",

    # Level 2: Configured parser
    "XMLTreeParser",
    "ParserConfig",

    # Level 3: Building blocks
    "Event",
    "EventType",
    "XMLEventReader",
    "XMLEventWriter",
    "XMLSerializer",
    "XMLTreeBuilder",

    # Document model
    "Element",
    "Node",
    "Text",

    # Errors
    "ConfigError",
    "ConfigValidationError",
    "DepthLimitExceededError",
    "EmptyDocumentError",
    "MismatchedTagError",
    "StructureError",
    "TokenizationError",
    "UnexpectedEndOfInputError",
    "XMLTreeError",
]
