"""Event source for XML tree parsing.

This module turns XML text into a flat stream of typed events and renders such
streams back into text.

Key Components:
    XMLEventReader: Lazily lexes XML text into events
    XMLEventWriter: Renders events back into XML text
    Event: A single start/end/empty tag, text run or ignorable construct
    EventType: Enumeration of all event kinds
    TokenPosition: Line/column/offset of an event in the source
"""

from .events import (
    Event,
    EventType,
    TokenPosition,
)
from .reader import (
    PREDEFINED_ENTITIES,
    XMLEventReader,
    iter_events,
)
from .writer import (
    XMLEventWriter,
    escape_attribute,
    escape_text,
    write_events,
)

__all__ = [
    "Event",
    "EventType",
    "PREDEFINED_ENTITIES",
    "TokenPosition",
    "XMLEventReader",
    "XMLEventWriter",
    "escape_attribute",
    "escape_text",
    "iter_events",
    "write_events",
]
