"""Event vocabulary shared by the reader, the tree builder and the serializer."""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Tuple

Attribute = Tuple[str, str]


class EventType(Enum):
    """Kinds of lexical units produced by the event reader."""

    START_TAG = auto()               # <name attr="v">
    END_TAG = auto()                 # </name>
    EMPTY_TAG = auto()               # <name attr="v"/>
    TEXT = auto()                    # Character data between tags
    COMMENT = auto()                 # <!-- ... -->
    CDATA = auto()                   # <![CDATA[ ... ]]>
    PROCESSING_INSTRUCTION = auto()  # <?target ...?>
    DECLARATION = auto()             # <?xml version="1.0"?>
    DOCTYPE = auto()                 # <!DOCTYPE ...>


TAG_EVENTS = frozenset({EventType.START_TAG, EventType.END_TAG, EventType.EMPTY_TAG})


@dataclass(frozen=True)
class TokenPosition:
    """Position information for XML events."""

    line: int
    column: int
    offset: int

    def __post_init__(self) -> None:
        """Validate position values."""
        if self.line < 1:
            raise ValueError("Line number must be >= 1")
        if self.column < 1:
            raise ValueError("Column number must be >= 1")
        if self.offset < 0:
            raise ValueError("Offset must be >= 0")


@dataclass(frozen=True)
class Event:
    """A single XML event.

    ``name`` and ``attributes`` are set for tag events only. ``text`` holds the
    decoded character data of ``TEXT`` events and the raw body of ignorable
    events (comment text, CDATA content, PI/declaration body, doctype body).
    """

    type: EventType
    name: Optional[str] = None
    attributes: Tuple[Attribute, ...] = ()
    text: Optional[str] = None
    position: Optional[TokenPosition] = None

    def __post_init__(self) -> None:
        """Validate that tag events carry a name."""
        if self.type in TAG_EVENTS and not self.name:
            raise ValueError(f"{self.type.name} event requires a name")
        if self.type not in TAG_EVENTS and self.attributes:
            raise ValueError(f"{self.type.name} event cannot carry attributes")

    @property
    def is_tag(self) -> bool:
        """Check if this is a start, end or empty tag event."""
        return self.type in TAG_EVENTS

    @classmethod
    def start(cls, name: str, attributes: Tuple[Attribute, ...] = ()) -> "Event":
        return cls(EventType.START_TAG, name=name, attributes=attributes)

    @classmethod
    def empty(cls, name: str, attributes: Tuple[Attribute, ...] = ()) -> "Event":
        return cls(EventType.EMPTY_TAG, name=name, attributes=attributes)

    @classmethod
    def end(cls, name: str) -> "Event":
        return cls(EventType.END_TAG, name=name)

    @classmethod
    def text_event(cls, text: str) -> "Event":
        return cls(EventType.TEXT, text=text)
