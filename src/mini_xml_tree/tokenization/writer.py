"""XML event writer.

The writer is the reader's counterpart: it renders a sequence of events back
into XML text, escaping character data so that reading the output yields the
same decoded values.
"""

import io
from typing import Iterable, Optional, TextIO

from .events import Attribute, Event, EventType


def escape_text(text: str) -> str:
    """Escape character data for use between tags."""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace("]]>", "]]&gt;")
    )


def escape_attribute(value: str) -> str:
    """Escape an attribute value for use inside double quotes.

    Tabs and line breaks are written as character references.
    """
    return (
        value.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace('"', "&quot;")
        .replace("\t", "&#9;")
        .replace("\n", "&#10;")
        .replace("\r", "&#13;")
    )


class XMLEventWriter:
    """Renders XML events to a text stream.

    Args:
        stream: Text stream to write to; an in-memory buffer is used when omitted
    """

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream if stream is not None else io.StringIO()
        self.events_written = 0

    def write_event(self, event: Event) -> None:
        """Write a single event."""
        self.stream.write(self.render(event))
        self.events_written += 1

    def write_events(self, events: Iterable[Event]) -> None:
        """Write every event of ``events`` in order."""
        for event in events:
            self.write_event(event)

    def getvalue(self) -> str:
        """Return everything written so far (in-memory buffers only)."""
        if not isinstance(self.stream, io.StringIO):
            raise TypeError("getvalue() requires the default in-memory stream")
        return self.stream.getvalue()

    @staticmethod
    def render(event: Event) -> str:
        """Render ``event`` as XML text."""
        event_type = event.type
        if event_type is EventType.START_TAG:
            return f"<{event.name}{_render_attributes(event.attributes)}>"
        if event_type is EventType.EMPTY_TAG:
            return f"<{event.name}{_render_attributes(event.attributes)}/>"
        if event_type is EventType.END_TAG:
            return f"</{event.name}>"
        if event_type is EventType.TEXT:
            return escape_text(event.text or "")
        if event_type is EventType.COMMENT:
            return f"<!--{event.text or ''}-->"
        if event_type is EventType.CDATA:
            return f"<![CDATA[{event.text or ''}]]>"
        if event_type in (EventType.PROCESSING_INSTRUCTION, EventType.DECLARATION):
            return f"<?{event.text or ''}?>"
        if event_type is EventType.DOCTYPE:
            return f"<!DOCTYPE {event.text or ''}>"
        raise ValueError(f"Unknown event type: {event_type}")


def _render_attributes(attributes: Iterable[Attribute]) -> str:
    return "".join(f' {name}="{escape_attribute(value)}"' for name, value in attributes)


def write_events(events: Iterable[Event]) -> str:
    """Render ``events`` into a string.

    Example:
        >>> write_events([Event.start("a"), Event.text_event("x<y"), Event.end("a")])
        '<a>x&lt;y</a>'
    """
    writer = XMLEventWriter()
    writer.write_events(events)
    return writer.getvalue()
