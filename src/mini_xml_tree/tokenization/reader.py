"""XML event reader.

Turns XML text into a lazy sequence of ``Event`` objects. The reader is strict:
anything it cannot lex raises ``TokenizationError`` with the position of the
offending construct. It performs no structural checks; matching start and end
tags is the tree builder's job.
"""

import re
from typing import Iterator, List, Optional, Tuple

from mini_xml_tree.shared.errors import TokenizationError
from mini_xml_tree.shared.logging import get_logger

from .events import Attribute, Event, EventType, TokenPosition

_NAME_START = r"A-Za-z_:\u0080-\U0010FFFF"
_NAME_PATTERN = re.compile(rf"[{_NAME_START}][{_NAME_START}0-9.\-]*")
_WHITESPACE_PATTERN = re.compile(r"[ \t\r\n]*")
_REFERENCE_PATTERN = re.compile(r"&(#[0-9]+|#x[0-9a-fA-F]+|[A-Za-z_:][\w.\-:]*);")

PREDEFINED_ENTITIES = {
    "lt": "<",
    "gt": ">",
    "amp": "&",
    "quot": '"',
    "apos": "'",
}

# Markup openers, longest first so "<!--" wins over "<!"
_COMMENT_OPEN = "<!--"
_CDATA_OPEN = "<![CDATA["
_DOCTYPE_OPEN = "<!DOCTYPE"
_PI_OPEN = "<?"
_END_TAG_OPEN = "</"
_CDATA_CLOSE = "]]>"

_MAX_CODE_POINT = 0x10FFFF
_SURROGATES = range(0xD800, 0xE000)


class XMLEventReader:
    """Lexes XML text into events.

    Iterating the reader yields events lazily. The sequence is finite and can be
    consumed only once; iterating again continues from where the previous
    iteration stopped.

    Example:
        >>> [e.type.name for e in XMLEventReader("<a>hi</a>")]
        ['START_TAG', 'TEXT', 'END_TAG']
    """

    def __init__(self, text: str, correlation_id: Optional[str] = None) -> None:
        """Initialize the reader.

        Args:
            text: XML content to lex
            correlation_id: Optional correlation ID for request tracking
        """
        if not isinstance(text, str):
            raise TypeError(f"XMLEventReader expects str, got {type(text).__name__}")
        self.text = text
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "xml_event_reader")
        self.events_emitted = 0

        # Incremental line tracking for position computation
        self._line = 1
        self._line_start = 0
        self._scanned = 0

        self._events = self._generate()

    def __iter__(self) -> Iterator[Event]:
        return self._events

    def __next__(self) -> Event:
        return next(self._events)

    def _generate(self) -> Iterator[Event]:
        text = self.text
        length = len(text)
        pos = 0

        self.logger.debug("Starting event reading", extra={"char_count": length})

        while pos < length:
            lt = text.find("<", pos)
            if lt < 0:
                lt = length
            if lt > pos:
                position = self._position(pos)
                marker = text.find(_CDATA_CLOSE, pos, lt)
                if marker >= 0:
                    raise TokenizationError(
                        "Sequence ']]>' not allowed in character data",
                        self._position(marker),
                    )
                yield self._emit(Event(
                    EventType.TEXT,
                    text=self._decode(text[pos:lt], pos),
                    position=position,
                ))
                pos = lt
                continue

            event, pos = self._read_markup(pos)
            yield self._emit(event)

        self.logger.debug(
            "Event reading completed",
            extra={"event_count": self.events_emitted, "char_count": length}
        )

    def _emit(self, event: Event) -> Event:
        self.events_emitted += 1
        return event

    def _read_markup(self, pos: int) -> Tuple[Event, int]:
        """Read the markup construct starting at ``pos`` (which holds ``<``)."""
        text = self.text
        position = self._position(pos)

        if text.startswith(_COMMENT_OPEN, pos):
            body, end = self._read_until("-->", pos + len(_COMMENT_OPEN), "comment", position)
            return Event(EventType.COMMENT, text=body, position=position), end

        if text.startswith(_CDATA_OPEN, pos):
            body, end = self._read_until(_CDATA_CLOSE, pos + len(_CDATA_OPEN), "CDATA section", position)
            return Event(EventType.CDATA, text=body, position=position), end

        if text.startswith(_DOCTYPE_OPEN, pos):
            return self._read_doctype(pos, position)

        if text.startswith(_PI_OPEN, pos):
            body, end = self._read_until("?>", pos + len(_PI_OPEN), "processing instruction", position)
            target = _NAME_PATTERN.match(body)
            if target is None:
                raise TokenizationError("Processing instruction without target", position)
            event_type = (
                EventType.DECLARATION
                if target.group().lower() == "xml"
                else EventType.PROCESSING_INSTRUCTION
            )
            return Event(event_type, text=body, position=position), end

        if text.startswith(_END_TAG_OPEN, pos):
            return self._read_end_tag(pos, position)

        if text.startswith("<!", pos):
            raise TokenizationError("Unsupported markup declaration", position)

        return self._read_start_tag(pos, position)

    def _read_until(
        self, terminator: str, start: int, construct: str, position: TokenPosition
    ) -> Tuple[str, int]:
        end = self.text.find(terminator, start)
        if end < 0:
            raise TokenizationError(f"Unterminated {construct}", position)
        return self.text[start:end], end + len(terminator)

    def _read_doctype(self, pos: int, position: TokenPosition) -> Tuple[Event, int]:
        """Read ``<!DOCTYPE ...>``, skipping a bracketed internal subset."""
        text = self.text
        length = len(text)
        i = pos + len(_DOCTYPE_OPEN)
        depth = 0
        while i < length:
            char = text[i]
            if char in "\"'":
                close = text.find(char, i + 1)
                if close < 0:
                    break
                i = close
            elif char == "[":
                depth += 1
            elif char == "]":
                depth -= 1
            elif char == ">" and depth <= 0:
                body = text[pos + len(_DOCTYPE_OPEN):i].strip()
                return Event(EventType.DOCTYPE, text=body, position=position), i + 1
            i += 1
        raise TokenizationError("Unterminated DOCTYPE declaration", position)

    def _read_end_tag(self, pos: int, position: TokenPosition) -> Tuple[Event, int]:
        text = self.text
        match = _NAME_PATTERN.match(text, pos + len(_END_TAG_OPEN))
        if match is None:
            raise TokenizationError("Invalid end tag name", position)
        i = _WHITESPACE_PATTERN.match(text, match.end()).end()
        if i >= len(text) or text[i] != ">":
            raise TokenizationError(f"Unterminated end tag </{match.group()}>", position)
        return Event(EventType.END_TAG, name=match.group(), position=position), i + 1

    def _read_start_tag(self, pos: int, position: TokenPosition) -> Tuple[Event, int]:
        text = self.text
        length = len(text)
        match = _NAME_PATTERN.match(text, pos + 1)
        if match is None:
            raise TokenizationError("Invalid tag name", position)
        name = match.group()
        attributes: List[Attribute] = []
        i = match.end()

        while True:
            j = _WHITESPACE_PATTERN.match(text, i).end()
            if j >= length:
                raise TokenizationError(f"Unterminated tag <{name}>", position)
            if text[j] == ">":
                event = Event(EventType.START_TAG, name, tuple(attributes), position=position)
                return event, j + 1
            if text.startswith("/>", j):
                event = Event(EventType.EMPTY_TAG, name, tuple(attributes), position=position)
                return event, j + 2
            if j == i:
                raise TokenizationError(
                    f"Expected whitespace before attribute in <{name}>",
                    self._position(j),
                )

            attr_match = _NAME_PATTERN.match(text, j)
            if attr_match is None:
                raise TokenizationError(
                    f"Unexpected character {text[j]!r} in tag <{name}>",
                    self._position(j),
                )
            attr_name = attr_match.group()

            j = _WHITESPACE_PATTERN.match(text, attr_match.end()).end()
            if j >= length or text[j] != "=":
                raise TokenizationError(
                    f"Attribute {attr_name!r} has no value",
                    self._position(attr_match.start()),
                )
            j = _WHITESPACE_PATTERN.match(text, j + 1).end()
            if j >= length or text[j] not in "\"'":
                raise TokenizationError(
                    f"Value of attribute {attr_name!r} must be quoted",
                    self._position(attr_match.start()),
                )

            quote = text[j]
            close = text.find(quote, j + 1)
            if close < 0:
                raise TokenizationError(
                    f"Unterminated value of attribute {attr_name!r}",
                    self._position(j),
                )
            raw_value = text[j + 1:close]
            if "<" in raw_value:
                raise TokenizationError(
                    f"Character '<' not allowed in value of attribute {attr_name!r}",
                    self._position(j + 1 + raw_value.index("<")),
                )
            attributes.append((attr_name, self._decode(raw_value, j + 1)))
            i = close + 1

    def _decode(self, raw: str, offset: int) -> str:
        """Replace entity and character references in ``raw``.

        Args:
            raw: Character data as it appears in the source
            offset: Source offset of ``raw`` for error positions

        Returns:
            Decoded character data
        """
        if "&" not in raw:
            return raw

        parts: List[str] = []
        pos = 0
        while True:
            amp = raw.find("&", pos)
            if amp < 0:
                parts.append(raw[pos:])
                break
            parts.append(raw[pos:amp])

            match = _REFERENCE_PATTERN.match(raw, amp)
            if match is None:
                raise TokenizationError(
                    "Unescaped '&' in character data",
                    self._position(offset + amp),
                )
            parts.append(self._resolve_reference(match.group(1), offset + amp))
            pos = match.end()

        return "".join(parts)

    def _resolve_reference(self, reference: str, offset: int) -> str:
        if reference.startswith("#"):
            if reference.startswith("#x"):
                code_point = int(reference[2:], 16)
            else:
                code_point = int(reference[1:])
            if code_point == 0 or code_point > _MAX_CODE_POINT or code_point in _SURROGATES:
                raise TokenizationError(
                    f"Invalid character reference &{reference};",
                    self._position(offset),
                )
            return chr(code_point)

        try:
            return PREDEFINED_ENTITIES[reference]
        except KeyError:
            raise TokenizationError(
                f"Undefined entity &{reference};",
                self._position(offset),
            ) from None

    def _position(self, offset: int) -> TokenPosition:
        """Compute line/column for ``offset``.

        Offsets are requested in mostly increasing order, so newlines are
        counted incrementally from the last computed offset.
        """
        text = self.text
        if offset < self._scanned:
            line = text.count("\n", 0, offset) + 1
            line_start = text.rfind("\n", 0, offset) + 1
            return TokenPosition(line, offset - line_start + 1, offset)

        newlines = text.count("\n", self._scanned, offset)
        if newlines:
            self._line += newlines
            self._line_start = text.rfind("\n", self._scanned, offset) + 1
        self._scanned = offset
        return TokenPosition(self._line, offset - self._line_start + 1, offset)


def iter_events(text: str, correlation_id: Optional[str] = None) -> Iterator[Event]:
    """Lazily lex ``text`` into XML events.

    Args:
        text: XML content
        correlation_id: Optional correlation ID for request tracking

    Returns:
        Iterator over events; raises ``TokenizationError`` when consumed past
        malformed content
    """
    return iter(XMLEventReader(text, correlation_id))
