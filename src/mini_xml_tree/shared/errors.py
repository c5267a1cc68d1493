"""Exception hierarchy for XML tree parsing.

Every failure raised by the library derives from ``XMLTreeError`` so callers
parsing untrusted input can catch a single type. Errors that can be tied to a
location in the source carry the ``TokenPosition`` of the offending construct.
"""

from typing import TYPE_CHECKING, List, Optional, Sequence

if TYPE_CHECKING:
    from mini_xml_tree.tokenization.events import TokenPosition


class XMLTreeError(Exception):
    """Base exception for all parsing and structural errors."""

    def __init__(self, message: str, position: Optional["TokenPosition"] = None) -> None:
        self.message = message
        self.position = position
        if position is not None:
            message = f"{message} (line {position.line}, column {position.column})"
        super().__init__(message)


class TokenizationError(XMLTreeError):
    """The input could not be split into XML events.

    Raised for broken tag syntax, unterminated constructs, undefined entity
    references and byte input that is not valid UTF-8.
    """


class StructureError(XMLTreeError):
    """Tag nesting or naming is inconsistent with well-formed XML."""


class MismatchedTagError(StructureError):
    """An end tag does not match the innermost open element."""

    def __init__(
        self,
        expected: str,
        found: str,
        position: Optional["TokenPosition"] = None
    ) -> None:
        self.expected = expected
        self.found = found
        super().__init__(
            f"Mismatched end tag: expected </{expected}>, found </{found}>",
            position,
        )


class UnexpectedEndOfInputError(StructureError):
    """Input ended while elements were still open."""

    def __init__(self, open_elements: Sequence[str]) -> None:
        self.open_elements: List[str] = list(open_elements)
        super().__init__(
            "Unexpected end of input with unclosed elements: "
            + ", ".join(f"<{name}>" for name in self.open_elements)
        )


class EmptyDocumentError(StructureError):
    """Input contains no element at all."""

    def __init__(self) -> None:
        super().__init__("Document contains no root element")


class DepthLimitExceededError(StructureError):
    """Element nesting is deeper than the configured limit."""

    def __init__(self, max_depth: int, position: Optional["TokenPosition"] = None) -> None:
        self.max_depth = max_depth
        super().__init__(f"Element nesting exceeds maximum depth of {max_depth}", position)
