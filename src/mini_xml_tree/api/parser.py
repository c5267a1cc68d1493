"""Parse and serialize entry points.

Module-level functions cover the common cases; ``XMLTreeParser`` keeps a
configuration and usage statistics across many parses.
"""

import threading
import time
from pathlib import Path
from typing import Any, BinaryIO, Dict, Optional, TextIO, Union

from mini_xml_tree.shared import (
    ParserConfig,
    TokenizationError,
    XMLTreeError,
    get_logger,
)
from mini_xml_tree.tokenization import XMLEventReader
from mini_xml_tree.tree import Element, XMLSerializer, XMLTreeBuilder

# Type definitions for input data
InputType = Union[str, bytes, BinaryIO, TextIO, Path]

# Constants for API operations
PREVIEW_LENGTH = 100  # Max length for content preview in logs
MS_PER_SECOND = 1000
BYTE_ORDER_MARK = "\ufeff"
DEFAULT_ENCODING = "utf-8"


def parse(
    input_data: InputType,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> Element:
    """Parse XML from various input sources with automatic type detection.

    Args:
        input_data: XML content as string, bytes, file-like object, or Path
        config: Optional parser configuration
        correlation_id: Optional correlation ID for request tracking

    Returns:
        The root element

    Raises:
        TokenizationError: If the input cannot be lexed
        StructureError: If tags are mismatched, unclosed or missing entirely
        TypeError: If the input type is not supported

    Examples:
        >>> parse('<root><item/></root>').children[0].name
        'item'
        >>> parse(b'<?xml version="1.0"?><root/>').name
        'root'
    """
    if isinstance(input_data, (str, bytes)):
        return _parse_direct_content(input_data, config, correlation_id)
    if isinstance(input_data, Path):
        return parse_file(input_data, config=config, correlation_id=correlation_id)
    if hasattr(input_data, "read"):
        return _parse_direct_content(input_data.read(), config, correlation_id)
    raise TypeError(f"Unsupported input type: {type(input_data).__name__}")


def parse_string(
    xml_string: str,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> Element:
    """Parse XML from a string.

    Examples:
        >>> root = parse_string('<a x="1"> <b/> </a>')
        >>> root.attrs
        {'x': '1'}
        >>> len(root.children)
        3
    """
    if not isinstance(xml_string, str):
        raise TypeError(f"parse_string expects str, got {type(xml_string).__name__}")
    return _parse_direct_content(xml_string, config, correlation_id)


def parse_file(
    file_path: Union[str, Path],
    encoding: str = DEFAULT_ENCODING,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> Element:
    """Parse XML from a file.

    Args:
        file_path: Path to XML file (string or Path object)
        encoding: Encoding of the file contents
        config: Optional parser configuration
        correlation_id: Optional correlation ID for request tracking

    Raises:
        OSError: If the file cannot be read
        TokenizationError: If the file is not valid in ``encoding`` or cannot be lexed
    """
    path = Path(file_path)
    logger = get_logger(__name__, correlation_id, "parse_file")
    logger.debug("Reading XML file", extra={"file": str(path), "encoding": encoding})

    data = path.read_bytes()
    return _parse_direct_content(_decode_bytes(data, encoding), config, correlation_id)


def serialize(element: Element) -> str:
    """Serialize an element tree to XML text.

    Examples:
        >>> serialize(parse('<a></a>'))
        '<a/>'
    """
    return XMLSerializer().serialize(element)


# Aliases for formatting contexts
to_text = serialize
to_display_string = serialize


def _decode_bytes(data: bytes, encoding: str = DEFAULT_ENCODING) -> str:
    try:
        return data.decode(encoding)
    except UnicodeDecodeError as e:
        raise TokenizationError(
            f"Input is not valid {encoding} at byte {e.start}: {e.reason}"
        ) from e
    except LookupError as e:
        raise TokenizationError(f"Unknown encoding: {encoding}") from e


def _parse_direct_content(
    content: Union[str, bytes],
    config: Optional[ParserConfig],
    correlation_id: Optional[str]
) -> Element:
    """Parse string or bytes content.

    Args:
        content: XML content as string or bytes
        config: Optional parser configuration
        correlation_id: Optional correlation ID for request tracking

    Returns:
        The root element
    """
    start_time = time.time()
    config = config or ParserConfig()
    logger = get_logger(__name__, correlation_id, "parse")

    text = _decode_bytes(content) if isinstance(content, bytes) else content
    if config.strip_bom and text.startswith(BYTE_ORDER_MARK):
        text = text[len(BYTE_ORDER_MARK):]

    logger.debug(
        "Starting parse operation",
        extra={
            "content_length": len(text),
            "preview": (
                text[:PREVIEW_LENGTH] + "..."
                if len(text) > PREVIEW_LENGTH else text
            ),
        }
    )

    builder = XMLTreeBuilder(config=config, correlation_id=correlation_id)
    try:
        root = builder.build(XMLEventReader(text, correlation_id))
    except XMLTreeError as e:
        logger.error(
            "Parse operation failed",
            extra={
                "error_type": type(e).__name__,
                "error": e.message,
                "processing_time_ms": (time.time() - start_time) * MS_PER_SECOND,
            },
            exc_info=False,
        )
        raise

    logger.debug(
        "Parse operation completed",
        extra={
            "root": root.name,
            "element_count": builder.elements_created,
            "processing_time_ms": (time.time() - start_time) * MS_PER_SECOND,
        }
    )
    return root


class XMLTreeParser:
    """Reusable parser with a fixed configuration and usage statistics.

    Attributes:
        config: Current parser configuration
        correlation_id: Correlation ID for request tracking

    Examples:
        >>> parser = XMLTreeParser(ParserConfig.lenient())
        >>> parser.parse('<root><open>').children[0].name
        'open'
        >>> parser.statistics["total_parses"]
        1
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize parser.

        Args:
            config: Parser configuration (defaults to ``ParserConfig()``)
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "xml_tree_parser")

        self._lock = threading.Lock()
        self._parse_count = 0
        self._successful_parses = 0
        self._total_processing_time = 0.0

    def parse(self, input_data: InputType) -> Element:
        """Parse XML using this parser's configuration.

        Raises:
            XMLTreeError: If the input is not a well-formed XML fragment
        """
        start_time = time.time()
        succeeded = False
        try:
            root = parse(input_data, config=self.config, correlation_id=self.correlation_id)
            succeeded = True
            return root
        finally:
            processing_time = (time.time() - start_time) * MS_PER_SECOND
            with self._lock:
                self._parse_count += 1
                self._total_processing_time += processing_time
                if succeeded:
                    self._successful_parses += 1

    def serialize(self, element: Element) -> str:
        """Serialize an element tree to XML text."""
        return serialize(element)

    def reconfigure(self, **overrides: Any) -> None:
        """Replace the configuration with an overridden copy.

        Example:
            >>> parser = XMLTreeParser()
            >>> parser.reconfigure(max_depth=8)
            >>> parser.config.max_depth
            8
        """
        self.config = self.config.override(**overrides)
        self.logger.info("Parser reconfigured", extra={"overrides": sorted(overrides)})

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get parser usage statistics."""
        with self._lock:
            return {
                "total_parses": self._parse_count,
                "successful_parses": self._successful_parses,
                "failed_parses": self._parse_count - self._successful_parses,
                "success_rate": (
                    self._successful_parses / self._parse_count
                    if self._parse_count > 0 else 0.0
                ),
                "total_processing_time_ms": self._total_processing_time,
                "average_processing_time_ms": (
                    self._total_processing_time / self._parse_count
                    if self._parse_count > 0 else 0.0
                ),
                "correlation_id": self.correlation_id,
            }

    def reset_statistics(self) -> None:
        """Reset parser usage statistics."""
        with self._lock:
            self._parse_count = 0
            self._successful_parses = 0
            self._total_processing_time = 0.0
        self.logger.info("Parser statistics reset")
