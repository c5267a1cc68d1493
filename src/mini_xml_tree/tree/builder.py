"""Tree building from an XML event stream.

The builder consumes a flat sequence of events and assembles the nested element
tree in a single linear pass, keeping the currently open elements on an explicit
stack instead of recursing.
"""

import time
from typing import Iterable, Iterator, List, Optional

from mini_xml_tree.shared import (
    DepthLimitExceededError,
    EmptyDocumentError,
    MismatchedTagError,
    ParserConfig,
    UnexpectedEndOfInputError,
    get_logger,
)
from mini_xml_tree.tokenization import Event, EventType

from .model import Element, Text

MS_PER_SECOND = 1000


class XMLTreeBuilder:
    """Builds a single rooted element tree from XML events.

    The first completed top-level element is the result; events after it are
    never consumed. A document whose first tag is an empty tag therefore yields
    that childless element immediately.

    Example:
        >>> from mini_xml_tree.tokenization import iter_events
        >>> root = XMLTreeBuilder().build(iter_events("<a><b/>text</a>"))
        >>> [getattr(child, "name", child) for child in root.children]
        ['b', Text(value='text')]
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize tree builder.

        Args:
            config: Parser configuration (defaults to ``ParserConfig()``)
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "xml_tree_builder")

        # Statistics of the most recent build
        self.elements_created = 0
        self.events_processed = 0

    def build(self, events: Iterable[Event]) -> Element:
        """Build an element tree from ``events``.

        Args:
            events: Event sequence, typically from ``iter_events``

        Returns:
            The root element

        Raises:
            EmptyDocumentError: If the events contain no start or empty tag
            MismatchedTagError: If an end tag does not close the innermost element
            UnexpectedEndOfInputError: If events run out with elements still open
                and ``strict_end_of_input`` is set
            DepthLimitExceededError: If nesting exceeds ``max_depth``
            TokenizationError: Propagated from a lazily lexing event source
        """
        start_time = time.time()
        self.elements_created = 0
        self.events_processed = 0

        iterator = iter(events)
        root_event = self._find_root_event(iterator)
        root = self._construct_element(root_event)

        if root_event.type is EventType.EMPTY_TAG:
            self._log_completed(root, start_time)
            return root

        stack: List[Element] = [root]
        for event in iterator:
            self.events_processed += 1
            event_type = event.type

            if event_type is EventType.START_TAG:
                if len(stack) >= self.config.max_depth:
                    raise DepthLimitExceededError(self.config.max_depth, event.position)
                stack.append(self._construct_element(event))

            elif event_type is EventType.EMPTY_TAG:
                stack[-1].children.append(self._construct_element(event))

            elif event_type is EventType.END_TAG:
                element = stack.pop()
                if element.name != event.name:
                    raise MismatchedTagError(element.name, event.name or "", event.position)
                if not stack:
                    self._log_completed(element, start_time)
                    return element
                stack[-1].children.append(element)

            elif event_type is EventType.TEXT:
                if event.text:
                    stack[-1].children.append(Text(event.text))

            # Comments, CDATA, processing instructions, declarations and
            # doctypes produce no node.

        return self._handle_end_of_input(stack, start_time)

    def _find_root_event(self, iterator: Iterator[Event]) -> Event:
        """Skip everything before the first start or empty tag."""
        for event in iterator:
            self.events_processed += 1
            if event.type in (EventType.START_TAG, EventType.EMPTY_TAG):
                return event
            if event.type is EventType.END_TAG:
                self.logger.debug(
                    "Skipping end tag before root element",
                    extra={"tag": event.name}
                )
        raise EmptyDocumentError()

    def _construct_element(self, event: Event) -> Element:
        self.elements_created += 1
        # dict() keeps the first position and the last value of duplicate names
        return Element(name=event.name or "", attrs=dict(event.attributes))

    def _handle_end_of_input(self, stack: List[Element], start_time: float) -> Element:
        open_elements = [element.name for element in stack]
        if self.config.strict_end_of_input:
            raise UnexpectedEndOfInputError(open_elements)

        self.logger.warning(
            "Input ended with unclosed elements; closing them implicitly",
            extra={"open_elements": open_elements}
        )
        while len(stack) > 1:
            element = stack.pop()
            stack[-1].children.append(element)
        self._log_completed(stack[0], start_time)
        return stack[0]

    def _log_completed(self, root: Element, start_time: float) -> None:
        self.logger.debug(
            "Tree building completed",
            extra={
                "root": root.name,
                "element_count": self.elements_created,
                "event_count": self.events_processed,
                "processing_time_ms": (time.time() - start_time) * MS_PER_SECOND,
            }
        )
