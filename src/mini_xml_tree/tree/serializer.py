"""Serialization of element trees into XML events and text."""

from typing import Iterator, List, Union

from mini_xml_tree.tokenization import Event, EventType, write_events

from .model import Element, Node, Text


class XMLSerializer:
    """Turns an element tree back into XML.

    Traversal is pre-order depth-first over an explicit stack, so arbitrarily
    deep trees serialize without touching the interpreter's recursion limit.
    Childless elements are always written as empty tags.
    """

    def iter_events(self, element: Element) -> Iterator[Event]:
        """Yield the events describing ``element`` and its subtree.

        Raises:
            TypeError: If ``element`` (or a child) is not an ``Element``/``Text``
        """
        if not isinstance(element, Element):
            raise TypeError(f"Expected Element, got {type(element).__name__}")

        # Pending work: nodes still to visit, or end tags still to emit
        stack: List[Union[Node, Event]] = [element]
        while stack:
            item = stack.pop()

            if isinstance(item, Event):
                yield item
            elif isinstance(item, Text):
                yield Event(EventType.TEXT, text=item.value)
            elif isinstance(item, Element):
                attributes = tuple(item.attrs.items())
                if not item.children:
                    yield Event.empty(item.name, attributes)
                    continue
                yield Event.start(item.name, attributes)
                stack.append(Event.end(item.name))
                stack.extend(reversed(item.children))
            else:
                raise TypeError(f"Unsupported child node type: {type(item).__name__}")

    def serialize(self, element: Element) -> str:
        """Serialize ``element`` to XML text."""
        return write_events(self.iter_events(element))
