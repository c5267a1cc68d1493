"""Integration adapters for other XML tree libraries.

Adapters convert ``Element`` trees to and from the element types of lxml and
the standard library's ElementTree. Both libraries store character data in
``.text`` / ``.tail`` slots rather than as child nodes; the adapters map the
ordered ``Text`` children onto those slots and back. Comments and processing
instructions found in foreign trees are skipped, their tails are kept.
"""

import importlib.util
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from types import ModuleType
from typing import Any, Dict, List, Optional, Tuple, Type

from mini_xml_tree.shared import get_logger
from mini_xml_tree.tree import Element, Text

MS_PER_SECOND = 1000


@dataclass(frozen=True)
class AdapterMetadata:
    """Metadata about an integration adapter."""

    name: str
    target_library: str
    description: str


class IntegrationAdapter(ABC):
    """Abstract base class for tree conversion adapters."""

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        """Initialize the integration adapter.

        Args:
            correlation_id: Optional correlation ID for request tracking
        """
        self.correlation_id = correlation_id
        self._logger = get_logger(__name__, correlation_id, self.__class__.__name__)

    @property
    @abstractmethod
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""

    @abstractmethod
    def _load_module(self) -> ModuleType:
        """Import the target library's element module."""

    def is_available(self) -> bool:
        """Check if the target library can be imported."""
        module_name = self.metadata.target_library
        return importlib.util.find_spec(module_name.split(".")[0]) is not None

    def to_target(self, element: Element) -> Any:
        """Convert an ``Element`` tree to the target library's element type.

        Raises:
            TypeError: If ``element`` is not an ``Element``
        """
        if not isinstance(element, Element):
            raise TypeError(f"Expected Element, got {type(element).__name__}")
        start_time = time.time()
        converted = self._build_target(element, self._load_module())
        self._log_conversion("to_target", element.name, start_time)
        return converted

    def from_target(self, target_data: Any) -> Element:
        """Convert a target library element to an ``Element`` tree.

        Raises:
            TypeError: If ``target_data`` is not an element
        """
        if not isinstance(getattr(target_data, "tag", None), str):
            raise TypeError(
                f"{self.metadata.target_library} element expected, "
                f"got {type(target_data).__name__}"
            )
        start_time = time.time()
        converted = self._build_element(target_data)
        self._log_conversion("from_target", converted.name, start_time)
        return converted

    def _build_target(self, element: Element, etree: ModuleType) -> Any:
        root = etree.Element(element.name, dict(element.attrs))
        stack: List[Tuple[Element, Any]] = [(element, root)]
        while stack:
            source, target = stack.pop()
            last_child = None
            for child in source.children:
                if isinstance(child, Text):
                    if last_child is None:
                        target.text = (target.text or "") + child.value
                    else:
                        last_child.tail = (last_child.tail or "") + child.value
                else:
                    last_child = etree.Element(child.name, dict(child.attrs))
                    target.append(last_child)
                    stack.append((child, last_child))
        return root

    def _build_element(self, node: Any) -> Element:
        root = self._new_element(node)
        stack: List[Tuple[Any, Element]] = [(node, root)]
        while stack:
            source, element = stack.pop()
            if source.text:
                element.children.append(Text(source.text))
            for child in source:
                # Comments and processing instructions have non-string tags
                if isinstance(child.tag, str):
                    converted = self._new_element(child)
                    element.children.append(converted)
                    stack.append((child, converted))
                if child.tail:
                    element.children.append(Text(child.tail))
        return root

    @staticmethod
    def _new_element(node: Any) -> Element:
        return Element(
            name=node.tag,
            attrs={str(key): str(value) for key, value in node.attrib.items()},
        )

    def _log_conversion(self, direction: str, root: str, start_time: float) -> None:
        self._logger.debug(
            "Conversion completed",
            extra={
                "direction": direction,
                "root": root,
                "conversion_time_ms": (time.time() - start_time) * MS_PER_SECOND,
            }
        )


class LxmlAdapter(IntegrationAdapter):
    """Adapter for bidirectional conversion with lxml.etree.

    lxml validates tag names, so prefixed names such as ``a:b`` raise
    ``ValueError`` when converted without a namespace declaration.
    """

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="lxml",
            target_library="lxml.etree",
            description="Conversion between Element trees and lxml.etree elements",
        )

    def _load_module(self) -> ModuleType:
        import lxml.etree

        return lxml.etree


class ElementTreeAdapter(IntegrationAdapter):
    """Adapter for bidirectional conversion with xml.etree.ElementTree."""

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="elementtree",
            target_library="xml.etree.ElementTree",
            description="Conversion between Element trees and ElementTree elements",
        )

    def _load_module(self) -> ModuleType:
        import xml.etree.ElementTree

        return xml.etree.ElementTree


_ADAPTERS: Dict[str, Type[IntegrationAdapter]] = {}
_ADAPTERS_LOCK = threading.RLock()


def register_adapter(name: str, adapter_class: Type[IntegrationAdapter]) -> None:
    """Register an adapter class under ``name``."""
    if not issubclass(adapter_class, IntegrationAdapter):
        raise TypeError("Adapter must be a subclass of IntegrationAdapter")
    with _ADAPTERS_LOCK:
        _ADAPTERS[name] = adapter_class


def get_adapter(name: str, correlation_id: Optional[str] = None) -> IntegrationAdapter:
    """Create the adapter registered under ``name``.

    Raises:
        KeyError: If no adapter is registered under ``name``
    """
    with _ADAPTERS_LOCK:
        adapter_class = _ADAPTERS.get(name)
        available = sorted(_ADAPTERS)
    if adapter_class is None:
        raise KeyError(f"Unknown adapter {name!r}; available: {', '.join(available)}")
    return adapter_class(correlation_id)


def list_available_adapters() -> List[AdapterMetadata]:
    """Metadata of every registered adapter whose library is importable."""
    with _ADAPTERS_LOCK:
        adapter_classes = list(_ADAPTERS.values())
    adapters = (adapter_class() for adapter_class in adapter_classes)
    return [adapter.metadata for adapter in adapters if adapter.is_available()]


register_adapter("lxml", LxmlAdapter)
register_adapter("elementtree", ElementTreeAdapter)
