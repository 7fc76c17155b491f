"""Integration adapters for exchanging trees with other XML libraries.

Adapters convert between document trees and the element objects of lxml or
the standard library's ElementTree. Conversion goes through XML text, so the
parser and composer configurations given to an adapter apply unchanged.
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional, Type

from xml_tree_codec.shared import ComposerConfig, ParserConfig, get_logger
from xml_tree_codec.tree import XMLComposer

from .parser import parse_string


class AdapterType(Enum):
    """Types of integration adapters."""

    XML_LIBRARY = auto()     # XML processing libraries (lxml, ElementTree)


@dataclass
class AdapterMetadata:
    """Metadata about an integration adapter."""

    name: str
    version: str
    adapter_type: AdapterType
    target_library: str
    supported_versions: List[str]
    description: str


@dataclass
class ConversionResult:
    """Result of a conversion operation."""

    success: bool
    converted_data: Any
    original_data: Any
    conversion_time_ms: float
    errors: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)


class IntegrationAdapter(ABC):
    """Abstract base class for all integration adapters.

    ``to_target`` turns a tree into the library's element type and
    ``from_target`` turns such an element back into a
    :class:`~xml_tree_codec.tree.ParseResult`.
    """

    def __init__(
        self,
        parser_config: Optional[ParserConfig] = None,
        composer_config: Optional[ComposerConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.parser_config = parser_config or ParserConfig()
        self.composer_config = composer_config or self.parser_config.composer_config()
        self.correlation_id = correlation_id
        self._logger = get_logger(__name__, correlation_id, self.__class__.__name__)

    @property
    @abstractmethod
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the target library can be imported."""

    @abstractmethod
    def _fromstring(self, xml: str) -> Any:
        """Parse XML text with the target library."""

    @abstractmethod
    def _tostring(self, element: Any) -> str:
        """Serialize a target element to text."""

    def to_target(self, tree: Any, root_name: Optional[str] = None) -> ConversionResult:
        """Convert a tree to the target library's element type."""
        start_time = time.time()
        xml = XMLComposer(self.composer_config, self.correlation_id).compose_body(
            tree, root_name
        )

        try:
            element = self._fromstring(xml)
        except (SyntaxError, ValueError) as e:
            # lxml's XMLSyntaxError and ElementTree's ParseError are SyntaxErrors
            self._logger.warning("Conversion to target failed", extra={"error": str(e)})
            return self._create_error_result(
                f"Failed to convert to {self.metadata.target_library}: {e}",
                tree,
                (time.time() - start_time) * 1000,
            )

        return ConversionResult(
            success=True,
            converted_data=element,
            original_data=tree,
            conversion_time_ms=(time.time() - start_time) * 1000,
            metadata={"xml_length": len(xml)},
        )

    def from_target(self, target_data: Any) -> ConversionResult:
        """Convert a target element to a parse result."""
        start_time = time.time()

        if not hasattr(target_data, "tag"):
            return self._create_error_result(
                f"Target data is not a valid {self.metadata.target_library} element",
                target_data,
                (time.time() - start_time) * 1000,
            )

        xml_string = self._tostring(target_data)
        parse_result = parse_string(xml_string, self.parser_config, self.correlation_id)

        return ConversionResult(
            success=parse_result.success,
            converted_data=parse_result,
            original_data=target_data,
            conversion_time_ms=(time.time() - start_time) * 1000,
            errors=[record.formatted for record in parse_result.errors],
            metadata={"original_tag": target_data.tag, "xml_length": len(xml_string)},
        )

    def _create_error_result(
        self,
        message: str,
        original_data: Any,
        conversion_time_ms: float
    ) -> ConversionResult:
        return ConversionResult(
            success=False,
            converted_data=None,
            original_data=original_data,
            conversion_time_ms=conversion_time_ms,
            errors=[message],
        )


class LxmlAdapter(IntegrationAdapter):
    """Adapter for bidirectional conversion with lxml.etree."""

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="lxml",
            version="1.0.0",
            adapter_type=AdapterType.XML_LIBRARY,
            target_library="lxml",
            supported_versions=["4.0+"],
            description="Bidirectional conversion between trees and lxml.etree elements",
        )

    def is_available(self) -> bool:
        try:
            import lxml.etree  # noqa: F401
        except ImportError:
            return False
        return True

    def _fromstring(self, xml: str) -> Any:
        from lxml import etree

        return etree.fromstring(xml)

    def _tostring(self, element: Any) -> str:
        from lxml import etree

        return etree.tostring(element, encoding="unicode")


class ElementTreeAdapter(IntegrationAdapter):
    """Adapter for bidirectional conversion with xml.etree.ElementTree."""

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="elementtree",
            version="1.0.0",
            adapter_type=AdapterType.XML_LIBRARY,
            target_library="xml.etree.ElementTree",
            supported_versions=["3.8+"],
            description="Bidirectional conversion between trees and ElementTree elements",
        )

    def is_available(self) -> bool:
        return True

    def _fromstring(self, xml: str) -> Any:
        import xml.etree.ElementTree as ET

        return ET.fromstring(xml)

    def _tostring(self, element: Any) -> str:
        import xml.etree.ElementTree as ET

        return ET.tostring(element, encoding="unicode")


_ADAPTERS: Dict[str, Type[IntegrationAdapter]] = {
    "lxml": LxmlAdapter,
    "elementtree": ElementTreeAdapter,
}


def get_adapter(name: str, **kwargs: Any) -> Optional[IntegrationAdapter]:
    """Instantiate the adapter registered under ``name``, or return ``None``."""
    adapter_class = _ADAPTERS.get(name.lower())
    return adapter_class(**kwargs) if adapter_class else None


def list_available_adapters() -> List[AdapterMetadata]:
    """Metadata of every adapter whose target library is importable."""
    adapters = [adapter_class() for adapter_class in _ADAPTERS.values()]
    return [adapter.metadata for adapter in adapters if adapter.is_available()]
