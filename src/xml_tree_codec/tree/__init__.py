"""Tree building and composition for the XML tree codec.

Key Components:
    XMLTreeBuilder: Construction of document trees from XML text
    XMLComposer: Renders trees back to XML text
    ParseResult: Tree or structured error, plus captured declarations
    Element, Sequence: Node variants (dict and list subclasses)
"""

from .builder import ParseResult, XMLTreeBuilder
from .composer import VALID_TAG_NAME_PATTERN, XMLComposer
from .nodes import (
    Element,
    Node,
    NodeType,
    Sequence,
    always_array,
    first_key,
    node_type,
)

__all__ = [
    "Element",
    "Node",
    "NodeType",
    "ParseResult",
    "Sequence",
    "VALID_TAG_NAME_PATTERN",
    "XMLComposer",
    "XMLTreeBuilder",
    "always_array",
    "first_key",
    "node_type",
]
