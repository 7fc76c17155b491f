"""Public API for the XML tree codec.

Key Components:
    parse / stringify: Text to tree and tree to text
    parse_string / parse_file: Parsing with the full ParseResult
    XMLParser: Document-bound parser that replays the captured prolog
    get_adapter: Conversion to and from lxml / ElementTree elements
"""

from .adapters import (
    ElementTreeAdapter,
    IntegrationAdapter,
    LxmlAdapter,
    get_adapter,
    list_available_adapters,
)
from .parser import (
    XMLParser,
    parse,
    parse_file,
    parse_string,
    read_source,
    stringify,
)

__all__ = [
    "ElementTreeAdapter",
    "IntegrationAdapter",
    "LxmlAdapter",
    "XMLParser",
    "get_adapter",
    "list_available_adapters",
    "parse",
    "parse_file",
    "parse_string",
    "read_source",
    "stringify",
]
