"""XML Tree Codec.

Converts XML documents into nested dictionaries, lists and strings, and
composes such trees back into XML text.

Progressive API Disclosure:
- Level 1: Simple functions - parse(), stringify()
- Level 2: Full results - parse_string(), parse_file()
- Level 3: Document-bound parser - XMLParser class
- Level 4: Library integration - get_adapter()
"""

__version__ = "0.1.0"
__author__ = "XML Tree Codec Team"

# Progressive API disclosure - Level 1: Simple functions
# Progressive API disclosure - Level 2 and 3: Results and parser class
from .api import (
    XMLParser,
    get_adapter,
    list_available_adapters,
    parse,
    parse_file,
    parse_string,
    stringify,
)

# Configuration classes for advanced usage
from .shared.config import ComposerConfig, ParserConfig, alphabetical

# Errors raised at the API boundary
from .shared.errors import (
    ErrorKind,
    ParseErrorRecord,
    SourceNotFoundError,
    XMLParseError,
    XMLTreeCodecError,
)

# Core result objects for all API levels
from .tree import Element, ParseResult, Sequence, XMLComposer, XMLTreeBuilder

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple functions (progressive disclosure entry point)
    "parse",
    "stringify",

    # Level 2: Full results
    "parse_string",
    "parse_file",

    # Level 3: Document-bound parser
    "XMLParser",

    # Level 4: Library integration
    "get_adapter",
    "list_available_adapters",

    # Result objects and data structures
    "Element",
    "ParseResult",
    "Sequence",
    "XMLComposer",
    "XMLTreeBuilder",

    # Errors
    "ErrorKind",
    "ParseErrorRecord",
    "SourceNotFoundError",
    "XMLParseError",
    "XMLTreeCodecError",

    # Configuration classes for advanced usage
    "ComposerConfig",
    "ParserConfig",
    "alphabetical",
]
