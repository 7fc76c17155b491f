"""Tag scanning and classification for the XML tree codec.

Key Components:
    TagScanner: Yields (leading text, raw tag) units over a ScanCursor
    ScanCursor: Explicit read position threaded through every scanning call
    NodeClassifier: Determines the kind of a raw tag and parses special constructs
    NodeKind: Enumeration of tag kinds
    parse_attributes: Extracts decoded attributes from an opening tag
"""

from .attributes import ATTRIBUTE_PATTERN, parse_attributes
from .classifier import ClassifiedNode, NodeClassifier, NodeKind
from .scanner import ScanCursor, ScannedTag, TagScanner

__all__ = [
    "ATTRIBUTE_PATTERN",
    "ClassifiedNode",
    "NodeClassifier",
    "NodeKind",
    "ScanCursor",
    "ScannedTag",
    "TagScanner",
    "parse_attributes",
]
