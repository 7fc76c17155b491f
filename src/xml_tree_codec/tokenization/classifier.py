"""Classification of raw tag content into node kinds.

A raw tag is the interior of ``<...>`` as produced by the scanner. Special
constructs (processing instructions, comments, DTDs and CDATA sections) are
recognized by their leading marker; comments, inline DTDs and CDATA sections
may contain ``>`` themselves, so their sub-parsers keep pulling chunks from
the scanner until the construct's own terminator is seen.
"""

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Pattern

from xml_tree_codec.shared.errors import ErrorKind, ErrorReporter

from .scanner import ScanCursor, TagScanner

SPECIAL_TAG_PATTERN = re.compile(r"^\s*[!?]")
PI_TAG_PATTERN = re.compile(r"^\s*\?")
COMMENT_TAG_PATTERN = re.compile(r"^\s*!--")
DTD_TAG_PATTERN = re.compile(r"^\s*!DOCTYPE")
CDATA_TAG_PATTERN = re.compile(r"^\s*!\s*\[\s*CDATA")

STANDARD_TAG_PATTERN = re.compile(r"^\s*(/?)(\w[\w\-:.]*)\s*(.*)$", re.S)
SELF_CLOSING_PATTERN = re.compile(r"/\s*$")

PI_NODE_PATTERN = re.compile(r"^\s*\?\s*([\w\-:]+)\s*(.*)$", re.S)
END_COMMENT_PATTERN = re.compile(r"--\Z")
EXTERNAL_DTD_PATTERN = re.compile(
    r'^\s*!DOCTYPE\s+([\w\-:]+)\s+(SYSTEM|PUBLIC)\s+"([^"]+)"'
)
INLINE_DTD_PATTERN = re.compile(r"^\s*!DOCTYPE\s+([\w\-:]+)\s+\[")
END_DTD_PATTERN = re.compile(r"\]\s*\Z")
DTD_NODE_PATTERN = re.compile(r"^\s*!DOCTYPE\s+([\w\-:]+)\s+\[(.*)\]", re.S)
END_CDATA_PATTERN = re.compile(r"\]\]\Z")
CDATA_NODE_PATTERN = re.compile(r"^\s*!\s*\[\s*CDATA\s*\[(.*)\]\]", re.S)


class NodeKind(Enum):
    """Kinds of markup a raw tag can hold."""

    PROCESSING_INSTRUCTION = auto()  # <?target ...?>
    COMMENT = auto()                 # <!-- ... -->
    DTD = auto()                     # <!DOCTYPE ...>
    CDATA = auto()                   # <![CDATA[ ... ]]>
    OPEN_TAG = auto()                # <name attrs> or <name attrs/>
    CLOSE_TAG = auto()               # </name>


@dataclass(frozen=True)
class ClassifiedNode:
    """A classified tag.

    ``raw`` is the complete construct text without the outer brackets, which
    for multi-chunk constructs spans several scanner units. ``name`` is the
    element name, PI target or DTD root name. ``text`` holds a CDATA body.
    """

    kind: NodeKind
    raw: str
    name: Optional[str] = None
    attributes_raw: str = ""
    self_closing: bool = False
    text: Optional[str] = None

    @property
    def is_special(self) -> bool:
        return self.kind not in (NodeKind.OPEN_TAG, NodeKind.CLOSE_TAG)


class NodeClassifier:
    """Determines the kind of a raw tag and parses special constructs."""

    def __init__(
        self,
        scanner: Optional[TagScanner] = None,
        lower_case: bool = False
    ) -> None:
        self.scanner = scanner or TagScanner()
        self.lower_case = lower_case

    def classify(
        self,
        raw: str,
        cursor: ScanCursor,
        reporter: ErrorReporter
    ) -> ClassifiedNode:
        """Classify ``raw``, advancing ``cursor`` past multi-chunk constructs.

        Raises:
            XMLParseError: through ``reporter`` on malformed or unclosed markup
        """
        if SPECIAL_TAG_PATTERN.match(raw):
            if PI_TAG_PATTERN.match(raw):
                return self._parse_processing_instruction(raw, cursor, reporter)
            if COMMENT_TAG_PATTERN.match(raw):
                return self._parse_comment(raw, cursor, reporter)
            if DTD_TAG_PATTERN.match(raw):
                return self._parse_dtd(raw, cursor, reporter)
            if CDATA_TAG_PATTERN.match(raw):
                return self._parse_cdata(raw, cursor, reporter)
            reporter.fail(ErrorKind.MALFORMED_SPECIAL_TAG, raw, cursor)

        return self._parse_standard_tag(raw, cursor, reporter)

    def _parse_standard_tag(
        self,
        raw: str,
        cursor: ScanCursor,
        reporter: ErrorReporter
    ) -> ClassifiedNode:
        match = STANDARD_TAG_PATTERN.match(raw)
        if match is None:
            reporter.fail(ErrorKind.MALFORMED_TAG, raw, cursor)

        closing, name, rest = match.groups()
        if self.lower_case:
            name = name.lower()

        if closing:
            return ClassifiedNode(kind=NodeKind.CLOSE_TAG, raw=raw, name=name)

        return ClassifiedNode(
            kind=NodeKind.OPEN_TAG,
            raw=raw,
            name=name,
            attributes_raw=rest,
            self_closing=SELF_CLOSING_PATTERN.search(rest) is not None,
        )

    def _parse_processing_instruction(
        self,
        raw: str,
        cursor: ScanCursor,
        reporter: ErrorReporter
    ) -> ClassifiedNode:
        match = PI_NODE_PATTERN.match(raw)
        if match is None:
            reporter.fail(ErrorKind.MALFORMED_PROCESSING_INSTRUCTION, raw, cursor)
        return ClassifiedNode(
            kind=NodeKind.PROCESSING_INSTRUCTION, raw=raw, name=match.group(1)
        )

    def _parse_comment(
        self,
        raw: str,
        cursor: ScanCursor,
        reporter: ErrorReporter
    ) -> ClassifiedNode:
        raw = self._extend_until(
            raw, END_COMMENT_PATTERN, ErrorKind.UNCLOSED_COMMENT, cursor, reporter
        )
        return ClassifiedNode(kind=NodeKind.COMMENT, raw=raw)

    def _parse_dtd(
        self,
        raw: str,
        cursor: ScanCursor,
        reporter: ErrorReporter
    ) -> ClassifiedNode:
        external = EXTERNAL_DTD_PATTERN.match(raw)
        if external is not None:
            return ClassifiedNode(kind=NodeKind.DTD, raw=raw, name=external.group(1))

        if INLINE_DTD_PATTERN.match(raw) is None:
            reporter.fail(ErrorKind.MALFORMED_DTD, raw, cursor)

        raw = self._extend_until(
            raw, END_DTD_PATTERN, ErrorKind.UNCLOSED_DTD, cursor, reporter
        )
        match = DTD_NODE_PATTERN.match(raw)
        if match is None:
            reporter.fail(ErrorKind.MALFORMED_DTD, raw, cursor)
        return ClassifiedNode(kind=NodeKind.DTD, raw=raw, name=match.group(1))

    def _parse_cdata(
        self,
        raw: str,
        cursor: ScanCursor,
        reporter: ErrorReporter
    ) -> ClassifiedNode:
        raw = self._extend_until(
            raw, END_CDATA_PATTERN, ErrorKind.UNCLOSED_CDATA, cursor, reporter
        )
        match = CDATA_NODE_PATTERN.match(raw)
        if match is None:
            reporter.fail(ErrorKind.MALFORMED_CDATA, raw, cursor)
        return ClassifiedNode(kind=NodeKind.CDATA, raw=raw, text=match.group(1))

    def _extend_until(
        self,
        raw: str,
        terminator: Pattern[str],
        unclosed: ErrorKind,
        cursor: ScanCursor,
        reporter: ErrorReporter
    ) -> str:
        """Append ``>``-delimited chunks to ``raw`` until ``terminator`` matches."""
        while terminator.search(raw) is None:
            chunk = self.scanner.next_chunk(cursor)
            if chunk is None:
                reporter.fail(unclosed, raw, cursor)
            raw += ">" + chunk
        return raw
