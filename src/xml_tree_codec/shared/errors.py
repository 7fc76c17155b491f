"""Error taxonomy, error records and the per-parse error reporter.

Parsing is fail-fast: the first structural problem is recorded by the
:class:`ErrorReporter` and raised as :class:`XMLParseError`. The tree builder
catches it at its boundary and returns a failed result, so the record stays
inspectable while no partial tree is handed out.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, NoReturn, Optional

from .logging import CorrelationLogger

if TYPE_CHECKING:
    from xml_tree_codec.tokenization.scanner import ScanCursor


class ErrorKind(Enum):
    """Kinds of failure, valued by their default message."""

    MALFORMED_TAG = "Malformed tag"
    MALFORMED_SPECIAL_TAG = "Malformed special tag"
    MALFORMED_PROCESSING_INSTRUCTION = "Malformed processor instruction"
    UNCLOSED_COMMENT = "Unclosed comment tag"
    UNCLOSED_DTD = "Unclosed DTD tag"
    UNCLOSED_CDATA = "Unclosed CDATA tag"
    MALFORMED_DTD = "Malformed DTD tag"
    MALFORMED_CDATA = "Malformed CDATA tag"
    MISMATCHED_CLOSING_TAG = "Mismatched closing tag"
    MISSING_CLOSING_TAG = "Missing closing tag"
    TOO_MANY_TOP_LEVEL_NODES = "Only one top-level node is allowed in document"
    FILE_NOT_FOUND = "File not found"

    @property
    def label(self) -> str:
        """CamelCase name of the kind, e.g. ``MismatchedClosingTag``."""
        return "".join(
            part if part in _ACRONYMS else part.capitalize()
            for part in self.name.split("_")
        )


_ACRONYMS = frozenset({"DTD", "CDATA"})


@dataclass(frozen=True)
class ParseErrorRecord:
    """Structured description of a parse failure."""

    kind: ErrorKind
    message: str
    tag: str
    line: int
    error_type: str = "Parse"

    @property
    def formatted(self) -> str:
        """Render as ``Parse Error: {message} on line {N}: <{tag}>``."""
        text = f"{self.error_type} Error: {self.message}"
        if self.line:
            text += f" on line {self.line}"
        if self.tag:
            text += f": <{self.tag}>"
        return text

    def to_dict(self) -> Dict[str, Any]:
        """Convert the record to a JSON-friendly dictionary."""
        return {
            "kind": self.kind.label,
            "type": self.error_type,
            "message": self.message,
            "tag": self.tag,
            "line": self.line,
        }

    def __str__(self) -> str:
        return self.formatted


class XMLTreeCodecError(Exception):
    """Base exception for all errors raised by this package."""


class XMLParseError(XMLTreeCodecError):
    """Raised when parsing stops on a structural problem."""

    def __init__(self, record: ParseErrorRecord) -> None:
        super().__init__(record.formatted)
        self.record = record

    @property
    def kind(self) -> ErrorKind:
        return self.record.kind

    @property
    def line(self) -> int:
        return self.record.line


class SourceNotFoundError(XMLTreeCodecError, FileNotFoundError):
    """Raised when a path input does not point to a readable file."""

    def __init__(self, path: str) -> None:
        super().__init__(f"{ErrorKind.FILE_NOT_FOUND.value}: {path}")
        self.path = path
        self.kind = ErrorKind.FILE_NOT_FOUND


def compute_line_number(text: str, position: int, tag: str) -> int:
    """Return the 1-based line on which ``tag`` starts.

    ``position`` is the offset just past the consumed input; line breaks inside
    the offending tag itself are subtracted so the result points at its start.
    """
    line = text.count("\n", 0, position) + 1
    line -= tag.count("\n")
    return max(line, 1)


class ErrorReporter:
    """Collects error records for one parse and raises on the first one."""

    def __init__(self, logger: Optional[CorrelationLogger] = None) -> None:
        self.errors: List[ParseErrorRecord] = []
        self._logger = logger

    def fail(
        self,
        kind: ErrorKind,
        tag: str,
        cursor: "ScanCursor",
        message: Optional[str] = None
    ) -> NoReturn:
        """Record a failure at the cursor position and raise it."""
        record = ParseErrorRecord(
            kind=kind,
            message=message or kind.value,
            tag=tag,
            line=compute_line_number(cursor.text, cursor.position, tag),
        )
        self.errors.append(record)

        if self._logger is not None:
            self._logger.warning(
                "Parse failed",
                extra={"error_kind": kind.label, "line": record.line}
            )

        raise XMLParseError(record)

    @property
    def last_error(self) -> Optional[ParseErrorRecord]:
        return self.errors[-1] if self.errors else None

    def __len__(self) -> int:
        return len(self.errors)
