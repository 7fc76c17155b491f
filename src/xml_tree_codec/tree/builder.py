"""Tree construction from XML text.

This module turns XML text into a document tree of :mod:`nodes` values. The
scanner cursor is threaded through a single loop over the input; elements
that are still open wait on a stack until their closing tag is consumed.
"""

import re
import time
from dataclasses import dataclass, field
from typing import AbstractSet, Any, Dict, List, Optional

from xml_tree_codec.character import decode_entities
from xml_tree_codec.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    ErrorKind,
    ErrorReporter,
    ParseErrorRecord,
    ParserConfig,
    PerformanceMetrics,
    XMLParseError,
    get_logger,
)
from xml_tree_codec.tokenization import (
    ClassifiedNode,
    NodeClassifier,
    NodeKind,
    ScanCursor,
    TagScanner,
    parse_attributes,
)

from .nodes import Element, Node, Sequence, first_key

NON_WHITESPACE_PATTERN = re.compile(r"\S")


@dataclass
class ParseResult:
    """Outcome of one parse: either a tree or the error that stopped it.

    On failure ``tree`` is ``None`` and ``errors`` holds the record of the
    first problem found. Declarations captured before the failure are kept.
    """

    tree: Optional[Node] = None
    success: bool = True
    document_name: Optional[str] = None
    pi_nodes: List[str] = field(default_factory=list)
    dtd_nodes: List[str] = field(default_factory=list)
    errors: List[ParseErrorRecord] = field(default_factory=list)
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    correlation_id: Optional[str] = None

    @property
    def error(self) -> Optional[ParseErrorRecord]:
        """Most recent error record, if any."""
        return self.errors[-1] if self.errors else None

    @property
    def error_message(self) -> str:
        """Formatted most recent error, or an empty string."""
        return self.error.formatted if self.error else ""

    def has_errors(self) -> bool:
        return bool(self.errors)

    def unwrap(self) -> Node:
        """Return the tree, raising :class:`XMLParseError` if parsing failed."""
        if not self.success:
            if self.error is None:
                raise RuntimeError("Failed parse result without an error record")
            raise XMLParseError(self.error)
        return self.tree

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        line: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add diagnostic entry to result."""
        self.diagnostics.append(
            DiagnosticEntry(
                severity=severity,
                message=message,
                component=component,
                line=line,
                details=details,
                correlation_id=self.correlation_id,
            )
        )

    def get_diagnostics_by_severity(
        self,
        severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        return [diag for diag in self.diagnostics if diag.severity == severity]

    def summary(self) -> Dict[str, Any]:
        """Summary statistics for logging and the command line."""
        return {
            "success": self.success,
            "document_name": self.document_name,
            "processing_instructions": len(self.pi_nodes),
            "dtd_declarations": len(self.dtd_nodes),
            "errors": [record.to_dict() for record in self.errors],
            "warnings": len(self.get_diagnostics_by_severity(DiagnosticSeverity.WARNING)),
            "performance": self.performance.to_dict(),
        }


@dataclass
class _BuildState:
    """Per-parse mutable state, created fresh by every :meth:`XMLTreeBuilder.build`."""

    cursor: ScanCursor
    reporter: ErrorReporter
    result: ParseResult


@dataclass
class _OpenElement:
    """An element whose closing tag has not been consumed yet.

    ``name`` is ``None`` for the document level. ``attribute_names`` are the
    attributes merged into ``branch``.
    """

    branch: Element
    name: Optional[str]
    attribute_names: AbstractSet[str]


class XMLTreeBuilder:
    """Builds document trees from XML text.

    A builder holds only its configuration; every :meth:`build` call creates
    its own cursor, error reporter and result, so one builder may serve
    several threads.

    Examples:
        >>> XMLTreeBuilder().build("<R><I>1</I><I>2</I></R>").tree
        Element({'I': Sequence(['1', '2'])})
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "tree_builder")
        self._scanner = TagScanner()
        self._classifier = NodeClassifier(self._scanner, lower_case=self.config.lower_case)

    def build(self, text: str) -> ParseResult:
        """Parse ``text`` into a :class:`ParseResult`."""
        start_time = time.time()
        state = _BuildState(
            cursor=ScanCursor(text),
            reporter=ErrorReporter(self.logger.child("error_reporter")),
            result=ParseResult(correlation_id=self.correlation_id),
        )
        result = state.result
        result.performance.characters_processed = len(text)

        self.logger.debug("Starting tree build", extra={"content_length": len(text)})

        try:
            root = Element()
            self._parse_document(root, state)
            result.tree = self._finish_document(root, state)
        except XMLParseError as e:
            result.success = False
            result.tree = None
            result.document_name = None
            result.errors = list(state.reporter.errors)
            result.add_diagnostic(
                DiagnosticSeverity.ERROR,
                e.record.formatted,
                "tree_builder",
                line=e.record.line,
                details={"kind": e.record.kind.label},
            )

        result.performance.processing_time_ms = (time.time() - start_time) * 1000

        self.logger.debug(
            "Tree build completed",
            extra={
                "success": result.success,
                "document_name": result.document_name,
                "elements_built": result.performance.elements_built,
                "processing_time_ms": result.performance.processing_time_ms,
            }
        )
        return result

    def _parse_document(self, root: Element, state: _BuildState) -> None:
        """Fill ``root`` from the whole input.

        Open elements are kept on an explicit stack; nesting depth is not
        limited by the interpreter recursion limit.
        """
        cursor, reporter = state.cursor, state.reporter
        stack = [_OpenElement(root, None, frozenset())]

        for scanned in self._scanner.iter_tags(cursor):
            state.result.performance.tags_scanned += 1
            current = stack[-1]

            if NON_WHITESPACE_PATTERN.search(scanned.leading_text):
                self._append_text(current.branch, scanned.leading_text)

            node = self._classifier.classify(scanned.content, cursor, reporter)

            if node.kind is NodeKind.PROCESSING_INSTRUCTION:
                state.result.pi_nodes.append(node.raw)
            elif node.kind is NodeKind.DTD:
                state.result.dtd_nodes.append(node.raw)
            elif node.kind is NodeKind.CDATA:
                self._append_text(current.branch, node.text)
            elif node.kind is NodeKind.CLOSE_TAG:
                if current.name is not None and node.name == current.name:
                    stack.pop()
                    self._close_element(current, stack[-1], state)
                    continue
                if current.name is not None:
                    expected = f"expected </{current.name}>"
                else:
                    expected = "no element is open"
                reporter.fail(
                    ErrorKind.MISMATCHED_CLOSING_TAG,
                    node.raw,
                    cursor,
                    message=f"{ErrorKind.MISMATCHED_CLOSING_TAG.value} ({expected})",
                )
            elif node.kind is NodeKind.OPEN_TAG:
                opened = self._open_element(current, node, state)
                if node.self_closing:
                    self._close_element(opened, current, state)
                else:
                    stack.append(opened)

        if len(stack) > 1:
            name = stack[-1].name
            reporter.fail(
                ErrorKind.MISSING_CLOSING_TAG,
                name,
                cursor,
                message=f"{ErrorKind.MISSING_CLOSING_TAG.value} (expected </{name}>)",
            )

    def _open_element(
        self,
        parent: _OpenElement,
        node: ClassifiedNode,
        state: _BuildState
    ) -> _OpenElement:
        if parent.name is None and any(key != self.config.data_key for key in parent.branch):
            state.reporter.fail(ErrorKind.TOO_MANY_TOP_LEVEL_NODES, node.raw, state.cursor)

        attributes = parse_attributes(node.attributes_raw, self.config.lower_case)
        leaf = Element()
        if self.config.preserve_attributes:
            if attributes:
                leaf[self.config.attributes_key] = attributes
            merged_names: AbstractSet[str] = frozenset()
        else:
            leaf.update(attributes)
            merged_names = frozenset(attributes)

        return _OpenElement(leaf, node.name, merged_names)

    def _close_element(
        self,
        element: _OpenElement,
        parent: _OpenElement,
        state: _BuildState
    ) -> None:
        """Attach a finished element to its parent."""
        state.result.performance.elements_built += 1

        if element.name in parent.attribute_names:
            state.result.add_diagnostic(
                DiagnosticSeverity.WARNING,
                f"Child element <{element.name}> shares its name with an attribute "
                f"of <{parent.name}>",
                "tree_builder",
                details={"element": parent.name, "name": element.name},
            )

        self._attach(
            parent.branch,
            element.name,
            self._collapse(element.branch),
            parent.name is None,
        )

    def _append_text(self, branch: Element, text: str) -> None:
        """Append decoded text to the branch's text slot."""
        text = decode_entities(text)
        if not self.config.preserve_whitespace:
            text = text.strip()

        data_key = self.config.data_key
        if data_key in branch:
            branch[data_key] += " " + text
        else:
            branch[data_key] = text

    def _collapse(self, leaf: Element) -> Node:
        """Reduce a text-only element to its text and an empty one to ``""``."""
        if self.config.data_key in leaf and len(leaf) == 1:
            return leaf[self.config.data_key]
        if not leaf:
            return ""
        return leaf

    def _attach(self, branch: Element, name: str, child: Node, at_root: bool) -> None:
        """Store ``child`` under ``name``, promoting duplicates to a Sequence."""
        if name in branch:
            existing = branch[name]
            if isinstance(existing, Sequence):
                existing.append(child)
            else:
                branch[name] = Sequence([existing, child])
        elif self.config.force_arrays and not at_root:
            branch[name] = Sequence([child])
        else:
            branch[name] = child

    def _finish_document(self, root: Element, state: _BuildState) -> Node:
        """Drop document-level text and unwrap the document element."""
        root.pop(self.config.data_key, None)

        document_name = first_key(root)
        state.result.document_name = document_name
        if document_name is not None and not self.config.preserve_document_node:
            return root[document_name]
        return root
