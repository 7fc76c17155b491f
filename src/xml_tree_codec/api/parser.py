"""Public parsing and composing API.

Level 1 is a pair of functions mirroring each other: :func:`parse` turns text
into a tree (or a formatted error string) and :func:`stringify` turns a tree
back into text. :func:`parse_string` and :func:`parse_file` return the full
:class:`ParseResult`. :class:`XMLParser` keeps the captured prolog of one
document so it can be composed back with its processing instructions and DTDs.
"""

import re
from pathlib import Path
from typing import Any, Iterable, List, Optional, Union

from xml_tree_codec.shared import (
    ComposerConfig,
    DiagnosticSeverity,
    ParseErrorRecord,
    ParserConfig,
    SourceNotFoundError,
    get_logger,
)
from xml_tree_codec.tree import Node, ParseResult, XMLComposer, XMLTreeBuilder

# Type definitions for input data
InputType = Union[str, bytes, Path]

PREVIEW_LENGTH = 100  # Max length for content preview in logs
LOOKS_LIKE_XML_PATTERN = re.compile(r"^\s*<")


def _resolve_parser_config(config: Optional[ParserConfig], options: dict) -> ParserConfig:
    config = config or ParserConfig()
    return config.override(**options) if options else config


def _resolve_composer_config(config: Optional[ComposerConfig], options: dict) -> ComposerConfig:
    config = config or ComposerConfig()
    return config.override(**options) if options else config


def _preview(text: str) -> str:
    return text[:PREVIEW_LENGTH] + "..." if len(text) > PREVIEW_LENGTH else text


def parse(
    text: Union[str, bytes],
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None,
    **options: Any
) -> Union[Node, str]:
    """Parse XML text into a tree.

    Args:
        text: XML content
        config: Parser configuration; keyword ``options`` override its fields
        correlation_id: Optional correlation ID for log tracking

    Returns:
        The document tree, or the formatted error message if parsing failed

    Examples:
        >>> parse('<Doc><Item id="1">Hello</Item></Doc>', preserve_attributes=True)
        Element({'Item': Element({'_Attribs': {'id': '1'}, '_Data': 'Hello'})})
        >>> parse('<A><B></A>')
        'Parse Error: Mismatched closing tag (expected </B>) on line 1: </A>'
    """
    result = parse_string(text, config, correlation_id, **options)
    return result.tree if result.success else result.error_message


def parse_string(
    xml_string: Union[str, bytes],
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None,
    **options: Any
) -> ParseResult:
    """Parse XML text and return the full result.

    Malformed input never raises; the result carries ``success=False`` and the
    error record instead.
    """
    config = _resolve_parser_config(config, options)
    if isinstance(xml_string, bytes):
        xml_string = xml_string.decode("utf-8")

    logger = get_logger(__name__, correlation_id, "parse_string")
    logger.info(
        "Starting string parse operation",
        extra={"content_length": len(xml_string), "preview": _preview(xml_string)}
    )

    result = XMLTreeBuilder(config, correlation_id).build(xml_string)

    logger.info(
        "String parse completed",
        extra={
            "success": result.success,
            "document_name": result.document_name,
            "processing_time_ms": result.performance.processing_time_ms,
        }
    )
    return result


def read_source(file_path: Union[str, Path], encoding: str = "utf-8") -> str:
    """Read XML text from a file.

    Raises:
        SourceNotFoundError: If the path does not exist or is not a file
    """
    path_obj = Path(file_path)
    if not path_obj.is_file():
        raise SourceNotFoundError(str(path_obj))
    return path_obj.read_text(encoding=encoding)


def parse_file(
    file_path: Union[str, Path],
    config: Optional[ParserConfig] = None,
    encoding: str = "utf-8",
    correlation_id: Optional[str] = None,
    **options: Any
) -> ParseResult:
    """Parse an XML file.

    Raises:
        SourceNotFoundError: If the file does not exist; parse problems are
            reported through the returned result instead
    """
    logger = get_logger(__name__, correlation_id, "parse_file")
    logger.info("Starting file parse operation", extra={"file_path": str(file_path)})

    content = read_source(file_path, encoding)
    result = parse_string(content, config, correlation_id, **options)
    result.add_diagnostic(
        DiagnosticSeverity.INFO,
        f"File parsed with encoding: {encoding}",
        "file_parser",
        details={"file_path": str(file_path), "encoding": encoding}
    )
    return result


def stringify(
    tree: Any,
    root_name: Optional[str] = None,
    config: Optional[ComposerConfig] = None,
    pi_nodes: Optional[Iterable[str]] = None,
    dtd_nodes: Optional[Iterable[str]] = None,
    correlation_id: Optional[str] = None,
    **options: Any
) -> str:
    """Compose a tree into XML text.

    Args:
        tree: Tree to render
        root_name: Document element name; when omitted the tree's first key is
            used and its value rendered
        config: Composer configuration; keyword ``options`` override its fields
        pi_nodes: Processing instructions to emit instead of the default header
        dtd_nodes: DTD declarations to emit after the processing instructions

    Examples:
        >>> stringify({"Item": "Hello"}, "Doc", indent_string="  ")
        '<?xml version="1.0"?>\\n<Doc>\\n  <Item>Hello</Item>\\n</Doc>\\n'
    """
    config = _resolve_composer_config(config, options)
    return XMLComposer(config, correlation_id).compose(tree, root_name, pi_nodes, dtd_nodes)


class XMLParser:
    """Parser bound to one document, keeping its prolog for composition.

    The source is parsed on construction. Parse failures do not raise: the
    error records stay available on :attr:`errors` and :meth:`get_tree`
    raises on demand.

    Examples:
        >>> parser = XMLParser('<?xml version="1.0"?><Doc><A>1</A></Doc>')
        >>> parser.tree
        Element({'A': '1'})
        >>> parser.pi_nodes
        ['?xml version="1.0"?']
    """

    def __init__(
        self,
        source: InputType,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None,
        **options: Any
    ) -> None:
        """Load and parse ``source``.

        Args:
            source: XML text, UTF-8 bytes, or a path to an XML file. Strings
                that do not start with ``<`` (after whitespace) are read as
                paths.
            config: Parser configuration; keyword ``options`` override its fields
            correlation_id: Optional correlation ID for log tracking

        Raises:
            SourceNotFoundError: If ``source`` is a path to a missing file
        """
        self.config = _resolve_parser_config(config, options)
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "xml_parser")

        self.text = self._load_source(source)
        self.result = XMLTreeBuilder(self.config, correlation_id).build(self.text)

        self.logger.info(
            "XMLParser initialized",
            extra={
                "success": self.result.success,
                "document_name": self.result.document_name,
            }
        )

    def _load_source(self, source: InputType) -> str:
        if isinstance(source, bytes):
            return source.decode("utf-8")
        if isinstance(source, Path):
            return read_source(source)
        if not source.strip() or LOOKS_LIKE_XML_PATTERN.match(source):
            return source
        return read_source(source)

    @property
    def tree(self) -> Optional[Node]:
        """The parsed tree, or ``None`` if parsing failed."""
        return self.result.tree

    @property
    def errors(self) -> List[ParseErrorRecord]:
        return self.result.errors

    @property
    def pi_nodes(self) -> List[str]:
        return self.result.pi_nodes

    @property
    def dtd_nodes(self) -> List[str]:
        return self.result.dtd_nodes

    @property
    def document_node_name(self) -> Optional[str]:
        return self.result.document_name

    @property
    def has_errors(self) -> bool:
        return self.result.has_errors()

    def get_tree(self) -> Node:
        """Return the tree, raising :class:`XMLParseError` if parsing failed."""
        return self.result.unwrap()

    def get_last_error(self) -> str:
        """Formatted most recent error, or an empty string."""
        return self.result.error_message

    def compose(self, config: Optional[ComposerConfig] = None, **options: Any) -> str:
        """Render the parsed document back to XML, replaying its prolog.

        Without an explicit ``config`` the composer uses this parser's reserved
        keys.

        Raises:
            XMLParseError: If the document failed to parse
        """
        if config is None:
            composer_config = self.config.composer_config(**options)
        else:
            composer_config = _resolve_composer_config(config, options)

        tree = self.get_tree()
        name = self.document_node_name
        if self.config.preserve_document_node and name is not None:
            tree = tree[name]

        return XMLComposer(composer_config, self.correlation_id).compose(
            tree, name, self.pi_nodes, self.dtd_nodes
        )

    def __repr__(self) -> str:
        status = "ok" if self.result.success else "failed"
        return f"<XMLParser document={self.document_node_name!r} {status}>"

