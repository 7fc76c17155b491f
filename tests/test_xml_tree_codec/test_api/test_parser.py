"""Tests for the public parsing and composing API."""

import tempfile
from pathlib import Path

import pytest

from xml_tree_codec.api import (
    XMLParser,
    parse,
    parse_file,
    parse_string,
    read_source,
    stringify,
)
from xml_tree_codec.shared import (
    ComposerConfig,
    ConfigValidationError,
    DiagnosticSeverity,
    ErrorKind,
    ParserConfig,
    SourceNotFoundError,
    XMLParseError,
)

SAMPLE = (
    '<?xml version="1.0"?>\n'
    '<!DOCTYPE Doc SYSTEM "doc.dtd">\n'
    "<Doc>\n"
    '  <Item id="1">Hello</Item>\n'
    '  <Item id="2"><Name>World</Name></Item>\n'
    "</Doc>\n"
)


class TestParse:
    """Test the level-1 parse function."""

    def test_returns_tree(self):
        """Test a valid document returns its tree."""
        assert parse("<R><I>1</I><I>2</I></R>") == {"I": ["1", "2"]}

    def test_options_as_keywords(self):
        """Test keyword options override the configuration."""
        tree = parse('<Doc><Item id="1">Hello</Item></Doc>', preserve_attributes=True)
        assert tree == {"Item": {"_Attribs": {"id": "1"}, "_Data": "Hello"}}

    def test_config_and_keywords_combine(self):
        """Test keywords are applied on top of an explicit configuration."""
        config = ParserConfig(preserve_document_node=True)
        assert parse("<A><B>1</B></A>", config, force_arrays=True) == {"A": {"B": ["1"]}}

    def test_returns_error_string(self):
        """Test a malformed document returns its formatted error."""
        assert parse("<A><B></A>") == (
            "Parse Error: Mismatched closing tag (expected </B>) on line 1: </A>"
        )

    def test_unknown_option(self):
        """Test unknown keyword options are rejected."""
        with pytest.raises(ConfigValidationError):
            parse("<A/>", preserve=True)

    def test_bytes_input(self):
        """Test UTF-8 bytes are decoded."""
        assert parse("<A><B>é</B></A>".encode("utf-8")) == {"B": "é"}


class TestParseString:
    """Test parse_string results."""

    def test_success(self):
        """Test a successful result carries the tree and prolog."""
        result = parse_string(SAMPLE, preserve_attributes=True)

        assert result.success is True
        assert result.document_name == "Doc"
        assert result.pi_nodes == ['?xml version="1.0"?']
        assert result.dtd_nodes == ['!DOCTYPE Doc SYSTEM "doc.dtd"']
        assert result.tree["Item"][1] == {"_Attribs": {"id": "2"}, "Name": "World"}
        assert result.performance.characters_processed == len(SAMPLE)

    def test_failure(self):
        """Test a failed result carries the error record."""
        result = parse_string("<A>\n<B/>\n<C>")

        assert result.success is False
        assert result.tree is None
        assert result.error.kind is ErrorKind.MISSING_CLOSING_TAG
        assert result.has_errors()

    def test_correlation_id(self):
        """Test the correlation ID is propagated to the result."""
        result = parse_string("<A/>", correlation_id="abc")
        assert result.correlation_id == "abc"

    def test_deeply_nested_input(self):
        """Test well-formed input nested thousands deep parses."""
        depth = 3000
        result = parse_string("<a>" * depth + "x" + "</a>" * depth)

        assert result.success is True
        assert result.performance.elements_built == depth


class TestParseFile:
    """Test file parsing."""

    def test_parse_file(self):
        """Test a file is read and parsed."""
        with tempfile.NamedTemporaryFile(mode="w", suffix=".xml", delete=False,
                                         encoding="utf-8") as f:
            f.write(SAMPLE)
            path = Path(f.name)

        try:
            result = parse_file(path)
            assert result.success is True
            assert result.tree == {"Item": [{"id": "1", "_Data": "Hello"},
                                            {"id": "2", "Name": "World"}]}

            info = result.get_diagnostics_by_severity(DiagnosticSeverity.INFO)
            assert info[0].details == {"file_path": str(path), "encoding": "utf-8"}
        finally:
            path.unlink()

    def test_missing_file(self, tmp_path):
        """Test a missing file raises."""
        with pytest.raises(SourceNotFoundError):
            parse_file(tmp_path / "missing.xml")

    def test_read_source_rejects_directory(self, tmp_path):
        """Test a directory is not a readable source."""
        with pytest.raises(SourceNotFoundError):
            read_source(tmp_path)


class TestStringify:
    """Test the level-1 stringify function."""

    def test_stringify(self):
        """Test a tree is rendered with the given root name."""
        assert stringify({"Item": "Hello"}, "Doc", indent_string="  ") == (
            '<?xml version="1.0"?>\n<Doc>\n  <Item>Hello</Item>\n</Doc>\n'
        )

    def test_stringify_with_config_and_prolog(self):
        """Test configuration and captured declarations are honored."""
        xml = stringify(
            {"A": "1"},
            "Doc",
            ComposerConfig.compact(),
            pi_nodes=['?xml version="1.0" encoding="UTF-8"?'],
        )
        assert xml == '<?xml version="1.0" encoding="UTF-8"?><Doc><A>1</A></Doc>'

    def test_stringify_non_string_keys(self):
        """Test keys that cannot be element names are skipped."""
        assert stringify({"a": "b", 1: "x"}, "R", ComposerConfig.compact()) == (
            '<?xml version="1.0"?><R><a>b</a></R>'
        )

    def test_parse_stringify_round_trip(self):
        """Test parse(stringify(parse(x))) equals parse(x)."""
        options = {"preserve_attributes": True}
        result = parse_string(SAMPLE, **options)
        xml = stringify(result.tree, result.document_name)
        assert parse(xml, **options) == result.tree


class TestXMLParser:
    """Test the document-bound parser class."""

    def test_parses_text(self):
        """Test text input is parsed on construction."""
        parser = XMLParser(SAMPLE)

        assert parser.has_errors is False
        assert parser.document_node_name == "Doc"
        assert parser.pi_nodes == ['?xml version="1.0"?']
        assert parser.get_tree() == parser.tree
        assert parser.get_last_error() == ""

    def test_parses_path(self, tmp_path):
        """Test a path string or Path object is read."""
        path = tmp_path / "doc.xml"
        path.write_text("<Doc><A>1</A></Doc>", encoding="utf-8")

        assert XMLParser(str(path)).tree == {"A": "1"}
        assert XMLParser(path).tree == {"A": "1"}

    def test_missing_path(self, tmp_path):
        """Test a missing file raises on construction."""
        with pytest.raises(SourceNotFoundError):
            XMLParser(str(tmp_path / "missing.xml"))

    def test_failed_parse(self):
        """Test errors are kept and get_tree raises."""
        parser = XMLParser("<A><B></A>")

        assert parser.has_errors is True
        assert parser.tree is None
        assert parser.errors[0].kind is ErrorKind.MISMATCHED_CLOSING_TAG
        assert parser.get_last_error().startswith("Parse Error: Mismatched closing tag")
        with pytest.raises(XMLParseError):
            parser.get_tree()
        with pytest.raises(XMLParseError):
            parser.compose()

    def test_compose_replays_prolog(self):
        """Test composition emits the captured declarations and document name."""
        parser = XMLParser(SAMPLE, preserve_attributes=True)
        xml = parser.compose(indent_string="  ")

        assert xml == (
            '<?xml version="1.0"?>\n'
            '<!DOCTYPE Doc SYSTEM "doc.dtd">\n'
            "<Doc>\n"
            '  <Item id="1">Hello</Item>\n'
            '  <Item id="2">\n'
            "    <Name>World</Name>\n"
            "  </Item>\n"
            "</Doc>\n"
        )

    def test_compose_with_preserved_document_node(self):
        """Test the preserved wrapper is not rendered twice."""
        parser = XMLParser("<Doc><A>1</A></Doc>", ParserConfig.round_trip())
        assert parser.tree == {"Doc": {"A": "1"}}
        assert parser.compose(ComposerConfig.compact()) == (
            '<?xml version="1.0"?><Doc><A>1</A></Doc>'
        )

    def test_compose_uses_parser_keys(self):
        """Test composition defaults to the parser's reserved keys."""
        parser = XMLParser('<R><A k="v">t</A></R>', preserve_attributes=True,
                           attributes_key="@", data_key="#")
        assert parser.tree == {"A": {"@": {"k": "v"}, "#": "t"}}
        assert parser.compose(eol="", indent_string="").endswith('<R><A k="v">t</A></R>')

    def test_repr(self):
        """Test the representation shows the document and status."""
        assert repr(XMLParser("<Doc/>")) == "<XMLParser document='Doc' ok>"
        assert repr(XMLParser("<Doc>")) == "<XMLParser document=None failed>"
