"""Tests for error records, line numbers and the error reporter."""

import logging

import pytest

from xml_tree_codec.shared import (
    ErrorKind,
    ErrorReporter,
    ParseErrorRecord,
    SourceNotFoundError,
    XMLParseError,
    XMLTreeCodecError,
    compute_line_number,
    get_logger,
)
from xml_tree_codec.tokenization import ScanCursor


class TestErrorKind:
    """Test error kind names and messages."""

    @pytest.mark.parametrize("kind,label", [
        (ErrorKind.MISMATCHED_CLOSING_TAG, "MismatchedClosingTag"),
        (ErrorKind.MISSING_CLOSING_TAG, "MissingClosingTag"),
        (ErrorKind.TOO_MANY_TOP_LEVEL_NODES, "TooManyTopLevelNodes"),
        (ErrorKind.UNCLOSED_DTD, "UnclosedDTD"),
        (ErrorKind.MALFORMED_CDATA, "MalformedCDATA"),
    ])
    def test_label(self, kind, label):
        """Test labels are CamelCase with acronyms kept."""
        assert kind.label == label

    def test_default_messages(self):
        """Test kinds carry their default message."""
        assert ErrorKind.MALFORMED_PROCESSING_INSTRUCTION.value == (
            "Malformed processor instruction"
        )
        assert ErrorKind.UNCLOSED_COMMENT.value == "Unclosed comment tag"


class TestParseErrorRecord:
    """Test formatting and serialization of records."""

    def test_formatted(self):
        """Test the standard error message format."""
        record = ParseErrorRecord(ErrorKind.MALFORMED_TAG, "Malformed tag", "-x", 4)
        assert record.formatted == "Parse Error: Malformed tag on line 4: <-x>"
        assert str(record) == record.formatted

    def test_formatted_without_tag(self):
        """Test the tag part is omitted when empty."""
        record = ParseErrorRecord(ErrorKind.MALFORMED_TAG, "Malformed tag", "", 1)
        assert record.formatted == "Parse Error: Malformed tag on line 1"

    def test_to_dict(self):
        """Test the JSON-friendly form."""
        record = ParseErrorRecord(ErrorKind.UNCLOSED_CDATA, "Unclosed CDATA tag", "![CDATA[", 2)
        assert record.to_dict() == {
            "kind": "UnclosedCDATA",
            "type": "Parse",
            "message": "Unclosed CDATA tag",
            "tag": "![CDATA[",
            "line": 2,
        }


class TestExceptions:
    """Test the exception hierarchy."""

    def test_parse_error_carries_record(self):
        """Test the exception exposes the record's kind and line."""
        record = ParseErrorRecord(ErrorKind.MISSING_CLOSING_TAG, "Missing closing tag", "A", 3)
        error = XMLParseError(record)

        assert error.record is record
        assert error.kind is ErrorKind.MISSING_CLOSING_TAG
        assert error.line == 3
        assert str(error) == "Parse Error: Missing closing tag on line 3: <A>"
        assert isinstance(error, XMLTreeCodecError)

    def test_source_not_found(self):
        """Test the missing-file error is also a FileNotFoundError."""
        error = SourceNotFoundError("missing.xml")
        assert isinstance(error, FileNotFoundError)
        assert isinstance(error, XMLTreeCodecError)
        assert error.kind is ErrorKind.FILE_NOT_FOUND
        assert error.path == "missing.xml"
        assert str(error) == "File not found: missing.xml"


class TestComputeLineNumber:
    """Test line computation."""

    def test_first_line(self):
        """Test a single-line input is on line 1."""
        assert compute_line_number("<a></b>", 7, "/b") == 1

    def test_counts_consumed_newlines(self):
        """Test newlines before the position are counted."""
        text = "<a>\n\n<b>"
        assert compute_line_number(text, len(text), "b") == 3

    def test_subtracts_newlines_in_tag(self):
        """Test the line points at the start of a multi-line tag."""
        text = "<a>\n<!--\n\n-->"
        assert compute_line_number(text, len(text), "!--\n\n--") == 2

    def test_never_below_one(self):
        """Test the result is clamped to the first line."""
        assert compute_line_number("", 0, "a\nb") == 1


class TestErrorReporter:
    """Test the per-parse error reporter."""

    def test_fail_records_and_raises(self):
        """Test a failure is recorded before being raised."""
        reporter = ErrorReporter()
        cursor = ScanCursor("<a>\n</b>", 8)

        with pytest.raises(XMLParseError) as exc_info:
            reporter.fail(ErrorKind.MISMATCHED_CLOSING_TAG, "/b", cursor)

        assert len(reporter) == 1
        assert reporter.last_error is exc_info.value.record
        assert reporter.last_error.line == 2
        assert reporter.last_error.message == "Mismatched closing tag"

    def test_custom_message(self):
        """Test a specific message replaces the default one."""
        reporter = ErrorReporter()
        with pytest.raises(XMLParseError, match="expected </a>"):
            reporter.fail(
                ErrorKind.MISSING_CLOSING_TAG, "a", ScanCursor("<a>", 3),
                message="Missing closing tag (expected </a>)",
            )

    def test_empty_reporter(self):
        """Test a fresh reporter holds no errors."""
        reporter = ErrorReporter()
        assert len(reporter) == 0
        assert reporter.last_error is None

    def test_failure_logged(self, caplog):
        """Test failures are logged as warnings with their kind."""
        reporter = ErrorReporter(get_logger("xml_tree_codec.test", "cid-1", "reporter"))

        with caplog.at_level(logging.WARNING, logger="xml_tree_codec.test"):
            with pytest.raises(XMLParseError):
                reporter.fail(ErrorKind.MALFORMED_TAG, "-", ScanCursor("<->", 3))

        record = caplog.records[-1]
        assert record.error_kind == "MalformedTag"
        assert record.correlation_id == "cid-1"
        assert record.component == "reporter"
