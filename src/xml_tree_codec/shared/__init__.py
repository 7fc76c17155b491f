"""Shared utilities for the XML tree codec.

This module provides configuration objects, error types, diagnostic records
and logging helpers used across the scanning, tree and API layers.
"""

from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    PerformanceMetrics,
)
from .errors import (
    ErrorKind,
    ErrorReporter,
    ParseErrorRecord,
    SourceNotFoundError,
    XMLParseError,
    XMLTreeCodecError,
    compute_line_number,
)
from .config import (
    ComposerConfig,
    ConfigError,
    ConfigValidationError,
    ParserConfig,
    alphabetical,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)

__all__ = [
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "PerformanceMetrics",
    "ErrorKind",
    "ErrorReporter",
    "ParseErrorRecord",
    "SourceNotFoundError",
    "XMLParseError",
    "XMLTreeCodecError",
    "compute_line_number",
    "ComposerConfig",
    "ConfigError",
    "ConfigValidationError",
    "ParserConfig",
    "alphabetical",
    "CorrelationLogger",
    "get_logger",
]
