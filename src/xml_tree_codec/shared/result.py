"""Diagnostic and metric types shared by the parsing and composing layers."""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()      # Debug-level information
    INFO = auto()       # Informational messages
    WARNING = auto()    # Suspicious input that was still accepted
    ERROR = auto()      # Parse failures


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    line: Optional[int] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")


@dataclass
class PerformanceMetrics:
    """Counters collected while building a tree."""

    processing_time_ms: float = 0.0
    characters_processed: int = 0
    tags_scanned: int = 0
    elements_built: int = 0

    @property
    def characters_per_second(self) -> float:
        """Calculate characters processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_processed * 1000.0) / self.processing_time_ms

    def to_dict(self) -> Dict[str, Any]:
        """Convert metrics to a plain dictionary."""
        return {
            "processing_time_ms": self.processing_time_ms,
            "characters_processed": self.characters_processed,
            "tags_scanned": self.tags_scanned,
            "elements_built": self.elements_built,
            "characters_per_second": self.characters_per_second,
        }
