"""Result objects and diagnostic types for markup compilation.

A compilation produces a render tree together with diagnostics (reported
parse errors, recoveries, fatal transform errors) and a few counters that
describe how much work the transform did.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()
    INFO = auto()       # Informational messages, e.g. a recovered fragment
    WARNING = auto()    # Problems reported to the user, input skipped
    ERROR = auto()      # Fatal transform errors
    CRITICAL = auto()


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
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
class CompilationMetrics:
    """Counters collected while compiling one input."""

    processing_time_ms: float = 0.0
    nodes_transformed: int = 0
    components_invoked: int = 0
    max_depth: int = 0
    recovered_fragments: int = 0
    literal_fallbacks: int = 0

    @property
    def nodes_per_second(self) -> float:
        """Calculate transformed nodes per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.nodes_transformed * 1000.0) / self.processing_time_ms

    def record_depth(self, depth: int) -> None:
        """Track the deepest nesting level seen."""
        if depth > self.max_depth:
            self.max_depth = depth


@dataclass
class CompilationResult:
    """Render tree plus diagnostics and metrics for one markup input."""

    tree: Dict[Any, Any] = field(default_factory=dict)
    success: bool = True
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    metrics: CompilationMetrics = field(default_factory=CompilationMetrics)
    correlation_id: Optional[str] = None

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add diagnostic entry to result."""
        self.diagnostics.append(
            DiagnosticEntry(
                severity=severity,
                message=message,
                component=component,
                details=details,
                correlation_id=self.correlation_id,
            )
        )

    def get_diagnostics_by_severity(
        self,
        severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        """Get diagnostics of specific severity level."""
        return [diag for diag in self.diagnostics if diag.severity == severity]

    def has_errors(self) -> bool:
        """Check if result contains any error diagnostics."""
        return any(
            diag.severity in (DiagnosticSeverity.ERROR, DiagnosticSeverity.CRITICAL)
            for diag in self.diagnostics
        )

    def summary(self) -> Dict[str, Any]:
        """Summarize the result for logging and CLI output."""
        return {
            "success": self.success,
            "correlation_id": self.correlation_id,
            "processing_time_ms": self.metrics.processing_time_ms,
            "nodes_transformed": self.metrics.nodes_transformed,
            "components_invoked": self.metrics.components_invoked,
            "max_depth": self.metrics.max_depth,
            "recovered_fragments": self.metrics.recovered_fragments,
            "literal_fallbacks": self.metrics.literal_fallbacks,
            "diagnostics": [
                {
                    "severity": diag.severity.name,
                    "message": diag.message,
                    "component": diag.component,
                }
                for diag in self.diagnostics
            ],
        }
