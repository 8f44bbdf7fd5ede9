"""Tests for result objects, errors and structured logging."""

import logging

import pytest

from render_markup.shared.errors import (
    AmbiguousComponentError,
    InfiniteRecursionError,
    MarkupParseError,
    MissingRootRecoverable,
    RenderMarkupError,
    TransformError,
    UnresolvedComponentError,
)
from render_markup.shared.logging import configure_logging, get_logger
from render_markup.shared.result import (
    CompilationMetrics,
    CompilationResult,
    DiagnosticEntry,
    DiagnosticSeverity,
)


class TestDiagnostics:
    """Test diagnostic entries and results."""

    def test_entry_validation(self):
        """Test empty messages and components are rejected."""
        with pytest.raises(ValueError, match="message cannot be empty"):
            DiagnosticEntry(DiagnosticSeverity.INFO, "", "parser")
        with pytest.raises(ValueError, match="component cannot be empty"):
            DiagnosticEntry(DiagnosticSeverity.INFO, "msg", "")

    def test_result_diagnostics(self):
        """Test adding and filtering diagnostics."""
        result = CompilationResult(correlation_id="abc")
        result.add_diagnostic(DiagnosticSeverity.INFO, "recovered", "markup_compiler")
        result.add_diagnostic(DiagnosticSeverity.ERROR, "failed", "tree_transformer")

        assert len(result.get_diagnostics_by_severity(DiagnosticSeverity.INFO)) == 1
        assert result.diagnostics[0].correlation_id == "abc"
        assert result.has_errors()

    def test_summary(self):
        """Test the summary used by the command-line tool."""
        result = CompilationResult(tree={"#type": "foo"}, correlation_id="abc")
        result.metrics.nodes_transformed = 3
        result.add_diagnostic(DiagnosticSeverity.WARNING, "bad markup", "markup_parser")

        summary = result.summary()

        assert summary["success"] is True
        assert summary["nodes_transformed"] == 3
        assert summary["literal_fallbacks"] == 0
        assert summary["diagnostics"] == [
            {"severity": "WARNING", "message": "bad markup", "component": "markup_parser"}
        ]
        assert "tree" not in summary


class TestCompilationMetrics:
    """Test compilation counters."""

    def test_nodes_per_second(self):
        """Test throughput calculation."""
        metrics = CompilationMetrics(processing_time_ms=500.0, nodes_transformed=10)

        assert metrics.nodes_per_second == 20.0
        assert CompilationMetrics().nodes_per_second == 0.0

    def test_record_depth_keeps_maximum(self):
        """Test depth tracking."""
        metrics = CompilationMetrics()
        metrics.record_depth(3)
        metrics.record_depth(2)

        assert metrics.max_depth == 3


class TestErrors:
    """Test the exception taxonomy."""

    def test_hierarchy(self):
        """Test base classes."""
        assert issubclass(TransformError, RenderMarkupError)
        assert issubclass(UnresolvedComponentError, TransformError)
        assert issubclass(MissingRootRecoverable, MarkupParseError)
        assert not issubclass(MarkupParseError, TransformError)

    def test_messages_identify_offender(self):
        """Test messages name the tag, key and providers."""
        error = AmbiguousComponentError("x-widget", "x_widget_component", ["a", "b"])

        assert "<x-widget>" in str(error)
        assert "x_widget_component" in str(error)
        assert "(a, b)" in str(error)
        assert str(InfiniteRecursionError(["a", "b", "a"])).endswith("a -> b -> a")

    def test_parse_error_location(self):
        """Test location suffix of parse errors."""
        error = MarkupParseError("mismatched tag", code=7, line=1, column=9)

        assert str(error) == "mismatched tag (line 1, column 9)"
        assert error.reason == "mismatched tag"
        assert str(MarkupParseError("no element found")) == "no element found"


class TestCorrelationLogger:
    """Test structured logging."""

    def test_records_carry_component_and_correlation(self, caplog):
        """Test extra fields on log records."""
        logger = get_logger("render_markup.test", "corr-1", "unit")

        with caplog.at_level(logging.INFO, logger="render_markup.test"):
            logger.info("hello", extra={"tag": "p"})

        record = caplog.records[-1]
        assert record.component == "unit"
        assert record.correlation_id == "corr-1"
        assert record.tag == "p"

    def test_bind_keeps_component(self):
        """Test rebinding to another correlation ID."""
        logger = get_logger("render_markup.test", None, "unit").bind("corr-2")

        assert logger.component == "unit"
        assert logger.correlation_id == "corr-2"

    def test_default_component_from_name(self):
        """Test the component defaults to the last name segment."""
        assert get_logger("render_markup.tree.dispatch").component == "dispatch"

    def test_configure_logging_sets_level(self, monkeypatch):
        """Test the package logger level and handler."""
        package_logger = logging.getLogger("render_markup")
        monkeypatch.setattr(package_logger, "handlers", [])
        saved_level = package_logger.level

        try:
            configure_logging("ERROR")

            assert package_logger.level == logging.ERROR
            assert len(package_logger.handlers) == 1
            assert not get_logger("render_markup.test").is_enabled_for(logging.INFO)
        finally:
            package_logger.setLevel(saved_level)
