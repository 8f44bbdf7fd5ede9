"""Shared utilities for markup compilation.

This module provides the configuration objects, result types, exception
taxonomy and logging helpers used across all compilation layers.
"""

from .config import (
    CompilerConfig,
    ConfigError,
    ConfigValidationError,
    DispatchConfig,
    GlobalConfig,
    RecoveryConfig,
    TransformConfig,
)
from .errors import (
    AmbiguousComponentError,
    AmbiguousDeepEmbedError,
    AttributeDecodeError,
    DuplicateRendererError,
    InfiniteRecursionError,
    MarkupParseError,
    MissingRootRecoverable,
    NestingDepthError,
    RegistryError,
    RenderMarkupError,
    RenderOutputError,
    ReservedKeyError,
    TagNameError,
    TransformError,
    UnresolvedComponentError,
)
from .logging import (
    CorrelationLogger,
    configure_logging,
    get_logger,
)
from .result import (
    CompilationMetrics,
    CompilationResult,
    DiagnosticEntry,
    DiagnosticSeverity,
)

__all__ = [
    "CompilerConfig",
    "ConfigError",
    "ConfigValidationError",
    "DispatchConfig",
    "GlobalConfig",
    "RecoveryConfig",
    "TransformConfig",
    "AmbiguousComponentError",
    "AmbiguousDeepEmbedError",
    "AttributeDecodeError",
    "DuplicateRendererError",
    "InfiniteRecursionError",
    "MarkupParseError",
    "MissingRootRecoverable",
    "NestingDepthError",
    "RegistryError",
    "RenderMarkupError",
    "RenderOutputError",
    "ReservedKeyError",
    "TagNameError",
    "TransformError",
    "UnresolvedComponentError",
    "CorrelationLogger",
    "configure_logging",
    "get_logger",
    "CompilationMetrics",
    "CompilationResult",
    "DiagnosticEntry",
    "DiagnosticSeverity",
]
