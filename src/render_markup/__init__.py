"""Render Markup.

Compiles XML/HTML-like markup into nested, attributed render trees. Standard
HTML tags become generic tag nodes, host elements are described by element
info, and any other tag is a component handled by a registered renderer.

Progressive API Disclosure:
- Level 1: Simple function - render()
- Level 2: Configured compiler - MarkupCompiler class
"""

__version__ = "0.1.0"
__author__ = "Render Markup Team"

from .api import (
    CompilationContext,
    MarkupCompiler,
    box,
    compilation,
    default_element_info,
    default_renderers,
    render,
)
from .registry import BoxedReference, ElementInfoRegistry, RendererRegistry
from .shared.config import CompilerConfig
from .shared.result import CompilationResult

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple compile function and its registries
    "render",
    "default_renderers",
    "default_element_info",
    "box",

    # Level 2: Configured compiler
    "MarkupCompiler",
    "CompilerConfig",
    "CompilationContext",
    "CompilationResult",
    "compilation",

    # Registries
    "RendererRegistry",
    "ElementInfoRegistry",
    "BoxedReference",
]
