"""Public compilation API.

Key Components:
    render: Compiles markup with the process-wide default registries
    MarkupCompiler: Compiler bound to its own registries and configuration
    compilation: Context shared by a top-level call and the renders it triggers
"""

from .compiler import (
    MarkupCompiler,
    default_element_info,
    default_renderers,
    get_default_compiler,
    render,
)
from .context import CompilationContext, box, compilation, current_context
from .messages import LoggingMessenger, Messenger

__all__ = [
    "MarkupCompiler",
    "default_element_info",
    "default_renderers",
    "get_default_compiler",
    "render",
    "CompilationContext",
    "box",
    "compilation",
    "current_context",
    "LoggingMessenger",
    "Messenger",
]
