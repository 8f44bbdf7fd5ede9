"""Render tree construction.

This module turns parsed markup into render trees: tags are dispatched to
HTML, host elements or component renderers, children are nested into their
parents, and renderer cycles are detected.

Key Components:
    TreeTransformer: Recursive driver producing the render tree
    DispatchResolver: Decides how each qualified tag is rendered
    ChildMerger: Nests children, including deep-embed bubbling
    RecursionGuard: Detects renderers that transitively invoke themselves
"""

from .dispatch import (
    HTML_ELEMENTS,
    BuiltinElement,
    CustomComponent,
    Dispatch,
    DispatchResolver,
    RegistryElement,
)
from .guard import GuardToken, RecursionGuard
from .merger import (
    RESERVED_MARKER,
    ChildMerger,
    RenderNode,
    child_slots,
    copy_structure,
    is_reserved_key,
    slot_key,
)
from .transformer import TreeTransformer, escape_text

__all__ = [
    "HTML_ELEMENTS",
    "BuiltinElement",
    "CustomComponent",
    "Dispatch",
    "DispatchResolver",
    "RegistryElement",
    "GuardToken",
    "RecursionGuard",
    "RESERVED_MARKER",
    "ChildMerger",
    "RenderNode",
    "child_slots",
    "copy_structure",
    "is_reserved_key",
    "slot_key",
    "TreeTransformer",
    "escape_text",
]
