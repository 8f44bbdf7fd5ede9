"""Registries consulted while compiling markup.

Key Components:
    RendererRegistry: Component renderers keyed by dispatch key
    ElementInfoRegistry: Host-native element descriptors
    ReferenceTable: Boxed values passed between renderers as ``Ref/<id>/`` tokens
    load_plugins: Populates registries from importable plugin modules
"""

from .element_info import ElementInfo, ElementInfoRegistry
from .plugins import load_plugin, load_plugins
from .references import BoxedReference, ReferenceTable
from .renderers import (
    COMPONENT_SUFFIX,
    Renderer,
    RendererRegistration,
    RendererRegistry,
    RenderNode,
    dispatch_key_for,
)

__all__ = [
    "ElementInfo",
    "ElementInfoRegistry",
    "load_plugin",
    "load_plugins",
    "BoxedReference",
    "ReferenceTable",
    "COMPONENT_SUFFIX",
    "Renderer",
    "RendererRegistration",
    "RendererRegistry",
    "RenderNode",
    "dispatch_key_for",
]
