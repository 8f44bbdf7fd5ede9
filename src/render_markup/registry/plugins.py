"""Loading renderer plugins from importable modules.

A plugin is a module exposing a ``register(renderers, element_info)``
callable, or any callable named by an ``module:attribute`` entry point. Plugins
are loaded once at startup, before any markup is compiled.
"""

import importlib
from typing import Iterable, List

from render_markup.registry.element_info import ElementInfoRegistry
from render_markup.registry.renderers import RendererRegistry
from render_markup.shared.errors import RegistryError
from render_markup.shared.logging import get_logger

DEFAULT_HOOK = "register"

logger = get_logger(__name__, None, "plugin_loader")


def load_plugin(
    entry_point: str,
    renderers: RendererRegistry,
    element_info: ElementInfoRegistry,
) -> None:
    """Import a plugin and let it populate the registries.

    Args:
        entry_point: ``package.module`` or ``package.module:callable``
        renderers: Registry receiving component renderers
        element_info: Registry receiving element descriptors

    Raises:
        RegistryError: If the module cannot be imported or has no hook
    """
    module_name, _, attribute = entry_point.partition(":")
    attribute = attribute or DEFAULT_HOOK
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise RegistryError(f"Cannot import plugin {module_name!r}: {e}") from e

    hook = getattr(module, attribute, None)
    if not callable(hook):
        raise RegistryError(f"Plugin {module_name!r} has no callable {attribute!r}")

    before = len(renderers)
    hook(renderers, element_info)
    logger.info(
        "Plugin loaded",
        extra={"entry_point": entry_point, "renderers_added": len(renderers) - before},
    )


def load_plugins(
    entry_points: Iterable[str],
    renderers: RendererRegistry,
    element_info: ElementInfoRegistry,
) -> List[str]:
    """Load several plugins in order and return the loaded entry points."""
    loaded = []
    for entry_point in entry_points:
        load_plugin(entry_point, renderers, element_info)
        loaded.append(entry_point)
    return loaded
