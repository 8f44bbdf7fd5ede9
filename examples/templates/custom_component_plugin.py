"""Template for creating renderer plugins.

This template provides a starting point for developers who want to package
their own components for render_markup. Load it with:

    render-markup compile page.xml --plugin custom_component_plugin

Copy this template and replace the example components with your own.
"""

from typing import Any, Dict

from render_markup.registry import ElementInfoRegistry, RendererRegistry

PROVIDER = "my_module"  # Replace with your module name


def alert_component(props: Dict[str, Any], value: str) -> Dict[Any, Any]:
    """Render ``<x-alert level="warning">Text</x-alert>``."""
    level = props.get("level", "info")
    return {
        "#type": "container",
        "#attributes": {"class": ["alert", f"alert-{level}"], "role": "alert"},
        "message": {"#type": "markup", "#markup": value},
    }


def tabs_component(props: Dict[str, Any], value: str) -> Dict[Any, Any]:
    """Render ``<ui:tabs>`` with markup children placed in the tab list."""
    return {
        "#type": "container",
        "#attributes": {"class": ["tabs"], "data-deep-embed": "1"},
        "list": {"#type": "container", "#attributes": {"class": ["tab-list"]}},
    }


def register(renderers: RendererRegistry, element_info: ElementInfoRegistry) -> None:
    """Plugin hook called once at startup."""
    renderers.register("x_alert_component", alert_component, PROVIDER)
    renderers.register("ui_tabs_component", tabs_component, PROVIDER)

    # Elements in a custom namespace may also be described by element info
    element_info.register("ui_spacer", {"#type": "html_tag", "#tag": "hr"})

    # Themes may provide a renderer for any key
    # renderers.register_theme("my_theme", "x_alert_component", my_theme_alert)
