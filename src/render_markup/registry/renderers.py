"""Renderer registry for custom components.

Renderers are registered explicitly at startup under a dispatch key derived
from the tag they handle (``x-widget`` -> ``x_widget_component``). Modules
register through ``register``; a theme may additionally provide a renderer
for any key, probed under ``<theme>_<dispatch_key>`` when that theme is
active. The registry is read-only while markup is being compiled.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, Union

from render_markup.markup.qualified_name import DEFAULT_NAMESPACE, QualifiedTag, parse_tag_name
from render_markup.shared.errors import DuplicateRendererError, RegistryError
from render_markup.shared.logging import get_logger

RenderNode = Dict[Any, Any]
Renderer = Callable[[Dict[str, Any], str], RenderNode]

COMPONENT_SUFFIX = "_component"


def dispatch_key_for(
    tag: QualifiedTag,
    suffix: str = COMPONENT_SUFFIX,
    default_namespace: str = DEFAULT_NAMESPACE,
) -> str:
    """Compute the dispatch key of a custom component tag.

    The default namespace contributes no prefix and dashes become
    underscores: ``x-widget`` -> ``x_widget_component``,
    ``ui:info-card`` -> ``ui_info_card_component``.
    """
    name = tag.name.replace("-", "_")
    if tag.namespace == default_namespace:
        return f"{name}{suffix}"
    return f"{tag.namespace.replace('-', '_')}_{name}{suffix}"


@dataclass(frozen=True)
class RendererRegistration:
    """A renderer and the provider that registered it."""

    dispatch_key: str
    renderer: Renderer
    provider: str
    theme: bool = False

    @property
    def identity(self) -> str:
        """Name identifying this renderer in recursion chains and errors."""
        return f"{self.provider}_{self.dispatch_key}"

    def __call__(self, props: Dict[str, Any], value: str) -> Any:
        return self.renderer(props, value)


class RendererRegistry:
    """Mapping from dispatch key to the renderers providing it."""

    def __init__(self, active_theme: Optional[str] = None) -> None:
        self.logger = get_logger(__name__, None, "renderer_registry")
        self.active_theme = active_theme
        self._modules: Dict[str, RendererRegistration] = {}
        self._themes: Dict[str, RendererRegistration] = {}

    def register(
        self,
        dispatch_key: str,
        renderer: Renderer,
        provider: str = "app",
    ) -> RendererRegistration:
        """Register a module renderer.

        Args:
            dispatch_key: Key the renderer handles, e.g. ``x_widget_component``
            renderer: Callable receiving ``(props, value)``
            provider: Name of the registering module

        Returns:
            The stored registration

        Raises:
            DuplicateRendererError: If another module already provides the key
        """
        self._validate(dispatch_key, renderer, provider)
        existing = self._modules.get(dispatch_key)
        if existing is not None:
            raise DuplicateRendererError(dispatch_key, existing.provider, provider)

        registration = RendererRegistration(dispatch_key, renderer, provider)
        self._modules[dispatch_key] = registration
        self.logger.debug(
            "Renderer registered",
            extra={"dispatch_key": dispatch_key, "provider": provider},
        )
        return registration

    def register_theme(
        self,
        theme: str,
        dispatch_key: str,
        renderer: Renderer,
    ) -> RendererRegistration:
        """Register a theme-scoped renderer.

        Theme renderers are consulted only while ``theme`` is the active
        theme. A theme renderer for a key that a module also provides makes
        that key ambiguous; this is reported when the key is resolved.
        """
        self._validate(dispatch_key, renderer, theme)
        registration = RendererRegistration(dispatch_key, renderer, theme, theme=True)
        probe = registration.identity
        if probe in self._themes:
            raise DuplicateRendererError(dispatch_key, theme, theme)
        self._themes[probe] = registration
        return registration

    def component(
        self,
        tag_name: str,
        provider: str = "app",
    ) -> Callable[[Renderer], Renderer]:
        """Decorator registering a renderer for the tag it handles.

        Example:
            >>> registry = RendererRegistry()
            >>> @registry.component("x-widget")
            ... def widget(props, value):
            ...     return {"#type": "markup", "#markup": value}
        """
        dispatch_key = dispatch_key_for(parse_tag_name(tag_name))

        def decorator(renderer: Renderer) -> Renderer:
            self.register(dispatch_key, renderer, provider)
            return renderer

        return decorator

    def lookup(
        self,
        dispatch_key: str,
        theme: Optional[str] = None,
    ) -> List[RendererRegistration]:
        """Return every renderer matching a dispatch key.

        Includes the renderer of the active theme (``theme`` when given,
        otherwise the registry's own ``active_theme``), if it provides the key.
        """
        matches: List[RendererRegistration] = []
        module_registration = self._modules.get(dispatch_key)
        if module_registration is not None:
            matches.append(module_registration)
        active_theme = theme or self.active_theme
        if active_theme:
            theme_registration = self._themes.get(f"{active_theme}_{dispatch_key}")
            if theme_registration is not None:
                matches.append(theme_registration)
        return matches

    def keys(self) -> List[str]:
        """List dispatch keys provided by modules."""
        return sorted(self._modules)

    def __contains__(self, dispatch_key: object) -> bool:
        return isinstance(dispatch_key, str) and bool(self.lookup(dispatch_key))

    def __len__(self) -> int:
        return len(self._modules) + len(self._themes)

    def __iter__(self) -> Iterator[RendererRegistration]:
        yield from self._modules.values()
        yield from self._themes.values()

    @staticmethod
    def _validate(dispatch_key: str, renderer: Union[Renderer, Any], provider: str) -> None:
        if not dispatch_key:
            raise RegistryError("Dispatch key cannot be empty")
        if not callable(renderer):
            raise RegistryError(f"Renderer for {dispatch_key!r} is not callable")
        if not provider:
            raise RegistryError(f"Provider for {dispatch_key!r} cannot be empty")
