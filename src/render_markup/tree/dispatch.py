"""Dispatch of qualified tags to the code that renders them.

A tag is, in order of precedence, a standard HTML element, an element known
to the host's element-info registry, or a custom component handled by exactly
one registered renderer.
"""

from dataclasses import dataclass
from typing import Optional, Union

from render_markup.markup.parser import ParsedNode
from render_markup.markup.qualified_name import QualifiedTag
from render_markup.registry.element_info import ElementInfo, ElementInfoRegistry
from render_markup.registry.renderers import (
    RendererRegistration,
    RendererRegistry,
    dispatch_key_for,
)
from render_markup.shared.config import DispatchConfig
from render_markup.shared.errors import AmbiguousComponentError, UnresolvedComponentError
from render_markup.shared.logging import get_logger

HTML_ELEMENTS = frozenset({
    "a", "abbr", "address", "area", "article", "aside", "audio", "b", "base",
    "bdi", "bdo", "blockquote", "body", "br", "button", "canvas", "caption",
    "cite", "code", "col", "colgroup", "data", "datalist", "dd", "del",
    "details", "dfn", "dialog", "div", "dl", "dt", "em", "embed", "fieldset",
    "figcaption", "figure", "footer", "form", "h1", "h2", "h3", "h4", "h5",
    "h6", "head", "header", "hgroup", "hr", "html", "i", "iframe", "img",
    "input", "ins", "kbd", "label", "legend", "li", "link", "main", "map",
    "mark", "menu", "meta", "meter", "nav", "noscript", "object", "ol",
    "optgroup", "option", "output", "p", "param", "picture", "pre",
    "progress", "q", "rp", "rt", "ruby", "s", "samp", "script", "search",
    "section", "select", "slot", "small", "source", "span", "strong",
    "style", "sub", "summary", "sup", "svg", "table", "tbody", "td",
    "template", "textarea", "tfoot", "th", "thead", "time", "title", "tr",
    "track", "u", "ul", "var", "video", "wbr",
})


@dataclass(frozen=True)
class BuiltinElement:
    """Render the tag literally as a generic HTML tag."""

    fallback: bool = False


@dataclass(frozen=True)
class RegistryElement:
    """Render the tag as a host element described by element info."""

    element_info: ElementInfo
    info_key: str


@dataclass(frozen=True)
class CustomComponent:
    """Render the tag by calling a registered renderer."""

    registration: RendererRegistration

    @property
    def identity(self) -> str:
        return self.registration.identity


Dispatch = Union[BuiltinElement, RegistryElement, CustomComponent]


class DispatchResolver:
    """Resolves qualified tags to at most one way of rendering them."""

    def __init__(
        self,
        renderers: RendererRegistry,
        element_info: ElementInfoRegistry,
        config: Optional[DispatchConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.renderers = renderers
        self.element_info = element_info
        self.config = config or DispatchConfig()
        self.logger = get_logger(__name__, correlation_id, "dispatch_resolver")

    def resolve(self, tag: QualifiedTag, node: ParsedNode, strict: bool = True) -> Dispatch:
        """Decide how a tag is rendered.

        Args:
            tag: Qualified tag of the node
            node: The parsed node, used for error reporting
            strict: Whether an unresolved custom tag is an error

        Returns:
            BuiltinElement, RegistryElement or CustomComponent

        Raises:
            UnresolvedComponentError: Strict mode and no renderer matches
            AmbiguousComponentError: More than one renderer matches
        """
        if self.is_builtin(tag):
            return BuiltinElement()

        registry_element = self._resolve_element_info(tag)
        if registry_element is not None:
            return registry_element

        dispatch_key = self.dispatch_key(tag)
        matches = self.renderers.lookup(dispatch_key, self.config.active_theme)
        if len(matches) > 1:
            raise AmbiguousComponentError(
                node.tag, dispatch_key, [match.identity for match in matches]
            )
        if not matches:
            if strict:
                raise UnresolvedComponentError(node.tag, dispatch_key)
            self.logger.debug(
                "Unresolved tag rendered literally",
                extra={"tag": node.tag, "dispatch_key": dispatch_key},
            )
            return BuiltinElement(fallback=True)

        self.logger.debug(
            "Tag dispatched to renderer",
            extra={"tag": node.tag, "renderer": matches[0].identity},
        )
        return CustomComponent(matches[0])

    def is_builtin(self, tag: QualifiedTag) -> bool:
        return tag.namespace == self.config.default_namespace and tag.name in HTML_ELEMENTS

    def dispatch_key(self, tag: QualifiedTag) -> str:
        return dispatch_key_for(
            tag, self.config.component_suffix, self.config.default_namespace
        )

    def _resolve_element_info(self, tag: QualifiedTag) -> Optional[RegistryElement]:
        if tag.namespace == self.config.default_namespace:
            return None
        if tag.namespace == self.config.host_namespace:
            key = tag.name
        else:
            key = f"{tag.namespace}_{tag.name.replace('-', '_')}"
        info = self.element_info.lookup(key)
        if not info:
            return None
        return RegistryElement(info, key)
