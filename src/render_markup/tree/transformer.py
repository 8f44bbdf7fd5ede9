"""Recursive transformation of parsed markup into render trees.

Each parsed node becomes a render node according to how its tag dispatches:
standard HTML elements become generic ``html_tag`` nodes, host elements take
their ``#type`` from element info, and custom components are whatever their
renderer returns. Transformed children are then nested into the node.

A component may mark its own output for deep embedding by putting the
deep-embed attribute into its ``#attributes`` without having received it.
Its markup children are then inserted at the single leaf of its output
instead of at its top level.
"""

import html
import json
from typing import Any, Callable, Dict, Optional

from render_markup.markup.parser import ParsedNode
from render_markup.markup.qualified_name import QualifiedTag, parse_tag_name
from render_markup.registry.references import ReferenceTable
from render_markup.shared.config import TransformConfig
from render_markup.shared.errors import (
    AttributeDecodeError,
    NestingDepthError,
    RenderOutputError,
    ReservedKeyError,
)
from render_markup.shared.logging import get_logger
from render_markup.shared.result import CompilationMetrics
from render_markup.tree.dispatch import (
    BuiltinElement,
    CustomComponent,
    Dispatch,
    DispatchResolver,
    RegistryElement,
)
from render_markup.tree.guard import RecursionGuard
from render_markup.tree.merger import (
    ChildMerger,
    RenderNode,
    add_named,
    append_positional,
    copy_structure,
    is_reserved_key,
    slot_key,
)

Sanitizer = Callable[[str], str]

NAME_ATTRIBUTE = "name"
CLASS_ATTRIBUTE = "class"
STRUCTURED_ATTRIBUTES = "attributes"
HTML_TAG_TYPE = "html_tag"


def escape_text(text: str) -> str:
    """Default sanitizer: escape inline text for HTML output."""
    return html.escape(text, quote=False)


class TreeTransformer:
    """Builds the render tree of one parsed markup tree."""

    def __init__(
        self,
        resolver: DispatchResolver,
        merger: Optional[ChildMerger] = None,
        guard: Optional[RecursionGuard] = None,
        references: Optional[ReferenceTable] = None,
        config: Optional[TransformConfig] = None,
        sanitizer: Sanitizer = escape_text,
        metrics: Optional[CompilationMetrics] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Initialize the transformer.

        Args:
            resolver: Dispatch resolver for tags
            merger: Child merger, a default one when omitted
            guard: Recursion guard of the enclosing compilation
            references: Reference table of the enclosing compilation
            config: Transform configuration
            sanitizer: Function sanitizing inline text
            metrics: Counters updated while transforming
            correlation_id: Optional correlation ID for request tracking
        """
        self.resolver = resolver
        self.merger = merger or ChildMerger()
        self.guard = guard if guard is not None else RecursionGuard()
        self.references = references if references is not None else ReferenceTable()
        self.config = config or TransformConfig()
        self.sanitizer = sanitizer
        self.metrics = metrics if metrics is not None else CompilationMetrics()
        self.logger = get_logger(__name__, correlation_id, "tree_transformer")

    def transform(self, node: ParsedNode, strict: bool = True) -> RenderNode:
        """Transform a parsed tree into a render tree.

        Args:
            node: Root of the parsed markup
            strict: Whether unresolved custom tags are errors; every
                descendant is transformed with the same value

        Returns:
            The render node, or ``{name: render_node}`` when the root has a
            ``name`` attribute
        """
        return self._transform(node, strict, 1)

    def _transform(self, node: ParsedNode, strict: bool, depth: int) -> RenderNode:
        if depth > self.config.max_depth:
            raise NestingDepthError(depth, self.config.max_depth)
        self.metrics.nodes_transformed += 1
        self.metrics.record_depth(depth)

        tag = parse_tag_name(node.tag, self.resolver.config.default_namespace)
        dispatch = self.resolver.resolve(tag, node, strict)
        element = self._build_element(tag, dispatch, node)

        children: RenderNode = {}
        for child in node.children:
            transformed = self._transform(child, strict, depth + 1)
            if child.has_attribute(NAME_ATTRIBUTE):
                name = slot_key(child.attributes[NAME_ATTRIBUTE])
                add_named(children, name, transformed[name], child.tag)
            else:
                append_positional(children, transformed)

        marker = self.config.deep_embed_attribute
        attributes = element.get("#attributes")
        deep_embed = (
            not node.has_attribute(marker)
            and isinstance(attributes, dict)
            and marker in attributes
        )
        if children:
            self.merger.merge(element, children, bubble_down=deep_embed, tag_name=node.tag)
        if deep_embed:
            del attributes[marker]
            self.logger.debug(
                "Children deep-embedded",
                extra={"tag": node.tag, "child_count": len(children)},
            )

        if node.has_attribute(NAME_ATTRIBUTE):
            name = node.attributes[NAME_ATTRIBUTE]
            if is_reserved_key(name):
                raise ReservedKeyError(name, node.tag)
            return {slot_key(name): element}
        return element

    def _build_element(self, tag: QualifiedTag, dispatch: Dispatch, node: ParsedNode) -> RenderNode:
        if isinstance(dispatch, CustomComponent):
            return self._render_component(dispatch, node)
        if isinstance(dispatch, RegistryElement):
            return self._build_registry_element(dispatch, node)
        if isinstance(dispatch, BuiltinElement):
            if dispatch.fallback:
                self.metrics.literal_fallbacks += 1
            return self._build_html_tag(tag, node)
        raise TypeError(f"Unknown dispatch {dispatch!r}")

    def _build_html_tag(self, tag: QualifiedTag, node: ParsedNode) -> RenderNode:
        attributes: Dict[str, Any] = {}
        for name, value in node.attributes.items():
            attributes[name] = value.split() if name == CLASS_ATTRIBUTE else value
        return {
            "#type": HTML_TAG_TYPE,
            "#tag": tag.name,
            "#value": self.sanitizer(node.text or ""),
            "#attributes": attributes,
        }

    def _build_registry_element(self, dispatch: RegistryElement, node: ParsedNode) -> RenderNode:
        element: RenderNode = {"#type": dispatch.element_info["#type"]}
        if node.text and node.text.strip():
            element["#value"] = self.sanitizer(node.text)

        attributes: Dict[str, Any] = {}
        for name, value in node.attributes.items():
            if name == STRUCTURED_ATTRIBUTES:
                attributes.update(self._decode_attributes(node, value))
            elif name == CLASS_ATTRIBUTE:
                attributes[CLASS_ATTRIBUTE] = value.split()
            elif (
                name in self.config.direct_attributes
                or self.config.event_attribute_marker in name
            ):
                attributes[name] = value
            else:
                element[f"#{name}"] = value
        if attributes:
            element["#attributes"] = attributes
        return element

    @staticmethod
    def _decode_attributes(node: ParsedNode, value: str) -> Dict[str, Any]:
        try:
            decoded = json.loads(value)
        except json.JSONDecodeError as e:
            raise AttributeDecodeError(node.tag, value, e.msg) from e
        if not isinstance(decoded, dict):
            raise AttributeDecodeError(node.tag, value, "expected a JSON object")
        return decoded

    def _render_component(self, dispatch: CustomComponent, node: ParsedNode) -> RenderNode:
        props: Dict[str, Any] = {}
        for name, value in node.attributes.items():
            reference = self.references.resolve(value) if self.references.is_reference(value) else None
            props[name] = reference if reference is not None else value

        value = self.sanitizer(node.text or "")
        self.logger.debug(
            "Invoking renderer",
            extra={"tag": node.tag, "renderer": dispatch.identity, "guard_depth": self.guard.depth},
        )
        with self.guard.enter(dispatch.identity):
            output = dispatch.registration(props, value)
        self.metrics.components_invoked += 1

        if not isinstance(output, dict):
            raise RenderOutputError(node.tag, dispatch.identity, output)
        return copy_structure(output)
