"""Nesting of transformed children into their parent's render node.

Render nodes are dictionaries. Keys starting with ``#`` hold metadata; every
other key is a child slot, either positional (``int``) or named (the child's
``name`` attribute). Several children sharing a name are collected into a
list at that name in document order.
"""

import re
from typing import Any, Dict, List, Optional, Union

from render_markup.shared.errors import AmbiguousDeepEmbedError, ReservedKeyError

RenderNode = Dict[Any, Any]

RESERVED_MARKER = "#"
ATTRIBUTES_KEY = "#attributes"

_INTEGER_KEY = re.compile(r"-?[1-9][0-9]*|0")


def is_reserved_key(key: object) -> bool:
    """Check whether a key is a metadata key rather than a child slot."""
    return isinstance(key, str) and key.startswith(RESERVED_MARKER)


def child_slots(node: RenderNode) -> List[Any]:
    """Keys of a render node that hold children, in insertion order."""
    return [key for key in node if not is_reserved_key(key)]


def slot_key(name: str) -> Union[int, str]:
    """Key a named child is stored under; integer-like names are positional ints."""
    return int(name) if _INTEGER_KEY.fullmatch(name) else name


def copy_structure(node: Any) -> Any:
    """Copy the child slots of a render node, sharing its metadata values.

    Renderers may return cached or shared nodes, which merging would otherwise
    modify. Metadata values such as boxed objects keep their identity; only
    ``#attributes`` is copied one level deep as deep embedding removes its marker.
    """
    if isinstance(node, list):
        return [copy_structure(item) for item in node]
    if not isinstance(node, dict):
        return node
    copied: RenderNode = {}
    for key, value in node.items():
        if not is_reserved_key(key):
            copied[key] = copy_structure(value)
        elif key == ATTRIBUTES_KEY and isinstance(value, dict):
            copied[key] = dict(value)
        else:
            copied[key] = value
    return copied


def next_position(node: RenderNode) -> int:
    positions = [key for key in node if isinstance(key, int)]
    return max(positions) + 1 if positions else 0


def append_positional(node: RenderNode, child: Any) -> None:
    node[next_position(node)] = child


def add_named(
    node: RenderNode,
    name: Union[int, str],
    child: Any,
    tag_name: Optional[str] = None,
) -> None:
    """Store a child under a name, collecting repeated names into a list.

    The first child is stored directly; a second one turns the slot into a
    list of both, and later ones are appended to it. ``child`` may itself be
    such a list, in which case its items are added one by one.
    Integer-like names share the key space of positional children.

    Raises:
        ReservedKeyError: If the name is a metadata key
    """
    if is_reserved_key(name):
        raise ReservedKeyError(name, tag_name)
    name = slot_key(name) if isinstance(name, str) else name
    if name not in node:
        node[name] = child
        return
    existing = node[name]
    collected = existing if isinstance(existing, list) else [existing]
    collected.extend(child if isinstance(child, list) else [child])
    node[name] = collected


class ChildMerger:
    """Merges a node's collected children into its render node."""

    def merge(
        self,
        parent: RenderNode,
        children: RenderNode,
        bubble_down: bool = False,
        tag_name: str = "",
    ) -> RenderNode:
        """Merge children into a render node.

        Args:
            parent: Render node of the element, modified in place
            children: Child slots collected for the element
            bubble_down: Insert the children at the single leaf of ``parent``
                instead of into ``parent`` itself
            tag_name: Tag of the element, used in error messages

        Returns:
            The parent render node

        Raises:
            AmbiguousDeepEmbedError: If bubbling down meets a node with more
                than one child slot
        """
        target = self.insertion_point(parent, tag_name) if bubble_down else parent
        self._merge_direct(target, children, tag_name)
        return parent

    def insertion_point(self, node: RenderNode, tag_name: str = "") -> RenderNode:
        """Follow the single chain of child slots down to a childless node."""
        current = node
        while True:
            slots = child_slots(current)
            if not slots:
                return current
            if len(slots) > 1 or not isinstance(current[slots[0]], dict):
                raise AmbiguousDeepEmbedError(tag_name, slots)
            current = current[slots[0]]

    @staticmethod
    def _merge_direct(target: RenderNode, children: RenderNode, tag_name: str) -> None:
        for key, child in children.items():
            if isinstance(key, int):
                append_positional(target, child)
            else:
                add_named(target, key, child, tag_name)
