"""Element-info lookup for host-native elements.

Host-native elements (``drupal:textfield``) and elements declared by other
namespaces (``ui:card`` registered as ``ui_card``) are described by an
element-info dictionary carrying at least ``#type``.
"""

from typing import Any, Dict, Iterator, Mapping

from render_markup.shared.errors import RegistryError

ElementInfo = Dict[str, Any]


class ElementInfoRegistry:
    """Host-provided element descriptors keyed by element name."""

    def __init__(self) -> None:
        self._info: Dict[str, ElementInfo] = {}

    def register(self, key: str, info: Mapping[str, Any]) -> None:
        """Register element info under a key.

        Raises:
            RegistryError: If the key is empty or the info lacks ``#type``
        """
        if not key:
            raise RegistryError("Element info key cannot be empty")
        if not info.get("#type"):
            raise RegistryError(f"Element info for {key!r} must define '#type'")
        self._info[key] = dict(info)

    def lookup(self, key: str) -> ElementInfo:
        """Return a copy of the element info for a key, or an empty dict."""
        info = self._info.get(key)
        return dict(info) if info else {}

    def __contains__(self, key: object) -> bool:
        return key in self._info

    def __len__(self) -> int:
        return len(self._info)

    def __iter__(self) -> Iterator[str]:
        return iter(self._info)
