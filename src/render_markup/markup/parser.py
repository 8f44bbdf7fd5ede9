"""Markup parsing into immutable node trees.

Wraps the standard library expat parser. Namespace processing is disabled, so
a prefixed tag like ``ui:card`` reaches the compiler verbatim and undeclared
prefixes are never an error; the compiler assigns meaning to prefixes itself.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple
from xml.parsers import expat

from render_markup.shared.errors import MarkupParseError, MissingRootRecoverable
from render_markup.shared.logging import get_logger

_JUNK_AFTER_ROOT = expat.errors.codes[expat.errors.XML_ERROR_JUNK_AFTER_DOC_ELEMENT]
_NAMESPACE_DECLARATION = "xmlns"


@dataclass(frozen=True)
class ParsedNode:
    """A single element of parsed markup.

    Attributes keep document order. ``text`` is the concatenation of the
    element's own character data (not that of its children), or None when the
    element has none.
    """

    tag: str
    attributes: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    children: Tuple["ParsedNode", ...] = ()
    text: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the tag and freeze attribute and child containers."""
        if not self.tag:
            raise ValueError("Element tag cannot be empty")
        if not isinstance(self.attributes, MappingProxyType):
            object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))
        if not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))

    def get_attribute(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get attribute value with optional default."""
        return self.attributes.get(name, default)

    def has_attribute(self, name: str) -> bool:
        """Check if element has specific attribute."""
        return name in self.attributes

    def to_dict(self) -> Dict[str, Any]:
        """Convert the node to dictionary representation."""
        result: Dict[str, Any] = {"tag": self.tag, "attributes": dict(self.attributes)}
        if self.text is not None:
            result["text"] = self.text
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result


class _OpenElement:
    """Mutable element state while its end tag has not been seen."""

    __slots__ = ("tag", "attributes", "children", "text_parts")

    def __init__(self, tag: str, attributes: Dict[str, str]) -> None:
        self.tag = tag
        self.attributes = attributes
        self.children: List[ParsedNode] = []
        self.text_parts: List[str] = []

    def close(self) -> ParsedNode:
        text = "".join(self.text_parts) if self.text_parts else None
        return ParsedNode(
            tag=self.tag,
            attributes=self.attributes,
            children=tuple(self.children),
            text=text,
        )


class MarkupParser:
    """Builds a ParsedNode tree from a markup string."""

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        """Initialize the parser.

        Args:
            correlation_id: Optional correlation ID for request tracking
        """
        self.logger = get_logger(__name__, correlation_id, "markup_parser")
        self._stack: List[_OpenElement] = []
        self._root: Optional[ParsedNode] = None

    def parse(self, markup: str) -> ParsedNode:
        """Parse markup holding exactly one root element.

        Args:
            markup: Well-formed XML-like markup

        Returns:
            Root ParsedNode

        Raises:
            MissingRootRecoverable: If the markup has several top-level elements
            MarkupParseError: For any other malformed input
        """
        self._stack = []
        self._root = None

        parser = expat.ParserCreate()
        parser.buffer_text = True
        parser.SetParamEntityParsing(expat.XML_PARAM_ENTITY_PARSING_NEVER)
        parser.StartElementHandler = self._start_element
        parser.EndElementHandler = self._end_element
        parser.CharacterDataHandler = self._character_data

        try:
            parser.Parse(markup, True)
        except expat.ExpatError as e:
            reason = expat.errors.messages[e.code]
            self.logger.debug(
                "Markup rejected by parser",
                extra={"reason": reason, "line": e.lineno, "column": e.offset},
            )
            error_class = MissingRootRecoverable if e.code == _JUNK_AFTER_ROOT else MarkupParseError
            raise error_class(reason, code=e.code, line=e.lineno, column=e.offset) from e

        if self._root is None:
            raise MarkupParseError("no element found")
        return self._root

    def _start_element(self, tag: str, attributes: Dict[str, str]) -> None:
        filtered = {
            name: value
            for name, value in attributes.items()
            if name != _NAMESPACE_DECLARATION
            and not name.startswith(_NAMESPACE_DECLARATION + ":")
        }
        self._stack.append(_OpenElement(tag, filtered))

    def _end_element(self, tag: str) -> None:
        node = self._stack.pop().close()
        if self._stack:
            self._stack[-1].children.append(node)
        else:
            self._root = node

    def _character_data(self, data: str) -> None:
        if self._stack:
            self._stack[-1].text_parts.append(data)


def parse_markup(markup: str, correlation_id: Optional[str] = None) -> ParsedNode:
    """Parse markup with a fresh MarkupParser.

    Args:
        markup: Well-formed XML-like markup with a single root element
        correlation_id: Optional correlation ID for request tracking

    Returns:
        Root ParsedNode
    """
    return MarkupParser(correlation_id).parse(markup)
