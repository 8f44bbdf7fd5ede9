"""Entity normalization ahead of XML parsing.

Authors write HTML, so markup may use named entities such as ``&nbsp;`` that
an XML parser rejects as undefined. A normalizer rewrites the raw markup into
text the parser accepts.
"""

import re
from html.entities import name2codepoint
from typing import Protocol

# Entities every XML parser understands without a DTD
XML_PREDEFINED_ENTITIES = frozenset({"amp", "lt", "gt", "quot", "apos"})

_NAMED_ENTITY = re.compile(r"&([A-Za-z][A-Za-z0-9]*);")


class EntityNormalizer(Protocol):
    """Rewrites raw markup so the XML parser can consume it."""

    def normalize(self, markup: str) -> str:
        ...


class HtmlEntityNormalizer:
    """Replaces HTML named entities with numeric character references."""

    def normalize(self, markup: str) -> str:
        """Rewrite named entities unknown to XML.

        Unknown names are left alone so the parser reports them.

        Args:
            markup: Raw markup text

        Returns:
            Markup in which ``&name;`` is ``&#N;`` for every HTML entity name
        """
        return _NAMED_ENTITY.sub(self._replace, markup)

    @staticmethod
    def _replace(match: "re.Match[str]") -> str:
        name = match.group(1)
        if name in XML_PREDEFINED_ENTITIES:
            return match.group(0)
        codepoint = name2codepoint.get(name)
        if codepoint is None:
            return match.group(0)
        return f"&#{codepoint};"


class PassthroughNormalizer:
    """Normalizer for markup that is already valid XML."""

    def normalize(self, markup: str) -> str:
        return markup
