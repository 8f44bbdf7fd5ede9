"""Markup input layer.

Key Components:
    parse_tag_name: Splits ``ns:name`` tag names into QualifiedTag pairs
    HtmlEntityNormalizer: Rewrites HTML named entities for the XML parser
    MarkupParser: Builds immutable ParsedNode trees from markup strings
"""

from .entities import EntityNormalizer, HtmlEntityNormalizer, PassthroughNormalizer
from .parser import MarkupParser, ParsedNode, parse_markup
from .qualified_name import DEFAULT_NAMESPACE, QualifiedTag, parse_tag_name

__all__ = [
    "EntityNormalizer",
    "HtmlEntityNormalizer",
    "PassthroughNormalizer",
    "MarkupParser",
    "ParsedNode",
    "parse_markup",
    "DEFAULT_NAMESPACE",
    "QualifiedTag",
    "parse_tag_name",
]
