"""Qualified tag names.

A tag such as ``ui:card`` names the local element ``card`` in the ``ui``
namespace. Tags without a prefix live in the default ``global`` namespace.
"""

from dataclasses import dataclass

from render_markup.shared.errors import TagNameError

DEFAULT_NAMESPACE = "global"
NAMESPACE_SEPARATOR = ":"


@dataclass(frozen=True)
class QualifiedTag:
    """A (namespace, local name) pair parsed from a markup tag."""

    namespace: str
    name: str

    @property
    def is_default_namespace(self) -> bool:
        """Check whether the tag carries no namespace prefix."""
        return self.namespace == DEFAULT_NAMESPACE

    def __str__(self) -> str:
        if self.is_default_namespace:
            return self.name
        return f"{self.namespace}{NAMESPACE_SEPARATOR}{self.name}"


def parse_tag_name(tag_name: str, default_namespace: str = DEFAULT_NAMESPACE) -> QualifiedTag:
    """Split a tag name into namespace and local name.

    Only the first separator is significant: ``a:b:c`` parses as namespace
    ``a`` and local name ``b:c``.

    Args:
        tag_name: Tag name as written in the markup
        default_namespace: Namespace assigned to unprefixed tags

    Returns:
        QualifiedTag for the tag name

    Raises:
        TagNameError: If the tag name, its prefix or its local part is empty
    """
    if not tag_name:
        raise TagNameError(tag_name)

    if NAMESPACE_SEPARATOR not in tag_name:
        return QualifiedTag(namespace=default_namespace, name=tag_name)

    namespace, name = tag_name.split(NAMESPACE_SEPARATOR, 1)
    if not namespace:
        raise TagNameError(tag_name, "namespace prefix cannot be empty")
    if not name:
        raise TagNameError(tag_name, "local name cannot be empty")
    return QualifiedTag(namespace=namespace, name=name)
