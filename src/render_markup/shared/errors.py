"""Exception taxonomy for markup compilation.

All exceptions raised by the package derive from ``RenderMarkupError``. Errors
raised while transforming a parsed tree derive from ``TransformError`` and abort
the transform of the current input; parse errors are reported by the compiler
rather than raised, and ``MissingRootRecoverable`` never leaves the package.
"""

from typing import Iterable, List, Optional, Sequence


class RenderMarkupError(Exception):
    """Base exception for all render-markup errors."""


class TransformError(RenderMarkupError):
    """Base exception for fatal errors raised while building a render tree."""


class TagNameError(TransformError):
    """Raised when a tag name cannot be split into namespace and local name."""

    def __init__(self, tag_name: str, reason: str = "tag name cannot be empty") -> None:
        super().__init__(f"Invalid tag name {tag_name!r}: {reason}")
        self.tag_name = tag_name
        self.reason = reason


class UnresolvedComponentError(TransformError):
    """Raised in strict mode when no renderer handles a custom tag."""

    def __init__(self, tag_name: str, dispatch_key: str) -> None:
        super().__init__(
            f"No renderer found for tag <{tag_name}>; "
            f"expected a renderer registered for {dispatch_key!r}"
        )
        self.tag_name = tag_name
        self.dispatch_key = dispatch_key


class AmbiguousComponentError(TransformError):
    """Raised when more than one renderer claims the same dispatch key."""

    def __init__(self, tag_name: str, dispatch_key: str, providers: Sequence[str]) -> None:
        listing = ", ".join(providers)
        super().__init__(
            f"Tag <{tag_name}> is ambiguous: {len(providers)} renderers match "
            f"{dispatch_key!r} ({listing})"
        )
        self.tag_name = tag_name
        self.dispatch_key = dispatch_key
        self.providers: List[str] = list(providers)


class InfiniteRecursionError(TransformError):
    """Raised when a renderer transitively invokes itself."""

    def __init__(self, chain: Iterable[str]) -> None:
        self.chain: List[str] = list(chain)
        super().__init__(
            "Infinite recursion between renderers: " + " -> ".join(self.chain)
        )


class ReservedKeyError(TransformError):
    """Raised when a name attribute collides with reserved metadata keys."""

    def __init__(self, key: str, tag_name: Optional[str] = None) -> None:
        where = f" on <{tag_name}>" if tag_name else ""
        super().__init__(
            f"Name {key!r}{where} is reserved: child names cannot start with '#'"
        )
        self.key = key
        self.tag_name = tag_name


class AmbiguousDeepEmbedError(TransformError):
    """Raised when deep-embedded children have no single insertion point."""

    def __init__(self, tag_name: str, slots: Sequence[object]) -> None:
        super().__init__(
            f"Cannot deep-embed children of <{tag_name}>: render output has "
            f"{len(slots)} candidate child slots ({', '.join(map(str, slots))})"
        )
        self.tag_name = tag_name
        self.slots = list(slots)


class AttributeDecodeError(TransformError):
    """Raised when a structured ``attributes`` attribute is not a JSON object."""

    def __init__(self, tag_name: str, value: str, reason: str) -> None:
        super().__init__(
            f"Cannot decode 'attributes' on <{tag_name}>: {reason} (value {value!r})"
        )
        self.tag_name = tag_name
        self.value = value


class RenderOutputError(TransformError):
    """Raised when a renderer returns something other than a render node."""

    def __init__(self, tag_name: str, identity: str, output: object) -> None:
        super().__init__(
            f"Renderer {identity!r} for <{tag_name}> returned "
            f"{type(output).__name__}, expected dict"
        )
        self.tag_name = tag_name
        self.identity = identity


class NestingDepthError(TransformError):
    """Raised when markup nests deeper than the configured limit."""

    def __init__(self, depth: int, limit: int) -> None:
        super().__init__(f"Markup nesting depth {depth} exceeds limit {limit}")
        self.depth = depth
        self.limit = limit


class MarkupParseError(RenderMarkupError):
    """Raised by the parser wrapper for malformed markup."""

    def __init__(
        self,
        message: str,
        code: Optional[int] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        location = f" (line {line}, column {column})" if line is not None else ""
        super().__init__(f"{message}{location}")
        self.reason = message
        self.code = code
        self.line = line
        self.column = column


class MissingRootRecoverable(MarkupParseError):
    """Markup holds several top-level elements; retry inside a wrapper."""


class RegistryError(RenderMarkupError):
    """Base exception for renderer and element-info registration problems."""


class DuplicateRendererError(RegistryError):
    """Raised when a second provider registers an already claimed dispatch key."""

    def __init__(self, dispatch_key: str, existing: str, provider: str) -> None:
        super().__init__(
            f"Dispatch key {dispatch_key!r} is already provided by {existing!r}; "
            f"refusing registration from {provider!r}"
        )
        self.dispatch_key = dispatch_key
        self.existing = existing
        self.provider = provider
