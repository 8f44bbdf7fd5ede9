"""Compilation contexts.

A context holds the state that must be shared by everything one top-level
``render`` call does, including renders started by renderers while it runs:
the recursion guard, the table of boxed references and the strict-mode value
of the innermost active call. Contexts live in a ``ContextVar``, so calls in
other threads or asyncio tasks never see each other's state.
"""

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

from render_markup.registry.references import ReferenceTable
from render_markup.tree.guard import RecursionGuard

_active_context: "ContextVar[Optional[CompilationContext]]" = ContextVar(
    "render_markup_compilation", default=None
)


@dataclass
class CompilationContext:
    """State scoped to one top-level compilation."""

    strict: bool = True
    guard: RecursionGuard = field(default_factory=RecursionGuard)
    references: ReferenceTable = field(default_factory=ReferenceTable)
    correlation_id: Optional[str] = None

    def box(self, value: Any) -> str:
        """Box a value for use as an attribute and return its token."""
        return self.references.box(value)

    def unbox(self, token: str) -> Any:
        return self.references.unbox(token)

    @contextmanager
    def strict_scope(self, strict: bool) -> Iterator[None]:
        """Set the strict-mode value for the duration of one render call."""
        previous = self.strict
        self.strict = strict
        try:
            yield
        finally:
            self.strict = previous


def current_context() -> Optional[CompilationContext]:
    """Return the active compilation context, if any."""
    return _active_context.get()


@contextmanager
def compilation(
    strict: bool = True,
    correlation_id: Optional[str] = None,
    track_correlation: bool = True,
) -> Iterator[CompilationContext]:
    """Enter a compilation context, reusing the active one when nested.

    Args:
        strict: Strict-mode value of a newly created context
        correlation_id: Correlation ID of a newly created context
        track_correlation: Generate a correlation ID when none is given

    Yields:
        The active CompilationContext
    """
    active = _active_context.get()
    if active is not None:
        yield active
        return

    if correlation_id is None and track_correlation:
        correlation_id = uuid.uuid4().hex[:12]
    context = CompilationContext(strict=strict, correlation_id=correlation_id)
    token = _active_context.set(context)
    try:
        yield context
    finally:
        _active_context.reset(token)


def box(value: Any) -> str:
    """Box a value in the active compilation context.

    Raises:
        RuntimeError: If no compilation is active
    """
    context = _active_context.get()
    if context is None:
        raise RuntimeError("box() requires an active compilation context")
    return context.box(value)
