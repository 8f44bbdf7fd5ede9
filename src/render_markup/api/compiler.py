"""Markup compiler API.

Level 1: ``render()`` compiles markup with the process-wide default registries.
Level 2: ``MarkupCompiler`` binds its own registries, configuration,
normalizer, messenger and sanitizer, and ``compile()`` returns a
CompilationResult with diagnostics and metrics alongside the render tree.
"""

import time
from contextlib import contextmanager
from typing import Any, Iterator, Optional, Sequence, Union

from render_markup.api.context import CompilationContext, compilation, current_context
from render_markup.api.messages import LoggingMessenger, Messenger
from render_markup.markup.entities import EntityNormalizer, HtmlEntityNormalizer
from render_markup.markup.parser import MarkupParser, ParsedNode
from render_markup.registry.element_info import ElementInfoRegistry
from render_markup.registry.renderers import RendererRegistry
from render_markup.shared.config import CompilerConfig
from render_markup.shared.errors import MarkupParseError, MissingRootRecoverable, TransformError
from render_markup.shared.logging import get_logger
from render_markup.shared.result import CompilationResult, DiagnosticSeverity
from render_markup.tree.dispatch import DispatchResolver
from render_markup.tree.merger import ChildMerger, RenderNode, is_reserved_key
from render_markup.tree.transformer import Sanitizer, TreeTransformer, escape_text

MarkupInput = Union[str, Sequence[str]]

MS_PER_SECOND = 1000

default_renderers = RendererRegistry()
default_element_info = ElementInfoRegistry()

_default_compiler: Optional["MarkupCompiler"] = None


class MarkupCompiler:
    """Compiles markup into render trees against a set of registries."""

    def __init__(
        self,
        renderers: Optional[RendererRegistry] = None,
        element_info: Optional[ElementInfoRegistry] = None,
        config: Optional[CompilerConfig] = None,
        normalizer: Optional[EntityNormalizer] = None,
        messenger: Optional[Messenger] = None,
        sanitizer: Sanitizer = escape_text,
    ) -> None:
        """Initialize the compiler.

        Args:
            renderers: Component renderers; an empty registry when omitted
            element_info: Host element descriptors; empty when omitted
            config: Compiler configuration
            normalizer: Rewrites markup before parsing
            messenger: Receives reports about malformed markup
            sanitizer: Sanitizes inline text of elements
        """
        self.renderers = renderers if renderers is not None else RendererRegistry()
        self.element_info = element_info if element_info is not None else ElementInfoRegistry()
        self.config = config or CompilerConfig()
        self.normalizer = normalizer or HtmlEntityNormalizer()
        self.messenger = messenger if messenger is not None else LoggingMessenger()
        self.sanitizer = sanitizer
        self.merger = ChildMerger()
        self.logger = get_logger(__name__, None, "markup_compiler")

    @contextmanager
    def compilation(self, strict: Optional[bool] = None) -> Iterator[CompilationContext]:
        """Open a compilation context explicitly.

        Lets callers box values before compiling markup that refers to them:

            >>> with compiler.compilation() as context:
            ...     token = context.box(["a", "b"])
            ...     tree = compiler.render(f'<x-list items="{token}"/>')
        """
        with compilation(
            strict=self.config.strict if strict is None else strict,
            track_correlation=self.config.global_.enable_correlation_tracking,
        ) as context:
            yield context

    def render(self, markup: MarkupInput, strict: Optional[bool] = None) -> Any:
        """Compile markup and return only the render tree.

        Args:
            markup: A markup string, or a sequence of them compiled independently
            strict: Strict mode; inherited from the enclosing compilation when
                called from inside a renderer, else the configured default

        Returns:
            Render tree, or a list of render trees for sequence input

        Raises:
            TransformError: If the markup cannot be compiled
        """
        if isinstance(markup, str):
            return self.compile(markup, strict).tree
        return [self.compile(item, strict).tree for item in markup]

    def compile(self, markup: str, strict: Optional[bool] = None) -> CompilationResult:
        """Compile one markup string.

        Malformed markup is reported to the messenger and yields an
        unsuccessful result with an empty tree.

        Raises:
            TransformError: If the parsed markup cannot be transformed
        """
        start_time = time.time()
        parent = current_context()
        if strict is None:
            strict = parent.strict if parent is not None else self.config.strict

        with self.compilation(strict) as context, context.strict_scope(strict):
            logger = self.logger.bind(context.correlation_id)
            result = CompilationResult(correlation_id=context.correlation_id)
            logger.info(
                "Starting compilation",
                extra={
                    "markup_length": len(markup),
                    "strict": strict,
                    "nested": parent is not None,
                },
            )

            root = self._parse(markup, context, result)
            if root is not None:
                try:
                    tree = self._transformer(context, result).transform(root, strict)
                except TransformError as e:
                    logger.error(
                        "Compilation failed",
                        extra={"error_type": type(e).__name__, "reason": str(e)},
                    )
                    raise
                result.tree = self._unwrap(tree) if result.metrics.recovered_fragments else tree

            result.metrics.processing_time_ms = (time.time() - start_time) * MS_PER_SECOND
            logger.info(
                "Compilation completed",
                extra={
                    "success": result.success,
                    "nodes_transformed": result.metrics.nodes_transformed,
                    "processing_time_ms": result.metrics.processing_time_ms,
                },
            )
            return result

    def _parse(
        self,
        markup: str,
        context: CompilationContext,
        result: CompilationResult,
    ) -> Optional[ParsedNode]:
        parser = MarkupParser(context.correlation_id)
        normalized = self.normalizer.normalize(markup)
        try:
            try:
                return parser.parse(normalized)
            except MissingRootRecoverable:
                if not self.config.recovery.enable_missing_root_recovery:
                    raise
                root = parser.parse(self._wrap(normalized))
                result.metrics.recovered_fragments += 1
                result.add_diagnostic(
                    DiagnosticSeverity.INFO,
                    "Multiple top-level elements compiled as a fragment",
                    "markup_compiler",
                )
                return root
        except MarkupParseError as e:
            message = f"Unable to compile markup: {e}"
            self.messenger.error(message)
            result.success = False
            result.add_diagnostic(
                DiagnosticSeverity.WARNING,
                message,
                "markup_parser",
                details={"code": e.code, "line": e.line, "column": e.column},
            )
            return None

    def _transformer(
        self,
        context: CompilationContext,
        result: CompilationResult,
    ) -> TreeTransformer:
        resolver = DispatchResolver(
            self.renderers,
            self.element_info,
            self.config.dispatch,
            context.correlation_id,
        )
        return TreeTransformer(
            resolver,
            merger=self.merger,
            guard=context.guard,
            references=context.references,
            config=self.config.transform,
            sanitizer=self.sanitizer,
            metrics=result.metrics,
            correlation_id=context.correlation_id,
        )

    def _wrap(self, markup: str) -> str:
        recovery = self.config.recovery
        return (
            f'<{recovery.wrapper_tag} {recovery.wrapper_marker}="1">'
            f"{markup}</{recovery.wrapper_tag}>"
        )

    @staticmethod
    def _unwrap(tree: RenderNode) -> RenderNode:
        return {key: value for key, value in tree.items() if not is_reserved_key(key)}


def get_default_compiler() -> MarkupCompiler:
    """Return the compiler bound to the process-wide default registries."""
    global _default_compiler
    if _default_compiler is None:
        _default_compiler = MarkupCompiler(default_renderers, default_element_info)
    return _default_compiler


def render(
    markup: MarkupInput,
    strict: Optional[bool] = None,
    compiler: Optional[MarkupCompiler] = None,
) -> Any:
    """Compile markup into a render tree.

    Args:
        markup: A markup string, or a sequence of them
        strict: Whether unresolved custom tags are errors
        compiler: Compiler to use; the default compiler when omitted

    Returns:
        Render tree, or a list of render trees for sequence input

    Examples:
        >>> render('<p class="lead">Hello</p>')["#attributes"]["class"]
        ['lead']
    """
    return (compiler or get_default_compiler()).render(markup, strict)
