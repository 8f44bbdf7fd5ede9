"""Main CLI entry point for the render-markup command-line tool.

Compiles markup files into JSON render trees, loading component renderers
from plugin modules, and lists the components a set of plugins provides.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from render_markup import __version__
from render_markup.api.compiler import MarkupCompiler
from render_markup.api.messages import LoggingMessenger
from render_markup.registry.element_info import ElementInfoRegistry
from render_markup.registry.plugins import load_plugins
from render_markup.registry.renderers import RendererRegistry
from render_markup.shared.config import CompilerConfig, ConfigError
from render_markup.shared.errors import RegistryError, TransformError
from render_markup.shared.logging import configure_logging, get_logger


class CLIConfig:
    """Configuration management for CLI operations."""

    def __init__(self) -> None:
        self.compiler_config = CompilerConfig()
        self.plugins: List[str] = []
        self.output_format = "json"
        self.indent = 2

    @classmethod
    def from_file(cls, config_path: Path) -> "CLIConfig":
        """Load CLI configuration from a JSON file.

        The file may hold a ``compiler`` section in ``CompilerConfig.to_dict``
        format, a ``plugins`` list, ``output_format`` and ``indent``.

        Raises:
            ConfigError: If the file cannot be read or is invalid
        """
        config = cls()
        try:
            with config_path.open(encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Could not load config file {config_path}: {e}") from e

        if "compiler" in data:
            config.compiler_config = CompilerConfig.from_dict(data["compiler"])
        config.plugins = list(data.get("plugins", config.plugins))
        config.output_format = data.get("output_format", config.output_format)
        config.indent = data.get("indent", config.indent)
        return config


class MarkupProcessor:
    """Core compilation logic for CLI operations."""

    def __init__(self, config: CLIConfig) -> None:
        self.config = config
        self.renderers = RendererRegistry()
        self.element_info = ElementInfoRegistry()
        load_plugins(config.plugins, self.renderers, self.element_info)
        self.messenger = LoggingMessenger()
        self.compiler = MarkupCompiler(
            self.renderers,
            self.element_info,
            config=config.compiler_config,
            messenger=self.messenger,
        )
        self.logger = get_logger(__name__, None, "cli_processor")

    def process_text(self, markup: str, source: str) -> Dict[str, Any]:
        """Compile markup and describe the outcome."""
        try:
            result = self.compiler.compile(markup)
        except TransformError as e:
            return {
                "source": source,
                "success": False,
                "error": str(e),
                "error_type": type(e).__name__,
            }
        outcome = result.summary()
        outcome["source"] = source
        outcome["tree"] = result.tree
        return outcome

    def process_file(self, path: Path) -> Dict[str, Any]:
        """Compile a markup file."""
        try:
            markup = path.read_text(encoding="utf-8")
        except OSError as e:
            self.logger.error("Failed to read file", extra={"file": str(path)})
            return {"source": str(path), "success": False, "error": str(e)}
        return self.process_text(markup, str(path))


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="render-markup",
        description="Compile component markup into render trees",
    )

    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    compile_parser = subparsers.add_parser("compile", help="Compile markup files")
    compile_parser.add_argument(
        "paths",
        nargs="*",
        type=Path,
        help="Markup files to compile"
    )
    compile_parser.add_argument(
        "--text", "-t",
        action="append",
        default=[],
        help="Markup to compile (may be repeated)"
    )
    compile_parser.add_argument(
        "--format", "-f",
        choices=["json", "tree", "summary"],
        help="Output format (default: json)"
    )
    compile_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )
    compile_parser.add_argument(
        "--non-strict",
        action="store_true",
        help="Render unresolved custom tags literally instead of failing"
    )
    compile_parser.add_argument(
        "--theme",
        help="Active theme consulted for theme-scoped renderers"
    )
    _add_common_options(compile_parser)

    components_parser = subparsers.add_parser(
        "components", help="List dispatch keys provided by plugins"
    )
    _add_common_options(components_parser)

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--plugin", "-p",
        action="append",
        default=[],
        help="Plugin module registering renderers (module or module:callable)"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path"
    )


def format_results(results: List[Dict[str, Any]], format_type: str, indent: int = 2) -> str:
    """Format compilation results for output."""
    if format_type == "tree":
        trees = [result.get("tree", {}) for result in results]
        return json.dumps(trees if len(trees) != 1 else trees[0], indent=indent, default=str)

    if format_type == "summary":
        lines = []
        successful = sum(1 for r in results if r.get("success", False))
        lines.append(f"Compiled {len(results)} inputs, {successful} successful")
        lines.append("-" * 60)
        for result in results:
            status = "ok" if result.get("success", False) else "FAILED"
            lines.append(f"{status} {result['source']}")
            if "error" in result:
                lines.append(f"   Error: {result['error']}")
            else:
                lines.append(
                    f"   Nodes: {result.get('nodes_transformed', 0)}, "
                    f"Components: {result.get('components_invoked', 0)}, "
                    f"Time: {result.get('processing_time_ms', 0):.1f}ms"
                )
                for diagnostic in result.get("diagnostics", []):
                    lines.append(f"   {diagnostic['severity']}: {diagnostic['message']}")
        return "\n".join(lines)

    return json.dumps(results, indent=indent, default=str)


def _load_config(args: argparse.Namespace) -> CLIConfig:
    config = CLIConfig.from_file(args.config) if args.config else CLIConfig()
    if not (args.verbose or args.quiet):
        configure_logging(config.compiler_config.global_.logging_level)
    config.plugins.extend(args.plugin)
    return config


def cmd_compile(args: argparse.Namespace) -> int:
    """Handle compile command."""
    if not args.paths and not args.text:
        print("Nothing to compile: give markup files or --text", file=sys.stderr)
        return 2

    config = _load_config(args)
    if args.non_strict:
        config.compiler_config = config.compiler_config.override(transform__strict=False)
    if args.theme:
        config.compiler_config = config.compiler_config.override(
            dispatch__active_theme=args.theme
        )
    if args.format:
        config.output_format = args.format

    processor = MarkupProcessor(config)
    results = [processor.process_file(path) for path in args.paths]
    results.extend(
        processor.process_text(text, f"<text {index}>")
        for index, text in enumerate(args.text, start=1)
    )

    formatted_output = format_results(results, config.output_format, config.indent)
    if args.output:
        try:
            args.output.write_text(formatted_output, encoding="utf-8")
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
        print(f"Results written to {args.output}", file=sys.stderr)
    else:
        print(formatted_output)

    successful = sum(1 for r in results if r.get("success", False))
    return 0 if successful == len(results) else 1


def cmd_components(args: argparse.Namespace) -> int:
    """Handle components command."""
    config = _load_config(args)
    processor = MarkupProcessor(config)
    for registration in processor.renderers:
        scope = "theme" if registration.theme else "module"
        print(f"{registration.dispatch_key}\t{registration.provider}\t{scope}")
    for key in processor.element_info:
        print(f"{key}\telement-info")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.verbose:
        configure_logging("DEBUG")
    elif args.quiet:
        configure_logging("ERROR")

    try:
        if args.command == "compile":
            return cmd_compile(args)
        if args.command == "components":
            return cmd_components(args)
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1
    except (ConfigError, RegistryError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
