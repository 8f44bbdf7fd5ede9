"""Tests for the CLI main module."""

import json
import textwrap
from pathlib import Path
from unittest.mock import patch

import pytest

from render_markup.cli.main import (
    CLIConfig,
    MarkupProcessor,
    create_argument_parser,
    format_results,
    main,
)
from render_markup.shared.config import ConfigError

PLUGIN_SOURCE = textwrap.dedent('''
    def register(renderers, element_info):
        renderers.register("x_widget_component", lambda props, value: {"#type": "foo"}, "demo")
        element_info.register("textfield", {"#type": "textfield"})
''')


@pytest.fixture
def plugin(tmp_path, monkeypatch):
    """Write an importable plugin module and return its name."""
    (tmp_path / "cli_test_plugin.py").write_text(PLUGIN_SOURCE, encoding="utf-8")
    monkeypatch.syspath_prepend(str(tmp_path))
    return "cli_test_plugin"


class TestCLIConfig:
    """Test CLI configuration management."""

    def test_default_config(self):
        """Test default configuration values."""
        config = CLIConfig()

        assert config.plugins == []
        assert config.output_format == "json"
        assert config.indent == 2
        assert config.compiler_config.strict is True

    def test_config_from_file(self, tmp_path):
        """Test loading configuration from file."""
        config_path = tmp_path / "render-markup.json"
        config_path.write_text(json.dumps({
            "compiler": {"transform": {"strict": False}},
            "plugins": ["my_plugin"],
            "output_format": "tree",
            "indent": 4,
        }))

        config = CLIConfig.from_file(config_path)

        assert config.compiler_config.strict is False
        assert config.plugins == ["my_plugin"]
        assert config.output_format == "tree"
        assert config.indent == 4

    def test_config_from_nonexistent_file(self):
        """Test handling non-existent config file."""
        with pytest.raises(ConfigError, match="Could not load config file"):
            CLIConfig.from_file(Path("nonexistent.json"))

    def test_config_with_invalid_json(self, tmp_path):
        """Test handling malformed config files."""
        config_path = tmp_path / "bad.json"
        config_path.write_text("{not json")

        with pytest.raises(ConfigError):
            CLIConfig.from_file(config_path)


class TestMarkupProcessor:
    """Test compilation through the CLI processor."""

    def test_process_text_success(self, plugin):
        """Test compiling markup with plugin renderers."""
        config = CLIConfig()
        config.plugins = [plugin]
        processor = MarkupProcessor(config)

        outcome = processor.process_text('<x-widget name="a"/><x-widget name="b"/>', "inline")

        assert outcome["success"] is True
        assert outcome["source"] == "inline"
        assert outcome["tree"] == {"a": {"#type": "foo"}, "b": {"#type": "foo"}}
        assert outcome["recovered_fragments"] == 1

    def test_process_text_transform_error(self):
        """Test fatal transform errors are reported per input."""
        processor = MarkupProcessor(CLIConfig())

        outcome = processor.process_text("<x-widget/>", "inline")

        assert outcome["success"] is False
        assert outcome["error_type"] == "UnresolvedComponentError"

    def test_process_text_parse_error(self):
        """Test malformed markup is reported in the messenger."""
        processor = MarkupProcessor(CLIConfig())

        outcome = processor.process_text("<div>", "inline")

        assert outcome["success"] is False
        assert outcome["tree"] == {}
        assert processor.messenger.messages

    def test_process_file(self, tmp_path):
        """Test compiling a markup file."""
        markup_file = tmp_path / "page.xml"
        markup_file.write_text("<p>Hello</p>", encoding="utf-8")

        outcome = MarkupProcessor(CLIConfig()).process_file(markup_file)

        assert outcome["success"] is True
        assert outcome["tree"]["#value"] == "Hello"

    def test_process_nonexistent_file(self):
        """Test handling files that cannot be read."""
        outcome = MarkupProcessor(CLIConfig()).process_file(Path("missing.xml"))

        assert outcome["success"] is False
        assert "error" in outcome


class TestArgumentParser:
    """Test command-line argument parsing."""

    def test_compile_command_with_options(self):
        """Test compile command options."""
        parser = create_argument_parser()
        args = parser.parse_args([
            "-v", "compile", "page.xml", "--text", "<p/>", "--format", "tree",
            "--non-strict", "--theme", "olivero", "-p", "my_plugin",
        ])

        assert args.command == "compile"
        assert args.verbose is True
        assert args.paths == [Path("page.xml")]
        assert args.text == ["<p/>"]
        assert args.format == "tree"
        assert args.non_strict is True
        assert args.theme == "olivero"
        assert args.plugin == ["my_plugin"]

    def test_components_command(self):
        """Test components command options."""
        args = create_argument_parser().parse_args(["components", "--plugin", "a", "-p", "b"])

        assert args.command == "components"
        assert args.plugin == ["a", "b"]


class TestFormatResults:
    """Test output formatting."""

    RESULTS = [
        {
            "source": "a.xml",
            "success": True,
            "tree": {"#type": "foo"},
            "nodes_transformed": 1,
            "components_invoked": 1,
            "processing_time_ms": 0.5,
            "diagnostics": [{"severity": "INFO", "message": "recovered", "component": "c"}],
        },
        {"source": "b.xml", "success": False, "error": "No renderer found"},
    ]

    def test_format_json(self):
        """Test JSON output of full results."""
        assert json.loads(format_results(self.RESULTS, "json"))[1]["source"] == "b.xml"

    def test_format_tree(self):
        """Test tree output for one and several results."""
        assert json.loads(format_results(self.RESULTS[:1], "tree")) == {"#type": "foo"}
        assert json.loads(format_results(self.RESULTS, "tree")) == [{"#type": "foo"}, {}]

    def test_format_summary(self):
        """Test human-readable summary."""
        output = format_results(self.RESULTS, "summary")

        assert output.startswith("Compiled 2 inputs, 1 successful")
        assert "FAILED b.xml" in output
        assert "Error: No renderer found" in output
        assert "INFO: recovered" in output


class TestMain:
    """Test the CLI entry point."""

    @pytest.fixture(autouse=True)
    def log_setup(self):
        """Keep main() from attaching handlers to the package logger."""
        with patch("render_markup.cli.main.configure_logging") as mock_configure:
            yield mock_configure

    def test_main_no_args(self):
        """Test running without a command."""
        assert main([]) == 1

    def test_compile_text(self, plugin, capsys):
        """Test compiling inline markup to a tree."""
        exit_code = main([
            "compile", "--text", '<x-widget name="a"/><x-widget name="b"/>',
            "--format", "tree", "-p", plugin,
        ])

        assert exit_code == 0
        assert json.loads(capsys.readouterr().out) == {
            "a": {"#type": "foo"},
            "b": {"#type": "foo"},
        }

    def test_compile_non_strict(self, capsys):
        """Test --non-strict renders unknown tags literally."""
        exit_code = main(["compile", "--text", "<x-widget/>", "--format", "tree", "--non-strict"])

        assert exit_code == 0
        assert json.loads(capsys.readouterr().out)["#tag"] == "x-widget"

    def test_compile_failure_exit_code(self, capsys):
        """Test unresolved components fail the command."""
        assert main(["compile", "--text", "<x-widget/>"]) == 1
        assert "UnresolvedComponentError" in capsys.readouterr().out

    def test_compile_without_input(self):
        """Test compile needs files or text."""
        assert main(["compile"]) == 2

    def test_compile_to_output_file(self, tmp_path):
        """Test writing results to a file."""
        output_file = tmp_path / "out.json"

        assert main(["compile", "--text", "<p/>", "--output", str(output_file)]) == 0
        assert json.loads(output_file.read_text())[0]["tree"]["#tag"] == "p"

    def test_unknown_plugin(self, capsys):
        """Test plugin import failures."""
        assert main(["components", "-p", "no_such_cli_plugin"]) == 2
        assert "Cannot import plugin" in capsys.readouterr().err

    def test_components_listing(self, plugin, capsys):
        """Test listing plugin-provided components."""
        assert main(["components", "-p", plugin]) == 0

        lines = capsys.readouterr().out.splitlines()
        assert "x_widget_component\tdemo\tmodule" in lines
        assert "textfield\telement-info" in lines

    def test_main_keyboard_interrupt(self):
        """Test handling of keyboard interrupt."""
        with patch("render_markup.cli.main.cmd_compile", side_effect=KeyboardInterrupt):
            assert main(["compile", "--text", "<p/>"]) == 130

    def test_logging_level_from_config_file(self, tmp_path, log_setup):
        """Test the configured level applies when no verbosity flag is given."""
        config_path = tmp_path / "render-markup.json"
        config_path.write_text(json.dumps({"compiler": {"global_": {"logging_level": "DEBUG"}}}))

        assert main(["compile", "--text", "<p/>", "--config", str(config_path)]) == 0
        log_setup.assert_called_once_with("DEBUG")

    def test_verbosity_flag_overrides_config_file(self, tmp_path, log_setup):
        """Test -q wins over the configured level."""
        config_path = tmp_path / "render-markup.json"
        config_path.write_text(json.dumps({"compiler": {"global_": {"logging_level": "DEBUG"}}}))

        assert main(["-q", "components", "--config", str(config_path)]) == 0
        log_setup.assert_called_once_with("ERROR")

    def test_default_logging_level(self, log_setup):
        """Test warnings are shown by default."""
        main(["components"])

        log_setup.assert_called_once_with("WARNING")

    def test_numeric_names_do_not_duplicate_json_keys(self, capsys):
        """Test a child named "0" shares the slot of the first positional child."""
        exit_code = main([
            "compile", "--text", '<div><p>a</p><p name="0">b</p></div>', "--format", "tree",
        ])

        assert exit_code == 0
        output = capsys.readouterr().out
        top_level_keys = [key for key, _ in json.loads(output, object_pairs_hook=list)]
        assert top_level_keys.count("0") == 1
        assert [item["#value"] for item in json.loads(output)["0"]] == ["a", "b"]
