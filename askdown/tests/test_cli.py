"""Tests for the askdown command line interface."""

import json

from typer.testing import CliRunner

from askdown import __version__
from askdown.cli import app

runner = CliRunner()


class TestParseCommand:
    def test_summary_output(self):
        result = runner.invoke(app, ["parse", "?[%{{color}} Red//r | Blue//b]"])
        assert result.exit_code == 0
        assert "Type: buttons_only" in result.output
        assert "Variable: color" in result.output
        assert "Buttons: [Red(r), Blue(b)]" in result.output
        assert "Multi-select: No" in result.output

    def test_json_output(self):
        result = runner.invoke(app, ["parse", "--json", "?[%{{lang}} JS||Py]"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["type"] == "buttons_multi_select"
        assert data["buttons"] == [
            {"display": "JS", "value": "JS"},
            {"display": "Py", "value": "Py"},
        ]
        assert data["is_multi_select"] is True

    def test_remark_output(self):
        result = runner.invoke(app, ["parse", "--remark", "?[Continue]"])
        assert result.exit_code == 0
        assert json.loads(result.output) == {
            "buttonTexts": ["Continue"],
            "buttonValues": ["Continue"],
        }

    def test_error_output(self):
        result = runner.invoke(app, ["parse", "not a block"])
        assert result.exit_code == 0
        assert "Error: Invalid interaction format: not a block" in result.output

    def test_several_blocks(self):
        result = runner.invoke(app, ["parse", "?[A]", "?[%{{v}}...Q]"])
        assert "non_assignment_button" in result.output
        assert "text_only" in result.output

    def test_names_option(self):
        result = runner.invoke(
            app, ["parse", "--names", "permissive", "?[%{{full name}}...Your name]"]
        )
        assert "Variable: full name" in result.output


class TestScanCommand:
    def test_scan_file(self, tmp_path):
        doc = tmp_path / "lesson.md"
        doc.write_text(
            "# Lesson\n\nPick one: ?[%{{level}} Easy | Hard]\n\nSee ?[docs](http://x)\n",
            encoding="utf-8",
        )
        result = runner.invoke(app, ["scan", str(doc)])
        assert result.exit_code == 0
        lines = [json.loads(line) for line in result.output.splitlines() if line.strip()]
        assert len(lines) == 1
        assert lines[0]["line"] == 3
        assert lines[0]["block"] == "?[%{{level}} Easy | Hard]"
        assert lines[0]["properties"]["buttonTexts"] == ["Easy", "Hard"]

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["scan", str(tmp_path / "missing.md")])
        assert result.exit_code == 1


class TestTryCommand:
    def test_interactive_loop(self):
        result = runner.invoke(app, ["try"], input="?[Continue | Cancel]\nquit\n")
        assert result.exit_code == 0
        assert "Type: non_assignment_button" in result.output
        assert '"buttonTexts": ["Continue", "Cancel"]' in result.output

    def test_stops_at_end_of_input(self):
        result = runner.invoke(app, ["try"], input="?[%{{v}}...Q]\n")
        assert result.exit_code == 0
        assert "Type: text_only" in result.output


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output
