"""Tests for the ``pagelinks run`` command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from pagelinks.cli import cli

SCRIPT = """\
@addPages X Y Z
@addLinks X Y
@addLinks Y Z
@isConnected X Z
@isConnected Z X
"""


@pytest.mark.usefixtures("_isolated_cwd")
class TestRunCommand:
    def test_stdin_scenario(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["run"], input=SCRIPT)
        assert result.exit_code == 0
        assert result.stdout == "1\n0\n"
        assert result.stderr == ""

    def test_file_argument(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        script = tmp_path / "links.txt"
        script.write_text(SCRIPT)
        result = cli_runner.invoke(cli, ["run", str(script)])
        assert result.exit_code == 0
        assert result.stdout == "1\n0\n"

    def test_missing_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(cli, ["run", str(tmp_path / "nope.txt")])
        assert result.exit_code == 2

    def test_unknown_pages(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["run"], input="@isConnected Q R\n")
        assert result.exit_code == 1
        assert result.stdout == ""
        assert "not found" in result.stderr

    def test_usage_error_keeps_going(self, cli_runner: CliRunner) -> None:
        script = "@addPages A\n@isConnected A\n@isConnected A A\n"
        result = cli_runner.invoke(cli, ["run"], input=script)
        assert result.exit_code == 1
        assert result.stdout == "1\n"
        assert "line 2" in result.stderr
        assert "exactly 2 arguments" in result.stderr

    def test_duplicate_page(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["run"], input="@addPages A\n@addPages A\n")
        assert result.exit_code == 1
        assert "already exists" in result.stderr

    def test_unknown_verb(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["run"], input="@deletePage A\n")
        assert result.exit_code == 1
        assert "Unrecognized command '@deletePage'" in result.stderr

    def test_blank_lines_ignored(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["run"], input="\n@addPages A\n\n@isConnected A A\n")
        assert result.exit_code == 0
        assert result.stdout == "1\n"

    def test_invalid_utf8_fails_only_its_line(self, cli_runner: CliRunner) -> None:
        script = b"@addPages caf\xe9\n@addPages A\n@isConnected A A\n"
        result = cli_runner.invoke(cli, ["run"], input=script)
        assert result.exit_code == 1
        assert result.stdout == "1\n"
        assert "line 1" in result.stderr
        assert "not valid UTF-8" in result.stderr

    def test_utf8_names(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        script = tmp_path / "links.txt"
        script.write_text(
            "@addPages caf\u00e9 na\u00efve\n"
            "@addLinks caf\u00e9 na\u00efve\n"
            "@isConnected caf\u00e9 na\u00efve\n",
            encoding="utf-8",
        )
        result = cli_runner.invoke(cli, ["run", str(script)])
        assert result.exit_code == 0
        assert result.stdout == "1\n"

    def test_crlf_line_endings(self, cli_runner: CliRunner) -> None:
        script = b"@addPages A B\r\n\r\n@addLinks A B\r\n@isConnected A B\r\n"
        result = cli_runner.invoke(cli, ["run"], input=script)
        assert result.exit_code == 0
        assert result.stdout == "1\n"

    def test_form_feed_line_is_error(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["run"], input="@addPages A\n\f\n@isConnected A A\n")
        assert result.exit_code == 1
        assert result.stdout == "1\n"
        assert "Empty command" in result.stderr

    def test_examples(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["run", "--examples"])
        assert result.exit_code == 0
        assert "@isConnected" in result.output


@pytest.mark.usefixtures("_isolated_cwd")
class TestRunOutputModes:
    def test_json_lines(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "run"], input=SCRIPT)
        assert result.exit_code == 0
        docs = [json.loads(line) for line in result.stdout.splitlines()]
        assert [d["op"] for d in docs] == [
            "add_pages",
            "add_links",
            "add_links",
            "is_connected",
            "is_connected",
        ]
        assert [d["data"]["connected"] for d in docs[3:]] == [True, False]
        assert docs[3]["meta"]["line"] == 4

    def test_json_error_to_stderr(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "run"], input="@isConnected Q R\n")
        assert result.exit_code == 1
        doc = json.loads(result.stderr)
        assert doc["error"]["code"] == "NOT_FOUND"

    def test_quiet_error(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "run"], input="@addLinks A\n")
        assert result.exit_code == 1
        assert result.stderr.startswith("ERROR: add_links")

    def test_verbose_summary(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-v", "run"], input=SCRIPT)
        assert result.exit_code == 0
        assert result.stdout == "1\n0\n"
        assert "Run summary" in result.stderr

    def test_summary_disabled_by_config(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "pagelinks.toml").write_text("[output]\nsummary = false\n")
        result = cli_runner.invoke(cli, ["-v", "run"], input=SCRIPT)
        assert result.exit_code == 0
        assert "Run summary" not in result.stderr

    def test_blank_lines_as_errors_by_config(
        self, cli_runner: CliRunner, tmp_path: Path
    ) -> None:
        (tmp_path / "pagelinks.toml").write_text("[interpreter]\nskip_blank_lines = false\n")
        result = cli_runner.invoke(cli, ["run"], input="@addPages A\n\n")
        assert result.exit_code == 1
        assert "Empty command line" in result.stderr
