"""Tests for the output layer.

Covers format resolution, the stdout/stderr split, quiet and verbose
modes, JSON wrapping of plain messages, and panel rendering.
"""

from __future__ import annotations

import json

import pytest

from recipe_explorer.output import OutputFormat, OutputManager, get_output, reset_output


@pytest.fixture()
def non_tty(monkeypatch):
    monkeypatch.setattr("recipe_explorer.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    monkeypatch.setattr("recipe_explorer.output._is_tty", lambda: True)


class TestOutputFormatResolution:
    def test_auto_resolves_to_plain_when_not_tty(self, non_tty):
        assert OutputManager().format == OutputFormat.PLAIN

    def test_auto_resolves_to_rich_when_tty(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert OutputManager().format == OutputFormat.RICH

    def test_no_color_env_forces_plain(self, tty, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert OutputManager().format == OutputFormat.PLAIN


class TestStreams:
    def test_data_to_stdout_diagnostics_to_stderr(self, capfd, non_tty):
        out = OutputManager(no_color=True)
        out.print_data("data")
        out.info("info")
        out.error("broken")
        captured = capfd.readouterr()
        assert captured.out == "data\n"
        assert captured.err == "info\nError: broken\n"

    def test_quiet_keeps_warnings_and_errors(self, capfd, non_tty):
        out = OutputManager(no_color=True, quiet=True)
        out.info("hidden")
        out.success("hidden")
        out.warning("careful")
        out.error("broken")
        assert capfd.readouterr().err == "Warning: careful\nError: broken\n"

    def test_debug_only_when_verbose(self, capfd, non_tty):
        OutputManager(no_color=True).debug("quiet")
        OutputManager(no_color=True, verbose=True).debug("loud")
        assert capfd.readouterr().err == "[debug] loud\n"

    def test_progress_only_on_tty(self, capfd, monkeypatch):
        monkeypatch.setattr("recipe_explorer.output._is_tty", lambda: False)
        OutputManager(format=OutputFormat.PLAIN, no_color=True).progress("working")
        assert capfd.readouterr().err == ""
        monkeypatch.setattr("recipe_explorer.output._is_tty", lambda: True)
        OutputManager(format=OutputFormat.PLAIN, no_color=True).progress("working")
        assert capfd.readouterr().err == "working\n"


class TestFormats:
    def test_json_wraps_plain_messages(self, capfd, non_tty):
        OutputManager(format=OutputFormat.JSON).format_response("No recipes found")
        assert json.loads(capfd.readouterr().out) == {"message": "No recipes found"}

    def test_json_table_is_list_of_objects(self, capfd, non_tty):
        OutputManager(format=OutputFormat.JSON).print_table(["ID", "Name"], [["1", "Soup"]])
        assert json.loads(capfd.readouterr().out) == [{"ID": "1", "Name": "Soup"}]

    def test_plain_panel_is_title_then_body(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN).print_panel("body", title="Title")
        assert capfd.readouterr().out == "Title\nbody\n"

    def test_rich_panel_does_not_interpret_markup(self, capfd, non_tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        OutputManager(format=OutputFormat.RICH, no_color=True).print_panel(
            "[bold]literal[/bold]", title="[red]Soup[/red]"
        )
        out = capfd.readouterr().out
        assert "[bold]literal[/bold]" in out
        assert "[red]Soup[/red]" in out


class TestGlobalInstance:
    def test_get_output_is_lazy_and_resettable(self):
        reset_output()
        first = get_output()
        assert get_output() is first
        reset_output()
        assert get_output() is not first
