"""Tests for forkrel.output.console module."""

from __future__ import annotations

import pytest

from forkrel.output.console import (
    ConsoleProtocol,
    MockConsole,
    OutputRecord,
    RichConsole,
    Style,
)


class TestStyle:
    """Test Style enum."""

    def test_str_conversion(self) -> None:
        assert str(Style.SUCCESS) == "success"
        assert str(Style.DIM) == "dim"
        assert str(Style.DEFAULT) == "default"


class TestMockConsole:
    """Test MockConsole for testing purposes."""

    def test_print_captures_message(self) -> None:
        console = MockConsole()
        console.print("hello")
        assert console.outputs == [OutputRecord("hello", Style.DEFAULT)]

    def test_tagged_messages(self) -> None:
        console = MockConsole()
        console.success("done")
        console.error("failed")
        console.warning("careful")
        console.info("fetching")
        assert console.messages == [
            "OK done",
            "error: failed",
            "warning: careful",
            ":: fetching",
        ]

    def test_header_and_newline(self) -> None:
        console = MockConsole()
        console.header("Next steps")
        console.newline()
        assert console.outputs[0].style == Style.HEADER
        assert console.outputs[1].message == ""

    def test_helpers(self) -> None:
        console = MockConsole()
        assert console.has_error() is False
        assert console.has_warning() is False
        console.print("hello world")
        console.print("hello there", Style.DIM)
        console.warning("hmm")
        assert len(console.find("hello")) == 2
        assert console.count(Style.DIM) == 1
        assert console.has_warning() is True
        assert console.text == "hello world\nhello there\nwarning: hmm"
        console.clear()
        assert console.outputs == []

    def test_satisfies_protocol(self) -> None:
        console: ConsoleProtocol = MockConsole()
        console.info("typed")


class TestRichConsole:
    """RichConsole writes literal text to stdout."""

    def test_brackets_are_not_markup(self, capsys: pytest.CaptureFixture[str]) -> None:
        console = RichConsole()
        console.print("## [Unreleased]")
        console.print("[bold]not bold[/bold]", Style.DIM)

        out = capsys.readouterr().out
        assert "## [Unreleased]" in out
        assert "[bold]not bold[/bold]" in out

    def test_tagged_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        console = RichConsole()
        console.info("Last fork release: fork-v[1]")
        console.warning("could not fetch upstream")

        out = capsys.readouterr().out
        assert ":: Last fork release: fork-v[1]" in out
        assert "warning: could not fetch upstream" in out

    def test_stderr_backend(self, capsys: pytest.CaptureFixture[str]) -> None:
        console = RichConsole(stderr=True)
        console.error("boom")

        captured = capsys.readouterr()
        assert "error: boom" in captured.err
        assert captured.out == ""
