"""Tests for Rich Console factory and theme."""

from io import StringIO

from brewstrap.output.console import BREW_THEME, create_console, get_output, style_for_status


class TestCreateConsole:
    def test_returns_console_with_stringio(self) -> None:
        assert isinstance(create_console().file, StringIO)

    def test_no_color_disables_ansi(self) -> None:
        console = create_console(no_color=True)
        console.print("[brew.ok]hello[/brew.ok]")
        output = get_output(console)
        assert "\x1b" not in output
        assert "hello" in output

    def test_custom_width(self) -> None:
        assert create_console(width=80).width == 80


class TestStatusStyles:
    def test_known_statuses(self) -> None:
        assert style_for_status("started") == "brew.status.started"
        assert style_for_status("none") == "brew.status.none"

    def test_unknown_status_unstyled(self) -> None:
        assert style_for_status("scheduled") == ""
        assert style_for_status(None) == ""

    def test_styles_exist_in_theme(self) -> None:
        for status in ("started", "stopped", "none", "error"):
            assert style_for_status(status) in BREW_THEME.styles
