"""Tests for jirakit.utils.console module."""

from unittest.mock import patch

from jirakit.utils.console import (
    custom_theme,
    print_error,
    print_header,
    print_success,
    show_version,
)


class TestCustomTheme:
    """Tests for custom Rich theme."""

    def test_theme_styles(self):
        """Theme defines the message styles."""
        for style in ("error", "success", "warning", "info", "header"):
            assert style in custom_theme.styles


class TestPrintFunctions:
    """Tests for print helpers."""

    @patch("jirakit.utils.console.console_err")
    def test_print_error_goes_to_stderr(self, mock_console_err):
        """Errors are printed on the stderr console."""
        print_error("Something failed")

        printed = mock_console_err.print.call_args[0][0]
        assert "Something failed" in printed
        assert "[ERROR]" in printed

    @patch("jirakit.utils.console.console")
    def test_print_success(self, mock_console):
        """Success messages are printed on stdout."""
        print_success("Done")

        assert "Done" in mock_console.print.call_args[0][0]

    @patch("jirakit.utils.console.console")
    def test_print_header(self, mock_console):
        """Headers are framed with blank lines."""
        print_header("Configuration")

        assert mock_console.print.call_count == 3
        assert "=== Configuration ===" in mock_console.print.call_args_list[1][0][0]

    @patch("jirakit.utils.console.console")
    def test_show_version(self, mock_console):
        """show_version prints the package version."""
        show_version()

        assert "0.4.0" in mock_console.print.call_args[0][0]
