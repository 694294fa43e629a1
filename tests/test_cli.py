"""Tests for jirakit.cli module."""

from datetime import date
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from typer.testing import CliRunner

from jirakit.cli import app
from jirakit.models import Issue, TempoLog, User
from jirakit.utils.errors import ConfigurationError, ExitCode, QueryError

runner = CliRunner()


@pytest.fixture
def jira():
    """Async client double handed to CLI commands."""
    client = AsyncMock()
    context = MagicMock()
    context.__aenter__.return_value = client
    context.__aexit__.return_value = False
    with patch("jirakit.cli.app.ConfigManager"), patch(
        "jirakit.cli.app._open_client", return_value=context
    ):
        yield client


class TestCLIVersion:
    """Tests for --version flag."""

    def test_version_flag(self):
        """--version shows version and exits."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert "0.4.0" in result.stdout

    def test_short_version_flag(self):
        """-v shows version and exits."""
        result = runner.invoke(app, ["-v"])

        assert result.exit_code == 0
        assert "0.4.0" in result.stdout

    def test_no_args_shows_help(self):
        """Running without a command prints usage."""
        result = runner.invoke(app, [])

        assert "Usage" in result.output


class TestIssueCommand:
    """Tests for the issue command."""

    def test_shows_issue(self, jira, issue_json):
        """The issue is fetched with the requested fields and rendered."""
        jira.get_issue.return_value = Issue.from_wire(issue_json)

        result = runner.invoke(app, ["issue", "PROJ-1", "-f", "labels", "-e", "changelog"])

        assert result.exit_code == 0
        assert "PROJ-1" in result.stdout
        assert "Fix the flux capacitor" in result.stdout
        jira.get_issue.assert_awaited_once_with("PROJ-1", fields=["labels"], expand=["changelog"])

    def test_transport_error_exit_code(self, jira):
        """Errors map to their exit code."""
        jira.get_issue.side_effect = QueryError("bad", jql="x", status_code=400)

        result = runner.invoke(app, ["issue", "PROJ-1"])

        assert result.exit_code == ExitCode.TRANSPORT_ERROR

    def test_configuration_error_exit_code(self):
        """Configuration problems exit with CONFIGURATION_ERROR."""
        with patch("jirakit.cli.app.ConfigManager") as mock_config_class:
            mock_config_class.return_value.load.side_effect = ConfigurationError("no url")

            result = runner.invoke(app, ["issue", "PROJ-1"])

        assert result.exit_code == ExitCode.CONFIGURATION_ERROR


class TestOtherCommands:
    """Tests for the remaining read and write commands."""

    def test_user(self, jira, user_json):
        """The user command looks the user up by login name."""
        jira.get_user_by_username.return_value = User.from_wire(user_json)

        result = runner.invoke(app, ["user", "chipp"])

        assert result.exit_code == 0
        assert "Vladimir Burdukov" in result.stdout
        jira.get_user_by_username.assert_awaited_once_with("chipp")

    def test_tempo(self, jira):
        """Dates are parsed and passed as calendar days."""
        jira.get_logs_for_user.return_value = [
            TempoLog.from_wire({"dateStarted": "2019-03-11T00:00:00.000", "timeSpentSeconds": 60})
        ]

        result = runner.invoke(app, ["tempo", "chipp", "2019-03-01", "2019-03-31"])

        assert result.exit_code == 0
        jira.get_logs_for_user.assert_awaited_once_with(
            "chipp", date(2019, 3, 1), date(2019, 3, 31)
        )

    def test_tempo_rejects_reversed_range(self, jira):
        """TO before FROM is refused without calling the server."""
        result = runner.invoke(app, ["tempo", "chipp", "2019-03-31", "2019-03-01"])

        assert result.exit_code == ExitCode.GENERAL_ERROR
        jira.get_logs_for_user.assert_not_awaited()

    def test_labels(self, jira):
        """Labels replace the existing set."""
        result = runner.invoke(app, ["labels", "PROJ-1", "backend", "urgent"])

        assert result.exit_code == 0
        jira.update_issue_labels.assert_awaited_once_with("PROJ-1", ["backend", "urgent"])


class TestConfigCommand:
    """Tests for the config command."""

    @patch("jirakit.cli.app.ConfigManager")
    def test_shows_config(self, mock_config_class):
        """config loads and shows the configuration."""
        mock_config = MagicMock()
        mock_config_class.return_value = mock_config

        result = runner.invoke(app, ["config"])

        assert result.exit_code == 0
        mock_config.load.assert_called_once()
        mock_config.show.assert_called_once()

    @patch("jirakit.cli.app.ConfigManager")
    def test_invalid_config(self, mock_config_class):
        """Invalid configuration exits with CONFIGURATION_ERROR."""
        mock_config_class.return_value.load.side_effect = ConfigurationError("bad")

        result = runner.invoke(app, ["config"])

        assert result.exit_code == ExitCode.CONFIGURATION_ERROR
