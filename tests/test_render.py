"""Tests for jirakit.cli.render module."""

from unittest.mock import patch

import pytest

from jirakit.cli.render import NOT_SET, format_duration, render_tempo_logs
from jirakit.models import TempoLog


class TestFormatDuration:
    """Tests for format_duration."""

    @pytest.mark.parametrize(
        ("seconds", "expected"),
        [(0, "0m"), (59, "0m"), (60, "1m"), (3600, "1h"), (5400, "1h 30m"), (None, NOT_SET)],
    )
    def test_format(self, seconds, expected):
        """Seconds render as hours and minutes."""
        assert format_duration(seconds) == expected


class TestRenderTempoLogs:
    """Tests for render_tempo_logs."""

    @patch("jirakit.cli.render.console")
    def test_total_skips_missing_durations(self, mock_console):
        """Entries without a duration count as zero."""
        logs = [
            TempoLog.from_wire({"dateStarted": "2019-03-12T00:00:00.000", "timeSpentSeconds": 3600}),
            TempoLog.from_wire({"dateStarted": "2019-03-11T00:00:00.000"}),
        ]

        render_tempo_logs(logs)

        assert mock_console.print.call_args[0][0] == "[bold]Total:[/bold] 1h"
