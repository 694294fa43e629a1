"""Command-line interface for jirakit."""

from jirakit.cli.app import app

__all__ = ["app"]
