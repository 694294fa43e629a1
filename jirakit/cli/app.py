"""Typer application and entry point for the CLI.

Every command loads configuration, opens one JiraClient, runs a single
operation and renders the result. Errors are printed in red and mapped to
the error's exit code.
"""

import asyncio
from collections.abc import Callable, Coroutine
from datetime import datetime
from typing import Annotated, Any, TypeVar

import typer

from jirakit import SCRIPT_NAME
from jirakit.cli.render import (
    render_issue,
    render_issues_page,
    render_sprints,
    render_tempo_logs,
    render_user,
    render_worklogs,
)
from jirakit.client import JiraClient
from jirakit.config.manager import ConfigManager
from jirakit.config.settings import Settings
from jirakit.utils.console import print_error, print_info, print_success, show_version
from jirakit.utils.errors import ExitCode, JirakitError
from jirakit.utils.logging import setup_logging

T = TypeVar("T")

app = typer.Typer(
    name=SCRIPT_NAME,
    help="jirakit - Typed command-line access to the Jira REST API",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Display version and exit."""
    if value:
        show_version()
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            callback=version_callback,
            is_eager=True,
            help="Show version information",
        ),
    ] = None,
) -> None:
    """jirakit - Typed command-line access to the Jira REST API.

    Reads JIRA_BASE_URL and credential settings from ~/.jirakit-config or
    the environment.
    """
    setup_logging()


def _open_client(settings: Settings) -> JiraClient:
    return JiraClient.from_settings(settings)


def _run(operation: Callable[[JiraClient], Coroutine[Any, Any, T]]) -> T:
    """Run ``operation`` against a freshly configured client."""
    try:
        settings = ConfigManager().load()

        async def runner() -> T:
            async with _open_client(settings) as client:
                return await operation(client)

        return asyncio.run(runner())
    except JirakitError as e:
        print_error(str(e))
        raise typer.Exit(e.exit_code) from e
    except KeyboardInterrupt as e:
        print_info("\nOperation cancelled by user")
        raise typer.Exit(ExitCode.GENERAL_ERROR) from e


@app.command()
def issue(
    key: Annotated[str, typer.Argument(help="Issue key, e.g. PROJ-42")],
    field: Annotated[
        list[str] | None,
        typer.Option("--field", "-f", help="Extra field to request (repeatable)"),
    ] = None,
    expand: Annotated[
        list[str] | None,
        typer.Option("--expand", "-e", help="Expand directive, e.g. changelog (repeatable)"),
    ] = None,
) -> None:
    """Show one issue."""
    result = _run(lambda client: client.get_issue(key, fields=field, expand=expand))
    render_issue(result)


@app.command()
def sprints(
    board_id: Annotated[int, typer.Argument(help="Agile board id", min=0)],
    start_at: Annotated[int, typer.Option("--start-at", help="Page offset", min=0)] = 0,
) -> None:
    """List the sprints of an agile board (one page)."""
    page = _run(lambda client: client.get_sprints_for_board(board_id, start_at))
    render_sprints(page)


@app.command()
def worklogs(
    issue_id: Annotated[str, typer.Argument(help="Issue id or key")],
    start_at: Annotated[int, typer.Option("--start-at", help="Page offset", min=0)] = 0,
) -> None:
    """List the worklogs of an issue (one page)."""
    page = _run(lambda client: client.get_worklogs_for_issue(issue_id, start_at))
    render_worklogs(page)


@app.command()
def user(
    username: Annotated[str, typer.Argument(help="Login name")],
) -> None:
    """Show a user and their groups."""
    result = _run(lambda client: client.get_user_by_username(username))
    render_user(result)


@app.command()
def search(
    jql: Annotated[str, typer.Argument(help="JQL query")],
    start_at: Annotated[int, typer.Option("--start-at", help="Page offset", min=0)] = 0,
    max_results: Annotated[
        int, typer.Option("--max-results", help="Page size", min=1)
    ] = 50,
) -> None:
    """Search issues with JQL (one page)."""
    page = _run(lambda client: client.search_issues(jql, start_at, max_results))
    render_issues_page(page)


@app.command()
def tempo(
    username: Annotated[str, typer.Argument(help="Login name")],
    date_from: Annotated[
        datetime, typer.Argument(formats=["%Y-%m-%d"], help="First day (YYYY-MM-DD)")
    ],
    date_to: Annotated[
        datetime, typer.Argument(formats=["%Y-%m-%d"], help="Last day (YYYY-MM-DD)")
    ],
) -> None:
    """Show a user's Tempo worklogs between two dates."""
    if date_to < date_from:
        print_error("TO must not be before FROM")
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    logs = _run(
        lambda client: client.get_logs_for_user(username, date_from.date(), date_to.date())
    )
    render_tempo_logs(logs)


@app.command()
def labels(
    key: Annotated[str, typer.Argument(help="Issue key")],
    label: Annotated[list[str], typer.Argument(help="Labels to set (replaces existing)")],
) -> None:
    """Replace the labels of an issue."""
    _run(lambda client: client.update_issue_labels(key, label))
    print_success(f"Updated labels of {key}: {', '.join(label)}")


@app.command()
def config() -> None:
    """Show the current configuration."""
    manager = ConfigManager()
    try:
        manager.load()
    except JirakitError as e:
        print_error(str(e))
        raise typer.Exit(e.exit_code) from e
    manager.show()
