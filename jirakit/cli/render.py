"""Rich renderers for CLI output."""

from __future__ import annotations

from collections.abc import Iterable

from rich.table import Table

from jirakit.models import AgilePage, Issue, IssuesPage, Sprint, TempoLog, User, Worklogs
from jirakit.utils.console import console

NOT_SET = "[dim]-[/dim]"


def format_duration(seconds: int | None) -> str:
    """Render seconds as ``1h 30m``; None as a dash."""
    if seconds is None:
        return NOT_SET
    hours, remainder = divmod(seconds, 3600)
    minutes = remainder // 60
    if hours and minutes:
        return f"{hours}h {minutes}m"
    if hours:
        return f"{hours}h"
    return f"{minutes}m"


def _user(user: User | None) -> str:
    return str(user) if user is not None else NOT_SET


def render_issue(issue: Issue) -> None:
    fields = issue.fields
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold")
    table.add_column()
    table.add_row("Key", issue.key)
    table.add_row("Summary", fields.summary)
    table.add_row("Type", fields.issue_type.name)
    table.add_row("Status", fields.status.name)
    table.add_row("Priority", fields.priority.name if fields.priority else NOT_SET)
    table.add_row("Creator", _user(fields.creator))
    table.add_row("Assignee", _user(fields.assignee))
    table.add_row("Created", fields.created.isoformat())
    if fields.resolution_date is not None:
        table.add_row("Resolved", fields.resolution_date.isoformat())
    if fields.story_points is not None:
        table.add_row("Story points", f"{fields.story_points:g}")
    if fields.labels:
        table.add_row("Labels", ", ".join(fields.labels))
    if fields.parent is not None:
        table.add_row("Parent", fields.parent.key)
    if fields.subtasks:
        table.add_row("Subtasks", ", ".join(subtask.key for subtask in fields.subtasks))
    if fields.time_spent is not None:
        table.add_row("Time spent", format_duration(fields.time_spent))
    console.print(table)

    if issue.changelog is not None and issue.changelog.histories:
        history_table = Table(title="Changelog", show_header=True, header_style="bold")
        history_table.add_column("When")
        history_table.add_column("Author")
        history_table.add_column("Field")
        history_table.add_column("From")
        history_table.add_column("To")
        for history in issue.changelog.histories:
            when = history.created.isoformat() if history.created else NOT_SET
            for item in history.items:
                history_table.add_row(
                    when,
                    str(history.author),
                    item.field,
                    item.from_string or NOT_SET,
                    item.to_string or NOT_SET,
                )
        console.print(history_table)


def render_issues_page(page: IssuesPage) -> None:
    table = Table(show_header=True, header_style="bold")
    table.add_column("Key")
    table.add_column("Status")
    table.add_column("Assignee")
    table.add_column("Summary")
    for issue in page.issues:
        table.add_row(
            issue.key,
            issue.fields.status.name,
            _user(issue.fields.assignee),
            issue.fields.summary,
        )
    console.print(table)
    first = page.start_at + 1 if page.issues else 0
    last = page.start_at + len(page.issues)
    console.print(f"[dim]Showing {first}-{last} of {page.total}[/dim]")


def render_sprints(page: AgilePage[Sprint]) -> None:
    table = Table(show_header=True, header_style="bold")
    table.add_column("Id", justify="right")
    table.add_column("Name")
    table.add_column("State")
    table.add_column("Start")
    table.add_column("End")
    for sprint in page.values:
        table.add_row(
            str(sprint.id),
            sprint.name,
            sprint.state,
            sprint.start_date.date().isoformat() if sprint.start_date else NOT_SET,
            sprint.end_date.date().isoformat() if sprint.end_date else NOT_SET,
        )
    console.print(table)
    if page.next_start_at is not None:
        console.print(f"[dim]More sprints: --start-at {page.next_start_at}[/dim]")


def render_worklogs(worklogs: Worklogs) -> None:
    table = Table(show_header=True, header_style="bold")
    table.add_column("Id", justify="right")
    table.add_column("Date")
    table.add_column("Author")
    table.add_column("Spent", justify="right")
    for worklog in worklogs.worklogs:
        table.add_row(
            worklog.id,
            worklog.date_started.isoformat(),
            str(worklog.author),
            format_duration(worklog.time_spent),
        )
    console.print(table)
    total = sum(worklog.time_spent for worklog in worklogs.worklogs)
    console.print(f"[bold]Total:[/bold] {format_duration(total)} ({worklogs.total} entries)")


def render_user(user: User) -> None:
    console.print(f"[bold]{user}[/bold] ({user.name})")
    console.print(f"  Key: {user.key}")
    if user.email_address:
        console.print(f"  E-mail: {user.email_address}")
    if user.active is not None:
        console.print(f"  Active: {user.active}")
    if user.groups.items:
        console.print(f"  Groups: {', '.join(user.groups.names)}")


def render_tempo_logs(logs: Iterable[TempoLog]) -> None:
    table = Table(show_header=True, header_style="bold")
    table.add_column("Date")
    table.add_column("Spent", justify="right")
    total = 0
    for log in sorted(logs, key=lambda entry: entry.date_started):
        table.add_row(log.date_started.isoformat(), format_duration(log.time_spent))
        total += log.time_spent or 0
    console.print(table)
    console.print(f"[bold]Total:[/bold] {format_duration(total)}")


__all__ = [
    "format_duration",
    "render_issue",
    "render_issues_page",
    "render_sprints",
    "render_tempo_logs",
    "render_user",
    "render_worklogs",
]
