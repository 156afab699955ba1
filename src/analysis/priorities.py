"""Due-date annotation for task priority tables."""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from src.jira.dates import format_display_date
from src.jira.types import JiraIssue


NOT_AVAILABLE = "N/A"
OVERDUE = "Overdue"
OVERDUE_MARKER = " ⚠️"
LABEL_SEPARATOR = ", "


@dataclass
class PriorityRow:
    """One row of the task priority table."""

    key: str
    summary: str
    due_date: str
    overdue: bool
    time_left: str
    priority: str
    status: str
    labels: str


def format_time_left(due: Optional[datetime], now: datetime) -> str:
    """Describe the time remaining until a due date.

    Returns "Overdue" once the due date is reached, days to one decimal
    while at least 24 hours remain, hours to one decimal otherwise.
    """
    if due is None:
        return NOT_AVAILABLE
    remaining = due - now
    if remaining <= timedelta(0):
        return OVERDUE
    hours_left = remaining.total_seconds() / 3600
    if hours_left >= 24:
        return f"{hours_left / 24:.1f} days"
    return f"{hours_left:.1f} hrs"


def rank_by_due_date(issues: list[JiraIssue], now: datetime) -> list[PriorityRow]:
    """Annotate issues with due-date display fields.

    Input order is kept; ordering by due date is left to the JQL query.
    """
    rows = []
    for issue in issues:
        due = issue.duedate
        rows.append(
            PriorityRow(
                key=issue.key,
                summary=issue.summary,
                due_date=format_display_date(due) if due else NOT_AVAILABLE,
                overdue=due is not None and due < now,
                time_left=format_time_left(due, now),
                priority=issue.priority or NOT_AVAILABLE,
                status=issue.status or NOT_AVAILABLE,
                labels=LABEL_SEPARATOR.join(issue.labels) if issue.labels else NOT_AVAILABLE,
            )
        )
    return rows


def format_priority_table(rows: list[PriorityRow], assignee_name: str, project_key: str) -> str:
    """Render priority rows as a Markdown table with a heading."""
    lines = [
        f"### Task Priorities for {assignee_name} in Project {project_key}",
        "| Issue Key | Summary | Due Date | Priority | Status | Time Left | Labels |",
        "|-----------|---------|----------|----------|--------|-----------|--------|",
    ]
    for row in rows:
        marker = OVERDUE_MARKER if row.overdue else ""
        lines.append(
            f"| {row.key} | {row.summary} | {row.due_date}{marker} | {row.priority} "
            f"| {row.status} | {row.time_left} | {row.labels} |"
        )
    return "\n".join(lines) + "\n"
