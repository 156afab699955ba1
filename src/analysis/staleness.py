"""Stale issue detection.

An issue is stale when its status category has not changed for longer than
STALE_WINDOW. Epics and issues already in the Done category are never stale.
"""
from datetime import datetime, timedelta

from src.jira.dates import format_display_date
from src.jira.types import DONE_STATUS_CATEGORY, EPIC_ISSUE_TYPE, JiraIssue


STALE_WINDOW = timedelta(days=14)


def is_stale(issue: JiraIssue, now: datetime) -> bool:
    """Check whether an issue's status category is older than STALE_WINDOW.

    The boundary itself is not stale. Issues with no recorded transition
    are not stale either.
    """
    if issue.issue_type == EPIC_ISSUE_TYPE:
        return False
    if issue.status_category == DONE_STATUS_CATEGORY:
        return False
    if issue.status_category_changed is None:
        return False
    return now > issue.status_category_changed + STALE_WINDOW


def find_stale_issues(issues: list[JiraIssue], now: datetime) -> list[dict[str, str]]:
    """Filter issues down to stale ones, in input order.

    Returns:
        Rows with issue_key, title and last_status_changed_date.
    """
    return [
        {
            "issue_key": issue.key,
            "title": issue.summary,
            "last_status_changed_date": format_display_date(issue.status_category_changed),
        }
        for issue in issues
        if is_stale(issue, now)
    ]
