"""Assignee lookup by partial display name."""
from src.jira.types import JiraAssignee, JiraIssue


def unique_assignees(issues: list[JiraIssue]) -> list[JiraAssignee]:
    """Collect assignees once per account ID, in first-seen order."""
    seen: dict[str, JiraAssignee] = {}
    for issue in issues:
        assignee = issue.assignee
        if assignee and assignee.account_id not in seen:
            seen[assignee.account_id] = assignee
    return list(seen.values())


def match_assignees(issues: list[JiraIssue], partial_name: str) -> list[JiraAssignee]:
    """Find assignees whose display name contains partial_name.

    Matching is a case-insensitive substring test.

    Args:
        issues: Issues whose assignees form the candidate set.
        partial_name: Full or partial display name supplied by the user.

    Returns:
        Matching assignees in first-seen order.
    """
    needle = partial_name.lower()
    return [a for a in unique_assignees(issues) if needle in a.display_name.lower()]
