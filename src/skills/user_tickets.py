"""fetchUserTickets skill - the calling user's open tickets as Markdown."""
import logging
from typing import Any

from src.jira.client import JiraAPIError, JiraParseError, JiraService
from src.jira.dates import format_display_date
from src.jira.types import JiraIssue
from src.skills.result import (
    FailureReason,
    MissingParameterError,
    SkillResult,
    issue_link,
    require_param,
    resolve_project_key,
    upstream_failure,
)

logger = logging.getLogger(__name__)

USER_TICKET_FIELDS = ["summary", "status", "priority", "duedate"]


def _format_ticket(issue: JiraIssue, domain: str) -> str:
    details = [issue.status or "N/A"]
    if issue.priority:
        details.append(f"Priority: {issue.priority}")
    if issue.duedate:
        details.append(f"Due: {format_display_date(issue.duedate)}")
    link = issue_link(domain, issue.key)
    return f"- [{issue.key}]({link}): {issue.summary} ({', '.join(details)})"


async def fetch_user_tickets(payload: dict[str, Any], jira_service: JiraService) -> SkillResult:
    """List open tickets assigned to the authenticated user.

    Args:
        payload: Skill parameters; requires projectKey and domain.
        jira_service: JiraService instance for API calls.

    Returns:
        SkillResult with a Markdown list of tickets linking to the domain.
    """
    try:
        project_key = resolve_project_key(payload)
        domain = require_param(payload, "domain")
    except MissingParameterError as e:
        return SkillResult.fail(FailureReason.MISSING_PARAMETER, str(e))

    jql = (
        f"project = {project_key} AND assignee = currentUser() "
        "AND statusCategory != Done ORDER BY updated DESC"
    )

    try:
        page = await jira_service.search_issues(jql, fields=USER_TICKET_FIELDS)
    except (JiraAPIError, JiraParseError) as e:
        logger.error(f"Failed to fetch user tickets: {e}", extra={"project_key": project_key})
        return upstream_failure(e, f"Error fetching your tickets for project {project_key}")

    if not page.issues:
        return SkillResult.ok(f"No open tickets assigned to you in project {project_key}.")

    lines = [f"### Your tickets in project {project_key}"]
    lines.extend(_format_ticket(issue, domain) for issue in page.issues)
    return SkillResult.ok("\n".join(lines) + "\n")
