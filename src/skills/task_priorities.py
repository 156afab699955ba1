"""getTaskPriorities skill - an assignee's tasks ranked by due date.

The assignee is given as a partial name and resolved against the people
assigned to issues in the project:
- no match: ask for a different value
- several matches: list them and ask for a more specific name
- one match: query by its account ID
"""
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from src.analysis.assignees import match_assignees
from src.analysis.priorities import format_priority_table, rank_by_due_date
from src.jira.client import JiraAPIError, JiraParseError, JiraService
from src.jira.types import JiraAssignee
from src.skills.result import (
    FailureReason,
    MissingParameterError,
    SkillResult,
    require_param,
    resolve_project_key,
    upstream_failure,
)

logger = logging.getLogger(__name__)

PRIORITY_FIELDS = ["summary", "duedate", "priority", "status", "timeoriginalestimate", "labels"]


async def get_matching_assignees(
    project_key: str,
    partial_name: str,
    jira_service: JiraService,
) -> list[JiraAssignee]:
    """Assignees in a project whose display name contains partial_name.

    Raises:
        JiraAPIError: On API errors.
        JiraParseError: If the response does not match the search schema.
    """
    jql = f"project = {project_key} ORDER BY created DESC"
    page = await jira_service.search_issues(jql, fields=["assignee"])
    return match_assignees(page.issues, partial_name)


def _disambiguation_message(matches: list[JiraAssignee], assignee: str, project_key: str) -> str:
    lines = [f'Multiple assignees found matching "{assignee}" in project {project_key}:']
    lines.extend(f"- {match.display_name}" for match in matches)
    lines.append("Please provide a more specific name.")
    return "\n".join(lines)


async def get_task_priorities(
    payload: dict[str, Any],
    jira_service: JiraService,
    now: Optional[datetime] = None,
) -> SkillResult:
    """Rank one assignee's "To Do" and "Done" tasks by due date.

    Args:
        payload: Skill parameters; requires projectKey and assignee.
        jira_service: JiraService instance for API calls.
        now: Reference time for time-left; defaults to the current UTC time.

    Returns:
        SkillResult with a Markdown table, or a message asking for a
        different or more specific assignee name.
    """
    try:
        project_key = resolve_project_key(payload)
        assignee = require_param(payload, "assignee")
    except MissingParameterError as e:
        return SkillResult.fail(FailureReason.MISSING_PARAMETER, str(e))

    now = now or datetime.now(timezone.utc)

    try:
        matches = await get_matching_assignees(project_key, assignee, jira_service)
    except (JiraAPIError, JiraParseError) as e:
        logger.error(
            f"Failed to fetch issues for assignees: {e}",
            extra={"project_key": project_key},
        )
        return upstream_failure(e, f"Error fetching assignees for project {project_key}")

    if not matches:
        return SkillResult.ok(
            f'No assignees found matching "{assignee}" in project {project_key}. '
            "Please try a different value."
        )
    if len(matches) > 1:
        logger.info(
            "Ambiguous assignee",
            extra={"project_key": project_key, "candidates": len(matches)},
        )
        return SkillResult.ok(_disambiguation_message(matches, assignee, project_key))

    selected = matches[0]
    jql = (
        f'assignee = "{selected.account_id}" AND project = {project_key} '
        'AND status in ("To Do", "Done") ORDER BY duedate ASC'
    )

    try:
        page = await jira_service.search_issues(jql, fields=PRIORITY_FIELDS)
    except (JiraAPIError, JiraParseError) as e:
        logger.error(
            f"Failed to fetch tasks: {e}",
            extra={"project_key": project_key, "account_id": selected.account_id},
        )
        return upstream_failure(e, f"Error fetching tasks for {selected.display_name}")

    if not page.issues:
        return SkillResult.ok(
            f"No tasks found for assignee {selected.display_name} in project {project_key}."
        )

    rows = rank_by_due_date(page.issues, now)
    return SkillResult.ok(format_priority_table(rows, selected.display_name, project_key))
