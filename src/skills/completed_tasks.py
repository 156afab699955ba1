"""listCompletedTasks skill - recently finished work with browse links."""
import logging
import re
from typing import Any

from src.jira.client import JiraAPIError, JiraParseError, JiraService
from src.jira.dates import format_display_date
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

DEFAULT_TIME_RANGE = "14d"

# JQL relative period: weeks, days, hours or minutes
_TIME_RANGE = re.compile(r"^\d+[wdhm]$")

COMPLETED_FIELDS = ["summary", "status", "assignee", "statuscategorychangedate"]


async def list_completed_tasks(payload: dict[str, Any], jira_service: JiraService) -> SkillResult:
    """List tasks moved to the Done category within a time range.

    Args:
        payload: Skill parameters; requires projectKey and domain, accepts
            timeRange as a JQL relative period (default "14d").
        jira_service: JiraService instance for API calls.

    Returns:
        SkillResult with {"issues": [...], "issueLinks": {key: url}}.
    """
    try:
        project_key = resolve_project_key(payload)
        domain = require_param(payload, "domain")
        time_range = str(payload.get("timeRange") or DEFAULT_TIME_RANGE).strip()
        if not _TIME_RANGE.match(time_range):
            raise MissingParameterError("timeRange", f"Invalid time range: {time_range}")
    except MissingParameterError as e:
        return SkillResult.fail(FailureReason.MISSING_PARAMETER, str(e))

    jql = (
        f"project = {project_key} AND statusCategory = Done "
        f"AND statusCategoryChangedDate >= -{time_range} "
        "ORDER BY statusCategoryChangedDate DESC"
    )

    try:
        page = await jira_service.search_issues(jql, fields=COMPLETED_FIELDS)
    except (JiraAPIError, JiraParseError) as e:
        logger.error(
            f"Failed to fetch completed tasks: {e}",
            extra={"project_key": project_key, "time_range": time_range},
        )
        return upstream_failure(e, f"Error fetching completed tasks for project {project_key}")

    issues = []
    links = {}
    for issue in page.issues:
        completed = issue.status_category_changed
        issues.append(
            {
                "key": issue.key,
                "summary": issue.summary,
                "status": issue.status,
                "assignee": issue.assignee.display_name if issue.assignee else "Unassigned",
                "completed": format_display_date(completed) if completed else None,
            }
        )
        links[issue.key] = issue_link(domain, issue.key)

    logger.info(
        "Completed tasks listed",
        extra={"project_key": project_key, "time_range": time_range, "count": len(issues)},
    )
    return SkillResult.ok({"issues": issues, "issueLinks": links})
