"""getStaleIssues skill - lists work whose status has stopped moving."""
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from src.analysis.staleness import find_stale_issues
from src.jira.client import JiraAPIError, JiraParseError, JiraService
from src.skills.result import (
    FailureReason,
    MissingParameterError,
    SkillResult,
    resolve_project_key,
    upstream_failure,
)

logger = logging.getLogger(__name__)

STALE_FIELDS = ["summary", "status", "issuetype", "statuscategorychangedate"]


async def get_stale_issues(
    payload: dict[str, Any],
    jira_service: JiraService,
    now: Optional[datetime] = None,
) -> SkillResult:
    """List issues whose status category has not changed in two weeks.

    Args:
        payload: Skill parameters; projectKey or context.jira.projectKey.
        jira_service: JiraService instance for API calls.
        now: Reference time; defaults to the current UTC time.

    Returns:
        SkillResult with a list of {issue_key, title, last_status_changed_date}.
    """
    try:
        project_key = resolve_project_key(payload, from_context=True)
    except MissingParameterError as e:
        return SkillResult.fail(FailureReason.MISSING_PARAMETER, str(e))

    now = now or datetime.now(timezone.utc)
    jql = f"project = {project_key} ORDER BY statusCategoryChangedDate ASC"

    try:
        page = await jira_service.search_issues(jql, fields=STALE_FIELDS)
    except (JiraAPIError, JiraParseError) as e:
        logger.error(
            f"Failed to fetch issues for stale check: {e}",
            extra={"project_key": project_key},
        )
        return upstream_failure(e, f"Error fetching issues for project {project_key}")

    stale = find_stale_issues(page.issues, now)
    logger.info(
        "Stale check complete",
        extra={"project_key": project_key, "checked": len(page.issues), "stale": len(stale)},
    )
    return SkillResult.ok(stale)
