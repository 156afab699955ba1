"""checkDuplicates skill - flags tickets with near-identical summaries.

Fetches the project's most recently created tickets and compares every pair
of summaries by word overlap.
"""
import logging
from typing import Any

from src.analysis.similarity import find_duplicates, format_duplicates_table
from src.jira.client import JiraAPIError, JiraParseError, JiraService
from src.skills.result import (
    FailureReason,
    MissingParameterError,
    SkillResult,
    resolve_project_key,
    upstream_failure,
)

logger = logging.getLogger(__name__)


async def check_duplicates(payload: dict[str, Any], jira_service: JiraService) -> SkillResult:
    """Find pairs of tickets in a project whose summaries look duplicated.

    Args:
        payload: Skill parameters; requires projectKey.
        jira_service: JiraService instance for API calls.

    Returns:
        SkillResult with a Markdown table of duplicate pairs, or a message
        when the project has no tickets or no duplicates.
    """
    try:
        project_key = resolve_project_key(payload)
    except MissingParameterError as e:
        return SkillResult.fail(FailureReason.MISSING_PARAMETER, str(e))

    jql = f"project = {project_key} ORDER BY created DESC"

    try:
        page = await jira_service.search_issues(jql, fields=["summary"])
    except (JiraAPIError, JiraParseError) as e:
        logger.error(
            f"Failed to fetch tickets for duplicate check: {e}",
            extra={"project_key": project_key},
        )
        return upstream_failure(e, f"Error fetching tickets for project {project_key}")

    if not page.issues:
        return SkillResult.ok(f"No tickets found for project {project_key}.")

    duplicates = find_duplicates(page.issues)

    logger.info(
        "Duplicate check complete",
        extra={
            "project_key": project_key,
            "compared": len(page.issues),
            "duplicates": len(duplicates),
        },
    )

    if not duplicates:
        return SkillResult.ok(f"No duplicate tickets found in project {project_key}.")

    return SkillResult.ok(format_duplicates_table(duplicates))
