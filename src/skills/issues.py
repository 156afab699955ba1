"""getIssues skill - key and summary for every issue in a project."""
import logging
from typing import Any

from src.jira.client import JiraAPIError, JiraParseError, JiraService
from src.jira.types import JiraIssue
from src.skills.result import (
    FailureReason,
    MissingParameterError,
    SkillResult,
    resolve_project_key,
    upstream_failure,
)

logger = logging.getLogger(__name__)


def extract_issue_details(issues: list[JiraIssue]) -> list[dict[str, str]]:
    """Reduce issues to {key, summary} rows."""
    return [{"key": issue.key, "summary": issue.summary} for issue in issues]


async def get_issues(payload: dict[str, Any], jira_service: JiraService) -> SkillResult:
    """List a project's issues, optionally restricted to one label.

    Args:
        payload: Skill parameters; projectKey or context.jira.projectKey,
            optional label.
        jira_service: JiraService instance for API calls.

    Returns:
        SkillResult with a list of {key, summary}.
    """
    try:
        project_key = resolve_project_key(payload, from_context=True)
    except MissingParameterError as e:
        return SkillResult.fail(FailureReason.MISSING_PARAMETER, str(e))

    label = payload.get("label") or None
    jql = f"project = {project_key}"
    if label:
        escaped_label = str(label).replace('"', '\\"')
        jql += f' AND labels = "{escaped_label}"'

    logger.info(
        "Fetching issues",
        extra={"project_key": project_key, "label": label},
    )

    try:
        page = await jira_service.search_issues(jql, fields=["summary"])
    except (JiraAPIError, JiraParseError) as e:
        logger.error(f"Failed to fetch issues: {e}", extra={"project_key": project_key})
        return upstream_failure(e, f"Error fetching issues for project {project_key}")

    return SkillResult.ok(extract_issue_details(page.issues))
