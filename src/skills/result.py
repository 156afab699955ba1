"""Skill result type and parameter helpers.

Every skill returns a SkillResult. Success carries the payload (a Markdown
string or structured data); failure carries a tagged reason and a
user-facing message. The HTTP layer decides how to render each reason.
"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from src.jira.client import JiraParseError


class FailureReason(str, Enum):
    """Why a skill could not produce its payload."""

    MISSING_PARAMETER = "missing_parameter"
    UPSTREAM_FETCH = "upstream_fetch"
    UPSTREAM_PARSE = "upstream_parse"
    UNKNOWN_FUNCTION = "unknown_function"


class MissingParameterError(ValueError):
    """A required payload parameter is absent or invalid."""

    def __init__(self, name: str, message: Optional[str] = None):
        self.name = name
        super().__init__(message or f"Missing required parameter: {name}")


@dataclass
class SkillResult:
    """Outcome of a skill invocation."""

    success: bool
    data: Any = None
    reason: Optional[FailureReason] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: Any) -> "SkillResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, reason: FailureReason, message: str) -> "SkillResult":
        return cls(success=False, reason=reason, error=message)

    def render(self) -> Any:
        """Payload on success, the error message otherwise."""
        return self.data if self.success else self.error


def require_param(payload: dict[str, Any], name: str, expected_type: type = str) -> Any:
    """Return a required payload value or raise MissingParameterError.

    Values of the wrong type are rejected the same way as absent ones.
    Strings are stripped and must not be blank.
    """
    value = payload.get(name)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise MissingParameterError(name)
    if not isinstance(value, expected_type):
        raise MissingParameterError(
            name, f"Invalid parameter {name}: expected {expected_type.__name__}"
        )
    return value.strip() if isinstance(value, str) else value


_PROJECT_KEY = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")


def resolve_project_key(payload: dict[str, Any], from_context: bool = False) -> str:
    """Validated project key from the payload.

    Args:
        payload: Skill parameters.
        from_context: Also accept context.jira.projectKey, which is where
            invocations from a Jira project page carry the key.

    Raises:
        MissingParameterError: If the key is absent or not a Jira project key.
    """
    project_key = payload.get("projectKey")
    if not project_key and from_context:
        context = payload.get("context")
        jira_context = context.get("jira") if isinstance(context, dict) else None
        if isinstance(jira_context, dict):
            project_key = jira_context.get("projectKey")
    if not project_key or (isinstance(project_key, str) and not project_key.strip()):
        raise MissingParameterError("projectKey", "Project Key is required")
    if not isinstance(project_key, str):
        raise MissingParameterError("projectKey", "Invalid parameter projectKey: expected str")
    project_key = project_key.strip()
    # Interpolated into JQL unquoted
    if not _PROJECT_KEY.match(project_key):
        raise MissingParameterError("projectKey", f"Invalid project key: {project_key}")
    return project_key


def issue_link(domain: str, key: str) -> str:
    """Browse URL for an issue on the given Jira site domain."""
    base = domain.rstrip("/")
    if not base.startswith(("http://", "https://")):
        base = f"https://{base}"
    return f"{base}/browse/{key}"


def upstream_failure(error: Exception, message: str) -> SkillResult:
    """Convert a Jira client exception into a failed SkillResult."""
    reason = (
        FailureReason.UPSTREAM_PARSE
        if isinstance(error, JiraParseError)
        else FailureReason.UPSTREAM_FETCH
    )
    return SkillResult.fail(reason, f"{message}: {error}")
