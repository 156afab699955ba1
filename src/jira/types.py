"""Jira types and models for the search API."""
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, computed_field, field_validator

from src.jira.dates import parse_jira_datetime


DONE_STATUS_CATEGORY = "Done"
EPIC_ISSUE_TYPE = "Epic"


class JiraAssignee(BaseModel):
    """Jira user assigned to an issue."""

    account_id: str = Field(..., description="Stable Atlassian account ID")
    display_name: str = Field(..., description="Display name shown in Jira")


class JiraIssue(BaseModel):
    """One issue from a Jira search response."""

    key: str = Field(..., description="Issue key (e.g., PROJ-123)")
    summary: str = Field("", description="Issue summary/title")
    status: Optional[str] = Field(None, description="Status name (e.g., In Progress)")
    status_category: Optional[str] = Field(None, description="Status category name (e.g., Done)")
    issue_type: Optional[str] = Field(None, description="Issue type name (e.g., Epic)")
    assignee: Optional[JiraAssignee] = Field(None, description="Current assignee")
    priority: Optional[str] = Field(None, description="Priority name")
    labels: list[str] = Field(default_factory=list, description="Issue labels")
    created: Optional[datetime] = Field(None, description="Creation timestamp")
    updated: Optional[datetime] = Field(None, description="Last update timestamp")
    duedate: Optional[datetime] = Field(None, description="Due date (midnight UTC)")
    status_category_changed: Optional[datetime] = Field(
        None, description="Timestamp of the last status category transition"
    )

    @field_validator(
        "created", "updated", "duedate", "status_category_changed", mode="before"
    )
    @classmethod
    def _parse_timestamp(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_jira_datetime(value)
        return value

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> "JiraIssue":
        """Build an issue from one entry of the search response.

        Args:
            item: Raw issue dict with "key" and "fields".

        Returns:
            Parsed JiraIssue.

        Raises:
            pydantic.ValidationError: If required values are missing or malformed.
            ValueError: If a timestamp field cannot be parsed.
        """
        fields = item.get("fields") or {}
        status = fields.get("status") or {}
        issue_type = fields.get("issuetype") or {}
        priority = fields.get("priority") or {}
        raw_assignee = fields.get("assignee")

        assignee = None
        if isinstance(raw_assignee, dict) and raw_assignee.get("accountId"):
            assignee = JiraAssignee(
                account_id=raw_assignee["accountId"],
                display_name=raw_assignee.get("displayName") or "",
            )

        return cls(
            key=item.get("key"),
            summary=fields.get("summary") or "",
            status=status.get("name"),
            status_category=(status.get("statusCategory") or {}).get("name"),
            issue_type=issue_type.get("name"),
            assignee=assignee,
            priority=priority.get("name"),
            labels=fields.get("labels") or [],
            created=fields.get("created"),
            updated=fields.get("updated"),
            duedate=fields.get("duedate"),
            status_category_changed=fields.get("statuscategorychangedate"),
        )


class JiraSearchPage(BaseModel):
    """A single page of search results.

    Only the first page is ever requested. When Jira reports more results,
    ``truncated`` is set instead of following the continuation token.
    """

    issues: list[JiraIssue] = Field(default_factory=list)
    max_results: int = Field(..., description="Page size requested")
    is_last: bool = Field(True, description="Jira reported no further pages")

    @computed_field
    @property
    def truncated(self) -> bool:
        """True when Jira holds results beyond this page."""
        return not self.is_last
