"""Jira search API integration module."""

from src.jira.client import JiraAPIError, JiraParseError, JiraService
from src.jira.types import JiraAssignee, JiraIssue, JiraSearchPage

__all__ = [
    "JiraAPIError",
    "JiraParseError",
    "JiraService",
    "JiraAssignee",
    "JiraIssue",
    "JiraSearchPage",
]
