"""
Pytest configuration and fixtures.

Provides issue factories and a mocked Jira service so skills run without
network access or credentials.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.config.settings import Settings
from src.jira.types import JiraIssue, JiraSearchPage


# Fixed reference time for every date comparison in the suite
NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def now():
    """Fixed reference time."""
    return NOW


@pytest.fixture
def settings():
    """Settings pointing at a fake Jira site."""
    return Settings(
        jira_url="https://example.atlassian.net",
        jira_user="bot@example.com",
        jira_api_token="token",
        jira_page_size=50,
    )


@pytest.fixture
def make_item():
    """Build a raw search-result item the way Jira returns it."""

    def _make_item(key, summary="", **fields):
        raw_fields = {"summary": summary}
        if "status" in fields:
            status = fields.pop("status")
            category = fields.pop("category", "To Do")
            raw_fields["status"] = {"name": status, "statusCategory": {"name": category}}
        if "issuetype" in fields:
            raw_fields["issuetype"] = {"name": fields.pop("issuetype")}
        if "assignee" in fields:
            assignee = fields.pop("assignee")
            raw_fields["assignee"] = (
                {"accountId": assignee[0], "displayName": assignee[1]} if assignee else None
            )
        if "priority" in fields:
            raw_fields["priority"] = {"name": fields.pop("priority")}
        raw_fields.update(fields)
        return {"key": key, "fields": raw_fields}

    return _make_item


@pytest.fixture
def make_issue(make_item):
    """Build a parsed JiraIssue from the same arguments as make_item."""

    def _make_issue(key, summary="", **fields):
        return JiraIssue.from_api(make_item(key, summary, **fields))

    return _make_issue


@pytest.fixture
def page():
    """Wrap issues in a single search page."""

    def _page(*issues, is_last=True):
        return JiraSearchPage(issues=list(issues), max_results=50, is_last=is_last)

    return _page


@pytest.fixture
def mock_jira_service():
    """Mock JiraService; set search_issues.return_value or side_effect per test."""
    service = MagicMock()
    service.search_issues = AsyncMock()
    service.close = AsyncMock()
    return service
