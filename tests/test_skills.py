"""Tests for the Jira skills."""
from datetime import timedelta

import pytest

from src.jira.client import JiraAPIError, JiraParseError
from src.skills.completed_tasks import list_completed_tasks
from src.skills.duplicates import check_duplicates
from src.skills.issues import get_issues
from src.skills.result import (
    FailureReason,
    MissingParameterError,
    SkillResult,
    issue_link,
    require_param,
    resolve_project_key,
)
from src.skills.stale_issues import get_stale_issues
from src.skills.task_priorities import get_task_priorities
from src.skills.user_tickets import fetch_user_tickets


class TestHelpers:
    """Tests for parameter helpers."""

    def test_project_key_from_context(self):
        """The Jira page context supplies the key when allowed."""
        payload = {"context": {"jira": {"projectKey": "PROJ"}}}
        assert resolve_project_key(payload, from_context=True) == "PROJ"

    def test_injection_rejected(self):
        """Keys that would alter the JQL are rejected."""
        with pytest.raises(MissingParameterError):
            resolve_project_key({"projectKey": "PROJ OR project = SECRET"})

    def test_non_dict_context_rejected(self):
        """A context that is not an object counts as no project key."""
        with pytest.raises(MissingParameterError):
            resolve_project_key({"context": "PROJ"}, from_context=True)
        with pytest.raises(MissingParameterError):
            resolve_project_key({"context": {"jira": ["PROJ"]}}, from_context=True)

    def test_non_string_project_key_rejected(self):
        """Project keys must be strings."""
        with pytest.raises(MissingParameterError):
            resolve_project_key({"projectKey": 42})

    def test_require_param_type(self):
        """Values of the wrong type are rejected."""
        with pytest.raises(MissingParameterError) as exc_info:
            require_param({"domain": 5}, "domain")
        assert exc_info.value.name == "domain"
        assert require_param({"limit": 3}, "limit", expected_type=int) == 3

    def test_issue_link_adds_scheme(self):
        """Bare domains get https."""
        assert issue_link("acme.atlassian.net", "P-1") == "https://acme.atlassian.net/browse/P-1"
        assert issue_link("http://jira.local/", "P-1") == "http://jira.local/browse/P-1"

    def test_render(self):
        """render returns data or the error message."""
        assert SkillResult.ok([1]).render() == [1]
        assert SkillResult.fail(FailureReason.UPSTREAM_FETCH, "boom").render() == "boom"


class TestCheckDuplicates:
    """Tests for check_duplicates."""

    @pytest.mark.asyncio
    async def test_missing_project_key_fails_before_fetch(self, mock_jira_service):
        """Validation happens before any network call."""
        result = await check_duplicates({}, mock_jira_service)

        assert result.success is False
        assert result.reason == FailureReason.MISSING_PARAMETER
        mock_jira_service.search_issues.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_reports_duplicates(self, mock_jira_service, make_issue, page):
        """Similar summaries are rendered as a table."""
        mock_jira_service.search_issues.return_value = page(
            make_issue("PROJ-3", "Fix login bug"),
            make_issue("PROJ-2", "Fix the login bug"),
            make_issue("PROJ-1", "Update billing invoice"),
        )

        result = await check_duplicates({"projectKey": "PROJ"}, mock_jira_service)

        assert result.success is True
        assert "| PROJ-3 | PROJ-2 | 0.75 |" in result.data
        assert "PROJ-1" not in result.data
        jql = mock_jira_service.search_issues.await_args.args[0]
        assert jql == "project = PROJ ORDER BY created DESC"

    @pytest.mark.asyncio
    async def test_no_duplicates(self, mock_jira_service, make_issue, page):
        """Distinct summaries produce a message."""
        mock_jira_service.search_issues.return_value = page(
            make_issue("PROJ-1", "Fix login bug"),
            make_issue("PROJ-2", "Update billing invoice"),
        )

        result = await check_duplicates({"projectKey": "PROJ"}, mock_jira_service)

        assert result.data == "No duplicate tickets found in project PROJ."

    @pytest.mark.asyncio
    async def test_no_tickets(self, mock_jira_service, page):
        """An empty project produces a message, not an error."""
        mock_jira_service.search_issues.return_value = page()

        result = await check_duplicates({"projectKey": "PROJ"}, mock_jira_service)

        assert result.success is True
        assert result.data == "No tickets found for project PROJ."

    @pytest.mark.asyncio
    async def test_fetch_failure_becomes_message(self, mock_jira_service):
        """Upstream errors become a user-facing failure."""
        mock_jira_service.search_issues.side_effect = JiraAPIError(500, "Server error")

        result = await check_duplicates({"projectKey": "PROJ"}, mock_jira_service)

        assert result.reason == FailureReason.UPSTREAM_FETCH
        assert result.error == (
            "Error fetching tickets for project PROJ: Jira API error 500: Server error"
        )

    @pytest.mark.asyncio
    async def test_parse_failure_tagged(self, mock_jira_service):
        """Malformed responses are tagged as parse failures."""
        mock_jira_service.search_issues.side_effect = JiraParseError("bad body")

        result = await check_duplicates({"projectKey": "PROJ"}, mock_jira_service)

        assert result.reason == FailureReason.UPSTREAM_PARSE


class TestGetStaleIssues:
    """Tests for get_stale_issues."""

    @pytest.mark.asyncio
    async def test_stale_rows(self, mock_jira_service, make_issue, page, now):
        """Only stale, non-epic, not-done issues are listed."""
        fifteen_days = (now - timedelta(days=15)).isoformat()
        mock_jira_service.search_issues.return_value = page(
            make_issue("PROJ-1", "Old task", status="In Progress", category="In Progress",
                       issuetype="Task", statuscategorychangedate=fifteen_days),
            make_issue("PROJ-2", "Old epic", status="In Progress", category="In Progress",
                       issuetype="Epic", statuscategorychangedate=fifteen_days),
            make_issue("PROJ-3", "Finished", status="Done", category="Done",
                       issuetype="Task", statuscategorychangedate=fifteen_days),
        )

        result = await get_stale_issues({"projectKey": "PROJ"}, mock_jira_service, now=now)

        assert result.data == [
            {"issue_key": "PROJ-1", "title": "Old task", "last_status_changed_date": "2/14/2026"}
        ]

    @pytest.mark.asyncio
    async def test_project_from_context(self, mock_jira_service, page, now):
        """The project key can come from the page context."""
        mock_jira_service.search_issues.return_value = page()
        payload = {"context": {"jira": {"projectKey": "CTX"}}}

        result = await get_stale_issues(payload, mock_jira_service, now=now)

        assert result.success is True
        assert result.data == []
        assert mock_jira_service.search_issues.await_args.args[0].startswith("project = CTX")

    @pytest.mark.asyncio
    async def test_missing_project(self, mock_jira_service, now):
        """No key anywhere fails fast."""
        result = await get_stale_issues({"context": {}}, mock_jira_service, now=now)

        assert result.reason == FailureReason.MISSING_PARAMETER
        assert result.error == "Project Key is required"


class TestListCompletedTasks:
    """Tests for list_completed_tasks."""

    @pytest.mark.asyncio
    async def test_issues_and_links(self, mock_jira_service, make_issue, page):
        """Each issue is listed with a browse link on the given domain."""
        mock_jira_service.search_issues.return_value = page(
            make_issue("PROJ-4", "Ship release", status="Done", category="Done",
                       assignee=("acc-1", "Anna Lee"),
                       statuscategorychangedate="2026-02-25T08:00:00.000+0000"),
        )

        result = await list_completed_tasks(
            {"projectKey": "PROJ", "domain": "acme.atlassian.net"}, mock_jira_service
        )

        assert result.data == {
            "issues": [
                {
                    "key": "PROJ-4",
                    "summary": "Ship release",
                    "status": "Done",
                    "assignee": "Anna Lee",
                    "completed": "2/25/2026",
                }
            ],
            "issueLinks": {"PROJ-4": "https://acme.atlassian.net/browse/PROJ-4"},
        }

    @pytest.mark.asyncio
    async def test_default_time_range(self, mock_jira_service, page):
        """Without timeRange the last 14 days are queried."""
        mock_jira_service.search_issues.return_value = page()

        await list_completed_tasks({"projectKey": "PROJ", "domain": "acme"}, mock_jira_service)

        assert ">= -14d" in mock_jira_service.search_issues.await_args.args[0]

    @pytest.mark.asyncio
    async def test_custom_time_range(self, mock_jira_service, page):
        """timeRange is passed through to the JQL."""
        mock_jira_service.search_issues.return_value = page()

        await list_completed_tasks(
            {"projectKey": "PROJ", "domain": "acme", "timeRange": "2w"}, mock_jira_service
        )

        assert ">= -2w" in mock_jira_service.search_issues.await_args.args[0]

    @pytest.mark.asyncio
    async def test_invalid_time_range(self, mock_jira_service):
        """Non-relative periods are rejected before fetching."""
        result = await list_completed_tasks(
            {"projectKey": "PROJ", "domain": "acme", "timeRange": "forever"}, mock_jira_service
        )

        assert result.reason == FailureReason.MISSING_PARAMETER
        mock_jira_service.search_issues.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_domain(self, mock_jira_service):
        """domain is required."""
        result = await list_completed_tasks({"projectKey": "PROJ"}, mock_jira_service)

        assert result.reason == FailureReason.MISSING_PARAMETER
        assert "domain" in result.error


class TestGetIssues:
    """Tests for get_issues."""

    @pytest.mark.asyncio
    async def test_key_and_summary(self, mock_jira_service, make_issue, page):
        """Issues reduce to key and summary."""
        mock_jira_service.search_issues.return_value = page(
            make_issue("PROJ-1", "First"), make_issue("PROJ-2", "Second")
        )

        result = await get_issues({"projectKey": "PROJ"}, mock_jira_service)

        assert result.data == [
            {"key": "PROJ-1", "summary": "First"},
            {"key": "PROJ-2", "summary": "Second"},
        ]

    @pytest.mark.asyncio
    async def test_label_filter(self, mock_jira_service, page):
        """An optional label narrows the JQL."""
        mock_jira_service.search_issues.return_value = page()

        await get_issues(
            {"context": {"jira": {"projectKey": "PROJ"}}, "label": "cats"}, mock_jira_service
        )

        jql = mock_jira_service.search_issues.await_args.args[0]
        assert jql == 'project = PROJ AND labels = "cats"'


class TestFetchUserTickets:
    """Tests for fetch_user_tickets."""

    @pytest.mark.asyncio
    async def test_markdown_list(self, mock_jira_service, make_issue, page):
        """Tickets are listed with links and details."""
        mock_jira_service.search_issues.return_value = page(
            make_issue("PROJ-5", "Review PR", status="In Progress", priority="High",
                       duedate="2026-03-10"),
            make_issue("PROJ-6", "Write tests", status="To Do"),
        )

        result = await fetch_user_tickets(
            {"projectKey": "PROJ", "domain": "acme.atlassian.net"}, mock_jira_service
        )

        assert result.data == (
            "### Your tickets in project PROJ\n"
            "- [PROJ-5](https://acme.atlassian.net/browse/PROJ-5): Review PR "
            "(In Progress, Priority: High, Due: 3/10/2026)\n"
            "- [PROJ-6](https://acme.atlassian.net/browse/PROJ-6): Write tests (To Do)\n"
        )
        assert "currentUser()" in mock_jira_service.search_issues.await_args.args[0]

    @pytest.mark.asyncio
    async def test_no_tickets(self, mock_jira_service, page):
        """No open tickets yields a message."""
        mock_jira_service.search_issues.return_value = page()

        result = await fetch_user_tickets(
            {"projectKey": "PROJ", "domain": "acme.atlassian.net"}, mock_jira_service
        )

        assert result.data == "No open tickets assigned to you in project PROJ."


class TestGetTaskPriorities:
    """Tests for get_task_priorities."""

    def _assignee_page(self, make_issue, page):
        return page(
            make_issue("PROJ-1", assignee=("acc-1", "Anna Lee")),
            make_issue("PROJ-2", assignee=("acc-2", "Annabel Wu")),
            make_issue("PROJ-3", assignee=("acc-3", "Bob")),
        )

    @pytest.mark.asyncio
    async def test_no_assignee_match(self, mock_jira_service, make_issue, page, now):
        """Zero matches asks for a different value."""
        mock_jira_service.search_issues.return_value = self._assignee_page(make_issue, page)

        result = await get_task_priorities(
            {"projectKey": "PROJ", "assignee": "zed"}, mock_jira_service, now=now
        )

        assert result.success is True
        assert result.data == (
            'No assignees found matching "zed" in project PROJ. Please try a different value.'
        )

    @pytest.mark.asyncio
    async def test_ambiguous_assignee(self, mock_jira_service, make_issue, page, now):
        """Several matches lists every candidate."""
        mock_jira_service.search_issues.return_value = self._assignee_page(make_issue, page)

        result = await get_task_priorities(
            {"projectKey": "PROJ", "assignee": "ann"}, mock_jira_service, now=now
        )

        assert result.data == (
            'Multiple assignees found matching "ann" in project PROJ:\n'
            "- Anna Lee\n"
            "- Annabel Wu\n"
            "Please provide a more specific name."
        )
        assert mock_jira_service.search_issues.await_count == 1

    @pytest.mark.asyncio
    async def test_single_match_queries_by_account_id(
        self, mock_jira_service, make_issue, page, now
    ):
        """One match queries by account ID and renders the table."""
        tasks = page(
            make_issue("PROJ-7", "Fix checkout", duedate="2026-02-20", priority="High",
                       status="To Do", labels=["payments"]),
        )
        mock_jira_service.search_issues.side_effect = [
            self._assignee_page(make_issue, page),
            tasks,
        ]

        result = await get_task_priorities(
            {"projectKey": "PROJ", "assignee": "bob"}, mock_jira_service, now=now
        )

        jql = mock_jira_service.search_issues.await_args_list[1].args[0]
        assert jql == (
            'assignee = "acc-3" AND project = PROJ '
            'AND status in ("To Do", "Done") ORDER BY duedate ASC'
        )
        assert "Bob" not in jql
        assert result.data.startswith("### Task Priorities for Bob in Project PROJ\n")
        assert "| PROJ-7 | Fix checkout | 2/20/2026 ⚠️ | High | To Do | Overdue | payments |" in (
            result.data
        )

    @pytest.mark.asyncio
    async def test_single_match_without_tasks(self, mock_jira_service, make_issue, page, now):
        """No tasks for the matched assignee yields a message."""
        mock_jira_service.search_issues.side_effect = [
            self._assignee_page(make_issue, page),
            page(),
        ]

        result = await get_task_priorities(
            {"projectKey": "PROJ", "assignee": "Bob"}, mock_jira_service, now=now
        )

        assert result.data == "No tasks found for assignee Bob in project PROJ."

    @pytest.mark.asyncio
    async def test_missing_assignee(self, mock_jira_service, now):
        """assignee is required."""
        result = await get_task_priorities({"projectKey": "PROJ"}, mock_jira_service, now=now)

        assert result.reason == FailureReason.MISSING_PARAMETER
        mock_jira_service.search_issues.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_assignee_fetch_failure(self, mock_jira_service, now):
        """Failure while resolving assignees is reported."""
        mock_jira_service.search_issues.side_effect = JiraAPIError(401, "Unauthorized")

        result = await get_task_priorities(
            {"projectKey": "PROJ", "assignee": "ann"}, mock_jira_service, now=now
        )

        assert result.reason == FailureReason.UPSTREAM_FETCH
        assert "Unauthorized" in result.error


class TestWrongTypedParameters:
    """Wrong-typed parameters fail validation instead of crashing."""

    @pytest.mark.asyncio
    async def test_stale_issues_string_context(self, mock_jira_service, now):
        """A string context is a missing project key."""
        result = await get_stale_issues({"context": "PROJ"}, mock_jira_service, now=now)

        assert result.reason == FailureReason.MISSING_PARAMETER
        mock_jira_service.search_issues.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_task_priorities_numeric_assignee(self, mock_jira_service, now):
        """A numeric assignee is rejected before fetching."""
        result = await get_task_priorities(
            {"projectKey": "PROJ", "assignee": 12}, mock_jira_service, now=now
        )

        assert result.reason == FailureReason.MISSING_PARAMETER
        assert "assignee" in result.error
        mock_jira_service.search_issues.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_completed_tasks_numeric_domain(self, mock_jira_service):
        """A numeric domain is rejected before fetching."""
        result = await list_completed_tasks({"projectKey": "PROJ", "domain": 5}, mock_jira_service)

        assert result.reason == FailureReason.MISSING_PARAMETER
        assert "domain" in result.error
        mock_jira_service.search_issues.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_user_tickets_list_domain(self, mock_jira_service):
        """A list domain is rejected before fetching."""
        result = await fetch_user_tickets(
            {"projectKey": "PROJ", "domain": ["acme"]}, mock_jira_service
        )

        assert result.reason == FailureReason.MISSING_PARAMETER
        mock_jira_service.search_issues.assert_not_awaited()
