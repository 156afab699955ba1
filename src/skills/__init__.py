"""Skills - Jira query functions exposed as named resolvers.

Skills are async functions with explicit parameters taking a payload dict
and a JiraService, and returning a SkillResult.

Skills:
- check_duplicates: Pairs of tickets with overlapping summaries
- get_stale_issues: Issues whose status has not moved in two weeks
- list_completed_tasks: Recently completed tasks with browse links
- get_issues: Key and summary of a project's issues
- fetch_user_tickets: The calling user's open tickets
- get_task_priorities: An assignee's tasks ranked by due date
"""

from src.skills.result import (
    FailureReason,
    MissingParameterError,
    SkillResult,
)

from src.skills.duplicates import check_duplicates
from src.skills.stale_issues import get_stale_issues
from src.skills.completed_tasks import list_completed_tasks
from src.skills.issues import get_issues, extract_issue_details
from src.skills.user_tickets import fetch_user_tickets
from src.skills.task_priorities import get_task_priorities, get_matching_assignees

from src.skills.dispatcher import SkillDispatcher, get_text

__all__ = [
    # result types
    "FailureReason",
    "MissingParameterError",
    "SkillResult",
    # skills
    "check_duplicates",
    "get_stale_issues",
    "list_completed_tasks",
    "get_issues",
    "extract_issue_details",
    "fetch_user_tickets",
    "get_task_priorities",
    "get_matching_assignees",
    "get_text",
    # dispatcher
    "SkillDispatcher",
]
