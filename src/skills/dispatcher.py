"""Skill dispatcher - routes resolver names to skill functions.

Front-end and REST callers invoke skills by their resolver name
(e.g. "checkDuplicates") with a payload of named parameters. The dispatcher
owns the JiraService handed to every skill and threads the reference time
into the skills that compare dates.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Optional

from src.jira.client import JiraService
from src.skills.completed_tasks import list_completed_tasks
from src.skills.duplicates import check_duplicates
from src.skills.issues import get_issues
from src.skills.result import FailureReason, SkillResult
from src.skills.stale_issues import get_stale_issues
from src.skills.task_priorities import get_task_priorities
from src.skills.user_tickets import fetch_user_tickets

logger = logging.getLogger(__name__)

SkillHandler = Callable[..., Awaitable[SkillResult]]


async def get_text(payload: dict[str, Any], jira_service: JiraService) -> SkillResult:
    """Connectivity probe used by the front-end on load."""
    return SkillResult.ok("Hello, world!")


class SkillDispatcher:
    """Registry of resolver names and the skills behind them.

    Usage:
        dispatcher = SkillDispatcher(jira_service)
        result = await dispatcher.dispatch("checkDuplicates", {"projectKey": "PROJ"})
    """

    def __init__(self, jira_service: JiraService):
        """Initialize dispatcher with the built-in skills registered.

        Args:
            jira_service: JiraService passed to every skill.
        """
        self.jira_service = jira_service
        self._handlers: dict[str, tuple[SkillHandler, bool]] = {}

        self.define("getText", get_text)
        self.define("checkDuplicates", check_duplicates)
        self.define("getStaleIssues", get_stale_issues, needs_now=True)
        self.define("listCompletedTasks", list_completed_tasks)
        self.define("getIssues", get_issues)
        self.define("fetchUserTickets", fetch_user_tickets)
        self.define("getTaskPriorities", get_task_priorities, needs_now=True)

    def define(self, name: str, handler: SkillHandler, needs_now: bool = False) -> None:
        """Register a skill under a resolver name.

        Args:
            name: Resolver name callers use.
            handler: Async skill taking (payload, jira_service).
            needs_now: Pass the reference time as the ``now`` keyword.
        """
        self._handlers[name] = (handler, needs_now)

    @property
    def names(self) -> list[str]:
        """Registered resolver names, in registration order."""
        return list(self._handlers)

    async def dispatch(
        self,
        name: str,
        payload: Optional[dict[str, Any]] = None,
        now: Optional[datetime] = None,
    ) -> SkillResult:
        """Invoke the skill registered under name.

        Args:
            name: Resolver name.
            payload: Named parameters for the skill.
            now: Reference time for date comparisons; defaults to current UTC time.

        Returns:
            The skill's SkillResult, or an unknown_function failure.
        """
        entry = self._handlers.get(name)
        if entry is None:
            logger.warning(f"Unknown skill: {name}")
            return SkillResult.fail(FailureReason.UNKNOWN_FUNCTION, f"Unknown function: {name}")

        handler, needs_now = entry
        payload = payload or {}

        logger.info(f"Dispatching skill: {name}", extra={"skill": name})

        if needs_now:
            return await handler(payload, self.jira_service, now=now or datetime.now(timezone.utc))
        return await handler(payload, self.jira_service)
