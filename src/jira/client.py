"""Jira API client service for single-shot search requests."""
import asyncio
import json
import logging
import time
from typing import Any, Optional

import aiohttp
from pydantic import ValidationError

from src.config.settings import Settings
from src.jira.types import JiraIssue, JiraSearchPage


logger = logging.getLogger(__name__)


# =============================================================================
# Exceptions
# =============================================================================


class JiraAPIError(Exception):
    """Exception for Jira API errors (non-2xx status or transport failure)."""

    def __init__(
        self,
        status_code: int,
        message: str,
        response_body: Optional[dict[str, Any]] = None,
    ):
        self.status_code = status_code
        self.message = message
        self.response_body = response_body
        super().__init__(f"Jira API error {status_code}: {message}")


class JiraParseError(Exception):
    """Exception for Jira responses that cannot be decoded into issues."""


# =============================================================================
# Jira Service
# =============================================================================


class JiraService:
    """Service for reading issues from the Jira search API.

    Every call is a single request: no retries, no backoff, no pagination.
    Failures surface as JiraAPIError or JiraParseError for the calling skill
    to convert into a user-facing message.
    """

    def __init__(self, settings: Settings):
        """Initialize JiraService.

        Args:
            settings: Application settings containing Jira configuration.
        """
        self.settings = settings
        self.base_url = settings.jira_url.rstrip("/")
        self.auth = aiohttp.BasicAuth(settings.jira_user, settings.jira_api_token)
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.settings.jira_timeout)
            self._session = aiohttp.ClientSession(
                auth=self.auth,
                timeout=timeout,
                headers={"Content-Type": "application/json", "Accept": "application/json"},
            )
        return self._session

    async def close(self) -> None:
        """Close the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def _request(
        self,
        method: str,
        endpoint: str,
        json_data: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """Make one HTTP request and decode the JSON body.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint (e.g., /rest/api/3/search/jql)
            json_data: JSON body for POST/PUT requests
            params: Query parameters

        Returns:
            Response JSON as dict

        Raises:
            JiraAPIError: On non-2xx status, timeout or connection error
            JiraParseError: On a 2xx response whose body is not a JSON object
        """
        url = f"{self.base_url}{endpoint}"
        session = await self._get_session()
        start_time = time.monotonic()

        logger.debug(
            "Jira API request",
            extra={"method": method, "url": url, "jira_env": self.settings.jira_env},
        )

        try:
            async with session.request(method, url, json=json_data, params=params) as response:
                duration_ms = (time.monotonic() - start_time) * 1000
                text = await response.text()

                logger.info(
                    "Jira API response",
                    extra={
                        "method": method,
                        "url": url,
                        "status": response.status,
                        "duration_ms": round(duration_ms, 2),
                        "jira_env": self.settings.jira_env,
                    },
                )

                if not 200 <= response.status < 300:
                    try:
                        error_body = json.loads(text) if text else {}
                    except ValueError:
                        error_body = {}
                    if not isinstance(error_body, dict):
                        error_body = {}
                    error_msg = error_body.get("errorMessages") or response.reason or "Request failed"
                    if isinstance(error_msg, list):
                        error_msg = "; ".join(str(m) for m in error_msg)
                    raise JiraAPIError(
                        status_code=response.status,
                        message=str(error_msg),
                        response_body=error_body,
                    )

        except asyncio.TimeoutError as e:
            duration_ms = (time.monotonic() - start_time) * 1000
            logger.warning(
                "Jira API timeout",
                extra={"method": method, "url": url, "duration_ms": round(duration_ms, 2)},
            )
            raise JiraAPIError(
                status_code=0,
                message=f"Request timed out after {round(duration_ms)}ms",
            ) from e

        except aiohttp.ClientError as e:
            logger.warning(
                f"Jira API connection error: {e}",
                extra={"method": method, "url": url, "error": str(e)},
            )
            raise JiraAPIError(status_code=0, message=f"Connection error: {e}") from e

        try:
            body = json.loads(text)
        except ValueError as e:
            raise JiraParseError(f"Malformed JSON from {endpoint}: {e}") from e
        if not isinstance(body, dict):
            raise JiraParseError(f"Expected a JSON object from {endpoint}")
        return body

    async def search_issues(
        self,
        jql: str,
        fields: list[str],
        max_results: Optional[int] = None,
    ) -> JiraSearchPage:
        """Search for Jira issues using JQL.

        Reads the first page only. When Jira reports more results the page is
        marked truncated and a warning is logged.

        Args:
            jql: Jira Query Language search string.
            fields: Issue fields to return.
            max_results: Page size; defaults to settings.jira_page_size.

        Returns:
            JiraSearchPage with the parsed issues.

        Raises:
            JiraAPIError: On API errors.
            JiraParseError: If the response does not match the search schema.
        """
        start_time = time.monotonic()
        limit = max_results or self.settings.jira_page_size

        logger.info(
            "Searching Jira issues",
            extra={"jql": jql, "limit": limit, "jira_env": self.settings.jira_env},
        )

        payload = {"jql": jql, "maxResults": limit, "fields": fields}
        response = await self._request("POST", "/rest/api/3/search/jql", json_data=payload)

        raw_issues = response.get("issues")
        if raw_issues is None:
            raw_issues = []
        if not isinstance(raw_issues, list):
            raise JiraParseError("Search response 'issues' is not a list")

        try:
            issues = [JiraIssue.from_api(item) for item in raw_issues]
        except (ValidationError, ValueError, AttributeError) as e:
            logger.error(f"Failed to parse Jira search response: {e}")
            raise JiraParseError(f"Unexpected issue data in search response: {e}") from e

        is_last = bool(response.get("isLast", not response.get("nextPageToken")))
        page = JiraSearchPage(issues=issues, max_results=limit, is_last=is_last)

        if page.truncated:
            logger.warning(
                "Jira search truncated to first page",
                extra={"jql": jql, "limit": limit, "result_count": len(issues)},
            )

        duration_ms = (time.monotonic() - start_time) * 1000
        logger.info(
            "Jira search complete",
            extra={
                "jql": jql,
                "result_count": len(issues),
                "truncated": page.truncated,
                "duration_ms": round(duration_ms, 2),
            },
        )

        return page
