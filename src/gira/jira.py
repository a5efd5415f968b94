"""Jira REST client."""

import logging
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import BaseModel, Field, ValidationError

from gira.config import GiraConfig

logger = logging.getLogger(__name__)


class JiraError(Exception):
    """Base exception for Jira errors."""


class JiraAuthError(JiraError):
    """Authentication failed."""


class IssueLookupError(JiraError):
    """A single issue could not be fetched."""

    def __init__(self, key: str, message: str, status_code: int | None = None) -> None:
        """Initialize lookup error.

        Args:
            key: Issue key that was requested
            message: Error message
            status_code: HTTP status code if available
        """
        super().__init__(f"{key}: {message}")
        self.key = key
        self.status_code = status_code


class Issue(BaseModel):
    """The parts of a Jira issue gira cares about."""

    key: str
    summary: str = ""
    status_name: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Issue":
        fields = data.get("fields") or {}
        status = fields.get("status") or {}
        return cls(
            key=data["key"],
            summary=fields.get("summary") or "",
            status_name=status.get("name") or "",
        )


class Account(BaseModel):
    """Authenticated Jira account."""

    model_config = {"extra": "ignore", "populate_by_name": True}

    name: str = ""
    display_name: str = Field(default="", alias="displayName")


class JiraClient:
    """Client for the Jira REST API.

    When the configuration is not tracker-capable every operation is a no-op,
    so callers can run the same code path with or without Jira.
    """

    def __init__(self, config: GiraConfig, transport: httpx.BaseTransport | None = None) -> None:
        """Initialize the Jira client.

        Args:
            config: Application configuration
            transport: Optional httpx transport, mainly for tests
        """
        self.config = config
        self.base_url = config.jira_url
        self._transport = transport
        self._client: httpx.Client | None = None
        self.account: Account | None = None

    @property
    def enabled(self) -> bool:
        return self.config.tracker_capable

    def __enter__(self) -> "JiraClient":
        if self.enabled:
            self._client = httpx.Client(
                base_url=self.base_url,
                auth=httpx.BasicAuth(self.config.jira_user, self.config.jira_token),
                timeout=self.config.jira_timeout,
                headers={"Accept": "application/json"},
                transport=self._transport,
            )
        return self

    def __exit__(self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: Any) -> None:
        if self._client:
            self._client.close()
            self._client = None

    def authenticate(self) -> None:
        """Verify the configured credentials once for the whole run.

        Raises:
            JiraAuthError: Credentials were rejected or Jira was unreachable
        """
        if not self.enabled:
            logger.debug("Jira is not configured, issue lookups are disabled")
            return
        if not self._client:
            raise RuntimeError("Client not initialized. Use context manager.")

        try:
            response = self._client.get("/rest/api/2/myself")
        except httpx.HTTPError as err:
            raise JiraAuthError(f"Could not reach Jira at {self.base_url}: {err}") from err

        if response.status_code in (401, 403):
            raise JiraAuthError("Authentication failed. Check GIRA_JIRA_USER and GIRA_JIRA_TOKEN.")
        if response.status_code >= 400:
            raise JiraAuthError(f"Jira rejected the session ({response.status_code}): {response.text}")

        try:
            self.account = Account.model_validate(response.json())
        except (ValueError, ValidationError) as err:
            raise JiraAuthError(f"Unexpected response from Jira: {err}") from err
        logger.debug("Authenticated to Jira as %s", self.account.display_name or self.account.name)

    def fetch(self, key: str) -> tuple[str, str]:
        """Fetch an issue's summary and status name.

        Returns:
            (summary, status), both empty when Jira is not configured or key is empty

        Raises:
            IssueLookupError: The issue could not be fetched
        """
        if not self.enabled or not key:
            return "", ""
        issue = self.get_issue(key)
        return issue.summary, issue.status_name

    def get_issue(self, key: str) -> Issue:
        """Fetch a single issue by key.

        The key is percent-encoded so characters git allows in branch names,
        such as ``#`` or ``?``, stay part of the issue path.

        Raises:
            IssueLookupError: Request failed, was rejected or returned an unexpected payload
        """
        if not self._client:
            raise RuntimeError("Client not initialized. Use context manager.")

        try:
            response = self._client.get(
                f"/rest/api/2/issue/{quote(key, safe='')}",
                params={"fields": "summary,status"},
            )
        except httpx.HTTPError as err:
            raise IssueLookupError(key, f"request failed: {err}") from err

        if response.status_code >= 400:
            raise IssueLookupError(
                key,
                f"request failed with status {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return Issue.from_api(response.json())
        except (ValueError, KeyError, TypeError, AttributeError, ValidationError) as err:
            raise IssueLookupError(key, f"malformed response: {err}") from err
