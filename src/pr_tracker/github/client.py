"""Minimal async GitHub REST client."""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from pr_tracker.errors import GitHubApiError, GitHubTransportError

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], Awaitable[str]]

API_VERSION = "2022-11-28"


def raise_for_github_status(response: httpx.Response) -> None:
    """Raise :class:`GitHubApiError` for an error response."""
    if response.status_code < 400:
        return
    try:
        body = response.json()
    except ValueError:
        body = None
    message = body.get("message") if isinstance(body, dict) else None
    raise GitHubApiError(response.status_code, message or response.text or response.reason_phrase)


def decode_github_body(response: httpx.Response) -> Any:
    """Decode a successful response, raising :class:`GitHubApiError` if it is not JSON."""
    try:
        return response.json()
    except ValueError as e:
        raise GitHubApiError(
            response.status_code, f"Response body is not valid JSON: {e}"
        ) from e


class GitHubClient:
    """
    Authenticated GitHub REST client.

    The bearer token is requested from ``token_provider`` on every call, so
    constructing a client never touches the network.
    """

    def __init__(self, http: httpx.AsyncClient, token_provider: TokenProvider) -> None:
        self._http = http
        self._token_provider = token_provider

    async def request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Send a request to the GitHub API.

        Args:
            method: HTTP method
            path: Path relative to the API base URL
            json: Optional JSON body

        Returns:
            The decoded JSON response body

        Raises:
            GitHubTransportError: If the API could not be reached
            GitHubApiError: If the API returned an error status
        """
        token = await self._token_provider()
        headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
        }

        try:
            response = await self._http.request(method, path, headers=headers, json=json)
        except httpx.TransportError as e:
            raise GitHubTransportError(f"{method} {path} failed: {e}") from e

        logger.debug(f"{method} {path} -> {response.status_code}")
        raise_for_github_status(response)

        if not response.content:
            return {}
        return decode_github_body(response)

    async def get_authenticated_app(self) -> dict[str, Any]:
        """Fetch the GitHub App the client is authenticated as."""
        return await self.request("GET", "/app")

    async def create_issue_comment(
        self, owner: str, repo: str, issue_number: int, body: str
    ) -> dict[str, Any]:
        """Comment on an issue or pull request."""
        return await self.request(
            "POST",
            f"/repos/{owner}/{repo}/issues/{issue_number}/comments",
            json={"body": body},
        )

    async def create_issue(
        self,
        owner: str,
        repo: str,
        title: str,
        body: str,
        labels: list[str] | None = None,
    ) -> dict[str, Any]:
        """Open a new issue."""
        return await self.request(
            "POST",
            f"/repos/{owner}/{repo}/issues",
            json={"title": title, "body": body, "labels": labels or []},
        )
