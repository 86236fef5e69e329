"""GitHub App client factory."""

import logging
from functools import partial
from typing import TYPE_CHECKING

import httpx

from pr_tracker.config import AppConfig
from pr_tracker.errors import MalformedPayloadError
from pr_tracker.github.auth import GitHubAppAuth
from pr_tracker.github.client import GitHubClient

if TYPE_CHECKING:
    from pr_tracker.webhook.models import WebhookEvent

logger = logging.getLogger(__name__)

HTTP_TIMEOUT_SECONDS = 10.0


class GitHubApp:
    """
    Hands out authenticated clients for a GitHub App.

    All clients share one connection pool bound to ``config.api_base_url``.
    """

    def __init__(self, config: AppConfig, http: httpx.AsyncClient | None = None) -> None:
        self.auth = GitHubAppAuth(config.app_id, config.private_key)
        self._http = http or httpx.AsyncClient(
            base_url=config.api_base_url,
            timeout=HTTP_TIMEOUT_SECONDS,
        )

    async def _app_token(self) -> str:
        return self.auth.generate_jwt()

    def app_client(self) -> GitHubClient:
        """Client authenticated as the app itself (JWT)."""
        return GitHubClient(self._http, self._app_token)

    def installation_client(self, installation_id: int) -> GitHubClient:
        """Client authenticated as one installation of the app."""
        return GitHubClient(
            self._http,
            partial(self.auth.installation_token, installation_id, self._http),
        )

    def client_for_event(self, event: "WebhookEvent") -> GitHubClient:
        """
        Client for the installation that delivered ``event``.

        Raises:
            MalformedPayloadError: If the payload has no installation id
        """
        if event.installation_id is None:
            raise MalformedPayloadError(f"{event.key} payload has no installation.id")
        return self.installation_client(event.installation_id)

    async def log_identity(self) -> None:
        """Log the app name, as a startup credential check."""
        try:
            data = await self.app_client().get_authenticated_app()
        except Exception as e:
            logger.warning(f"Could not verify GitHub App credentials: {e}")
            return
        logger.info(f"Authenticated as '{data.get('name')}'")

    async def aclose(self) -> None:
        await self._http.aclose()
