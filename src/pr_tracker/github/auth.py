"""GitHub App JWT authentication and installation tokens."""

import logging
import time

import httpx
import jwt

from pr_tracker.errors import GitHubApiError, GitHubTransportError
from pr_tracker.github.client import decode_github_body, raise_for_github_status

logger = logging.getLogger(__name__)

# GitHub issues installation tokens for one hour
_TOKEN_TTL_SECONDS = 55 * 60


class GitHubAppAuth:
    """
    GitHub App credentials.

    Signs app JWTs (RS256) and exchanges them for installation access tokens,
    which are cached per installation.
    """

    def __init__(self, app_id: str, private_key: str) -> None:
        self.app_id = app_id
        self._private_key = private_key
        self._token_cache: dict[int, tuple[str, float]] = {}

    def generate_jwt(self) -> str:
        """
        Create a JWT for GitHub App authentication.

        Returns:
            Encoded JWT string, valid for 10 minutes

        Raises:
            ValueError: If app_id is empty
        """
        if not self.app_id:
            raise ValueError("APP_ID is required to generate a JWT")

        now = int(time.time())
        payload = {
            "iat": now - 60,  # clock drift
            "exp": now + (10 * 60),
            "iss": self.app_id,
        }
        return jwt.encode(payload, self._private_key, algorithm="RS256")

    async def installation_token(self, installation_id: int, http: httpx.AsyncClient) -> str:
        """
        Exchange the app JWT for an installation access token.

        Args:
            installation_id: The GitHub App installation ID
            http: Client bound to the API base URL

        Returns:
            Installation access token
        """
        now = time.time()
        cached = self._token_cache.get(installation_id)
        if cached is not None:
            token, expiry = cached
            if now < expiry:
                return token

        logger.debug(f"Requesting access token for installation {installation_id}")
        try:
            response = await http.post(
                f"/app/installations/{installation_id}/access_tokens",
                headers={
                    "Authorization": f"Bearer {self.generate_jwt()}",
                    "Accept": "application/vnd.github+json",
                },
            )
        except httpx.TransportError as e:
            raise GitHubTransportError(f"Token exchange for installation {installation_id} failed: {e}") from e

        raise_for_github_status(response)
        body = decode_github_body(response)
        token = body.get("token") if isinstance(body, dict) else None
        if not isinstance(token, str) or not token:
            raise GitHubApiError(
                response.status_code,
                f"Token exchange for installation {installation_id} returned no token",
            )
        self._token_cache[installation_id] = (token, now + _TOKEN_TTL_SECONDS)
        return token
