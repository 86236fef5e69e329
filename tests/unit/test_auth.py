"""Tests for GitHub App JWT auth and installation token management."""

import httpx
import jwt as pyjwt
import pytest
from cryptography.hazmat.primitives.serialization import load_pem_private_key

from pr_tracker.github.auth import GitHubAppAuth


@pytest.fixture
def auth(private_key_pem: str) -> GitHubAppAuth:
    return GitHubAppAuth(app_id="12345", private_key=private_key_pem)


class TestGenerateJWT:
    """Tests for GitHubAppAuth.generate_jwt."""

    def test_produces_valid_jwt(self, auth: GitHubAppAuth, private_key_pem: str) -> None:
        """JWT should decode with the public key and carry the app id as issuer."""
        token = auth.generate_jwt()
        public_key = load_pem_private_key(private_key_pem.encode(), password=None).public_key()

        decoded = pyjwt.decode(token, public_key, algorithms=["RS256"])

        assert decoded["iss"] == "12345"
        assert decoded["exp"] - decoded["iat"] == 11 * 60  # iat is backdated 60s

    def test_jwt_uses_rs256(self, auth: GitHubAppAuth) -> None:
        header = pyjwt.get_unverified_header(auth.generate_jwt())
        assert header["alg"] == "RS256"

    def test_missing_app_id_raises(self, private_key_pem: str) -> None:
        with pytest.raises(ValueError, match="APP_ID"):
            GitHubAppAuth(app_id="", private_key=private_key_pem).generate_jwt()


class TestInstallationToken:
    """Tests for GitHubAppAuth.installation_token."""

    @pytest.mark.asyncio
    async def test_token_is_cached(self, auth: GitHubAppAuth) -> None:
        """A second request for the same installation reuses the token."""
        calls: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request.url.path)
            return httpx.Response(201, json={"token": f"ghs_{len(calls)}"})

        async with httpx.AsyncClient(
            base_url="https://api.github.com", transport=httpx.MockTransport(handler)
        ) as http:
            first = await auth.installation_token(7, http)
            second = await auth.installation_token(7, http)
            other = await auth.installation_token(8, http)

        assert first == second == "ghs_1"
        assert other == "ghs_2"
        assert calls == [
            "/app/installations/7/access_tokens",
            "/app/installations/8/access_tokens",
        ]

    @pytest.mark.asyncio
    async def test_expired_token_is_refreshed(
        self, auth: GitHubAppAuth, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Tokens older than the cache lifetime are requested again."""
        tokens = iter(["ghs_old", "ghs_new"])

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(201, json={"token": next(tokens)})

        now = 1_700_000_000.0
        monkeypatch.setattr("pr_tracker.github.auth.time.time", lambda: now)

        async with httpx.AsyncClient(
            base_url="https://api.github.com", transport=httpx.MockTransport(handler)
        ) as http:
            assert await auth.installation_token(7, http) == "ghs_old"
            now += 56 * 60
            assert await auth.installation_token(7, http) == "ghs_new"
