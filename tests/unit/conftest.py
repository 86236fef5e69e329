"""Shared fixtures for unit tests."""

import asyncio
import json
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock

import httpx
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
)

from pr_tracker.config import AppConfig
from pr_tracker.github.app import GitHubApp
from pr_tracker.github.client import GitHubClient
from pr_tracker.webhook.models import WebhookEvent

COMMENT_TEMPLATE = "Thanks for the pull request!\n"


@pytest.fixture(scope="session")
def private_key_pem() -> str:
    """A freshly generated RSA private key in PEM format."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return key.private_bytes(Encoding.PEM, PrivateFormat.PKCS8, NoEncryption()).decode()


@pytest.fixture
def app_config(private_key_pem: str) -> AppConfig:
    return AppConfig(
        app_id="12345",
        private_key=private_key_pem,
        webhook_secret="test-webhook-secret",
        pr_comment_template=COMMENT_TEMPLATE,
    )


@pytest.fixture
def github_app(app_config: AppConfig):
    """A GitHubApp whose HTTP client never leaves the process."""
    http = httpx.AsyncClient(
        base_url=app_config.api_base_url,
        transport=httpx.MockTransport(lambda request: httpx.Response(503)),
    )
    github = GitHubApp(app_config, http=http)
    yield github
    asyncio.run(github.aclose())


@pytest.fixture
def key_file(tmp_path: Path, private_key_pem: str) -> Path:
    path = tmp_path / "app.pem"
    path.write_text(private_key_pem)
    return path


@pytest.fixture
def fake_client() -> AsyncMock:
    """A GitHub client whose calls all succeed."""
    client = AsyncMock(spec=GitHubClient)
    client.create_issue_comment.return_value = {"id": 1}
    client.create_issue.return_value = {"number": 7}
    return client


def pull_request_payload(
    number: int = 42,
    title: str = "Fix bug",
    owner: str = "acme",
    repo: str = "widgets",
    installation_id: int | None = 99,
) -> dict[str, Any]:
    """A minimal pull_request.opened payload."""
    payload: dict[str, Any] = {
        "action": "opened",
        "number": number,
        "pull_request": {"number": number, "title": title},
        "repository": {"name": repo, "full_name": f"{owner}/{repo}", "owner": {"login": owner}},
    }
    if installation_id is not None:
        payload["installation"] = {"id": installation_id}
    return payload


def make_event(event_type: str, payload: dict[str, Any], delivery_id: str = "d-1") -> WebhookEvent:
    body = json.dumps(payload).encode()
    return WebhookEvent.from_delivery(event_type, delivery_id, body, payload)
