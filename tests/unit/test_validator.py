"""Tests for webhook signature validation."""

import hashlib
import hmac

from pr_tracker.webhook.validator import compute_signature, validate_github_signature


def test_validate_valid_signature():
    """Test that valid signatures are accepted."""
    secret = "test-secret-123"
    payload = b'{"action": "opened"}'

    # Generate valid signature
    signature = (
        "sha256="
        + hmac.new(
            secret.encode("utf-8"),
            payload,
            hashlib.sha256,
        ).hexdigest()
    )

    assert validate_github_signature(payload, signature, secret) is True


def test_compute_signature_matches_github_format():
    """Test that compute_signature produces the X-Hub-Signature-256 format."""
    signature = compute_signature(b"Hello, World!", "It's a Secret to Everybody")

    # Example from GitHub's webhook validation docs
    assert signature == (
        "sha256=757107ea0eb2509fc211221cce984b8a37570b6d7586c22c46f4379c8b043e17"
    )


def test_validate_invalid_signature():
    """Test that invalid signatures are rejected."""
    secret = "test-secret-123"
    payload = b'{"action": "opened"}'
    invalid_signature = "sha256=" + "a" * 64

    assert validate_github_signature(payload, invalid_signature, secret) is False


def test_validate_appended_character():
    """Test that a valid signature with a trailing character is rejected."""
    secret = "test-secret-123"
    payload = b'{"action": "opened"}'

    signature = compute_signature(payload, secret) + "x"

    assert validate_github_signature(payload, signature, secret) is False


def test_validate_missing_signature():
    """Test that missing signatures are rejected."""
    secret = "test-secret-123"
    payload = b'{"action": "opened"}'

    assert validate_github_signature(payload, None, secret) is False
    assert validate_github_signature(payload, "", secret) is False


def test_validate_wrong_prefix():
    """Test that signatures with wrong prefix are rejected."""
    secret = "test-secret-123"
    payload = b'{"action": "opened"}'
    signature = (
        "sha1="
        + hmac.new(
            secret.encode("utf-8"),
            payload,
            hashlib.sha256,
        ).hexdigest()
    )

    assert validate_github_signature(payload, signature, secret) is False


def test_validate_non_ascii_signature():
    """Test that non-ASCII header values are rejected rather than raising."""
    payload = b'{"action": "opened"}'

    assert validate_github_signature(payload, "sha256=ü" * 8, "secret") is False


def test_validate_wrong_secret():
    """Test that signatures made with another secret are rejected."""
    payload = b'{"action": "opened"}'
    signature = compute_signature(payload, "other-secret")

    assert validate_github_signature(payload, signature, "test-secret-123") is False


def test_validate_different_payload():
    """Test that signatures for different payloads are rejected."""
    secret = "test-secret-123"
    payload1 = b'{"action": "opened"}'
    payload2 = b'{"action": "closed"}'

    signature = compute_signature(payload1, secret)

    assert validate_github_signature(payload2, signature, secret) is False


def test_validate_reserialized_body():
    """Test that the signature covers the exact bytes, not equivalent JSON."""
    secret = "test-secret-123"
    received = b'{"action":"opened"}'
    reserialized = b'{"action": "opened"}'

    signature = compute_signature(received, secret)

    assert validate_github_signature(received, signature, secret) is True
    assert validate_github_signature(reserialized, signature, secret) is False
