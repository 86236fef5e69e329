"""GitHub webhook signature validation."""

import hashlib
import hmac
import logging

logger = logging.getLogger(__name__)

SIGNATURE_PREFIX = "sha256="


def compute_signature(payload: bytes, secret: str) -> str:
    """Return the X-Hub-Signature-256 value GitHub would send for ``payload``."""
    return (
        SIGNATURE_PREFIX
        + hmac.new(
            secret.encode("utf-8"),
            payload,
            hashlib.sha256,
        ).hexdigest()
    )


def validate_github_signature(payload: bytes, signature: str | None, secret: str) -> bool:
    """
    Validate GitHub webhook signature using HMAC SHA-256.

    Args:
        payload: The raw request body bytes
        signature: The X-Hub-Signature-256 header value
        secret: The webhook secret configured in GitHub

    Returns:
        True if the signature is valid, False otherwise
    """
    if not signature:
        logger.warning("Missing webhook signature")
        return False

    if not signature.startswith(SIGNATURE_PREFIX):
        logger.warning("Invalid signature format - expected sha256= prefix")
        return False

    expected_signature = compute_signature(payload, secret)

    # Compare bytes: compare_digest rejects non-ASCII str arguments
    is_valid = hmac.compare_digest(
        expected_signature.encode("utf-8"),
        signature.encode("utf-8", errors="replace"),
    )

    if not is_valid:
        logger.warning("Webhook signature validation failed")

    return is_valid
