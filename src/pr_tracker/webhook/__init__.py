"""Webhook handling for GitHub events."""

from pr_tracker.webhook.models import WebhookEvent
from pr_tracker.webhook.router import EventRouter
from pr_tracker.webhook.validator import validate_github_signature

__all__ = ["EventRouter", "WebhookEvent", "validate_github_signature"]
