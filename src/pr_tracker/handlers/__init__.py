"""Webhook event handlers."""

from pr_tracker.handlers.pull_request import PullRequestOpenedHandler, PullRequestOpenedPayload

__all__ = ["PullRequestOpenedHandler", "PullRequestOpenedPayload"]
