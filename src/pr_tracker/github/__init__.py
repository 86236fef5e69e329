"""GitHub API interactions."""

from pr_tracker.github.client import GitHubClient
from pr_tracker.github.auth import GitHubAppAuth
from pr_tracker.github.app import GitHubApp

__all__ = ["GitHubApp", "GitHubAppAuth", "GitHubClient"]
