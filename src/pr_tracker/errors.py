"""Exceptions raised by PR Tracker."""


class PRTrackerError(Exception):
    """Base class for all PR Tracker errors."""


class StartupConfigError(PRTrackerError):
    """Required configuration is missing or unreadable. Fatal at startup."""


class MalformedPayloadError(PRTrackerError):
    """A webhook payload lacks a field its handler needs."""


class GitHubError(PRTrackerError):
    """A call to the GitHub API did not succeed."""

    kind = "unknown"


class GitHubTransportError(GitHubError):
    """The GitHub API could not be reached."""

    kind = "transport"


class GitHubApiError(GitHubError):
    """The GitHub API answered with an error status."""

    kind = "api"

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"Status: {status_code}. Message: {message}")
        self.status_code = status_code
        self.message = message
