"""Handler for ``pull_request.opened`` events."""

import logging
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Any

from pr_tracker.errors import GitHubApiError, GitHubError, MalformedPayloadError
from pr_tracker.github.client import GitHubClient
from pr_tracker.webhook.models import HandlerOutcome, OutcomeStatus, StepResult

logger = logging.getLogger(__name__)

TRACKING_LABEL = "pr-task"


def _require(payload: dict[str, Any], *path: str) -> Any:
    value: Any = payload
    for key in path:
        if not isinstance(value, dict) or key not in value or value[key] is None:
            raise MalformedPayloadError(f"missing {'.'.join(path)}")
        value = value[key]
    return value


@dataclass(frozen=True)
class PullRequestOpenedPayload:
    """The fields of a ``pull_request.opened`` payload the handler uses."""

    pr_number: int
    pr_title: str
    repo_owner: str
    repo_name: str

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "PullRequestOpenedPayload":
        """
        Extract the pull request fields from a webhook payload.

        Raises:
            MalformedPayloadError: If any field is absent or has the wrong type
        """
        pr_number = _require(payload, "pull_request", "number")
        pr_title = _require(payload, "pull_request", "title")
        repo_owner = _require(payload, "repository", "owner", "login")
        repo_name = _require(payload, "repository", "name")

        if isinstance(pr_number, bool) or not isinstance(pr_number, int) or pr_number < 1:
            raise MalformedPayloadError(f"pull_request.number is not a positive integer: {pr_number!r}")
        for name, value in (
            ("pull_request.title", pr_title),
            ("repository.owner.login", repo_owner),
            ("repository.name", repo_name),
        ):
            if not isinstance(value, str):
                raise MalformedPayloadError(f"{name} is not a string")

        return cls(
            pr_number=pr_number,
            pr_title=pr_title,
            repo_owner=repo_owner,
            repo_name=repo_name,
        )

    @property
    def issue_title(self) -> str:
        return f"🎯 {self.pr_title} - PR #{self.pr_number}"

    @property
    def issue_body(self) -> str:
        return (
            "This issue is automatically created for tracking the tasks "
            f"related to PR #{self.pr_number}."
        )


async def _attempt(step: str, call: Awaitable[dict[str, Any]]) -> StepResult:
    """Await one API call and capture its result instead of raising."""
    try:
        data = await call
    except GitHubApiError as e:
        logger.error(f"{step}: Error! Status: {e.status_code}. Message: {e.message}")
        return StepResult(
            step=step,
            ok=False,
            error_kind=e.kind,
            status_code=e.status_code,
            message=e.message,
        )
    except GitHubError as e:
        logger.error(f"{step}: {e.kind} error: {e}")
        return StepResult(step=step, ok=False, error_kind=e.kind, message=str(e))
    return StepResult(step=step, ok=True, data=data)


class PullRequestOpenedHandler:
    """
    Comments on a newly opened pull request and opens a tracking issue.

    The two API calls are independent: a failed comment does not prevent the
    issue from being created and nothing is rolled back or retried.
    """

    def __init__(self, comment_template: str, label: str = TRACKING_LABEL) -> None:
        self.comment_template = comment_template
        self.label = label

    async def __call__(self, client: GitHubClient, payload: dict[str, Any]) -> HandlerOutcome:
        try:
            pr = PullRequestOpenedPayload.from_payload(payload)
        except MalformedPayloadError as e:
            logger.error(f"Ignoring malformed pull_request.opened payload: {e}")
            return HandlerOutcome(status=OutcomeStatus.MALFORMED_PAYLOAD, detail=str(e))

        logger.info(f"Received a pull request event for #{pr.pr_number}")

        comment = await _attempt(
            "create_comment",
            client.create_issue_comment(
                pr.repo_owner,
                pr.repo_name,
                pr.pr_number,
                self.comment_template,
            ),
        )
        issue = await _attempt(
            "create_issue",
            client.create_issue(
                pr.repo_owner,
                pr.repo_name,
                title=pr.issue_title,
                body=pr.issue_body,
                labels=[self.label],
            ),
        )

        outcome = HandlerOutcome.from_steps([comment, issue])
        if outcome.status is OutcomeStatus.SUCCESS:
            logger.info(f"Created tracking issue for PR #{pr.pr_number}")
        else:
            logger.warning(f"Handling PR #{pr.pr_number} finished with status {outcome.status.value}")
        return outcome
