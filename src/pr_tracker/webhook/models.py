"""Data carried through webhook dispatch."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class WebhookEvent:
    """A verified webhook delivery."""

    event_type: str
    action: str
    delivery_id: str
    raw_body: bytes = field(repr=False)
    payload: dict[str, Any] = field(repr=False)
    installation_id: int | None = None

    @property
    def key(self) -> str:
        """Event name in GitHub's ``event.action`` notation."""
        return f"{self.event_type}.{self.action}" if self.action else self.event_type

    @classmethod
    def from_delivery(
        cls,
        event_type: str,
        delivery_id: str | None,
        raw_body: bytes,
        payload: dict[str, Any],
    ) -> "WebhookEvent":
        """Build an event from the request headers and the parsed JSON body."""
        action = payload.get("action")
        installation = payload.get("installation")
        installation_id = installation.get("id") if isinstance(installation, dict) else None
        return cls(
            event_type=event_type,
            action=action if isinstance(action, str) else "",
            delivery_id=delivery_id or "",
            raw_body=raw_body,
            payload=payload,
            installation_id=installation_id if isinstance(installation_id, int) else None,
        )


class OutcomeStatus(str, Enum):
    """How a handler invocation ended."""

    SUCCESS = "success"
    PARTIAL = "partial"
    FAILED = "failed"
    MALFORMED_PAYLOAD = "malformed_payload"


@dataclass
class StepResult:
    """Result of a single outbound API call."""

    step: str
    ok: bool
    error_kind: str | None = None
    status_code: int | None = None
    message: str | None = None
    data: dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class HandlerOutcome:
    """Result of one handler invocation."""

    status: OutcomeStatus
    steps: list[StepResult] = field(default_factory=list)
    detail: str | None = None

    @classmethod
    def from_steps(cls, steps: list[StepResult]) -> "HandlerOutcome":
        succeeded = sum(1 for s in steps if s.ok)
        if succeeded == len(steps):
            status = OutcomeStatus.SUCCESS
        elif succeeded:
            status = OutcomeStatus.PARTIAL
        else:
            status = OutcomeStatus.FAILED
        return cls(status=status, steps=steps)

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "steps": [
                {
                    "step": s.step,
                    "ok": s.ok,
                    "error_kind": s.error_kind,
                    "status_code": s.status_code,
                    "message": s.message,
                }
                for s in self.steps
            ],
            "detail": self.detail,
        }


class DispatchStatus(str, Enum):
    HANDLED = "handled"
    IGNORED = "ignored"


@dataclass
class DispatchResult:
    """What the router did with an event."""

    status: DispatchStatus
    event_key: str
    outcome: HandlerOutcome | None = None
