"""Routing of verified webhook events to registered handlers."""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from pr_tracker.errors import MalformedPayloadError
from pr_tracker.github.client import GitHubClient
from pr_tracker.webhook.models import (
    DispatchResult,
    DispatchStatus,
    HandlerOutcome,
    OutcomeStatus,
    WebhookEvent,
)

logger = logging.getLogger(__name__)

Handler = Callable[[GitHubClient, dict[str, Any]], Awaitable[HandlerOutcome]]
ClientFactory = Callable[[WebhookEvent], GitHubClient]


class EventRouter:
    """
    Registration table mapping ``(event_type, action)`` to a single handler.

    Unregistered pairs are ignored. Errors raised while handling an event are
    logged and turned into a failed outcome; they never leave ``dispatch``.
    """

    def __init__(self, client_for: ClientFactory) -> None:
        self._client_for = client_for
        self._handlers: dict[tuple[str, str], Handler] = {}

    def register(self, event_type: str, action: str, handler: Handler) -> None:
        """
        Register ``handler`` for an event/action pair.

        Raises:
            ValueError: If the pair already has a handler
        """
        key = (event_type, action)
        if key in self._handlers:
            raise ValueError(f"A handler is already registered for {event_type}.{action}")
        self._handlers[key] = handler
        logger.debug(f"Registered handler for {event_type}.{action}")

    def on(self, event_type: str, action: str) -> Callable[[Handler], Handler]:
        """Decorator form of :meth:`register`."""

        def decorator(handler: Handler) -> Handler:
            self.register(event_type, action, handler)
            return handler

        return decorator

    def handles(self, event_type: str, action: str) -> bool:
        return (event_type, action) in self._handlers

    async def dispatch(self, event: WebhookEvent) -> DispatchResult:
        """Invoke the handler registered for ``event``, if any."""
        handler = self._handlers.get((event.event_type, event.action))
        if handler is None:
            logger.debug(f"Ignoring event {event.key} (delivery {event.delivery_id})")
            return DispatchResult(status=DispatchStatus.IGNORED, event_key=event.key)

        logger.info(f"Dispatching {event.key} (delivery {event.delivery_id})")

        try:
            client = self._client_for(event)
            outcome = await handler(client, event.payload)
        except MalformedPayloadError as e:
            logger.error(f"Malformed {event.key} payload (delivery {event.delivery_id}): {e}")
            outcome = HandlerOutcome(status=OutcomeStatus.MALFORMED_PAYLOAD, detail=str(e))
        except Exception as e:
            logger.exception(f"Failed to handle {event.key} (delivery {event.delivery_id}): {e}")
            outcome = HandlerOutcome(status=OutcomeStatus.FAILED, detail=str(e))

        return DispatchResult(
            status=DispatchStatus.HANDLED,
            event_key=event.key,
            outcome=outcome,
        )
