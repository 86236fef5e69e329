"""GitHub webhook HTTP endpoint."""

import json
import logging
from typing import Any

from fastapi import APIRouter, BackgroundTasks, Header, HTTPException, Request

from pr_tracker.config import AppConfig
from pr_tracker.webhook.models import WebhookEvent
from pr_tracker.webhook.router import EventRouter
from pr_tracker.webhook.validator import validate_github_signature

logger = logging.getLogger(__name__)


def create_webhook_router(config: AppConfig, events: EventRouter) -> APIRouter:
    """Build the router serving ``config.webhook_path``."""
    router = APIRouter()

    @router.post(config.webhook_path)
    async def github_webhook(
        request: Request,
        background_tasks: BackgroundTasks,
        x_hub_signature_256: str | None = Header(None),
        x_github_event: str | None = Header(None),
        x_github_delivery: str | None = Header(None),
    ) -> dict[str, Any]:
        """
        Handle incoming GitHub webhooks.

        Validates the signature against the raw body, then dispatches the
        event. Unhandled events are acknowledged with status "ignored".
        """
        # Read raw body for signature validation
        body = await request.body()

        if not validate_github_signature(body, x_hub_signature_256, config.webhook_secret):
            logger.warning(f"Rejected delivery {x_github_delivery}: invalid signature")
            raise HTTPException(status_code=401, detail="Invalid signature")

        if not x_github_event:
            raise HTTPException(status_code=400, detail="Missing X-GitHub-Event header")

        try:
            payload = json.loads(body)
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid JSON payload") from None
        if not isinstance(payload, dict):
            raise HTTPException(status_code=400, detail="Payload must be a JSON object")

        event = WebhookEvent.from_delivery(x_github_event, x_github_delivery, body, payload)

        if config.ack_before_handling:
            logger.info(f"Queueing {event.key} (delivery {event.delivery_id})")
            background_tasks.add_task(events.dispatch, event)
            return {"status": "accepted", "event": event.key, "delivery_id": event.delivery_id}

        result = await events.dispatch(event)

        response: dict[str, Any] = {
            "status": result.status.value,
            "event": result.event_key,
            "delivery_id": event.delivery_id,
        }
        if result.outcome is not None:
            response["outcome"] = result.outcome.to_dict()
        return response

    return router
