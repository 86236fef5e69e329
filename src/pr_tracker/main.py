"""FastAPI application entry point."""

import argparse
import logging
import sys
from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import FastAPI

from pr_tracker import __version__
from pr_tracker.config import AppConfig, load_config
from pr_tracker.errors import StartupConfigError
from pr_tracker.github import GitHubApp
from pr_tracker.handlers import PullRequestOpenedHandler
from pr_tracker.webhook import EventRouter
from pr_tracker.webhook.handler import create_webhook_router

logger = logging.getLogger(__name__)


def setup_logging(level: str) -> None:
    """Configure structured logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def build_event_router(config: AppConfig, github: GitHubApp) -> EventRouter:
    """Register the event handlers this app responds to."""
    events = EventRouter(client_for=github.client_for_event)
    events.register(
        "pull_request",
        "opened",
        PullRequestOpenedHandler(comment_template=config.pr_comment_template),
    )
    return events


def create_app(
    config: AppConfig | None = None,
    github: GitHubApp | None = None,
    events: EventRouter | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    if config is None:
        config = load_config()
    if github is None:
        github = GitHubApp(config)
    if events is None:
        events = build_event_router(config, github)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        """Application lifespan handler."""
        setup_logging(config.log_level)
        await github.log_identity()
        logger.info(f"Server is listening for events at: {config.local_webhook_url}")
        logger.info("Press Ctrl + C to quit.")
        yield
        await github.aclose()
        logger.info("PR Tracker shutting down")

    app = FastAPI(
        title="PR Tracker",
        description="Comments on new pull requests and opens tracking issues",
        version=__version__,
        lifespan=lifespan,
    )

    app.include_router(create_webhook_router(config, events), tags=["webhook"])

    @app.get("/health")
    async def health_check() -> dict[str, Any]:
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    return app


def cli() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="PR Tracker - GitHub App for new pull requests")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Start the webhook server")
    serve_parser.add_argument("--host", default=None, help="Host to bind to (default: HOST)")
    serve_parser.add_argument("--port", type=int, default=None, help="Port to bind to (default: PORT)")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")

    args = parser.parse_args()

    if args.command == "serve":
        try:
            config = load_config()
        except StartupConfigError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)

        setup_logging(config.log_level)
        uvicorn.run(
            "pr_tracker.main:create_app",
            factory=True,
            host=args.host or config.host,
            port=args.port or config.port,
            reload=args.reload,
        )
    else:
        parser.print_help()


if __name__ == "__main__":
    cli()
