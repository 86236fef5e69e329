"""PR Tracker: a GitHub App that follows up on newly opened pull requests."""

__version__ = "0.1.0"
