#!/usr/bin/env python3
"""
Simulate a GitHub pull_request.opened webhook for local testing.

Usage:
    python scripts/simulate_webhook.py --repo owner/repo --pr 42 --installation-id 1
"""

import argparse
import json
import os
import uuid

import httpx

from pr_tracker.webhook.validator import compute_signature


def main():
    parser = argparse.ArgumentParser(description="Simulate GitHub webhook")
    parser.add_argument("--url", default="http://localhost:3000/api/webhook")
    parser.add_argument("--repo", required=True, help="Repository (owner/repo)")
    parser.add_argument("--pr", type=int, required=True, help="Pull request number")
    parser.add_argument("--title", default="Fix bug", help="Pull request title")
    parser.add_argument("--installation-id", type=int, required=True, help="App installation ID")
    parser.add_argument("--secret", default=None, help="Webhook secret (or use WEBHOOK_SECRET env)")

    args = parser.parse_args()

    secret = args.secret or os.environ.get("WEBHOOK_SECRET")
    if not secret:
        print("Error: Webhook secret required (--secret or WEBHOOK_SECRET)")
        return 1

    owner, name = args.repo.split("/", 1)
    payload = {
        "action": "opened",
        "number": args.pr,
        "pull_request": {"number": args.pr, "title": args.title},
        "repository": {"name": name, "full_name": args.repo, "owner": {"login": owner}},
        "installation": {"id": args.installation_id},
    }

    payload_bytes = json.dumps(payload).encode()

    print(f"Sending webhook to {args.url}")
    print(f"Payload: {json.dumps(payload, indent=2)}")

    response = httpx.post(
        args.url,
        content=payload_bytes,
        headers={
            "Content-Type": "application/json",
            "X-Hub-Signature-256": compute_signature(payload_bytes, secret),
            "X-GitHub-Event": "pull_request",
            "X-GitHub-Delivery": str(uuid.uuid4()),
        },
        timeout=30.0,
    )

    print(f"\nResponse status: {response.status_code}")
    print(f"Response body: {response.json()}")

    return 0 if response.status_code == 200 else 1


if __name__ == "__main__":
    raise SystemExit(main())
