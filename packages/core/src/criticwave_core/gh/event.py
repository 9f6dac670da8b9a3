"""Reading the pull request that triggered a GitHub Actions run."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

from criticwave_core.errors import ConfigurationError


@dataclass(frozen=True)
class PullRequestEvent:
    repo: str  # owner/name
    pr_number: int
    head_sha: str


def load_pull_request_event(event_path: str | None = None, repository: str | None = None) -> PullRequestEvent:
    """Parse the webhook payload GitHub Actions writes to ``GITHUB_EVENT_PATH``.

    ``repository`` falls back to the payload's ``repository.full_name`` and then
    to ``GITHUB_REPOSITORY``.
    """
    event_path = event_path or os.environ.get("GITHUB_EVENT_PATH")
    if not event_path:
        raise ConfigurationError("No pull request given. Pass --repo and --pr, or run inside GitHub Actions.")

    p = Path(event_path)
    if not p.exists():
        raise ConfigurationError(f"Event payload not found: {event_path}")
    try:
        payload = json.loads(p.read_text())
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Event payload {event_path} is not valid JSON: {e}") from e

    pr = payload.get("pull_request") if isinstance(payload, dict) else None
    if not pr:
        raise ConfigurationError("This action only works on pull_request events.")

    repo = (
        repository
        or (payload.get("repository") or {}).get("full_name")
        or os.environ.get("GITHUB_REPOSITORY")
    )
    if not repo:
        raise ConfigurationError("Could not determine the repository for this event.")

    try:
        return PullRequestEvent(repo=repo, pr_number=int(pr["number"]), head_sha=pr["head"]["sha"])
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigurationError(f"Malformed pull_request payload: {e}") from e
