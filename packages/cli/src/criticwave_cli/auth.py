"""GitHub token fallback for local runs.

``load_config`` already reads GITHUB_TOKEN and the Action's github-token input.
When neither is set, the token stored by the GitHub CLI (`gh auth login`) is
used instead.
"""

from __future__ import annotations

import logging
import subprocess

logger = logging.getLogger(__name__)


def resolve_github_token() -> str | None:
    """Return the gh CLI session token, or None if gh is missing or logged out.

    Never raises — callers should check for None and report a ConfigurationError.
    """
    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        if result.returncode == 0:
            gh_token = result.stdout.strip()
            if gh_token:
                logger.debug("Resolved GitHub token via gh CLI session.")
                return gh_token
    except (FileNotFoundError, subprocess.TimeoutExpired):
        # gh is not installed or timed out
        pass

    return None
