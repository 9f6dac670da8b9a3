"""Error taxonomy for a review run.

Every failure that can end a run derives from CriticWaveError so the CLI can
catch them in one place and report a single message. Library exceptions
(PyGithub, requests, json) are wrapped at the module that talks to the remote.
"""

from __future__ import annotations


class CriticWaveError(Exception):
    """Base class for all review pipeline failures."""


class ConfigurationError(CriticWaveError, ValueError):
    """A required input is missing or invalid. Raised before any network call."""


class UpstreamFetchError(CriticWaveError):
    """Retrieving data from GitHub or the review service failed."""

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ResponseFormatError(CriticWaveError):
    """The review service answered 2xx but the body is not a ReviewResult."""


class UpstreamPublishError(CriticWaveError):
    """Creating the PR comment failed. The computed review is lost."""


class WarmupError(CriticWaveError):
    """The readiness probe failed. Never escapes ReviewServiceClient.warm_up."""
