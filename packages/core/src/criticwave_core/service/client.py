"""HTTP client for the CriticWave review service.

Two calls make up the contract:

    warm_up()  GET  {service_url}/api/WakeUp             best effort, never raises
    submit()   POST {service_url}{review_path}?model=..  multipart, one attempt

There is deliberately no retry around submit(): a failed submission aborts
the run and the whole workflow can be re-run.
"""

from __future__ import annotations

import json
import logging
from contextlib import ExitStack

import requests

from criticwave_core.config import Settings
from criticwave_core.errors import ResponseFormatError, UpstreamFetchError, WarmupError
from criticwave_core.models import ReviewRequest, ReviewResult
from criticwave_core.service.request import multipart_fields

logger = logging.getLogger(__name__)

_WARMUP_PATH = "/api/WakeUp"
_WARMUP_TIMEOUT = 30
_BODY_PREVIEW_CHARS = 2000


class ReviewServiceClient:
    def __init__(
        self,
        base_url: str,
        api_key: str,
        model: str,
        auth_header: str | None = None,
        review_path: str = "/v1/beta/review",
        timeout: float | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.model = model
        self.auth_header = auth_header
        self.review_path = review_path
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> ReviewServiceClient:
        return cls(
            base_url=settings.service_url,
            api_key=settings.api_key,
            model=settings.model,
            auth_header=settings.auth_header,
            review_path=settings.review_path,
            timeout=settings.timeout,
        )

    @property
    def review_url(self) -> str:
        return f"{self.base_url}{self.review_path}"

    def _headers(self) -> dict[str, str]:
        headers = {"GeminiApiKey": self.api_key, "Accept": "application/json"}
        if self.auth_header:
            headers["Authorization"] = self.auth_header
        return headers

    def warm_up(self) -> None:
        """Ping the service so a cold instance starts before the heavy request.

        Only affects latency; any failure is logged and swallowed.
        """
        try:
            self._probe()
        except WarmupError as e:
            logger.warning("%s", e)
        else:
            logger.info("Review service is awake.")

    def _probe(self) -> None:
        url = f"{self.base_url}{_WARMUP_PATH}"
        try:
            response = requests.get(url, headers={"accept": "*/*"}, timeout=_WARMUP_TIMEOUT)
        except requests.RequestException as e:
            raise WarmupError(f"WakeUp call failed: {e}") from e
        if not response.ok:
            raise WarmupError(f"WakeUp endpoint responded with status {response.status_code}")

    def submit(self, request: ReviewRequest) -> ReviewResult:
        """POST the assembled request and parse the structured findings."""
        logger.debug(
            "POST %s model=%s pr=%s style_guide_chars=%d context_files=%d api_key=%s",
            self.review_url,
            self.model,
            request.pr_number,
            len(request.style_guide),
            len(request.context_files),
            "provided" if self.api_key else "missing",
        )
        with ExitStack() as stack:
            try:
                response = requests.post(
                    self.review_url,
                    params={"model": self.model},
                    headers=self._headers(),
                    files=multipart_fields(request, stack),
                    timeout=self.timeout,
                )
            except requests.RequestException as e:
                raise UpstreamFetchError(f"Review request failed: {e}") from e

        if not response.ok:
            body = response.text
            raise UpstreamFetchError(
                f"Review API request failed with status {response.status_code} {response.reason}\n"
                f"Response: {body[:_BODY_PREVIEW_CHARS]}",
                status_code=response.status_code,
                body=body,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise ResponseFormatError(f"Review API returned invalid JSON: {response.text[:200]!r}") from e

        result = ReviewResult.from_payload(payload)
        logger.debug("Review API response: %s", json.dumps(payload, indent=2))
        return result
