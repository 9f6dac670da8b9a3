"""Data carried between pipeline stages.

All models are frozen: once a stage hands an artifact to the next one it must
not change underneath it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from criticwave_core.errors import ResponseFormatError

# Keys of the flat response shape older service versions returned.
_LEGACY_KEYS = ("suggestedFix", "codeSnippet")


@dataclass(frozen=True)
class FixDetails:
    explanation: str
    before_snippet: str = ""
    after_snippet: str = ""


@dataclass(frozen=True)
class ReviewFinding:
    issue_type: str
    description: str
    severity: str
    file_name: str
    line_number: int
    fix: FixDetails


@dataclass(frozen=True)
class ReviewResult:
    findings: tuple[ReviewFinding, ...] = ()

    @classmethod
    def from_payload(cls, payload) -> ReviewResult:
        """Validate a decoded JSON body of the form ``{"reviews": [...]}``.

        Only the nested ``fixDetails`` schema is accepted. Snippet fields may be
        missing or null; everything else is required.
        """
        if not isinstance(payload, dict):
            raise ResponseFormatError(f"Expected a JSON object, got {type(payload).__name__}.")
        reviews = payload.get("reviews")
        if reviews is None:
            return cls()
        if not isinstance(reviews, list):
            raise ResponseFormatError("'reviews' must be a list.")
        return cls(findings=tuple(_parse_finding(i, item) for i, item in enumerate(reviews)))


def _require_str(item: dict, key: str, index: int) -> str:
    value = item.get(key)
    if not isinstance(value, str):
        raise ResponseFormatError(f"Review {index}: '{key}' must be a string.")
    return value


def _optional_str(item: dict, key: str, index: int) -> str:
    value = item.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ResponseFormatError(f"Review {index}: '{key}' must be a string.")
    return value


def _parse_finding(index: int, item) -> ReviewFinding:
    if not isinstance(item, dict):
        raise ResponseFormatError(f"Review {index}: expected an object.")

    fix = item.get("fixDetails")
    if fix is None and any(key in item for key in _LEGACY_KEYS):
        raise ResponseFormatError(
            f"Review {index}: flat 'suggestedFix'/'codeSnippet' responses are a legacy schema "
            "and are not supported. Expected a 'fixDetails' object."
        )
    if not isinstance(fix, dict):
        raise ResponseFormatError(f"Review {index}: 'fixDetails' must be an object.")

    line = item.get("lineNumber")
    # bool is an int subclass; a boolean line number is a malformed payload.
    if not isinstance(line, int) or isinstance(line, bool) or line < 0:
        raise ResponseFormatError(f"Review {index}: 'lineNumber' must be a non-negative integer.")

    return ReviewFinding(
        issue_type=_require_str(item, "issueType", index),
        description=_require_str(item, "description", index),
        severity=_require_str(item, "severity", index),
        file_name=_require_str(item, "fileName", index),
        line_number=line,
        fix=FixDetails(
            explanation=_optional_str(fix, "description", index),
            before_snippet=_optional_str(fix, "currentCode", index),
            after_snippet=_optional_str(fix, "suggestedFixCode", index),
        ),
    )


@dataclass(frozen=True)
class ContextFile:
    """A changed file whose head-commit content was fetched into the scratch area."""

    path: str  # path in the repository
    scratch_path: Path

    @property
    def name(self) -> str:
        return self.scratch_path.name


@dataclass(frozen=True)
class ReviewRequest:
    pr_number: int
    style_guide: str
    diff_path: Path
    context_files: tuple[ContextFile, ...] = ()


@dataclass
class ReviewSummary:
    """Outcome of run_review, returned to the CLI for reporting."""

    repo: str
    pr_number: int
    head_sha: str
    changed_files: list[str] = field(default_factory=list)
    context_files: list[str] = field(default_factory=list)
    skipped_files: list[str] = field(default_factory=list)
    total_findings: int = 0
    body: str = ""
    posted: bool = False
    reviewed_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
