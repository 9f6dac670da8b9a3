"""Rendering a ReviewResult into the Markdown body of the PR comment."""

from __future__ import annotations

import re
from pathlib import PurePosixPath

from criticwave_core.models import ReviewFinding, ReviewResult

NO_ISSUES_MESSAGE = "🎉 **No issues found by CriticWave!** The code looks clean and ready to go!"

HEADER = (
    "### 🤖 CriticWave PR Review\n\n"
    "Below is the automated review of your pull request, highlighting potential improvements "
    "to make your code even better. Each issue includes a clear explanation and actionable suggestions.\n\n"
)

# File extension (without the dot, lower case) -> code fence language tag.
LANGUAGE_TAGS: dict[str, str] = {
    "cs": "csharp",
    "js": "javascript",
    "ts": "typescript",
    "py": "python",
    "java": "java",
    "go": "go",
    "rb": "ruby",
    "php": "php",
    "cpp": "cpp",
    "c": "c",
    "cshtml": "html",
    "html": "html",
    "css": "css",
    "json": "json",
    "xml": "xml",
    "sql": "sql",
}

_BACKTICK_RUN_RE = re.compile(r"`+")


def language_for(file_name: str) -> str:
    """Return the fence tag for a file, or "" when the extension is unknown."""
    _, dot, extension = PurePosixPath(file_name).name.rpartition(".")
    return LANGUAGE_TAGS.get(extension.lower(), "") if dot else ""


def fence(code: str, language: str = "") -> str:
    """Wrap ``code`` in a backtick fence that nothing inside it can close.

    The fence is one backtick longer than the longest run in ``code`` and never
    shorter than three.
    """
    longest = max((len(m) for m in _BACKTICK_RUN_RE.findall(code)), default=0)
    marker = "`" * max(3, longest + 1)
    return f"{marker}{language}\n{code}\n{marker}\n"


def _render_finding(index: int, finding: ReviewFinding) -> str:
    language = language_for(finding.file_name)
    fix = finding.fix
    return (
        f"#### Issue {index}: {finding.issue_type}\n"
        f"**📍 Location:** `{finding.file_name}:{finding.line_number}`\n"
        f"**⚠️ Severity:** {finding.severity}\n"
        f"**🔍 Description:**\n{finding.description}\n\n"
        f"**💡 Suggested Fix:**\n{fix.explanation}\n\n"
        f"**📜 Current Code:**\n{fence(fix.before_snippet or '// No code provided', language)}"
        f"**✅ Proposed Fix:**\n{fence(fix.after_snippet or '// No suggestion provided', language)}"
        "\n---\n\n"
    )


def render_review(result: ReviewResult) -> str:
    if not result.findings:
        return NO_ISSUES_MESSAGE
    blocks = [_render_finding(i, f) for i, f in enumerate(result.findings, 1)]
    return HEADER + "".join(blocks)
