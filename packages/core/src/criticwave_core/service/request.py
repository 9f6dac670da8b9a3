"""Assembling the multipart review request.

The service expects the parts in a fixed order:

    PRNumber      text
    StyleGuide    text
    Diff          file
    ContextFiles  file, repeated once per fetched changed file

Nothing is deduplicated or capped here; limits are the service's business.
"""

from __future__ import annotations

from contextlib import ExitStack
from pathlib import Path
from typing import Iterable

from criticwave_core.models import ContextFile, ReviewRequest


def assemble_request(
    pr_number: int,
    style_guide: str,
    diff_path: Path,
    context_files: Iterable[ContextFile],
) -> ReviewRequest:
    return ReviewRequest(
        pr_number=pr_number,
        style_guide=style_guide,
        diff_path=diff_path,
        context_files=tuple(context_files),
    )


def multipart_fields(request: ReviewRequest, stack: ExitStack) -> list[tuple]:
    """Build the ``files=`` argument for ``requests.post``.

    File parts are opened on ``stack`` so the caller decides when they close.
    Text parts use a ``None`` filename, which requests sends as plain form fields.
    """
    fields: list[tuple] = [
        ("PRNumber", (None, str(request.pr_number))),
        ("StyleGuide", (None, request.style_guide)),
        ("Diff", (request.diff_path.name, stack.enter_context(open(request.diff_path, "rb")), "text/x-diff")),
    ]
    for cf in request.context_files:
        fields.append(
            ("ContextFiles", (cf.name, stack.enter_context(open(cf.scratch_path, "rb")), "application/octet-stream"))
        )
    return fields
