"""Core PR review orchestration.

One run walks the stages once, in order:

    warm up service -> fetch diff -> list changed files -> fetch each file
    -> assemble request -> submit -> render -> post comment

Only the warm-up and individual file fetches are allowed to fail without
ending the run. Everything fetched lives in a ScratchArea that is removed
before the comment is posted, whether or not the submission succeeded.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.markup import escape

from criticwave_core.config import Settings
from criticwave_core.errors import UpstreamFetchError
from criticwave_core.gh.pull_request import (
    fetch_content,
    fetch_diff,
    get_pull,
    get_repo,
    list_changed_files,
    post_comment,
)
from criticwave_core.models import ContextFile, ReviewSummary
from criticwave_core.render import render_review
from criticwave_core.scratch import ScratchArea
from criticwave_core.service.client import ReviewServiceClient
from criticwave_core.service.request import assemble_request

console = Console()
logger = logging.getLogger(__name__)


def collect_context_files(
    repo, paths: list[str], ref: str, scratch: ScratchArea
) -> tuple[list[ContextFile], list[str]]:
    """Fetch every changed path at ``ref`` into ``scratch``, one at a time.

    Returns the fetched files in ``paths`` order and the paths that were
    skipped. A skip is never fatal: it only shrinks the context sent along.
    """
    fetched: list[ContextFile] = []
    skipped: list[str] = []
    total = len(paths)
    for i, path in enumerate(paths, 1):
        try:
            data = fetch_content(repo, path, ref)
        except UpstreamFetchError as e:
            logger.warning("Could not download %s: %s", path, e)
            console.print(f"  [yellow]Skipping {escape(path)}: {escape(str(e))}[/yellow]")
            skipped.append(path)
            continue
        if data is None:
            logger.warning("Skipping %s, no file content available.", path)
            console.print(f"  [yellow]Skipping {escape(path)}: no file content available.[/yellow]")
            skipped.append(path)
            continue
        try:
            scratch_path = scratch.write_file(path, data)
        except OSError as e:
            logger.warning("Could not store %s in the scratch area: %s", path, e)
            console.print(f"  [yellow]Skipping {escape(path)}: {escape(str(e))}[/yellow]")
            skipped.append(path)
            continue
        fetched.append(ContextFile(path=path, scratch_path=scratch_path))
        console.print(f"  [{i}/{total}] Downloaded {escape(path)}")
    return fetched, skipped


def print_shadow_review(body: str) -> None:
    """Print the rendered comment to the terminal without posting to GitHub."""
    console.print("\n[bold]Shadow review (not posted)[/bold]\n")
    console.print(body, markup=False, highlight=False)


def run_review(
    repo: str,
    pr_number: int,
    settings: Settings,
    head_sha: str | None = None,
    shadow: bool = False,
    repo_obj=None,
    client: ReviewServiceClient | None = None,
) -> ReviewSummary:
    """Run the full review pipeline for one PR and return what happened.

    Raises a CriticWaveError subclass on any fatal failure; the caller is
    expected to report it once and exit non-zero.
    """
    client = client if client is not None else ReviewServiceClient.from_settings(settings)

    if settings.warmup:
        console.print("[dim]Waking up the review service...[/dim]")
        client.warm_up()

    this_repo = repo_obj if repo_obj is not None else get_repo(repo, token=settings.github_token)
    this_pr = get_pull(this_repo, pr_number)
    head_sha = head_sha or this_pr.head.sha

    console.print(f"Fetching diff for PR #{pr_number}...")
    diff = fetch_diff(this_repo, pr_number, token=settings.github_token)

    with ScratchArea() as scratch:
        diff_path = scratch.write_diff(diff)
        logger.debug("Diff saved at %s", diff_path)

        console.print("Fetching changed files...")
        changed = list_changed_files(this_pr, expected_total=this_pr.changed_files)
        console.print(f"Found {len(changed)} changed file(s).")

        context_files, skipped = collect_context_files(this_repo, changed, head_sha, scratch)

        request = assemble_request(pr_number, settings.style_guide, diff_path, context_files)
        console.print(
            f"Sending review request to {client.review_url} "
            f"(model {client.model}, {len(request.context_files)} context file(s))..."
        )
        result = client.submit(request)

    body = render_review(result)
    summary = ReviewSummary(
        repo=repo,
        pr_number=pr_number,
        head_sha=head_sha,
        changed_files=changed,
        context_files=[cf.path for cf in context_files],
        skipped_files=skipped,
        total_findings=len(result.findings),
        body=body,
    )

    if shadow:
        print_shadow_review(body)
        console.print(f"[bold]Shadow review complete. {summary.total_findings} finding(s) would be posted.[/bold]")
        return summary

    post_comment(this_pr, body)
    summary.posted = True
    console.print(f"\n[green]Review comment posted with {summary.total_findings} finding(s).[/green]")
    return summary
