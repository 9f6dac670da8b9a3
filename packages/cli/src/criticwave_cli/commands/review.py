"""review command — send a pull request to the review service and post the result."""

from __future__ import annotations

import click
from rich.console import Console

from criticwave_cli.auth import resolve_github_token
from criticwave_core.config import load_config, resolve_settings
from criticwave_core.errors import CriticWaveError
from criticwave_core.gh.event import load_pull_request_event
from criticwave_core.reviewer import run_review

console = Console()


@click.command("review")
@click.option("--repo", default=None, help="GitHub repository in owner/name format. Defaults to the triggering event.")
@click.option(
    "--pr", "pr_number", type=int, default=None, help="Pull request number. Defaults to the triggering event."
)
@click.option("--head-sha", default=None, help="Commit to read file contents at. Defaults to the PR head.")
@click.option(
    "--event-path",
    default=None,
    envvar="GITHUB_EVENT_PATH",
    help="Path to the GitHub Actions event payload.",
)
@click.option("--model", default=None, help="Model identifier passed to the review service. Overrides config file.")
@click.option("--style-guide", default=None, help="Style guide text forwarded to the review service.")
@click.option(
    "--style-guide-file",
    "style_guide_path",
    default=None,
    help="Path to a Markdown style guide. Overrides config file.",
)
@click.option("--service-url", default=None, help="Base URL of the review service. Overrides config file.")
@click.option("--no-warmup", is_flag=True, help="Skip the readiness ping before the review request.")
@click.option(
    "--shadow",
    "-s",
    is_flag=True,
    help="Dry-run mode: print the rendered review without posting to GitHub.",
)
@click.pass_context
def review_cmd(
    ctx,
    repo: str | None,
    pr_number: int | None,
    head_sha: str | None,
    event_path: str | None,
    model: str | None,
    style_guide: str | None,
    style_guide_path: str | None,
    service_url: str | None,
    no_warmup: bool,
    shadow: bool,
):
    """Review a pull request with the CriticWave service.

    Collects the PR diff and the full content of every changed file at the
    head commit, sends them to the review service, and posts the findings as
    a single PR comment.

    \b
    Required environment variables:
      GITHUB_TOKEN      GitHub token (or use gh CLI / the github-token input)
      GEMINI_API_KEY    API key forwarded to the review service
    Optional:
      CRITICWAVE_AUTH_HEADER   Authorization header value for the service
      CRITICWAVE_SERVICE_URL   Review service base URL
    """
    config_path = (ctx.obj or {}).get("config_path", ".criticwave.yml")

    try:
        config = load_config(
            config_path,
            cli_overrides={
                "model": model,
                "style_guide": style_guide,
                "style_guide_path": style_guide_path,
                "service_url": service_url,
                "warmup": False if no_warmup else None,
            },
        )
        if not config.get("github_token"):
            config["github_token"] = resolve_github_token()
        settings = resolve_settings(config)

        if repo is None or pr_number is None:
            event = load_pull_request_event(event_path, repository=repo)
            repo = repo or event.repo
            pr_number = pr_number if pr_number is not None else event.pr_number
            head_sha = head_sha or event.head_sha

        console.print(f"[bold cyan]CriticWave review[/bold cyan] {repo}#{pr_number}")
        run_review(
            repo=repo,
            pr_number=pr_number,
            settings=settings,
            head_sha=head_sha,
            shadow=shadow,
        )
    except CriticWaveError as e:
        raise click.ClickException(f"Review failed: {e}")
