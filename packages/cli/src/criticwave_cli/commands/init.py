"""init command — interactive setup wizard.

Writes .criticwave.yml and optionally a GitHub Actions workflow so every
pull request gets reviewed without further setup.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

import click
import yaml
from rich.console import Console

from criticwave_core.config import DEFAULT_MODEL

console = Console()

_WORKFLOW_TEMPLATE = """\
name: CriticWave Review

on:
  pull_request:
    types: [opened, synchronize, reopened]

jobs:
  review:
    runs-on: ubuntu-latest
    permissions:
      contents: read
      pull-requests: write

    steps:
      - uses: actions/checkout@v4

      - name: Set up Python
        uses: actions/setup-python@v5
        with:
          python-version: "3.12"

      - name: Install criticwave
        run: pip install "criticwave=={version}"

      - name: Run PR review
        env:
          GITHUB_TOKEN: ${{{{ secrets.GITHUB_TOKEN }}}}
          GEMINI_API_KEY: ${{{{ secrets.GEMINI_API_KEY }}}}
        run: criticwave review
"""


@click.command("init")
@click.option("--repo", default=None, help="GitHub repository (owner/name). Auto-detected from git remote.")
def init_cmd(repo: str | None):
    """Set up criticwave for a repository.

    Creates .criticwave.yml and optionally a GitHub Actions workflow.
    """
    console.print("\n[bold cyan]criticwave init[/bold cyan] — setup wizard\n")

    if repo is None:
        repo = _detect_repo_from_git()
        if repo:
            console.print(f"[dim]Detected repository: {repo}[/dim]")
        else:
            repo = click.prompt("GitHub repository (owner/name)")

    model = click.prompt("Review model", default=DEFAULT_MODEL)
    style_guide_path = click.prompt("Style guide file", default="STYLE_GUIDE.md")

    config: dict = {"model": model, "style_guide_path": style_guide_path}
    _write_config(config)
    console.print("[green]Created .criticwave.yml[/green]")

    if not Path(style_guide_path).exists():
        console.print(f"[yellow]{style_guide_path} does not exist yet — reviews fail until it does.[/yellow]")

    setup_ci = click.confirm("\nGenerate .github/workflows/criticwave.yml for GitHub Actions?", default=True)
    if setup_ci:
        _write_workflow()
        console.print("[green]Created .github/workflows/criticwave.yml[/green]")
        console.print(
            "\n[yellow]Remember to add [bold]GEMINI_API_KEY[/bold] to your "
            "GitHub repository secrets (Settings → Secrets → Actions).[/yellow]"
        )

    console.print("\n[bold green]Setup complete![/bold green]")
    console.print(f"Run a review with: [bold]criticwave review --repo {repo} --pr <number>[/bold]")


def _detect_repo_from_git() -> str | None:
    """Try to detect the GitHub repo slug from the git remote URL."""
    try:
        result = subprocess.run(
            ["git", "remote", "get-url", "origin"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        if result.returncode != 0:
            return None
        url = result.stdout.strip()
        # https://github.com/owner/repo.git  →  owner/repo
        # git@github.com:owner/repo.git      →  owner/repo
        if "github.com" not in url:
            return None
        slug = url.split("github.com")[-1].lstrip("/:").removesuffix(".git")
        return slug if "/" in slug else None
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None


def _write_config(config: dict) -> None:
    """Write or update .criticwave.yml, preserving any existing keys."""
    path = Path(".criticwave.yml")
    existing: dict = {}
    if path.exists():
        existing = yaml.safe_load(path.read_text()) or {}
    existing.update(config)
    path.write_text(yaml.dump(existing, default_flow_style=False, sort_keys=False))


def _get_version() -> str:
    from importlib.metadata import PackageNotFoundError, version

    try:
        return version("criticwave")
    except PackageNotFoundError:
        return "0.1.0"


def _write_workflow() -> None:
    workflow_dir = Path(".github/workflows")
    workflow_dir.mkdir(parents=True, exist_ok=True)
    (workflow_dir / "criticwave.yml").write_text(_WORKFLOW_TEMPLATE.format(version=_get_version()))
