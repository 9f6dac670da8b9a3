"""CLI entry point for criticwave.

Commands:
  review   — send a pull request to the review service and post the findings
  init     — interactive setup wizard writing .criticwave.yml and a workflow
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from criticwave_cli.commands.init import init_cmd
from criticwave_cli.commands.review import review_cmd

console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    handler = RichHandler(console=console, show_level=True, show_path=False, rich_tracebacks=True)
    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    # urllib3 and PyGithub are chatty at DEBUG; their noise is never what we want.
    for name in ("urllib3", "github"):
        logging.getLogger(name).setLevel(logging.WARNING)


@click.group()
@click.version_option(
    version=importlib.metadata.version("criticwave"),
    prog_name="criticwave",
)
@click.option(
    "--config",
    "config_path",
    default=".criticwave.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="CRITICWAVE_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Log request details at DEBUG level.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """AI-powered pull request reviewer backed by the CriticWave service."""
    _configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


main.add_command(review_cmd)
main.add_command(init_cmd)
