"""CLI entry point for dtlens.

Commands:
  review   — build checklist comments for the definition files in a pull request
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from dtlens_cli.commands.review import review_cmd

console = Console()


@click.group()
@click.version_option(
    version=importlib.metadata.version("dtlens"),
    prog_name="dtlens",
)
@click.option(
    "--config",
    "config_path",
    default=".dtlens.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="DTLENS_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Reviewer checklists for DefinitelyTyped pull requests."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


main.add_command(review_cmd)
