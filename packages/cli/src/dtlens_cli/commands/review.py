"""review command — print checklist comments for a pull request's definition files."""

from __future__ import annotations

import click
from rich.console import Console
from rich.markdown import Markdown
from rich.rule import Rule

from dtlens_core.gh.pull_request import ReviewRequest
from dtlens_core.reviewer import run_review

console = Console()


def _build_request(repo: str | None, pr_number: int | None, url: str | None) -> ReviewRequest:
    if url:
        try:
            return ReviewRequest.from_url(url)
        except ValueError as e:
            raise click.UsageError(str(e))
    if not repo or pr_number is None:
        raise click.UsageError("Pass either --url or both --repo and --pr.")
    try:
        return ReviewRequest.parse(f"{repo}#{pr_number}")
    except ValueError as e:
        raise click.UsageError(str(e))


@click.command("review")
@click.option("--repo", default=None, help="GitHub repository in owner/name format.")
@click.option("--pr", "pr_number", type=int, default=None, help="Pull request number.")
@click.option("--url", default=None, help="Pull request URL, instead of --repo/--pr.")
@click.option("--registry-url", default=None, help="npm registry base URL. Overrides config file.")
@click.option(
    "--config",
    "config_path",
    default=None,
    help="Path to the configuration file. Overrides the group-level --config.",
)
@click.option("--raw", is_flag=True, help="Print the comment Markdown as-is instead of rendering it.")
@click.pass_context
def review_cmd(
    ctx,
    repo: str | None,
    pr_number: int | None,
    url: str | None,
    registry_url: str | None,
    config_path: str | None,
    raw: bool,
):
    """Build reviewer checklists for the .d.ts files changed in a pull request.

    \b
    Required environment variables:
      GITHUB_TOKEN         GitHub personal access token (or use gh CLI)
    """
    from dtlens_cli.auth import resolve_github_token
    from dtlens_core.config import load_config

    request = _build_request(repo, pr_number, url)

    if config_path is None:
        config_path = (ctx.obj or {}).get("config_path", ".dtlens.yml")
    try:
        config = load_config(config_path, cli_overrides={"registry_url": registry_url})
    except ValueError as e:
        raise click.UsageError(str(e))

    token = resolve_github_token()
    if not token:
        raise click.UsageError(
            "No GitHub token found. Set GITHUB_TOKEN or run `gh auth login` first.\n"
            "Create a token at https://github.com/settings/tokens"
        )
    config["github_token"] = token

    try:
        comments = run_review(request, config)
    except ValueError as e:
        raise click.ClickException(str(e))
    if not comments:
        console.print("[yellow]No definition files changed in this pull request.[/yellow]")
        return

    for comment in comments:
        console.print(Rule())
        if raw:
            console.print(comment, markup=False, highlight=False)
        else:
            console.print(Markdown(comment))
