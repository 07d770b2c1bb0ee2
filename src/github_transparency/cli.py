"""CLI interface for GitHub Transparency."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from github_transparency import __version__
from github_transparency.config import Config
from github_transparency.exceptions import (
    GitHubForbiddenError,
    GitHubRateLimitError,
    GitHubTransparencyError,
)
from github_transparency.models.activity import OSSProject
from github_transparency.output.json_writer import build_report, write_json_report
from github_transparency.sdk import GitHubTransparency
from github_transparency.services.profile_collector import avatar_url, check_user_exists
from github_transparency.utils.rate_limit import format_time_remaining
from github_transparency.utils.retry import retry_after_rate_limit

app = typer.Typer(
    name="github-transparency",
    help="Collect a developer's GitHub activity into a transparency dataset",
    add_completion=False,
)

console = Console()


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure logging based on verbosity level."""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        console.print(f"github-transparency version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
):
    """GitHub Transparency - Collect a developer's GitHub activity."""
    pass


@app.command()
def collect(
    username: Optional[str] = typer.Option(
        None,
        "--username",
        "-u",
        help="Login to search activity for (defaults to the token owner)",
    ),
    oss: list[str] = typer.Option(
        [],
        "--oss",
        help="OSS project (owner/repo) to count merged PRs in; repeatable",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output JSON file path",
    ),
    retry: int = typer.Option(
        1,
        "--retry",
        min=1,
        help="Attempts when rate limited, waiting the Retry-After hint between them",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Debug logging"),
):
    """Collect profile, repositories, contributions and activity to JSON.

    Examples:
        github-transparency collect
        github-transparency collect --oss python/cpython --oss pallets/flask
    """
    setup_logging(verbose=verbose, debug=debug)

    try:
        projects = [OSSProject.parse(p) for p in oss]
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    config = Config.from_env()
    if not config.is_authenticated:
        console.print("[red]No GitHub token found.[/red]")
        console.print("  export GITHUB_TOKEN=your_token_here")
        raise typer.Exit(1)

    async def run():
        async with GitHubTransparency(config=config) as client:
            return await client.collect(username=username, oss_projects=projects)

    try:
        data = asyncio.run(retry_after_rate_limit(run, attempts=retry))
    except GitHubRateLimitError as e:
        console.print(
            f"[red]Rate limit exceeded.[/red] Retry in {format_time_remaining(e.retry_after)}."
        )
        raise typer.Exit(1)
    except GitHubForbiddenError as e:
        console.print(f"[red]Access denied:[/red] {e}")
        raise typer.Exit(1)
    except GitHubTransparencyError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Collection cancelled[/yellow]")
        raise typer.Exit(1)

    report = build_report(data)
    output_file = write_json_report(report, output, data.profile.username)
    _print_summary(report["summary"])
    console.print(f"\nSaved to [bold]{output_file}[/bold]")


@app.command()
def exists(username: str = typer.Argument(..., help="GitHub username to check")):
    """Check whether a GitHub user exists (public avatar lookup, best effort)."""
    base_url = Config.from_env().avatar_base_url
    if asyncio.run(check_user_exists(username, base_url)):
        console.print(f"[green]{username} exists[/green] ({avatar_url(username, base_url)})")
    else:
        console.print(f"[yellow]{username} not found[/yellow]")
        raise typer.Exit(1)


def _print_summary(summary: dict) -> None:
    table = Table(title=f"GitHub transparency: {summary['username']}", show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    rows = [
        ("Repositories", summary["repositories"]),
        ("Stars", summary["total_stars"]),
        ("Contributions", summary["total_contributions"]),
        ("Current streak", summary["current_streak"]),
        ("Longest streak", summary["longest_streak"]),
        ("Pull requests (merged)", f"{summary['pull_requests']} ({summary['pull_requests_merged']})"),
        ("Issues opened / closed", f"{summary['issues_opened']} / {summary['issues_closed']}"),
        ("Reviews", summary["reviews"]),
        ("OSS contributions", summary["oss_contributions"]),
    ]
    for label, value in rows:
        table.add_row(label, str(value))

    console.print(table)

    if summary["degraded"]:
        console.print(
            f"[yellow]Incomplete sections:[/yellow] {', '.join(summary['degraded'])}"
        )


if __name__ == "__main__":
    app()
