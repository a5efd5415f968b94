"""Command line interface for gira."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich import print
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from gira.config import ConfigurationError, GiraConfig, load_config
from gira.git import GitError, GitRepo
from gira.jira import JiraAuthError
from gira.workflow import delete_branches, status_report

app = typer.Typer(help="Delete local git branches by the state of their Jira issues")
console = Console()

PathOption = Annotated[Path, typer.Option(help="Path to git repository")]
WorkersOption = Annotated[Optional[int], typer.Option("--workers", "-w", min=1, help="Concurrent Jira lookups")]
EnvFileOption = Annotated[Optional[Path], typer.Option("--env-file", help="Read settings from this dotenv file")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Verbose output")]


def setup_logging(verbose: bool) -> None:
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=verbose)],
    )

    # httpx logs every request at INFO
    if not verbose:
        logging.getLogger("httpx").setLevel(logging.WARNING)


def get_config(env_file: Optional[Path], workers: Optional[int]) -> GiraConfig:
    """Get configuration for this run."""
    try:
        return load_config(env_file, lookup_workers=workers)
    except ConfigurationError as err:
        print(f"[red]Configuration problem:[/red] {err}")
        raise typer.Exit(code=1) from err


def get_repo(path: Path) -> GitRepo:
    """Get git repository instance."""
    try:
        return GitRepo(path)
    except GitError as err:
        print(f"[red]Git problem:[/red] {err}")
        raise typer.Exit(code=1) from err


@app.command()
def delete(
    path: PathOption = Path("."),
    workers: WorkersOption = None,
    env_file: EnvFileOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Select local branches interactively and delete them."""
    setup_logging(verbose)
    config = get_config(env_file, workers)
    repo = get_repo(path)

    try:
        outcome = delete_branches(config, repo)
    except (ConfigurationError, JiraAuthError, GitError) as err:
        print(f"[red]Error:[/red] {err}")
        raise typer.Exit(code=1) from err

    if outcome.deleted:
        result_table = Table(
            title=f"Successfully deleted {len(outcome.deleted)} branch(es) 🧹",
            show_header=True,
            header_style="bold",
            title_style="bold green",
            show_edge=True,
        )
        result_table.add_column("Branch", style="cyan")
        result_table.add_column("Status", style="magenta")
        for branch in outcome.deleted:
            result_table.add_row(branch.display_name, branch.issue_status)
        console.print()
        console.print(result_table)

    if not outcome.success:
        print(f"[red]{outcome.message}[/red]")
        raise typer.Exit(code=1)
    if outcome.cancelled:
        console.print("\n[yellow]Operation cancelled[/yellow] 🛑")
    elif not outcome.deleted:
        console.print(f"\n[yellow]{outcome.message}[/yellow]")


@app.command("list")
def list_branches(
    path: PathOption = Path("."),
    workers: WorkersOption = None,
    env_file: EnvFileOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Print local branches grouped by Jira issue status."""
    setup_logging(verbose)
    config = get_config(env_file, workers)
    repo = get_repo(path)

    try:
        report = status_report(config, repo)
    except (ConfigurationError, JiraAuthError, GitError) as err:
        print(f"[red]Error:[/red] {err}")
        raise typer.Exit(code=1) from err

    console.print(report, markup=False, highlight=False)


if __name__ == "__main__":
    app()
