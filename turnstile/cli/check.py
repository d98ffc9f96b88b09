"""Check command implementation."""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..config import Config, GateSettings
from ..gate import GateDecision, RunGate, report
from ..github import GitHubClient

console = Console()

BLOCKED_EXIT_CODE = 2


async def check_once(settings: GateSettings) -> GateDecision:
    """Run a single gate check."""
    async with GitHubClient.from_settings(settings) as client:
        return await RunGate(settings, client).check()


def print_decision(decision: GateDecision) -> None:
    """Print competing runs as a table."""
    table = Table(title=f"Competing runs on {escape(decision.branch)}")
    table.add_column("Repository", style="cyan")
    table.add_column("Run", style="magenta")
    table.add_column("Started", style="yellow")
    table.add_column("URL", style="blue")

    for repo in decision.repos:
        for run in repo.competing:
            table.add_row(
                repo.repo,
                str(run.id),
                run.run_started_at.isoformat() if run.run_started_at else "-",
                run.html_url,
            )

    console.print(f"[dim]Anchor: run {decision.anchor.id} created {decision.anchor.created_at.isoformat()}[/dim]")
    if not decision.clear:
        console.print(table)


def check_command(
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML file with monitored repositories and poll settings",
    ),
) -> None:
    """Check once; exit 0 when clear, 2 when earlier runs are in progress."""
    try:
        settings = Config(config_path).settings
        decision = asyncio.run(check_once(settings))
    except KeyboardInterrupt:
        console.print("\n[yellow]Check interrupted by user[/yellow]")
        raise typer.Exit(130)
    except Exception as e:
        console.print(f"[red]Check failed: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    print_decision(decision)
    report(decision, console)
    if not decision.clear:
        raise typer.Exit(BLOCKED_EXIT_CODE)
