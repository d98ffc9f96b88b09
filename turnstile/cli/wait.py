"""Wait command implementation."""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from ..config import Config, GateSettings
from ..gate import GateDecision, RunGate
from ..github import GitHubClient

console = Console()


async def wait_for_turn(settings: GateSettings) -> GateDecision:
    """Block until the gate is clear."""
    async with GitHubClient.from_settings(settings) as client:
        return await RunGate(settings, client).wait()


def wait_command(
    interval: Optional[float] = typer.Option(
        None,
        "--interval",
        "-i",
        help="Seconds between checks. Default: 60",
        min=0.001,
    ),
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML file with monitored repositories and poll settings",
    ),
) -> None:
    """Wait until no earlier run of this workflow is in progress on the branch."""
    try:
        settings = Config(config_path, poll_interval=interval).settings
        ctx = settings.context
        console.print(
            f"[dim]Run {ctx.run_id} of {escape(ctx.workflow_name)} on {escape(ctx.branch)}, "
            f"watching {', '.join(repo.name for repo in settings.repos)}[/dim]"
        )
        asyncio.run(wait_for_turn(settings))
    except KeyboardInterrupt:
        console.print("\n[yellow]Wait interrupted by user[/yellow]")
        raise typer.Exit(130)
    except Exception as e:
        console.print(f"[red]Wait failed: {escape(str(e))}[/red]")
        raise typer.Exit(1)
