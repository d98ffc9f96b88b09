"""Context command implementation."""

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..config import load_context

console = Console()


def mask(token: str) -> str:
    """Hide all but the last four characters of a secret."""
    if len(token) <= 4:
        return "****"
    return "*" * (len(token) - 4) + token[-4:]


def context_command() -> None:
    """Show the run context read from the environment."""
    try:
        ctx = load_context()
    except Exception as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    table = Table(title="Run Context", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    table.add_row("Run ID", str(ctx.run_id))
    table.add_row("Workflow", escape(ctx.workflow_name))
    table.add_row("Repository", f"{ctx.owner}/{ctx.repository}")
    table.add_row("Branch", escape(ctx.branch))
    table.add_row("Token", mask(ctx.token) if ctx.token else "[yellow]not set[/yellow]")

    console.print(table)
