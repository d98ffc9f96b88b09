"""Main CLI application."""

import typer
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()

from .check import check_command
from .context import context_command
from .wait import wait_command

app = typer.Typer(
    name="turnstile",
    help="Wait for earlier in-progress runs of this workflow to finish",
    no_args_is_help=True,
)

# Register commands
app.command("wait")(wait_command)
app.command("check")(check_command)
app.command("context")(context_command)


if __name__ == "__main__":
    app()
