"""Main entry point for worklog CLI."""

import typer

from worklog_cli import __version__
from worklog_cli.commands import (
    categories,
    config,
    data,
    logs,
    outputs,
    reports,
    tasks,
    timer,
)
from worklog_cli.commands.decorators import command_wrapper
from worklog_cli.services.config_service import get_config_service
from worklog_cli.utils.typer_helpers import SuggestingGroup
from worklog_cli.utils.ui.console import get_console, set_color

# Create main app with custom group class
app = typer.Typer(
    name="worklog",
    cls=SuggestingGroup,
    help="Track tasks, time and work outputs as a work breakdown structure",
    no_args_is_help=True,
)

console = get_console()


@app.callback()
@command_wrapper
def apply_output_settings() -> None:
    set_color(get_config_service().config.output.color)


# Add subcommands
app.add_typer(tasks.app, name="tasks", help="Task management commands")
app.add_typer(timer.app, name="timer", help="Start and stop the task timer")
app.add_typer(logs.app, name="logs", help="Edit recorded time logs")
app.add_typer(outputs.app, name="outputs", help="Track work outputs of a task")
app.add_typer(categories.app, name="categories", help="Manage categories")
app.add_typer(reports.app, name="reports", help="Reports and diagram sources")
app.add_typer(data.app, name="data", help="Data management (backup, restore)")
app.add_typer(config.app, name="config", help="Configuration management")


# Add top-level commands
@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]worklog[/bold] version [cyan]{__version__}[/cyan]")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
