"""Typer helper utilities."""

from difflib import get_close_matches

import typer
from rich.markup import escape
from typer.core import TyperGroup

from worklog_cli.utils.exit_codes import ERROR_INVALID_ARGS
from worklog_cli.utils.ui.console import get_console


class SuggestingGroup(TyperGroup):
    """Command group that answers an unknown command with close matches.

    ``worklog tasks lsit`` lists the nearest visible commands of the group,
    spelled out with their full command path, and exits with
    ``ERROR_INVALID_ARGS``.
    """

    max_suggestions = 3
    cutoff = 0.6

    def suggest(self, attempted: str) -> list[str]:
        visible = [
            name for name, cmd in self.commands.items() if not getattr(cmd, "hidden", False)
        ]
        return get_close_matches(
            attempted, visible, n=self.max_suggestions, cutoff=self.cutoff
        )

    def resolve_command(self, ctx, args):
        try:
            return super().resolve_command(ctx, args)
        except Exception as e:
            suggestions = self.suggest(args[0]) if args else []
            if not suggestions:
                raise

            path = escape(ctx.command_path)
            console = get_console()
            console.print(
                f'[red]Error:[/red] unknown command "{escape(args[0])}" for "{path}"'
            )
            console.print()
            if len(suggestions) == 1:
                console.print("[yellow]Did you mean this?[/yellow]")
            else:
                console.print("[yellow]Did you mean one of these?[/yellow]")
            for suggestion in suggestions:
                console.print(f"        {path} {suggestion}")
            raise typer.Exit(ERROR_INVALID_ARGS) from e
