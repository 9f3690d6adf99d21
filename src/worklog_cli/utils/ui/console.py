"""Shared rich consoles for worklog output."""

from functools import lru_cache

from rich.console import Console


@lru_cache(maxsize=2)
def get_console(highlight: bool = True) -> Console:
    """Get the shared Rich Console; rich itself honours ``NO_COLOR``."""
    return Console(highlight=highlight)


def set_color(enabled: bool) -> None:
    """Apply the ``output.color`` setting to both shared consoles."""
    for highlight in (True, False):
        get_console(highlight).no_color = not enabled
