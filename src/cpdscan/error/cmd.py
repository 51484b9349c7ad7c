import functools
from typing import Callable

import click
from rich.console import Console
from rich.markup import escape

from cpdscan.error.exceptions import CPDError

console = Console(stderr=True)


def _report(error: Exception) -> None:
    console.print(f"[red]Error:[/red] {escape(str(error))}", highlight=False, soft_wrap=True)


def handle_command_errors(func: Callable) -> Callable:
    """Print library errors and abort the command with exit code 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (CPDError, FileNotFoundError, ValueError) as e:
            _report(e)
            raise click.Abort() from e

    return wrapper
