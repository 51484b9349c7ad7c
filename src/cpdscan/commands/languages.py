"""Languages command: list the registered tokenizers."""

import click
from rich.console import Console
from rich.table import Table

from cpdscan.tokenizer.registry import available_languages, get_lexer

console = Console()


@click.command()
def languages():
    """List supported languages and their file extensions."""
    table = Table(title="Supported Languages")
    table.add_column("Language", style="cyan")
    table.add_column("Extensions", style="green")
    table.add_column("Literal kinds")

    for name in available_languages():
        lexer = get_lexer(name)
        extensions = ", ".join(lexer.extensions) if lexer.extensions else "(all files)"
        table.add_row(name, extensions, ", ".join(sorted(lexer.literal_kinds)))

    console.print(table)
