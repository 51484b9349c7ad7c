"""Detect command: find duplicated code in a set of files."""

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from cpdscan.analysis.cpd import CPD, CPDResult
from cpdscan.analysis.matching_constants import ExitCodes
from cpdscan.core.config import MATCH_STRATEGIES, load_config
from cpdscan.error.cmd import handle_command_errors
from cpdscan.render import available_renderers, get_renderer
from cpdscan.tokenizer.registry import available_languages
from cpdscan.utils.logging_utils import configure_logging

console = Console(stderr=True)


def _print_summary(result: CPDResult, verbose: bool) -> None:
    console.print(
        f"[blue]Analyzed:[/blue] {len(result.sources)} files, {result.token_count} tokens"
    )
    if result.excluded_sources:
        console.print(f"[yellow]Skipped duplicate files:[/yellow] {len(result.excluded_sources)}")
    if result.partial_sources:
        console.print(
            f"[yellow]Partially tokenized:[/yellow] {', '.join(result.partial_sources)}",
            highlight=False,
        )

    if verbose and result.matches:
        table = Table(title="Duplications")
        table.add_column("#", style="dim")
        table.add_column("Tokens", justify="right", style="cyan")
        table.add_column("Lines", justify="right")
        table.add_column("Occurrences", justify="right")
        table.add_column("First location", style="green")

        for i, match in enumerate(result.matches[:20], 1):
            first = match.first
            table.add_row(
                str(i),
                str(match.token_length),
                str(match.line_count),
                str(match.occurrence_count),
                f"{first.source_id}:{first.start_line}",
            )
        if len(result.matches) > 20:
            table.add_row("...", f"({len(result.matches) - 20} more)", "", "", "")
        console.print(table)

    if result.matches:
        console.print(f"[red]Found:[/red] {len(result.matches)} duplications")
    else:
        console.print("[bold green]✓[/bold green] No duplications found")


@click.command()
@click.argument("paths", nargs=-1, type=click.Path(exists=True, path_type=Path))
@click.option(
    "--minimum-tokens",
    "-m",
    type=int,
    default=None,
    help="The minimum token length which should be reported as a duplicate",
)
@click.option(
    "--files",
    multiple=True,
    type=click.Path(exists=True, path_type=Path),
    help="File or directory to process (can be specified multiple times)",
)
@click.option(
    "--exclude",
    multiple=True,
    type=click.Path(path_type=Path),
    help="File or directory to exclude (can be specified multiple times)",
)
@click.option("--non-recursive", is_flag=True, help="Don't scan subdirectories")
@click.option(
    "--language",
    "-l",
    type=click.Choice(available_languages()),
    default=None,
    help="Source code language (default: java)",
)
@click.option("--encoding", default=None, help="Character encoding of the source files")
@click.option(
    "--ignore-literals/--no-ignore-literals",
    default=None,
    help="Ignore number values and string contents when comparing text",
)
@click.option(
    "--ignore-identifiers/--no-ignore-identifiers",
    default=None,
    help="Ignore constant and variable names when comparing text",
)
@click.option(
    "--ignore-annotations/--no-ignore-annotations",
    default=None,
    help="Ignore language annotations when comparing text",
)
@click.option(
    "--ignore-comments/--keep-comments",
    default=None,
    help="Ignore comments when comparing text (default: ignore)",
)
@click.option(
    "--skip-blocks/--no-skip-blocks",
    default=None,
    help="Skip code blocks marked with --skip-blocks-pattern (default: skip)",
)
@click.option(
    "--skip-blocks-pattern",
    default=None,
    help='Start and end marker separated by | (default: "#if 0|#endif")',
)
@click.option(
    "--skip-duplicate-files/--no-skip-duplicate-files",
    default=None,
    help="Ignore multiple copies of files of the same name and length",
)
@click.option(
    "--skip-lexical-errors/--no-skip-lexical-errors",
    default=None,
    help="Skip the rest of files which can't be tokenized instead of aborting",
)
@click.option(
    "--strategy",
    type=click.Choice(MATCH_STRATEGIES),
    default=None,
    help="Candidate discovery strategy (default: suffix)",
)
@click.option("--jobs", "-j", type=click.IntRange(1), default=None, help="Tokenizer worker processes")
@click.option(
    "--format",
    "-f",
    "format_",
    type=click.Choice(available_renderers()),
    default=None,
    help="Report format (default: text)",
)
@click.option("--output", "-o", type=click.Path(path_type=Path), help="Write the report to a file")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON configuration file; command line options take precedence",
)
@click.option("--progress", is_flag=True, help="Show tokenization progress")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
@handle_command_errors
def detect(
    ctx: click.Context,
    paths: tuple[Path, ...],
    minimum_tokens: int | None,
    files: tuple[Path, ...],
    exclude: tuple[Path, ...],
    non_recursive: bool,
    language: str | None,
    encoding: str | None,
    ignore_literals: bool | None,
    ignore_identifiers: bool | None,
    ignore_annotations: bool | None,
    ignore_comments: bool | None,
    skip_blocks: bool | None,
    skip_blocks_pattern: str | None,
    skip_duplicate_files: bool | None,
    skip_lexical_errors: bool | None,
    strategy: str | None,
    jobs: int | None,
    format_: str | None,
    output: Path | None,
    config_path: Path | None,
    progress: bool,
    verbose: bool,
):
    """Find duplicated code.

    PATHS: Files and directories to analyze (same as --files)

    \b
    Exit codes:
        0  no duplications found
        1  error
        4  duplications found
    """
    configure_logging(verbose, console)

    config = load_config(
        config_path,
        minimum_tile_size=minimum_tokens,
        language=language,
        encoding=encoding,
        ignore_literals=ignore_literals,
        ignore_identifiers=ignore_identifiers,
        ignore_annotations=ignore_annotations,
        ignore_comments=ignore_comments,
        skip_blocks=skip_blocks,
        skip_blocks_pattern=skip_blocks_pattern,
        skip_duplicate_files=skip_duplicate_files,
        skip_lexical_errors=skip_lexical_errors,
        match_strategy=strategy,
        jobs=jobs,
        renderer=format_,
    )

    inputs = list(paths) + list(files)
    if not inputs:
        raise click.UsageError("No files or directories to analyze")

    if verbose:
        console.print(f"[dim]Language: {config.language}, minimum tokens: {config.minimum_tile_size}[/dim]")

    cpd = CPD(config)
    cpd.add_paths(inputs, excludes=exclude, recursive=not non_recursive)
    result = cpd.run(show_progress=progress)

    sources = {unit.source_id: unit.lines for unit in cpd.units}
    report = get_renderer(config.renderer, config.encoding).render(result.matches, sources)

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(report, encoding=config.encoding)
        console.print(f"[green]Report saved to:[/green] {output}")
    else:
        click.echo(report, nl=False)

    _print_summary(result, verbose)
    ctx.exit(ExitCodes.DUPLICATIONS_FOUND if result.has_duplications else ExitCodes.OK)
