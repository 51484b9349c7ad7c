"""CLI entry point for cpdscan."""

import click

from cpdscan.commands import detect, languages


@click.group()
@click.version_option(version="0.1.0", prog_name="cpdscan")
@click.pass_context
def main(ctx):
    """Copy-Paste Detector.

    Finds duplicated token sequences across source files.
    """
    ctx.ensure_object(dict)


# Register commands
main.add_command(detect.detect)
main.add_command(languages.languages)


if __name__ == "__main__":
    main()
