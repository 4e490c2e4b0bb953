"""
tcpp - tinycpp Translator Command-Line Interface
================================================

Translates a tinycpp source file into flattened C declarations.

Usage Examples
--------------
Print the translation:
    $ tcpp shapes.tcpp

With output file:
    $ tcpp shapes.tcpp -o shapes.h

Dump the syntax tree:
    $ tcpp --ast shapes.tcpp

Verbose mode (debug logging):
    $ tcpp -v shapes.tcpp
"""

import logging
from pathlib import Path
from typing import Optional

import click

from tinycpp import __version__
from tinycpp.frontend import Frontend, FrontendOptions
from tinycpp.frontend.ast import ASTPrinter
from tinycpp.cli.errors import handle_cli_exception

logger = logging.getLogger(__name__)


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file (default: stdout)",
)
@click.option(
    "--color/--no-color",
    default=None,
    help="Colorize output (default: only when writing to a terminal)",
)
@click.option(
    "--separator",
    default="_",
    show_default=True,
    help="Separator joining namespace components in qualified names",
)
@click.option(
    "--ast",
    is_flag=True,
    help="Print the syntax tree instead of the translation",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output (debug logging)",
)
@click.version_option(version=__version__, prog_name="tcpp")
def main(
    input_file: Path,
    output: Optional[Path],
    color: Optional[bool],
    separator: str,
    ast: bool,
    verbose: bool,
) -> None:
    """
    Translate tinycpp source into flattened C declarations.

    INPUT_FILE is the tinycpp source file to translate.

    \b
    Examples:
        tcpp shapes.tcpp                # Print to stdout
        tcpp shapes.tcpp -o shapes.h    # Write to a file
        tcpp --ast shapes.tcpp          # Dump the syntax tree
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    options = FrontendOptions(
        separator=separator,
        color=color is not False and output is None,
    )

    try:
        frontend = Frontend(options)
        result = frontend.translate_file(input_file)

        if ast:
            click.echo(ASTPrinter().print(result.scope))
            return

        if output is None:
            click.echo(result.output, nl=False, color=color)
            return

        output.write_text(result.output, encoding=options.encoding)
        logger.debug(f"Wrote {len(result.output)} characters to {output}")
        if verbose:
            click.echo(f"Translated {input_file} -> {output} ({result.token_count} tokens)")

    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()
