"""
s8asm - SLEDE8 Assembler Command-Line Interface
===============================================

This module implements the command-line interface for the SLEDE8
assembler.

Usage Examples
--------------
Basic assembly (writes hello.s8):
    $ s8asm hello.slede

With output file and listing:
    $ s8asm hello.slede -o out.s8 -l hello.lst

Reproduce addresses of the reference assembler:
    $ s8asm --legacy-data-sizing hello.slede

Verbose mode:
    $ s8asm -v hello.slede
"""

from pathlib import Path
from typing import Optional

import click
from click.core import ParameterSource

from slede8_sdk import __version__
from slede8_sdk.assembler import Assembler
from slede8_sdk.assembler.assembler import write_image
from slede8_sdk.cli import setup_logging
from slede8_sdk.cli.errors import handle_cli_exception
from slede8_sdk.config import AssemblerConfig


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
    help="Output image file (default: input.s8)",
)
@click.option(
    "-l", "--listing",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate listing file (address, bytes, line, source)",
)
@click.option(
    "--strict-labels/--no-strict-labels",
    default=True,
    help="Fail on undefined labels (default: enabled). With --no-strict-labels "
         "undefined labels encode as address 0xFFF with a warning.",
)
@click.option(
    "--legacy-data-sizing",
    is_flag=True,
    help="Advance addresses by .DATA argument count instead of byte count, "
         "matching the reference assembler.",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="s8asm")
def main(
    input_file: Path,
    output: Optional[Path],
    listing: Optional[Path],
    strict_labels: bool,
    legacy_data_sizing: bool,
    verbose: bool,
) -> None:
    """
    Assemble SLEDE8 source code.

    INPUT_FILE is the source file (.slede) to assemble.

    Options not given on the command line fall back to the
    SLEDE8_STRICT_LABELS, SLEDE8_LEGACY_DATA_SIZING and
    SLEDE8_TEXT_ENCODING environment variables.

    \b
    Examples:
        s8asm hello.slede              # Outputs hello.s8
        s8asm hello.slede -o out.s8    # Specify output file
        s8asm hello.slede -l out.lst   # Also write a listing
    """
    setup_logging(verbose)

    config = AssemblerConfig.from_env()
    ctx = click.get_current_context()
    if ctx.get_parameter_source("strict_labels") is ParameterSource.COMMANDLINE:
        config.strict_labels = strict_labels
    if legacy_data_sizing:
        config.legacy_data_sizing = True

    output_file = output if output is not None else input_file.with_suffix(".s8")

    try:
        if verbose:
            click.echo(f"Assembling {input_file}...")

        asm = Assembler(config)
        result = asm.assemble_file(input_file)

        write_image(result, output_file)
        if verbose:
            click.echo(f"Wrote {len(result.image)} bytes to {output_file}")

        if listing:
            listing.write_text(result.listing(), encoding="utf-8")
            if verbose:
                click.echo(f"Wrote listing to {listing}")

        if verbose:
            click.echo(
                f"Assembly complete: {len(result.debug_map)} instructions, "
                f"{len(result.body)} bytes"
            )
            click.echo(f"Defined {len(result.labels.names())} labels")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")


if __name__ == "__main__":
    main()
