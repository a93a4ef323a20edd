"""
s8disasm - SLEDE8 Disassembler Command-Line Interface
=====================================================

This module implements the command-line interface for the SLEDE8
disassembler.

Usage Examples
--------------
Disassemble an image (output can be reassembled):
    $ s8disasm program.s8

Show addresses and raw bytes:
    $ s8disasm program.s8 --raw

Limit number of words:
    $ s8disasm program.s8 --count 20

Disassemble a raw body without the .SLEDE8 header:
    $ s8disasm memory.bin --no-header

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

from pathlib import Path
from typing import Optional

import click

from slede8_sdk import __version__
from slede8_sdk.cli import setup_logging
from slede8_sdk.cli.errors import handle_cli_exception
from slede8_sdk.disassembler import Slede8Disassembler
from slede8_sdk.image import parse_image


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
    "-c", "--count",
    type=click.IntRange(min=0),
    default=None,
    help="Maximum number of words to disassemble (default: all)",
)
@click.option(
    "--raw",
    "show_raw",
    is_flag=True,
    help="Show address and raw bytes on each line instead of label lines",
)
@click.option(
    "--header/--no-header",
    default=True,
    help="Expect the .SLEDE8 magic header (default: enabled)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="s8disasm")
def main(
    input_file: Path,
    output: Optional[Path],
    count: Optional[int],
    show_raw: bool,
    header: bool,
    verbose: bool,
) -> None:
    """
    Disassemble a SLEDE8 program image.

    INPUT_FILE is the image (.s8) to disassemble.

    Words that are not valid instructions are shown as .DATA bytes with
    the reason in a comment.

    Examples:

        # Reassemblable listing
        s8disasm program.s8 -o program.slede

        # Debug view with raw bytes
        s8disasm program.s8 --raw
    """
    setup_logging(verbose)

    try:
        data = input_file.read_bytes()
        body = parse_image(data) if header else data

        if verbose:
            click.echo(f"Input file: {input_file} ({len(data)} bytes)", err=True)

        disasm = Slede8Disassembler()
        instructions = disasm.disassemble(body, count=count)

        if show_raw:
            lines = [instr.render(show_raw=True) for instr in instructions]
        else:
            lines = disasm.source_lines(instructions)
        header_lines = [f"; Disassembly of {input_file.name}", f"; Size: {len(body)} bytes", ""]
        result = "\n".join(header_lines + lines) + "\n"

        if output:
            output.write_text(result, encoding="utf-8")
            if verbose:
                click.echo(f"Output written to: {output}", err=True)
        else:
            click.echo(result, nl=False)

        if verbose:
            invalid = sum(1 for instr in instructions if not instr.is_code)
            click.echo(
                f"Words disassembled: {len(instructions)} ({invalid} shown as data)",
                err=True,
            )

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Disassembly")


if __name__ == "__main__":
    main()
