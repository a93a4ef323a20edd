"""
SLEDE8 SDK Command-Line Interface
=================================

This package provides command-line tools for the SLEDE8 SDK:

- **s8asm**: SLEDE8 assembler
- **s8disasm**: SLEDE8 disassembler

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

import logging

__all__ = ["s8asm", "s8disasm", "setup_logging"]


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )
