"""
SLEDE8 SDK - Assembler and Disassembler for the SLEDE8 Instruction Set
======================================================================

This package provides a codec for SLEDE8, a small 16-bit educational
instruction set: an assembler that turns mnemonic source into a program
image plus a debug map, and a decoder that turns machine words back into
mnemonic text.

Main Components
---------------
- **assembler**: Two-pass SLEDE8 assembler (s8asm)
    Converts source files (.slede) to program images (.s8)

- **disassembler**: Word decoder and image disassembler (s8disasm)
    Converts program images back to reassemblable source

- **isa**: Instruction set tables and word layout

Quick Start
-----------
Assemble a program:
    >>> from slede8_sdk import Assembler
    >>> result = Assembler().assemble_string("SETT r0, 1\\nSTOPP")
    >>> result.image
    b'.SLEDE8\\x01\\x01\\x00\\x00'

Decode a word:
    >>> from slede8_sdk import decode
    >>> decode(0x01, 0x01).text
    'SETT r0, 1'

Or use the command-line tools:
    $ s8asm hello.slede -o hello.s8
    $ s8disasm hello.s8 --raw

Reference Documentation
-----------------------
- SLEDE8 reference implementation: https://github.com/PSTNorge/slede8

Version History
---------------
1.0.0 - Initial release with assembler, disassembler and CLI tools
"""

__version__ = "1.0.0"
__author__ = "Hugo José Pinto & Contributors"

# =============================================================================
# Public API Exports
# =============================================================================

from slede8_sdk.assembler import (
    Assembler,
    AssemblyResult,
    DebugInfo,
    LabelTable,
    assemble,
    assemble_file,
)
from slede8_sdk.config import AssemblerConfig
from slede8_sdk.disassembler import Slede8Disassembler, DecodedInstruction, decode
from slede8_sdk.image import build_image, parse_image
from slede8_sdk.errors import (
    Slede8Error,
    AssemblerError,
    WrongArityError,
    UnknownOpcodeError,
    InvalidRegisterError,
    InvalidDataError,
    ValueRangeError,
    UndefinedLabelError,
    ImageFormatError,
)

__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Assembler
    "Assembler",
    "AssemblyResult",
    "DebugInfo",
    "LabelTable",
    "AssemblerConfig",
    "assemble",
    "assemble_file",
    # Disassembler
    "Slede8Disassembler",
    "DecodedInstruction",
    "decode",
    # Program images
    "build_image",
    "parse_image",
    # Exception hierarchy
    "Slede8Error",
    "AssemblerError",
    "WrongArityError",
    "UnknownOpcodeError",
    "InvalidRegisterError",
    "InvalidDataError",
    "ValueRangeError",
    "UndefinedLabelError",
    "ImageFormatError",
]
