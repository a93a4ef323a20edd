"""
SLEDE8 Assembler
================

This module provides a two-pass assembler for SLEDE8, a small 16-bit
educational instruction set with Norwegian mnemonics.

Main Components
---------------
- **Assembler**: Main assembler class that orchestrates the assembly process
- **classify / tokenize**: Line classification and argument splitting
- **preprocess / LabelTable**: Pass 1, label binding and address assignment
- **CodeGenerator**: Pass 2, encodes one line to machine code

Assembly Process
----------------
1. **Preprocessing**: classify every line, bind labels to addresses and
   record each code/data line with its address (the source map).
2. **Code Generation**: tokenize and encode each record in order, behind
   the ``.SLEDE8`` magic header.

Example Usage
-------------
>>> from slede8_sdk.assembler import assemble
>>> result = assemble("START:\\nHOPP START")
>>> result.body
b'\\x08\\x00'
"""

from slede8_sdk.assembler.assembler import (
    Assembler,
    AssemblyResult,
    DebugInfo,
    assemble,
    assemble_file,
    write_image,
)
from slede8_sdk.assembler.lexer import LineKind, Token, classify, tokenize
from slede8_sdk.assembler.preprocessor import (
    InstructionRecord,
    LabelDefinition,
    LabelTable,
    SourceMap,
    preprocess,
)
from slede8_sdk.assembler.codegen import CodeGenerator

__all__ = [
    # Main class and functions
    "Assembler",
    "AssemblyResult",
    "DebugInfo",
    "assemble",
    "assemble_file",
    "write_image",
    # Lexer
    "LineKind",
    "Token",
    "classify",
    "tokenize",
    # Preprocessor
    "InstructionRecord",
    "LabelDefinition",
    "LabelTable",
    "SourceMap",
    "preprocess",
    # Code generator
    "CodeGenerator",
]
