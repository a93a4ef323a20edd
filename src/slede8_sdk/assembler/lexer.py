"""
SLEDE8 Assembly Language Lexer
==============================

This module classifies source lines and splits instruction lines into a
mnemonic and its arguments. SLEDE8 source is strictly line oriented: a
line is a label, a data directive, an instruction, a comment, or blank.

Line Kinds
----------
Checked in this order, first match wins:

| Kind        | Rule                                         | Example          |
|-------------|----------------------------------------------|------------------|
| WHITESPACE  | empty after trimming                         |                  |
| COMMENT     | starts with ``;``                            | ``; hei``        |
| LABEL       | identifier followed by a single ``:``        | ``løkke:``       |
| DATA        | first token is ``.DATA``                     | ``.DATA 'AB', 1``|
| INSTRUCTION | anything else                                | ``SETT r0, 4``   |

Label identifiers use letters (including æøåÆØÅ), digits, ``-`` and ``_``.

Tokenizing
----------
Tokenizing is deliberately simple and never fails:

1. Everything from the first ``;`` is dropped.
2. The first space-separated token is the mnemonic.
3. The remaining tokens are joined *without* separator and split on ``,``.
4. Pieces are trimmed and empty pieces dropped.

Because of step 3, spaces inside string literals are removed
(``.DATA 'a b'`` yields the argument ``'ab'``). Validation of the
arguments happens in the code generator.

Example
-------
>>> from slede8_sdk.assembler.lexer import classify, tokenize
>>> classify("start:")
<LineKind.LABEL: 'label'>
>>> tokenize("PLUSS r0, r1 ; r0 += r1")
Token(mnemonic='PLUSS', args=['r0', 'r1'])
"""

from dataclasses import dataclass, field
from enum import Enum
import re

from slede8_sdk.isa import DATA_DIRECTIVE


# =============================================================================
# Line Kinds
# =============================================================================

class LineKind(Enum):
    """Classification of a single trimmed source line."""
    WHITESPACE = "whitespace"
    COMMENT = "comment"
    LABEL = "label"
    DATA = "data"
    INSTRUCTION = "instruction"

    def __str__(self) -> str:
        return self.value


LABEL_PATTERN = re.compile(r"[0-9a-zA-ZæøåÆØÅ\-_]+:")

COMMENT_CHAR = ";"


def classify(line: str) -> LineKind:
    """
    Classify one trimmed source line.

    Args:
        line: Source line with surrounding whitespace already removed

    Returns:
        The LineKind of the line
    """
    if not line:
        return LineKind.WHITESPACE

    if line.startswith(COMMENT_CHAR):
        return LineKind.COMMENT

    if LABEL_PATTERN.fullmatch(line):
        return LineKind.LABEL

    if strip_comment(line).split(" ", 1)[0] == DATA_DIRECTIVE:
        return LineKind.DATA

    return LineKind.INSTRUCTION


def label_name(line: str) -> str:
    """Return the label name of a LABEL line (without the colon)."""
    return line[:-1]


# =============================================================================
# Tokenizer
# =============================================================================

@dataclass
class Token:
    """
    A tokenized instruction or data line.

    Attributes:
        mnemonic: The opcode mnemonic or ``.DATA`` (case preserved)
        args: Ordered, trimmed, non-empty argument strings
    """
    mnemonic: str
    args: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        if self.args:
            return f"{self.mnemonic} {', '.join(self.args)}"
        return self.mnemonic


def strip_comment(raw: str) -> str:
    """Drop everything from the first comment character onward."""
    return raw.strip().split(COMMENT_CHAR, 1)[0]


def tokenize(raw: str) -> Token:
    """
    Split one instruction or data line into mnemonic and arguments.

    Args:
        raw: The source line (comments not yet stripped)

    Returns:
        Token with the mnemonic and argument list
    """
    code = strip_comment(raw)
    words = code.split(" ")
    mnemonic = words[0].strip()

    joined = "".join(words[1:])
    args = [piece.strip() for piece in joined.split(",")]

    return Token(mnemonic=mnemonic, args=[a for a in args if a])
