"""
SLEDE8 Instruction Set Definition
=================================

This module defines the SLEDE8 instruction set: the layout of a 16-bit
instruction word, the operation classes, the ordered ALU and comparison
tables, and the helpers for parsing literal and register operands.

SLEDE8 is a small 16-bit educational machine with 16 byte-wide registers
(r0-r15) and a 12-bit (4 KB) address space. Program images start with the
ASCII magic ``.SLEDE8``.

Word Layout
-----------
A word is two bytes stored little-endian: the opcode byte first, then the
parameter byte::

    instruction = opcode_byte | (param_byte << 8)

    bits 15..12  11..8  7..4       3..0
         arg2    arg1   operation  operation class
         \\____ value ___/
         \\_________ address _______/

| Field           | Extraction               | Used by                     |
|-----------------|--------------------------|-----------------------------|
| operation class | ``instruction & 0xF``    | everything                  |
| operation       | ``(instruction >> 4) & 0xF`` | ALU/compare/load/IO variant |
| address         | ``instruction >> 4``     | FINN, HOPP, BHOPP, TUR      |
| value           | ``instruction >> 8``     | SETT register, immediate    |
| argument1       | ``(instruction >> 8) & 0xF`` | register operands       |
| argument2       | ``(instruction >> 12) & 0xF`` | register operands      |

Operation Classes
-----------------
| Class | Mnemonic(s)                         | Operand form          |
|-------|-------------------------------------|-----------------------|
| 0x0   | STOPP                               | none                  |
| 0x1   | SETT rX, value                      | register + byte       |
| 0x2   | SETT rX, rY                         | register + register   |
| 0x3   | FINN address                        | 12-bit address        |
| 0x4   | LAST rX / LAGR rX                   | register              |
| 0x5   | OG ELLER XELLER VSKIFT HSKIFT PLUSS MINUS | register pair   |
| 0x6   | LES rX / SKRIV rX                   | register              |
| 0x7   | LIK ULIK ME MEL SE SEL              | register pair         |
| 0x8   | HOPP address                        | 12-bit address        |
| 0x9   | BHOPP address                       | 12-bit address        |
| 0xA   | TUR address                         | 12-bit address        |
| 0xB   | RETUR                               | none                  |
| 0xC   | NOPE                                | none                  |

Reference
---------
- SLEDE8 reference assembler: https://github.com/PSTNorge/slede8
"""

from enum import IntEnum
import re
from typing import Optional


# =============================================================================
# Program Image Constants
# =============================================================================

# ASCII ".SLEDE8" - every program image starts with these bytes
MAGIC = b".SLEDE8"

# Size of one instruction word in bytes
WORD_SIZE = 2

# Label table sentinel for a name that was never bound
UNDEFINED = 0xFFFF

# Field widths
REGISTER_COUNT = 16
MAX_BYTE = 0xFF
MAX_ADDRESS = 0xFFF

# Data directive keyword and string delimiter
DATA_DIRECTIVE = ".DATA"
STRING_QUOTE = "'"


# =============================================================================
# Operation Classes
# =============================================================================

class OperationClass(IntEnum):
    """
    The low nibble of an instruction word.

    The operation class selects the instruction family; the next nibble
    (the operation) selects a variant within the family.
    """
    HALT = 0x0
    SET_IMMEDIATE = 0x1
    SET_REGISTER = 0x2
    LOCATE = 0x3
    LOAD_STORE = 0x4
    ALU = 0x5
    IO = 0x6
    COMPARE = 0x7
    JUMP = 0x8
    BRANCH = 0x9
    CALL = 0xA
    RETURN = 0xB
    NOP = 0xC


# =============================================================================
# Operation Tables
# =============================================================================
# The position of a mnemonic in these tuples IS its operation sub-code.
# Never reorder them.
# =============================================================================

ALU_OPS: tuple[str, ...] = (
    "OG",       # 0: bitwise and
    "ELLER",    # 1: bitwise or
    "XELLER",   # 2: bitwise xor
    "VSKIFT",   # 3: shift left
    "HSKIFT",   # 4: shift right
    "PLUSS",    # 5: add
    "MINUS",    # 6: subtract
)

CMP_OPS: tuple[str, ...] = (
    "LIK",      # 0: equal
    "ULIK",     # 1: not equal
    "ME",       # 2: greater than
    "MEL",      # 3: greater than or equal
    "SE",       # 4: less than
    "SEL",      # 5: less than or equal
)

# Operation sub-codes within LOAD_STORE and IO
LOAD_STORE_OPS: tuple[str, ...] = ("LAST", "LAGR")
IO_OPS: tuple[str, ...] = ("LES", "SKRIV")

# Mnemonics whose single operand is an address (label or literal)
ADDRESS_OPS: dict[str, OperationClass] = {
    "FINN": OperationClass.LOCATE,
    "HOPP": OperationClass.JUMP,
    "BHOPP": OperationClass.BRANCH,
    "TUR": OperationClass.CALL,
}

# Mnemonics that take no operands, with their fixed word
NO_ARG_OPS: dict[str, OperationClass] = {
    "STOPP": OperationClass.HALT,
    "RETUR": OperationClass.RETURN,
    "NOPE": OperationClass.NOP,
}

# Every mnemonic the assembler accepts (case-sensitive)
MNEMONICS: frozenset[str] = frozenset(
    {"SETT"}
    | set(ADDRESS_OPS)
    | set(NO_ARG_OPS)
    | set(LOAD_STORE_OPS)
    | set(IO_OPS)
    | set(ALU_OPS)
    | set(CMP_OPS)
    | {DATA_DIRECTIVE}
)


# =============================================================================
# Word Packing
# =============================================================================

def nibbles(n0: int, n1: int, n2: int = 0, n3: int = 0) -> int:
    """Pack four nibbles into a word, lowest nibble first."""
    return (n0 & 0xF) | ((n1 & 0xF) << 4) | ((n2 & 0xF) << 8) | ((n3 & 0xF) << 12)


def nibbles_byte(n0: int, n1: int, value: int) -> int:
    """Pack two nibbles and a byte into a word (SETT layout)."""
    return (n0 & 0xF) | ((n1 & 0xF) << 4) | ((value & 0xFF) << 8)


def nibble_address(n0: int, address: int) -> int:
    """Pack an operation class and a 12-bit address into a word."""
    return (n0 & 0xF) | ((address & MAX_ADDRESS) << 4)


def word_to_bytes(word: int) -> bytes:
    """Split a word into (opcode byte, param byte)."""
    return bytes([word & 0xFF, (word >> 8) & 0xFF])


# =============================================================================
# Operand Parsing
# =============================================================================

_DECIMAL_PATTERN = re.compile(r"[+-]?[0-9]+")
_HEX_PATTERN = re.compile(r"0x[0-9a-fA-F]+")


def parse_value(text: str) -> Optional[int]:
    """
    Parse a numeric literal.

    Accepts decimal (optionally signed) or ``0x``-prefixed hexadecimal.
    The prefix is lowercase only, matching the reference assembler.

    Args:
        text: The literal text, already trimmed

    Returns:
        The integer value, or None if the text is not a literal
    """
    if _HEX_PATTERN.fullmatch(text):
        return int(text[2:], 16)
    if _DECIMAL_PATTERN.fullmatch(text):
        return int(text)
    return None


def parse_register(text: str) -> Optional[int]:
    """
    Parse a register reference of the form ``r<n>``.

    Args:
        text: Operand text, e.g. "r3" or "r0xF"

    Returns:
        The register index 0-15, or None if the text is not a valid register
    """
    if not text.startswith("r") or text[1:2] in ("+", "-"):
        return None
    number = parse_value(text[1:])
    if number is None or not 0 <= number < REGISTER_COUNT:
        return None
    return number


def parse_string_literal(text: str) -> Optional[str]:
    """
    Extract the characters of a single-quoted ``.DATA`` string.

    Anything after the closing quote is ignored, as in the reference
    assembler.

    Args:
        text: Argument text starting with a quote, e.g. "'HEI'"

    Returns:
        The characters between the quotes, or None if the string is
        unterminated or empty
    """
    if not text.startswith(STRING_QUOTE):
        return None
    end = text.find(STRING_QUOTE, 1)
    if end < 2:
        return None
    return text[1:end]
