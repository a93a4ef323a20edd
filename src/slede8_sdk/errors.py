"""
SLEDE8 SDK Error Hierarchy
==========================

This module defines the exception hierarchy for the entire SLEDE8 SDK.
All exceptions inherit from Slede8Error, allowing callers to catch all
SDK-related errors with a single except clause if desired.

Exception Hierarchy
-------------------
Slede8Error (base)
├── AssemblerError (assembler-related)
│   ├── WrongArityError - wrong number of operands for a mnemonic
│   ├── UnknownOpcodeError - mnemonic not in the instruction set
│   ├── InvalidRegisterError - operand is not r0..r15
│   ├── InvalidDataError - malformed .DATA literal
│   ├── ValueRangeError - literal does not fit its bit field
│   └── UndefinedLabelError - reference to an unbound label
└── ImageFormatError - byte buffer is not a SLEDE8 program image

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^
    hint: suggestion for fixing (when available)

Decoding never raises: an undecodable word is reported as an invalid
decode result, since memory cells routinely hold data rather than code.
"""

from dataclasses import dataclass
from typing import Optional, Sequence


# =============================================================================
# Base Exception Class
# =============================================================================

class Slede8Error(Exception):
    """
    Base exception for all SLEDE8 SDK errors.

        try:
            assemble(source)
        except Slede8Error as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed, 0 when unknown)
    """
    filename: str
    line: int
    column: int = 0

    def __str__(self) -> str:
        """Format as 'filename:line:column' (column omitted when unknown)."""
        if self.column > 0:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.filename}:{self.line}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(Slede8Error):
    """
    Base exception for all assembler-related errors.

    Encoders raise these without a location; the program assembler
    attaches the location and source text with ``with_location`` before
    re-raising.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            prog.slede:4: error: invalid register 'r16'
                SETT r16, 3
            hint: registers are r0 to r15
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)

    def with_location(
        self,
        location: SourceLocation,
        source_line: Optional[str] = None,
    ) -> "AssemblerError":
        """
        Attach location information and rebuild the formatted message.

        Returns:
            self, so callers can write ``raise err.with_location(...)``
        """
        self.location = location
        self.source_line = source_line
        self.args = (self._format_message(),)
        return self


class WrongArityError(AssemblerError):
    """
    Wrong number of operands for a mnemonic.

    Examples:
        STOPP r0        ; expected no arguments
        HOPP            ; expected one argument
        PLUSS r0        ; expected two arguments
    """

    _COUNT_WORDS = {0: "no arguments", 1: "one argument", 2: "two arguments"}

    def __init__(self, mnemonic: str, args: Sequence[str], expected: int, **kwargs):
        self.mnemonic = mnemonic
        self.arguments = list(args)
        self.expected = expected

        wanted = self._COUNT_WORDS.get(expected, f"{expected} arguments")
        got = ", ".join(self.arguments) if self.arguments else "nothing"
        super().__init__(
            f"'{mnemonic}' expects {wanted}, got {got}",
            **kwargs,
        )


class UnknownOpcodeError(AssemblerError):
    """
    Mnemonic is not part of the instruction set.

    Mnemonics are case-sensitive, so ``hopp`` is rejected with a hint
    pointing at ``HOPP``.
    """

    def __init__(self, mnemonic: str, suggestions: Optional[list[str]] = None, **kwargs):
        self.mnemonic = mnemonic
        self.suggestions = suggestions or []

        hint = kwargs.pop("hint", None)
        if not hint and self.suggestions:
            hint = "did you mean " + ", ".join(f"'{s}'" for s in self.suggestions[:3]) + "?"

        super().__init__(f"unknown instruction '{mnemonic}'", hint=hint, **kwargs)


class InvalidRegisterError(AssemblerError):
    """Operand is not a register reference r0..r15."""

    def __init__(self, register: str, **kwargs):
        self.register = register
        super().__init__(
            f"invalid register '{register}'",
            hint=kwargs.pop("hint", "registers are r0 to r15"),
            **kwargs,
        )


class InvalidDataError(AssemblerError):
    """
    Malformed ``.DATA`` literal.

    Raised for unterminated or empty strings, characters outside the
    single-byte text encoding, and arguments that are neither a string
    nor a numeric literal.
    """

    def __init__(self, literal: str, reason: str = "", **kwargs):
        self.literal = literal
        self.reason = reason
        message = f"invalid .DATA literal '{literal}'"
        if reason:
            message += f" ({reason})"
        super().__init__(message, **kwargs)


class ValueRangeError(AssemblerError):
    """
    Literal does not fit the bit field it is encoded into.

    Bytes (SETT immediates, .DATA values) must be 0-255 and addresses
    0-0xFFF.
    """

    def __init__(self, literal: str, value: int, maximum: int, **kwargs):
        self.literal = literal
        self.value = value
        self.maximum = maximum
        super().__init__(
            f"value '{literal}' out of range",
            hint=kwargs.pop("hint", f"expected 0 to {maximum} (0x{maximum:X})"),
            **kwargs,
        )


class UndefinedLabelError(AssemblerError):
    """
    Address operand names a label that was never defined.

    Only raised when strict label checking is enabled (the default).
    """

    def __init__(self, label: str, similar_labels: Optional[list[str]] = None, **kwargs):
        self.label = label
        self.similar_labels = similar_labels or []

        hint = kwargs.pop("hint", None)
        if not hint and self.similar_labels:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_labels[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(f"undefined label '{label}'", hint=hint, **kwargs)


# =============================================================================
# Program Image Exceptions
# =============================================================================

class ImageFormatError(Slede8Error):
    """
    Byte buffer is not a SLEDE8 program image.

    Raised when the buffer is shorter than, or does not begin with,
    the ``.SLEDE8`` magic.
    """
    pass
