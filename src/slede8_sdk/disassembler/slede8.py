"""
SLEDE8 Disassembler
===================

Decodes SLEDE8 machine words back into assembly text. This is the inverse
of the assembler's code generator and uses the same operation tables.

A word that does not decode is not an error: memory routinely holds data
between instructions. Such words come back with ``valid=False`` and a
message, and render as ``.DATA``.

Rendering
---------
Without raw bytes, each word is preceded by a label line (``a`` for code,
``m`` for data) and undecodable words keep both of their bytes::

    a000:
    SETT r0, 65
    m002:
    .DATA 0x0D, 0x07 ; Unknown operation [0] in operationClass 0xD

``Slede8Disassembler.disassemble_to_text`` in this mode produces source
the assembler turns back into the same bytes: every word an address
operand points at also gets the label it is referred to by, and operands
pointing inside a word or outside the listing are written as literals.

With raw bytes, one line per word::

    A[000] | I[01 41] SETT r0, 65

Usage:
    disasm = Slede8Disassembler()
    print(disasm.disassemble_to_text(body))

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from ..image import parse_image
from ..isa import (
    ALU_OPS,
    CMP_OPS,
    IO_OPS,
    LOAD_STORE_OPS,
    WORD_SIZE,
    OperationClass,
)


# Classes whose word is an address operand
ADDRESS_CLASSES = frozenset({
    OperationClass.LOCATE,
    OperationClass.JUMP,
    OperationClass.BRANCH,
    OperationClass.CALL,
})

# Classes that leave argument2 unused; the assembler always encodes it as 0
_SINGLE_ARGUMENT_CLASSES = frozenset({
    OperationClass.SET_REGISTER,
    OperationClass.LOAD_STORE,
    OperationClass.IO,
})

_NO_ARGUMENT_CLASSES = frozenset({
    OperationClass.HALT,
    OperationClass.RETURN,
    OperationClass.NOP,
})


# =============================================================================
# Data Structures
# =============================================================================

@dataclass
class DecodedInstruction:
    """
    A single decoded SLEDE8 word.

    Attributes:
        opcode: The low (opcode) byte
        param: The high (parameter) byte
        text: Mnemonic rendering, e.g. "PLUSS r0, r1"
        valid: False if the word is not a known instruction
        error: Why the word did not decode (empty when valid)
        address: Memory address of the word (for rendering)
        size: Bytes the word occupies (1 for a lone trailing byte)
    """
    opcode: int
    param: int
    text: str
    valid: bool
    error: str = ""
    address: int = 0
    size: int = WORD_SIZE

    # -------------------------------------------------------------------------
    # Word Fields
    # -------------------------------------------------------------------------

    @property
    def instruction(self) -> int:
        return self.opcode | (self.param << 8)

    @property
    def operation_class(self) -> int:
        return self.instruction & 0xF

    @property
    def operation(self) -> int:
        return (self.instruction >> 4) & 0xF

    @property
    def address_field(self) -> int:
        return self.instruction >> 4

    @property
    def value(self) -> int:
        return self.instruction >> 8

    @property
    def argument1(self) -> int:
        return (self.instruction >> 8) & 0xF

    @property
    def argument2(self) -> int:
        return (self.instruction >> 12) & 0xF

    @property
    def mnemonic(self) -> str:
        """The mnemonic alone ("" for invalid words)."""
        return self.text.split(" ", 1)[0] if self.valid else ""

    @property
    def raw_bytes(self) -> bytes:
        return bytes([self.opcode, self.param])[:self.size]

    @property
    def is_code(self) -> bool:
        """
        True if assembling ``text`` gives back exactly this word.

        SETT, LAST, LAGR, LES and SKRIV ignore the top nibble when
        decoding, so a word with those bits set is shown as data.
        """
        if not self.valid:
            return False
        if self.operation_class in _SINGLE_ARGUMENT_CLASSES:
            return self.argument2 == 0
        return True

    @property
    def target(self) -> Optional[int]:
        """Address operand of FINN, HOPP, BHOPP or TUR (None otherwise)."""
        if self.valid and self.operation_class in ADDRESS_CLASSES:
            return self.address_field
        return None

    @property
    def target_label(self) -> Optional[str]:
        """The operand as rendered, e.g. "m123" for FINN 0x123."""
        if self.target is None:
            return None
        return self.text.split(" ", 1)[1]

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def source_text(self, literal_target: bool = False) -> str:
        """
        The word as one line of assembler source.

        Words that would not reassemble to the same bytes come back as
        ``.DATA`` with every byte they occupy.

        Args:
            literal_target: Write an address operand as a hex literal
                            instead of a label reference
        """
        if not self.is_code:
            data = ", ".join(f"0x{b:02X}" for b in self.raw_bytes)
            reason = self.error or f"unused operand bits set in '{self.text}'"
            return f".DATA {data} ; {reason}"
        if literal_target and self.target is not None:
            return f"{self.mnemonic} 0x{self.target:03X}"
        return self.text

    def render(self, address: Optional[int] = None, show_raw: bool = False) -> str:
        """
        Format the word for display.

        Args:
            address: Address to show (default: the address it was decoded at)
            show_raw: Show the address and raw byte pair on one line instead
                      of a label line

        Returns:
            The formatted text (two lines when show_raw is False)
        """
        if address is None:
            address = self.address
        hex_address = f"{address:03X}"

        if show_raw:
            prefix = f"A[{hex_address}] | I[{self.opcode:02X} {self.param:02X}] "
            if self.valid:
                return prefix + self.text
            return prefix + f".DATA 0x{self.opcode:02X} ; {self.error}"

        return f"{self.label(address)}:\n{self.source_text()}"

    def label(self, address: Optional[int] = None) -> str:
        """Label naming this word: ``aXXX`` for code, ``mXXX`` for data."""
        if address is None:
            address = self.address
        return f"{'a' if self.is_code else 'm'}{address:03X}"

    def __str__(self) -> str:
        return self.render(show_raw=True)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "address": f"{self.address:03X}",
            "address_int": self.address,
            "bytes": [f"{b:02X}" for b in self.raw_bytes],
            "text": self.text,
            "valid": self.valid,
            "error": self.error,
        }


# =============================================================================
# Word Decoder
# =============================================================================

def _unknown(operation_class: int, operation: int) -> str:
    return f"Unknown operation [{operation}] in operationClass 0x{operation_class:X}"


def _unexpected_operand(operation_class: int, instruction: int) -> str:
    return (
        f"Unexpected operand bits in word 0x{instruction:04X} "
        f"(operationClass 0x{operation_class:X} takes no arguments)"
    )


def decode(opcode: int, param: int, address: int = 0) -> DecodedInstruction:
    """
    Decode one word.

    Args:
        opcode: The low byte of the word
        param: The high byte of the word
        address: Address of the word (kept for rendering)

    Returns:
        DecodedInstruction; ``valid`` is False for unknown operations
    """
    instruction = (opcode & 0xFF) | ((param & 0xFF) << 8)
    operation_class = instruction & 0xF
    operation = (instruction >> 4) & 0xF
    address_field = instruction >> 4
    value = instruction >> 8
    argument1 = (instruction >> 8) & 0xF
    argument2 = (instruction >> 12) & 0xF

    text: Optional[str] = None

    if operation_class == OperationClass.HALT:
        if address_field == 0:
            text = "STOPP"

    elif operation_class == OperationClass.SET_IMMEDIATE:
        text = f"SETT r{operation}, {value}"

    elif operation_class == OperationClass.SET_REGISTER:
        text = f"SETT r{operation}, r{argument1}"

    elif operation_class == OperationClass.LOCATE:
        text = f"FINN m{address_field:03X}"

    elif operation_class == OperationClass.LOAD_STORE:
        if operation < len(LOAD_STORE_OPS):
            text = f"{LOAD_STORE_OPS[operation]} r{argument1}"

    elif operation_class == OperationClass.ALU:
        if operation < len(ALU_OPS):
            text = f"{ALU_OPS[operation]} r{argument1}, r{argument2}"

    elif operation_class == OperationClass.IO:
        if operation < len(IO_OPS):
            text = f"{IO_OPS[operation]} r{argument1}"

    elif operation_class == OperationClass.COMPARE:
        if operation < len(CMP_OPS):
            text = f"{CMP_OPS[operation]} r{argument1}, r{argument2}"

    elif operation_class == OperationClass.JUMP:
        text = f"HOPP a{address_field:03X}"

    elif operation_class == OperationClass.BRANCH:
        text = f"BHOPP a{address_field:03X}"

    elif operation_class == OperationClass.CALL:
        text = f"TUR a{address_field:03X}"

    elif operation_class == OperationClass.RETURN:
        if address_field == 0:
            text = "RETUR"

    elif operation_class == OperationClass.NOP:
        if address_field == 0:
            text = "NOPE"

    if text is None:
        if operation_class in _NO_ARGUMENT_CLASSES:
            error = _unexpected_operand(operation_class, instruction)
        else:
            error = _unknown(operation_class, operation)
        return DecodedInstruction(
            opcode=opcode & 0xFF,
            param=param & 0xFF,
            text="; NOT DECODED",
            valid=False,
            error=error,
            address=address,
        )

    return DecodedInstruction(
        opcode=opcode & 0xFF,
        param=param & 0xFF,
        text=text,
        valid=True,
        address=address,
    )


# =============================================================================
# SLEDE8 Disassembler
# =============================================================================

class Slede8Disassembler:
    """
    Disassembler for SLEDE8 program bodies.

    Walks the body two bytes at a time from address 0 (or a given start
    address). SLEDE8 has no instruction alignment marker, so data placed
    by ``.DATA`` with an odd length shifts the decoding of what follows.
    """

    def disassemble_one(self, data: bytes, offset: int = 0, address: Optional[int] = None) -> DecodedInstruction:
        """
        Decode the word at offset.

        A lone trailing byte is reported as one byte of data.

        Raises:
            ValueError: If offset is beyond the data
        """
        if offset >= len(data):
            raise ValueError(f"Offset {offset} beyond data length {len(data)}")

        if address is None:
            address = offset

        if offset + 1 >= len(data):
            return DecodedInstruction(
                opcode=data[offset],
                param=0,
                text="; NOT DECODED",
                valid=False,
                error="incomplete word",
                address=address,
                size=1,
            )

        return decode(data[offset], data[offset + 1], address)

    def disassemble(
        self,
        data: bytes,
        start_address: int = 0,
        count: Optional[int] = None,
    ) -> List[DecodedInstruction]:
        """
        Decode a program body.

        Args:
            data: Program body (without magic header)
            start_address: Address of the first byte
            count: Maximum number of words (None = all)

        Returns:
            List of DecodedInstruction objects in address order
        """
        result = []
        offset = 0

        while offset < len(data):
            if count is not None and len(result) >= count:
                break
            result.append(self.disassemble_one(data, offset, start_address + offset))
            offset += WORD_SIZE

        return result

    def disassemble_image(self, image: bytes, count: Optional[int] = None) -> List[DecodedInstruction]:
        """
        Decode a complete program image (magic header included).

        Raises:
            ImageFormatError: If the magic header is missing
        """
        return self.disassemble(parse_image(image), count=count)

    def disassemble_to_text(
        self,
        data: bytes,
        start_address: int = 0,
        count: Optional[int] = None,
        show_raw: bool = False,
    ) -> str:
        """
        Disassemble and return a multi-line listing.

        Without show_raw the listing is assembler source: assembling it
        at start_address reproduces the bytes that were listed.
        """
        instructions = self.disassemble(data, start_address, count)
        if show_raw:
            return "\n".join(instr.render(show_raw=True) for instr in instructions)
        return "\n".join(self.source_lines(instructions))

    @staticmethod
    def source_lines(instructions: List[DecodedInstruction]) -> List[str]:
        """
        Render decoded words as reassemblable source lines.

        Each word gets its own label plus the labels other words use to
        refer to it. An address operand that points inside a word or past
        the listed words has no label line to land on, so it is written
        as a hex literal.
        """
        starts = {instr.address for instr in instructions}

        referenced: Dict[int, List[str]] = {}
        for instr in instructions:
            if instr.target in starts:
                names = referenced.setdefault(instr.target, [])
                if instr.target_label not in names:
                    names.append(instr.target_label)

        lines = []
        for instr in instructions:
            own = instr.label()
            lines.append(f"{own}:")
            lines.extend(f"{name}:" for name in referenced.get(instr.address, []) if name != own)

            literal = instr.target is not None and instr.target not in starts
            lines.append(instr.source_text(literal_target=literal))

        return lines
