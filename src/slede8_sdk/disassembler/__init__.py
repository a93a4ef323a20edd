"""
SLEDE8 SDK Disassembler Module
==============================

This module decodes SLEDE8 machine words back into assembly text, for
listing program images and for stepping debuggers that show the word at
the program counter.

Usage:
    from slede8_sdk.disassembler import Slede8Disassembler, decode

    # Decode one word
    instr = decode(0x08, 0x00)
    print(instr.text)            # HOPP a000

    # Disassemble a program image
    disasm = Slede8Disassembler()
    for instr in disasm.disassemble_image(image):
        print(instr.render(show_raw=True))

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

from .slede8 import Slede8Disassembler, DecodedInstruction, decode

__all__ = [
    "Slede8Disassembler",
    "DecodedInstruction",
    "decode",
]
