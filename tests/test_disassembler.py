"""
Unit Tests for the Disassembler Module
======================================

This module contains tests for the SLEDE8 word decoder and the image
disassembler.

Test coverage includes:
- Every instruction family
- Unknown operation classes and sub-codes
- Word field extraction
- Label-line and raw-byte rendering
- Encode/decode round trips
- Whole-body and image disassembly (odd trailing byte, count limit)
- The s8disasm command

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

import pytest
from click.testing import CliRunner

from slede8_sdk.assembler import CodeGenerator, assemble, tokenize
from slede8_sdk.cli.s8disasm import main as s8disasm_main
from slede8_sdk.disassembler import DecodedInstruction, Slede8Disassembler, decode
from slede8_sdk.errors import ImageFormatError
from slede8_sdk.isa import ALU_OPS, CMP_OPS


# =============================================================================
# Word Decoding Tests
# =============================================================================

class TestDecode:
    """Tests for decode() on valid words."""

    @pytest.mark.parametrize("opcode,param,text", [
        (0x00, 0x00, "STOPP"),
        (0x01, 0x41, "SETT r0, 65"),
        (0xF1, 0xFF, "SETT r15, 255"),
        (0x32, 0x07, "SETT r3, r7"),
        (0x33, 0x12, "FINN m123"),
        (0x04, 0x05, "LAST r5"),
        (0x14, 0x05, "LAGR r5"),
        (0x55, 0x21, "PLUSS r1, r2"),
        (0x05, 0x10, "OG r0, r1"),
        (0x65, 0x0F, "MINUS r15, r0"),
        (0x06, 0x02, "LES r2"),
        (0x16, 0x02, "SKRIV r2"),
        (0x07, 0x10, "LIK r0, r1"),
        (0x57, 0x43, "SEL r3, r4"),
        (0x08, 0x00, "HOPP a000"),
        (0x89, 0x00, "BHOPP a008"),
        (0xFA, 0xFF, "TUR aFFF"),
        (0x0B, 0x00, "RETUR"),
        (0x0C, 0x00, "NOPE"),
    ])
    def test_valid_words(self, opcode, param, text):
        instr = decode(opcode, param)
        assert instr.valid
        assert instr.text == text
        assert instr.error == ""

    def test_mnemonic(self):
        assert decode(0x55, 0x21).mnemonic == "PLUSS"
        assert decode(0x0D, 0x00).mnemonic == ""

    def test_address_kept(self):
        assert decode(0x0C, 0x00, address=0x1A).address == 0x1A


class TestDecodeInvalid:
    """Words that are data rather than instructions."""

    @pytest.mark.parametrize("opcode", [0x0D, 0x0E, 0x0F, 0xFD])
    def test_unknown_class(self, opcode):
        instr = decode(opcode, 0x00)
        assert not instr.valid
        assert "operationClass 0x" in instr.error

    def test_unknown_class_message(self):
        instr = decode(0x0D, 0x00)
        assert instr.error == "Unknown operation [0] in operationClass 0xD"
        assert instr.text == "; NOT DECODED"

    @pytest.mark.parametrize("opcode", [
        0x24,   # LOAD_STORE op 2
        0x75,   # ALU op 7
        0xF5,   # ALU op 15
        0x26,   # IO op 2
        0x67,   # COMPARE op 6
    ])
    def test_unknown_operation(self, opcode):
        instr = decode(opcode, 0x00)
        assert not instr.valid
        assert instr.error.startswith(f"Unknown operation [{opcode >> 4}]")

    @pytest.mark.parametrize("opcode,param", [
        (0x00, 0x01),
        (0x00, 0xFF),
        (0x0B, 0x01),
        (0x0C, 0x80),
    ])
    def test_no_argument_instructions_need_zero_word(self, opcode, param):
        assert not decode(opcode, param).valid

    @pytest.mark.parametrize("opcode,param,word", [
        (0x00, 0x01, "0x0100"),
        (0x10, 0x00, "0x0010"),
        (0x1B, 0x00, "0x001B"),
        (0x0C, 0x80, "0x800C"),
    ])
    def test_operand_bits_message_shows_word(self, opcode, param, word):
        error = decode(opcode, param).error
        assert error.startswith(f"Unexpected operand bits in word {word}")
        assert "takes no arguments" in error

    def test_never_raises(self):
        for opcode in range(256):
            for param in (0x00, 0x5A, 0xFF):
                assert isinstance(decode(opcode, param), DecodedInstruction)


class TestWordFields:
    """Field extraction from the 16-bit word."""

    def setup_method(self):
        self.instr = decode(0x55, 0x21)

    def test_instruction(self):
        assert self.instr.instruction == 0x2155

    def test_class_and_operation(self):
        assert self.instr.operation_class == 0x5
        assert self.instr.operation == 0x5

    def test_address_field(self):
        assert self.instr.address_field == 0x215

    def test_value(self):
        assert self.instr.value == 0x21

    def test_arguments(self):
        assert self.instr.argument1 == 1
        assert self.instr.argument2 == 2


# =============================================================================
# Rendering Tests
# =============================================================================

class TestRender:
    """Tests for DecodedInstruction.render()."""

    def test_label_line_for_code(self):
        assert decode(0x01, 0x41, address=2).render() == "a002:\nSETT r0, 65"

    def test_label_line_for_data_keeps_both_bytes(self):
        assert decode(0x0D, 0x07, address=4).render() == (
            "m004:\n.DATA 0x0D, 0x07 ; Unknown operation [0] in operationClass 0xD"
        )

    def test_unused_operand_bits_render_as_data(self):
        """SETT r3, r7 with the top nibble set would not reassemble to 0x7732."""
        instr = decode(0x32, 0x77, address=6)
        assert instr.valid
        assert not instr.is_code
        assert instr.render().startswith("m006:\n.DATA 0x32, 0x77 ; ")
        assert instr.render(show_raw=True) == "A[006] | I[32 77] SETT r3, r7"

    def test_literal_target(self):
        instr = decode(0x03, 0x01)
        assert instr.target == 0x010
        assert instr.target_label == "m010"
        assert instr.source_text(literal_target=True) == "FINN 0x010"

    def test_no_target_for_other_classes(self):
        assert decode(0x55, 0x21).target is None
        assert decode(0x0D, 0x00).target is None

    def test_raw(self):
        instr = decode(0x01, 0x41, address=2)
        assert instr.render(show_raw=True) == "A[002] | I[01 41] SETT r0, 65"

    def test_raw_invalid(self):
        instr = decode(0x0E, 0x34, address=0x10)
        assert instr.render(show_raw=True).startswith("A[010] | I[0E 34] .DATA 0x0E ; ")

    def test_address_override(self):
        instr = decode(0x0C, 0x00)
        assert instr.render(address=0xABC) == "aABC:\nNOPE"

    def test_str_is_raw(self):
        instr = decode(0x0B, 0x00, address=6)
        assert str(instr) == "A[006] | I[0B 00] RETUR"

    def test_to_dict(self):
        data = decode(0x08, 0x01, address=0x20).to_dict()
        assert data["address"] == "020"
        assert data["address_int"] == 0x20
        assert data["bytes"] == ["08", "01"]
        assert data["text"] == "HOPP a010"
        assert data["valid"] is True


# =============================================================================
# Round-Trip Tests
# =============================================================================

def encode(line: str) -> bytes:
    return CodeGenerator().encode(tokenize(line))


class TestRoundTrip:
    """Encoding then decoding reproduces the instruction."""

    @pytest.mark.parametrize("mnemonic", ALU_OPS + CMP_OPS)
    @pytest.mark.parametrize("first,second", [(0, 0), (1, 2), (15, 7)])
    def test_two_register_instructions(self, mnemonic, first, second):
        line = f"{mnemonic} r{first}, r{second}"
        code = encode(line)
        instr = decode(code[0], code[1])
        assert instr.text == line
        assert (instr.argument1, instr.argument2) == (first, second)

    @pytest.mark.parametrize("first,second", [(0, 15), (9, 3)])
    def test_sett_register(self, first, second):
        line = f"SETT r{first}, r{second}"
        code = encode(line)
        assert decode(code[0], code[1]).text == line

    @pytest.mark.parametrize("register", range(16))
    def test_register_index(self, register):
        code = encode(f"SKRIV r{register}")
        assert decode(code[0], code[1]).argument1 == register

    def test_self_jump(self):
        body = assemble("START:\nHOPP START").body
        assert len(body) == 2
        instr = decode(body[0], body[1])
        assert instr.address_field == 0
        assert instr.text == "HOPP a000"

    def test_disassembly_reassembles(self):
        """Label-line output is valid source for the assembler."""
        body = assemble("start:\nSETT r0, 65\nSKRIV r0\nHOPP start").body
        text = Slede8Disassembler().disassemble_to_text(body)
        assert assemble(text).body == body

    @pytest.mark.parametrize("source", [
        "SETT r0, 1\n.DATA 0x0D, 0x07\nSTOPP",
        "FINN 0x10\nSTOPP",
        "HOPP 0x3\nSTOPP",
        "FINN tekst\nSKRIV r0\nSTOPP\ntekst:\n.DATA 'HEI'",
        "TUR sub\nSTOPP\nsub:\nRETUR",
        ".DATA 1\nløkke:\nHOPP løkke",
        ".DATA 0x32, 0x77, 0x04, 0x75\nNOPE",
        ".DATA 0x00, 0x01, 0x1B, 0x00",
    ])
    def test_disassembly_is_lossless(self, source):
        body = assemble(source).body
        text = Slede8Disassembler().disassemble_to_text(body)
        assert assemble(text).body == body

    def test_referenced_word_gets_operand_label(self):
        """FINN pointing at code labels that word with its m-name too."""
        body = assemble("FINN 4\nSTOPP\nNOPE").body
        lines = Slede8Disassembler().disassemble_to_text(body).splitlines()
        assert lines == [
            "a000:", "FINN m004",
            "a002:", "STOPP",
            "a004:", "m004:", "NOPE",
        ]

    def test_target_outside_listing_is_literal(self):
        body = assemble("FINN 0x10\nSTOPP").body
        text = Slede8Disassembler().disassemble_to_text(body)
        assert "FINN 0x010" in text
        assert "m010" not in text


# =============================================================================
# Disassembler Tests
# =============================================================================

class TestSlede8Disassembler:
    """Tests for Slede8Disassembler."""

    def setup_method(self):
        self.disasm = Slede8Disassembler()

    def test_empty(self):
        assert self.disasm.disassemble(b"") == []

    def test_addresses(self):
        instrs = self.disasm.disassemble(bytes([0x01, 0x41, 0x16, 0x00, 0x00, 0x00]))
        assert [i.address for i in instrs] == [0, 2, 4]
        assert [i.text for i in instrs] == ["SETT r0, 65", "SKRIV r0", "STOPP"]

    def test_start_address(self):
        instrs = self.disasm.disassemble(bytes([0x0C, 0x00, 0x0C, 0x00]), start_address=0x100)
        assert [i.address for i in instrs] == [0x100, 0x102]

    def test_count(self):
        instrs = self.disasm.disassemble(bytes(8), count=2)
        assert len(instrs) == 2

    def test_odd_trailing_byte(self):
        instrs = self.disasm.disassemble(bytes([0x0C, 0x00, 0x41]))
        last = instrs[-1]
        assert len(instrs) == 2
        assert not last.valid
        assert last.error == "incomplete word"
        assert last.size == 1
        assert last.render() == "m002:\n.DATA 0x41 ; incomplete word"

    def test_data_between_code(self):
        body = assemble("NOPE\n.DATA 0x0D, 0\nSTOPP").body
        instrs = self.disasm.disassemble(body)
        assert [i.valid for i in instrs] == [True, False, True]

    def test_disassemble_one_offset_out_of_range(self):
        with pytest.raises(ValueError):
            self.disasm.disassemble_one(bytes(2), 2)

    def test_disassemble_image(self):
        image = assemble("SETT r1, 1\nRETUR").image
        instrs = self.disasm.disassemble_image(image)
        assert [i.text for i in instrs] == ["SETT r1, 1", "RETUR"]

    def test_disassemble_image_bad_magic(self):
        with pytest.raises(ImageFormatError):
            self.disasm.disassemble_image(b"\x0C\x00\x0C\x00\x0C\x00\x0C\x00")

    def test_disassemble_image_too_short(self):
        with pytest.raises(ImageFormatError):
            self.disasm.disassemble_image(b".SLE")

    def test_to_text_raw(self):
        text = self.disasm.disassemble_to_text(bytes([0x0B, 0x00]), show_raw=True)
        assert text == "A[000] | I[0B 00] RETUR"


# =============================================================================
# Command-Line Interface Tests
# =============================================================================

class TestCLI:
    """Test the s8disasm command."""

    def write_image(self, tmp_path, source="SETT r0, 65\nSTOPP"):
        path = tmp_path / "prog.s8"
        path.write_bytes(assemble(source).image)
        return path

    def test_cli_help(self):
        runner = CliRunner()
        result = runner.invoke(s8disasm_main, ["--help"])
        assert result.exit_code == 0
        assert "Disassemble a SLEDE8 program image" in result.output

    def test_cli_default_output(self, tmp_path):
        path = self.write_image(tmp_path)

        runner = CliRunner()
        result = runner.invoke(s8disasm_main, [str(path)])

        assert result.exit_code == 0
        assert "; Disassembly of prog.s8" in result.output
        assert "; Size: 4 bytes" in result.output
        assert "a000:\nSETT r0, 65" in result.output
        assert "a002:\nSTOPP" in result.output

    def test_cli_raw(self, tmp_path):
        path = self.write_image(tmp_path)

        runner = CliRunner()
        result = runner.invoke(s8disasm_main, [str(path), "--raw"])

        assert result.exit_code == 0
        assert "A[000] | I[01 41] SETT r0, 65" in result.output

    def test_cli_count(self, tmp_path):
        path = self.write_image(tmp_path)

        runner = CliRunner()
        result = runner.invoke(s8disasm_main, [str(path), "-c", "1"])

        assert result.exit_code == 0
        assert "SETT r0, 65" in result.output
        assert "STOPP" not in result.output

    def test_cli_no_header(self, tmp_path):
        path = tmp_path / "memory.bin"
        path.write_bytes(bytes([0x0C, 0x00]))

        runner = CliRunner()
        result = runner.invoke(s8disasm_main, [str(path), "--no-header"])

        assert result.exit_code == 0
        assert "NOPE" in result.output

    def test_cli_output_file(self, tmp_path):
        path = self.write_image(tmp_path)
        output = tmp_path / "prog.slede"

        runner = CliRunner()
        result = runner.invoke(s8disasm_main, [str(path), "-o", str(output)])

        assert result.exit_code == 0
        text = output.read_text(encoding="utf-8")
        assert assemble(text).body == bytes([0x01, 0x41, 0x00, 0x00])

    def test_cli_bad_header(self, tmp_path):
        path = tmp_path / "memory.bin"
        path.write_bytes(bytes([0x0C, 0x00]))

        runner = CliRunner()
        result = runner.invoke(s8disasm_main, [str(path)])

        assert result.exit_code == 1
        assert "not a SLEDE8 image" in result.output

    def test_cli_missing_file(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(s8disasm_main, [str(tmp_path / "missing.s8")])
        assert result.exit_code == 2
