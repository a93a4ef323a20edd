"""
Unit Tests for the SLEDE8 Lexer
===============================

Tests for line classification and tokenization.

Test coverage includes:
- Every line kind and the order the rules are checked in
- Norwegian letters in labels
- Comment stripping and argument splitting
- Tokenizer quirks kept from the reference assembler
"""

import pytest

from slede8_sdk.assembler.lexer import (
    LineKind,
    Token,
    classify,
    label_name,
    strip_comment,
    tokenize,
)


# =============================================================================
# Line Classification Tests
# =============================================================================

class TestClassify:
    """Tests for classify()."""

    def test_empty_line_is_whitespace(self):
        assert classify("") is LineKind.WHITESPACE

    def test_comment(self):
        assert classify("; dette er en kommentar") is LineKind.COMMENT

    def test_comment_wins_over_label_shape(self):
        """A comment that looks like a label is still a comment."""
        assert classify(";start:") is LineKind.COMMENT

    @pytest.mark.parametrize("line", [
        "start:",
        "START:",
        "løkke:",
        "ÆØÅ:",
        "my-label_2:",
        "42:",
    ])
    def test_labels(self, line):
        assert classify(line) is LineKind.LABEL

    @pytest.mark.parametrize("line", [
        "two words:",
        "label::",
        "start: NOPE",
        "lab.el:",
    ])
    def test_label_lookalikes_are_instructions(self, line):
        assert classify(line) is LineKind.INSTRUCTION

    @pytest.mark.parametrize("line", [
        ".DATA 1, 2, 3",
        ".DATA 0x41",
        ".DATA 'AB', 0x41",
        ".DATA",
        ".DATA 1 ; trailing comment",
        ".DATA;comment",
    ])
    def test_data(self, line):
        assert classify(line) is LineKind.DATA

    def test_data_directive_is_case_sensitive(self):
        assert classify(".data 1") is LineKind.INSTRUCTION

    def test_data_prefix_is_not_data(self):
        assert classify(".DATAX 1") is LineKind.INSTRUCTION

    @pytest.mark.parametrize("line", [
        "SETT r0, 1",
        "STOPP",
        "HOPP start ; loop",
        "hopp start",
    ])
    def test_instructions(self, line):
        assert classify(line) is LineKind.INSTRUCTION

    def test_kind_str(self):
        assert str(LineKind.DATA) == "data"

    def test_label_name(self):
        assert label_name("løkke:") == "løkke"


# =============================================================================
# Tokenizer Tests
# =============================================================================

class TestTokenize:
    """Tests for tokenize()."""

    def test_no_arguments(self):
        assert tokenize("STOPP") == Token("STOPP", [])

    def test_two_arguments(self):
        token = tokenize("SETT r0, 1")
        assert token.mnemonic == "SETT"
        assert token.args == ["r0", "1"]

    def test_comment_removed(self):
        token = tokenize("PLUSS r0, r1 ; r0 += r1")
        assert token.args == ["r0", "r1"]

    def test_irregular_spacing(self):
        """Spaces between arguments are removed before splitting on commas."""
        assert tokenize("PLUSS   r0 ,r1").args == ["r0", "r1"]

    def test_empty_pieces_dropped(self):
        assert tokenize("HOPP ,, start,").args == ["start"]

    def test_surrounding_whitespace(self):
        assert tokenize("   NOPE   ") == Token("NOPE", [])

    def test_data_line(self):
        token = tokenize(".DATA 'AB', 0x41")
        assert token.mnemonic == ".DATA"
        assert token.args == ["'AB'", "0x41"]

    def test_spaces_inside_strings_are_removed(self):
        """Arguments are joined without separator, as in the reference assembler."""
        assert tokenize(".DATA 'a b'").args == ["'ab'"]

    def test_mnemonic_case_preserved(self):
        assert tokenize("hopp 0").mnemonic == "hopp"

    def test_comment_only(self):
        assert tokenize("; nothing") == Token("", [])

    def test_token_str(self):
        assert str(tokenize("SETT r0,1")) == "SETT r0, 1"
        assert str(tokenize("RETUR")) == "RETUR"

    def test_strip_comment(self):
        assert strip_comment("  LES r0 ; input ; more") == "LES r0 "
