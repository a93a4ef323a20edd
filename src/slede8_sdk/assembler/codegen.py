"""
SLEDE8 Code Generator (Pass 2)
==============================

Translates one tokenized line into machine code. Instructions become one
little-endian word; ``.DATA`` lines become raw bytes.

Encoding Summary
----------------
| Mnemonic            | Args | Word                                      |
|---------------------|------|-------------------------------------------|
| STOPP               | 0    | 0x0000                                    |
| SETT rX, value      | 2    | class 1, op = X, high byte = value        |
| SETT rX, rY         | 2    | class 2, op = X, high byte = Y            |
| FINN addr           | 1    | class 3, address field = addr             |
| LAST rX / LAGR rX   | 1    | class 4, op 0 / 1, arg1 = X               |
| ALU rX, rY          | 2    | class 5, op = index in ALU_OPS, X, Y      |
| LES rX / SKRIV rX   | 1    | class 6, op 0 / 1, arg1 = X               |
| CMP rX, rY          | 2    | class 7, op = index in CMP_OPS, X, Y      |
| HOPP / BHOPP / TUR  | 1    | class 8 / 9 / A, address field = addr     |
| RETUR               | 0    | 0x000B                                    |
| NOPE                | 0    | 0x000C                                    |

Operands
--------
- Registers: ``r`` followed by 0-15 (decimal or ``0x`` hex).
- Literals: decimal or ``0x``-prefixed hex.
- Addresses: a literal or a label name.
- ``SETT``'s second operand is a literal if it parses as one, otherwise it
  must be a register.

Every arity check happens before any operand is interpreted, so
``PLUSS r99`` reports the missing operand, not the bad register.
"""

from typing import Callable, Optional
import difflib
import logging

from slede8_sdk.assembler.lexer import Token
from slede8_sdk.assembler.preprocessor import LabelTable
from slede8_sdk.config import AssemblerConfig
from slede8_sdk.errors import (
    InvalidDataError,
    InvalidRegisterError,
    UndefinedLabelError,
    UnknownOpcodeError,
    ValueRangeError,
    WrongArityError,
)
from slede8_sdk.isa import (
    ADDRESS_OPS,
    ALU_OPS,
    CMP_OPS,
    DATA_DIRECTIVE,
    IO_OPS,
    LOAD_STORE_OPS,
    MAX_ADDRESS,
    MAX_BYTE,
    MNEMONICS,
    NO_ARG_OPS,
    STRING_QUOTE,
    UNDEFINED,
    OperationClass,
    nibble_address,
    nibbles,
    nibbles_byte,
    parse_register,
    parse_string_literal,
    parse_value,
    word_to_bytes,
)

logger = logging.getLogger(__name__)


class CodeGenerator:
    """
    Encodes tokenized SLEDE8 lines.

    The generator holds the label table of the current assembly run and
    is otherwise stateless, so one instance can encode any number of
    lines from the same program.

    Attributes:
        labels: Label table from the preprocessing pass
        config: Assembly options
    """

    def __init__(
        self,
        labels: Optional[LabelTable] = None,
        config: Optional[AssemblerConfig] = None,
    ):
        self.labels = labels if labels is not None else LabelTable()
        self.config = config or AssemblerConfig()

        self._encoders: dict[str, Callable[[Token], int]] = {"SETT": self._encode_set}
        for mnemonic in NO_ARG_OPS:
            self._encoders[mnemonic] = self._encode_no_args
        for mnemonic in ADDRESS_OPS:
            self._encoders[mnemonic] = self._encode_address_op
        for mnemonic in LOAD_STORE_OPS:
            self._encoders[mnemonic] = self._encode_load_store
        for mnemonic in IO_OPS:
            self._encoders[mnemonic] = self._encode_io
        for mnemonic in ALU_OPS:
            self._encoders[mnemonic] = self._encode_alu
        for mnemonic in CMP_OPS:
            self._encoders[mnemonic] = self._encode_compare

    # =========================================================================
    # Public Interface
    # =========================================================================

    def encode(self, token: Token) -> bytes:
        """
        Encode one tokenized line.

        Args:
            token: Mnemonic and arguments from the tokenizer

        Returns:
            Two bytes for an instruction, or the raw bytes of a .DATA line

        Raises:
            WrongArityError, UnknownOpcodeError, InvalidRegisterError,
            InvalidDataError, ValueRangeError, UndefinedLabelError
        """
        if token.mnemonic == DATA_DIRECTIVE:
            return self.encode_data(token.args)

        encoder = self._encoders.get(token.mnemonic)
        if encoder is None:
            raise UnknownOpcodeError(token.mnemonic, self._similar_mnemonics(token.mnemonic))

        return word_to_bytes(encoder(token))

    def encode_data(self, args: list[str]) -> bytes:
        """
        Encode the arguments of a .DATA line.

        Each argument is either a single-quoted string (one byte per
        character) or a byte literal.
        """
        result = bytearray()

        for arg in args:
            if arg.startswith(STRING_QUOTE):
                text = parse_string_literal(arg)
                if text is None:
                    raise InvalidDataError(arg, "unterminated or empty string")
                try:
                    result.extend(text.encode(self.config.text_encoding))
                except UnicodeEncodeError:
                    raise InvalidDataError(
                        arg, f"not representable in {self.config.text_encoding}"
                    ) from None
            else:
                value = parse_value(arg)
                if value is None:
                    raise InvalidDataError(arg, "expected a string or byte value")
                result.append(self._check_range(arg, value, MAX_BYTE))

        return bytes(result)

    # =========================================================================
    # Arity Checks
    # =========================================================================

    @staticmethod
    def _ensure_no_args(token: Token) -> None:
        if token.args:
            raise WrongArityError(token.mnemonic, token.args, 0)

    @staticmethod
    def _single_arg(token: Token) -> str:
        if len(token.args) != 1:
            raise WrongArityError(token.mnemonic, token.args, 1)
        return token.args[0]

    @staticmethod
    def _two_args(token: Token) -> tuple[str, str]:
        if len(token.args) != 2:
            raise WrongArityError(token.mnemonic, token.args, 2)
        return token.args[0], token.args[1]

    # =========================================================================
    # Operand Helpers
    # =========================================================================

    @staticmethod
    def _register(text: str) -> int:
        number = parse_register(text)
        if number is None:
            raise InvalidRegisterError(text)
        return number

    @staticmethod
    def _check_range(text: str, value: int, maximum: int) -> int:
        if not 0 <= value <= maximum:
            raise ValueRangeError(text, value, maximum)
        return value

    def _address(self, text: str) -> int:
        """Resolve an address operand: a literal or a label name."""
        value = parse_value(text)
        if value is not None:
            return self._check_range(text, value, MAX_ADDRESS)

        address = self.labels.resolve(text)
        if address == UNDEFINED:
            if self.config.strict_labels:
                similar = difflib.get_close_matches(text, self.labels.names(), n=3)
                raise UndefinedLabelError(text, similar)
            logger.warning(f"Undefined label '{text}', encoding address {UNDEFINED & MAX_ADDRESS:#05x}")
            return UNDEFINED & MAX_ADDRESS

        return self._check_range(text, address, MAX_ADDRESS)

    @staticmethod
    def _similar_mnemonics(mnemonic: str) -> list[str]:
        if mnemonic.upper() in MNEMONICS:
            return [mnemonic.upper()]
        return difflib.get_close_matches(mnemonic.upper(), sorted(MNEMONICS), n=3)

    # =========================================================================
    # Instruction Encoders
    # =========================================================================

    def _encode_no_args(self, token: Token) -> int:
        self._ensure_no_args(token)
        return int(NO_ARG_OPS[token.mnemonic])

    def _encode_set(self, token: Token) -> int:
        dest_text, source_text = self._two_args(token)
        dest = self._register(dest_text)

        value = parse_value(source_text)
        if value is not None:
            value = self._check_range(source_text, value, MAX_BYTE)
            return nibbles_byte(OperationClass.SET_IMMEDIATE, dest, value)

        source = self._register(source_text)
        return nibbles_byte(OperationClass.SET_REGISTER, dest, source)

    def _encode_address_op(self, token: Token) -> int:
        address = self._address(self._single_arg(token))
        return nibble_address(ADDRESS_OPS[token.mnemonic], address)

    def _encode_load_store(self, token: Token) -> int:
        register = self._register(self._single_arg(token))
        operation = LOAD_STORE_OPS.index(token.mnemonic)
        return nibbles(OperationClass.LOAD_STORE, operation, register, 0)

    def _encode_io(self, token: Token) -> int:
        register = self._register(self._single_arg(token))
        operation = IO_OPS.index(token.mnemonic)
        return nibbles(OperationClass.IO, operation, register, 0)

    def _encode_alu(self, token: Token) -> int:
        first, second = self._two_args(token)
        operation = ALU_OPS.index(token.mnemonic)
        return nibbles(
            OperationClass.ALU, operation, self._register(first), self._register(second)
        )

    def _encode_compare(self, token: Token) -> int:
        first, second = self._two_args(token)
        operation = CMP_OPS.index(token.mnemonic)
        return nibbles(
            OperationClass.COMPARE, operation, self._register(first), self._register(second)
        )
