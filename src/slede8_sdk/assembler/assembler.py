"""
SLEDE8 Assembler - Main Interface
=================================

This module provides the Assembler class, the primary interface for
assembling SLEDE8 source code. It coordinates the preprocessor (pass 1),
the tokenizer and the code generator (pass 2) to produce a program image
and its debug map.

Example Usage
-------------
>>> from slede8_sdk.assembler import Assembler
>>>
>>> asm = Assembler()
>>> result = asm.assemble_string('''
... start:
...     SETT r0, 0x41
...     SKRIV r0
...     HOPP start
... ''')
>>> result.image[:7]
b'.SLEDE8'
>>> len(result.body)
6

Command-Line Usage
------------------
    $ s8asm hello.slede -o hello.s8 -l hello.lst
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import logging

from slede8_sdk.assembler.codegen import CodeGenerator
from slede8_sdk.assembler.lexer import LineKind, classify, tokenize
from slede8_sdk.assembler.preprocessor import (
    InstructionRecord,
    LabelTable,
    SourceMap,
    preprocess,
)
from slede8_sdk.config import AssemblerConfig
from slede8_sdk.errors import AssemblerError, SourceLocation
from slede8_sdk.image import build_image
from slede8_sdk.isa import MAGIC

logger = logging.getLogger(__name__)


# =============================================================================
# Assembly Result
# =============================================================================

@dataclass(frozen=True)
class DebugInfo:
    """
    One debug map entry: where an emitted line lives in memory.

    Attributes:
        address: Address of the first byte emitted by the line
        info: The source record (line number, address, raw text)
        size: Number of bytes the line emitted
    """
    address: int
    info: InstructionRecord
    size: int = 2

    @property
    def line_number(self) -> int:
        return self.info.line_number

    @property
    def raw(self) -> str:
        return self.info.raw


@dataclass
class AssemblyResult:
    """
    Output of one assembly run.

    Attributes:
        image: Magic header followed by the program body
        debug_map: One entry per emitted instruction or data line
        labels: The label table used for encoding
    """
    image: bytes
    debug_map: list[DebugInfo] = field(default_factory=list)
    labels: LabelTable = field(default_factory=LabelTable)

    @property
    def body(self) -> bytes:
        """The program without the magic header."""
        return self.image[len(MAGIC):]

    def line_for_address(self, address: int) -> Optional[DebugInfo]:
        """
        Find the debug entry covering a program-counter value.

        Returns:
            The entry whose byte range contains address, or None
        """
        for entry in self.debug_map:
            if entry.address <= address < entry.address + max(entry.size, 1):
                return entry
        return None

    def listing(self) -> str:
        """
        Render an assembly listing.

        One line per record: address, emitted bytes, line number, source.
        Long .DATA lines show their first four bytes followed by ``..``.
        """
        lines = []
        offset = len(MAGIC)
        for entry in self.debug_map:
            data = self.image[offset:offset + entry.size]
            offset += entry.size

            hex_bytes = " ".join(f"{b:02X}" for b in data[:4])
            if len(data) > 4:
                hex_bytes += " .."
            lines.append(
                f"{entry.address:03X}  {hex_bytes:<14} {entry.line_number:5d}  {entry.raw}"
            )
        return "\n".join(lines) + ("\n" if lines else "")


# =============================================================================
# Assembler
# =============================================================================

class Assembler:
    """
    Main SLEDE8 assembler class.

    Assembly is all-or-nothing: the first malformed line raises an
    AssemblerError carrying its location, and no image is produced.

    Attributes:
        config: Assembly options
    """

    def __init__(self, config: Optional[AssemblerConfig] = None, **options):
        """
        Initialize the assembler.

        Args:
            config: Assembly options (default: AssemblerConfig())
            **options: Individual AssemblerConfig fields overriding config,
                       e.g. ``Assembler(strict_labels=False)``

        Raises:
            TypeError: On an unknown option
            ValueError: If the text encoding is not a single-byte codec
        """
        base = config or AssemblerConfig()
        self.config = AssemblerConfig(
            strict_labels=options.pop("strict_labels", base.strict_labels),
            legacy_data_sizing=options.pop("legacy_data_sizing", base.legacy_data_sizing),
            text_encoding=options.pop("text_encoding", base.text_encoding),
        )
        if options:
            raise TypeError(f"unknown assembler options: {', '.join(sorted(options))}")

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def preprocess(self, source: str) -> SourceMap:
        """Run pass 1 only and return the source map."""
        return preprocess(source, self.config)

    def assemble_string(self, source: str, filename: str = "<input>") -> AssemblyResult:
        """
        Assemble source code from a string.

        Args:
            source: SLEDE8 source code
            filename: Name used in error messages

        Returns:
            AssemblyResult with image, debug map and label table

        Raises:
            AssemblerError: On the first malformed line
        """
        source_map = self.preprocess(source)
        codegen = CodeGenerator(source_map.labels, self.config)

        body = bytearray()
        debug_map = []

        for record in source_map.instructions:
            code = self._encode_record(codegen, record, filename)

            if record.address != len(body):
                logger.debug(
                    f"Line {record.line_number}: recorded address {record.address:#05x} "
                    f"differs from emitted offset {len(body):#05x}"
                )

            body.extend(code)
            debug_map.append(DebugInfo(record.address, record, len(code)))

        logger.debug(
            f"Assembled {filename}: {len(debug_map)} instructions, {len(body)} bytes"
        )

        return AssemblyResult(
            image=build_image(bytes(body)),
            debug_map=debug_map,
            labels=source_map.labels,
        )

    def assemble_file(
        self,
        filepath: str | Path,
        output_path: str | Path | None = None,
    ) -> AssemblyResult:
        """
        Assemble a source file.

        Args:
            filepath: Path to the .slede source file (UTF-8)
            output_path: If given, the image is written there

        Returns:
            AssemblyResult

        Raises:
            AssemblerError: If assembly fails
            FileNotFoundError: If the source file does not exist
            UnicodeDecodeError: If the source file is not valid UTF-8
        """
        filepath = Path(filepath)
        source = filepath.read_text(encoding="utf-8")
        logger.debug(f"Read {len(source)} characters from {filepath}")

        result = self.assemble_string(source, str(filepath))

        if output_path is not None:
            write_image(result, output_path)

        return result

    def assemble_statement(self, statement: str) -> bytes:
        """
        Assemble a single line to its bytes.

        Used to patch memory from an interactive stepper. No labels are
        defined, so address operands must be literals (or the strict
        label check is relaxed by the config).

        Args:
            statement: One instruction or .DATA line

        Returns:
            The encoded bytes (empty for blank, comment or label lines)
        """
        line = statement.strip()
        if classify(line) in (LineKind.WHITESPACE, LineKind.COMMENT, LineKind.LABEL):
            return b""

        codegen = CodeGenerator(LabelTable(), self.config)
        record = InstructionRecord(1, 0, line)
        return self._encode_record(codegen, record, "<statement>")

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _encode_record(codegen: CodeGenerator, record: InstructionRecord, filename: str) -> bytes:
        try:
            return codegen.encode(tokenize(record.raw))
        except AssemblerError as e:
            e.with_location(SourceLocation(filename, record.line_number), record.raw)
            raise


# =============================================================================
# Convenience Functions
# =============================================================================

def write_image(result: AssemblyResult, filepath: str | Path) -> None:
    """Write an assembled image to disk."""
    Path(filepath).write_bytes(result.image)
    logger.debug(f"Wrote {len(result.image)} bytes to {filepath}")


def assemble(source: str, filename: str = "<input>", **options) -> AssemblyResult:
    """
    Convenience function to assemble source code.

    Args:
        source: SLEDE8 source code
        filename: Name used in error messages
        **options: AssemblerConfig fields

    Returns:
        AssemblyResult

    Raises:
        AssemblerError: If assembly fails
    """
    return Assembler(**options).assemble_string(source, filename)


def assemble_file(filepath: str | Path, output_path: str | Path | None = None,
                  **options) -> AssemblyResult:
    """
    Convenience function to assemble a file.

    Raises:
        AssemblerError: If assembly fails
    """
    return Assembler(**options).assemble_file(filepath, output_path)
