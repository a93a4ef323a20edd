"""
SLEDE8 Preprocessor (Pass 1)
============================

The first assembly pass. It walks the whole source once, binds every label
to the address it precedes, and records one InstructionRecord per code or
data line. Because this pass completes before any instruction is encoded,
forward label references always resolve.

Address Accounting
------------------
| Line kind   | Record? | Address advance                         |
|-------------|---------|-----------------------------------------|
| LABEL       | no      | 0 (label bound to current address)      |
| INSTRUCTION | yes     | 2 (one word)                            |
| DATA        | yes     | encoded byte count (or argument count   |
|             |         | with ``legacy_data_sizing``)            |
| COMMENT     | no      | 0                                       |
| WHITESPACE  | no      | 0                                       |

The preprocessor never raises: malformed arguments are reported by the
code generator in pass 2.
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional
import logging

from slede8_sdk.assembler.lexer import LineKind, classify, label_name, tokenize
from slede8_sdk.config import AssemblerConfig
from slede8_sdk.isa import UNDEFINED, WORD_SIZE, parse_string_literal

logger = logging.getLogger(__name__)


# =============================================================================
# Label Table
# =============================================================================

@dataclass(frozen=True)
class LabelDefinition:
    """A label name bound to an address."""
    name: str
    address: int


class LabelTable:
    """
    Ordered label name to address bindings.

    Binding never fails. A name bound twice keeps both entries and
    ``resolve`` returns the first one, so the first definition wins.
    """

    def __init__(self) -> None:
        self._labels: list[LabelDefinition] = []

    def bind(self, name: str, address: int) -> None:
        """Append a binding for name."""
        if name in self:
            logger.warning(
                f"Label '{name}' redefined at {address:#05x}; "
                f"keeping first definition at {self.resolve(name):#05x}"
            )
        self._labels.append(LabelDefinition(name, address))

    def resolve(self, name: str) -> int:
        """
        Look up a label.

        Returns:
            The address of the first binding of name, or UNDEFINED (0xFFFF)
        """
        for label in self._labels:
            if label.name == name:
                return label.address
        return UNDEFINED

    def names(self) -> list[str]:
        """Return the distinct label names in definition order."""
        return list(dict.fromkeys(label.name for label in self._labels))

    def to_dict(self) -> dict[str, int]:
        """Return a name -> address mapping using first-bound-wins semantics."""
        result: dict[str, int] = {}
        for label in self._labels:
            result.setdefault(label.name, label.address)
        return result

    def __contains__(self, name: object) -> bool:
        return any(label.name == name for label in self._labels)

    def __iter__(self) -> Iterator[LabelDefinition]:
        return iter(self._labels)

    def __len__(self) -> int:
        return len(self._labels)


# =============================================================================
# Source Map
# =============================================================================

@dataclass(frozen=True)
class InstructionRecord:
    """
    One code or data line of the source.

    Attributes:
        line_number: Line number in the source (1-based)
        address: Address of the first byte this line emits
        raw: The trimmed source text of the line
    """
    line_number: int
    address: int
    raw: str


@dataclass
class SourceMap:
    """
    Result of the preprocessing pass.

    Attributes:
        instructions: Code and data records in source order
        labels: Completed label table
    """
    instructions: list[InstructionRecord] = field(default_factory=list)
    labels: LabelTable = field(default_factory=LabelTable)


# =============================================================================
# Data Sizing
# =============================================================================

def data_length(args: list[str], encoding: str = "latin-1") -> int:
    """
    Number of bytes a ``.DATA`` argument list will emit.

    Malformed arguments count as one byte; the code generator rejects
    them later.
    """
    total = 0
    for arg in args:
        text = parse_string_literal(arg)
        if text is None:
            total += 1
        else:
            total += len(text.encode(encoding, errors="replace"))
    return total


# =============================================================================
# Preprocessor
# =============================================================================

def preprocess(source: str, config: Optional[AssemblerConfig] = None) -> SourceMap:
    """
    Run the first pass over a complete source text.

    Args:
        source: Newline-separated SLEDE8 source
        config: Assembly options (only ``legacy_data_sizing`` and
                ``text_encoding`` are used here)

    Returns:
        SourceMap with instruction records and the label table
    """
    config = config or AssemblerConfig()
    source_map = SourceMap()
    address = 0

    for line_number, current in enumerate(source.split("\n"), start=1):
        line = current.strip()
        kind = classify(line)

        if kind is LineKind.LABEL:
            name = label_name(line)
            source_map.labels.bind(name, address)
            logger.debug(f"Label '{name}' = {address:#05x} (line {line_number})")

        elif kind is LineKind.DATA:
            source_map.instructions.append(InstructionRecord(line_number, address, line))
            args = tokenize(line).args
            if config.legacy_data_sizing:
                address += len(args)
            else:
                address += data_length(args, config.text_encoding)

        elif kind is LineKind.INSTRUCTION:
            source_map.instructions.append(InstructionRecord(line_number, address, line))
            address += WORD_SIZE

    logger.debug(
        f"Preprocessed {len(source_map.instructions)} records, "
        f"{len(source_map.labels)} labels, {address} bytes"
    )
    return source_map
