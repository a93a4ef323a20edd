"""
SLEDE8 Assembler - Configuration
================================

Assembly options. Configuration can come from:
- Default values (defined here)
- Keyword arguments / CLI flags
- Environment variables

Options
-------
strict_labels (default: True)
    An address operand naming an unbound label raises UndefinedLabelError.
    When disabled, the reference assembler's behaviour is kept: the
    UNDEFINED sentinel is encoded (truncated to 0xFFF) and a warning is
    logged.

legacy_data_sizing (default: False)
    The reference assembler advances the address counter by the number
    of ``.DATA`` arguments rather than the number of bytes they emit, so
    any string longer than one character shifts every following label.
    By default the exact byte count is used. Enable this to reproduce
    addresses of images built by the reference assembler.

text_encoding (default: "latin-1")
    Single-byte encoding for ``.DATA`` strings. Latin-1 covers the
    Norwegian letters æ, ø and å. Codecs that may spend more than one
    byte on a character (utf-8, utf-16, ...) are rejected.
"""

from dataclasses import dataclass
import os


# Strings accepted as "true" in environment variables
_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"0", "false", "no", "off"})

# Characters used to tell single-byte codecs from multi-byte ones
_SAMPLE_CHARACTERS = ("æ", "€")


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    value = value.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    return default  # Ignore invalid values


def is_single_byte_encoding(name: str) -> bool:
    """
    Return True if name is a text codec that encodes one byte per character.

    "A" must encode to exactly one byte; other characters must either
    encode to one byte or be unrepresentable.
    """
    try:
        if len("A".encode(name)) != 1:
            return False
    except (LookupError, UnicodeError):
        return False

    for char in _SAMPLE_CHARACTERS:
        try:
            if len(char.encode(name)) != 1:
                return False
        except UnicodeEncodeError:
            continue
    return True


@dataclass
class AssemblerConfig:
    """
    Configuration for a SLEDE8 assembly run.

    Attributes:
        strict_labels: Raise on unresolved address labels (default: True)
        legacy_data_sizing: Size .DATA lines by argument count (default: False)
        text_encoding: Encoding for .DATA strings (default: "latin-1")

    Raises:
        ValueError: If text_encoding is not a single-byte text codec
    """

    strict_labels: bool = True
    legacy_data_sizing: bool = False
    text_encoding: str = "latin-1"

    def __post_init__(self) -> None:
        if not is_single_byte_encoding(self.text_encoding):
            raise ValueError(
                f"text_encoding must be a single-byte codec, got {self.text_encoding!r}"
            )

    @classmethod
    def from_env(cls) -> "AssemblerConfig":
        """
        Create AssemblerConfig from environment variables.

        Environment variables (all optional):
            SLEDE8_STRICT_LABELS: "1"/"true"/"yes"/"on" or "0"/"false"/"no"/"off"
            SLEDE8_LEGACY_DATA_SIZING: same as above
            SLEDE8_TEXT_ENCODING: Python codec name; unknown and multi-byte
                codecs are ignored

        Returns:
            AssemblerConfig with values from environment variables
        """
        config = cls()

        config.strict_labels = _env_flag("SLEDE8_STRICT_LABELS", config.strict_labels)
        config.legacy_data_sizing = _env_flag(
            "SLEDE8_LEGACY_DATA_SIZING", config.legacy_data_sizing
        )

        encoding = os.environ.get("SLEDE8_TEXT_ENCODING")
        if encoding and is_single_byte_encoding(encoding):
            config.text_encoding = encoding

        return config
