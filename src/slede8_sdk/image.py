"""
SLEDE8 Program Image Format
===========================

A program image (``.s8`` file) is the magic header followed by the
program body::

    offset 0   ".SLEDE8"   7 bytes, ASCII magic
    offset 7   body        words (little-endian) and .DATA bytes

There is no version field, length field or checksum. The body is loaded at
address 0.
"""

import logging

from slede8_sdk.errors import ImageFormatError
from slede8_sdk.isa import MAGIC

logger = logging.getLogger(__name__)


def is_image(data: bytes) -> bool:
    """Return True if data starts with the SLEDE8 magic."""
    return data[:len(MAGIC)] == MAGIC


def build_image(body: bytes) -> bytes:
    """Prepend the magic header to a program body."""
    return MAGIC + bytes(body)


def parse_image(data: bytes) -> bytes:
    """
    Validate a program image and return its body.

    Args:
        data: Complete image including the magic header

    Returns:
        The program body (everything after the magic)

    Raises:
        ImageFormatError: If the magic header is missing
    """
    if len(data) < len(MAGIC):
        logger.debug(f"Image validation failed: too short ({len(data)} bytes)")
        raise ImageFormatError(
            f"not a SLEDE8 image: {len(data)} bytes is shorter than the header"
        )

    if not is_image(data):
        logger.debug(f"Image validation failed: invalid magic {data[:len(MAGIC)]!r}")
        raise ImageFormatError(
            f"not a SLEDE8 image: expected magic {MAGIC!r}, got {bytes(data[:len(MAGIC)])!r}"
        )

    body = bytes(data[len(MAGIC):])
    logger.debug(f"Image validation passed: {len(body)} bytes of program")
    return body
