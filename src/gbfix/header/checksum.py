"""
Cartridge Header Checksums
==========================

This module provides checksum functions for the Game Boy cartridge header.

Header Checksum
---------------
The header checksum (offset $4D of the header, ROM $014D) is calculated as:
- Span: header offsets $34 up to but not including $4C (24 bytes, from the
  title to the old licensee code)
- Algorithm: ``x = x - byte - 1`` for each byte, keep the low 8 bits
- Purpose: the boot ROM refuses to start a cartridge whose header
  checksum is wrong

The entry point, logo and the two checksum fields themselves are never
part of the sum.

Global Checksum
---------------
The global checksum (offset $4E-$4F) is stored big-endian. Hardware never
verifies it, so it is decoded for display only and is never reported as
an error.

Reference
---------
- Pan Docs, Header checksum: https://gbdev.io/pandocs/The_Cartridge_Header.html
"""

from dataclasses import dataclass
from typing import Union

from gbfix.header.records import (
    HeaderRecord,
    TITLE_OFFSET,
    ROM_VERSION_OFFSET,
    GLOBAL_CHECKSUM_OFFSET,
)

# Checksummed span, relative to the header start
CHECKSUM_START = TITLE_OFFSET
CHECKSUM_END = ROM_VERSION_OFFSET


@dataclass(frozen=True)
class ChecksumResult:
    """
    Result of validating a header checksum.

    Attributes:
        matches: True if the stored checksum equals the calculated one
        expected: The checksum calculated from the header bytes
        stored: The checksum byte stored in the header
    """
    matches: bool
    expected: int
    stored: int

    @property
    def message(self) -> str:
        if self.matches:
            return f"Header checksum valid (0x{self.stored:02X})"
        return (
            f"Header checksum mismatch: stored 0x{self.stored:02X}, "
            f"calculated 0x{self.expected:02X}"
        )


def _header_bytes(header: Union[HeaderRecord, bytes]) -> bytes:
    if isinstance(header, HeaderRecord):
        return header.to_bytes()
    return bytes(header)


def calculate_header_checksum(header: Union[HeaderRecord, bytes]) -> int:
    """
    Calculate the one-byte header checksum.

    Args:
        header: A HeaderRecord, or raw header bytes (at least $4C long)

    Returns:
        8-bit checksum value (0x00 - 0xFF)

    Raises:
        ValueError: If raw header bytes are too short to cover the span

    Example:
        >>> record = HeaderRecord(title_region=b"TETRIS".ljust(16, b"\\0"))
        >>> f"0x{calculate_header_checksum(record):02X}"
    """
    data = _header_bytes(header)
    if len(data) < CHECKSUM_END:
        raise ValueError(
            f"Header too short: need at least {CHECKSUM_END} bytes, got {len(data)}"
        )

    checksum = 0
    for byte in data[CHECKSUM_START:CHECKSUM_END]:
        checksum = checksum - byte - 1
    return checksum & 0xFF


def validate_header_checksum(record: HeaderRecord) -> ChecksumResult:
    """
    Compare the stored header checksum with the calculated one.

    Example:
        >>> result = validate_header_checksum(record)
        >>> if not result.matches:
        ...     print(result.message)
    """
    expected = calculate_header_checksum(record)
    return ChecksumResult(
        matches=record.header_checksum == expected,
        expected=expected,
        stored=record.header_checksum,
    )


def correct_global_checksum(header: Union[HeaderRecord, bytes]) -> int:
    """
    Read the stored global checksum as a big-endian 16-bit value.

    The result does not depend on host byte order.

    Args:
        header: A HeaderRecord, or raw header bytes (80 bytes), or just the
            two stored checksum bytes

    Example:
        >>> correct_global_checksum(bytes([0x12, 0x34]))
        4660
    """
    if isinstance(header, HeaderRecord):
        raw = header.global_checksum
    else:
        raw = bytes(header)
        if len(raw) != 2:
            raw = raw[GLOBAL_CHECKSUM_OFFSET:GLOBAL_CHECKSUM_OFFSET + 2]
    if len(raw) != 2:
        raise ValueError(f"Global checksum needs 2 bytes, got {len(raw)}")
    return int.from_bytes(raw, "big")
