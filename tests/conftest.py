"""
GBFix Test Configuration
========================

Shared fixtures for building header records and synthetic ROM files.

The DMG reference record is a hand-built "TETRIS"-style header whose
stored checksum was worked out by hand rather than by the code under
test:

    title bytes  T E T R I S  = 0x54+0x45+0x54+0x52+0x49+0x53 = 475
    ROM size code             = 1
    old licensee              = 1
    24 bytes in the span      -> 24 extra decrements
    -(475 + 1 + 1 + 24) & 0xFF = -501 & 0xFF = 0x0B
"""

from dataclasses import replace
from pathlib import Path
from typing import Callable

import pytest

from gbfix.header import HeaderRecord, calculate_header_checksum
from gbfix.header.records import HEADER_END, HEADER_OFFSET


REFERENCE_CHECKSUM = 0x0B


@pytest.fixture
def dmg_record() -> HeaderRecord:
    """Known-good DMG header with a hand-computed checksum."""
    return HeaderRecord(
        title_region=b"TETRIS".ljust(16, b"\x00"),
        rom_size=0x01,
        old_licensee=0x01,
        header_checksum=REFERENCE_CHECKSUM,
        global_checksum=b"\x12\x34",
    )


@pytest.fixture
def cgb_record() -> HeaderRecord:
    """CGB header with manufacturer code, new licensee and valid checksum."""
    record = HeaderRecord(
        title_region=b"POCKETDEMO\x00" + b"APDE" + b"\x80",
        new_licensee=b"\x30\x30",
        sgb_flag=0x03,
        cart_type=0x1B,
        rom_size=0x05,
        ram_size=0x03,
        region=0x01,
        old_licensee=0x33,
        rom_version=0x02,
        global_checksum=b"\xBE\xEF",
    )
    return replace(record, header_checksum=calculate_header_checksum(record))


@pytest.fixture
def make_rom(tmp_path: Path) -> Callable[..., Path]:
    """
    Factory fixture: write a ROM file holding the given header.

    Bytes outside the header follow a fixed pattern so tests can check
    they survive a save untouched.
    """
    def _make(record: HeaderRecord, size: int = 0x8000, name: str = "game.gb") -> Path:
        data = bytearray((i * 7 + 3) & 0xFF for i in range(size))
        if size >= HEADER_END:
            data[HEADER_OFFSET:HEADER_END] = record.to_bytes()
        path = tmp_path / name
        path.write_bytes(bytes(data))
        return path

    return _make


@pytest.fixture
def rom_file(make_rom, dmg_record) -> Path:
    """A 32 KB ROM file carrying the DMG reference header."""
    return make_rom(dmg_record)
