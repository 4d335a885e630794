"""
Cartridge Header Record Definitions
===================================

This module defines the data structures for the Game Boy cartridge header,
the fixed 80-byte record every ROM image carries at offset $0100.

ROM Layout
----------
    $0000-$00FF:    Interrupt and restart vectors
    $0100-$014F:    Cartridge header (this module)
    $0150-...:      Game/application code

Header Layout
-------------
    Offset  Size    Description
    ------  ----    -----------
    $00     4       Entry point (usually NOP; JP $0150)
    $04     48      Nintendo logo bitmap
    $34     16      Title region (see below)
    $44     2       New licensee code
    $46     1       SGB flag ($03 = SGB functions supported)
    $47     1       Cartridge type
    $48     1       ROM size code (32 KB << N)
    $49     1       RAM size code
    $4A     1       Region ($00 = Japan)
    $4B     1       Old licensee code ($33 = use new licensee code)
    $4C     1       Mask ROM version
    $4D     1       Header checksum
    $4E     2       Global checksum (big-endian)

Title Region
------------
The 16-byte title region has two incompatible layouts:

**DMG/SGB** (LegacyTitle):
    $34-$43:    Title (16 bytes, no terminator guaranteed)

**CGB** (CgbTitle):
    $34-$3E:    Title (11 bytes)
    $3F-$42:    Manufacturer code (4 bytes)
    $43:        CGB flags

Which layout applies is not stored; it is derived from the flag bytes
(see ``gbfix.header.model.header_revision``).

Reference
---------
- Pan Docs, The Cartridge Header: https://gbdev.io/pandocs/The_Cartridge_Header.html
"""

from dataclasses import dataclass
from enum import IntEnum, IntFlag
import struct

from gbfix.errors import HeaderFormatError


# =============================================================================
# Layout Constants
# =============================================================================

HEADER_OFFSET = 0x0100
HEADER_SIZE = 0x50
HEADER_END = HEADER_OFFSET + HEADER_SIZE

# Offsets relative to the start of the header
ENTRY_POINT_OFFSET = 0x00
LOGO_OFFSET = 0x04
TITLE_OFFSET = 0x34
NEW_LICENSEE_OFFSET = 0x44
SGB_FLAG_OFFSET = 0x46
CART_TYPE_OFFSET = 0x47
ROM_SIZE_OFFSET = 0x48
RAM_SIZE_OFFSET = 0x49
REGION_OFFSET = 0x4A
OLD_LICENSEE_OFFSET = 0x4B
ROM_VERSION_OFFSET = 0x4C
HEADER_CHECKSUM_OFFSET = 0x4D
GLOBAL_CHECKSUM_OFFSET = 0x4E

# Title slot sizes
TITLE_REGION_SIZE = 16
CGB_TITLE_SIZE = 11
MANUFACTURER_SIZE = 4

# Old licensee value meaning "look at the new licensee bytes"
NEW_LICENSEE_MARKER = 0x33

# SGB flag value for cartridges that use SGB functions
SGB_SUPPORTED = 0x03

# struct layout of the full record
_HEADER_FORMAT = ">4s48s16s2sBBBBBBBB2s"

NINTENDO_LOGO = bytes([
    0xCE, 0xED, 0x66, 0x66, 0xCC, 0x0D, 0x00, 0x0B,
    0x03, 0x73, 0x00, 0x83, 0x00, 0x0C, 0x00, 0x0D,
    0x00, 0x08, 0x11, 0x1F, 0x88, 0x89, 0x00, 0x0E,
    0xDC, 0xCC, 0x6E, 0xE6, 0xDD, 0xDD, 0xD9, 0x99,
    0xBB, 0xBB, 0x67, 0x63, 0x6E, 0x0E, 0xEC, 0xCC,
    0xDD, 0xDC, 0x99, 0x9F, 0xBB, 0xB9, 0x33, 0x3E,
])


# =============================================================================
# Enumeration Types
# =============================================================================

class HeaderRevision(IntEnum):
    """
    Header format generation.

    Derived from the flag bytes rather than stored. UNKNOWN is used when
    no sane record is available, in which case title and licensee fields
    must not be decoded.
    """
    UNKNOWN = 0
    DMG = 1
    SGB = 2
    CGB = 3

    def get_description(self) -> str:
        """Get a human-readable description of the revision."""
        descriptions = {
            HeaderRevision.UNKNOWN: "Unknown",
            HeaderRevision.DMG: "DMG (original Game Boy)",
            HeaderRevision.SGB: "SGB (Super Game Boy enhanced)",
            HeaderRevision.CGB: "CGB (Game Boy Color)",
        }
        return descriptions[self]


class CgbFlag(IntFlag):
    """
    CGB capability bits in the last byte of the title region.

    Any bit of MASK being set marks the record as CGB format.
    """
    NONE = 0x00
    PGB1 = 0x04            # Legacy compatibility mode
    PGB2 = 0x08            # Legacy compatibility mode
    CGB_ONLY = 0x40        # Runs on CGB only
    FUNCTION = 0x80        # CGB functions supported
    MASK = FUNCTION | PGB1 | PGB2 | CGB_ONLY

    @classmethod
    def describe(cls, value: int) -> str:
        """Describe a raw CGB flags byte."""
        if value & cls.MASK == 0:
            return "none"
        names = []
        if value & cls.FUNCTION:
            names.append("CGB functions")
        if value & cls.CGB_ONLY:
            names.append("CGB only")
        if value & (cls.PGB1 | cls.PGB2):
            names.append("PGB mode")
        return ", ".join(names)


class LicenseeType(IntEnum):
    """Which licensee field carries the publisher code."""
    OLD = 0
    NEW = 1


class Region(IntEnum):
    """Destination codes defined by the header format."""
    JAPAN = 0x00
    INTERNATIONAL = 0x01


class CartridgeType(IntEnum):
    """Memory bank controller and extra hardware fitted to the cartridge."""
    ROM_ONLY = 0x00
    MBC1 = 0x01
    MBC1_RAM = 0x02
    MBC1_BATTERY_RAM = 0x03
    MBC2 = 0x05
    MBC2_BATTERY = 0x06
    ROM_RAM = 0x08
    ROM_BATTERY_RAM = 0x09
    MMM01 = 0x0B
    MMM01_RAM = 0x0C
    MMM01_BATTERY_RAM = 0x0D
    MBC3_BATTERY_TIMER = 0x0F
    MBC3_BATTERY_RAM_TIMER = 0x10
    MBC3 = 0x11
    MBC3_RAM = 0x12
    MBC3_BATTERY_RAM = 0x13
    MBC4 = 0x15
    MBC4_RAM = 0x16
    MBC4_BATTERY_RAM = 0x17
    MBC5 = 0x19
    MBC5_RAM = 0x1A
    MBC5_BATTERY_RAM = 0x1B
    MBC5_RUMBLE = 0x1C
    MBC5_RAM_RUMBLE = 0x1D
    MBC5_BATTERY_RAM_RUMBLE = 0x1E
    MBC6 = 0x20
    MBC7_BATTERY_RAM_RUMBLE_SENSOR = 0x22
    POCKET_CAMERA = 0xFC
    BANDAI_TAMA5 = 0xFD
    HUC3 = 0xFE
    HUC1_BATTERY_RAM = 0xFF

    @classmethod
    def get_name(cls, code: int) -> str:
        """Get a human-readable name for a cartridge type code."""
        special = {
            0x00: "ROM ONLY",
            0xFC: "POCKET CAMERA",
            0xFD: "BANDAI TAMA5",
            0xFE: "HuC3",
            0xFF: "HuC1+RAM+BATTERY",
        }
        if code in special:
            return special[code]
        try:
            member = cls(code)
        except ValueError:
            return f"Unknown (0x{code:02X})"
        return member.name.replace("_", "+")


# RAM size code -> external RAM in KB. Code 1 is listed as unused by
# Pan Docs but some homebrew headers carry it, so it is kept.
RAM_SIZES_KB = {
    0x00: 0,
    0x01: 2,
    0x02: 8,
    0x03: 32,
    0x04: 128,
    0x05: 64,
}


# =============================================================================
# Title Variants
# =============================================================================

@dataclass(frozen=True)
class LegacyTitle:
    """
    DMG/SGB interpretation of the title region.

    Attributes:
        raw: All 16 bytes of the title region
    """
    raw: bytes

    @property
    def text(self) -> str:
        return decode_text(self.raw)


@dataclass(frozen=True)
class CgbTitle:
    """
    CGB interpretation of the title region.

    Attributes:
        raw_title: First 11 bytes, the title proper
        raw_manufacturer: Next 4 bytes, the manufacturer code
        cgb_flags: Final byte, CGB capability bits
    """
    raw_title: bytes
    raw_manufacturer: bytes
    cgb_flags: int

    @property
    def text(self) -> str:
        return decode_text(self.raw_title)

    @property
    def manufacturer(self) -> str:
        return decode_text(self.raw_manufacturer)


def decode_text(raw: bytes) -> str:
    """
    Decode a fixed-width header text field.

    Text stops at the first NUL; bytes outside printable ASCII are shown
    as '?' since the header charset is plain uppercase ASCII.
    """
    end = raw.find(0)
    if end >= 0:
        raw = raw[:end]
    return "".join(chr(b) if 0x20 <= b < 0x7F else "?" for b in raw)


# =============================================================================
# Header Record
# =============================================================================

@dataclass(frozen=True)
class HeaderRecord:
    """
    The 80-byte cartridge header at ROM offset $0100.

    Records are immutable; updates produce modified copies through
    ``dataclasses.replace``. Single-byte fields are plain ints, multi-byte
    fields keep their raw bytes so nothing is reordered on a round trip.
    """
    entry_point: bytes = b"\x00\xC3\x50\x01"
    logo: bytes = NINTENDO_LOGO
    title_region: bytes = bytes(TITLE_REGION_SIZE)
    new_licensee: bytes = b"\x00\x00"
    sgb_flag: int = 0
    cart_type: int = CartridgeType.ROM_ONLY
    rom_size: int = 0
    ram_size: int = 0
    region: int = Region.JAPAN
    old_licensee: int = 0
    rom_version: int = 0
    header_checksum: int = 0
    global_checksum: bytes = b"\x00\x00"

    def __post_init__(self) -> None:
        sizes = (
            ("entry_point", self.entry_point, 4),
            ("logo", self.logo, 48),
            ("title_region", self.title_region, TITLE_REGION_SIZE),
            ("new_licensee", self.new_licensee, 2),
            ("global_checksum", self.global_checksum, 2),
        )
        for name, value, size in sizes:
            if len(value) != size:
                raise HeaderFormatError(
                    f"{name} must be {size} bytes, got {len(value)}"
                )

        byte_fields = (
            "sgb_flag", "cart_type", "rom_size", "ram_size", "region",
            "old_licensee", "rom_version", "header_checksum",
        )
        for name in byte_fields:
            value = getattr(self, name)
            if not 0 <= value <= 0xFF:
                raise HeaderFormatError(f"{name} must fit in one byte, got {value}")

    def to_bytes(self) -> bytes:
        """Serialize the header to exactly 80 bytes."""
        return struct.pack(
            _HEADER_FORMAT,
            bytes(self.entry_point),
            bytes(self.logo),
            bytes(self.title_region),
            bytes(self.new_licensee),
            self.sgb_flag,
            self.cart_type,
            self.rom_size,
            self.ram_size,
            self.region,
            self.old_licensee,
            self.rom_version,
            self.header_checksum,
            bytes(self.global_checksum),
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> "HeaderRecord":
        """
        Deserialize a header from exactly 80 bytes.

        Raises:
            HeaderFormatError: If data is not exactly HEADER_SIZE bytes
        """
        if len(data) != HEADER_SIZE:
            raise HeaderFormatError(
                f"Header must be {HEADER_SIZE} bytes, got {len(data)}"
            )

        (
            entry_point,
            logo,
            title_region,
            new_licensee,
            sgb_flag,
            cart_type,
            rom_size,
            ram_size,
            region,
            old_licensee,
            rom_version,
            header_checksum,
            global_checksum,
        ) = struct.unpack(_HEADER_FORMAT, bytes(data))

        return cls(
            entry_point=entry_point,
            logo=logo,
            title_region=title_region,
            new_licensee=new_licensee,
            sgb_flag=sgb_flag,
            cart_type=cart_type,
            rom_size=rom_size,
            ram_size=ram_size,
            region=region,
            old_licensee=old_licensee,
            rom_version=rom_version,
            header_checksum=header_checksum,
            global_checksum=global_checksum,
        )

    @property
    def cgb_flag_byte(self) -> int:
        """Last byte of the title region, the CGB flags in CGB form."""
        return self.title_region[-1]
