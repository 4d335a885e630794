"""
Header Field Decoding
=====================

Pure functions that turn a HeaderRecord into semantic values: header
revision, title, licensee, ROM/RAM size, region and checksums. Nothing in
this module touches the file system.

Revision Rule
-------------
    1. Any bit of $CC set in the last title byte   -> CGB
    2. Otherwise SGB flag == $03                   -> SGB
    3. Otherwise                                   -> DMG

No record (or a buffer that is not a full header) gives UNKNOWN, and the
title and licensee are then left undecoded.

Field Errors
------------
``licensee_code`` and ``rom_size_kb`` raise HeaderValidationError for
values the format does not allow. ``decode_header`` catches those per
field and records them in ``HeaderReport.errors`` so one bad field never
hides the others.
"""

from dataclasses import dataclass, field
from typing import NamedTuple, Optional, Union
import logging

from gbfix.errors import HeaderFormatError, HeaderValidationError
from gbfix.header.checksum import (
    ChecksumResult,
    correct_global_checksum,
    validate_header_checksum,
)
from gbfix.header.records import (
    CGB_TITLE_SIZE,
    MANUFACTURER_SIZE,
    NEW_LICENSEE_MARKER,
    NINTENDO_LOGO,
    RAM_SIZES_KB,
    SGB_SUPPORTED,
    CartridgeType,
    CgbFlag,
    CgbTitle,
    HeaderRecord,
    HeaderRevision,
    LegacyTitle,
    LicenseeType,
    Region,
)

# Logger for this module
logger = logging.getLogger(__name__)

RecordLike = Union[HeaderRecord, bytes, bytearray, None]


class LicenseeCode(NamedTuple):
    """Publisher code and which header field it came from."""
    value: int
    kind: LicenseeType


def _as_record(record: RecordLike) -> Optional[HeaderRecord]:
    if record is None or isinstance(record, HeaderRecord):
        return record
    try:
        return HeaderRecord.from_bytes(record)
    except HeaderFormatError as e:
        logger.debug(f"Not a sane header: {e}")
        return None


# =============================================================================
# Revision and Title
# =============================================================================

def header_revision(record: RecordLike) -> HeaderRevision:
    """
    Infer which header format a record uses.

    Args:
        record: A HeaderRecord, raw header bytes, or None

    Returns:
        HeaderRevision.CGB, SGB or DMG; UNKNOWN when no sane record is given
    """
    record = _as_record(record)
    if record is None:
        return HeaderRevision.UNKNOWN
    if record.cgb_flag_byte & CgbFlag.MASK:
        return HeaderRevision.CGB
    if record.sgb_flag == SGB_SUPPORTED:
        return HeaderRevision.SGB
    return HeaderRevision.DMG


def title_of(record: HeaderRecord) -> Union[LegacyTitle, CgbTitle]:
    """
    Interpret the title region according to the record's revision.

    Raises:
        HeaderValidationError: If the revision cannot be determined
    """
    revision = header_revision(record)
    if revision == HeaderRevision.UNKNOWN:
        raise HeaderValidationError("unknown header revision", field="title")

    region = record.title_region
    if revision == HeaderRevision.CGB:
        return CgbTitle(
            raw_title=region[:CGB_TITLE_SIZE],
            raw_manufacturer=region[CGB_TITLE_SIZE:CGB_TITLE_SIZE + MANUFACTURER_SIZE],
            cgb_flags=region[-1],
        )
    return LegacyTitle(raw=region)


# =============================================================================
# Licensee, Sizes, Region
# =============================================================================

def licensee_code(record: HeaderRecord) -> LicenseeCode:
    """
    Resolve the publisher code.

    An old licensee byte of $33 redirects to the two new licensee bytes,
    which must agree.

    Raises:
        HeaderValidationError: If the two new licensee bytes differ
    """
    if record.old_licensee != NEW_LICENSEE_MARKER:
        return LicenseeCode(record.old_licensee, LicenseeType.OLD)

    first, second = record.new_licensee[0], record.new_licensee[1]
    if first != second:
        logger.debug(f"New licensee bytes disagree: 0x{first:02X} != 0x{second:02X}")
        raise HeaderValidationError("licensee mismatch", field="licensee")
    return LicenseeCode(first, LicenseeType.NEW)


def rom_size_kb(record: HeaderRecord) -> int:
    """
    ROM size in KB, ``32 << code``.

    Raises:
        HeaderValidationError: If the size code is zero
    """
    if record.rom_size == 0:
        raise HeaderValidationError("zero size code", field="rom_size")
    return 32 << record.rom_size


def ram_size_kb(record: HeaderRecord) -> Optional[int]:
    """External RAM size in KB, or None for codes the format does not define."""
    return RAM_SIZES_KB.get(record.ram_size)


def region_name(record: Optional[HeaderRecord]) -> str:
    """'Japan' for code 0, 'International' for any other code."""
    if record is None:
        return "Unknown"
    if record.region == Region.JAPAN:
        return "Japan"
    return "International"


def cart_type_name(record: HeaderRecord) -> str:
    return CartridgeType.get_name(record.cart_type)


def global_checksum(record: HeaderRecord) -> int:
    """Stored global checksum, read big-endian."""
    return correct_global_checksum(record)


def has_nintendo_logo(record: HeaderRecord) -> bool:
    return record.logo == NINTENDO_LOGO


# =============================================================================
# Full Decode
# =============================================================================

@dataclass
class HeaderReport:
    """
    Decoded view of a header, ready for display.

    Fields that failed to decode are None and have an entry in ``errors``
    keyed by field name. Title and licensee are None when the revision is
    UNKNOWN.
    """
    revision: HeaderRevision
    title: Optional[str] = None
    manufacturer: Optional[str] = None
    cgb_flags: Optional[int] = None
    licensee: Optional[LicenseeCode] = None
    sgb_flag: int = 0
    cart_type: int = 0
    cart_type_name: str = ""
    rom_size_code: int = 0
    rom_size_kb: Optional[int] = None
    ram_size_code: int = 0
    ram_size_kb: Optional[int] = None
    region_code: int = 0
    region: str = "Unknown"
    rom_version: int = 0
    checksum: Optional[ChecksumResult] = None
    global_checksum: int = 0
    nintendo_logo: bool = False
    errors: dict[str, HeaderValidationError] = field(default_factory=dict)

    @property
    def is_cgb(self) -> bool:
        return self.revision == HeaderRevision.CGB


def decode_header(record: HeaderRecord) -> HeaderReport:
    """
    Decode every field of a header for reporting.

    Field-level validation errors are collected into ``report.errors``
    instead of being raised.

    Example:
        >>> report = decode_header(load_header("game.gb"))
        >>> print(report.title, report.region)
    """
    revision = header_revision(record)
    report = HeaderReport(revision=revision)

    if revision != HeaderRevision.UNKNOWN:
        title = title_of(record)
        report.title = title.text
        if isinstance(title, CgbTitle):
            report.manufacturer = title.manufacturer
            report.cgb_flags = title.cgb_flags

        try:
            report.licensee = licensee_code(record)
        except HeaderValidationError as e:
            report.errors["licensee"] = e

    report.sgb_flag = record.sgb_flag
    report.cart_type = record.cart_type
    report.cart_type_name = cart_type_name(record)

    report.rom_size_code = record.rom_size
    try:
        report.rom_size_kb = rom_size_kb(record)
    except HeaderValidationError as e:
        report.errors["rom_size"] = e

    report.ram_size_code = record.ram_size
    report.ram_size_kb = ram_size_kb(record)
    report.region_code = record.region
    report.region = region_name(record)
    report.rom_version = record.rom_version
    report.checksum = validate_header_checksum(record)
    report.global_checksum = global_checksum(record)
    report.nintendo_logo = has_nintendo_logo(record)

    logger.debug(
        f"Decoded {revision.name} header '{report.title}' "
        f"({len(report.errors)} field errors)"
    )
    return report
