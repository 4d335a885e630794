"""
Partial Header Updates
======================

This module merges a caller-supplied partial update into a loaded header.

An UpdateRequest pairs an UpdateField bitmask with the new value for each
flagged field. ``apply_update`` copies the record, overwrites only the
flagged fields and recomputes the header checksum, so a modified record
is never left with a stale checksum.

Truncation Policy
-----------------
Text fields that do not fit their slot are cut, and one TruncationWarning
is returned per cut field:

    Title, DMG/SGB form:    16 bytes
    Title, CGB form:        11 bytes
    Manufacturer code:       4 bytes

Shorter values are padded with NUL bytes to the slot size. The title
capacity follows the revision the record has once any CGB flags update in
the same request has been applied.

A full-width DMG/SGB title also fills the byte read as CGB flags. When that
turns the record into CGB form without a CGB or SGB flags update in the
request, a FieldUsageWarning is returned.

Usage Examples
--------------
    >>> request = UpdateRequest.build(title="POCKETDEMO", region=1)
    >>> result = apply_update(record, request)
    >>> for warning in result.warnings:
    ...     print(f"warning: {warning}")
    >>> save_header("game.gb", result.record)
"""

from dataclasses import dataclass, field, replace
from enum import IntFlag
from typing import Optional, Union
import logging

from gbfix.errors import (
    ChecksumMismatchWarning,
    FieldUsageWarning,
    HeaderValidationError,
    HeaderWarning,
    TruncationWarning,
)
from gbfix.header.checksum import (
    ChecksumResult,
    calculate_header_checksum,
    validate_header_checksum,
)
from gbfix.header.model import header_revision
from gbfix.header.records import (
    CGB_TITLE_SIZE,
    MANUFACTURER_SIZE,
    NEW_LICENSEE_MARKER,
    TITLE_REGION_SIZE,
    HeaderRecord,
    HeaderRevision,
    LicenseeType,
)

# Logger for this module
logger = logging.getLogger(__name__)

TextValue = Union[str, bytes]


class UpdateField(IntFlag):
    """Bitmask of header fields an UpdateRequest changes."""
    NONE = 0x0000
    TITLE = 0x0001
    MANUFACTURER = 0x0002
    CGB_FLAGS = 0x0004
    LICENSEE = 0x0008
    SGB_FLAG = 0x0010
    CART_TYPE = 0x0020
    RAM_SIZE = 0x0040
    REGION = 0x0080
    ROM_VERSION = 0x0100
    MASK = 0x01FF


# UpdateField -> UpdateRequest attribute holding its value
_FIELD_ATTRS = {
    UpdateField.TITLE: "title",
    UpdateField.MANUFACTURER: "manufacturer",
    UpdateField.CGB_FLAGS: "cgb_flags",
    UpdateField.LICENSEE: "licensee",
    UpdateField.SGB_FLAG: "sgb_flag",
    UpdateField.CART_TYPE: "cart_type",
    UpdateField.RAM_SIZE: "ram_size",
    UpdateField.REGION: "region",
    UpdateField.ROM_VERSION: "rom_version",
}

_TEXT_FIELDS = UpdateField.TITLE | UpdateField.MANUFACTURER


@dataclass(frozen=True)
class UpdateRequest:
    """
    Which header fields to change, and their new values.

    Only fields whose bit is set in ``fields`` are applied; the value
    attributes of unflagged fields are ignored. ``fix_checksum`` asks for
    the header checksum to be corrected even when no field is flagged.

    Attributes:
        fields: UpdateField bitmask
        title: New title text
        manufacturer: New 4-character manufacturer code (CGB form)
        cgb_flags: New CGB flags byte
        licensee: New licensee code
        licensee_type: Store the licensee in the old or new field
        sgb_flag: New SGB flag byte
        cart_type: New cartridge type byte
        ram_size: New RAM size code
        region: New region code
        rom_version: New mask ROM version byte
        fix_checksum: Correct the checksum with no field update
    """
    fields: UpdateField = UpdateField.NONE
    title: Optional[TextValue] = None
    manufacturer: Optional[TextValue] = None
    cgb_flags: Optional[int] = None
    licensee: Optional[int] = None
    licensee_type: LicenseeType = LicenseeType.OLD
    sgb_flag: Optional[int] = None
    cart_type: Optional[int] = None
    ram_size: Optional[int] = None
    region: Optional[int] = None
    rom_version: Optional[int] = None
    fix_checksum: bool = False

    def __post_init__(self) -> None:
        if int(self.fields) & ~int(UpdateField.MASK):
            raise HeaderValidationError(f"unknown update flags 0x{int(self.fields):04X}")
        object.__setattr__(self, "fields", UpdateField(int(self.fields)))

        for flag, attr in _FIELD_ATTRS.items():
            if not self.fields & flag:
                continue
            value = getattr(self, attr)
            if value is None:
                raise HeaderValidationError(f"no value given for {attr}", field=attr)
            if flag & _TEXT_FIELDS:
                if not isinstance(value, (str, bytes, bytearray)):
                    raise HeaderValidationError(f"{attr} must be text", field=attr)
                _encode_text(value, attr)
            elif not isinstance(value, int) or not 0 <= value <= 0xFF:
                raise HeaderValidationError(
                    f"{attr} must be a byte value (0-255), got {value!r}", field=attr
                )

        if (
            self.fields & UpdateField.LICENSEE
            and self.licensee_type == LicenseeType.OLD
            and self.licensee == NEW_LICENSEE_MARKER
        ):
            raise HeaderValidationError(
                f"old licensee code 0x{NEW_LICENSEE_MARKER:02X} is reserved for new-style codes",
                field="licensee",
            )

    @classmethod
    def build(cls, **values) -> "UpdateRequest":
        """
        Create a request, flagging every field given a non-None value.

        Example:
            >>> request = UpdateRequest.build(title="TETRIS", rom_version=1)
            >>> bool(request.fields & UpdateField.TITLE)
            True
        """
        fields = UpdateField.NONE
        for flag, attr in _FIELD_ATTRS.items():
            if values.get(attr) is not None:
                fields |= flag
        return cls(fields=fields, **values)

    @property
    def has_updates(self) -> bool:
        return bool(self.fields & UpdateField.MASK)


@dataclass
class UpdateResult:
    """
    Outcome of applying an UpdateRequest.

    Attributes:
        record: The resulting header (the input itself when nothing changed)
        warnings: Non-fatal findings, in the order they were produced
        checksum: Checksum validation of ``record``
        changed: True if ``record`` differs from the input
        dry_run: True if the caller asked for a preview only
    """
    record: HeaderRecord
    warnings: list[HeaderWarning] = field(default_factory=list)
    checksum: Optional[ChecksumResult] = None
    changed: bool = False
    dry_run: bool = False

    @property
    def should_persist(self) -> bool:
        return self.changed and not self.dry_run


def _encode_text(value: TextValue, name: str) -> bytes:
    if isinstance(value, str):
        try:
            return value.encode("ascii")
        except UnicodeEncodeError:
            raise HeaderValidationError(f"{name} must be ASCII text", field=name) from None
    return bytes(value)


def _fit_text(
    value: TextValue,
    capacity: int,
    name: str,
    warnings: list[HeaderWarning],
) -> bytes:
    """Encode, truncate and NUL-pad a text value to exactly capacity bytes."""
    raw = _encode_text(value, name)
    if len(raw) > capacity:
        warning = TruncationWarning(name, capacity, len(raw))
        logger.info(str(warning))
        warnings.append(warning)
        raw = raw[:capacity]
    return raw.ljust(capacity, b"\x00")


def apply_update(
    record: HeaderRecord,
    request: Optional[UpdateRequest] = None,
    dry_run: bool = False,
) -> UpdateResult:
    """
    Apply a partial update to a header record.

    Args:
        record: The loaded header
        request: Fields to change; None or an empty request changes nothing
        dry_run: Mark the result as a preview (nothing in this function
            writes to disk either way; the flag tells the caller whether
            to persist)

    Returns:
        UpdateResult with the new record and any warnings

    Raises:
        HeaderValidationError: If a text value is not ASCII
    """
    warnings: list[HeaderWarning] = []

    if request is None or not request.has_updates:
        checksum = validate_header_checksum(record)
        if checksum.matches:
            return UpdateResult(record, warnings, checksum, False, dry_run)

        if request is not None and request.fix_checksum:
            logger.info(
                f"Correcting header checksum 0x{checksum.stored:02X} -> 0x{checksum.expected:02X}"
            )
            fixed = replace(record, header_checksum=checksum.expected)
            return UpdateResult(fixed, warnings, validate_header_checksum(fixed), True, dry_run)

        warnings.append(ChecksumMismatchWarning(checksum.stored, checksum.expected))
        return UpdateResult(record, warnings, checksum, False, dry_run)

    fields = request.fields
    changes = {}
    title_region = bytearray(record.title_region)

    if fields & UpdateField.CGB_FLAGS:
        title_region[-1] = request.cgb_flags

    revision = header_revision(replace(record, title_region=bytes(title_region)))
    is_cgb = revision == HeaderRevision.CGB

    if fields & UpdateField.TITLE:
        capacity = CGB_TITLE_SIZE if is_cgb else TITLE_REGION_SIZE
        title_region[:capacity] = _fit_text(request.title, capacity, "title", warnings)

    if fields & UpdateField.MANUFACTURER:
        start = CGB_TITLE_SIZE
        title_region[start:start + MANUFACTURER_SIZE] = _fit_text(
            request.manufacturer, MANUFACTURER_SIZE, "manufacturer", warnings
        )

    if fields & (UpdateField.TITLE | UpdateField.MANUFACTURER | UpdateField.CGB_FLAGS):
        changes["title_region"] = bytes(title_region)

    if fields & UpdateField.LICENSEE:
        if request.licensee_type == LicenseeType.NEW:
            changes["old_licensee"] = NEW_LICENSEE_MARKER
            changes["new_licensee"] = bytes([request.licensee, request.licensee])
        else:
            changes["old_licensee"] = request.licensee

    if fields & UpdateField.SGB_FLAG:
        changes["sgb_flag"] = request.sgb_flag
    if fields & UpdateField.CART_TYPE:
        changes["cart_type"] = request.cart_type
    if fields & UpdateField.RAM_SIZE:
        changes["ram_size"] = request.ram_size
    if fields & UpdateField.REGION:
        changes["region"] = request.region
    if fields & UpdateField.ROM_VERSION:
        changes["rom_version"] = request.rom_version

    updated = replace(record, **changes)
    updated = replace(updated, header_checksum=calculate_header_checksum(updated))

    old_revision = header_revision(record)
    new_revision = header_revision(updated)
    if new_revision != old_revision and not fields & (UpdateField.CGB_FLAGS | UpdateField.SGB_FLAG):
        warning = FieldUsageWarning(
            f"title changed header revision from {old_revision.name} to "
            f"{new_revision.name} (last title byte 0x{updated.cgb_flag_byte:02X} "
            f"is read as CGB flags)",
            field="title",
        )
        logger.info(str(warning))
        warnings.append(warning)

    logger.debug(f"Applied update {fields!r}, checksum now 0x{updated.header_checksum:02X}")
    return UpdateResult(
        record=updated,
        warnings=warnings,
        checksum=validate_header_checksum(updated),
        changed=updated != record,
        dry_run=dry_run,
    )
