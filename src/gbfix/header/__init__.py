"""
Game Boy Cartridge Header Handling
==================================

This module provides support for inspecting and patching the 80-byte
cartridge header found at offset $0100 of every Game Boy ROM image.

This module provides:
- **HeaderRecord**: The raw header as an immutable value
- **Decoding**: Revision, title, licensee, sizes and region
- **Checksum utilities**: Calculate and validate the header checksum
- **Codec**: Load and save the header in place inside a ROM file
- **Updates**: Apply partial updates with truncation and checksum fix-up
- **Pipeline**: One complete load/update/save/report pass

Quick Start
-----------
Inspecting a ROM:

    >>> from gbfix.header import load_header, decode_header
    >>> report = decode_header(load_header("game.gb"))
    >>> print(report.title, report.revision.name)

Changing the title and fixing the checksum:

    >>> from gbfix.header import UpdateRequest, fix_rom
    >>> result = fix_rom("game.gb", UpdateRequest.build(title="MYGAME"))
    >>> result.raise_for_error()

Reference
---------
- Pan Docs: https://gbdev.io/pandocs/The_Cartridge_Header.html
"""

# =============================================================================
# Public API Exports
# =============================================================================

# Record type definitions and enums
from gbfix.header.records import (
    # Constants
    HEADER_OFFSET,
    HEADER_SIZE,
    NINTENDO_LOGO,
    # Enums
    HeaderRevision,
    CgbFlag,
    LicenseeType,
    Region,
    CartridgeType,
    # Data structures
    HeaderRecord,
    LegacyTitle,
    CgbTitle,
)

# Checksum utilities
from gbfix.header.checksum import (
    ChecksumResult,
    calculate_header_checksum,
    validate_header_checksum,
    correct_global_checksum,
)

# Field decoding
from gbfix.header.model import (
    LicenseeCode,
    HeaderReport,
    header_revision,
    title_of,
    licensee_code,
    rom_size_kb,
    ram_size_kb,
    region_name,
    cart_type_name,
    global_checksum,
    has_nintendo_logo,
    decode_header,
)

# File I/O
from gbfix.header.codec import (
    load_header,
    save_header,
)

# Updates
from gbfix.header.update import (
    UpdateField,
    UpdateRequest,
    UpdateResult,
    apply_update,
)

# Pipeline
from gbfix.header.pipeline import (
    RunState,
    RunResult,
    fix_rom,
)

# =============================================================================
# Module-level __all__ for explicit exports
# =============================================================================

__all__ = [
    # Constants
    "HEADER_OFFSET",
    "HEADER_SIZE",
    "NINTENDO_LOGO",
    # Enums
    "HeaderRevision",
    "CgbFlag",
    "LicenseeType",
    "Region",
    "CartridgeType",
    # Data structures
    "HeaderRecord",
    "LegacyTitle",
    "CgbTitle",
    # Checksum utilities
    "ChecksumResult",
    "calculate_header_checksum",
    "validate_header_checksum",
    "correct_global_checksum",
    # Decoding
    "LicenseeCode",
    "HeaderReport",
    "header_revision",
    "title_of",
    "licensee_code",
    "rom_size_kb",
    "ram_size_kb",
    "region_name",
    "cart_type_name",
    "global_checksum",
    "has_nintendo_logo",
    "decode_header",
    # File I/O
    "load_header",
    "save_header",
    # Updates
    "UpdateField",
    "UpdateRequest",
    "UpdateResult",
    "apply_update",
    # Pipeline
    "RunState",
    "RunResult",
    "fix_rom",
]
