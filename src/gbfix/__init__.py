"""
GBFix - Game Boy ROM Header Inspector and Fixer
===============================================

This package inspects and patches the cartridge header of Game Boy,
Super Game Boy and Game Boy Color ROM images, and verifies and corrects
the header checksum the boot ROM checks before starting a cartridge.

Main Components
---------------
- **header**: Header record, field decoding, checksums, file I/O and updates
- **cli**: The ``gbfix`` command-line tool
- **config**: Run-time settings from the environment

Quick Start
-----------
Show a ROM's header:
    >>> from gbfix import load_header, decode_header
    >>> report = decode_header(load_header("game.gb"))
    >>> print(f"{report.title}: {report.rom_size_kb} KB, {report.region}")

Patch the region and rewrite the checksum:
    >>> from gbfix import UpdateRequest, fix_rom
    >>> result = fix_rom("game.gb", UpdateRequest.build(region=1))
    >>> result.raise_for_error()

Or use the command-line tool:
    $ gbfix game.gb
    $ gbfix --title MYGAME --region international game.gb
    $ gbfix --fix-checksum --dry-run game.gb

Reference Documentation
-----------------------
- Pan Docs: https://gbdev.io/pandocs/The_Cartridge_Header.html

Version History
---------------
1.0.0 - Header inspection, partial updates and checksum correction
"""

__version__ = "1.0.0"
__author__ = "Lisa Murray & Contributors"

# =============================================================================
# Public API Exports
# =============================================================================

from gbfix.errors import (
    GBFixError,
    HeaderIOError,
    HeaderFormatError,
    HeaderValidationError,
    HeaderWarning,
    ChecksumMismatchWarning,
    TruncationWarning,
    FieldUsageWarning,
)

from gbfix.header import (
    HeaderRecord,
    HeaderRevision,
    LicenseeType,
    LicenseeCode,
    HeaderReport,
    UpdateField,
    UpdateRequest,
    UpdateResult,
    RunResult,
    RunState,
    load_header,
    save_header,
    decode_header,
    calculate_header_checksum,
    validate_header_checksum,
    apply_update,
    fix_rom,
)

from gbfix.config import FixerConfig

__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Exception hierarchy
    "GBFixError",
    "HeaderIOError",
    "HeaderFormatError",
    "HeaderValidationError",
    # Warnings
    "HeaderWarning",
    "ChecksumMismatchWarning",
    "TruncationWarning",
    "FieldUsageWarning",
    # Header
    "HeaderRecord",
    "HeaderRevision",
    "LicenseeType",
    "LicenseeCode",
    "HeaderReport",
    "UpdateField",
    "UpdateRequest",
    "UpdateResult",
    "RunResult",
    "RunState",
    "load_header",
    "save_header",
    "decode_header",
    "calculate_header_checksum",
    "validate_header_checksum",
    "apply_update",
    "fix_rom",
    # Configuration
    "FixerConfig",
]
