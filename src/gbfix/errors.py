"""
GBFix Error Hierarchy
=====================

This module defines the exception and warning hierarchy for GBFix.
All exceptions inherit from GBFixError, allowing callers to catch every
header-related failure with a single except clause.

Exception Hierarchy
-------------------
GBFixError (base)
├── HeaderIOError - open/seek/read/write failure on the ROM file
├── HeaderFormatError - raw data is not a complete 80-byte header
└── HeaderValidationError - a decoded or requested field value is invalid

Warning Hierarchy
-----------------
Warnings are never raised. They are collected into lists and returned
alongside results so the caller decides how to present them.

HeaderWarning (UserWarning)
├── ChecksumMismatchWarning - stored header checksum is wrong
├── TruncationWarning - title or manufacturer code was cut to fit its slot
└── FieldUsageWarning - field written where the header revision ignores it

Design Philosophy
-----------------
I/O and structural errors abort the current operation. Field-level
validation errors (licensee mismatch, zero ROM size code) are attached
to the field that failed so other fields can still be reported.
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class GBFixError(Exception):
    """
    Base exception for all GBFix errors.

        try:
            header = load_header("game.gb")
        except GBFixError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Header Exceptions
# =============================================================================

class HeaderIOError(GBFixError):
    """
    Failure opening, seeking, reading or writing the ROM file.

    The underlying OSError (when there is one) is kept in ``os_error``
    and is also chained as ``__cause__`` by the codec.

    Attributes:
        path: The file that was being accessed
        operation: Short name of the failed step ("open", "seek", "stat", "read", "write")
        os_error: The original OSError, or None for short reads/writes
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        operation: Optional[str] = None,
        os_error: Optional[OSError] = None,
    ):
        self.message = message
        self.path = path
        self.operation = operation
        self.os_error = os_error
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [self.message]
        if self.path:
            parts[0] = f"{self.path}: {self.message}"
        if self.os_error is not None and self.os_error.strerror:
            parts.append(f"({self.os_error.strerror})")
        return " ".join(parts)


class HeaderFormatError(GBFixError):
    """
    Raw data cannot form a header record.

    Raised when a HeaderRecord is built from a buffer that is not exactly
    80 bytes long.
    """
    pass


class HeaderValidationError(GBFixError):
    """
    A header field holds, or would receive, an invalid value.

    Raised when:
    - The two new-style licensee bytes disagree ("licensee mismatch")
    - The ROM size code is zero ("zero size code")
    - An update request carries a value that does not fit its field

    Attributes:
        message: The error description
        field: Name of the header field involved (optional)
    """

    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(message)


# =============================================================================
# Header Warnings
# =============================================================================

class HeaderWarning(UserWarning):
    """
    Base class for non-fatal header findings.

    Attributes:
        message: Human-readable description
        field: Name of the header field involved (optional)
    """

    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(message)

    def __eq__(self, other: object) -> bool:
        return (
            type(self) is type(other)
            and self.message == other.message
            and self.field == other.field
        )

    def __hash__(self) -> int:
        return hash((type(self), self.message, self.field))


class ChecksumMismatchWarning(HeaderWarning):
    """
    Stored header checksum does not match the calculated one.

    Reported when no update was requested. When an update is applied the
    checksum is rewritten and no warning is produced.
    """

    def __init__(self, stored: int, expected: int):
        self.stored = stored
        self.expected = expected
        super().__init__(
            f"header checksum mismatch: stored 0x{stored:02X}, expected 0x{expected:02X}",
            field="header_checksum",
        )


class TruncationWarning(HeaderWarning):
    """
    A text value was longer than its slot and has been cut.

    Attributes:
        capacity: Slot size in bytes
        original_length: Length of the supplied value in bytes
    """

    def __init__(self, field: str, capacity: int, original_length: int):
        self.capacity = capacity
        self.original_length = original_length
        super().__init__(
            f"{field} truncated to {capacity} bytes (was {original_length})",
            field=field,
        )


class FieldUsageWarning(HeaderWarning):
    """
    A field was written that the record's revision does not use.

    Example: a manufacturer code on a DMG header lands in the last bytes
    of the 16-byte title instead.
    """
    pass
