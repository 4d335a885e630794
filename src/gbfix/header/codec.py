"""
Header File I/O
===============

Reads and writes the 80-byte header record in place inside a ROM file.

Only the bytes at $0100-$014F are ever touched. ``save_header`` opens the
file read-write without truncating or creating it, so everything before
and after the header region stays byte-for-byte identical.

Usage Examples
--------------
    >>> from gbfix.header import load_header, save_header
    >>> record = load_header("game.gb")
    >>> save_header("game.gb", record)
"""

from pathlib import Path
from typing import Union
import logging
import os

from gbfix.errors import HeaderIOError
from gbfix.header.records import HEADER_END, HEADER_OFFSET, HEADER_SIZE, HeaderRecord

# Logger for this module
logger = logging.getLogger(__name__)


def load_header(path: Union[str, Path]) -> HeaderRecord:
    """
    Read the header record from a ROM file.

    Args:
        path: Path to the ROM image

    Returns:
        The HeaderRecord found at offset $0100

    Raises:
        HeaderIOError: If the file cannot be opened or read, or is too
            short to contain a full header
    """
    path = Path(path)

    try:
        f = open(path, "rb")
    except OSError as e:
        raise HeaderIOError("cannot open ROM file", str(path), "open", e) from e

    with f:
        try:
            f.seek(HEADER_OFFSET, os.SEEK_SET)
        except OSError as e:
            raise HeaderIOError("cannot seek to header", str(path), "seek", e) from e

        try:
            data = f.read(HEADER_SIZE)
        except OSError as e:
            raise HeaderIOError("cannot read header", str(path), "read", e) from e

    if len(data) < HEADER_SIZE:
        raise HeaderIOError(
            f"short read: got {len(data)} of {HEADER_SIZE} header bytes",
            str(path),
            "read",
        )

    logger.debug(f"Loaded header from {path}")
    return HeaderRecord.from_bytes(data)


def save_header(path: Union[str, Path], record: HeaderRecord) -> None:
    """
    Write a header record back into an existing ROM file.

    The file must already exist and be at least $0150 bytes long; it is
    never created, truncated or extended.

    Args:
        path: Path to the ROM image
        record: The header to write at offset $0100

    Raises:
        HeaderIOError: If the file cannot be opened, is too short, or the
            write does not complete
    """
    path = Path(path)
    data = record.to_bytes()

    try:
        f = open(path, "r+b")
    except OSError as e:
        raise HeaderIOError("cannot open ROM file for writing", str(path), "open", e) from e

    with f:
        try:
            size = os.fstat(f.fileno()).st_size
        except OSError as e:
            raise HeaderIOError("cannot stat ROM file", str(path), "stat", e) from e

        if size < HEADER_END:
            raise HeaderIOError(
                f"file too short for a header ({size} bytes, need {HEADER_END})",
                str(path),
                "seek",
            )

        try:
            f.seek(HEADER_OFFSET, os.SEEK_SET)
            written = f.write(data)
            f.flush()
        except OSError as e:
            raise HeaderIOError("cannot write header", str(path), "write", e) from e

    if written != HEADER_SIZE:
        raise HeaderIOError(
            f"short write: wrote {written} of {HEADER_SIZE} header bytes",
            str(path),
            "write",
        )

    logger.info(f"Wrote header to {path}")
