"""
Header Fix Pipeline
===================

Runs one complete inspect/patch pass over a single ROM file:

    LOADED ──(no update)──────────────────────────────> REPORTED ──> DONE
       └──> UPDATED ──> CHECKSUM_CORRECTED ──(dry run)─> REPORTED ──> DONE
                                         └──────────> PERSISTED ──> DONE

Any failure moves straight to FAILED and skips the remaining stages.
There are no retries: every failure is a deterministic function of the
file's bytes.

All state lives in the RunResult returned by ``fix_rom``; nothing is kept
at module level.

Usage Examples
--------------
    >>> from gbfix.header import UpdateRequest, fix_rom
    >>> result = fix_rom("game.gb", UpdateRequest.build(rom_version=1), dry_run=True)
    >>> if result.ok:
    ...     print(result.report.title, result.report.rom_version)
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Union
import logging

from gbfix.errors import FieldUsageWarning, GBFixError, HeaderWarning
from gbfix.header.codec import load_header, save_header
from gbfix.header.model import HeaderReport, decode_header, header_revision
from gbfix.header.records import HeaderRecord, HeaderRevision
from gbfix.header.update import UpdateField, UpdateRequest, apply_update

# Logger for this module
logger = logging.getLogger(__name__)


class RunState(Enum):
    """Stages a pipeline run passes through."""
    LOADED = "loaded"
    UPDATED = "updated"
    CHECKSUM_CORRECTED = "checksum_corrected"
    PERSISTED = "persisted"
    REPORTED = "reported"
    DONE = "done"
    FAILED = "failed"


@dataclass
class RunResult:
    """
    Everything one pipeline run produced.

    Attributes:
        path: The ROM file processed
        dry_run: True if persistence was skipped on purpose
        original: Header as loaded (None if loading failed)
        record: Final header, written or previewed (None if loading failed)
        report: Decoded view of ``record``
        warnings: Non-fatal findings from every stage
        states: Stages visited, in order
        error: The exception that stopped the run, if any
    """
    path: Path
    dry_run: bool = False
    original: Optional[HeaderRecord] = None
    record: Optional[HeaderRecord] = None
    report: Optional[HeaderReport] = None
    warnings: list[HeaderWarning] = field(default_factory=list)
    states: list[RunState] = field(default_factory=list)
    error: Optional[GBFixError] = None

    @property
    def state(self) -> Optional[RunState]:
        return self.states[-1] if self.states else None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def changed(self) -> bool:
        return self.original is not None and self.record != self.original

    @property
    def persisted(self) -> bool:
        return RunState.PERSISTED in self.states

    def raise_for_error(self) -> None:
        """Re-raise the error that stopped the run, if there was one."""
        if self.error is not None:
            raise self.error

    def _enter(self, state: RunState) -> None:
        logger.debug(f"{self.path}: {state.value}")
        self.states.append(state)


def fix_rom(
    path: Union[str, Path],
    request: Optional[UpdateRequest] = None,
    dry_run: bool = False,
) -> RunResult:
    """
    Load, optionally update, and report on a ROM file's header.

    Args:
        path: Path to the ROM image (must be at least $0150 bytes)
        request: Fields to change; None only inspects the header
        dry_run: Apply the update in memory and report it, but leave the
            file untouched

    Returns:
        RunResult; check ``result.ok`` or call ``result.raise_for_error()``
    """
    result = RunResult(path=Path(path), dry_run=dry_run)

    try:
        result.original = load_header(result.path)
        result.record = result.original
        result._enter(RunState.LOADED)

        update = apply_update(result.original, request, dry_run=dry_run)
        result.warnings.extend(update.warnings)

        requested = request is not None and request.has_updates
        if (
            requested
            and request.fields & UpdateField.MANUFACTURER
            and header_revision(update.record) != HeaderRevision.CGB
        ):
            result.warnings.append(FieldUsageWarning(
                "manufacturer code written to a non-CGB header; "
                "it overwrites the end of the title",
                field="manufacturer",
            ))

        if requested or update.changed:
            result.record = update.record
            result._enter(RunState.UPDATED)
            result._enter(RunState.CHECKSUM_CORRECTED)

            if dry_run:
                logger.info(f"Dry run: not writing {result.path}")
            else:
                save_header(result.path, update.record)
                result._enter(RunState.PERSISTED)

        result.report = decode_header(result.record)
        if not result.persisted:
            result._enter(RunState.REPORTED)
        result._enter(RunState.DONE)

    except GBFixError as e:
        logger.debug(f"{result.path}: run failed: {e}")
        result.error = e
        result._enter(RunState.FAILED)

    return result
