"""
GBFix - Configuration
=====================

Run-time settings for the gbfix tool. Configuration can come from:
- Default values (defined here)
- Environment variables
- Command-line flags (applied on top by the CLI)

Environment variables (all optional):
    GBFIX_DRY_RUN: Never write to the ROM file
    GBFIX_VERBOSE: Debug logging
    GBFIX_NO_ROM_INFO: Skip the header report

Truthy values are "1", "true", "yes" and "on" (case-insensitive).
"""

from dataclasses import dataclass
import os

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


@dataclass
class FixerConfig:
    """
    Settings for one gbfix invocation.

    Attributes:
        dry_run: Apply updates in memory only (default: False)
        verbose: Enable debug logging (default: False)
        show_rom_info: Print the decoded header report (default: True)
    """
    dry_run: bool = False
    verbose: bool = False
    show_rom_info: bool = True

    @classmethod
    def from_env(cls) -> "FixerConfig":
        """
        Create FixerConfig from environment variables.

        Returns:
            FixerConfig with values from environment variables
        """
        defaults = cls()
        return cls(
            dry_run=_env_flag("GBFIX_DRY_RUN", defaults.dry_run),
            verbose=_env_flag("GBFIX_VERBOSE", defaults.verbose),
            show_rom_info=not _env_flag("GBFIX_NO_ROM_INFO", not defaults.show_rom_info),
        )

    def merge_flags(
        self,
        dry_run: bool = False,
        verbose: bool = False,
        no_rom_info: bool = False,
    ) -> "FixerConfig":
        """
        Combine with command-line flags. A flag that is set always wins;
        an unset flag leaves the configured value in place.
        """
        return FixerConfig(
            dry_run=self.dry_run or dry_run,
            verbose=self.verbose or verbose,
            show_rom_info=self.show_rom_info and not no_rom_info,
        )
