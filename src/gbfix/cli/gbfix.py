"""
gbfix - Game Boy ROM Header Tool Command-Line Interface
=======================================================

This module implements the command-line interface for inspecting and
patching Game Boy cartridge headers.

Usage Examples
--------------
Show header information:
    $ gbfix game.gb

Fix a bad header checksum:
    $ gbfix --fix-checksum game.gb

Change title and region, preview only:
    $ gbfix -t MYGAME -r international --dry-run game.gb

Set a new-style licensee code:
    $ gbfix -l 0x01 --licensee-type new game.gb
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from gbfix import __version__
from gbfix.cli.errors import ExitCode, handle_cli_exception
from gbfix.cli.report import GPL_NOTICE, format_report
from gbfix.config import FixerConfig
from gbfix.errors import HeaderValidationError
from gbfix.header import (
    LicenseeType,
    Region,
    UpdateRequest,
    fix_rom,
)

# Configure logging
logger = logging.getLogger(__name__)


# =============================================================================
# Parameter Types
# =============================================================================

class ByteValue(click.ParamType):
    """
    Click parameter type for a single header byte.

    Accepts decimal (51), C hex (0x33) or assembler hex ($33).
    """
    name = "byte"

    def convert(self, value, param: Optional[click.Parameter],
                ctx: Optional[click.Context]) -> int:
        """Convert string to an int in 0-255."""
        if isinstance(value, int):
            number = value
        else:
            text = value.strip()
            try:
                if text.startswith("$"):
                    number = int(text[1:], 16)
                else:
                    number = int(text, 0)
            except ValueError:
                self.fail(f"'{value}' is not a number", param, ctx)

        if not 0 <= number <= 0xFF:
            self.fail(f"{value} is out of range (0-255)", param, ctx)
        return number


class RegionChoice(ByteValue):
    """
    Click parameter type for the region code.

    Accepts: japan, international (case-insensitive) or a byte value
    """
    name = "region"

    NAME_MAP = {
        "japan": Region.JAPAN,
        "jp": Region.JAPAN,
        "international": Region.INTERNATIONAL,
        "intl": Region.INTERNATIONAL,
    }

    def convert(self, value, param: Optional[click.Parameter],
                ctx: Optional[click.Context]) -> int:
        if isinstance(value, str) and value.lower() in self.NAME_MAP:
            return int(self.NAME_MAP[value.lower()])
        return super().convert(value, param, ctx)


BYTE = ByteValue()
REGION = RegionChoice()


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


def _print_gpl(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    click.echo(GPL_NOTICE)
    ctx.exit(ExitCode.SUCCESS)


# =============================================================================
# Main Command
# =============================================================================

@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument(
    "rom_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option("-t", "--title", help="Set ROM title to TITLE.")
@click.option(
    "-m", "--manufacturer",
    help='Set manufacturer code to MANU. Only meaningful on "CGB" type ROMs.',
)
@click.option(
    "-c", "--cgbflags", "cgb_flags", type=BYTE,
    help='Set CGB flags. Only meaningful on "CGB" type ROMs.',
)
@click.option("-l", "--licensee", type=BYTE, help="Set licensee code.")
@click.option(
    "--licensee-type",
    type=click.Choice(["old", "new"], case_sensitive=False),
    help="Store the licensee code in the old (default) or new licensee field.",
)
@click.option("-s", "--sgbflags", "sgb_flag", type=BYTE, help="Set SGB (Super Game Boy) flag.")
@click.option("-C", "--carttype", "cart_type", type=BYTE, help="Set cartridge type.")
@click.option("-R", "--ramsize", "ram_size", type=BYTE, help="Set save RAM size code.")
@click.option("-r", "--region", type=REGION, help="Set region: japan, international or a code.")
@click.option("-V", "--romver", "rom_version", type=BYTE, help="Set ROM version.")
@click.option("--fix-checksum", is_flag=True, help="Correct the header checksum.")
@click.option(
    "-d", "--dry-run", is_flag=True,
    help="Don't make changes, only show what changes would be made.",
)
@click.option("--norominfo", "no_rom_info", is_flag=True, help="Don't show ROM information.")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose mode.")
@click.option(
    "--gpl", is_flag=True, expose_value=False, is_eager=True, callback=_print_gpl,
    help="Show the GNU GPL notice.",
)
@click.version_option(__version__, "--version", prog_name="gbfix")
def main(
    rom_file: Path,
    title: Optional[str],
    manufacturer: Optional[str],
    cgb_flags: Optional[int],
    licensee: Optional[int],
    licensee_type: Optional[str],
    sgb_flag: Optional[int],
    cart_type: Optional[int],
    ram_size: Optional[int],
    region: Optional[int],
    rom_version: Optional[int],
    fix_checksum: bool,
    dry_run: bool,
    no_rom_info: bool,
    verbose: bool,
) -> None:
    """
    Inspect and patch the header of a Game Boy ROM image.

    ROM_FILE is the cartridge image to read. Any update option rewrites the
    header in place and recomputes the header checksum.

    \b
    Examples:
      gbfix game.gb
      gbfix --fix-checksum game.gb
      gbfix -t MYGAME -r international --dry-run game.gb
    """
    config = FixerConfig.from_env().merge_flags(dry_run, verbose, no_rom_info)
    setup_logging(config.verbose)

    if licensee_type is not None and licensee is None:
        raise click.UsageError("--licensee-type requires --licensee")

    try:
        request = UpdateRequest.build(
            title=title,
            manufacturer=manufacturer,
            cgb_flags=cgb_flags,
            licensee=licensee,
            licensee_type=LicenseeType[(licensee_type or "old").upper()],
            sgb_flag=sgb_flag,
            cart_type=cart_type,
            ram_size=ram_size,
            region=region,
            rom_version=rom_version,
            fix_checksum=fix_checksum,
        )
    except HeaderValidationError as e:
        handle_cli_exception(e, config.verbose, error_type="Update")

    click.echo(f"Using file: {rom_file}")
    result = fix_rom(rom_file, request, dry_run=config.dry_run)

    if not result.ok:
        handle_cli_exception(result.error, config.verbose)

    for warning in result.warnings:
        click.echo(f"Warning: {warning}", err=True)

    if result.changed:
        if result.persisted:
            click.echo(f"Header updated (checksum 0x{result.record.header_checksum:02X}).")
        else:
            click.echo("Dry run: no changes written.")

    report = result.report
    if config.show_rom_info:
        click.echo()
        for line in format_report(report):
            click.echo(line)

    if report.errors:
        for name, error in report.errors.items():
            click.echo(f"Error: {name}: {error}", err=True)
        sys.exit(ExitCode.HEADER_ERROR)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
