"""
Header Report Rendering
=======================

Turns a decoded HeaderReport into the text printed by ``gbfix``.
"""

from gbfix.header.model import HeaderReport
from gbfix.header.records import CgbFlag, HeaderRevision, SGB_SUPPORTED

DIVIDER = "--[ {} ]--"

GPL_NOTICE = """\
This program is free software; you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by
the Free Software Foundation; either version 2 of the License, or
(at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU General Public License for more details.

You should have received a copy of the GNU General Public License
along with this program; if not, write to the Free Software
Foundation, Inc., 51 Franklin Street, Fifth Floor, Boston,
MA 02110-1301, USA.
"""


def _field(label: str, value: str) -> str:
    return f"  {label + ':':<18}{value}"


def format_report(report: HeaderReport) -> list[str]:
    """
    Format a decoded header as report lines.

    Fields that failed to decode show their error in place of a value.
    """
    errors = report.errors
    lines = [DIVIDER.format("ROM Info"), ""]

    lines.append(_field("Revision", report.revision.get_description()))

    if report.revision == HeaderRevision.UNKNOWN:
        lines.append(_field("Title", "(not decoded)"))
    else:
        lines.append(_field("Title", f'"{report.title}"'))
        if report.is_cgb:
            lines.append(_field("Manufacturer", f'"{report.manufacturer}"'))
            lines.append(_field(
                "CGB Flags",
                f"0x{report.cgb_flags:02X} ({CgbFlag.describe(report.cgb_flags)})",
            ))

        if "licensee" in errors:
            lines.append(_field("Licensee Code", f"ERROR: {errors['licensee']}"))
        elif report.licensee is not None:
            kind = report.licensee.kind.name.lower()
            lines.append(_field("Licensee Code", f"0x{report.licensee.value:02X} ({kind} type)"))

    sgb = "SGB functions" if report.sgb_flag == SGB_SUPPORTED else "none"
    lines.append(_field("SGB Flag", f"0x{report.sgb_flag:02X} ({sgb})"))
    lines.append(_field("Cart Type", f"{report.cart_type_name} (0x{report.cart_type:02X})"))

    if "rom_size" in errors:
        lines.append(_field("ROM Size", f"ERROR: {errors['rom_size']} (0x{report.rom_size_code:02X})"))
    else:
        lines.append(_field(
            "ROM Size",
            f"{report.rom_size_kb}kB ({report.rom_size_kb * 1024}B)",
        ))

    if report.ram_size_kb is None:
        lines.append(_field("RAM Size", f"Unknown (0x{report.ram_size_code:02X})"))
    else:
        lines.append(_field("RAM Size", f"{report.ram_size_kb}kB (0x{report.ram_size_code:02X})"))

    lines.append(_field("Region", f"{report.region} (0x{report.region_code:02X})"))
    lines.append(_field("ROM Version", f"0x{report.rom_version:02X}"))

    checksum = report.checksum
    if checksum is not None:
        if checksum.matches:
            status = "valid"
        else:
            status = f"MISMATCH, expected 0x{checksum.expected:02X}"
        lines.append(_field("Header Checksum", f"0x{checksum.stored:02X} ({status})"))

    lines.append(_field("Global Checksum", f"0x{report.global_checksum:04X}"))
    lines.append(_field("Nintendo Logo", "OK" if report.nintendo_logo else "does not match"))

    return lines
