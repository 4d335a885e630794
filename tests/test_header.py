"""
Header Record and Decoding Tests
================================

Tests for the HeaderRecord data structure and the field-decoding
functions in gbfix.header.model.

Test Categories
---------------
1. Records: layout, serialization and enums
2. Revision: DMG/SGB/CGB/UNKNOWN inference
3. Title: tagged variant selection
4. Licensee, sizes, region and global checksum
5. Full decode with per-field errors
"""

from dataclasses import replace

import pytest

from gbfix.errors import HeaderFormatError, HeaderValidationError
from gbfix.header import (
    HEADER_SIZE,
    NINTENDO_LOGO,
    CartridgeType,
    CgbFlag,
    CgbTitle,
    HeaderRecord,
    HeaderRevision,
    LegacyTitle,
    LicenseeCode,
    LicenseeType,
    decode_header,
    global_checksum,
    has_nintendo_logo,
    header_revision,
    licensee_code,
    ram_size_kb,
    region_name,
    rom_size_kb,
    title_of,
)
from gbfix.header.records import decode_text


# =============================================================================
# Record Tests
# =============================================================================

class TestHeaderRecord:
    """Tests for HeaderRecord serialization and deserialization."""

    def test_to_bytes_length(self):
        """Test that a header serializes to exactly 80 bytes."""
        assert len(HeaderRecord().to_bytes()) == HEADER_SIZE == 0x50

    def test_field_offsets(self, cgb_record):
        """Test that fields land at their documented offsets."""
        data = cgb_record.to_bytes()
        assert data[0x04:0x34] == NINTENDO_LOGO
        assert data[0x34:0x44] == b"POCKETDEMO\x00APDE\x80"
        assert data[0x44:0x46] == b"\x30\x30"
        assert data[0x46] == 0x03
        assert data[0x47] == 0x1B
        assert data[0x48] == 0x05
        assert data[0x49] == 0x03
        assert data[0x4A] == 0x01
        assert data[0x4B] == 0x33
        assert data[0x4C] == 0x02
        assert data[0x4D] == cgb_record.header_checksum
        assert data[0x4E:0x50] == b"\xBE\xEF"

    def test_from_bytes_preserves_everything(self):
        """Test that every byte survives a bytes -> record -> bytes trip."""
        raw = bytes(range(0x50))
        assert HeaderRecord.from_bytes(raw).to_bytes() == raw

    def test_from_bytes_wrong_length(self):
        """Test that anything but 80 bytes is rejected."""
        with pytest.raises(HeaderFormatError):
            HeaderRecord.from_bytes(bytes(0x4F))
        with pytest.raises(HeaderFormatError):
            HeaderRecord.from_bytes(bytes(0x51))

    def test_bad_field_sizes(self):
        """Test that multi-byte fields must have their exact size."""
        with pytest.raises(HeaderFormatError):
            HeaderRecord(title_region=b"TOO SHORT")
        with pytest.raises(HeaderFormatError):
            HeaderRecord(global_checksum=b"\x00")

    def test_byte_field_range(self):
        """Test that single-byte fields reject values above 0xFF."""
        with pytest.raises(HeaderFormatError):
            HeaderRecord(rom_version=0x100)

    def test_record_is_immutable(self, dmg_record):
        """Test that records cannot be modified in place."""
        with pytest.raises(AttributeError):
            dmg_record.region = 1


class TestEnums:
    """Tests for the header enums and lookup tables."""

    def test_cartridge_type_names(self):
        """Test human-readable cartridge type names."""
        assert CartridgeType.get_name(0x00) == "ROM ONLY"
        assert CartridgeType.get_name(0x03) == "MBC1+BATTERY+RAM"
        assert CartridgeType.get_name(0x1B) == "MBC5+BATTERY+RAM"
        assert CartridgeType.get_name(0xFE) == "HuC3"

    def test_unknown_cartridge_type(self):
        """Test that undefined codes are reported as unknown."""
        assert CartridgeType.get_name(0x42) == "Unknown (0x42)"

    def test_cgb_flag_mask(self):
        """Test that the mask covers exactly the defined bits."""
        assert CgbFlag.MASK == 0xCC

    def test_cgb_flag_describe(self):
        """Test CGB flag descriptions."""
        assert CgbFlag.describe(0x00) == "none"
        assert CgbFlag.describe(0x80) == "CGB functions"
        assert CgbFlag.describe(0xC0) == "CGB functions, CGB only"

    def test_decode_text_stops_at_nul(self):
        """Test that text ends at the first NUL byte."""
        assert decode_text(b"TETRIS\x00\x00JUNK") == "TETRIS"

    def test_decode_text_replaces_unprintable(self):
        """Test that non-ASCII bytes are shown as '?'."""
        assert decode_text(b"AB\xFFC") == "AB?C"


# =============================================================================
# Revision Tests
# =============================================================================

class TestRevision:
    """Tests for header_revision()."""

    def test_dmg(self, dmg_record):
        """A record with no CGB bits and no SGB flag is DMG."""
        assert header_revision(dmg_record) == HeaderRevision.DMG

    def test_sgb(self, dmg_record):
        """SGB flag 0x03 without CGB bits is SGB."""
        assert header_revision(replace(dmg_record, sgb_flag=0x03)) == HeaderRevision.SGB

    def test_sgb_flag_must_be_exactly_three(self, dmg_record):
        """Other SGB flag values do not select SGB."""
        assert header_revision(replace(dmg_record, sgb_flag=0x01)) == HeaderRevision.DMG

    @pytest.mark.parametrize("flag", [0x80, 0x40, 0x04, 0x08, 0xC0])
    def test_cgb_bits(self, dmg_record, flag):
        """Any bit of 0xCC in the last title byte selects CGB."""
        region = dmg_record.title_region[:15] + bytes([flag])
        assert header_revision(replace(dmg_record, title_region=region)) == HeaderRevision.CGB

    def test_cgb_wins_over_sgb(self, cgb_record):
        """CGB bits take precedence over the SGB flag."""
        assert cgb_record.sgb_flag == 0x03
        assert header_revision(cgb_record) == HeaderRevision.CGB

    def test_bits_outside_mask_ignored(self, dmg_record):
        """Bits outside 0xCC do not make a record CGB."""
        region = dmg_record.title_region[:15] + bytes([0x33])
        assert header_revision(replace(dmg_record, title_region=region)) == HeaderRevision.DMG

    def test_unknown_without_record(self):
        """No record gives UNKNOWN."""
        assert header_revision(None) == HeaderRevision.UNKNOWN

    def test_unknown_for_truncated_bytes(self):
        """A truncated raw header gives UNKNOWN."""
        assert header_revision(bytes(0x30)) == HeaderRevision.UNKNOWN

    def test_raw_bytes_accepted(self, cgb_record):
        """A full raw header is decoded like a record."""
        assert header_revision(cgb_record.to_bytes()) == HeaderRevision.CGB


# =============================================================================
# Title Tests
# =============================================================================

class TestTitle:
    """Tests for title_of() variant selection."""

    def test_legacy_title(self, dmg_record):
        """DMG records use the 16-byte title form."""
        title = title_of(dmg_record)
        assert isinstance(title, LegacyTitle)
        assert title.text == "TETRIS"
        assert len(title.raw) == 16

    def test_full_width_legacy_title(self, dmg_record):
        """A 16-character DMG title has no terminator."""
        record = replace(dmg_record, title_region=b"ABCDEFGHIJKLMNO\x01")
        assert title_of(record).text == "ABCDEFGHIJKLMNO?"

    def test_cgb_title(self, cgb_record):
        """CGB records split title, manufacturer and flags."""
        title = title_of(cgb_record)
        assert isinstance(title, CgbTitle)
        assert title.text == "POCKETDEMO"
        assert title.manufacturer == "APDE"
        assert title.cgb_flags == 0x80


# =============================================================================
# Field Decoding Tests
# =============================================================================

class TestLicensee:
    """Tests for licensee_code()."""

    def test_old_licensee(self, dmg_record):
        """An ordinary old licensee byte is used directly."""
        record = replace(dmg_record, old_licensee=0x01)
        assert licensee_code(record) == LicenseeCode(0x01, LicenseeType.OLD)

    def test_new_licensee(self, dmg_record):
        """0x33 redirects to matching new licensee bytes."""
        record = replace(dmg_record, old_licensee=0x33, new_licensee=b"\x30\x30")
        code = licensee_code(record)
        assert code.kind == LicenseeType.NEW
        assert code.value == 0x30

    def test_new_licensee_mismatch(self, dmg_record):
        """Disagreeing new licensee bytes are an error."""
        record = replace(dmg_record, old_licensee=0x33, new_licensee=b"\x30\x31")
        with pytest.raises(HeaderValidationError, match="licensee mismatch"):
            licensee_code(record)

    def test_new_bytes_ignored_for_old_type(self, dmg_record):
        """New licensee bytes do not matter unless old byte is 0x33."""
        record = replace(dmg_record, old_licensee=0x08, new_licensee=b"\x30\x31")
        assert licensee_code(record) == LicenseeCode(0x08, LicenseeType.OLD)


class TestSizes:
    """Tests for rom_size_kb() and ram_size_kb()."""

    def test_zero_rom_size_code(self, dmg_record):
        """Size code 0 is reported as an error."""
        with pytest.raises(HeaderValidationError, match="zero size code"):
            rom_size_kb(replace(dmg_record, rom_size=0x00))

    @pytest.mark.parametrize("code,size_kb", [(0x01, 64), (0x02, 128), (0x05, 1024), (0x08, 8192)])
    def test_rom_size(self, dmg_record, code, size_kb):
        """ROM size is 32 KB shifted left by the code."""
        assert rom_size_kb(replace(dmg_record, rom_size=code)) == size_kb

    @pytest.mark.parametrize("code,size_kb", [(0, 0), (2, 8), (3, 32), (4, 128), (5, 64)])
    def test_ram_size(self, dmg_record, code, size_kb):
        """RAM size codes follow the lookup table."""
        assert ram_size_kb(replace(dmg_record, ram_size=code)) == size_kb

    def test_unknown_ram_size(self, dmg_record):
        """Undefined RAM size codes decode to None."""
        assert ram_size_kb(replace(dmg_record, ram_size=0x09)) is None


class TestRegion:
    """Tests for region_name()."""

    def test_japan(self, dmg_record):
        assert region_name(replace(dmg_record, region=0)) == "Japan"

    def test_international(self, dmg_record):
        assert region_name(replace(dmg_record, region=1)) == "International"

    def test_codes_above_one_are_international(self, dmg_record):
        """Any nonzero code maps to International, not Unknown."""
        assert region_name(replace(dmg_record, region=2)) == "International"
        assert region_name(replace(dmg_record, region=0xFF)) == "International"

    def test_no_record(self):
        assert region_name(None) == "Unknown"


class TestGlobalChecksum:
    """Tests for global_checksum()."""

    def test_big_endian(self, dmg_record):
        """Stored bytes [0x12, 0x34] read as 0x1234."""
        assert global_checksum(dmg_record) == 0x1234

    def test_high_byte_first(self, cgb_record):
        assert global_checksum(cgb_record) == 0xBEEF


class TestLogo:
    """Tests for has_nintendo_logo()."""

    def test_default_logo(self, dmg_record):
        assert has_nintendo_logo(dmg_record)

    def test_damaged_logo(self, dmg_record):
        logo = b"\x00" + NINTENDO_LOGO[1:]
        assert not has_nintendo_logo(replace(dmg_record, logo=logo))


# =============================================================================
# Full Decode Tests
# =============================================================================

class TestDecodeHeader:
    """Tests for decode_header()."""

    def test_dmg_report(self, dmg_record):
        """A clean DMG header decodes without errors."""
        report = decode_header(dmg_record)
        assert report.revision == HeaderRevision.DMG
        assert report.title == "TETRIS"
        assert report.manufacturer is None
        assert report.licensee == LicenseeCode(0x01, LicenseeType.OLD)
        assert report.rom_size_kb == 64
        assert report.region == "Japan"
        assert report.checksum.matches
        assert report.global_checksum == 0x1234
        assert report.errors == {}

    def test_cgb_report(self, cgb_record):
        """CGB fields are decoded from the CGB title form."""
        report = decode_header(cgb_record)
        assert report.is_cgb
        assert report.title == "POCKETDEMO"
        assert report.manufacturer == "APDE"
        assert report.cgb_flags == 0x80
        assert report.licensee == LicenseeCode(0x30, LicenseeType.NEW)
        assert report.cart_type_name == "MBC5+BATTERY+RAM"
        assert report.rom_size_kb == 1024
        assert report.ram_size_kb == 32
        assert report.region == "International"

    def test_field_errors_do_not_stop_decoding(self, dmg_record):
        """Bad fields are recorded while the rest is still decoded."""
        record = replace(
            dmg_record,
            old_licensee=0x33,
            new_licensee=b"\x30\x31",
            rom_size=0x00,
            region=0x01,
        )
        report = decode_header(record)
        assert set(report.errors) == {"licensee", "rom_size"}
        assert report.licensee is None
        assert report.rom_size_kb is None
        assert report.title == "TETRIS"
        assert report.region == "International"
        assert report.checksum is not None
