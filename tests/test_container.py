"""Unit tests for header construction and container assembly.

WHY: The cartridge locates every section from the header alone, so the
byte layout and the size table must be exact.

HOW: Reads header fields back with struct at the documented offsets
rather than through parse_header(), so the builder is checked
independently of the parser.
"""

import logging
import struct

import pytest

from neo_converter.core.alignment import (
    HEADER_SIZE,
    ONE_MEG,
    RESERVED_OFFSET,
    SECTION_ALIGNMENT,
)
from neo_converter.core.container import (
    _parse_uint32,
    assemble_container,
    build_container,
    build_header,
    parse_ngh,
    parse_screenshot,
    parse_year,
)
from neo_converter.core.errors import MalformedMetadataFieldError
from neo_converter.core.genres import genre_code, genre_name
from neo_converter.core.ir import GameMetadata, SectionSizes


def _u32(data: bytes, offset: int) -> int:
    return struct.unpack_from("<I", data, offset)[0]


class TestHeaderLayout:

    def test_size_and_tag(self, sample_metadata):
        header = build_header(sample_metadata, SectionSizes())
        assert len(header) == HEADER_SIZE
        assert header[:4] == b"NEO\x01"

    def test_size_table(self, sample_metadata):
        sizes = SectionSizes(1, 2, 3, 4, 5, 6)
        header = build_header(sample_metadata, sizes)
        assert [_u32(header, off) for off in range(0x04, 0x1C, 4)] == [1, 2, 3, 4, 5, 6]

    def test_metadata_block(self, sample_metadata):
        header = build_header(sample_metadata, SectionSizes())
        assert _u32(header, 0x1C) == 2020
        assert _u32(header, 0x20) == 9
        assert _u32(header, 0x24) == 3
        assert header[0x28:0x2C] == b"\x95\x00\x00\x00"

    def test_name_and_manufacturer_fields(self, sample_metadata):
        header = build_header(sample_metadata, SectionSizes())
        assert header[0x2C:0x2C + 33] == b"TestGame" + b"\x00" * 25
        assert header[0x4D:0x4D + 17] == b"SNK" + b"\x00" * 14

    def test_reserved_area_zero(self, sample_metadata):
        header = build_header(sample_metadata, SectionSizes())
        assert RESERVED_OFFSET == 0x5E
        assert set(header[RESERVED_OFFSET:]) == {0}

    def test_full_width_name_fits(self):
        meta = GameMetadata(name="N" * 33, manufacturer="M" * 17)
        header = build_header(meta, SectionSizes())
        assert header[0x2C:0x4D] == b"N" * 33
        assert header[0x4D:0x5E] == b"M" * 17
        assert header[0x5E] == 0

    def test_oversized_name_truncated_with_warning(self, caplog):
        meta = GameMetadata(name="X" * 40, manufacturer="Y" * 20)
        with caplog.at_level(logging.WARNING):
            header = build_header(meta, SectionSizes())
        assert header[0x2C:0x4D] == b"X" * 33
        assert header[0x4D:0x5E] == b"Y" * 17
        assert "truncating" in caplog.text

    def test_non_ascii_replaced(self):
        header = build_header(GameMetadata(name="Café"), SectionSizes())
        assert header[0x2C:0x30] == b"Caf?"

    def test_out_of_range_year_becomes_zero(self, caplog):
        with caplog.at_level(logging.WARNING):
            header = build_header(GameMetadata(name="x", year=-1), SectionSizes())
        assert _u32(header, 0x1C) == 0
        assert "year" in caplog.text


class TestMetadataFieldParsing:
    """Bad caller text degrades to 0 with a warning instead of failing."""

    def test_screenshot(self):
        assert parse_screenshot("12") == 12
        assert parse_screenshot(None) == 0

    def test_screenshot_invalid(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert parse_screenshot("abc") == 0
        assert "screenshot" in caplog.text

    def test_ngh_decimal_digits_read_as_hex(self):
        assert parse_ngh("95") == 0x95
        assert parse_ngh("200") == 0x200
        assert parse_ngh(None) == 0

    def test_ngh_invalid(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert parse_ngh("NGH-95") == 0
        assert "ngh" in caplog.text

    def test_ngh_out_of_range(self):
        assert parse_ngh("123456789") == 0

    def test_year(self):
        assert parse_year("1994") == 1994
        assert parse_year("nineties") == 0
        assert parse_year(None) >= 2024

    def test_missing_year_uses_current_year(self, monkeypatch):
        monkeypatch.setattr("neo_converter.core.container.current_year", lambda: 1990)
        assert parse_year(None) == 1990
        assert parse_year("1994") == 1994

    def test_strict_parser_raises(self):
        with pytest.raises(MalformedMetadataFieldError) as exc_info:
            _parse_uint32("screenshot", "12abc", 10)
        assert exc_info.value.field == "screenshot"
        assert exc_info.value.raw == "12abc"
        assert isinstance(exc_info.value, ValueError)


class TestGenres:

    def test_lookup_is_case_insensitive(self):
        assert genre_code("fighting") == 9
        assert genre_code(" BeatEmUp ") == 2

    def test_unknown(self):
        assert genre_code("Racing") is None
        assert genre_name(42) == "Other"


class TestAssembleContainer:

    def test_single_program_scenario(self, make_rom):
        files = {"089-p1.p1": make_rom(ONE_MEG, seed=1)}
        meta = GameMetadata(name="TestGame", year=2020, manufacturer="SNK", genre=9)
        neo = build_container(meta, files)
        assert len(neo) == HEADER_SIZE + ONE_MEG
        assert _u32(neo, 0x04) == 1048576
        assert [_u32(neo, off) for off in range(0x08, 0x1C, 4)] == [0, 0, 0, 0, 0]
        assert neo[HEADER_SIZE:] == files["089-p1.p1"]

    def test_kof94_bank_swap_scenario(self, make_rom):
        p1 = make_rom(ONE_MEG, seed=1)
        p2 = make_rom(ONE_MEG, seed=2)
        neo = build_container(GameMetadata(name="kof94"), {"kof94_p1.rom": p1, "kof94_p2.rom": p2})
        assert neo[HEADER_SIZE:HEADER_SIZE + ONE_MEG] == p2
        assert neo[HEADER_SIZE + ONE_MEG:] == p1

    def test_empty_file_set_is_header_only(self, sample_metadata):
        neo = build_container(sample_metadata, {})
        assert len(neo) == HEADER_SIZE
        assert [_u32(neo, off) for off in range(0x04, 0x1C, 4)] == [0] * 6

    def test_section_order(self, small_rom_set, sample_metadata):
        container = assemble_container(sample_metadata, small_rom_set)
        neo = container.to_bytes()
        sizes = container.sizes
        offset = HEADER_SIZE
        for data in container.sections.ordered():
            assert neo[offset:offset + len(data)] == data
            offset += len(data)
        assert offset == len(neo) == len(container)
        assert sizes.sprite == SECTION_ALIGNMENT
        assert neo[HEADER_SIZE + sizes.program:][:3] == small_rom_set["089-s1.s1"][:3]

    def test_header_sizes_match_sections(self, small_rom_set, sample_metadata):
        container = assemble_container(sample_metadata, small_rom_set)
        table = [_u32(container.header, off) for off in range(0x04, 0x1C, 4)]
        assert table == [len(data) for data in container.sections.ordered()]

    def test_input_not_mutated(self, small_rom_set, sample_metadata):
        before = dict(small_rom_set)
        build_container(sample_metadata, small_rom_set)
        assert small_rom_set == before

    def test_deterministic(self, small_rom_set, sample_metadata):
        reordered = dict(reversed(list(small_rom_set.items())))
        assert build_container(sample_metadata, small_rom_set) == \
            build_container(sample_metadata, reordered)

    def test_on_status_receives_sizes(self, small_rom_set, sample_metadata):
        messages = []
        build_container(sample_metadata, small_rom_set, on_status=messages.append)
        assert "P data length 131072" in messages
        assert messages[-1].startswith("neo file length")


@pytest.mark.parametrize("ngh, expected", [("95", b"\x95\x00\x00\x00"), ("1234", b"\x34\x12\x00\x00")])
def test_ngh_bytes(ngh, expected):
    neo = build_container(GameMetadata(name="x", ngh=ngh), {})
    assert neo[0x28:0x2C] == expected
