"""Header construction and final .neo artifact assembly.

WHY: The cartridge firmware locates every ROM section purely from the
size table in the first 4 KiB, so the header must describe exactly the
bytes that follow it. This module is the only place that writes header
bytes and the only place that decides section order.

HOW: build_sections() produces the padded sections, their lengths fill
the size table, build_header() packs the fixed layout with struct, and
NeoContainer concatenates header ‖ program ‖ sprite ‖ fix ‖ voice ‖ C.

RULES:
- Header is exactly 4096 bytes: "NEO", version 1, six sizes, year, genre,
  screenshot, NGH (all little-endian uint32), name[33], manufacturer[17],
  zero filler
- Sizes always come from the section buffers actually emitted
- Screenshot text is base 10; NGH text is read as if it were hex
  ("95" → 0x95); bad or missing text becomes 0 with a warning
- Oversized name/manufacturer are truncated to the field, with a warning
- Progress goes to logging and the optional on_status callback
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from neo_converter.config import current_year
from neo_converter.core.alignment import (
    HEADER_FIELDS,
    HEADER_SIZE,
    MANUFACTURER_LENGTH,
    MANUFACTURER_OFFSET,
    NAME_LENGTH,
    NAME_OFFSET,
    NEO_TAG,
    NEO_VERSION,
)
from neo_converter.core.classifier import unclassified
from neo_converter.core.errors import MalformedMetadataFieldError
from neo_converter.core.ir import GameMetadata, SectionSizes, SourceFileSet
from neo_converter.core.sections import RomSections, build_sections

logger = logging.getLogger(__name__)

StatusCallback = Callable[[str], None]

_UINT32_MAX = 0xFFFFFFFF


# ---------------------------------------------------------------------------
# Metadata field parsing
# ---------------------------------------------------------------------------


def _parse_uint32(field: str, raw: str, base: int) -> int:
    """Strictly parse *raw* as an unsigned 32-bit integer in *base*.

    Raises:
        MalformedMetadataFieldError: if the text is not a number or is out
            of uint32 range.
    """
    try:
        value = int(raw.strip(), base)
    except ValueError:
        raise MalformedMetadataFieldError(field, raw, "not a base-{} number".format(base))
    if not 0 <= value <= _UINT32_MAX:
        raise MalformedMetadataFieldError(field, raw, "out of uint32 range")
    return value


def _parse_lenient(field: str, raw: Optional[str], base: int, fallback: int) -> int:
    try:
        return _parse_uint32(field, raw, base)
    except MalformedMetadataFieldError as exc:
        logger.warning("%s; it will be ignored, %s will be %d", exc, field, fallback)
        return fallback


def parse_screenshot(raw: Optional[str]) -> int:
    """Parse the screenshot index (base 10). Missing or invalid → 0."""
    if raw is None:
        return 0
    return _parse_lenient("screenshot", raw, 10, 0)


def parse_ngh(raw: Optional[str]) -> int:
    """Parse an NGH number as though its decimal digits were hex.

    NGH numbers are written in decimal ("NGH-095") but the header stores
    them in BCD style, so "95" is stored as 0x95. Missing or invalid → 0.
    """
    if raw is None:
        return 0
    return _parse_lenient("ngh", raw, 16, 0)


def parse_year(raw: Optional[str]) -> int:
    """Parse a release year (base 10). Missing → current year, invalid → 0."""
    if raw is None:
        return current_year()
    return _parse_lenient("year", raw, 10, 0)


def _checked_uint32(field: str, value: int) -> int:
    """Return *value* if it fits a uint32, else 0 with a warning."""
    if 0 <= value <= _UINT32_MAX:
        return value
    logger.warning("%s %d does not fit in 32 bits; it will be ignored, %s will be 0",
                   field, value, field)
    return 0


def _encode_field(field: str, text: str, width: int) -> bytes:
    """ASCII-encode *text*, truncating to *width* bytes."""
    encoded = text.encode("ascii", errors="replace")
    if len(encoded) > width:
        logger.warning(
            "%s %r is %d bytes, truncating to %d", field, text, len(encoded), width
        )
        encoded = encoded[:width]
    return encoded


# ---------------------------------------------------------------------------
# Header
# ---------------------------------------------------------------------------


def build_header(metadata: GameMetadata, sizes: SectionSizes) -> bytes:
    """Pack the 4096-byte .neo header.

    Args:
        metadata: Game metadata; screenshot and NGH are parsed leniently.
        sizes: Padded section lengths, in header order.

    Returns:
        Exactly HEADER_SIZE bytes.
    """
    header = bytearray(HEADER_SIZE)
    HEADER_FIELDS.pack_into(
        header,
        0,
        NEO_TAG,
        NEO_VERSION,
        *sizes.as_tuple(),
        _checked_uint32("year", metadata.year),
        _checked_uint32("genre", metadata.genre),
        parse_screenshot(metadata.screenshot),
        parse_ngh(metadata.ngh),
    )

    name = _encode_field("name", metadata.name, NAME_LENGTH)
    header[NAME_OFFSET:NAME_OFFSET + len(name)] = name

    manufacturer = _encode_field("manufacturer", metadata.manufacturer, MANUFACTURER_LENGTH)
    header[MANUFACTURER_OFFSET:MANUFACTURER_OFFSET + len(manufacturer)] = manufacturer

    # header[RESERVED_OFFSET:] stays zero-filled
    return bytes(header)


# ---------------------------------------------------------------------------
# Container
# ---------------------------------------------------------------------------


@dataclass
class NeoContainer:
    """A fully assembled .neo file, kept in parts for inspection."""

    header: bytes
    sections: RomSections

    @property
    def sizes(self) -> SectionSizes:
        return self.sections.sizes

    def __len__(self) -> int:
        return len(self.header) + self.sizes.total

    def to_bytes(self) -> bytes:
        return b"".join([self.header] + self.sections.ordered())


def _report(on_status: Optional[StatusCallback], msg: str, *args) -> None:
    logger.debug(msg, *args)
    if on_status is not None:
        on_status(msg % args)


def assemble_container(
    metadata: GameMetadata,
    files: SourceFileSet,
    on_status: Optional[StatusCallback] = None,
) -> NeoContainer:
    """Build the header and every section for *files*.

    An empty file set is valid and yields a header-only container with a
    zero size table.

    Args:
        metadata: Game metadata for the header.
        files: ROM file name → bytes. Not modified.
        on_status: Optional callback receiving one progress line per
            section.

    Raises:
        InvalidInputError: if the program bank swap precondition fails.
    """
    unclassified(files)
    sections = build_sections(files)
    sizes = sections.sizes

    _report(on_status, "P data length %d", sizes.program)
    _report(on_status, "S data length %d", sizes.sprite)
    _report(on_status, "M data length %d", sizes.fix)
    _report(on_status, "V data length %d (v1 %d, v2 %d)",
            sizes.voice1 + sizes.voice2, sizes.voice1, sizes.voice2)
    _report(on_status, "C data length %d", sizes.color_tile)

    container = NeoContainer(header=build_header(metadata, sizes), sections=sections)
    _report(on_status, "neo file length %d", len(container))
    return container


def build_container(
    metadata: GameMetadata,
    files: SourceFileSet,
    on_status: Optional[StatusCallback] = None,
) -> bytes:
    """Convert a ROM file set into the bytes of a .neo file."""
    return assemble_container(metadata, files, on_status=on_status).to_bytes()
