"""Parse a .neo header back into structured metadata.

WHY: Users want to check what a .neo file claims to contain (name, NGH,
section sizes) without loading it on hardware, and tests use the parser
to prove the builder wrote what it meant to.

HOW: struct unpacks the fixed integer block at the start of the header;
name and manufacturer are read byte by byte from their fixed fields.

RULES:
- At least 91 bytes are required, otherwise TruncatedInputError
- Genre code → name via the genre table, unknown → "Other"
- NGH is rendered as lower-case hex with leading zeros stripped, undoing
  the decimal-as-hex storage ("95" stored as 0x95 reads back as "95")
- Zero bytes in text fields map to "", they are not treated as terminators
- A tag other than "NEO" is logged but does not stop parsing
"""

from __future__ import annotations

import logging
from typing import List

from neo_converter.core.alignment import (
    HEADER_FIELDS,
    MANUFACTURER_LENGTH,
    MANUFACTURER_OFFSET,
    MIN_HEADER_PARSE_SIZE,
    NAME_LENGTH,
    NAME_OFFSET,
    NEO_TAG,
)
from neo_converter.core.errors import TruncatedInputError
from neo_converter.core.genres import genre_name
from neo_converter.core.ir import HeaderInfo, SectionSizes

logger = logging.getLogger(__name__)


def _ascii(data: bytes) -> str:
    return "".join("" if b == 0 else chr(b) for b in data)


def _ngh_text(value: int) -> str:
    return "{:x}".format(value).lstrip("0")


def parse_header(data: bytes) -> HeaderInfo:
    """Parse the header at the start of *data*.

    Args:
        data: The start of a .neo file (the whole file is fine).

    Raises:
        TruncatedInputError: if fewer than 91 bytes are supplied.
    """
    if len(data) < MIN_HEADER_PARSE_SIZE:
        raise TruncatedInputError(
            "Header needs at least {} bytes, got {}".format(MIN_HEADER_PARSE_SIZE, len(data))
        )

    fields = HEADER_FIELDS.unpack_from(data, 0)
    tag, version = fields[0], fields[1]
    sizes = SectionSizes(*fields[2:8])
    year, genre, screenshot, ngh = fields[8:12]

    if tag != NEO_TAG:
        logger.warning("Unexpected header tag %r, expected %r", tag, NEO_TAG)

    return HeaderInfo(
        sizes=sizes,
        name=_ascii(data[NAME_OFFSET:NAME_OFFSET + NAME_LENGTH]),
        manufacturer=_ascii(data[MANUFACTURER_OFFSET:MANUFACTURER_OFFSET + MANUFACTURER_LENGTH]),
        year=year,
        genre=genre_name(genre),
        screenshot=screenshot,
        ngh=_ngh_text(ngh),
        tag=bytes(tag),
        version=version,
    )


def format_header(info: HeaderInfo) -> str:
    """Render *info* as the human-readable dump printed by ``neo_converter header``."""
    lines: List[str] = [
        info.name,
        "----------------------",
        "manufacturer: {}".format(info.manufacturer),
        "        year: {}".format(info.year),
        "       genre: {}".format(info.genre),
        "         NGH: {}".format(info.ngh),
        "  screenshot: {}".format(info.screenshot),
        "",
        "---- ROM sizes -------",
    ]
    for rom_type, value in info.sizes.as_dict().items():
        lines.append("{:>13}: {:<12} 0x{:x}".format(rom_type, value, value))
    return "\n".join(lines)
