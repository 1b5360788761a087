"""Alignment helpers and the fixed .neo layout constants.

WHY: Every ROM section in a .neo file starts on a boundary the cartridge
firmware expects. Getting the rounding wrong by one boundary produces a
file of the right shape with every later section shifted, which the
hardware rejects or, worse, loads as garbage. The header offsets live
here too, so the builder and the parser share one source of truth.

HOW: round_up() is integer arithmetic; pad() appends 0xFF fill bytes.

RULES:
- Program, sprite, fix and voice sections align to 64 KiB
- The color-tile section aligns to 256 KiB
- Padding is only ever appended, never prepended or interspersed
- An already aligned value or buffer is returned unchanged (0 stays 0)
"""

from __future__ import annotations

import struct

SIXTY_FOUR_KB = 64 * 1024
TWO_FIFTY_SIX_KB = 256 * 1024
ONE_MEG = 0x100000
TWO_MEGS = ONE_MEG * 2

SECTION_ALIGNMENT = SIXTY_FOUR_KB
COLOR_TILE_ALIGNMENT = TWO_FIFTY_SIX_KB

PAD_BYTE = 0xFF

# ---------------------------------------------------------------------------
# Header layout
# ---------------------------------------------------------------------------

HEADER_SIZE = 4096
NEO_TAG = b"NEO"
NEO_VERSION = 1

NAME_OFFSET = 0x2C
NAME_LENGTH = 33
MANUFACTURER_OFFSET = 0x4D
MANUFACTURER_LENGTH = 17
RESERVED_OFFSET = MANUFACTURER_OFFSET + MANUFACTURER_LENGTH  # 0x5E

# tag[3], version, P S M V1 V2 C sizes, year, genre, screenshot, NGH
HEADER_FIELDS = struct.Struct("<3sB6I4I")

# Shortest buffer the header parser accepts. The manufacturer field runs to
# 0x5E; anything past 91 bytes is read when present.
MIN_HEADER_PARSE_SIZE = 91


def round_up(value: int, boundary: int) -> int:
    """Return the smallest multiple of *boundary* that is >= *value*.

    >>> round_up(1, 65536)
    65536
    >>> round_up(65536, 65536)
    65536
    """
    if boundary <= 0:
        raise ValueError("boundary must be positive, got {}".format(boundary))
    remainder = value % boundary
    if remainder == 0:
        return value
    return value + (boundary - remainder)


def pad(data: bytes, boundary: int) -> bytes:
    """Append 0xFF bytes to *data* until its length is a multiple of *boundary*."""
    target = round_up(len(data), boundary)
    if target == len(data):
        return bytes(data)
    return bytes(data) + bytes([PAD_BYTE]) * (target - len(data))
