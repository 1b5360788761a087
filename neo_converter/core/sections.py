"""Role-specific assembly of the .neo ROM sections.

WHY: The .neo format is not a plain concatenation of chip dumps. Voice
ROMs come in single-bank or dual-bank flavors, paired color-tile chips
must be byte-interleaved because the hardware reads them in alternation,
and 2 MiB program ROMs must have their megabytes swapped because the
console can only address one program bank at a time.

HOW: One builder per section, each returning the final padded bytes.
build_sections() runs them all and returns a RomSections bundle.

RULES:
- Voice: any V2 file → dual bank (V1 bank ‖ V2 bank, each padded to 64 KiB);
  otherwise the V files form bank 1 and bank 2 is empty
- Color tile: pairs C1/C2, C3/C4, ...; discovery stops at the first odd
  chip with no data; each pair is interleaved odd[0], even[0], odd[1], ...;
  the whole section is padded to 256 KiB
- Program: exactly 2 MiB → swap the two 1 MiB halves; then pad to 64 KiB
- Sprite and fix: plain concatenation padded to 64 KiB
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Tuple

from neo_converter.core.aggregator import concat
from neo_converter.core.alignment import (
    COLOR_TILE_ALIGNMENT,
    ONE_MEG,
    SECTION_ALIGNMENT,
    TWO_MEGS,
    pad,
)
from neo_converter.core.errors import InvalidInputError
from neo_converter.core.ir import RomRole, SectionSizes, SourceFileSet

logger = logging.getLogger(__name__)

_COLOR_TILE_CHIPS = 8


@dataclass
class RomSections:
    """All padded ROM sections of one container, in file order."""

    program: bytes
    sprite: bytes
    fix: bytes
    voice1: bytes
    voice2: bytes
    color_tile: bytes

    @property
    def voice(self) -> bytes:
        return self.voice1 + self.voice2

    @property
    def sizes(self) -> SectionSizes:
        return SectionSizes(
            program=len(self.program),
            sprite=len(self.sprite),
            fix=len(self.fix),
            voice1=len(self.voice1),
            voice2=len(self.voice2),
            color_tile=len(self.color_tile),
        )

    def ordered(self) -> List[bytes]:
        """Section buffers in the order they follow the header."""
        return [self.program, self.sprite, self.fix, self.voice1, self.voice2, self.color_tile]


# ---------------------------------------------------------------------------
# Voice
# ---------------------------------------------------------------------------


def is_dual_bank_voice(files: SourceFileSet) -> bool:
    """True if the set uses the V1/V2 dual-bank voice layout."""
    return len(concat(files, RomRole.VOICE2)) > 0


def build_voice_banks(files: SourceFileSet) -> Tuple[bytes, bytes]:
    """Return (bank1, bank2), each padded to 64 KiB; bank2 may be empty."""
    if is_dual_bank_voice(files):
        bank1 = pad(concat(files, RomRole.VOICE1), SECTION_ALIGNMENT)
        bank2 = pad(concat(files, RomRole.VOICE2), SECTION_ALIGNMENT)
        logger.debug("Dual-bank voice layout: v1=%d v2=%d", len(bank1), len(bank2))
        return bank1, bank2
    return pad(concat(files, RomRole.VOICE), SECTION_ALIGNMENT), b""


# ---------------------------------------------------------------------------
# Color tiles
# ---------------------------------------------------------------------------


def interleave(data: bytes) -> bytes:
    """Interleave the two halves of *data* one byte at a time.

    Output even positions come from the first half, odd positions from the
    second half: first[0], second[0], first[1], second[1], ... For an
    odd-length buffer the first half is the longer one.
    """
    split = (len(data) + 1) // 2
    result = bytearray(len(data))
    result[0::2] = data[:split]
    result[1::2] = data[split:]
    return bytes(result)


def deinterleave(data: bytes) -> Tuple[bytes, bytes]:
    """Inverse of interleave(): return (first half, second half)."""
    return bytes(data[0::2]), bytes(data[1::2])


def build_color_tile_section(files: SourceFileSet) -> bytes:
    """Interleave each C-ROM pair and pad the result to 256 KiB."""
    pairs = []
    for odd_index in range(1, _COLOR_TILE_CHIPS, 2):
        odd = concat(files, RomRole.color_tile(odd_index), number_included=True)
        if not odd:
            break
        even = concat(files, RomRole.color_tile(odd_index + 1), number_included=True)
        if len(odd) != len(even):
            logger.warning(
                "C%d is %d bytes but C%d is %d bytes; interleaving around the midpoint",
                odd_index, len(odd), odd_index + 1, len(even),
            )
        pairs.append(interleave(odd + even))
    return pad(b"".join(pairs), COLOR_TILE_ALIGNMENT)


# ---------------------------------------------------------------------------
# Program
# ---------------------------------------------------------------------------


def swap_megs(data: bytes) -> bytes:
    """Swap the two 1 MiB halves of a 2 MiB program image.

    The console maps one megabyte of program ROM at a time and bank
    switches to the other; the .neo format stores the second physical
    megabyte first.

    Raises:
        InvalidInputError: if *data* is not exactly 2 MiB.
    """
    if len(data) != TWO_MEGS:
        raise InvalidInputError(
            "swap_megs: asked to swap {} bytes, expected exactly {}".format(len(data), TWO_MEGS)
        )
    return bytes(data[ONE_MEG:]) + bytes(data[:ONE_MEG])


def build_program_section(files: SourceFileSet) -> bytes:
    """Program ROM data, megabyte-swapped when exactly 2 MiB, padded to 64 KiB."""
    data = concat(files, RomRole.PROGRAM)
    if len(data) == TWO_MEGS:
        logger.info("Program ROM is 2 MiB, swapping megabytes")
        data = swap_megs(data)
    return pad(data, SECTION_ALIGNMENT)


def build_plain_section(files: SourceFileSet, role: RomRole) -> bytes:
    """Concatenate *role* files and pad to 64 KiB (sprite and fix sections)."""
    return pad(concat(files, role), SECTION_ALIGNMENT)


def build_sections(files: SourceFileSet) -> RomSections:
    """Build every ROM section of a container from *files*."""
    voice1, voice2 = build_voice_banks(files)
    return RomSections(
        program=build_program_section(files),
        sprite=build_plain_section(files, RomRole.SPRITE),
        fix=build_plain_section(files, RomRole.FIX),
        voice1=voice1,
        voice2=voice2,
        color_tile=build_color_tile_section(files),
    )
