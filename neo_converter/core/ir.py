"""Dataclasses and enums shared across the .neo core.

WHY: The classifier, section builders, header builder and header parser
all talk about the same handful of things: ROM roles, section sizes, game
metadata. Keeping them in one module makes the contract between the
stages explicit.

HOW: Five types:
  RomRole       : closed enum of ROM chip roles, value = lower-case token
  SectionSizes  : the six size-table entries of the header
  GameMetadata  : caller-supplied metadata for a build
  HeaderInfo    : the result of parsing a header back
  SourceFileSet : alias for the name → bytes input mapping

RULES:
- SourceFileSet is read-only input; nothing in core mutates it
- SectionSizes values are always the padded lengths actually written
- GameMetadata.screenshot and .ngh hold the raw caller text; they are
  converted to integers only when the header is built
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple

SourceFileSet = Mapping[str, bytes]


class RomRole(str, Enum):
    """Functional category of a ROM chip dump.

    The value is the lower-case token used in file names (``"p"``,
    ``"v1"``, ``"c3"``).
    """

    PROGRAM = "p"
    SPRITE = "s"
    FIX = "m"
    VOICE = "v"
    VOICE1 = "v1"
    VOICE2 = "v2"
    COLOR_TILE1 = "c1"
    COLOR_TILE2 = "c2"
    COLOR_TILE3 = "c3"
    COLOR_TILE4 = "c4"
    COLOR_TILE5 = "c5"
    COLOR_TILE6 = "c6"
    COLOR_TILE7 = "c7"
    COLOR_TILE8 = "c8"

    @property
    def token(self) -> str:
        return self.value

    @classmethod
    def color_tile(cls, index: int) -> "RomRole":
        """Return the ColorTile role for a 1-based chip index (1..8)."""
        return cls("c{}".format(index))


COLOR_TILE_ROLES: Tuple[RomRole, ...] = tuple(RomRole.color_tile(i) for i in range(1, 9))
"""C1..C8 in chip order."""


@dataclass(frozen=True)
class SectionSizes:
    """The six uint32 entries of the header's size table, in header order."""

    program: int = 0
    sprite: int = 0
    fix: int = 0
    voice1: int = 0
    voice2: int = 0
    color_tile: int = 0

    def as_tuple(self) -> Tuple[int, int, int, int, int, int]:
        return (
            self.program,
            self.sprite,
            self.fix,
            self.voice1,
            self.voice2,
            self.color_tile,
        )

    def as_dict(self) -> Dict[str, int]:
        return {
            "p": self.program,
            "s": self.sprite,
            "m": self.fix,
            "v1": self.voice1,
            "v2": self.voice2,
            "c": self.color_tile,
        }

    @property
    def total(self) -> int:
        return sum(self.as_tuple())


@dataclass
class GameMetadata:
    """Metadata written into the header of a new container.

    RULES:
    - name: up to 33 ASCII bytes, longer values are truncated with a warning
    - manufacturer: up to 17 ASCII bytes, same truncation rule
    - year, genre: stored as-is as little-endian uint32
    - screenshot: raw text parsed as base 10; None or invalid → 0
    - ngh: raw text whose digits are read as hexadecimal; None or invalid → 0
    """

    name: str
    manufacturer: str = "SNK"
    year: int = 0
    genre: int = 0
    screenshot: Optional[str] = None
    ngh: Optional[str] = None


@dataclass
class HeaderInfo:
    """Structured view of a parsed .neo header.

    RULES:
    - genre is the genre *name*; unknown codes become "Other"
    - ngh is the stored value rendered back as hex text ("95"), "" for 0
    - name/manufacturer have zero bytes dropped, nothing else stripped
    """

    sizes: SectionSizes
    name: str
    manufacturer: str
    year: int
    genre: str
    screenshot: int
    ngh: str
    tag: bytes = b"NEO"
    version: int = 1
