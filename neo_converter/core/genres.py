"""Genre table for the .neo header.

WHY: The header stores the genre as a uint32 code from the cartridge
vendor's readme. Users and the header dump want names.

RULES:
- GENRES maps display name → code, in code order
- Unknown codes render as "Other"
- Name lookup is case-insensitive
"""

from __future__ import annotations

from typing import Dict, Optional

GENRES: Dict[str, int] = {
    "Other": 0,
    "Action": 1,
    "BeatEmUp": 2,
    "Sports": 3,
    "Driving": 4,
    "Platformer": 5,
    "Mahjong": 6,
    "Shooter": 7,
    "Quiz": 8,
    "Fighting": 9,
    "Puzzle": 10,
}

DEFAULT_GENRE_NAME = "Other"

_BY_LOWER_NAME = {name.lower(): code for name, code in GENRES.items()}
_BY_CODE = {code: name for name, code in GENRES.items()}


def genre_code(name: str) -> Optional[int]:
    """Return the code for a genre name, or None if the name is unknown."""
    return _BY_LOWER_NAME.get(name.strip().lower())


def genre_name(code: int) -> str:
    """Return the display name for *code*, "Other" when unknown."""
    return _BY_CODE.get(code, DEFAULT_GENRE_NAME)
