"""Name-based ROM role classification.

WHY: ROM sets arrive as loose files whose only reliable role indicator is
the file name ("089-p1.p1", "kof94_c3.rom"). Content is never inspected,
so the naming rules must be exact and auditable.

HOW: One compiled pattern per (role, number_included) pair, built once at
import into _ROLE_PATTERNS. A name matches a role when its lower-cased
form ends in one of the two supported conventions:

  <anything><token><digit><rev>.rom|.bin         e.g. kof94_p1.rom
  <anything><token><digit><rev>.<token><digit><rev>   e.g. 089-c1.c1

<digit> is one decimal digit and <rev> an optional single revision
character. With number_included the digit is already part of the token
("c1"), so only <rev> remains and "c1" never matches "c2".

RULES:
- Case-insensitive; the name is lower-cased before matching
- Anchored at the end only, any prefix is accepted
- Without number_included "v1" requires a further digit ("v11.v11"), which
  is how dual-bank voice sets are named; single-bank "v1.v1" files are
  Voice ("v") files
- Names matching nothing are excluded from every aggregate, not an error
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Pattern, Tuple

from neo_converter.core.ir import RomRole

logger = logging.getLogger(__name__)

_REVISION = "[0-9a-z]?"
_ROM_EXTENSIONS = "(?:rom|bin)"


def _compile_role_pattern(token: str, number_included: bool) -> Pattern[str]:
    """Build the end-anchored pattern for one role token."""
    chip = re.escape(token) + ("" if number_included else r"\d") + _REVISION
    return re.compile(r"{chip}\.(?:{ext}|{chip})$".format(chip=chip, ext=_ROM_EXTENSIONS))


_ROLE_PATTERNS: Dict[Tuple[RomRole, bool], Pattern[str]] = {
    (role, number_included): _compile_role_pattern(role.token, number_included)
    for role in RomRole
    for number_included in (False, True)
}


def matches(file_name: str, role: RomRole, number_included: bool = False) -> bool:
    """Return True if *file_name* belongs to *role*.

    Args:
        file_name: Bare file name (no directory), any case.
        role: Role to test against.
        number_included: Treat the role's trailing digit as part of the
            token instead of expecting a further chip number. Used for the
            C1..C8 roles.
    """
    pattern = _ROLE_PATTERNS[(RomRole(role), number_included)]
    return pattern.search(file_name.lower()) is not None


def classify(file_name: str) -> List[RomRole]:
    """Return every role *file_name* matches, in RomRole order.

    Color-tile roles are tested with number_included, everything else
    without, mirroring how the section builders look files up.
    """
    found = []
    for role in RomRole:
        if matches(file_name, role, number_included=role.token.startswith("c")):
            found.append(role)
    return found


def unclassified(file_names) -> List[str]:
    """Return the names that match no role at all, sorted."""
    leftovers = sorted(name for name in file_names if not classify(name))
    for name in leftovers:
        logger.debug("Ignoring %s: name matches no ROM role", name)
    return leftovers
