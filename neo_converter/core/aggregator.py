"""Gather the bytes belonging to one ROM role.

WHY: Most roles are split across several chips (p1 + p2, v1..v4). The
container needs each role as one contiguous buffer, and the order must not
depend on how the caller happened to enumerate its files.

HOW: Filter names through the classifier, sort them case-insensitively
(original name as tie-break), concatenate.

RULES:
- Sort key is (name.lower(), name): deterministic for any input order
- No gaps or separators between concatenated files
- A role with no files yields b"" and size 0
"""

from __future__ import annotations

import logging
from typing import List

from neo_converter.core.classifier import matches
from neo_converter.core.ir import RomRole, SourceFileSet

logger = logging.getLogger(__name__)


def role_files(files: SourceFileSet, role: RomRole, number_included: bool = False) -> List[str]:
    """Return the names classified under *role*, in concatenation order."""
    names = [name for name in files if matches(name, role, number_included)]
    names.sort(key=lambda name: (name.lower(), name))
    return names


def total_size(files: SourceFileSet, role: RomRole, number_included: bool = False) -> int:
    """Sum of the byte lengths of all files classified under *role*."""
    return sum(len(files[name]) for name in role_files(files, role, number_included))


def concat(files: SourceFileSet, role: RomRole, number_included: bool = False) -> bytes:
    """Concatenate every file of *role* in sorted name order."""
    names = role_files(files, role, number_included)
    for name in names:
        logger.debug("%s: %s (%d bytes)", role.name, name, len(files[name]))
    return b"".join(files[name] for name in names)
