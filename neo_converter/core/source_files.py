"""Load a ROM set from disk into a name → bytes mapping.

WHY: ROM sets are distributed as a directory of chip dumps or as a .zip
of the same. The core only understands in-memory SourceFileSets, so this
module is the bridge from the filesystem.

HOW: load_rom_directory() reads every top-level regular file;
load_rom_archive() reads every member of a zip; load_source_files()
picks one based on the path.

RULES:
- Entries ending in .html or .zip are skipped (ROM sets often ship an
  info page, and extracting next to the archive is common)
- Subdirectories and zip directory entries are skipped, not recursed
- Zip members are keyed by base name; two members with the same base
  name raise ValueError
- All functions only read, never write
"""

from __future__ import annotations

import logging
import zipfile
from pathlib import Path, PurePosixPath
from typing import BinaryIO, Dict, Union

from neo_converter.config import IGNORED_EXTENSIONS

logger = logging.getLogger(__name__)

PathOrFile = Union[str, Path, BinaryIO]


def _is_ignored(name: str) -> bool:
    lowered = name.strip().lower()
    return any(lowered.endswith(ext) for ext in IGNORED_EXTENSIONS)


def load_rom_directory(directory: Union[str, Path]) -> Dict[str, bytes]:
    """Read every ROM file directly inside *directory*.

    Raises:
        NotADirectoryError: if *directory* is not a directory.
    """
    root = Path(directory)
    if not root.is_dir():
        raise NotADirectoryError("{} is not a directory".format(root))

    files: Dict[str, bytes] = {}
    for entry in sorted(root.iterdir()):
        if _is_ignored(entry.name) or entry.is_dir():
            logger.debug("Skipping %s", entry.name)
            continue
        files[entry.name] = entry.read_bytes()
    return files


def load_rom_archive(archive: PathOrFile) -> Dict[str, bytes]:
    """Read every ROM file inside a .zip archive.

    Args:
        archive: Path to the archive or a binary file object.

    Raises:
        zipfile.BadZipFile: if *archive* is not a zip file.
        ValueError: if two members share a base name.
    """
    files: Dict[str, bytes] = {}
    with zipfile.ZipFile(archive) as zf:
        for info in zf.infolist():
            if info.is_dir():
                continue
            name = PurePosixPath(info.filename).name
            if not name or _is_ignored(name):
                logger.debug("Skipping archive member %s", info.filename)
                continue
            if name in files:
                raise ValueError("Archive contains more than one file named {}".format(name))
            files[name] = zf.read(info)
    return files


def load_source_files(path: Union[str, Path]) -> Dict[str, bytes]:
    """Load a ROM set from a directory or a .zip archive."""
    source = Path(path)
    if source.is_dir():
        return load_rom_directory(source)
    if source.suffix.lower() == ".zip" and source.is_file():
        return load_rom_archive(source)
    raise ValueError("{} is neither a directory nor a .zip archive".format(source))


def default_game_name(path: Union[str, Path]) -> str:
    """Game name used when none is given: the base name without extension."""
    return Path(path).stem
