"""Command-line interface for the .neo converter.

WHY: Users need a simple way to turn a ROM set on disk into a .neo file
and to inspect the header of an existing .neo file. The CLI wires
together loading, validation, the core builder, and writing the result.

HOW: argparse with two subcommands:
  build  INPUT -o DEST [metadata flags]   ROM directory or .zip → .neo
  header FILE                            print a .neo header
Status messages go to stderr; the header dump goes to stdout.

RULES:
- INPUT must be a directory or a .zip archive
- The destination's parent directory must already exist
- Genre must be one of the genre table names (case-insensitive)
- Name ≤ 33 and manufacturer ≤ 17 characters, checked before building
- Defaults: name = destination stem, manufacturer/genre from config,
  year = current year
- Every failure prints "Error: ..." to stderr and exits with status 1
"""

from __future__ import annotations

import argparse
import logging
import sys
import zipfile
from pathlib import Path
from typing import List, Optional

from neo_converter import __version__
from neo_converter.config import (
    DEFAULT_GENRE,
    DEFAULT_MANUFACTURER,
    LOG_LEVEL,
    MAX_MANUFACTURER_LENGTH,
    MAX_NAME_LENGTH,
)
from neo_converter.core.container import build_container, parse_year
from neo_converter.core.errors import NeoFormatError
from neo_converter.core.genres import GENRES, genre_code
from neo_converter.core.header import format_header, parse_header
from neo_converter.core.ir import GameMetadata
from neo_converter.core.source_files import default_game_name, load_source_files


def _status(msg: str) -> None:
    """Print a status message to stderr.

    WHY: Status output must not pollute stdout so the header dump can be
    piped.
    """
    print(msg, file=sys.stderr, flush=True)


def _fail(msg: str) -> None:
    print("Error: {}".format(msg), file=sys.stderr)
    sys.exit(1)


def _configure_logging(verbosity: int) -> None:
    """Set up root logging from config, lowered by each -v flag."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = getattr(logging, LOG_LEVEL, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _build_metadata(args: argparse.Namespace, dest_path: Path) -> GameMetadata:
    """Validate the metadata flags and build a GameMetadata.

    RULES:
    - Missing name falls back to the destination file stem
    - Unknown genre, over-long name or manufacturer → exit 1
    """
    name = args.game_name if args.game_name else default_game_name(dest_path)
    if len(name) > MAX_NAME_LENGTH:
        _fail("Game name can not be longer than {} characters".format(MAX_NAME_LENGTH))

    if len(args.manufacturer) > MAX_MANUFACTURER_LENGTH:
        _fail("Manufacturer name can not be longer than {} characters".format(
            MAX_MANUFACTURER_LENGTH
        ))

    genre = genre_code(args.genre)
    if genre is None:
        _fail("Genre must be one of: {}".format(", ".join(GENRES)))

    return GameMetadata(
        name=name,
        manufacturer=args.manufacturer,
        year=parse_year(args.year),
        genre=genre,
        screenshot=args.screenshot,
        ngh=args.ngh,
    )


def _run_build(args: argparse.Namespace) -> None:
    """Load the ROM set, build the container and write it to disk."""
    src_path = Path(args.input).resolve()
    dest_path = Path(args.dest).resolve()

    if not src_path.exists():
        _fail("No directory found at {}".format(src_path))
    if not src_path.is_dir() and src_path.suffix.lower() != ".zip":
        _fail("{} is not a directory or a .zip archive".format(src_path))
    if not dest_path.parent.is_dir():
        _fail("No directory found at {}".format(dest_path.parent))

    metadata = _build_metadata(args, dest_path)

    try:
        files = load_source_files(src_path)
        _status("Loaded {} file(s) from {}".format(len(files), src_path))
        neo_file = build_container(metadata, files, on_status=lambda m: _status("  " + m))
        dest_path.write_bytes(neo_file)
    except zipfile.BadZipFile:
        _fail("{} is not a valid .zip archive".format(src_path))
    except (NeoFormatError, ValueError, OSError, RuntimeError) as e:
        _fail(str(e))

    _status("{} built to {}".format(src_path, dest_path))


def _run_header(args: argparse.Namespace) -> None:
    """Print the parsed header of a .neo file to stdout."""
    path = Path(args.neo_file)
    if not path.is_file():
        _fail("File not found: {}".format(path))

    try:
        with path.open("rb") as f:
            info = parse_header(f.read(4096))
    except (NeoFormatError, OSError) as e:
        _fail(str(e))

    print(format_header(info))


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable; tests can inspect the parser without building anything.
    """
    parser = argparse.ArgumentParser(
        prog="neo_converter",
        description="Convert Neo Geo ROM sets to the .neo container format "
                    "and inspect .neo headers.",
    )
    parser.add_argument("--version", action="version", version="%(prog)s " + __version__)
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase log output (-v info, -vv debug).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser(
        "build",
        help="Build a .neo file from a ROM directory or .zip.",
        description="Build a .neo file from a directory (or .zip) containing "
                    "Neo Geo ROM files (ie p1, m1, c1, etc).",
    )
    build.add_argument("input", help="ROM directory or .zip archive.")
    build.add_argument("-o", "--dest", required=True, help="The path to write the .neo file to.")
    build.add_argument(
        "-n", "--game-name",
        default=None,
        help="The name of the game (default: destination file name).",
    )
    build.add_argument(
        "-g", "--genre",
        default=DEFAULT_GENRE,
        help="Genre, one of: {} (default: %(default)s).".format(", ".join(GENRES)),
    )
    build.add_argument(
        "-y", "--year",
        default=None,
        help="Year the game was released (default: current year).",
    )
    build.add_argument(
        "-m", "--manufacturer",
        default=DEFAULT_MANUFACTURER,
        help="Manufacturer of the game (default: %(default)s).",
    )
    build.add_argument("--ngh", default=None, help="NGH number, e.g. 95 for NGH-095.")
    build.add_argument("--screenshot", default=None, help="Screenshot index (default: none).")
    build.set_defaults(func=_run_build)

    header = subparsers.add_parser("header", help="Print the header of a .neo file.")
    header.add_argument("neo_file", help="Path to a .neo file.")
    header.set_defaults(func=_run_header)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    args.func(args)


if __name__ == "__main__":
    main()
