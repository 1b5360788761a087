"""Core binary-format engine for .neo containers.

WHY: The core package is the part of the converter where a subtle bug
silently corrupts a binary that third-party hardware must accept. It is
kept free of I/O so every rule can be unit tested on in-memory buffers.

HOW: classifier.py decides file roles by name, aggregator.py gathers and
orders role bytes, alignment.py holds padding helpers and the header
layout, sections.py applies role-specific reordering, container.py builds
the header and final artifact, header.py parses a header back.

RULES:
- ir.py dataclasses are the contract between modules
- Nothing in core reads or writes files (source_files.py is the exception
  and is only used by outer layers)
- Intermediate sizes go to logging or an on_status callback, never print()
"""

from neo_converter.core.container import assemble_container, build_container
from neo_converter.core.errors import (
    InvalidInputError,
    MalformedMetadataFieldError,
    NeoFormatError,
    TruncatedInputError,
)
from neo_converter.core.header import format_header, parse_header
from neo_converter.core.ir import GameMetadata, HeaderInfo, RomRole, SectionSizes

__all__ = [
    "GameMetadata",
    "HeaderInfo",
    "InvalidInputError",
    "MalformedMetadataFieldError",
    "NeoFormatError",
    "RomRole",
    "SectionSizes",
    "TruncatedInputError",
    "assemble_container",
    "build_container",
    "format_header",
    "parse_header",
]
