"""Shared test fixtures for the neo_converter test suite.

WHY: Most test modules need synthetic ROM data: buffers of a given size
whose bytes are distinguishable from each other and from 0xFF padding, and
a small but complete ROM set to run through the builder.

HOW: _make_rom() builds a repeating 256-byte pattern offset by a seed, so
two chips with different seeds never share a byte at the same offset.
The make_rom and zip_bytes fixtures hand the builders to tests; the
other fixtures wrap them into file sets.

RULES:
- Synthetic data never contains long runs of 0xFF, so padding is visible
- File names follow real MAME naming ("089-p1.p1", "kof94_p1.rom")
- Fixtures return fresh dicts; tests may mutate them freely
"""

from __future__ import annotations

import io
import zipfile
from typing import Dict

import pytest

from neo_converter.core.ir import GameMetadata

KB = 1024


def _make_rom(size: int, seed: int = 0) -> bytes:
    """Deterministic, seed-dependent ROM bytes of *size* length."""
    pattern = bytes((seed + i) % 0xFF for i in range(256))
    return (pattern * (size // 256 + 1))[:size]


def _zip_bytes(files: Dict[str, bytes]) -> bytes:
    """Pack *files* into an in-memory .zip archive."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, data in files.items():
            zf.writestr(name, data)
    return buffer.getvalue()


@pytest.fixture
def make_rom():
    """Builder for synthetic ROM chips: make_rom(size, seed=0) -> bytes."""
    return _make_rom


@pytest.fixture
def zip_bytes():
    """Builder for in-memory .zip archives: zip_bytes({name: data}) -> bytes."""
    return _zip_bytes


@pytest.fixture
def mark_encrypted():
    """Set the "encrypted" flag on every member of a .zip archive.

    zipfile cannot write encrypted archives, but it refuses to read a
    member flagged as encrypted without a password, which is all the
    error paths need.
    """
    def _mark(archive: bytes) -> bytes:
        data = bytearray(archive)
        offset = data.find(b"PK\x01\x02")
        while offset != -1:
            data[offset + 8] |= 0x01
            offset = data.find(b"PK\x01\x02", offset + 4)
        return bytes(data)
    return _mark


@pytest.fixture
def small_rom_set() -> Dict[str, bytes]:
    """A complete single-bank voice ROM set with one C pair.

    Sizes are deliberately unaligned so every section needs padding.
    """
    return {
        "089-p1.p1": _make_rom(100 * KB, seed=1),
        "089-s1.s1": _make_rom(20 * KB, seed=2),
        "089-m1.m1": _make_rom(30 * KB, seed=3),
        "089-v1.v1": _make_rom(40 * KB, seed=4),
        "089-v2.v2": _make_rom(40 * KB, seed=5),
        "089-c1.c1": _make_rom(64 * KB, seed=6),
        "089-c2.c2": _make_rom(64 * KB, seed=7),
        "readme.txt": b"not a rom",
    }


@pytest.fixture
def sample_metadata() -> GameMetadata:
    return GameMetadata(
        name="TestGame",
        manufacturer="SNK",
        year=2020,
        genre=9,  # Fighting
        screenshot="3",
        ngh="95",
    )
