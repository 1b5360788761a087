""".neo ROM container converter.

WHY: Neo Geo ROM sets ship as loose chip dumps (p1, s1, m1, v1, c1..c8)
that reproduction cartridges cannot load directly. Those devices expect a
single .neo container: a fixed 4 KiB header followed by each ROM section
reordered and padded in a very specific way.

HOW: Three-stage pipeline: load (directory or .zip into a name → bytes
mapping), assemble (core section builders and header), write. The core is
pure in-memory and independently testable; CLI and HTTP API are thin
layers on top.

RULES:
- The core never touches the filesystem
- Header layout lives in one place (core.alignment) and is shared by the
  builder and the parser
- Output must be bit-exact; every section is padded to its boundary
"""

__version__ = "0.1.0"
