"""Exception hierarchy for the .neo format engine.

WHY: Callers (CLI, HTTP API) need to tell a fatal build failure from a
short header and from a recoverable metadata typo, without string matching.

RULES:
- Every error derives from NeoFormatError and from ValueError, so callers
  that only know "bad input" can catch ValueError
- MalformedMetadataFieldError is raised by the strict field parsers only;
  the lenient parsers catch it, log a warning, and substitute a fallback
"""

from __future__ import annotations


class NeoFormatError(Exception):
    """Base class for all .neo conversion errors."""


class InvalidInputError(NeoFormatError, ValueError):
    """A buffer violates a structural precondition (e.g. bank swap size)."""


class TruncatedInputError(NeoFormatError, ValueError):
    """Fewer bytes were supplied than the fixed header layout requires."""


class MalformedMetadataFieldError(NeoFormatError, ValueError):
    """Caller-supplied metadata text could not be parsed.

    Attributes:
        field: Name of the metadata field, e.g. ``"ngh"``.
        raw: The offending raw text.
    """

    def __init__(self, field: str, raw: str, reason: str = "") -> None:
        self.field = field
        self.raw = raw
        message = "Invalid {} value {!r}".format(field, raw)
        if reason:
            message = "{}: {}".format(message, reason)
        super().__init__(message)
