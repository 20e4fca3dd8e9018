# Exception types raised by the linter pipeline.

from __future__ import annotations


class WestwoodError(Exception):
    """Base class for all errors raised by westwood."""


class DecodeError(WestwoodError):
    """
    Source bytes are not valid UTF-8.

    Carries the byte offset of the first invalid byte and its 1-based
    line/column so the failure can still be reported at a location.
    """

    def __init__(self, offset: int, line: int, column: int, reason: str) -> None:
        super().__init__(f"invalid UTF-8 at byte {offset} ({reason})")
        self.offset = offset
        self.line = line
        self.column = column
        self.reason = reason


class ParseError(WestwoodError):
    """The C parser could not produce a syntax tree."""


class PatternError(WestwoodError):
    """A structural pattern refers to unknown node kinds, fields or captures."""


class RegistryError(WestwoodError):
    """The rule registry is inconsistent (duplicate or unknown rule ids)."""


class IoError(WestwoodError):
    """Reading a source file or writing output failed."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason
