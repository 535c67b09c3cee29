# topmark:header:start
#
#   project      : cargo-fmt-toml
#   file         : errors.py
#   file_relpath : src/cargo_fmt_toml/core/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exceptions raised by the manifest document model.

These are *structural* failures: the manifest cannot be represented as a
document, so normalization of that one file is aborted. The pipeline turns
them into a file-scoped error result; they never abort a batch.
"""

from __future__ import annotations

from collections.abc import Sequence


class CargoFmtTomlError(ValueError):
    """Base class for structural manifest errors raised by the core."""


class ParseError(CargoFmtTomlError):
    """The text is not syntactically valid TOML.

    Attributes:
        reason: Human-readable description of the problem.
        line: 1-based line number of the offending position.
        col: 1-based column number of the offending position.
    """

    def __init__(self, reason: str, *, line: int, col: int) -> None:
        self.reason = reason
        self.line = line
        self.col = col
        super().__init__(f"{reason} (line {line}, column {col})")


class DuplicateKeyError(CargoFmtTomlError):
    """Two entries of the same section (or two table headers) share a key.

    Attributes:
        section: Decoded key path of the section holding the duplicate
            (empty for the document root).
        key: The duplicated key, dotted when it is a dotted key.
    """

    def __init__(self, section: Sequence[str], key: str) -> None:
        self.section = tuple(section)
        self.key = key
        where = f"[{'.'.join(self.section)}]" if self.section else "top level"
        super().__init__(f"duplicate key {key!r} in {where}")
