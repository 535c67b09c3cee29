# topmark:header:start
#
#   project      : cargo-fmt-toml
#   file         : diagnostics.py
#   file_relpath : src/cargo_fmt_toml/core/diagnostics.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Core diagnostic types and helpers.

This module defines the diagnostic primitives used to report informational
messages and warnings collected while normalizing a single manifest. Structural
failures (parse errors, duplicate keys) are *not* diagnostics: they abort the
file and are reported through [`FileError`][cargo_fmt_toml.pipeline.context.FileError].

Sections:
    * DiagnosticLevel: severity levels with associated terminal colors.
    * DiagnosticCode: stable identifiers for well-known warning conditions.
    * Diagnostic: immutable structured diagnostic payload (level + code + message).
    * DiagnosticStats: aggregated per-level counts.
    * DiagnosticLog: mutable per-file collection with helpers for
      adding and summarizing diagnostics.
    * FrozenDiagnosticLog: immutable snapshot stored on file results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, cast

from yachalk import chalk

from cargo_fmt_toml.config.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

    from cargo_fmt_toml.config.logging import FmtTomlLogger


logger: FmtTomlLogger = get_logger(__name__)


class DiagnosticLevel(Enum):
    """Severity levels for diagnostics collected during processing.

    Levels are ordered by importance: ERROR > WARNING > INFO.
    """

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def color(self) -> Callable[[str], str]:
        """Return the `yachalk` color function associated with this severity level.

        Intended for human-readable output only.

        Returns:
            Callable[[str], str]: The `yachalk` color function associated with this severity level.
        """
        return cast(
            "Callable[[str], str]",
            {
                DiagnosticLevel.INFO: chalk.blue,
                DiagnosticLevel.WARNING: chalk.yellow,
                DiagnosticLevel.ERROR: chalk.red_bright,
            }[self],
        )


class DiagnosticCode(Enum):
    """Stable identifiers for diagnostics callers may want to filter on."""

    GENERIC = "generic"
    PASS_APPLIED = "pass-applied"
    COLLAPSE_SKIPPED = "collapse-skipped"
    MULTIPLE_PACKAGE_SECTIONS = "multiple-package-sections"
    AMBIGUOUS_COMMENT_RELOCATION = "ambiguous-comment-relocation"
    INVALID_STANDARD = "invalid-standard"


@dataclass(frozen=True)
class Diagnostic:
    """Structured diagnostic with a severity level, a code and a message."""

    level: DiagnosticLevel
    message: str
    code: DiagnosticCode = DiagnosticCode.GENERIC


@dataclass(frozen=True)
class DiagnosticStats:
    """Aggregated counts for diagnostics by severity level."""

    n_info: int
    n_warning: int
    n_error: int

    @property
    def total(self) -> int:
        """Return the total count of diagnostics."""
        return self.n_info + self.n_warning + self.n_error


@dataclass
class DiagnosticLog:
    """Mutable, per-file collection of diagnostics.

    Passes append to the log of the document they are working on; the log is
    frozen into the file result once the pipeline has finished.
    """

    items: list[Diagnostic] = field(default_factory=lambda: [])

    def freeze(self) -> FrozenDiagnosticLog:
        """Return an immutable snapshot of this log's diagnostics."""
        return FrozenDiagnosticLog(items=tuple(self.items))

    def _add(self, diagnostic: Diagnostic) -> None:
        self.items.append(diagnostic)
        logger.trace("Adding [%s]: %r", diagnostic.level.value, diagnostic.message)

    def add_info(self, message: str, *, code: DiagnosticCode = DiagnosticCode.GENERIC) -> None:
        """Add an ``info`` diagnostic to the log.

        Args:
            message: The diagnostic message.
            code: Identifier of the reported condition.
        """
        self._add(Diagnostic(DiagnosticLevel.INFO, message, code))

    def add_warning(
        self, message: str, *, code: DiagnosticCode = DiagnosticCode.GENERIC
    ) -> None:
        """Add a ``warning`` diagnostic to the log.

        Args:
            message: The diagnostic message.
            code: Identifier of the reported condition.
        """
        self._add(Diagnostic(DiagnosticLevel.WARNING, message, code))

    def add_error(self, message: str, *, code: DiagnosticCode = DiagnosticCode.GENERIC) -> None:
        """Add an ``error`` diagnostic to the log.

        Args:
            message: The diagnostic message.
            code: Identifier of the reported condition.
        """
        self._add(Diagnostic(DiagnosticLevel.ERROR, message, code))

    def extend(self, diagnostics: Iterable[Diagnostic]) -> None:
        """Append already-built diagnostics (e.g. from loading the standard)."""
        for diagnostic in diagnostics:
            self._add(diagnostic)

    def stats(self) -> DiagnosticStats:
        """Return per-level counts for diagnostics in this log."""
        return compute_diagnostic_stats(self.items)

    def has_warning(self) -> bool:
        """Return True if the log contains warning diagnostics."""
        return any(d.level == DiagnosticLevel.WARNING for d in self.items)

    def has_error(self) -> bool:
        """Return True if the log contains error diagnostics."""
        return any(d.level == DiagnosticLevel.ERROR for d in self.items)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True, slots=True)
class FrozenDiagnosticLog:
    """Immutable diagnostic container stored on file results."""

    items: tuple[Diagnostic, ...] = ()

    def __iter__(self) -> Iterator[Diagnostic]:
        """Iterate over contained diagnostics in insertion order."""
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    @property
    def warnings(self) -> tuple[Diagnostic, ...]:
        """Return the warning diagnostics only."""
        return tuple(d for d in self.items if d.level == DiagnosticLevel.WARNING)

    def with_code(self, code: DiagnosticCode) -> tuple[Diagnostic, ...]:
        """Return the diagnostics carrying ``code``."""
        return tuple(d for d in self.items if d.code == code)

    def stats(self) -> DiagnosticStats:
        """Return aggregated per-level counts for the contained diagnostics."""
        return compute_diagnostic_stats(self.items)


def compute_diagnostic_stats(diagnostics: Iterable[Diagnostic]) -> DiagnosticStats:
    """Return per-level counts for a sequence of diagnostics.

    Args:
        diagnostics: the diagnostics to count.

    Returns:
        DiagnosticStats: counts per severity level.
    """
    n_info = n_warning = n_error = 0
    for d in diagnostics:
        if d.level == DiagnosticLevel.INFO:
            n_info += 1
        elif d.level == DiagnosticLevel.WARNING:
            n_warning += 1
        elif d.level == DiagnosticLevel.ERROR:
            n_error += 1
    return DiagnosticStats(n_info=n_info, n_warning=n_warning, n_error=n_error)
