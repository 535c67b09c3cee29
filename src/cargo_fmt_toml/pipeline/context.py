# topmark:header:start
#
#   project      : cargo-fmt-toml
#   file         : context.py
#   file_relpath : src/cargo_fmt_toml/pipeline/context.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Per-file normalization state and the immutable file result.

Sections:
    Outcome / ErrorKind / FileError:
        Result classification for one manifest.
    FlowControl:
        Lets a step request graceful termination of the pipeline for a file.
    NormalizeContext:
        Mutable state threaded through the steps (text, document, standard,
        diagnostics, per-pass change counts).
    FileResult:
        Frozen summary returned to callers once the pipeline has finished.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from cargo_fmt_toml.config.logging import get_logger
from cargo_fmt_toml.core.diagnostics import (
    DiagnosticCode,
    DiagnosticLog,
    FrozenDiagnosticLog,
)

if TYPE_CHECKING:
    from cargo_fmt_toml.config.logging import FmtTomlLogger
    from cargo_fmt_toml.config.standard import Standard
    from cargo_fmt_toml.document.model import Document
    from cargo_fmt_toml.pipeline.contracts import Step

logger: FmtTomlLogger = get_logger(__name__)

__all__: list[str] = [
    "ErrorKind",
    "FileError",
    "FileResult",
    "FlowControl",
    "NormalizeContext",
    "Outcome",
]


class Outcome(str, Enum):
    """Per-file outcome bucket."""

    PENDING = "pending"
    UNCHANGED = "unchanged"
    CHANGED = "changed"
    ERROR = "error"


class ErrorKind(str, Enum):
    """Why a file could not be normalized."""

    PARSE = "parse"
    DUPLICATE_KEY = "duplicate_key"
    INTERNAL = "internal"


@dataclass(frozen=True)
class FileError:
    """A structural, file-scoped failure.

    Attributes:
        kind: Error classification.
        detail: Human-readable message (location or key path included).
    """

    kind: ErrorKind
    detail: str

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.detail}"


@dataclass
class FlowControl:
    """Execution flow control for the current file."""

    halt: bool = False
    reason: str = ""
    at_step: str = ""


@dataclass
class NormalizeContext:
    """Mutable state for one manifest as it flows through the pipeline.

    Attributes:
        path: Identity of the manifest (used in messages only; the core never
            touches the filesystem).
        text: The original manifest text.
        standard: The normalization standard in effect.
        document: The parsed document (set by the reader step).
        diagnostics: Warnings and info messages collected so far.
        changes: Change count recorded by each transforming pass, by step name.
        steps: Steps that have been invoked for this context, in order.
        flow: Flow control flags.
        error: The structural error that aborted this file, if any.
        output: The rendered text when it differs from ``text``.
        outcome: Outcome classification (set by the comparer or on error).
    """

    path: str
    text: str
    standard: Standard
    document: Document | None = None
    diagnostics: DiagnosticLog = field(default_factory=DiagnosticLog)
    changes: dict[str, int] = field(default_factory=lambda: {})
    steps: list[Step] = field(default_factory=lambda: [])
    flow: FlowControl = field(default_factory=FlowControl)
    error: FileError | None = None
    output: str | None = None
    outcome: Outcome = Outcome.PENDING

    @classmethod
    def bootstrap(cls, *, path: str, text: str, standard: Standard) -> NormalizeContext:
        """Create a fresh context with no derived state."""
        return cls(path=path, text=text, standard=standard)

    @property
    def is_halted(self) -> bool:
        """Return True once a step has stopped the flow."""
        return self.flow.halt

    @property
    def total_changes(self) -> int:
        """Return the sum of the change counts of every pass."""
        return sum(self.changes.values())

    def stop_flow(self, reason: str, at_step: Step) -> None:
        """Request a graceful, terminal stop for the rest of the pipeline.

        Args:
            reason: Short machine-friendly reason code.
            at_step: Step instance requesting the halt.
        """
        logger.info("Flow halted in %s: %s", at_step.name, reason)
        self.flow = FlowControl(halt=True, reason=reason, at_step=at_step.name)

    def fail(self, kind: ErrorKind, detail: str, *, at_step: Step) -> None:
        """Record a file-scoped error and halt the pipeline for this file."""
        self.error = FileError(kind, detail)
        self.outcome = Outcome.ERROR
        self.output = None
        self.stop_flow(kind.value, at_step)

    def record_changes(self, step: Step, count: int, *, summary: str) -> None:
        """Record the change count of a transforming pass.

        Args:
            step: The pass that ran.
            count: Number of changes it made.
            summary: Progress message recorded as an info diagnostic when
                ``count`` is non-zero (e.g. "Sorted dependencies alphabetically").
        """
        self.changes[step.name] = count
        if count:
            self.diagnostics.add_info(summary, code=DiagnosticCode.PASS_APPLIED)
        logger.debug("%s: %s -> %d change(s)", self.path, step.name, count)

    def to_result(self) -> FileResult:
        """Freeze this context into a [`FileResult`][cargo_fmt_toml.pipeline.context.FileResult]."""
        outcome = self.outcome
        if outcome is Outcome.PENDING:
            # Pipelines without a comparer never produce output.
            outcome = Outcome.UNCHANGED
        return FileResult(
            path=self.path,
            outcome=outcome,
            text=self.output if outcome is Outcome.CHANGED else None,
            error=self.error,
            changes=self.total_changes if outcome is not Outcome.ERROR else 0,
            diagnostics=self.diagnostics.freeze(),
        )


@dataclass(frozen=True)
class FileResult:
    """Result of normalizing one manifest.

    Attributes:
        path: Identity of the manifest, as passed in.
        outcome: ``unchanged``, ``changed`` or ``error``.
        text: The normalized text (only when ``outcome`` is ``changed``).
        error: The structural error (only when ``outcome`` is ``error``).
        changes: Total number of changes made by all passes.
        diagnostics: Warnings and info messages collected for this file.
    """

    path: str
    outcome: Outcome
    text: str | None = None
    error: FileError | None = None
    changes: int = 0
    diagnostics: FrozenDiagnosticLog = field(default_factory=FrozenDiagnosticLog)

    @property
    def is_changed(self) -> bool:
        """Return True if the manifest needs rewriting."""
        return self.outcome is Outcome.CHANGED

    @property
    def is_error(self) -> bool:
        """Return True if the manifest could not be normalized."""
        return self.outcome is Outcome.ERROR
