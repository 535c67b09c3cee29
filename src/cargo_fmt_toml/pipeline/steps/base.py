# topmark:header:start
#
#   project      : cargo-fmt-toml
#   file         : base.py
#   file_relpath : src/cargo_fmt_toml/pipeline/steps/base.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Base classes for class-based pipeline steps.

The runner invokes steps as *callables*. `BaseStep` implements the common
lifecycle:

    ctx = step(ctx)  # internally: may_proceed → run?

`TransformStep` is the base of the four normalization passes: it runs only on
a parsed, non-halted document and records the pass's change count.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from cargo_fmt_toml.config.logging import get_logger

if TYPE_CHECKING:
    from cargo_fmt_toml.config.logging import FmtTomlLogger
    from cargo_fmt_toml.config.standard import Standard
    from cargo_fmt_toml.core.diagnostics import DiagnosticLog
    from cargo_fmt_toml.document.model import Document
    from cargo_fmt_toml.pipeline.context import NormalizeContext

logger: FmtTomlLogger = get_logger(__name__)


@dataclass
class BaseStep:
    """Reusable foundation for pipeline steps.

    Subclass this to implement a concrete step by overriding ``may_proceed()``
    and ``run()``. Do not override ``__call__`` unless you need custom
    lifecycle behavior.

    Attributes:
        name (str): Stable step identifier for logs and change counts.
    """

    name: str

    def __call__(self, ctx: NormalizeContext) -> NormalizeContext:
        """Invoke the step lifecycle: gate → run (if allowed).

        Args:
            ctx (NormalizeContext): The mutable context for the current file.

        Returns:
            NormalizeContext: The same context instance after mutation.
        """
        ctx.steps.append(self)

        if self.may_proceed(ctx):
            logger.trace("Pipeline step %s - running for %s", self.name, ctx.path)
            self.run(ctx)
            if ctx.is_halted:
                logger.info("⚠️ Pipeline halted by %s: %s", ctx.flow.at_step, ctx.flow.reason)
        else:
            logger.trace("Pipeline step %s may not proceed for %s", self.name, ctx.path)
        return ctx

    def may_proceed(self, ctx: NormalizeContext) -> bool:
        """Return whether the step should run given the current context.

        Default: run unless the flow has been halted.
        """
        return not ctx.is_halted

    def run(self, ctx: NormalizeContext) -> None:
        """Perform the step's primary work, mutating ``ctx`` in place."""
        pass


class TransformStep(BaseStep):
    """A normalization pass over the parsed document.

    Subclasses implement ``apply()`` and set ``summary``; the returned count is
    recorded on the context under the step name.
    """

    summary: str = ""

    def __init__(self) -> None:
        super().__init__(name=self.__class__.__name__)

    def may_proceed(self, ctx: NormalizeContext) -> bool:
        """Run only on a parsed document of a non-halted context."""
        return not ctx.is_halted and ctx.document is not None

    def run(self, ctx: NormalizeContext) -> None:
        """Apply the pass and record its change count."""
        assert ctx.document is not None
        count = self.apply(ctx.document, ctx.standard, ctx.diagnostics)
        ctx.record_changes(self, count, summary=self.summary)

    def apply(self, document: Document, standard: Standard, diagnostics: DiagnosticLog) -> int:
        """Mutate ``document`` in place and return the number of changes made."""
        raise NotImplementedError
