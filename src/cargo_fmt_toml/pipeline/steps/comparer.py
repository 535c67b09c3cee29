# topmark:header:start
#
#   project      : cargo-fmt-toml
#   file         : comparer.py
#   file_relpath : src/cargo_fmt_toml/pipeline/steps/comparer.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Comparer step: render the document and classify the outcome.

Summary of behavior:
  • Render the (mutated) document and compare it with the input text.
  • Identical text → ``UNCHANGED``.
  • Different text → re-validate the rendering with tomlkit:
      – valid → ``CHANGED`` and ``ctx.output`` holds the new text;
      – invalid → ``ERROR`` (``internal``): the file must be left untouched.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from cargo_fmt_toml.config.logging import get_logger
from cargo_fmt_toml.core.errors import CargoFmtTomlError
from cargo_fmt_toml.document.parser import parse
from cargo_fmt_toml.pipeline.context import ErrorKind, Outcome
from cargo_fmt_toml.pipeline.steps.base import BaseStep

if TYPE_CHECKING:
    from cargo_fmt_toml.config.logging import FmtTomlLogger
    from cargo_fmt_toml.pipeline.context import NormalizeContext

logger: FmtTomlLogger = get_logger(__name__)


class ComparerStep(BaseStep):
    """Render, compare with the input and set ``ctx.outcome``."""

    def __init__(self) -> None:
        super().__init__(name=self.__class__.__name__)

    def may_proceed(self, ctx: NormalizeContext) -> bool:
        """Run only on a parsed document of a non-halted context."""
        return not ctx.is_halted and ctx.document is not None

    def run(self, ctx: NormalizeContext) -> None:
        """Compare the rendered document with the original text."""
        assert ctx.document is not None
        rendered = ctx.document.render()
        if rendered == ctx.text:
            ctx.outcome = Outcome.UNCHANGED
            logger.debug("Comparer: %s -> %s", ctx.path, ctx.outcome.value)
            return

        try:
            parse(rendered)
        except CargoFmtTomlError as exc:
            logger.error("Formatted output for %s is not valid TOML: %s", ctx.path, exc)
            ctx.fail(
                ErrorKind.INTERNAL,
                f"formatted output is not valid TOML ({exc}); file was not modified",
                at_step=self,
            )
            return

        ctx.output = rendered
        ctx.outcome = Outcome.CHANGED
        logger.debug("Comparer: %s -> %s", ctx.path, ctx.outcome.value)
