# topmark:header:start
#
#   project      : cargo-fmt-toml
#   file         : runner.py
#   file_relpath : src/cargo_fmt_toml/pipeline/runner.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Run a normalization pipeline for a single manifest."""

from __future__ import annotations

from typing import TYPE_CHECKING

from cargo_fmt_toml.config.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from cargo_fmt_toml.config.logging import FmtTomlLogger

    from .context import NormalizeContext
    from .contracts import Step

logger: FmtTomlLogger = get_logger(__name__)


def run(ctx: NormalizeContext, steps: Sequence[Step]) -> NormalizeContext:
    """Execute the pipeline sequentially.

    Args:
        ctx (NormalizeContext): Mutable context for one manifest.
        steps (Sequence[Step]): Ordered sequence of pipeline steps.
            Each step takes and returns a context.

    Returns:
        NormalizeContext: The final context after all steps have run.
    """
    logger.debug("running %d step(s) for %s", len(steps), ctx.path)
    for step in steps:
        ctx = step(ctx)
    return ctx
