# topmark:header:start
#
#   project      : cargo-fmt-toml
#   file         : contracts.py
#   file_relpath : src/cargo_fmt_toml/pipeline/contracts.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Type contracts for pipeline steps (runner-facing).

Steps are instantiated objects that are *callable*; the runner invokes them as
``step(ctx)`` where ``ctx`` is a `NormalizeContext`.

Lifecycle
---------
1) ``step.may_proceed(ctx)`` gates execution (a halted context skips every step).
2) If allowed, ``step.run(ctx)`` mutates ``ctx`` in place.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .context import NormalizeContext


class Step(Protocol):
    """Protocol for a single pipeline step.

    Implementations typically subclass
    [`BaseStep`][cargo_fmt_toml.pipeline.steps.base.BaseStep].
    """

    name: str

    def __call__(self, ctx: NormalizeContext) -> NormalizeContext:
        """Run the step lifecycle and return the (same) context."""
        ...

    def may_proceed(self, ctx: NormalizeContext) -> bool:
        """Return whether the step should run given the current context."""
        ...

    def run(self, ctx: NormalizeContext) -> None:
        """Execute the step, mutating the context in place.

        Implementations must not raise for expected failures (syntax errors,
        duplicate keys); they record a file error on the context instead.
        """
        ...
