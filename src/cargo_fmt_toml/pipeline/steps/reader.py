# topmark:header:start
#
#   project      : cargo-fmt-toml
#   file         : reader.py
#   file_relpath : src/cargo_fmt_toml/pipeline/steps/reader.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Reader step: parse the manifest text into a document.

Structural failures do not propagate: a
[`ParseError`][cargo_fmt_toml.core.errors.ParseError] or
[`DuplicateKeyError`][cargo_fmt_toml.core.errors.DuplicateKeyError] is turned
into a file-scoped error on the context and the flow is halted, so a batch
keeps going with the next manifest.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from cargo_fmt_toml.config.logging import get_logger
from cargo_fmt_toml.core.errors import DuplicateKeyError, ParseError
from cargo_fmt_toml.document.parser import parse
from cargo_fmt_toml.pipeline.context import ErrorKind
from cargo_fmt_toml.pipeline.steps.base import BaseStep

if TYPE_CHECKING:
    from cargo_fmt_toml.config.logging import FmtTomlLogger
    from cargo_fmt_toml.pipeline.context import NormalizeContext

logger: FmtTomlLogger = get_logger(__name__)


class ReaderStep(BaseStep):
    """Parse ``ctx.text`` and store the document on the context.

    Sets:
      - ``ctx.document`` on success.
      - ``ctx.error`` (``parse`` or ``duplicate_key``) on failure.
    """

    def __init__(self) -> None:
        super().__init__(name=self.__class__.__name__)

    def run(self, ctx: NormalizeContext) -> None:
        """Parse the manifest text."""
        try:
            ctx.document = parse(ctx.text)
        except DuplicateKeyError as exc:
            logger.info("%s: %s", ctx.path, exc)
            ctx.fail(ErrorKind.DUPLICATE_KEY, str(exc), at_step=self)
        except ParseError as exc:
            logger.info("%s: %s", ctx.path, exc)
            ctx.fail(ErrorKind.PARSE, str(exc), at_step=self)
