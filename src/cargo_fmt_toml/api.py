# topmark:header:start
#
#   project      : cargo-fmt-toml
#   file         : api.py
#   file_relpath : src/cargo_fmt_toml/api.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Public cargo-fmt-toml API (stable surface).

This module exposes a **small, typed API** for integrations that want to
normalize manifests programmatically without going through the CLI. The core
never touches the filesystem: callers pass ``(path, text)`` and get a
[`FileResult`][cargo_fmt_toml.pipeline.context.FileResult] back.

```python
from cargo_fmt_toml import api

result = api.normalize_text(text, path="crates/foo/Cargo.toml")
if result.is_changed:
    print(result.text)
```

Configuration contract
----------------------
- Functions accept a frozen [`Standard`][cargo_fmt_toml.config.standard.Standard]
  (``None`` means the built-in default). Build one with
  [`MutableStandard`][cargo_fmt_toml.config.standard.MutableStandard] and
  ``freeze()`` it before the call.
- The standard is the only value shared between worker threads.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

from cargo_fmt_toml.config.logging import get_logger
from cargo_fmt_toml.config.standard import (
    MutableStandard,
    Standard,
    default_standard,
)
from cargo_fmt_toml.pipeline.context import (
    ErrorKind,
    FileError,
    FileResult,
    NormalizeContext,
    Outcome,
)
from cargo_fmt_toml.pipeline.pipelines import NORMALIZE_PIPELINE
from cargo_fmt_toml.pipeline.runner import run

if TYPE_CHECKING:
    from collections.abc import Iterable

    from cargo_fmt_toml.config.logging import FmtTomlLogger

logger: FmtTomlLogger = get_logger(__name__)

__all__: list[str] = [
    "ErrorKind",
    "FileError",
    "FileResult",
    "MutableStandard",
    "Outcome",
    "Standard",
    "default_standard",
    "normalize_batch",
    "normalize_text",
]


def normalize_text(
    text: str,
    *,
    path: str = "<memory>",
    standard: Standard | None = None,
) -> FileResult:
    """Normalize one manifest.

    Args:
        text: The manifest text.
        path: Identity of the manifest, echoed in the result and in messages.
        standard: The normalization standard (default: the built-in one).

    Returns:
        FileResult: ``unchanged``, ``changed`` (with the new text) or ``error``.
    """
    ctx = NormalizeContext.bootstrap(
        path=path,
        text=text,
        standard=standard if standard is not None else default_standard(),
    )
    ctx = run(ctx, NORMALIZE_PIPELINE)
    result = ctx.to_result()
    logger.info("%s: %s (%d change(s))", path, result.outcome.value, result.changes)
    return result


def normalize_batch(
    inputs: Iterable[tuple[str, str]],
    *,
    standard: Standard | None = None,
    max_workers: int | None = None,
) -> list[FileResult]:
    """Normalize several manifests, possibly in parallel.

    Errors are file-scoped: a manifest that fails to parse yields an ``error``
    result and the rest of the batch is still processed.

    Args:
        inputs: ``(path, text)`` pairs.
        standard: The normalization standard shared by all workers.
        max_workers: Worker thread count (``None``: executor default; ``1``
            processes the batch sequentially in the calling thread).

    Returns:
        list[FileResult]: One result per input, in input order.
    """
    effective = standard if standard is not None else default_standard()
    items = list(inputs)
    if max_workers == 1 or len(items) <= 1:
        return [normalize_text(text, path=path, standard=effective) for path, text in items]

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [
            executor.submit(normalize_text, text, path=path, standard=effective)
            for path, text in items
        ]
        return [future.result() for future in futures]
