# topmark:header:start
#
#   project      : cargo-fmt-toml
#   file         : pipelines.py
#   file_relpath : src/cargo_fmt_toml/pipeline/pipelines.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""The normalization pipeline (immutable, typed step sequence).

```mermaid
flowchart LR
  R[reader] --> C[collapser] --> O[reorderer] --> F[formatter] --> S[sorter] --> K[comparer]
```

Notes:
* The order of the passes is fixed: each pass consumes the tree mutated by
  the previous one (the sorter also sorts tables created by the collapser).
* Steps are instantiated objects holding no per-file state, so one pipeline
  is shared by all worker threads.
"""

from __future__ import annotations

from typing import Final

from cargo_fmt_toml.pipeline.contracts import Step

from .steps import collapser, comparer, formatter, reader, reorderer, sorter

NORMALIZE_PIPELINE: Final[tuple[Step, ...]] = (
    reader.ReaderStep(),  # Parse the manifest into a document
    collapser.CollapserStep(),  # Fold sub-tables into inline tables
    reorderer.ReordererStep(),  # Canonical top-level section order
    formatter.FormatterStep(),  # Package template (order + inherited fields)
    sorter.SorterStep(),  # Alphabetical dependency tables
    comparer.ComparerStep(),  # Render and compare with the input
)
