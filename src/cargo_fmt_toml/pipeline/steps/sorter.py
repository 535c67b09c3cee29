# topmark:header:start
#
#   project      : cargo-fmt-toml
#   file         : sorter.py
#   file_relpath : src/cargo_fmt_toml/pipeline/steps/sorter.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Dependency sorter: alphabetical entries in dependencies-like tables.

Entries are stable-sorted by their first key part using code point order,
so ``Zlib`` sorts before ``alpha`` and dotted keys of one dependency
(``serde.version``, ``serde.features``) stay together. Leading comment blocks
travel with their entry; the section intro stays at the top and the trailing
block stays at the bottom.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from cargo_fmt_toml.config.logging import get_logger
from cargo_fmt_toml.pipeline.steps.base import TransformStep

if TYPE_CHECKING:
    from cargo_fmt_toml.config.logging import FmtTomlLogger
    from cargo_fmt_toml.config.standard import Standard
    from cargo_fmt_toml.core.diagnostics import DiagnosticLog
    from cargo_fmt_toml.document.model import Document, Section

logger: FmtTomlLogger = get_logger(__name__)


def sort_section(section: Section) -> bool:
    """Sort the entries of ``section`` in place; return True if the order changed."""
    ordered = sorted(section.entries, key=lambda e: e.key[0])
    if all(a is b for a, b in zip(ordered, section.entries)):
        return False
    section.entries = ordered
    return True


def sort_dependencies(document: Document, standard: Standard, diagnostics: DiagnosticLog) -> int:
    """Sort every dependencies-like table of ``document``.

    Args:
        document: The document to mutate in place.
        standard: Defines which tables are dependencies-like.
        diagnostics: Unused; kept for the common pass signature.

    Returns:
        int: Number of tables whose order changed.
    """
    changes = 0
    for section in document.sections:
        if section.is_array or not standard.is_dependency_table(section.key):
            continue
        if sort_section(section):
            logger.debug("sorted %s", section.display)
            changes += 1
    return changes


class SorterStep(TransformStep):
    """Sort dependencies alphabetically."""

    summary = "Sorted dependencies alphabetically"

    def apply(self, document: Document, standard: Standard, diagnostics: DiagnosticLog) -> int:
        """Run [`sort_dependencies`][cargo_fmt_toml.pipeline.steps.sorter.sort_dependencies]."""
        return sort_dependencies(document, standard, diagnostics)
