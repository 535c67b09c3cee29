# topmark:header:start
#
#   project      : cargo-fmt-toml
#   file         : reorderer.py
#   file_relpath : src/cargo_fmt_toml/pipeline/steps/reorderer.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Section reorderer: put top-level tables in canonical order.

Sections are stable-sorted by the rank of their top-level name in the
standard's section order; names that are not listed share the last rank and
keep their original relative order. Sub-tables rank with their top-level name
(``[package.metadata.docs.rs]`` ranks as ``package``). The root section never
moves, and leading comment blocks move with their header.

Only the first ``[package]`` section ranks as ``package``; any later
``package`` header ranks with the unlisted names.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from cargo_fmt_toml.config.logging import get_logger
from cargo_fmt_toml.config.standard import PACKAGE_TABLE
from cargo_fmt_toml.document.model import is_blank
from cargo_fmt_toml.pipeline.steps.base import TransformStep

if TYPE_CHECKING:
    from cargo_fmt_toml.config.logging import FmtTomlLogger
    from cargo_fmt_toml.config.standard import Standard
    from cargo_fmt_toml.core.diagnostics import DiagnosticLog
    from cargo_fmt_toml.document.model import Document, Section

logger: FmtTomlLogger = get_logger(__name__)


def _ensure_separator(section: Section, newline: str) -> None:
    if not section.leading or not is_blank(section.leading[0]):
        section.leading.insert(0, newline)


def reorder_sections(document: Document, standard: Standard, diagnostics: DiagnosticLog) -> int:
    """Stable-sort the document's sections into canonical order.

    When the order changes, separators are normalized for every section whose
    predecessor changed: the section that becomes the first thing in the file
    loses its leading blank lines, every other one gets at least one.

    Args:
        document: The document to mutate in place.
        standard: Provides the canonical section order.
        diagnostics: Unused; kept for the common pass signature.

    Returns:
        int: ``1`` if the order changed, ``0`` otherwise.
    """
    sections = document.sections
    first_package = next((s for s in sections if s.key == (PACKAGE_TABLE,)), None)
    last_rank = len(standard.section_order)

    def rank(section: Section) -> int:
        if section.key == (PACKAGE_TABLE,) and section is not first_package:
            return last_rank
        return standard.section_rank(section.top)

    ordered = sorted(sections, key=rank)
    if all(a is b for a, b in zip(ordered, sections)):
        return 0

    predecessor: dict[int, Section | None] = {
        id(s): (sections[i - 1] if i else None) for i, s in enumerate(sections)
    }
    root_renders = any(document.root.chunks())
    for i, section in enumerate(ordered):
        previous = ordered[i - 1] if i else None
        if predecessor[id(section)] is previous:
            continue
        if previous is None and not root_renders:
            section.strip_leading_blanks()
        else:
            _ensure_separator(section, document.newline)

    document.sections = ordered
    logger.debug("reordered sections: %s", ", ".join(s.display for s in ordered))
    return 1


class ReordererStep(TransformStep):
    """Sort top-level tables into canonical order."""

    summary = "Reordered sections"

    def apply(self, document: Document, standard: Standard, diagnostics: DiagnosticLog) -> int:
        """Run [`reorder_sections`][cargo_fmt_toml.pipeline.steps.reorderer.reorder_sections]."""
        return reorder_sections(document, standard, diagnostics)
