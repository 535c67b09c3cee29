# topmark:header:start
#
#   project      : cargo-fmt-toml
#   file         : collapser.py
#   file_relpath : src/cargo_fmt_toml/pipeline/steps/collapser.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Table collapser: fold explicit sub-tables into inline tables.

A sub-table ``[P.k]`` whose parent ``P`` is a collapsible parent (``package``
and every dependencies-like table) is rewritten as ``k = { a = 1, b = "x" }``
inside ``[P]``:

    [dependencies.foo]          [dependencies]
    version = "1"        →      foo = { version = "1", features = ["x"] }
    features = ["x"]

Sub-tables that have deeper sub-tables of their own, or that hold a value
spanning several lines, are kept as-is (an info diagnostic says why).
Arrays of tables are never collapsed.

Comments:
    * comment lines above the sub-table header become leading comments of the
      new entry (blank lines are dropped);
    * a comment on the header line moves to the end of the new entry line;
    * comments attached to sub-keys, or trailing the sub-table, have no place
      in a one-line inline table: they are dropped and reported as
      ``ambiguous-comment-relocation`` warnings.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from cargo_fmt_toml.config.logging import get_logger
from cargo_fmt_toml.core.diagnostics import DiagnosticCode
from cargo_fmt_toml.document.model import Entry, Section, is_blank, is_comment, line_ending
from cargo_fmt_toml.pipeline.steps.base import TransformStep

if TYPE_CHECKING:
    from cargo_fmt_toml.config.logging import FmtTomlLogger
    from cargo_fmt_toml.config.standard import Standard
    from cargo_fmt_toml.core.diagnostics import DiagnosticLog
    from cargo_fmt_toml.document.model import Document

logger: FmtTomlLogger = get_logger(__name__)


def render_inline_table(entries: list[Entry]) -> str:
    """Return ``{ k = v, ... }`` built from the raw key and value text of ``entries``."""
    if not entries:
        return "{}"
    return "{ " + ", ".join(f"{e.raw_key} = {e.value}" for e in entries) + " }"


def _skip_reason(document: Document, child: Section) -> str | None:
    if document.has_array(child.key[:-1]):
        return "its parent is an array of tables"
    if any(s.is_descendant_of(child.key) for s in document.sections):
        return "it has nested sub-tables"
    if any(e.is_multiline for e in child.entries):
        return "it holds a multi-line value"
    return None


def _ambiguous_comments(child: Section) -> list[str]:
    """Return the comments of ``child`` that cannot be placed on the inline entry."""
    found: list[str] = [line.strip() for line in child.intro if is_comment(line)]
    for entry in child.entries:
        found.extend(line.strip() for line in entry.leading if is_comment(line))
        if entry.comment is not None:
            found.append(entry.comment)
    found.extend(line.strip() for line in child.trailing if is_comment(line))
    return found


def _entry_suffix(child: Section) -> str:
    """Return the suffix of the inline entry: the header comment plus a line ending."""
    last = child.entries[-1].suffix if child.entries else child.header_suffix
    ending = line_ending(last)
    if child.header_comment is None:
        return ending
    # Keep the whitespace that separated the header from its comment.
    header_ending = line_ending(child.header_suffix)
    return child.header_suffix[: len(child.header_suffix) - len(header_ending)] + ending


def _collapse_one(document: Document, child: Section, diagnostics: DiagnosticLog) -> None:
    parent_key = child.key[:-1]
    blanks = [line for line in child.leading if is_blank(line)]
    comments = [line for line in child.leading if not is_blank(line)]

    for comment in _ambiguous_comments(child):
        message = f"Dropped comment {comment!r} while collapsing {child.display}"
        diagnostics.add_warning(message, code=DiagnosticCode.AMBIGUOUS_COMMENT_RELOCATION)
        logger.info(message)

    entry = Entry.create(
        child.raw_parts[-1],
        child.key[-1],
        render_inline_table(child.entries),
        suffix=_entry_suffix(child),
        leading=comments,
    )

    parent = document.find_table(parent_key)
    index = document.sections.index(child)
    if parent is None:
        # Implicit parent: materialize it where the child was.
        parent = Section.table(parent_key, child.raw_parts[:-1], newline=document.newline)
        parent.leading = blanks
        document.sections.insert(index, parent)
        logger.debug("created %s for %s", parent.display, child.display)

    parent.entries.append(entry)
    document.sections.remove(child)
    if index == 0 and document.sections and not any(document.root.chunks()):
        # The new first section starts the file.
        document.sections[0].strip_leading_blanks()


def collapse_tables(document: Document, standard: Standard, diagnostics: DiagnosticLog) -> int:
    """Collapse every eligible sub-table of a collapsible parent.

    Args:
        document: The document to mutate in place.
        standard: Defines which tables are collapsible parents.
        diagnostics: Receives skip notes and dropped-comment warnings.

    Returns:
        int: Number of sub-tables collapsed.
    """
    changes = 0
    for child in list(document.sections):
        if child.is_array or len(child.key) < 2:
            continue
        if not standard.is_collapsible_parent(child.key[:-1]):
            continue
        reason = _skip_reason(document, child)
        if reason is not None:
            diagnostics.add_info(
                f"Kept {child.display} as a table: {reason}", code=DiagnosticCode.COLLAPSE_SKIPPED
            )
            continue
        _collapse_one(document, child, diagnostics)
        changes += 1
    return changes


class CollapserStep(TransformStep):
    """Fold sub-tables of collapsible parents into inline tables."""

    summary = "Collapsed nested tables into inline entries"

    def apply(self, document: Document, standard: Standard, diagnostics: DiagnosticLog) -> int:
        """Run [`collapse_tables`][cargo_fmt_toml.pipeline.steps.collapser.collapse_tables]."""
        return collapse_tables(document, standard, diagnostics)
