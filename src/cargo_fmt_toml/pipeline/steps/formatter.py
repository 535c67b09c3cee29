# topmark:header:start
#
#   project      : cargo-fmt-toml
#   file         : formatter.py
#   file_relpath : src/cargo_fmt_toml/pipeline/steps/formatter.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Package section formatter: canonical field order and inherited fields.

Only the first ``package`` section is formatted. Its entries are grouped by
their first key part (``version.workspace = true`` is part of the ``version``
field) and reordered: template fields first, in template order, then every
other field in its original relative order.

Template fields with the ``workspace`` form must read ``{ workspace = true }``.
A present field in any other form is rewritten, keeping indentation, key
spelling, ``=`` spacing, trailing comment and leading comments. Missing fields
are never added.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Final

import tomlkit

from cargo_fmt_toml.config.logging import get_logger
from cargo_fmt_toml.config.standard import FieldForm
from cargo_fmt_toml.core.diagnostics import DiagnosticCode
from cargo_fmt_toml.document.model import Entry
from cargo_fmt_toml.pipeline.steps.base import TransformStep

if TYPE_CHECKING:
    from cargo_fmt_toml.config.logging import FmtTomlLogger
    from cargo_fmt_toml.config.standard import Standard
    from cargo_fmt_toml.core.diagnostics import DiagnosticLog
    from cargo_fmt_toml.document.model import Document, Section

logger: FmtTomlLogger = get_logger(__name__)

WORKSPACE_INLINE: Final[str] = "{ workspace = true }"


def field_value(name: str, entries: list[Entry]) -> Any:
    """Return the plain value of the field made of ``entries`` (inline or dotted)."""
    data: dict[str, Any] = {}
    for entry in entries:
        target = data
        for part in entry.key[:-1]:
            target = target.setdefault(part, {})
        target[entry.key[-1]] = entry.item.unwrap()
    return data[name]


def is_workspace_inherited(name: str, entries: list[Entry]) -> bool:
    """Return True if the field reads ``{ workspace = true }`` (inline or dotted)."""
    return field_value(name, entries) == {"workspace": True}


def _inherited_entry(entries: list[Entry], diagnostics: DiagnosticLog) -> Entry:
    first = entries[0]
    leading = [line for e in entries for line in e.leading]
    if len(entries) == 1 and len(first.key) == 1:
        prefix = first.prefix
        raw_key = first.raw_key
        raw_parts = first.raw_parts
    else:
        # Dotted form (``version.workspace = false``): keep only the field name.
        raw_key = first.raw_parts[0]
        raw_parts = (raw_key,)
        prefix = f"{first.indent}{raw_key} = "
    for extra in entries[1:]:
        if extra.comment is not None:
            diagnostics.add_warning(
                f"Dropped comment {extra.comment!r} while rewriting field '{first.name}'",
                code=DiagnosticCode.AMBIGUOUS_COMMENT_RELOCATION,
            )
    return Entry(
        key=(first.name,),
        raw_key=raw_key,
        raw_parts=raw_parts,
        prefix=prefix,
        item=tomlkit.value(WORKSPACE_INLINE),
        suffix=first.suffix,
        leading=leading,
    )


def format_section(section: Section, standard: Standard, diagnostics: DiagnosticLog) -> int:
    """Apply the package template to ``section``.

    Returns:
        int: One change per rewritten field, plus one if the field order changed.
    """
    groups: dict[str, list[Entry]] = {}
    for entry in section.entries:
        groups.setdefault(entry.name, []).append(entry)

    changes = 0
    for template_field in standard.package_fields:
        entries = groups.get(template_field.name)
        if entries is None or template_field.form is not FieldForm.WORKSPACE:
            continue
        if is_workspace_inherited(template_field.name, entries):
            continue
        groups[template_field.name] = [_inherited_entry(entries, diagnostics)]
        logger.debug("rewrote '%s' to %s", template_field.name, WORKSPACE_INLINE)
        changes += 1

    template = standard.package_field_names
    order = [name for name in template if name in groups]
    order.extend(name for name in groups if name not in template)
    if order != list(groups):
        changes += 1

    section.entries = [entry for name in order for entry in groups[name]]
    return changes


def format_package(document: Document, standard: Standard, diagnostics: DiagnosticLog) -> int:
    """Format the first ``package`` section of ``document``.

    Args:
        document: The document to mutate in place.
        standard: Provides the package template.
        diagnostics: Receives the ``multiple-package-sections`` warning.

    Returns:
        int: Number of changes made.
    """
    packages = document.package_sections()
    if not packages:
        return 0
    if len(packages) > 1:
        diagnostics.add_warning(
            f"Found {len(packages)} package sections; only the first one is formatted",
            code=DiagnosticCode.MULTIPLE_PACKAGE_SECTIONS,
        )
    return format_section(packages[0], standard, diagnostics)


class FormatterStep(TransformStep):
    """Apply the package template to the first ``package`` section."""

    summary = "Formatted [package] section"

    def apply(self, document: Document, standard: Standard, diagnostics: DiagnosticLog) -> int:
        """Run [`format_package`][cargo_fmt_toml.pipeline.steps.formatter.format_package]."""
        return format_package(document, standard, diagnostics)
