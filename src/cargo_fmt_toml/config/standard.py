# topmark:header:start
#
#   project      : cargo-fmt-toml
#   file         : standard.py
#   file_relpath : src/cargo_fmt_toml/config/standard.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""The normalization standard: canonical section order and package template.

This module defines:
    - `Standard`: an immutable snapshot threaded into every pipeline call.
    - `MutableStandard`: a mutable builder used while loading overrides; it is
      frozen into a `Standard` and can be thawed back for edits.

There is no process-wide standard: callers pass one explicitly (or get
[`default_standard`][cargo_fmt_toml.config.standard.default_standard]), so
several standards can be used side by side (e.g. in tests or thread pools).

Default section order:
    ``package``, the three dependency tables, then ``target``. Every other
    table (``lib``, ``[[bin]]``, ``[[test]]``, ``[[bench]]``, ``[[example]]``,
    ``features``, ``workspace``, ``profile``, ...) keeps its original relative
    order after those, so build-target tables are not pulled between
    ``package`` and the dependencies and ``features`` is not pushed after
    ``target``. Projects that want the longer
    ordering (``package``, ``lib``, ``bin``, ``test``, ``bench``, ``example``,
    the dependency tables, ``target``, ``features``) set it with
    ``section-order`` below.

TOML shape of overrides (read from ``[workspace.metadata.fmt-toml]``):

    ```toml
    [workspace.metadata.fmt-toml]
    section-order = ["package", "dependencies", "dev-dependencies", "build-dependencies", "target"]
    package-fields = ["name", "description", "version", "edition"]
    workspace-fields = ["version", "edition"]
    dependency-tables = ["dependencies", "dev-dependencies", "build-dependencies"]
    ```
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Final

from cargo_fmt_toml.config.io import (
    STANDARD_TABLE_PATH,
    get_string_list_value_checked,
    get_table_value,
    load_toml_dict,
)
from cargo_fmt_toml.config.logging import get_logger
from cargo_fmt_toml.core.diagnostics import DiagnosticCode, DiagnosticLog

if TYPE_CHECKING:
    from cargo_fmt_toml.config.io import TomlTable
    from cargo_fmt_toml.config.logging import FmtTomlLogger

logger: FmtTomlLogger = get_logger(__name__)

DEFAULT_SECTION_ORDER: Final[tuple[str, ...]] = (
    "package",
    "dependencies",
    "dev-dependencies",
    "build-dependencies",
    "target",
)

DEFAULT_PACKAGE_FIELDS: Final[tuple[str, ...]] = (
    "name",
    "description",
    "version",
    "edition",
    "license-file",
    "authors",
    "rust-version",
    "readme",
)

DEFAULT_WORKSPACE_FIELDS: Final[frozenset[str]] = frozenset(
    {"version", "edition", "license-file", "authors", "rust-version"}
)

DEFAULT_DEPENDENCY_TABLES: Final[tuple[str, ...]] = (
    "dependencies",
    "dev-dependencies",
    "build-dependencies",
)

STANDARD_SETTINGS: Final[tuple[str, ...]] = (
    "section-order",
    "package-fields",
    "workspace-fields",
    "dependency-tables",
)

TARGET_TABLE: Final[str] = "target"
PACKAGE_TABLE: Final[str] = "package"


class FieldForm(Enum):
    """Required representation of a package template field."""

    ANY = "any"
    """Keep whatever representation is present."""

    WORKSPACE = "workspace"
    """The field must be inherited: ``field = { workspace = true }``."""


@dataclass(frozen=True, slots=True)
class PackageField:
    """One field of the canonical package template."""

    name: str
    form: FieldForm = FieldForm.ANY


@dataclass(frozen=True, slots=True)
class Standard:
    """Immutable normalization standard.

    Attributes:
        section_order: Top-level table names in canonical order; tables not
            listed keep their original relative order after the listed ones.
        package_fields: The package template, in canonical field order.
        dependency_tables: Table names sorted alphabetically, both at the top
            level and under ``target.<cfg>``.
    """

    section_order: tuple[str, ...] = DEFAULT_SECTION_ORDER
    package_fields: tuple[PackageField, ...] = tuple(
        PackageField(
            name,
            FieldForm.WORKSPACE if name in DEFAULT_WORKSPACE_FIELDS else FieldForm.ANY,
        )
        for name in DEFAULT_PACKAGE_FIELDS
    )
    dependency_tables: tuple[str, ...] = DEFAULT_DEPENDENCY_TABLES

    @property
    def package_field_names(self) -> tuple[str, ...]:
        """Return the template field names in canonical order."""
        return tuple(f.name for f in self.package_fields)

    def section_rank(self, name: str) -> int:
        """Return the canonical rank of a top-level table name (unknown names rank last)."""
        try:
            return self.section_order.index(name)
        except ValueError:
            return len(self.section_order)

    def is_dependency_table(self, key: tuple[str, ...]) -> bool:
        """Return True if ``key`` names a dependencies-like table.

        Recognized: ``<dep>`` and ``target.<cfg>.<dep>`` for every configured
        dependency table name.
        """
        if len(key) == 1:
            return key[0] in self.dependency_tables
        return len(key) == 3 and key[0] == TARGET_TABLE and key[2] in self.dependency_tables

    def is_collapsible_parent(self, key: tuple[str, ...]) -> bool:
        """Return True if direct sub-tables of ``key`` may be collapsed into inline tables."""
        return key == (PACKAGE_TABLE,) or self.is_dependency_table(key)

    def thaw(self) -> MutableStandard:
        """Return a mutable copy of this standard."""
        return MutableStandard(
            section_order=list(self.section_order),
            package_fields=[f.name for f in self.package_fields],
            workspace_fields={
                f.name for f in self.package_fields if f.form is FieldForm.WORKSPACE
            },
            dependency_tables=list(self.dependency_tables),
        )


@dataclass
class MutableStandard:
    """Mutable builder for [`Standard`][cargo_fmt_toml.config.standard.Standard].

    Problems found while loading overrides are recorded in ``diagnostics`` as
    warnings; the offending keys keep their previous value.
    """

    section_order: list[str] = field(default_factory=lambda: list(DEFAULT_SECTION_ORDER))
    package_fields: list[str] = field(default_factory=lambda: list(DEFAULT_PACKAGE_FIELDS))
    workspace_fields: set[str] = field(default_factory=lambda: set(DEFAULT_WORKSPACE_FIELDS))
    dependency_tables: list[str] = field(
        default_factory=lambda: list(DEFAULT_DEPENDENCY_TABLES)
    )
    diagnostics: DiagnosticLog = field(default_factory=DiagnosticLog)

    @classmethod
    def from_defaults(cls) -> MutableStandard:
        """Return a builder holding the built-in standard."""
        return cls()

    def apply_toml_dict(self, table: TomlTable) -> MutableStandard:
        """Apply overrides from a ``[workspace.metadata.fmt-toml]`` table.

        Args:
            table: The plain-dict form of the override table.

        Returns:
            MutableStandard: ``self``, for chaining.
        """
        overrides: dict[str, list[str]] = {}
        for key in STANDARD_SETTINGS:
            if key not in table:
                continue
            value = get_string_list_value_checked(table, key, diagnostics=self.diagnostics)
            if value is not None:
                overrides[key] = value
        for key in sorted(set(table) - set(STANDARD_SETTINGS)):
            self.diagnostics.add_warning(
                f"Unknown standard setting '{key}' ignored", code=DiagnosticCode.INVALID_STANDARD
            )
            logger.warning("Unknown standard setting '%s' ignored", key)

        if "section-order" in overrides:
            self.section_order = _dedupe(overrides["section-order"])
        if "package-fields" in overrides:
            self.package_fields = _dedupe(overrides["package-fields"])
        if "workspace-fields" in overrides:
            self.workspace_fields = set(overrides["workspace-fields"])
        if "dependency-tables" in overrides:
            self.dependency_tables = _dedupe(overrides["dependency-tables"])

        stray = sorted(self.workspace_fields - set(self.package_fields))
        if stray:
            self.diagnostics.add_warning(
                "workspace-fields not listed in package-fields are ignored: " + ", ".join(stray),
                code=DiagnosticCode.INVALID_STANDARD,
            )
        return self

    def freeze(self) -> Standard:
        """Return the immutable standard described by this builder."""
        return Standard(
            section_order=tuple(self.section_order),
            package_fields=tuple(
                PackageField(
                    name,
                    FieldForm.WORKSPACE if name in self.workspace_fields else FieldForm.ANY,
                )
                for name in self.package_fields
            ),
            dependency_tables=tuple(self.dependency_tables),
        )


def _dedupe(values: list[str]) -> list[str]:
    return list(dict.fromkeys(values))


def default_standard() -> Standard:
    """Return the built-in standard."""
    return Standard()


def load_standard(manifest_text: str) -> MutableStandard:
    """Read standard overrides from a workspace root manifest.

    Overrides live under ``[workspace.metadata.fmt-toml]``; a manifest without
    that table yields the built-in standard.

    Args:
        manifest_text: Text of the workspace root ``Cargo.toml``.

    Returns:
        MutableStandard: The builder with overrides applied (call ``freeze()``).

    Raises:
        RuntimeError: If the manifest is not valid TOML.
    """
    data = load_toml_dict(manifest_text)
    table = get_table_value(data, STANDARD_TABLE_PATH)
    builder = MutableStandard.from_defaults()
    if table:
        logger.debug("applying standard overrides: %s", sorted(table))
        builder.apply_toml_dict(table)
    return builder
