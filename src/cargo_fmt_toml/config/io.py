# topmark:header:start
#
#   project      : cargo-fmt-toml
#   file         : io.py
#   file_relpath : src/cargo_fmt_toml/config/io.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""TOML helpers for reading the normalization standard.

Standard overrides live in the workspace root manifest under
``[workspace.metadata.fmt-toml]`` (Cargo ignores ``metadata`` tables, which makes
them the conventional place for tool settings). Parsing is done with `tomlkit`
and returned as plain `dict` structures.

The checked getters validate the expected shape and record **warnings** in a
`DiagnosticLog` (and also log a warning), so user mistakes are surfaced without
crashing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Final

import tomlkit
from tomlkit.exceptions import TOMLKitError

from cargo_fmt_toml.config.logging import get_logger
from cargo_fmt_toml.core.diagnostics import DiagnosticCode

if TYPE_CHECKING:
    from cargo_fmt_toml.config.logging import FmtTomlLogger
    from cargo_fmt_toml.core.diagnostics import DiagnosticLog

logger: FmtTomlLogger = get_logger(__name__)

TomlTable = dict[str, Any]

STANDARD_TABLE_PATH: Final[tuple[str, ...]] = ("workspace", "metadata", "fmt-toml")


def load_toml_dict(text: str) -> TomlTable:
    """Parse TOML text into a plain dict.

    Args:
        text: TOML document text.

    Returns:
        TomlTable: The unwrapped document.

    Raises:
        RuntimeError: If the TOML document cannot be parsed.
    """
    try:
        doc: tomlkit.TOMLDocument = tomlkit.parse(text.removeprefix("\ufeff"))
    except TOMLKitError as exc:
        # ParseError and structural errors such as KeyAlreadyPresent
        raise RuntimeError(f"Error parsing TOML document: {exc}") from exc
    data: Any = doc.unwrap()
    return data


def get_table_value(table: TomlTable, path: tuple[str, ...]) -> TomlTable:
    """Return the sub-table at ``path`` (or an empty dict when absent or not a table)."""
    current: Any = table
    for key in path:
        if not isinstance(current, dict):
            return {}
        current = current.get(key, {})
    if not isinstance(current, dict):
        logger.debug("Value at %s is not a table: %r", ".".join(path), current)
        return {}
    return current


def get_string_list_value_checked(
    table: TomlTable,
    key: str,
    *,
    diagnostics: DiagnosticLog,
) -> list[str] | None:
    """Extract a list of strings, recording warnings for malformed values.

    Non-string items are dropped with a warning. A value that is not a list at
    all yields ``None`` (the caller keeps its previous setting).

    Args:
        table: Table to query.
        key: Key to extract.
        diagnostics: Log receiving warnings.

    Returns:
        list[str] | None: The string items, or ``None`` when the value is not a list.
    """
    value: Any = table.get(key)
    if not isinstance(value, list):
        message = f"Setting '{key}' must be an array of strings (got {type(value).__name__})"
        diagnostics.add_warning(message, code=DiagnosticCode.INVALID_STANDARD)
        logger.warning(message)
        return None

    items: list[str] = []
    for index, item in enumerate(value):
        if isinstance(item, str):
            items.append(item)
            continue
        message = f"Ignoring non-string item {item!r} at {key}[{index}]"
        diagnostics.add_warning(message, code=DiagnosticCode.INVALID_STANDARD)
        logger.warning(message)
    return items
