# topmark:header:start
#
#   project      : cargo-fmt-toml
#   file         : discovery.py
#   file_relpath : src/cargo_fmt_toml/cli/discovery.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Workspace member discovery.

Manifests to format are:
  1. the workspace root manifest, when it declares a ``[package]`` (or when it
     is not a workspace at all);
  2. the ``Cargo.toml`` of every directory matched by ``[workspace] members``
     globs, minus the directories matched by ``[workspace] exclude``.

Exclusions are matched with `pathspec` (gitwildmatch) against the member's
POSIX path relative to the workspace root, so ``crates/legacy`` excludes that
directory and ``crates/experimental-*`` excludes a family of them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pathspec import PathSpec
from pathspec.patterns.gitwildmatch import GitWildMatchPattern

from cargo_fmt_toml.config.io import load_toml_dict
from cargo_fmt_toml.config.logging import get_logger
from cargo_fmt_toml.constants import MANIFEST_NAME

if TYPE_CHECKING:
    from cargo_fmt_toml.config.io import TomlTable
    from cargo_fmt_toml.config.logging import FmtTomlLogger

logger: FmtTomlLogger = get_logger(__name__)


@dataclass
class Workspace:
    """Discovered workspace layout.

    Attributes:
        root: Workspace root directory.
        root_manifest: Path of the root ``Cargo.toml``.
        root_text: Text of the root manifest (read once, reused for formatting
            and for the standard overrides).
        manifests: Manifests to format, root first, members sorted by path.
    """

    root: Path
    root_manifest: Path
    root_text: str
    manifests: list[Path] = field(default_factory=lambda: [])


def _string_list(table: TomlTable, key: str) -> list[str]:
    value: Any = table.get(key, [])
    if not isinstance(value, list):
        logger.warning("[workspace] %s is not an array; ignored", key)
        return []
    return [item for item in value if isinstance(item, str)]


def _rel_for_match(path: Path, base: Path) -> str:
    """Return a POSIX-style relative path for PathSpec matching."""
    return path.relative_to(base).as_posix()


def member_manifests(root: Path, members: list[str], exclude: list[str]) -> list[Path]:
    """Expand ``members`` globs into member manifests, minus ``exclude``.

    Args:
        root: Workspace root directory.
        members: Member globs relative to ``root``.
        exclude: Excluded paths/globs relative to ``root``.

    Returns:
        list[Path]: Existing member manifests, sorted and de-duplicated.
    """
    spec: PathSpec = PathSpec.from_lines(GitWildMatchPattern, exclude)
    found: set[Path] = set()
    for pattern in members:
        if Path(pattern).is_absolute():
            logger.warning("ignoring absolute workspace member pattern %r", pattern)
            continue
        stripped = pattern.strip("/")
        matches = [root] if stripped in ("", ".") else sorted(root.glob(stripped))
        if not matches:
            logger.warning("workspace member pattern %r matched nothing", pattern)
        for directory in matches:
            manifest = directory / MANIFEST_NAME
            if not directory.is_dir() or not manifest.is_file():
                logger.debug("skipping %s: no %s", directory, MANIFEST_NAME)
                continue
            if exclude and spec.match_file(_rel_for_match(directory, root)):
                logger.debug("excluded workspace member %s", directory)
                continue
            found.add(manifest)
    return sorted(found)


def discover(workspace_path: Path) -> Workspace:
    """Discover the manifests of the workspace rooted at ``workspace_path``.

    Args:
        workspace_path: Workspace root directory.

    Returns:
        Workspace: The discovered layout.

    Raises:
        FileNotFoundError: If ``workspace_path`` has no ``Cargo.toml``.
    """
    root = workspace_path.resolve()
    root_manifest = root / MANIFEST_NAME
    if not root_manifest.is_file():
        raise FileNotFoundError(f"No {MANIFEST_NAME} found in {workspace_path}")
    with root_manifest.open("r", encoding="utf-8", newline="") as f:
        root_text = f.read()

    workspace = Workspace(root=root, root_manifest=root_manifest, root_text=root_text)
    try:
        data = load_toml_dict(root_text)
    except RuntimeError as exc:
        # Formatting the root manifest reports the syntax error.
        logger.warning("cannot discover workspace members: %s", exc)
        workspace.manifests = [root_manifest]
        return workspace

    ws_table: Any = data.get("workspace")
    if "package" in data or not isinstance(ws_table, dict):
        workspace.manifests.append(root_manifest)
    if isinstance(ws_table, dict):
        members = member_manifests(
            root, _string_list(ws_table, "members"), _string_list(ws_table, "exclude")
        )
        workspace.manifests.extend(m for m in members if m != root_manifest)
    logger.info("discovered %d manifest(s) under %s", len(workspace.manifests), root)
    return workspace
