# topmark:header:start
#
#   project      : cargo-fmt-toml
#   file         : diff.py
#   file_relpath : src/cargo_fmt_toml/utils/diff.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Unified diff helpers for ``--diff`` output.

`unified_diff` builds the patch between the original and the normalized
manifest; `render_patch` formats a colorized preview for the CLI.
"""

from __future__ import annotations

import difflib
from typing import Sequence

from yachalk import chalk

from cargo_fmt_toml.config.logging import get_logger

logger = get_logger(__name__)


def unified_diff(path: str, current: str, updated: str) -> str:
    """Return the unified diff between two manifest texts.

    Line endings are kept as they are in both texts (CRLF shows up as ``\\r``
    in the colorized preview).

    Args:
        path: Path used in the ``---``/``+++`` header lines.
        current: Original text.
        updated: Normalized text.

    Returns:
        str: The patch, or an empty string when the texts are equal.
    """
    patch_lines = list(
        difflib.unified_diff(
            current.splitlines(keepends=True),
            updated.splitlines(keepends=True),
            fromfile=f"{path} (current)",
            tofile=f"{path} (updated)",
            n=3,
        )
    )
    logger.trace("diff for %s: %d line(s)", path, len(patch_lines))
    # difflib leaves a line without terminator unterminated; keep the patch line-based.
    return "".join(line if line.endswith("\n") else line + "\n" for line in patch_lines)


def render_patch(patch: Sequence[str] | str, show_line_numbers: bool = False) -> str:
    """Render a colorized preview of a unified diff.

    Args:
        patch: A unified diff as **either** a list/sequence of lines **or** a single
            multiline string.
        show_line_numbers: Whether to prefix output with line numbers.

    Returns:
        The formatted, colorized diff preview.
    """
    if isinstance(patch, str):
        lines: list[str] = patch.splitlines(keepends=False)
    else:
        lines = [line.rstrip("\n") for line in patch]

    # Map diff markers to colors and show carriage returns explicitly.
    def process_line(line: str) -> str:
        content = line.replace("\r", "\\r")
        match line[:1]:
            case "-":
                return chalk.bold.red(content)
            case "+":
                return chalk.bold.green(content)
            case "@":
                return chalk.cyan(content)
            case _:
                return chalk.white(content)

    if show_line_numbers is True:
        return "".join(f"{i:04d}|{process_line(line)}\n" for i, line in enumerate(lines, 1))
    return "".join(f"{process_line(line)}\n" for line in lines)
