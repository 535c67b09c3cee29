# topmark:header:start
#
#   project      : cargo-fmt-toml
#   file         : errors.py
#   file_relpath : src/cargo_fmt_toml/cli/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exceptions for the cargo-fmt-toml CLI.

Usage:
    Raise these exceptions in CLI commands to signal errors with standardized
    messages and exit codes.

Styling:
    Exceptions prefer the project console if available (see `show()`); if no
    console is present in the Click context, they fall back to Click's default
    styling.
"""

from __future__ import annotations

from typing import IO, Any

import click

from cargo_fmt_toml.cli.exit_codes import ExitCode


class FmtTomlError(click.ClickException):
    """Base class for all cargo-fmt-toml CLI errors."""

    exit_code = ExitCode.DATA_ERROR

    def format_message(self) -> str:  # pragma: no cover - trivial
        """Return the plain error message text.

        Notes:
            - Unlike Click’s default, this method does not add color.
            - Colorization is applied in `show()` when a project console is present.
        """
        return str(getattr(self, "message", ""))

    def show(self, file: IO[Any] | None = None) -> None:
        """Display the error using the project console if available.

        Falls back to Click’s default error display when no console is present.
        """
        ctx = click.get_current_context(silent=True)
        console = None
        if ctx is not None and isinstance(getattr(ctx, "obj", None), dict):
            console = ctx.obj.get("console")
        if console is not None:
            console.error(f"❌ {self.format_message()}")
            return
        super().show(file)


class FmtTomlFileNotFoundError(FmtTomlError):
    """Error when the workspace manifest does not exist."""

    exit_code = ExitCode.FILE_NOT_FOUND


class FmtTomlIOError(FmtTomlError):
    """Error for I/O errors reading/writing manifests."""

    exit_code = ExitCode.IO_ERROR


class FmtTomlDataError(FmtTomlError):
    """Error when one or more manifests could not be normalized."""

    exit_code = ExitCode.DATA_ERROR
