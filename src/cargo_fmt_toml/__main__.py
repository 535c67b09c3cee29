# topmark:header:start
#
#   project      : cargo-fmt-toml
#   file         : __main__.py
#   file_relpath : src/cargo_fmt_toml/__main__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Module entry point for running cargo-fmt-toml via ``python -m cargo_fmt_toml``.

It delegates directly to :func:`cargo_fmt_toml.cli.main.cli`, the same entry
point as the ``cargo-fmt-toml`` console script.

Examples:
    Format the workspace in the current directory::

        python -m cargo_fmt_toml fmt-toml --workspace-path .
"""

from __future__ import annotations

from cargo_fmt_toml.cli.main import cli

if __name__ == "__main__":
    cli()
