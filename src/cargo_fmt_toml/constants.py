# topmark:header:start
#
#   project      : cargo-fmt-toml
#   file         : constants.py
#   file_relpath : src/cargo_fmt_toml/constants.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""cargo-fmt-toml constants."""

from __future__ import annotations

from importlib.metadata import version as get_version

CARGO_FMT_TOML_VERSION: str = get_version("cargo-fmt-toml")

MANIFEST_NAME: str = "Cargo.toml"

# Name under which cargo invokes the tool as a subcommand (``cargo fmt-toml``).
CARGO_SUBCOMMAND: str = "fmt-toml"
