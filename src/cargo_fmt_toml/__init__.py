# topmark:header:start
#
#   project      : cargo-fmt-toml
#   file         : __init__.py
#   file_relpath : src/cargo_fmt_toml/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""cargo-fmt-toml package.

cargo-fmt-toml normalizes ``Cargo.toml`` manifests into a canonical shape
(collapsed sub-tables, canonical section and ``[package]`` field order, sorted
dependencies) while preserving every comment and formatting choice it was not
asked to change. It exposes both a CLI and a small typed API
([`cargo_fmt_toml.api`][cargo_fmt_toml.api]).
"""

from __future__ import annotations
