# topmark:header:start
#
#   project      : cargo-fmt-toml
#   file         : __init__.py
#   file_relpath : src/cargo_fmt_toml/config/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Configuration layer: logging, the normalization standard and its TOML loader.

The standard (canonical section order, package template, dependency tables) is
an explicit, immutable value threaded into every pipeline call. Import it from
[`cargo_fmt_toml.config.standard`][cargo_fmt_toml.config.standard]; this package
module stays import-free so that `config.logging` can be imported from anywhere
without cycles.
"""
