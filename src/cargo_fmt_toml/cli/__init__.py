# topmark:header:start
#
#   project      : cargo-fmt-toml
#   file         : __init__.py
#   file_relpath : src/cargo_fmt_toml/cli/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Command-line interface: workspace discovery, file I/O and exit codes.

The CLI is glue around [`cargo_fmt_toml.api`][cargo_fmt_toml.api]; the core
never reads or writes files itself.
"""
