# topmark:header:start
#
#   project      : cargo-fmt-toml
#   file         : __init__.py
#   file_relpath : src/cargo_fmt_toml/core/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Core primitives shared by the document model and the pipeline (errors, diagnostics)."""
