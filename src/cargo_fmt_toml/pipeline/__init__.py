# topmark:header:start
#
#   project      : cargo-fmt-toml
#   file         : __init__.py
#   file_relpath : src/cargo_fmt_toml/pipeline/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Normalization pipeline package.

This package contains the components that turn one manifest text into a file
result:

- the per-file context and the frozen result types
  ([`cargo_fmt_toml.pipeline.context`][cargo_fmt_toml.pipeline.context]);
- the steps (reader, the four passes, comparer);
- the pipeline definitions and the sequential runner.
"""
