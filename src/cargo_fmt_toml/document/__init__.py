# topmark:header:start
#
#   project      : cargo-fmt-toml
#   file         : __init__.py
#   file_relpath : src/cargo_fmt_toml/document/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Format-preserving manifest document model (`parse` / `render`)."""

from __future__ import annotations

from cargo_fmt_toml.document.model import Document, Entry, Section, render
from cargo_fmt_toml.document.parser import parse

__all__ = [
    "Document",
    "Entry",
    "Section",
    "parse",
    "render",
]
