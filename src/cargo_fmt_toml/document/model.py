# topmark:header:start
#
#   project      : cargo-fmt-toml
#   file         : model.py
#   file_relpath : src/cargo_fmt_toml/document/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Format-preserving manifest document model.

A [`Document`][cargo_fmt_toml.document.model.Document] is an editable tree of
sections and entries where every node keeps the exact text it was parsed from:

    Document
      ├── root        (top-level key/values and the file preamble)
      ├── sections    (one per table header, in document order)
      │     ├── leading   comment/blank lines that move with the header
      │     ├── header    raw header line
      │     ├── intro     section-level lines that stay below the header
      │     ├── entries   key/value pairs, each with its own leading lines
      │     └── trailing  comment lines directly after the last entry
      └── epilogue    free-floating lines at the end of the file

Sections and entries are built from the tomlkit tree of the manifest: each
entry holds its tomlkit value item, each section the header tomlkit parsed.

Passes only touch the semantic fields they are responsible for (order of
sections/entries, the value item of one entry); everything else is rendered
from the stored text, so `parse(text).render() == text` holds for any input
that was not mutated.

All stored lines keep their line endings. The only line allowed to lack one is
the last line of the file; [`Document.render`][cargo_fmt_toml.document.model.Document.render]
re-inserts the document's newline if such a line is moved away from the end.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import tomlkit

if TYPE_CHECKING:
    from collections.abc import Iterator

    from tomlkit.items import Item


def is_blank(line: str) -> bool:
    """Return True if ``line`` holds only whitespace (and its line ending)."""
    return not line.strip()


def is_comment(line: str) -> bool:
    """Return True if ``line`` is a standalone comment line."""
    return line.lstrip().startswith("#")


def line_ending(text: str) -> str:
    """Return the line ending that terminates ``text`` ("" when there is none)."""
    if text.endswith("\r\n"):
        return "\r\n"
    if text.endswith("\n"):
        return "\n"
    return ""


def format_key_path(parts: tuple[str, ...]) -> str:
    """Return a display form of a decoded key path (used in messages)."""
    return ".".join(parts)


@dataclass(eq=False)
class Entry:
    """A single key/value pair inside a section.

    The value is the tomlkit item parsed from the manifest; the rest of the
    line is kept as raw text so a pass can swap the item while keeping
    indentation, key spelling, ``=`` spacing and the trailing comment:

        <prefix: indent + raw key + " = "><item.as_string()><suffix: "  # comment" + newline>

    Attributes:
        key: Decoded key parts (``("serde",)`` or ``("version", "workspace")``).
        raw_key: Key text as written (quotes and dots included).
        raw_parts: Raw text of each dotted key part.
        prefix: Everything before the value.
        item: The tomlkit value item; renders to the exact source text.
        suffix: Whitespace, optional comment and line ending after the value.
        leading: Comment/blank lines owned by this entry (they move with it).
    """

    key: tuple[str, ...]
    raw_key: str
    raw_parts: tuple[str, ...]
    prefix: str
    item: Item
    suffix: str
    leading: list[str] = field(default_factory=lambda: [])

    @classmethod
    def create(
        cls,
        raw_part: str,
        key: str,
        value: str,
        *,
        suffix: str,
        leading: list[str] | None = None,
    ) -> Entry:
        """Build a new single-part entry rendered as ``<raw_part> = <value><suffix>``.

        Raises:
            tomlkit.exceptions.ParseError: If ``value`` is not a TOML value.
        """
        return cls(
            key=(key,),
            raw_key=raw_part,
            raw_parts=(raw_part,),
            prefix=f"{raw_part} = ",
            item=tomlkit.value(value),
            suffix=suffix,
            leading=list(leading or []),
        )

    @property
    def value(self) -> str:
        """Return the value as written; may span several lines."""
        return self.item.as_string()

    @property
    def name(self) -> str:
        """Return the first decoded key part (the field name for dotted keys)."""
        return self.key[0]

    @property
    def indent(self) -> str:
        """Return the whitespace in front of the key."""
        return self.prefix[: len(self.prefix) - len(self.prefix.lstrip(" \t"))]

    @property
    def comment(self) -> str | None:
        """Return the trailing comment (``# ...``) of the entry line, if any."""
        text = self.suffix.strip()
        return text or None

    @property
    def is_multiline(self) -> bool:
        """Return True if the value spans more than one line."""
        return "\n" in self.value

    @property
    def text(self) -> str:
        """Return the entry line(s) without the leading block."""
        return self.prefix + self.value + self.suffix

    def chunks(self) -> Iterator[str]:
        """Yield the rendered pieces of this entry, leading block first."""
        yield from self.leading
        yield self.text


@dataclass(eq=False)
class Section:
    """A table (``[a.b]``) or array-of-tables element (``[[a]]``).

    The document root is represented as a section with an empty key and no
    header; it is never relocated.

    Attributes:
        key: Decoded key path of the header.
        raw_parts: Raw text of each header key part (quotes preserved).
        header: Raw header line including its line ending (None for the root).
        header_suffix: Text after the closing bracket (whitespace, comment, line ending).
        is_array: True for ``[[...]]`` headers.
        leading: Comment/blank lines directly above the header.
        intro: Section-level lines between the header and the first entry block.
        entries: Key/value pairs in document order.
        trailing: Comment lines directly following the last entry.
    """

    key: tuple[str, ...]
    raw_parts: tuple[str, ...] = ()
    header: str | None = None
    header_suffix: str = ""
    is_array: bool = False
    leading: list[str] = field(default_factory=lambda: [])
    intro: list[str] = field(default_factory=lambda: [])
    entries: list[Entry] = field(default_factory=lambda: [])
    trailing: list[str] = field(default_factory=lambda: [])

    @classmethod
    def table(cls, key: tuple[str, ...], raw_parts: tuple[str, ...], *, newline: str) -> Section:
        """Build a new, empty ``[a.b]`` table section."""
        return cls(
            key=key,
            raw_parts=raw_parts,
            header=f"[{'.'.join(raw_parts)}]{newline}",
            header_suffix=newline,
        )

    @property
    def is_root(self) -> bool:
        """Return True for the header-less document root."""
        return self.header is None

    @property
    def top(self) -> str:
        """Return the first key part (the top-level table name)."""
        return self.key[0] if self.key else ""

    @property
    def display(self) -> str:
        """Return the header as it would be written, for messages."""
        if self.is_root:
            return "(top level)"
        dotted = ".".join(self.raw_parts)
        return f"[[{dotted}]]" if self.is_array else f"[{dotted}]"

    @property
    def header_comment(self) -> str | None:
        """Return the comment written on the header line, if any."""
        text = self.header_suffix.strip()
        return text or None

    def is_descendant_of(self, key: tuple[str, ...]) -> bool:
        """Return True if this section's key extends ``key``."""
        return len(self.key) > len(key) and self.key[: len(key)] == key

    def strip_leading_blanks(self) -> None:
        """Drop the blank lines at the top of the leading block."""
        while self.leading and is_blank(self.leading[0]):
            self.leading.pop(0)

    def chunks(self) -> Iterator[str]:
        """Yield the rendered pieces of this section in document order."""
        yield from self.leading
        if self.header is not None:
            yield self.header
        yield from self.intro
        for entry in self.entries:
            yield from entry.chunks()
        yield from self.trailing


@dataclass(eq=False)
class Document:
    """A parsed manifest: root section, ordered sections and the epilogue.

    The document exclusively owns its sections and entries; passes mutate it
    in place.
    """

    root: Section
    sections: list[Section] = field(default_factory=lambda: [])
    epilogue: list[str] = field(default_factory=lambda: [])
    newline: str = "\n"
    bom: str = ""

    def chunks(self) -> Iterator[str]:
        """Yield every rendered piece of the document, in order."""
        yield from self.root.chunks()
        for section in self.sections:
            yield from section.chunks()
        yield from self.epilogue

    def render(self) -> str:
        """Render the document back to text.

        Returns:
            str: The manifest text; byte-identical to the input when unmodified.
        """
        out: list[str] = []
        for chunk in self.chunks():
            if not chunk:
                continue
            if out and not out[-1].endswith("\n"):
                # A former last line moved away from the end of the file.
                out[-1] += self.newline
            out.append(chunk)
        return self.bom + "".join(out)

    def find_table(self, key: tuple[str, ...]) -> Section | None:
        """Return the (non-array) table section with ``key``, if present."""
        for section in self.sections:
            if section.key == key and not section.is_array:
                return section
        return None

    def package_sections(self) -> list[Section]:
        """Return every section whose header is exactly ``package`` (table or array)."""
        return [s for s in self.sections if s.key == ("package",)]

    def has_array(self, key: tuple[str, ...]) -> bool:
        """Return True if ``key`` is declared as an array of tables."""
        return any(s.is_array and s.key == key for s in self.sections)


def render(document: Document) -> str:
    """Render ``document`` back to text (see `Document.render`)."""
    return document.render()
