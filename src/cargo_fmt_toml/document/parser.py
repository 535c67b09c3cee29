# topmark:header:start
#
#   project      : cargo-fmt-toml
#   file         : parser.py
#   file_relpath : src/cargo_fmt_toml/document/parser.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Parse manifest text into a format-preserving [`Document`][cargo_fmt_toml.document.model.Document].

The text is parsed once with `tomlkit`, which keeps every piece of trivia
(indentation, key spelling, ``=`` spacing, comments, blank lines). The
document body is then walked in source order and flattened into logical
lines:

    * ``Whitespace`` and ``Comment`` body items become blank and comment lines;
    * a table that owns a header becomes a header line (super tables created
      for ``[a.b]`` without ``[a]`` have none and are only descended into);
    * a key/value pair becomes an entry that keeps its tomlkit item; dotted
      keys (``tokio.version = "1"``) are followed down to their leaf value.

tomlkit regroups a few layouts (``[[bin]]`` blocks separated by other tables,
``[x.sub]`` following ``[[x]]``); header blocks are put back in source order
before the lines are assembled, and the joined lines must reproduce the
input exactly.

Comment attachment:
    * Between the last entry of a section and the next header, the comment run
      directly above the header (plus the blank lines right above it) becomes
      the next section's ``leading`` block; the rest is the previous section's
      ``trailing`` block.
    * Between a header and its first entry, everything up to and including the
      last blank line is the section ``intro``; the comment lines directly
      above the first entry belong to that entry.
    * Lines between two entries belong to the later entry.
    * After the last entry of the file, everything from the first blank line
      onward is the document ``epilogue``.

Errors:
    * tomlkit syntax errors become [`ParseError`][cargo_fmt_toml.core.errors.ParseError]
      with tomlkit's line and column.
    * Redefinitions (a repeated key or header, a key that is both a value and
      a table) become [`DuplicateKeyError`][cargo_fmt_toml.core.errors.DuplicateKeyError]
      naming the section and the key.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Final

import tomlkit
from tomlkit.exceptions import ParseError as TomlkitParseError
from tomlkit.exceptions import TOMLKitError
from tomlkit.items import AoT, Comment, Item, Key, Null, Table, Whitespace

from cargo_fmt_toml.config.logging import get_logger
from cargo_fmt_toml.core.errors import DuplicateKeyError, ParseError
from cargo_fmt_toml.document.model import (
    Document,
    Entry,
    Section,
    format_key_path,
    is_blank,
    is_comment,
)

if TYPE_CHECKING:
    from tomlkit.container import Container

    from cargo_fmt_toml.config.logging import FmtTomlLogger
    from cargo_fmt_toml.core.errors import CargoFmtTomlError

logger: FmtTomlLogger = get_logger(__name__)

BOM: Final[str] = "\ufeff"

# tomlkit appends " at line L col C" to its messages; we report the location separately.
_TOMLKIT_LOCATION: Final[re.Pattern[str]] = re.compile(r" at line \d+ col \d+$")

# Items in a tomlkit container body.
_TomlkitBodyItem = tuple[Key | None, Item]


class LineKind(Enum):
    """Kinds of logical lines produced while flattening the tomlkit tree."""

    BLANK = "blank"
    COMMENT = "comment"
    HEADER = "header"
    ENTRY = "entry"


@dataclass(frozen=True)
class _Line:
    kind: LineKind
    text: str
    section: Section | None = None
    entry: Entry | None = None


def detect_newline(text: str) -> str:
    """Return the newline style of ``text`` (taken from its first line break)."""
    index = text.find("\n")
    if index > 0 and text[index - 1] == "\r":
        return "\r\n"
    return "\n"


def _raw(key: Key) -> str:
    return key.as_string().strip()


class _Flattener:
    """Walk a parsed tomlkit document and collect its logical lines."""

    def __init__(self) -> None:
        self.lines: list[_Line] = []

    def container(self, container: Container, path: tuple[Key, ...]) -> None:
        # Own values first: tomlkit may append a merged sub-table before them.
        tables: list[_TomlkitBodyItem] = []
        for key, item in container.body:
            if isinstance(item, Null):
                continue
            if key is None:
                self.trivia(item)
            elif isinstance(item, AoT) or (isinstance(item, Table) and not key.is_dotted()):
                tables.append((key, item))
            else:
                self.entry((key,), item)

        for key, item in tables:
            assert key is not None
            if isinstance(item, AoT):
                for element in item.body:
                    self.table(element, (*path, key))
            else:
                assert isinstance(item, Table)
                self.table(item, (*path, key))

    def trivia(self, item: Item) -> None:
        if isinstance(item, Comment):
            self.lines.append(_Line(LineKind.COMMENT, item.as_string()))
            return
        assert isinstance(item, Whitespace)
        for line in item.as_string().splitlines(keepends=True):
            self.lines.append(_Line(LineKind.BLANK, line))

    def table(self, table: Table, path: tuple[Key, ...]) -> None:
        if not table.is_super_table():
            trivia = table.trivia
            is_array = table.is_aot_element()
            name = table.display_name or ".".join(k.as_string() for k in path)
            suffix = f"{trivia.comment_ws}{trivia.comment}{trivia.trail}"
            header = f"{trivia.indent}{'[[' if is_array else '['}{name}{']]' if is_array else ']'}"
            section = Section(
                key=tuple(k.key for k in path),
                raw_parts=tuple(_raw(k) for k in path),
                header=header + suffix,
                header_suffix=suffix,
                is_array=is_array,
            )
            self.lines.append(_Line(LineKind.HEADER, section.header or "", section=section))
        self.container(table.value, path)

    def entry(self, keys: tuple[Key, ...], item: Item) -> None:
        if isinstance(item, Table):
            # Dotted key: descend to the leaf value.
            for key, child in item.value.body:
                if key is not None:
                    self.entry((*keys, key), child)
            return

        raw_key = ".".join(k.as_string() for k in keys)
        trivia = item.trivia
        entry = Entry(
            key=tuple(k.key for k in keys),
            raw_key=raw_key.strip(),
            raw_parts=tuple(_raw(k) for k in keys),
            prefix=f"{trivia.indent}{raw_key}{keys[-1].sep}",
            item=item,
            suffix=f"{trivia.comment_ws}{trivia.comment}{trivia.trail}",
        )
        self.lines.append(_Line(LineKind.ENTRY, entry.text, entry=entry))


def _realign(lines: list[_Line], body: str) -> list[_Line]:
    """Put header blocks (a header and the lines below it) back in source order."""
    blocks: list[list[_Line]] = [[]]
    for line in lines:
        if line.kind is LineKind.HEADER:
            blocks.append([])
        blocks[-1].append(line)

    ordered = blocks[0]
    pos = sum(len(line.text) for line in ordered)
    pending = [(block, "".join(line.text for line in block)) for block in blocks[1:]]
    while pending:
        matches = [i for i, (_, text) in enumerate(pending) if body.startswith(text, pos)]
        if not matches:
            break
        # A block that is a prefix of a longer match is followed by a header,
        # never by the longer block's own lines.
        best = max(matches, key=lambda i: len(pending[i][1]))
        block, text = pending.pop(best)
        ordered.extend(block)
        pos += len(text)
    ordered.extend(line for block, _ in pending for line in block)
    return ordered


def _location(text: str, index: int) -> tuple[int, int]:
    line = text.count("\n", 0, index) + 1
    col = index - (text.rfind("\n", 0, index) + 1) + 1
    return line, col


def _flatten(document: tomlkit.TOMLDocument, body: str) -> list[_Line]:
    """Return the logical lines of ``document``; they join back into ``body``.

    Raises:
        ParseError: If the layout cannot be reproduced from the tomlkit tree.
    """
    flattener = _Flattener()
    flattener.container(document, ())
    lines = flattener.lines
    rendered = "".join(line.text for line in lines)
    if rendered != body:
        lines = _realign(lines, body)
        rendered = "".join(line.text for line in lines)
    if rendered != body:
        index = next(
            (i for i, (a, b) in enumerate(zip(rendered, body, strict=False)) if a != b),
            min(len(rendered), len(body)),
        )
        line, col = _location(body, index)
        raise ParseError("layout cannot be preserved", line=line, col=col)
    return lines


def _is_conflict(exc: TomlkitParseError) -> bool:
    """Return True if tomlkit wrapped a redefinition into a parse error."""
    cause = exc.__cause__
    return isinstance(cause, TOMLKitError) and not isinstance(cause, TomlkitParseError)


def _reason(exc: TOMLKitError) -> str:
    return _TOMLKIT_LOCATION.sub("", str(exc))


def _load(body: str) -> tomlkit.TOMLDocument:
    """Parse ``body`` with tomlkit, converting its errors.

    Raises:
        ParseError: On a syntax error.
        DuplicateKeyError: On a redefined key or table.
    """
    try:
        return tomlkit.parse(body)
    except TomlkitParseError as exc:
        if not _is_conflict(exc):
            raise ParseError(_reason(exc), line=exc.line, col=exc.col) from exc
        raise _diagnose_conflict(body, exc) from exc
    except TOMLKitError as exc:
        # KeyAlreadyPresent and redefinitions raised inside a table body.
        raise _diagnose_conflict(body, exc) from exc


def _diagnose_conflict(body: str, exc: TOMLKitError) -> CargoFmtTomlError:
    """Locate the redefinition tomlkit rejected and name its section and key.

    tomlkit reports redefinitions without a usable location, so the text is
    re-parsed line by line until the first prefix that fails with a conflict.
    The lines after the last valid prefix hold the offending header or entry.
    """
    lines = body.splitlines(keepends=True)
    good = 0
    end = len(lines)
    for count in range(1, len(lines) + 1):
        try:
            tomlkit.parse("".join(lines[:count]))
        except TomlkitParseError as err:
            if _is_conflict(err):
                end = count
                break
            # The prefix ends inside a multi-line value.
            continue
        except TOMLKitError:
            end = count
            break
        good = count

    before = "".join(lines[:good])
    chunk = "".join(lines[good:end])
    try:
        owners = [line.section for line in _flatten(tomlkit.parse(before), before) if line.section]
        offending = _flatten(tomlkit.parse(chunk), chunk)
    except (TOMLKitError, ParseError):
        logger.debug("could not isolate the redefinition: %s", exc)
        return ParseError(_reason(exc), line=good + 1, col=1)

    for line in offending:
        if line.section is not None:
            key = line.section.key
            return DuplicateKeyError(key[:-1], key[-1])
        if line.entry is not None:
            owner = owners[-1].key if owners else ()
            return DuplicateKeyError(owner, format_key_path(line.entry.key))
    return ParseError(_reason(exc), line=good + 1, col=1)


def _split_before_header(pending: list[str]) -> tuple[list[str], list[str]]:
    """Split pending lines into (previous section trailing, next section leading)."""
    i = len(pending)
    while i > 0 and is_comment(pending[i - 1]):
        i -= 1
    while i > 0 and is_blank(pending[i - 1]):
        i -= 1
    return pending[:i], pending[i:]


def _split_before_first_entry(pending: list[str]) -> tuple[list[str], list[str]]:
    """Split pending lines into (section intro, first entry leading)."""
    last_blank = -1
    for index, line in enumerate(pending):
        if is_blank(line):
            last_blank = index
    return pending[: last_blank + 1], pending[last_blank + 1 :]


def _split_epilogue(pending: list[str]) -> tuple[list[str], list[str]]:
    """Split the lines after the last entry into (section trailing, epilogue)."""
    for index, line in enumerate(pending):
        if is_blank(line):
            return pending[:index], pending[index:]
    return pending, []


def _key_conflicts(key: tuple[str, ...], keys: set[tuple[str, ...]]) -> bool:
    """Return True if ``key`` equals, extends or is extended by a key in ``keys``."""
    if any(key[:i] in keys for i in range(1, len(key) + 1)):
        return True
    return any(other[: len(key)] == key for other in keys)


class _Builder:
    """Assemble logical lines into a Document, checking duplicate keys."""

    def __init__(self, lines: list[_Line], newline: str) -> None:
        self.lines = lines
        self.newline = newline

    def build(self) -> Document:
        root = Section(key=())
        document = Document(root=root, newline=self.newline)
        current = root
        current_keys: set[tuple[str, ...]] = set()
        seen_tables: set[tuple[str, ...]] = set()
        pending: list[str] = []

        for line in self.lines:
            if line.kind in (LineKind.BLANK, LineKind.COMMENT):
                pending.append(line.text)
                continue

            if line.section is not None:
                section = line.section
                if section.is_array:
                    # Sub-tables of the previous element may be declared again.
                    width = len(section.key)
                    seen_tables = {k for k in seen_tables if k[:width] != section.key}
                else:
                    if section.key in seen_tables:
                        raise DuplicateKeyError(section.key[:-1], section.key[-1])
                    seen_tables.add(section.key)
                before, leading = _split_before_header(pending)
                current.trailing.extend(before)
                section.leading = leading
                pending = []
                document.sections.append(section)
                current = section
                current_keys = set()
                continue

            entry = line.entry
            assert entry is not None
            if _key_conflicts(entry.key, current_keys):
                raise DuplicateKeyError(current.key, format_key_path(entry.key))
            current_keys.add(entry.key)
            if current.entries:
                entry.leading = pending
            else:
                intro, entry.leading = _split_before_first_entry(pending)
                current.intro.extend(intro)
            pending = []
            current.entries.append(entry)

        trailing, document.epilogue = _split_epilogue(pending)
        current.trailing.extend(trailing)
        _check_table_conflicts(document)
        return document


def _check_table_conflicts(document: Document) -> None:
    """Reject a key defined both as an entry of ``[P]`` and as a ``[P.k]`` header."""
    defined: dict[tuple[str, ...], set[str]] = {(): {e.key[0] for e in document.root.entries}}
    for section in document.sections:
        if not section.is_array:
            defined.setdefault(section.key, set()).update(e.key[0] for e in section.entries)
    for section in document.sections:
        parent, name = section.key[:-1], section.key[-1]
        if name in defined.get(parent, set()):
            raise DuplicateKeyError(parent, name)


def parse(text: str) -> Document:
    """Parse manifest text into a format-preserving document.

    Args:
        text: Raw manifest text.

    Returns:
        Document: The editable document; ``parse(text).render() == text``.

    Raises:
        ParseError: If the text is not valid TOML.
        DuplicateKeyError: If a section repeats a key or a table header is repeated.
    """
    bom = BOM if text.startswith(BOM) else ""
    body = text[len(bom) :]

    lines = _flatten(_load(body), body)
    document = _Builder(lines, detect_newline(body)).build()
    document.bom = bom
    logger.debug(
        "parsed document: %d root entries, %d sections",
        len(document.root.entries),
        len(document.sections),
    )
    return document
