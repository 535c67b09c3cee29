# topmark:header:start
#
#   project      : cargo-fmt-toml
#   file         : test_document_structure.py
#   file_relpath : tests/document/test_document_structure.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Comment attachment and structural error tests for the document parser."""

from __future__ import annotations

import pytest

from cargo_fmt_toml.core.errors import CargoFmtTomlError, DuplicateKeyError, ParseError
from cargo_fmt_toml.document import parse
from tests.conftest import parametrize

ATTACHMENT_MANIFEST = """\
# preamble

[package]
name = "x"
# trailing of package

# leading of deps
[dependencies]
# intro comment

# first entry comment
a = "1"

b = "2" # inline
# tail

# epilogue
"""


def test_comment_attachment() -> None:
    """Comment and blank lines are attached to the node they describe."""
    document = parse(ATTACHMENT_MANIFEST)
    package, deps = document.sections

    assert document.root.trailing == ["# preamble\n"]
    assert package.leading == ["\n"]
    assert package.trailing == ["# trailing of package\n"]

    assert deps.leading == ["\n", "# leading of deps\n"]
    assert deps.intro == ["# intro comment\n", "\n"]
    a, b = deps.entries
    assert a.leading == ["# first entry comment\n"]
    assert b.leading == ["\n"]
    assert b.comment == "# inline"
    assert deps.trailing == ["# tail\n"]
    assert document.epilogue == ["\n", "# epilogue\n"]


def test_header_comment() -> None:
    """A comment on the header line is kept in the header suffix."""
    document = parse("[dependencies]  # pinned\n")
    section = document.sections[0]
    assert section.header_comment == "# pinned"
    assert section.header_suffix == "  # pinned\n"


def test_leading_block_without_comment() -> None:
    """Blank lines directly above a header belong to that header."""
    document = parse('[a]\nx = 1\n\n\n[b]\ny = 2\n')
    a, b = document.sections
    assert a.trailing == []
    assert b.leading == ["\n", "\n"]


@parametrize(
    ("text", "section", "key"),
    [
        ("a = 1\na = 2\n", (), "a"),
        ('[dependencies]\nserde = "1"\nserde = "2"\n', ("dependencies",), "serde"),
        ("[a]\nx = 1\n[a]\ny = 2\n", (), "a"),
        ("[a.b]\nx = 1\n[a.b]\ny = 2\n", ("a",), "b"),
        ('x.y = 1\nx.y = 2\n', (), "x.y"),
        ('[dependencies]\nfoo.version = "1"\nfoo = { path = "x" }\n', ("dependencies",), "foo"),
        (
            '[dependencies]\nfoo = { path = "x" }\nfoo.version = "1"\n',
            ("dependencies",),
            "foo.version",
        ),
        ('foo.version = "1"\nfoo = 1\n', (), "foo"),
        ('[[bin]]\nname = "a"\nname = "b"\n', ("bin",), "name"),
    ],
)
def test_duplicate_keys(text: str, section: tuple[str, ...], key: str) -> None:
    """Repeated keys and repeated table headers raise DuplicateKeyError."""
    with pytest.raises(DuplicateKeyError) as excinfo:
        parse(text)
    assert excinfo.value.section == section
    assert excinfo.value.key == key


def test_duplicate_key_message() -> None:
    """The message names the key and the section holding it."""
    with pytest.raises(DuplicateKeyError, match=r"duplicate key 'serde' in \[dependencies\]"):
        parse('[dependencies]\nserde = "1"\nserde = "2"\n')
    with pytest.raises(DuplicateKeyError, match="duplicate key 'a' in top level"):
        parse("a = 1\na = 2\n")


def test_entry_and_table_conflict() -> None:
    """A key defined as an entry of [P] cannot also be a [P.k] table."""
    text = '[dependencies]\nfoo = "1"\n\n[dependencies.foo]\nversion = "1"\n'
    with pytest.raises(DuplicateKeyError) as excinfo:
        parse(text)
    assert excinfo.value.section == ("dependencies",)
    assert excinfo.value.key == "foo"


def test_array_of_tables_may_repeat() -> None:
    """``[[bin]]`` headers may repeat and each element has its own keys."""
    document = parse('[[bin]]\nname = "a"\n\n[[bin]]\nname = "b"\n')
    assert [s.is_array for s in document.sections] == [True, True]


def test_parse_error_location() -> None:
    """Syntax errors carry the 1-based line of the offending text."""
    with pytest.raises(ParseError) as excinfo:
        parse("a = 1\nb = 2\nc = = 3\n")
    assert excinfo.value.line == 3
    assert "(line 3, column " in str(excinfo.value)


@parametrize(
    "text",
    [
        "[package\nname = 1\n",
        'a = "unterminated\n',
        "a = [1, 2\n",
        "= 1\n",
        "a = 1 b = 2\n",
    ],
)
def test_parse_errors(text: str) -> None:
    """Invalid TOML raises ParseError (a ValueError)."""
    with pytest.raises(ParseError) as excinfo:
        parse(text)
    assert isinstance(excinfo.value, CargoFmtTomlError)
    assert isinstance(excinfo.value, ValueError)
    assert excinfo.value.line >= 1


def test_interleaved_array_of_tables_keeps_source_order() -> None:
    """``[[bin]]`` blocks split by another table stay where they were written."""
    text = '[[bin]]\nname = "a"\n\n[package]\nname = "x"\n\n[[bin]]\nname = "b"\n'
    document = parse(text)
    assert [s.display for s in document.sections] == ["[[bin]]", "[package]", "[[bin]]"]
    assert [s.entries[0].value for s in document.sections] == ['"a"', '"x"', '"b"']
    assert document.render() == text


def test_sub_table_of_array_element_after_other_table() -> None:
    """``[bin.extra]`` written after an unrelated table keeps its place."""
    text = '[[bin]]\nname = "a"\n\n[package]\nname = "x"\n\n[bin.extra]\nk = 1\n'
    document = parse(text)
    assert [s.key for s in document.sections] == [("bin",), ("package",), ("bin", "extra")]
    assert document.render() == text


def test_out_of_order_sub_table() -> None:
    """A sub-table separated from its parent is its own section, in place."""
    text = "[a]\nx = 1\n\n[c]\ny = 2\n\n[a.b]\nz = 3\n"
    document = parse(text)
    assert [s.key for s in document.sections] == [("a",), ("c",), ("a", "b")]
    assert document.render() == text


def test_spaced_header_and_keys() -> None:
    """Spaces inside brackets and around dots are kept; keys are decoded."""
    text = "[ dependencies . foo ]\nversion  =  '1'\nbar . baz = 2\n"
    document = parse(text)
    section = document.sections[0]
    assert section.key == ("dependencies", "foo")
    assert section.raw_parts == ("dependencies", "foo")
    version, dotted = section.entries
    assert version.prefix == "version  =  "
    assert dotted.key == ("bar", "baz")
    assert dotted.raw_key == "bar . baz"
    assert document.render() == text


def test_entries_expose_tomlkit_items() -> None:
    """Entry values are tomlkit items that decode to plain Python values."""
    text = '[dependencies]\nserde = { version = "1", features = ["derive"] }\nlog = "0.4"\n'
    serde, log = parse(text).sections[0].entries
    assert serde.item.unwrap() == {"version": "1", "features": ["derive"]}
    assert log.item.unwrap() == "0.4"
    assert serde.value == '{ version = "1", features = ["derive"] }'


def test_array_elements_may_repeat_their_sub_tables() -> None:
    """Each ``[[bin]]`` element can declare its own ``[bin.extra]``."""
    text = "[[bin]]\n[bin.extra]\nk = 1\n\n[[bin]]\n[bin.extra]\nk = 2\n"
    document = parse(text)
    assert [s.display for s in document.sections] == [
        "[[bin]]",
        "[bin.extra]",
        "[[bin]]",
        "[bin.extra]",
    ]
    assert document.render() == text
