# topmark:header:start
#
#   project      : cargo-fmt-toml
#   file         : test_document_roundtrip.py
#   file_relpath : tests/document/test_document_roundtrip.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Round-trip tests for the format-preserving document model.

`parse(text).render()` must reproduce the input byte for byte, whatever the
line endings, comments, quoting or multi-line values.
"""

from __future__ import annotations

from cargo_fmt_toml.document import parse, render
from tests.conftest import parametrize

FULL_MANIFEST = """\
# Workspace member manifest
cargo-features = ["edition2024"]

[package]
name    = "demo"   # aligned
version = "0.1.0"
authors = [
    "Ann <ann@example.org>", # first
    "Bob",
]
description = \"\"\"
A multi-line
description with "quotes" and a # hash.
\"\"\"

[package.metadata.docs.rs]
all-features = true

[dependencies]
serde = { version = "1", features = ["derive"] }
"quoted-key" = '0.3'
tokio.version = "1"
tokio.features = ["full"]

[target.'cfg(unix)'.dependencies]
nix = "0.27"

[[bin]]
name = "demo"
path = "src/main.rs"

[profile.release]
lto = true
opt-level = 3
date = 1979-05-27T07:32:00Z
"""


@parametrize(
    "text",
    [
        "",
        "\n",
        "# only a comment\n",
        "# comment without newline",
        'name = "x"',
        '[package]\nname = "x"',
        "[package]\n\n\n",
        '\t[package]\n\tname = "x"\n',
        '[ package ]  # spaced header\nname="x"\n',
        "[dependencies]\n   \nserde = '1'   \n",
        'a = """\nb = 1\n[not-a-header]\n"""\n',
        "a = '''\nraw \\ text\n'''\n",
        'a = [\n  # comment in array\n  1,\n  2, # two\n]\n',
        "a = { b = { c = [1, 2] } }\n",
        'key = "value with \\" escaped quote" # c\n',
        FULL_MANIFEST,
    ],
)
def test_round_trip_is_identity(text: str) -> None:
    """Parsing and rendering reproduces the input exactly."""
    assert render(parse(text)) == text


def test_round_trip_crlf() -> None:
    """CRLF line endings are preserved and detected as the document newline."""
    text = FULL_MANIFEST.replace("\n", "\r\n")
    document = parse(text)
    assert document.newline == "\r\n"
    assert document.render() == text


def test_round_trip_bom() -> None:
    """A UTF-8 byte order mark is kept in front of the rendered text."""
    text = '\ufeff[package]\nname = "x"\n'
    document = parse(text)
    assert document.bom == "\ufeff"
    assert document.sections[0].key == ("package",)
    assert document.render() == text


def test_multiline_values_are_single_entries() -> None:
    """Multi-line arrays and strings are stored as one entry value."""
    document = parse(FULL_MANIFEST)
    package = document.sections[0]
    assert [e.name for e in package.entries] == ["name", "version", "authors", "description"]
    authors = package.entries[2]
    assert authors.is_multiline
    assert authors.value.startswith("[\n") and authors.value.endswith("]")
    assert package.entries[0].comment == "# aligned"
    assert package.entries[0].prefix == "name    = "


def test_keys_are_decoded() -> None:
    """Quoted and dotted keys are decoded; raw spellings are kept."""
    document = parse(FULL_MANIFEST)
    deps = document.find_table(("dependencies",))
    assert deps is not None
    assert [e.key for e in deps.entries] == [
        ("serde",),
        ("quoted-key",),
        ("tokio", "version"),
        ("tokio", "features"),
    ]
    assert deps.entries[1].raw_key == '"quoted-key"'

    target = document.sections[3]
    assert target.key == ("target", "cfg(unix)", "dependencies")
    assert target.raw_parts == ("target", "'cfg(unix)'", "dependencies")
    assert target.display == "[target.'cfg(unix)'.dependencies]"


def test_array_of_tables_header() -> None:
    """``[[bin]]`` sections are flagged as arrays."""
    document = parse(FULL_MANIFEST)
    assert document.has_array(("bin",))
    assert document.find_table(("bin",)) is None
    assert document.find_table(("profile", "release")) is not None


def test_moved_last_line_gets_a_newline() -> None:
    """A former last line without newline is terminated when moved."""
    document = parse('[dependencies]\nzeta = "1"\nalpha = "2"')
    deps = document.sections[0]
    deps.entries.reverse()
    assert document.render() == '[dependencies]\nalpha = "2"\nzeta = "1"\n'


def test_moved_last_line_uses_document_newline() -> None:
    """The inserted line ending follows the document's newline style."""
    document = parse('[dependencies]\r\nzeta = "1"\r\nalpha = "2"')
    document.sections[0].entries.reverse()
    assert document.render() == '[dependencies]\r\nalpha = "2"\r\nzeta = "1"\r\n'
