# topmark:header:start
#
#   project      : cargo-fmt-toml
#   file         : test_normalize_properties.py
#   file_relpath : tests/pipeline/test_normalize_properties.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Property tests: round-trip, idempotence and the canonical-shape invariants."""

from __future__ import annotations

from hypothesis import HealthCheck, given, settings

from cargo_fmt_toml.api import normalize_text
from cargo_fmt_toml.config.standard import FieldForm, default_standard
from cargo_fmt_toml.core.diagnostics import DiagnosticCode
from cargo_fmt_toml.document import parse, render
from cargo_fmt_toml.pipeline.steps.formatter import is_workspace_inherited
from tests.conftest import mark_pipeline
from tests.strategies_manifest import manifests

PROPERTY_SETTINGS = settings(
    max_examples=75,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)


def _normalized(text: str) -> str:
    result = normalize_text(text)
    assert not result.is_error, result.error
    return result.text if result.is_changed and result.text is not None else text


@mark_pipeline
@PROPERTY_SETTINGS
@given(text=manifests())
def test_round_trip(text: str) -> None:
    """Parsing and rendering an untouched document is the identity."""
    assert render(parse(text)) == text


@mark_pipeline
@PROPERTY_SETTINGS
@given(text=manifests())
def test_idempotence(text: str) -> None:
    """A second normalization finds nothing left to change."""
    once = _normalized(text)
    again = normalize_text(once)
    assert again.outcome.value == "unchanged", (once, again.text)
    assert again.changes == 0


@mark_pipeline
@PROPERTY_SETTINGS
@given(text=manifests())
def test_canonical_shape(text: str) -> None:
    """Sections are ranked, dependencies sorted and the template applied."""
    standard = default_standard()
    document = parse(_normalized(text))

    ranks = [standard.section_rank(s.top) for s in document.sections]
    assert ranks == sorted(ranks)

    for section in document.sections:
        if standard.is_dependency_table(section.key):
            names = [e.key[0] for e in section.entries]
            assert names == sorted(names)
        # every sub-table of a collapsible parent was folded
        assert not (len(section.key) > 1 and standard.is_collapsible_parent(section.key[:-1]))

    package = document.find_table(("package",))
    if package is not None:
        template = standard.package_field_names
        names = list(dict.fromkeys(e.name for e in package.entries))
        known = [n for n in names if n in template]
        assert names[: len(known)] == known
        assert known == sorted(known, key=template.index)
        for field in standard.package_fields:
            entries = [e for e in package.entries if e.name == field.name]
            if entries and field.form is FieldForm.WORKSPACE:
                assert is_workspace_inherited(field.name, entries)


@mark_pipeline
@PROPERTY_SETTINGS
@given(text=manifests())
def test_comments_are_kept_or_reported(text: str) -> None:
    """Every comment survives unless a relocation warning reports it."""
    result = normalize_text(text)
    assert not result.is_error
    output = result.text if result.text is not None else text
    dropped = result.diagnostics.with_code(DiagnosticCode.AMBIGUOUS_COMMENT_RELOCATION)
    assert output.count("#") == text.count("#") - len(dropped)
