# topmark:header:start
#
#   project      : cargo-fmt-toml
#   file         : test_cli_fmt_toml.py
#   file_relpath : tests/cli/test_cli_fmt_toml.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""CLI tests for ``cargo-fmt-toml fmt-toml``: modes, output and exit codes."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from click.testing import CliRunner

from cargo_fmt_toml.cli.exit_codes import ExitCode
from cargo_fmt_toml.cli.main import cli
from tests.conftest import mark_cli

if TYPE_CHECKING:
    from click.testing import Result

WORKSPACE = '[workspace]\nmembers = ["crates/*"]\n'
MESSY = '[dependencies]\nzeta = "1"\nalpha = "2"\n'
TIDY = '[dependencies]\nalpha = "2"\nzeta = "1"\n'


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(text.encode("utf-8"))
    return path


def _read(path: Path) -> str:
    return path.read_bytes().decode("utf-8")


def _run(root: Path, *args: str) -> Result:
    return CliRunner().invoke(
        cli, ["--no-color", "fmt-toml", "--workspace-path", str(root), *args]
    )


def _workspace(root: Path, **members: str) -> None:
    _write(root / "Cargo.toml", WORKSPACE)
    for name, text in members.items():
        _write(root / "crates" / name / "Cargo.toml", text)


@mark_cli
def test_formats_members(isolation: Path) -> None:
    """Changed members are written; formatted ones are left alone."""
    _workspace(isolation, a=MESSY, b=TIDY)
    result = _run(isolation)
    assert result.exit_code == ExitCode.SUCCESS, result.output
    assert _read(isolation / "crates/a/Cargo.toml") == TIDY
    assert _read(isolation / "crates/b/Cargo.toml") == TIDY
    assert _read(isolation / "Cargo.toml") == WORKSPACE
    assert "📦 crates/a/Cargo.toml" in result.output
    assert "crates/b/Cargo.toml" not in result.output
    assert "✓ Sorted dependencies alphabetically" in result.output
    assert "💾 Formatted with 1 changes" in result.output
    assert "✨ Complete!" in result.output
    assert "Formatted 1 files" in result.output


@mark_cli
def test_default_workspace_path_is_cwd(isolation: Path) -> None:
    """Without ``--workspace-path`` the current directory is formatted."""
    _workspace(isolation, a=MESSY)
    result = CliRunner().invoke(cli, ["fmt-toml"])
    assert result.exit_code == 0, result.output
    assert _read(isolation / "crates/a/Cargo.toml") == TIDY


@mark_cli
def test_dry_run_does_not_write(isolation: Path) -> None:
    """``--dry-run`` reports the changes without touching the files."""
    _workspace(isolation, a=MESSY)
    result = _run(isolation, "--dry-run")
    assert result.exit_code == 0, result.output
    assert _read(isolation / "crates/a/Cargo.toml") == MESSY
    assert "Would format with 1 changes" in result.output
    assert "1 files need formatting" in result.output
    assert "Run without --dry-run to apply changes" in result.output


@mark_cli
def test_check_exit_code(isolation: Path) -> None:
    """``--check`` exits 1 when a manifest needs formatting."""
    _workspace(isolation, a=MESSY)
    result = _run(isolation, "--check")
    assert result.exit_code == ExitCode.WOULD_CHANGE, result.output
    assert _read(isolation / "crates/a/Cargo.toml") == MESSY


@mark_cli
def test_check_clean_workspace(isolation: Path) -> None:
    """``--check`` exits 0 when everything is formatted."""
    _workspace(isolation, a=TIDY)
    result = _run(isolation, "--check")
    assert result.exit_code == 0, result.output
    assert "✨ All files are properly formatted" in result.output


@mark_cli
def test_quiet(isolation: Path) -> None:
    """``--quiet`` suppresses regular output."""
    _workspace(isolation, a=MESSY)
    result = _run(isolation, "--quiet")
    assert result.exit_code == 0
    assert result.output == ""
    assert _read(isolation / "crates/a/Cargo.toml") == TIDY


@mark_cli
def test_diff(isolation: Path) -> None:
    """``--diff`` prints a unified diff of the change."""
    _workspace(isolation, a=MESSY)
    result = _run(isolation, "--dry-run", "--diff")
    assert result.exit_code == 0, result.output
    assert "crates/a/Cargo.toml (current)" in result.output
    assert "crates/a/Cargo.toml (updated)" in result.output
    assert '+alpha = "2"' in result.output


@mark_cli
def test_failure_writes_nothing(isolation: Path) -> None:
    """One broken manifest aborts the run before any file is written."""
    broken = '[dependencies]\nserde = "1"\nserde = "2"\n'
    _workspace(isolation, a=MESSY, b=broken)
    result = _run(isolation)
    assert result.exit_code == ExitCode.DATA_ERROR, result.output
    assert _read(isolation / "crates/a/Cargo.toml") == MESSY
    assert _read(isolation / "crates/b/Cargo.toml") == broken
    assert "crates/b/Cargo.toml: duplicate_key: duplicate key 'serde'" in result.output
    assert "1 manifest(s) could not be formatted" in result.output


@mark_cli
def test_parse_error_exit_code(isolation: Path) -> None:
    """Syntax errors also exit with the data error code."""
    _workspace(isolation, a="[dependencies\n")
    result = _run(isolation)
    assert result.exit_code == ExitCode.DATA_ERROR
    assert "parse:" in result.output


@mark_cli
def test_missing_manifest(isolation: Path) -> None:
    """A workspace path without Cargo.toml exits with 66."""
    result = _run(isolation / "nowhere")
    assert result.exit_code == ExitCode.FILE_NOT_FOUND
    assert "No Cargo.toml found" in result.output


@mark_cli
def test_root_package_is_formatted(isolation: Path) -> None:
    """A root manifest with ``[package]`` is formatted with its members."""
    root = '[package]\nname = "root"\nversion = "0.1.0"\n\n' + WORKSPACE
    _write(isolation / "Cargo.toml", root)
    _write(isolation / "crates/a/Cargo.toml", TIDY)
    result = _run(isolation)
    assert result.exit_code == 0, result.output
    assert _read(isolation / "Cargo.toml").startswith(
        '[package]\nname = "root"\nversion = { workspace = true }\n'
    )
    assert "📦 Cargo.toml" in result.output


@mark_cli
def test_standalone_package(isolation: Path) -> None:
    """A manifest without ``[workspace]`` is formatted on its own."""
    _write(isolation / "Cargo.toml", MESSY)
    result = _run(isolation)
    assert result.exit_code == 0, result.output
    assert _read(isolation / "Cargo.toml") == TIDY


@mark_cli
def test_exclude_members(isolation: Path) -> None:
    """Excluded member directories are not formatted."""
    _write(
        isolation / "Cargo.toml",
        '[workspace]\nmembers = ["crates/*"]\nexclude = ["crates/legacy"]\n',
    )
    _write(isolation / "crates/a/Cargo.toml", MESSY)
    _write(isolation / "crates/legacy/Cargo.toml", MESSY)
    result = _run(isolation)
    assert result.exit_code == 0, result.output
    assert _read(isolation / "crates/a/Cargo.toml") == TIDY
    assert _read(isolation / "crates/legacy/Cargo.toml") == MESSY


@mark_cli
def test_crlf_is_preserved(isolation: Path) -> None:
    """Line endings are written back unchanged."""
    _workspace(isolation, a=MESSY.replace("\n", "\r\n"))
    result = _run(isolation)
    assert result.exit_code == 0, result.output
    assert _read(isolation / "crates/a/Cargo.toml") == TIDY.replace("\n", "\r\n")


@mark_cli
def test_standard_overrides(isolation: Path) -> None:
    """Overrides from ``[workspace.metadata.fmt-toml]`` apply to every member."""
    _write(
        isolation / "Cargo.toml",
        WORKSPACE
        + '\n[workspace.metadata.fmt-toml]\ndependency-tables = ["dev-dependencies"]\nbogus = 1\n',
    )
    _write(isolation / "crates/a/Cargo.toml", MESSY)
    result = _run(isolation)
    assert result.exit_code == 0, result.output
    assert _read(isolation / "crates/a/Cargo.toml") == MESSY
    assert "Unknown standard setting 'bogus' ignored" in result.output


@mark_cli
def test_warnings_are_shown(isolation: Path) -> None:
    """Warnings are printed even in quiet mode."""
    _workspace(isolation, a='[dependencies.foo]\nversion = "1" # why\n')
    result = _run(isolation, "--quiet")
    assert result.exit_code == 0
    assert "Dropped comment '# why'" in result.output


@mark_cli
def test_jobs_must_be_positive(isolation: Path) -> None:
    """``--jobs 0`` is a usage error."""
    _workspace(isolation, a=TIDY)
    result = _run(isolation, "--jobs", "0")
    assert result.exit_code == 2


@mark_cli
def test_jobs(isolation: Path) -> None:
    """Several workers format several members."""
    _workspace(isolation, a=MESSY, b=MESSY, c=MESSY)
    result = _run(isolation, "-j", "3")
    assert result.exit_code == 0, result.output
    for name in ("a", "b", "c"):
        assert _read(isolation / "crates" / name / "Cargo.toml") == TIDY
    assert "Made 3 changes" in result.output


@mark_cli
def test_group_without_command_prints_help() -> None:
    """Invoking the group alone shows the help text."""
    result = CliRunner().invoke(cli, [])
    assert result.exit_code == 0
    assert "fmt-toml" in result.output


@mark_cli
def test_version() -> None:
    """``--version`` prints the program name and version."""
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert result.output.startswith("cargo-fmt-toml, version ")
