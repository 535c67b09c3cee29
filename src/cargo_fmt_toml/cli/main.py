# topmark:header:start
#
#   project      : cargo-fmt-toml
#   file         : main.py
#   file_relpath : src/cargo_fmt_toml/cli/main.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Click CLI: ``cargo-fmt-toml fmt-toml`` (also runs as ``cargo fmt-toml``).

Cargo runs external subcommands as ``cargo-<name> <name> [ARGS]``, hence the
group with a single ``fmt-toml`` command.

Key ideas:
- Group-level state (console, logging) is initialized once, placed into ``ctx.obj``.
- Formatting is two-phase: every manifest is normalized in memory first; if
  any of them fails, nothing is written.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from cargo_fmt_toml.api import normalize_batch
from cargo_fmt_toml.cli.console import ClickConsole
from cargo_fmt_toml.cli.discovery import discover
from cargo_fmt_toml.cli.errors import (
    FmtTomlDataError,
    FmtTomlFileNotFoundError,
    FmtTomlIOError,
)
from cargo_fmt_toml.cli.exit_codes import ExitCode
from cargo_fmt_toml.config.logging import get_logger, resolve_env_log_level, setup_logging
from cargo_fmt_toml.config.standard import MutableStandard, load_standard
from cargo_fmt_toml.constants import CARGO_FMT_TOML_VERSION, CARGO_SUBCOMMAND
from cargo_fmt_toml.core.diagnostics import DiagnosticCode, DiagnosticLevel
from cargo_fmt_toml.utils.diff import render_patch, unified_diff

if TYPE_CHECKING:
    from cargo_fmt_toml.cli.discovery import Workspace
    from cargo_fmt_toml.config.standard import Standard
    from cargo_fmt_toml.pipeline.context import FileResult

logger = get_logger(__name__)


def init_common_state(ctx: click.Context, *, no_color: bool) -> None:
    """Initialize shared state (logging & console) on the Click context.

    Args:
        ctx (click.Context): Current Click context; will have ``obj`` set.
        no_color (bool): Whether ``--no-color`` was passed; forces color off.
    """
    ctx.obj = ctx.obj or {}

    # Configure internal logging via env:
    level_env = resolve_env_log_level()
    ctx.obj["log_level"] = level_env
    setup_logging(level=level_env)

    ctx.obj["console"] = ClickConsole(enable_color=not no_color)


def _display(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


def _load_standard(workspace: Workspace, console: ClickConsole) -> Standard:
    try:
        builder = load_standard(workspace.root_text)
    except RuntimeError as exc:
        # The root manifest is reported as a formatting error below.
        logger.info("standard overrides not loaded: %s", exc)
        builder = MutableStandard.from_defaults()
    for diagnostic in builder.diagnostics:
        console.warn(f"⚠️  [workspace.metadata.fmt-toml] {diagnostic.message}")
    return builder.freeze()


def _read_manifests(workspace: Workspace) -> list[tuple[Path, str]]:
    inputs: list[tuple[Path, str]] = []
    for manifest in workspace.manifests:
        if manifest == workspace.root_manifest:
            inputs.append((manifest, workspace.root_text))
            continue
        try:
            with manifest.open("r", encoding="utf-8", newline="") as f:
                inputs.append((manifest, f.read()))
        except UnicodeDecodeError as exc:
            raise FmtTomlDataError(f"{manifest} is not valid UTF-8: {exc}") from exc
        except OSError as exc:
            raise FmtTomlIOError(f"Failed to read {manifest}: {exc}") from exc
    return inputs


def _report_diagnostics(console: ClickConsole, result: FileResult, shown: str) -> None:
    for diagnostic in result.diagnostics:
        if diagnostic.level is DiagnosticLevel.WARNING:
            console.warn(f"⚠️  {shown}: {diagnostic.message}")
        elif diagnostic.code is DiagnosticCode.PASS_APPLIED:
            console.print(f"   ✓ {diagnostic.message}")
        else:
            logger.info("%s: %s", shown, diagnostic.message)


def _write(path: Path, text: str) -> None:
    try:
        with path.open("w", encoding="utf-8", newline="") as f:
            f.write(text)
    except OSError as exc:
        raise FmtTomlIOError(f"Failed to write {path}: {exc}") from exc


@click.group(
    cls=click.Group,
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=True,
    help="Format and normalize Cargo.toml files according to workspace standards.",
)
@click.version_option(CARGO_FMT_TOML_VERSION, "-V", "--version", prog_name="cargo-fmt-toml")
@click.option("--no-color", is_flag=True, default=False, help="Disable colored output.")
@click.pass_context
def cli(ctx: click.Context, no_color: bool) -> None:
    """Entry point for the cargo-fmt-toml CLI."""
    init_common_state(ctx, no_color=no_color)
    console: ClickConsole = ctx.obj["console"]

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@cli.command(
    name=CARGO_SUBCOMMAND,
    help="Format the root manifest and every workspace member manifest.",
)
@click.option(
    "--workspace-path",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Path to the workspace root.",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Show what would be changed without modifying files.",
)
@click.option(
    "--check",
    is_flag=True,
    default=False,
    help="Check if files need formatting (exit code 1 if changes are needed).",
)
@click.option(
    "--quiet",
    is_flag=True,
    default=False,
    help="Suppress output (errors and warnings are still shown).",
)
@click.option(
    "--diff",
    "show_diff",
    is_flag=True,
    default=False,
    help="Print a unified diff of every manifest that changes.",
)
@click.option(
    "--jobs",
    "-j",
    type=click.IntRange(min=1),
    default=None,
    help="Number of worker threads (default: automatic).",
)
@click.pass_context
def fmt_toml_command(
    ctx: click.Context,
    *,
    workspace_path: Path,
    dry_run: bool,
    check: bool,
    quiet: bool,
    show_diff: bool,
    jobs: int | None,
) -> None:
    """Normalize the manifests of a workspace."""
    console: ClickConsole = ctx.obj["console"]
    console.quiet = quiet

    try:
        workspace = discover(workspace_path)
    except FileNotFoundError as exc:
        raise FmtTomlFileNotFoundError(str(exc)) from exc
    except OSError as exc:
        raise FmtTomlIOError(f"Failed to read the workspace manifest: {exc}") from exc

    standard = _load_standard(workspace, console)
    inputs = _read_manifests(workspace)

    # Phase 1: normalize every manifest in memory.
    results = normalize_batch(
        ((str(path), text) for path, text in inputs),
        standard=standard,
        max_workers=jobs,
    )

    failed = [r for r in results if r.is_error]
    for result in failed:
        shown = _display(Path(result.path), workspace.root)
        console.error(f"❌ {shown}: {result.error}")
    if failed:
        raise FmtTomlDataError(
            f"{len(failed)} manifest(s) could not be formatted; no files were modified"
        )

    # Phase 2: write (or report) the changed manifests.
    apply = not dry_run and not check
    changed = [(path, text, r) for (path, text), r in zip(inputs, results) if r.is_changed]
    for path, original, result in changed:
        assert result.text is not None
        shown = _display(path, workspace.root)
        console.print(f"\n📦 {shown}")
        _report_diagnostics(console, result, shown)
        if apply:
            _write(path, result.text)
            console.print(f"   💾 Formatted with {result.changes} changes")
        else:
            console.print(f"   Would format with {result.changes} changes")
        if show_diff:
            console.print(render_patch(unified_diff(shown, original, result.text)), nl=False)

    for (path, _), result in zip(inputs, results):
        if not result.is_changed:
            _report_diagnostics(console, result, _display(path, workspace.root))

    total_changes = sum(r.changes for _, _, r in changed)
    if total_changes > 0:
        console.print("✨ Complete!")
        if apply:
            console.print(f"   Formatted {len(changed)} files")
            console.print(f"   Made {total_changes} changes")
        else:
            console.print(f"   {len(changed)} files need formatting")
            console.print(f"   {total_changes} total changes needed")
            if dry_run and not check:
                console.print("   Run without --dry-run to apply changes")
    else:
        console.print("✨ All files are properly formatted")

    if check and changed:
        ctx.exit(ExitCode.WOULD_CHANGE)
