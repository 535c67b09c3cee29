# topmark:header:start
#
#   project      : cargo-fmt-toml
#   file         : conftest.py
#   file_relpath : tests/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Pytest configuration for the cargo-fmt-toml test suite.

This file sets up global fixtures and customizes the logging configuration for
test runs, ensuring consistent and verbose logging output during testing.

Notes:
    Tests should respect the immutable/mutable standard split:

    - Build standards using `cargo_fmt_toml.config.standard.MutableStandard`
      (mutable), then `freeze()` into a `Standard` for **public API** calls.
    - Do **not** mutate a frozen `Standard`. If you need to tweak one, call
      `Standard.thaw()`, edit the returned builder, then `freeze()` again.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar, cast

import pytest

from cargo_fmt_toml.config import logging
from cargo_fmt_toml.config.standard import MutableStandard, Standard
from cargo_fmt_toml.core.diagnostics import DiagnosticLog
from cargo_fmt_toml.document import parse

F = TypeVar("F", bound=Callable[..., object])

# This defines the type for the decorator function itself:
# It takes a Callable (F) and returns the same Callable (F).
DecoratorType = Callable[[F], F]


def as_typed_mark(mark: Any) -> DecoratorType[Any]:
    """Wrap a pytest mark so static type checkers preserve the function type.

    Args:
        mark (Any): A pytest mark decorator such as `pytest.mark.integration`.

    Returns:
        DecoratorType[Any]: A decorator that preserves the wrapped function's type.
    """

    def _decorator(func: F) -> F:
        return cast("F", mark(func))

    return _decorator


mark_integration: DecoratorType[Any] = as_typed_mark(pytest.mark.integration)
mark_pipeline: DecoratorType[Any] = as_typed_mark(pytest.mark.pipeline)
mark_cli: DecoratorType[Any] = as_typed_mark(pytest.mark.cli)
mark_hypothesis_slow: DecoratorType[Any] = as_typed_mark(pytest.mark.hypothesis_slow)


def parametrize(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.mark.parametrize`.

    Args:
        *args (Any): Positional arguments forwarded to `pytest.mark.parametrize`.
        **kwargs (Any): Keyword arguments forwarded to `pytest.mark.parametrize`.

    Returns:
        Callable[[F], F]: A decorator that preserves the wrapped function's type.
    """
    mark: pytest.MarkDecorator = pytest.mark.parametrize(*args, **kwargs)
    return as_typed_mark(mark)


def hookimpl(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.hookimpl`.

    Args:
        *args (Any): Positional arguments forwarded to `pytest.hookimpl`.
        **kwargs (Any): Keyword arguments forwarded to `pytest.hookimpl`.

    Returns:
        Callable[[F], F]: A decorator that preserves the wrapped function's type.
    """
    return as_typed_mark(pytest.hookimpl(*args, **kwargs))


def fixture(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.fixture`.

    Args:
        *args (Any): Positional arguments forwarded to `pytest.fixture`.
        **kwargs (Any): Keyword arguments forwarded to `pytest.fixture`.

    Returns:
        Callable[[F], F]: A decorator that preserves the wrapped function's type.
    """
    return as_typed_mark(pytest.fixture(*args, **kwargs))


@pytest.fixture(autouse=True)
def silence_env_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure the runtime log level is not forced via env during tests.

    This avoids accidental DEBUG/TRACE noise when the developer has exported
    CARGO_FMT_TOML_LOG_LEVEL in their shell.

    Args:
        monkeypatch (pytest.MonkeyPatch): Pytest monkeypatch fixture used to manipulate
            environment variables.
    """
    monkeypatch.delenv(logging.LOG_LEVEL_ENV_VAR, raising=False)


@hookimpl(tryfirst=True)
def pytest_configure(config: pytest.Config) -> None:  # pylint: disable=unused-argument
    """Set the logging level to TRACE for all tests.

    Args:
        config (pytest.Config): The pytest configuration object.
    """
    logging.setup_logging(level=logging.TRACE_LEVEL)


@pytest.fixture
def standard() -> Standard:
    """Return the built-in standard."""
    return MutableStandard.from_defaults().freeze()


@pytest.fixture
def diagnostics() -> DiagnosticLog:
    """Return an empty diagnostic log for calling a pass directly."""
    return DiagnosticLog()


def make_standard(**overrides: Any) -> Standard:
    """Return a frozen `Standard` built from defaults and overrides.

    Args:
        **overrides (Any): Attribute overrides applied to the mutable builder
            (e.g. ``section_order=["dependencies", "package"]``).

    Returns:
        Standard: An immutable standard for use in tests.
    """
    m: MutableStandard = MutableStandard.from_defaults()
    for k, v in overrides.items():
        setattr(m, k, v)
    return m.freeze()


def apply_pass(
    func: Callable[..., int],
    text: str,
    standard: Standard | None = None,
) -> tuple[str, int, DiagnosticLog]:
    """Parse ``text``, run one pass over it and render the result.

    Args:
        func (Callable[..., int]): A pass function such as ``sort_dependencies``.
        text (str): Manifest text.
        standard (Standard | None): Standard to use (default: built-in).

    Returns:
        tuple[str, int, DiagnosticLog]: Rendered text, change count and diagnostics.
    """
    document = parse(text)
    log = DiagnosticLog()
    count = func(document, standard or MutableStandard.from_defaults().freeze(), log)
    return document.render(), count, log


@pytest.fixture
def isolation(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run each CLI test in an isolated temporary workspace directory.

    Args:
        tmp_path (Path): The pytest-provided temporary directory for the test.
        monkeypatch (pytest.MonkeyPatch): Fixture to change the working directory.

    Returns:
        Path: The (empty) workspace root, also the current working directory.
    """
    cwd: Path = tmp_path / "ws"
    cwd.mkdir()
    monkeypatch.chdir(cwd)
    return cwd
