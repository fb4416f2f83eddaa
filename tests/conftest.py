"""
Shared pytest fixtures for deepfuse tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import os as _os
import pathlib as _pathlib
import typing as _typing

import click.testing as _click_testing
import pytest as _pytest

import deepfuse.structure as structure

# =============================================================================
# Environment isolation
# =============================================================================


@_pytest.fixture(autouse=True)
def clean_env(monkeypatch: _pytest.MonkeyPatch) -> None:
    """Remove DEEPFUSE_* variables so settings come from defaults."""
    for key in list(_os.environ):
        if key.startswith("DEEPFUSE_"):
            monkeypatch.delenv(key, raising=False)


@_pytest.fixture
def cli_runner() -> _click_testing.CliRunner:
    """Click runner for invoking the deepfuse command."""
    return _click_testing.CliRunner()


# =============================================================================
# Sample structures
# =============================================================================


@_pytest.fixture
def test_obj1() -> dict[str, _typing.Any]:
    """First sample structure with scalars, lists and nesting."""
    return {
        "a": 1,
        "b": [1, 1],
        "c": {"cc": "test1", "dd": {"ddd": [1]}},
        "d": [{"dd": 1}],
        "e": {"ee": [1]},
        "f": 1,
    }


@_pytest.fixture
def test_obj2() -> dict[str, _typing.Any]:
    """Second sample structure overlapping test_obj1."""
    return {
        "a": 2,
        "b": [2, 2],
        "c": {"cc": "test2", "dd": {"ddd": [2]}},
        "d": [{"dd": 2}],
        "e": {"ee": [2]},
        "g": 2,
    }


@_pytest.fixture
def test_obj3() -> dict[str, _typing.Any]:
    """Third sample structure overlapping the other two."""
    return {
        "a": 3,
        "b": [3, 3],
        "c": {"cc": "test3", "dd": {"ddd": [3]}},
        "d": [{"dd": 3}],
        "e": {"ee": [3]},
        "h": 3,
    }


def _get_full_name(obj: _typing.Any) -> str:
    return f"{obj['first']} {obj['last']}"


def _set_full_name(obj: _typing.Any, value: str) -> None:
    first, last = value.split(" ", 1)
    obj["first"] = first
    obj["last"] = last


@_pytest.fixture
def person_factory() -> _typing.Callable[..., structure.Structure]:
    """Build Structures with a full_name getter/setter pair."""

    def _make(first: str, last: str, **extra: _typing.Any) -> structure.Structure:
        person = structure.Structure({"first": first, "last": last, **extra})
        person.define_property(
            "full_name",
            {"get": _get_full_name, "set": _set_full_name, "enumerable": True},
        )
        return person

    return _make


@_pytest.fixture
def yaml_file(tmp_path: _pathlib.Path) -> _typing.Callable[[str, str], _pathlib.Path]:
    """Write a document to a temporary file and return its path."""

    def _write(name: str, content: str) -> _pathlib.Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write
