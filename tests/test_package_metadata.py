"""Tests for ensuring project packaging metadata stays consistent."""

from __future__ import annotations

import tomllib
from pathlib import Path

import cordkeeper

ROOT = Path(__file__).resolve().parents[1]


def _load_pyproject() -> dict:
    with (ROOT / "pyproject.toml").open("rb") as handle:
        return tomllib.load(handle)


def test_pyproject_declares_expected_metadata() -> None:
    pyproject = _load_pyproject()
    poetry = pyproject["tool"]["poetry"]

    assert poetry["name"] == "cordkeeper"
    assert poetry["version"] == cordkeeper.__version__
    assert poetry["scripts"]["cordkeeper"] == "cordkeeper.__main__:main"

    dependencies = poetry["dependencies"]
    for dependency in ("pydantic", "textual", "rich", "platformdirs", "loguru", "tzdata"):
        assert dependency in dependencies, f"missing dependency declaration for {dependency}"


def test_pytest_is_exposed_through_test_extra() -> None:
    poetry = _load_pyproject()["tool"]["poetry"]

    assert poetry["dependencies"]["pytest"]["optional"] is True
    assert poetry["extras"]["test"] == ["pytest"]


def test_logging_setup_lives_in_logger_module() -> None:
    from cordkeeper.logger import setup_logger

    assert callable(setup_logger)
