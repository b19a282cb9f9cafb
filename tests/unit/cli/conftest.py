"""Shared fixtures for CLI command tests.

Common fixtures available from parent conftest.py:
- cli_runner: Click CLI test runner (from tests/conftest.py)
- temp_dir: Temporary directory for test files (from tests/conftest.py)
- clean_env: Clean environment without PROJGET_ vars (from tests/conftest.py)
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest


@pytest.fixture
def workdir(
    clean_env: None, temp_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> Path:
    """Isolated working and home directory for a CLI invocation."""
    home = temp_dir / "home"
    home.mkdir()
    work = temp_dir / "work"
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(work)
    return work


@pytest.fixture
def use_catalog(
    workdir: Path,
    make_catalog: Callable[[dict[str, dict[str, Any]]], Path],
    monkeypatch: pytest.MonkeyPatch,
) -> Callable[[dict[str, dict[str, Any]]], Path]:
    """Write a catalog and point PROJGET_PROJECTS_FILE at it."""

    def _use(projects: dict[str, dict[str, Any]]) -> Path:
        path = make_catalog(projects)
        monkeypatch.setenv("PROJGET_PROJECTS_FILE", str(path))
        return path

    return _use
