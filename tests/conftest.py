# tests/conftest.py
"""Shared test setup for project.

Every test runs with a private HOME (so no real user config is picked up),
a private temp dir (for `--record tmp` logfiles), no color, no inherited
DVLN_* variables and a freshly reset app logger.
"""

import os
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest

import dvln.logs as mod_logs
import dvln.meta as mod_meta
from tests.utils.log_fixtures import direct_logger


# These fixtures are intentionally re-exported so pytest can discover them.
__all__ = [
    "direct_logger",
]


# ----------------------------------------------------------------------
# Fixtures
# ----------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_env(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> Generator[Path, None, None]:
    """Point HOME, cwd and the temp dir into tmp_path; strip DVLN_* vars."""
    home = tmp_path / "home"
    work = tmp_path / "work"
    temp = tmp_path / "tmp"
    for d in (home, work, temp):
        d.mkdir()

    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.delenv("FORCE_COLOR", raising=False)
    for name in list(os.environ):
        if name.startswith(f"{mod_meta.PROGRAM_ENV}_"):
            monkeypatch.delenv(name)
    monkeypatch.setattr(tempfile, "tempdir", str(temp))
    monkeypatch.chdir(work)

    logger = mod_logs.getAppLogger()
    logger.reset_output()
    yield tmp_path
    # After test, reset again to ensure clean state for next test
    logger.reset_output()


@pytest.fixture
def home_dir(isolated_env: Path) -> Path:
    return isolated_env / "home"


@pytest.fixture
def temp_dir(isolated_env: Path) -> Path:
    return isolated_env / "tmp"

