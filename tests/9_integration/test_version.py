# tests/9_integration/test_version.py

import json

import pytest

import dvln.cli as mod_cli
import dvln.meta as mod_meta
from tests.utils import capture_output, run_cli


def test_version_subcommand(capsys: pytest.CaptureFixture[str]) -> None:
    # --- execute ---
    result = run_cli(capsys, "version")

    # --- verify ---
    assert result.code == 0
    lines = result.out.splitlines()
    assert lines[0] == f"Version: {mod_meta.__version__}"
    assert lines[1] == f"API Rev: {mod_meta.API_VERSION}"
    assert lines[2].startswith("Build Date: ")


def test_version_flag_terse(capsys: pytest.CaptureFixture[str]) -> None:
    result = run_cli(capsys, "-V", "--terse")
    assert result.code == 0
    assert result.out == f"Version: {mod_meta.__version__}\n"


def test_verbose_wins_over_terse(capsys: pytest.CaptureFixture[str]) -> None:
    result = run_cli(capsys, "version", "-t", "-v")
    assert result.code == 0
    assert "Exec Name: " in result.out


def test_version_json() -> None:
    # --- execute ---
    with capture_output() as cap:
        code = mod_cli.execute(["--look=json", "version"], environ={})

    # --- verify ---
    assert code == 0
    payload = json.loads(cap.stdout.getvalue())
    data = payload["data"]
    assert payload["context"] == "dvlnVersion"
    assert data["kind"] == "version"
    assert data["verbosity"] == "regular"
    assert data["fields"] == ["toolVersion", "apiVersion", "buildDate"]
    assert data["items"][0]["toolVersion"] == mod_meta.__version__


def test_json_raw_from_env(capsys: pytest.CaptureFixture[str]) -> None:
    # --- execute ---
    result = run_cli(capsys, "-Ljson", "version", env={"DVLN_JSONRAW": "1"})

    # --- verify ---
    assert result.code == 0
    assert result.out.count("\n") == 1
    assert json.loads(result.out)["data"]["totalItems"] == 1
