# tests/5_core/test_analysis.py

import pytest

import dvln.analysis as mod_analysis
from tests.utils import run_cli


def test_disabled_timer_records_silently(capsys: pytest.CaptureFixture[str]) -> None:
    # --- setup ---
    timer = mod_analysis.StepTimer()

    # --- execute ---
    step = timer.step("quiet")

    # --- verify ---
    assert step.label == "quiet"
    assert step.elapsed_ms >= 0
    assert timer.steps == [step]
    assert capsys.readouterr().out == ""


def test_analysis_flag_prints_checkpoints(capsys: pytest.CaptureFixture[str]) -> None:
    # --- execute ---
    result = run_cli(capsys, "--analysis", "pull")

    # --- verify ---
    assert result.code == 0
    assert "dvln.execute(): complete: " in result.out
    assert "KiB (peak " in result.out
