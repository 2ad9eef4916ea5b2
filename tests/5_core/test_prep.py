# tests/5_core/test_prep.py

import os
from pathlib import Path

import pytest

import dvln.errors as mod_errors
import dvln.prep as mod_prep
from tests.utils import make_ctx


@pytest.fixture
def four_cpus(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(os, "cpu_count", lambda: 4)


@pytest.mark.usefixtures("four_cpus")
@pytest.mark.parametrize(
    ("jobs", "expected"),
    [("all", 4), ("", 4), ("2", 2), ("9999", 4), ("0", 1)],
)
def test_resolve_jobs(jobs: str, expected: int) -> None:
    # --- setup ---
    ctx = make_ctx()
    ctx.resolver.set("jobs", jobs)

    # --- execute and verify ---
    assert mod_prep.resolve_jobs(ctx) == expected


def test_resolve_jobs_rejects_words() -> None:
    # --- setup ---
    ctx = make_ctx({"DVLN_JOBS": "lots"})

    # --- execute ---
    with pytest.raises(mod_errors.ValidationError) as exc_info:
        mod_prep.resolve_jobs(ctx)

    # --- verify ---
    err = exc_info.value
    assert err.code == 2003  # noqa: PLR2004
    assert err.message.startswith("Jobs value should be a number or 'all', found: lots\n")


def test_check_look_rejects_unknown() -> None:
    # --- setup ---
    ctx = make_ctx()
    ctx.resolver.set("look", "xml")

    # --- execute and verify ---
    with pytest.raises(mod_errors.ValidationError) as exc_info:
        mod_prep.check_look(ctx)
    assert exc_info.value.code == 2004  # noqa: PLR2004
    assert "found: 'xml'" in exc_info.value.message


def test_check_look_json_disables_interact() -> None:
    # --- setup ---
    ctx = make_ctx({"DVLN_INTERACT": "true"})
    ctx.resolver.set("look", "json")

    # --- execute ---
    mod_prep.check_look(ctx)

    # --- verify ---
    assert ctx.resolver.get_bool("interact") is False


@pytest.mark.parametrize(("globs", "expected"), [("", None), ("skip", None), ("env", "env")])
def test_check_globs(globs: str, expected: str | None) -> None:
    ctx = make_ctx()
    ctx.resolver.set("globs", globs)
    assert mod_prep.check_globs(ctx) == expected


def test_check_globs_rejects_unknown() -> None:
    # --- setup ---
    ctx = make_ctx()
    ctx.resolver.set("globs", "bogus")

    # --- execute and verify ---
    with pytest.raises(mod_errors.ValidationError) as exc_info:
        mod_prep.check_globs(ctx)
    assert exc_info.value.code == 2005  # noqa: PLR2004


def test_scan_workspace_walks_up(tmp_path: Path) -> None:
    # --- setup ---
    root = tmp_path / "ws"
    (root / ".dvln").mkdir(parents=True)
    nested = root / "pkgs" / "one"
    nested.mkdir(parents=True)
    ctx = make_ctx()
    ctx.resolver.set("wkspcdir", str(nested))

    # --- execute ---
    mod_prep.scan_workspace(ctx)

    # --- verify ---
    assert ctx.workspace_root == root.resolve()


def test_scan_workspace_missing_dir_is_error(tmp_path: Path) -> None:
    # --- setup ---
    ctx = make_ctx()
    ctx.resolver.set("wkspcdir", str(tmp_path / "missing"))

    # --- execute ---
    with pytest.raises(mod_errors.DvlnError) as exc_info:
        mod_prep.scan_workspace(ctx)

    # --- verify ---
    err = exc_info.value
    assert err.code == 2006  # noqa: PLR2004
    assert err.level == "error"
    assert err.message.startswith("Unexpected problem scanning for a workspace\n")


def test_final_prep_serve_is_fatal() -> None:
    # --- setup ---
    ctx = make_ctx()
    ctx.resolver.set("serve", True)

    # --- execute and verify ---
    with pytest.raises(mod_errors.FatalError) as exc_info:
        mod_prep.final_prep(ctx)
    assert exc_info.value.code == 2008  # noqa: PLR2004


def test_final_prep_continues_without_workspace() -> None:
    # --- setup ---
    ctx = make_ctx()

    # --- execute ---
    result = mod_prep.final_prep(ctx)

    # --- verify ---
    assert result is None
    assert ctx.workspace_root is None
    assert ctx.jobs is not None
