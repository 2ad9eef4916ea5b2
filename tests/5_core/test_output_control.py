# tests/5_core/test_output_control.py

import logging
from pathlib import Path

import pytest

import dvln.commands as mod_commands
import dvln.errors as mod_errors
import dvln.flags as mod_flags
import dvln.output_control as mod_output_control
import dvln.utils_logs as mod_utils_logs
from tests.utils import make_ctx


def _prepared(argv: list[str], env: dict[str, str] | None = None):  # noqa: ANN202
    ctx = make_ctx(env)
    mod_flags.push_cli_opts(ctx, mod_commands.ROOT_COMMAND, argv)
    mod_output_control.adjust_out_levels(ctx)
    return ctx


def test_defaults_leave_logfile_discarded() -> None:
    # --- execute ---
    ctx = _prepared(["version"])

    # --- verify ---
    assert ctx.output.screen_threshold == logging.INFO
    assert ctx.output.logfile_threshold == mod_utils_logs.DISCARD_LEVEL
    assert ctx.output.logfile_path is None


def test_debug_sets_both_destinations() -> None:
    ctx = _prepared(["--debug", "version"])
    assert ctx.output.screen_threshold == logging.DEBUG
    assert ctx.output.logfile_threshold == logging.DEBUG


def test_debug_verbose_is_trace_with_debug_prefix() -> None:
    # --- execute ---
    ctx = _prepared(["-D", "-v", "version"])

    # --- verify ---
    assert ctx.output.screen_threshold == mod_utils_logs.TRACE_LEVEL
    assert ctx.output.logfile_threshold == mod_utils_logs.TRACE_LEVEL
    assert ctx.logger.out_config["OUT_SCREEN_FLAGS"] == "debug"


def test_debug_verbose_keeps_user_screen_flags() -> None:
    ctx = _prepared(["-Dv", "version"], {"DVLN_SCREEN_FLAGS": "none"})
    assert ctx.logger.out_config["OUT_SCREEN_FLAGS"] == ""


def test_verbose_alone() -> None:
    ctx = _prepared(["--verbose", "version"])
    assert ctx.output.screen_threshold == mod_utils_logs.VERBOSE_LEVEL


def test_quiet_raises_screen_threshold_only() -> None:
    # --- execute ---
    ctx = _prepared(["--quiet", "version"])

    # --- verify ---
    assert ctx.output.screen_threshold == logging.ERROR
    assert ctx.output.logfile_threshold == mod_utils_logs.DISCARD_LEVEL


def test_screenlevel_from_env() -> None:
    ctx = _prepared(["version"], {"DVLN_SCREENLEVEL": "note"})
    assert ctx.output.screen_threshold == mod_utils_logs.NOTE_LEVEL


def test_control_env_settings_forwarding() -> None:
    # --- execute ---
    settings = mod_output_control.control_env_settings(
        {
            "DVLN_SCREEN_FLAGS": "none",
            "DVLN_LOGFILE_FLAGS": "std",
            "DVLN_DEBUG_SCOPE": "",
        }
    )

    # --- verify ---
    assert settings == {"OUT_SCREEN_FLAGS": "", "OUT_LOGFILE_FLAGS": "std"}


def test_record_temp_allocates_once(temp_dir: Path) -> None:
    # --- setup ---
    ctx = _prepared(["--record=tmp", "version"])
    first = ctx.output.temp_logfile_path

    # --- execute ---
    mod_output_control.adjust_out_levels(ctx)
    again = mod_output_control.allocate_temp_logfile(ctx)

    # --- verify ---
    assert first is not None
    assert first.parent == temp_dir
    assert first.name.startswith("dvln.")
    assert again == first
    assert list(temp_dir.iterdir()) == [first]
    assert ctx.resolver.get_string("record") == str(first)
    assert ctx.output.temp_note == f"Temp output logfile: {first}"
    assert ctx.output.logfile_threshold == logging.INFO


def test_record_temp_in_json_stores_note() -> None:
    # --- execute ---
    ctx = _prepared(["--record", "temp", "--look", "json", "version"])

    # --- verify ---
    assert ctx.output.temp_note == ""
    assert ctx.api.note is not None
    assert ctx.api.note["code"] == 101  # noqa: PLR2004
    assert ctx.api.note["level"] == "note"


def test_temp_note_moves_to_api_when_look_turns_json() -> None:
    # --- setup ---
    ctx = _prepared(["--record=tmp", "version"])
    note = ctx.output.temp_note
    assert note.startswith("Temp output logfile: ")

    # --- execute ---
    ctx.resolver.set_config_values({"look": "json"})
    mod_output_control.adjust_out_levels(ctx)

    # --- verify ---
    assert ctx.output.temp_note == ""
    assert ctx.api.note == {"message": note, "code": 101, "level": "note"}


def test_record_to_file_with_logfilelevel(home_dir: Path) -> None:
    # --- execute ---
    ctx = _prepared(["--record", "~/logs/dvln.log", "version"])

    # --- verify ---
    assert ctx.output.logfile_path == home_dir / "logs" / "dvln.log"
    assert ctx.resolver.get_string("record") == str(Path("~") / "logs" / "dvln.log")
    assert ctx.output.logfile_threshold == logging.INFO


def test_record_unwritable_is_fatal(tmp_path: Path) -> None:
    # --- setup ---
    blocker = tmp_path / "file"
    blocker.write_text("")

    # --- execute and verify ---
    with pytest.raises(mod_errors.FatalError) as exc_info:
        _prepared(["--record", str(blocker / "out.log"), "version"])
    assert exc_info.value.code == 2010  # noqa: PLR2004


def test_logfile_off_hook(tmp_path: Path) -> None:
    # --- execute ---
    ctx = _prepared(
        ["--record", str(tmp_path / "out.log"), "--debug", "version"],
        {"DVLN_LOGFILE_OFF": "1"},
    )

    # --- verify ---
    assert ctx.output.screen_threshold == logging.DEBUG
    assert ctx.output.logfile_threshold == mod_utils_logs.DISCARD_LEVEL
