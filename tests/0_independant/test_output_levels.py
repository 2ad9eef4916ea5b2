# tests/0_independant/test_output_levels.py

import logging

import pytest

import dvln.logs as mod_logs
import dvln.utils_logs as mod_utils_logs


def _record(level: int, msg: str, **extra: object) -> logging.LogRecord:
    record = logging.LogRecord("dvln", level, __file__, 10, msg, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.mark.parametrize(
    ("name", "level"),
    [
        ("trace", mod_utils_logs.TRACE_LEVEL),
        ("DEBUG", logging.DEBUG),
        ("verbose", mod_utils_logs.VERBOSE_LEVEL),
        ("print", logging.INFO),
        ("note", mod_utils_logs.NOTE_LEVEL),
        ("Issue", mod_utils_logs.ISSUE_LEVEL),
        ("fatal", logging.CRITICAL),
        ("discard", mod_utils_logs.DISCARD_LEVEL),
    ],
)
def test_level_from_name(name: str, level: int) -> None:
    assert mod_utils_logs.level_from_name(name) == level


def test_level_from_name_unknown_uses_default() -> None:
    assert mod_utils_logs.level_from_name("bogus") == logging.INFO
    assert mod_utils_logs.level_from_name("", logging.ERROR) == logging.ERROR


def test_level_to_name_prefers_dvln_names() -> None:
    assert mod_utils_logs.level_to_name(logging.CRITICAL) == "fatal"
    assert mod_utils_logs.level_to_name(logging.INFO) == "info"
    assert mod_utils_logs.level_to_name(mod_utils_logs.ISSUE_LEVEL) == "issue"


def test_levels_are_ordered() -> None:
    numbers = [mod_utils_logs.LEVELS[name] for name in mod_utils_logs.LEVEL_ORDER]
    assert numbers == sorted(numbers)


def test_parse_prefix_flags_expands_presets() -> None:
    # --- execute and verify ---
    assert mod_utils_logs.parse_prefix_flags("std") == ("date", "time")
    assert "longfile" not in mod_utils_logs.parse_prefix_flags("debug")
    assert mod_utils_logs.parse_prefix_flags("file|func,bogus") == ("file", "func")
    assert mod_utils_logs.parse_prefix_flags("none") == ()


def test_tag_formatter_adds_code_to_issue_tags() -> None:
    # --- setup ---
    fmt = mod_utils_logs.TagFormatter()
    record = _record(mod_utils_logs.ISSUE_LEVEL, "Please use a valid subcommand", code=2001)

    # --- execute ---
    text = fmt.format(record)

    # --- verify ---
    assert text == "Issue #2001: Please use a valid subcommand"


@pytest.mark.parametrize(
    ("level", "tag"),
    [
        (logging.DEBUG, "Debug: "),
        (mod_utils_logs.TRACE_LEVEL, "Trace: "),
        (mod_utils_logs.NOTE_LEVEL, "Note: "),
        (logging.ERROR, "Error #100: "),
        (logging.CRITICAL, "Fatal #100: "),
    ],
)
def test_tag_formatter_tags(level: int, tag: str) -> None:
    text = mod_utils_logs.TagFormatter().format(_record(level, "hello"))
    assert text == f"{tag}hello"


def test_tag_formatter_plain_info_and_raw_records() -> None:
    fmt = mod_utils_logs.TagFormatter(prefix_flags=("date", "time"))
    assert fmt.format(_record(mod_utils_logs.ISSUE_LEVEL, "{}", raw=True)) == "{}"
    assert fmt.format(_record(logging.INFO, "hi")).endswith(": hi")


def test_tag_formatter_smart_prefix_only_on_debug() -> None:
    # --- setup ---
    fmt = mod_utils_logs.TagFormatter(prefix_flags=("pid",), smart_prefix=True)

    # --- execute ---
    info = fmt.format(_record(logging.INFO, "hi"))
    debug = fmt.format(_record(logging.DEBUG, "hi"))

    # --- verify ---
    assert info == "hi"
    assert debug.startswith("[pid ")


def test_dual_stream_routing(
    capsys: pytest.CaptureFixture[str],
    direct_logger: mod_logs.AppLogger,
) -> None:
    # --- execute ---
    direct_logger.info("to stdout")
    direct_logger.issue("to stderr", code=2222)
    direct_logger.info("pinned", extra={"stream": "stderr"})

    # --- verify ---
    out = capsys.readouterr()
    assert out.out == "to stdout\n"
    assert out.err == "Issue #2222: to stderr\npinned\n"


def test_screen_threshold_filters(
    capsys: pytest.CaptureFixture[str],
    direct_logger: mod_logs.AppLogger,
) -> None:
    # --- setup ---
    direct_logger.set_threshold(logging.ERROR, mod_utils_logs.FOR_SCREEN)

    # --- execute ---
    direct_logger.info("hidden")
    direct_logger.error("shown")

    # --- verify ---
    out = capsys.readouterr()
    assert out.out == ""
    assert "Error #100: shown" in out.err


def test_debug_scope_limits_debug_records(
    capsys: pytest.CaptureFixture[str],
    direct_logger: mod_logs.AppLogger,
) -> None:
    # --- setup ---
    direct_logger.set_threshold(logging.DEBUG, mod_utils_logs.FOR_SCREEN)
    direct_logger.configure({"OUT_DEBUG_SCOPE": "no_such_module"})

    # --- execute ---
    direct_logger.debug("filtered out")
    direct_logger.info("kept")

    # --- verify ---
    assert capsys.readouterr().out == "kept\n"
