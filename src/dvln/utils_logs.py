# src/dvln/utils_logs.py
"""Shared dvln output service: levels, screen and logfile destinations."""

from __future__ import annotations

import builtins
import importlib
import logging
import os
import sys
import tempfile
from collections.abc import Callable, Mapping
from contextlib import suppress
from pathlib import Path
from typing import Any, TextIO, cast

from .constants import CODE_DEFAULT, CONTROL_ENV_NONE, DEFAULT_LOG_LEVEL


# --- Constants ---------------------------------------------------------------

# Flag for quick runtime enable/disable
TEST_TRACE_ENABLED = os.getenv("TEST_TRACE", "").lower() in {"1", "true", "yes"}

# Lazy, safe import — avoids patched time modules
#   in environments like pytest or eventlet
_real_time = importlib.import_module("time")

# ANSI Colors
RESET = "\033[0m"
CYAN = "\033[36m"
YELLOW = "\033[93m"
RED = "\033[91m"
GREEN = "\033[92m"
GRAY = "\033[90m"

# Output levels, lowest (chattiest) first
TRACE_LEVEL = logging.DEBUG - 5
# DEBUG      - builtin
VERBOSE_LEVEL = logging.DEBUG + 5
# INFO       - builtin
NOTE_LEVEL = logging.INFO + 5
ISSUE_LEVEL = logging.WARNING + 5
# ERROR      - builtin
FATAL_LEVEL = logging.CRITICAL
DISCARD_LEVEL = logging.CRITICAL + 1  # one above the highest builtin level

LEVEL_ORDER = [
    "trace",
    "debug",
    "verbose",
    "info",
    "note",
    "issue",
    "error",
    "fatal",
    "discard",  # disables a destination
]

LEVELS: dict[str, int] = {
    "trace": TRACE_LEVEL,
    "debug": logging.DEBUG,
    "verbose": VERBOSE_LEVEL,
    "info": logging.INFO,
    "print": logging.INFO,
    "note": NOTE_LEVEL,
    "issue": ISSUE_LEVEL,
    "error": logging.ERROR,
    "fatal": FATAL_LEVEL,
    "discard": DISCARD_LEVEL,
}

# levels whose tag carries the diagnostic code ("Issue #2001: ")
CODED_LEVELS = frozenset({ISSUE_LEVEL, logging.ERROR, FATAL_LEVEL})

TAG_STYLES = {
    "TRACE": (GRAY, "Trace:"),
    "DEBUG": (CYAN, "Debug:"),
    "NOTE": (GREEN, "Note:"),
    "ISSUE": (YELLOW, "Issue"),
    "ERROR": (RED, "Error"),
    "CRITICAL": (RED, "Fatal"),
}

# sanity check
assert set(TAG_STYLES.keys()) <= {  # noqa: S101
    *(lvl.upper() for lvl in LEVEL_ORDER),
    "CRITICAL",
}, "TAG_STYLES contains unknown levels"

# destinations
FOR_SCREEN = 1
FOR_LOGFILE = 2
FOR_BOTH = FOR_SCREEN | FOR_LOGFILE

# metadata prefix flags; presets expand to several flags
PREFIX_FLAGS = ("date", "time", "micro", "pid", "file", "longfile", "func", "level")
PREFIX_PRESETS: dict[str, tuple[str, ...]] = {
    "debug": ("date", "time", "micro", "pid", "file", "func", "level"),
    "std": ("date", "time"),
}
DEFAULT_LOGFILE_FLAGS: tuple[str, ...] = ("date", "time")

STACK_TRACE_DESTINATIONS: dict[str, int] = {
    "screen": FOR_SCREEN,
    "logfile": FOR_LOGFILE,
    "both": FOR_BOTH,
}


def level_from_name(name: str | None, default: int = logging.INFO) -> int:
    """Map a level name ("debug", "Issue", ...) to its number."""
    if not name:
        return default
    return LEVELS.get(name.strip().lower(), default)


def level_to_name(level: int) -> str:
    """Lower-case dvln level name for a level number ("fatal" for CRITICAL)."""
    for name, number in LEVELS.items():
        if number == level and name != "print":
            return name
    return logging.getLevelName(level).lower()


def parse_prefix_flags(value: str | None) -> tuple[str, ...]:
    """Turn "debug" or "date,time,file" into a tuple of known prefix flags."""
    if not value or value == CONTROL_ENV_NONE:
        return ()
    flags: list[str] = []
    for raw in value.replace("|", ",").split(","):
        token = raw.strip().lower()
        for flag in PREFIX_PRESETS.get(token, (token,)):
            if flag in PREFIX_FLAGS and flag not in flags:
                flags.append(flag)
    return tuple(flags)


def is_truthy(value: str | None) -> bool:
    return (value or "").strip().lower() in {"1", "t", "true", "yes", "on"}


# --- Logging that bypasses streams -------------------------------------------------


def safe_log(msg: str) -> None:
    """Emergency logger that never fails."""
    stream = cast("TextIO", sys.__stderr__)
    try:
        print(msg, file=stream)
    except Exception:  # noqa: BLE001
        # As final guardrail — never crash during crash reporting
        with suppress(Exception):
            stream.write(f"[INTERNAL] {msg}\n")


# --- Logging for debugging tests -------------------------------------------------


def make_test_trace(icon: str = "🧵") -> Callable[..., Any]:
    def local_trace(label: str, *args: Any) -> Any:
        return TEST_TRACE(label, *args, icon=icon)

    return local_trace


def TEST_TRACE(label: str, *args: Any, icon: str = "🧵") -> None:  # noqa: N802
    """Emit a synchronized, flush-safe diagnostic line.

    Args:
        label: Short identifier or context string.
        *args: Optional values to append.
        icon: Emoji prefix/suffix for easier visual scanning.

    """
    if not TEST_TRACE_ENABLED:
        return

    ts = _real_time.monotonic()
    # builtins.print more reliable than sys.stdout.write + sys.stdout.flush
    builtins.print(
        f"{icon} [TEST TRACE {ts:.6f}] {label}",
        *args,
        file=sys.__stderr__,
        flush=True,
    )


# --- Output logger -----------------------------------------------------------


class OutputLogger(logging.Logger):
    """Logger driving dvln's screen and logfile destinations.

    Each destination has its own threshold. The screen starts at INFO, the
    logfile at DISCARD with no file attached. The logger's own level always
    tracks the lower of the two so filtering happens per handler.
    """

    enable_color: bool = False

    _logging_module_extended: bool = False

    # if stdout or stderr are redirected, we need to repoint
    _last_stream_ids: tuple[TextIO, TextIO] | None = None

    def __init__(
        self,
        name: str,
        level: int = logging.NOTSET,
        *,
        enable_color: bool | None = None,
    ) -> None:
        super().__init__(name, level)

        self.enable_color = (
            enable_color
            if enable_color is not None
            else type(self).determine_color_enabled()
        )
        self.propagate = False  # avoid duplicate root logs

        self.screen_handler: DualStreamHandler | None = None
        self.logfile_handler: logging.FileHandler | None = None
        self.logfile_path: Path | None = None
        self.temp_logfile_path: Path | None = None
        self.out_config: dict[str, str] = {}
        self.stack_trace_dests = 0
        self._screen_threshold = level_from_name(DEFAULT_LOG_LEVEL)
        self._logfile_threshold = DISCARD_LEVEL
        self._scope_filter: DebugScopeFilter | None = None
        self._sync_level()

    # --- handlers ---

    def ensure_handlers(self) -> None:
        if self._last_stream_ids is None or self.screen_handler is None:
            rebuild = True
        else:
            last_stdout, last_stderr = self._last_stream_ids
            rebuild = (last_stdout is not sys.stdout) or (last_stderr is not sys.stderr)

        if rebuild:
            if self.screen_handler is not None:
                self.removeHandler(self.screen_handler)
            h = DualStreamHandler()
            h.setFormatter(
                TagFormatter(prefix_flags=parse_prefix_flags(self._screen_flags()))
            )
            h.enable_color = self.enable_color
            h.setLevel(self._screen_threshold)
            self.screen_handler = h
            self.addHandler(h)
            self._last_stream_ids = (sys.stdout, sys.stderr)
            self._apply_stack_trace_config()
            TEST_TRACE("ensure_handlers()", f"rebuilt_handlers={self.handlers}")

    def _log(  # type: ignore[override]
        self, level: int, msg: str, args: tuple[Any, ...], **kwargs: Any
    ) -> None:
        TEST_TRACE(
            "_log",
            f"logger={self.name}",
            f"id={id(self)}",
            f"level={self.level_name}",
            f"msg={msg!r}",
        )
        self.ensure_handlers()
        super()._log(level, msg, args, **kwargs)

    # --- thresholds ---

    def _sync_level(self) -> None:
        logfile = self._logfile_threshold if self.logfile_handler else DISCARD_LEVEL
        super().setLevel(min(self._screen_threshold, logfile))

    def setLevel(self, level: int | str) -> None:  # noqa: N802
        """Case insensitive version; sets the screen threshold."""
        if isinstance(level, str):
            level = level_from_name(level)
        self.set_threshold(level, FOR_SCREEN)

    def set_threshold(self, level: int, dest: int = FOR_BOTH) -> None:
        if dest & FOR_SCREEN:
            self._screen_threshold = level
            if self.screen_handler is not None:
                self.screen_handler.setLevel(level)
        if dest & FOR_LOGFILE:
            self._logfile_threshold = level
            if self.logfile_handler is not None:
                self.logfile_handler.setLevel(level)
        self._sync_level()

    def threshold(self, dest: int) -> int:
        if dest == FOR_LOGFILE:
            return self._logfile_threshold
        return self._screen_threshold

    @property
    def level_name(self) -> str:
        """Return the current effective level name."""
        return level_to_name(self.getEffectiveLevel())

    # --- logfile ---

    def set_logfile(self, path: str | Path) -> Path:
        """Mirror output into `path` (append mode), replacing any prior file."""
        target = Path(path)
        self.close_logfile()
        target.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(target, mode="a", encoding="utf-8")
        handler.setFormatter(
            TagFormatter(prefix_flags=parse_prefix_flags(self._logfile_flags()))
        )
        handler.addFilter(ScreenOnlyFilter())
        handler.setLevel(self._logfile_threshold)
        self.logfile_handler = handler
        self.logfile_path = target
        self.addHandler(handler)
        self._apply_stack_trace_config()
        self._sync_level()
        self.trace("Logfile destination opened: %s", target)
        return target

    def use_temp_logfile(self, prefix: str) -> Path:
        """Allocate a temp logfile once; later calls return the same path."""
        if self.temp_logfile_path is not None:
            return self.temp_logfile_path
        fd, name = tempfile.mkstemp(prefix=prefix)
        os.close(fd)
        self.temp_logfile_path = self.set_logfile(name)
        return self.temp_logfile_path

    def close_logfile(self) -> None:
        if self.logfile_handler is None:
            return
        self.removeHandler(self.logfile_handler)
        self.logfile_handler.close()
        self.logfile_handler = None
        self.logfile_path = None
        self._sync_level()

    # --- OUT_* configuration ---

    def configure(self, settings: Mapping[str, str]) -> None:
        """Apply OUT_* settings (screen/logfile flags, debug scope, ...)."""
        self.out_config.update(settings)
        if self.screen_handler is not None:
            fmt = cast("TagFormatter", self.screen_handler.formatter)
            fmt.prefix_flags = parse_prefix_flags(self._screen_flags())
        if self.logfile_handler is not None:
            fmt = cast("TagFormatter", self.logfile_handler.formatter)
            fmt.prefix_flags = parse_prefix_flags(self._logfile_flags())
        smart = is_truthy(self.out_config.get("OUT_SMART_FLAGS_PREFIX"))
        for handler in (self.screen_handler, self.logfile_handler):
            if handler is not None:
                cast("TagFormatter", handler.formatter).smart_prefix = smart

        scope = self.out_config.get("OUT_DEBUG_SCOPE", "")
        if self._scope_filter is not None:
            self.removeFilter(self._scope_filter)
            self._scope_filter = None
        if scope:
            self._scope_filter = DebugScopeFilter(scope)
            self.addFilter(self._scope_filter)

        self.stack_trace_dests = 0
        for raw in self.out_config.get("OUT_STACK_TRACE_CONFIG", "").split(","):
            self.stack_trace_dests |= STACK_TRACE_DESTINATIONS.get(
                raw.strip().lower(), 0
            )
        self._apply_stack_trace_config()
        self.trace("Output service configured: %s", self.out_config)

    def _screen_flags(self) -> str:
        return self.out_config.get("OUT_SCREEN_FLAGS", "")

    def _logfile_flags(self) -> str:
        return self.out_config.get("OUT_LOGFILE_FLAGS", ",".join(DEFAULT_LOGFILE_FLAGS))

    def _apply_stack_trace_config(self) -> None:
        pairs = ((self.screen_handler, FOR_SCREEN), (self.logfile_handler, FOR_LOGFILE))
        for handler, dest in pairs:
            if handler is None:
                continue
            fmt = cast("TagFormatter", handler.formatter)
            fmt.tracebacks = not self.stack_trace_dests or bool(
                self.stack_trace_dests & dest
            )

    def wants_traceback(self) -> bool:
        """Attach exc_info to error records when debugging or configured to."""
        return self.isEnabledFor(logging.DEBUG) or bool(self.stack_trace_dests)

    def reset_output(self) -> None:
        """Return every destination to its pristine state."""
        self.close_logfile()
        self.temp_logfile_path = None
        self.out_config.clear()
        self.stack_trace_dests = 0
        for flt in list(self.filters):
            self.removeFilter(flt)
        self._scope_filter = None
        if self.screen_handler is not None:
            self.removeHandler(self.screen_handler)
        self.screen_handler = None
        self._last_stream_ids = None
        self.enable_color = type(self).determine_color_enabled()
        self._screen_threshold = level_from_name(DEFAULT_LOG_LEVEL)
        self._logfile_threshold = DISCARD_LEVEL
        self._sync_level()

    # --- class-level setup ---

    @classmethod
    def determine_color_enabled(cls) -> bool:
        """Return True if colored output should be enabled."""
        # Respect explicit overrides
        if "NO_COLOR" in os.environ:
            return False
        if os.getenv("FORCE_COLOR", "").lower() in {"1", "true", "yes"}:
            return True

        # Auto-detect: use color if output is a TTY
        return sys.stdout.isatty()

    @classmethod
    def extend_logging_module(cls) -> bool:
        """The return value tells you if we ran or not.
        If it is False and you're calling it via super(),
        you can likely skip your code too."""
        # ensure module-level logging setup runs only once
        if cls._logging_module_extended:
            return False
        cls._logging_module_extended = True

        logging.setLoggerClass(cls)

        logging.addLevelName(TRACE_LEVEL, "TRACE")
        logging.addLevelName(VERBOSE_LEVEL, "VERBOSE")
        logging.addLevelName(NOTE_LEVEL, "NOTE")
        logging.addLevelName(ISSUE_LEVEL, "ISSUE")
        logging.addLevelName(DISCARD_LEVEL, "DISCARD")

        logging.TRACE = TRACE_LEVEL  # type: ignore[attr-defined]
        logging.VERBOSE = VERBOSE_LEVEL  # type: ignore[attr-defined]
        logging.NOTE = NOTE_LEVEL  # type: ignore[attr-defined]
        logging.ISSUE = ISSUE_LEVEL  # type: ignore[attr-defined]
        logging.DISCARD = DISCARD_LEVEL  # type: ignore[attr-defined]

        return True

    # --- emitters ---

    def trace(self, msg: str, *args: Any, **kwargs: Any) -> None:
        if self.isEnabledFor(TRACE_LEVEL):
            self._log(TRACE_LEVEL, msg, args, **kwargs)

    def verbose(self, msg: str, *args: Any, **kwargs: Any) -> None:
        if self.isEnabledFor(VERBOSE_LEVEL):
            self._log(VERBOSE_LEVEL, msg, args, **kwargs)

    def note(self, msg: str, *args: Any, **kwargs: Any) -> None:
        if self.isEnabledFor(NOTE_LEVEL):
            self._log(NOTE_LEVEL, msg, args, **kwargs)

    def issue(
        self, msg: str, *args: Any, code: int = CODE_DEFAULT, **kwargs: Any
    ) -> None:
        """Non-fatal problem; in json mode it becomes a stored warning."""
        self.report(ISSUE_LEVEL, msg, *args, code=code, **kwargs)

    def report(  # noqa: PLR0913
        self,
        level: int | str,
        msg: str,
        *args: Any,
        code: int = CODE_DEFAULT,
        dies: bool = False,
        **kwargs: Any,
    ) -> None:
        """Emit a coded message; `dies` marks the run's terminal message."""
        level_no = level_from_name(level) if isinstance(level, str) else level
        if not self.isEnabledFor(level_no):
            return
        extra = dict(kwargs.pop("extra", None) or {})
        extra.setdefault("code", code)
        extra.setdefault("dies", dies)
        kwargs.setdefault("stacklevel", 2)
        self._log(level_no, msg, args, extra=extra, **kwargs)

    def critical_if_not_debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Logs an exception with the real traceback starting from the caller.
        Only shows full traceback if debug/trace is enabled."""
        exc_info = kwargs.pop("exc_info", True)
        stacklevel = kwargs.pop("stacklevel", 2)  # skip helper frame
        if self.isEnabledFor(logging.DEBUG):
            self.critical(msg, *args, exc_info=exc_info, stacklevel=stacklevel, **kwargs)
        else:
            self.critical(msg, *args, **kwargs)


# --- Filters -----------------------------------------------------------------


class ScreenOnlyFilter(logging.Filter):
    """Keep records flagged `screen_only` out of the logfile."""

    def filter(self, record: logging.LogRecord) -> bool:
        return not getattr(record, "screen_only", False)


class DebugScopeFilter(logging.Filter):
    """Limit debug/trace records to code matching a comma separated scope."""

    def __init__(self, scope: str) -> None:
        super().__init__()
        self.tokens = [tok.strip() for tok in scope.split(",") if tok.strip()]

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno > logging.DEBUG or not self.tokens:
            return True
        where = f"{record.pathname} {record.module}.{record.funcName}"
        return any(tok in where for tok in self.tokens)


# --- Tag formatter ---------------------------------------------------------


class TagFormatter(logging.Formatter):
    """Render "<metadata> <Tag> message" lines.

    Tags come from TAG_STYLES; issue/error/fatal tags carry the record's
    `code` ("Issue #2001:"). Records marked `raw` are written untouched.
    """

    def __init__(
        self,
        *,
        prefix_flags: tuple[str, ...] = (),
        smart_prefix: bool = False,
        tracebacks: bool = True,
    ) -> None:
        super().__init__("%(message)s")
        self.prefix_flags = prefix_flags
        self.smart_prefix = smart_prefix
        self.tracebacks = tracebacks

    def format(self: TagFormatter, record: logging.LogRecord) -> str:
        msg = record.getMessage().rstrip("\n")
        if getattr(record, "raw", False):
            return msg

        tag_color, tag_text = TAG_STYLES.get(record.levelname, ("", ""))
        if tag_text and record.levelno in CODED_LEVELS:
            tag_text = f"{tag_text} #{getattr(record, 'code', CODE_DEFAULT)}:"
        if tag_text:
            if getattr(record, "enable_color", False) and tag_color:
                tag_text = f"{tag_color}{tag_text}{RESET}"
            msg = f"{tag_text} {msg}"

        meta = self.format_metadata(record)
        if meta:
            msg = f"{meta} {msg}"

        if record.exc_info and self.tracebacks:
            msg = f"{msg}\n{self.formatException(record.exc_info)}"
        return msg

    def format_metadata(self, record: logging.LogRecord) -> str:
        flags = self.prefix_flags
        if not flags or (self.smart_prefix and record.levelno > logging.DEBUG):
            return ""
        ct = _real_time.localtime(record.created)
        parts: list[str] = []
        if "date" in flags:
            parts.append(_real_time.strftime("%Y/%m/%d", ct))
        if "time" in flags or "micro" in flags:
            stamp = _real_time.strftime("%H:%M:%S", ct)
            if "micro" in flags:
                stamp = f"{stamp}.{int(record.msecs * 1000):06d}"
            parts.append(stamp)
        if "pid" in flags:
            parts.append(f"[pid {record.process}]")
        if "longfile" in flags:
            parts.append(f"{record.pathname}:{record.lineno}")
        elif "file" in flags:
            parts.append(f"{record.filename}:{record.lineno}")
        if "func" in flags:
            parts.append(f"{record.funcName}()")
        if "level" in flags:
            parts.append(f"[{level_to_name(record.levelno).upper():<7}]")
        return " ".join(parts) + ":" if parts else ""


# --- DualStreamHandler ---------------------------------------------------------


class DualStreamHandler(logging.StreamHandler):  # type: ignore[type-arg]
    """Send trace through note to stdout, issue and above to stderr.

    A record may pin its stream with `stream="stdout"` or `stream="stderr"`.
    """

    enable_color: bool = False

    def __init__(self) -> None:
        # default to stdout, overridden per record in emit()
        super().__init__()  # pyright: ignore[reportUnknownMemberType]

    def emit(self, record: logging.LogRecord) -> None:
        pinned = getattr(record, "stream", None)
        if pinned == "stderr":
            self.stream = sys.stderr
        elif pinned == "stdout":
            self.stream = sys.stdout
        elif record.levelno >= ISSUE_LEVEL:
            self.stream = sys.stderr
        else:
            self.stream = sys.stdout

        # used by TagFormatter
        record.enable_color = getattr(self, "enable_color", False)

        super().emit(record)
