# src/dvln/config/app_settings.py
"""Every setting dvln knows about, grouped by scope, alphabetical within."""

from dvln.constants import (
    DEFAULT_CONFIG_DIR,
    DEFAULT_FATALON,
    DEFAULT_JOBS,
    DEFAULT_JSON_INDENT_LEVEL,
    DEFAULT_LOG_LEVEL,
    DEFAULT_LOOK,
    DEFAULT_PORT,
    DEFAULT_RECORD,
    DEFAULT_WKSPC_META_DIR,
)
from dvln.meta import API_VERSION, __version__

from .config_types import Scope, UserLevel
from .registry import SettingRegistry


def register_app_settings(registry: SettingRegistry) -> SettingRegistry:
    """Populate `registry` with dvln's settings; returns it for chaining."""
    reg = registry.register

    # --- ConstGlobal: default only, no overrides ---
    reg("apiver", API_VERSION, "JSON API version", UserLevel.INTERNAL, Scope.CONST_GLOBAL)
    reg(
        "dvlntoolver",
        __version__,
        "current version of the dvln tool",
        UserLevel.INTERNAL,
        Scope.CONST_GLOBAL,
    )
    reg(
        "wkspcmetadir",
        DEFAULT_WKSPC_META_DIR,
        "where dvln config info exists in a workspace",
        UserLevel.INTERNAL,
        Scope.CONST_GLOBAL,
    )

    # --- BasicGlobal: env, config file, default ---
    reg(
        "jsonindentlevel",
        DEFAULT_JSON_INDENT_LEVEL,
        "JSON output indent level",
        UserLevel.EXPERT,
        Scope.BASIC_GLOBAL,
    )
    reg(
        "jsonprefix",
        "",
        "JSON output line prefix",
        UserLevel.EXPERT,
        Scope.BASIC_GLOBAL,
    )
    reg(
        "jsonraw",
        False,
        "compact JSON output, no indent",
        UserLevel.EXPERT,
        Scope.BASIC_GLOBAL,
    )
    reg(
        "logfilelevel",
        DEFAULT_LOG_LEVEL,
        "log file output level (used if logging on)",
        UserLevel.EXPERT,
        Scope.BASIC_GLOBAL,
    )
    reg(
        "screenlevel",
        DEFAULT_LOG_LEVEL,
        "screen output level",
        UserLevel.EXPERT,
        Scope.BASIC_GLOBAL,
    )

    # --- CLIGlobal and CLIOnlyGlobal: flags, plus env/file for CLIGlobal ---
    reg("analysis", False, "memory and timing analytics", UserLevel.EXPERT, Scope.CLI_GLOBAL)
    reg("codebase", "", "codebase name or URL", UserLevel.NOVICE, Scope.CLI_GLOBAL)
    reg("config", DEFAULT_CONFIG_DIR, "tool config dir|file", UserLevel.EXPERT, Scope.CLI_GLOBAL)
    reg("debug", False, "control debug output", UserLevel.STANDARD, Scope.CLI_GLOBAL)
    reg("devline", "", "development line name", UserLevel.NOVICE, Scope.CLI_GLOBAL)
    reg(
        "fatalon",
        DEFAULT_FATALON,
        "# of VCS errs needed to cause exit",
        UserLevel.EXPERT,
        Scope.CLI_GLOBAL,
    )
    reg("force", False, "force bypass of protections", UserLevel.EXPERT, Scope.CLI_GLOBAL)
    reg(
        "globs",
        "",
        "show settings available, cfg|env",
        UserLevel.EXPERT,
        Scope.CLI_ONLY_GLOBAL,
    )
    reg("help", False, "help for dvln", UserLevel.STANDARD, Scope.CLI_ONLY_GLOBAL)
    reg("interact", False, "prompting control", UserLevel.STANDARD, Scope.CLI_GLOBAL)
    reg("jobs", DEFAULT_JOBS, "# of CPU's to use for jobs", UserLevel.EXPERT, Scope.CLI_GLOBAL)
    reg("look", DEFAULT_LOOK, "output look, text|json", UserLevel.EXPERT, Scope.CLI_GLOBAL)
    reg(
        "pkg",
        "",
        "package selector, comma separated",
        UserLevel.NOVICE,
        Scope.CLI_ONLY_GLOBAL,
    )
    reg("port", DEFAULT_PORT, "port # for --serve mode", UserLevel.EXPERT, Scope.CLI_GLOBAL)
    reg("quiet", False, "silent running", UserLevel.STANDARD, Scope.CLI_GLOBAL)
    reg("record", DEFAULT_RECORD, "to file|'tmp'", UserLevel.NOVICE, Scope.CLI_GLOBAL)
    reg("serve", False, "activate REST serve mode", UserLevel.EXPERT, Scope.CLI_GLOBAL)
    reg("terse", False, "output reduction", UserLevel.STANDARD, Scope.CLI_GLOBAL)
    reg(
        "verbose",
        False,
        "output verbosity, extends debug",
        UserLevel.STANDARD,
        Scope.CLI_GLOBAL,
    )
    reg(
        "version",
        False,
        "show tool version details",
        UserLevel.STANDARD,
        Scope.CLI_ONLY_GLOBAL,
    )
    reg(
        "wkspcdir",
        ".",
        "workspace directory",
        UserLevel.STANDARD,
        Scope.CLI_ONLY_GLOBAL,
    )

    return registry
