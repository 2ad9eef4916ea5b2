# src/dvln/constants.py
"""Central constants used across the project."""

from pathlib import Path


# --- env keys ---
# settings use f"{PROGRAM_ENV}_{NAME.upper()}"; these are read directly
DEFAULT_ENV_SCREEN_FLAGS: str = "DVLN_SCREEN_FLAGS"
DEFAULT_ENV_LOGFILE_FLAGS: str = "DVLN_LOGFILE_FLAGS"
DEFAULT_ENV_DEBUG_SCOPE: str = "DVLN_DEBUG_SCOPE"
DEFAULT_ENV_STACK_TRACE_CONFIG: str = "DVLN_STACK_TRACE_CONFIG"
DEFAULT_ENV_SMART_FLAGS_PREFIX: str = "DVLN_PKG_OUT_SMART_FLAGS_PREFIX"
DEFAULT_ENV_LOGFILE_OFF: str = "DVLN_LOGFILE_OFF"

# control variable -> output service setting it feeds
CONTROL_ENV_FORWARDS: dict[str, str] = {
    DEFAULT_ENV_DEBUG_SCOPE: "OUT_DEBUG_SCOPE",
    DEFAULT_ENV_LOGFILE_FLAGS: "OUT_LOGFILE_FLAGS",
    DEFAULT_ENV_STACK_TRACE_CONFIG: "OUT_STACK_TRACE_CONFIG",
    DEFAULT_ENV_SMART_FLAGS_PREFIX: "OUT_SMART_FLAGS_PREFIX",
    DEFAULT_ENV_SCREEN_FLAGS: "OUT_SCREEN_FLAGS",
}
# "none" means explicitly empty, which is not the same as unset
CONTROL_ENV_NONE: str = "none"

# --- program defaults ---
DEFAULT_LOG_LEVEL: str = "info"
DEFAULT_LOOK: str = "text"
DEFAULT_JOBS: str = "all"
DEFAULT_RECORD: str = "off"
DEFAULT_CONFIG_DIR: str = str(Path("~") / ".dvlncfg")
DEFAULT_WKSPC_META_DIR: str = ".dvln"
DEFAULT_PORT: int = 3856
DEFAULT_FATALON: int = 1
DEFAULT_JSON_INDENT_LEVEL: int = 2
DEFAULT_TEMP_LOG_PREFIX: str = "dvln."

LOOK_VALUES: tuple[str, ...] = ("text", "json")
GLOBS_VALUES: tuple[str, ...] = ("env", "cfg")
# test hook: accepted by --globs but treated as unset
GLOBS_SKIP: str = "skip"
RECORD_OFF: str = "off"
RECORD_TEMP_VALUES: tuple[str, ...] = ("temp", "tmp")
JOBS_ALL: str = "all"

# config file extensions, in detection order
CONFIG_EXTENSIONS: tuple[str, ...] = (".json", ".jsonc", ".toml", ".yaml", ".yml")

# --- exit values ---
DEFAULT_SUCCESS_EXIT_VAL: int = 0
DEFAULT_ERROR_EXIT_VAL: int = 1

# --- diagnostic codes ---
CODE_DEFAULT: int = 100
CODE_TEMP_LOGFILE_NOTE: int = 101
CODE_CLI_PROCESSING: int = 2000
CODE_NO_SUBCOMMAND: int = 2001
CODE_CONFIG_READ: int = 2002
CODE_BAD_JOBS: int = 2003
CODE_BAD_LOOK: int = 2004
CODE_BAD_GLOBS: int = 2005
CODE_WKSPC_SCAN: int = 2006
CODE_SERVE_UNAVAILABLE: int = 2008
CODE_JSON_RENDER: int = 2009
CODE_LOGFILE_OPEN: int = 2010
CODE_INTERNAL: int = 2099
