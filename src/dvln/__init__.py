# src/dvln/__init__.py

"""dvln — multi-package development line and workspace management.

Full developer API
==================
This package re-exports the non-private symbols most useful for driving
dvln programmatically. Anything prefixed with "_" is considered internal
and may change.

Highlights:
    - main() / execute()   → CLI entrypoint (argv in, exit code out)
    - RunContext           → per-invocation settings and output state
    - SettingsResolver     → layered CLI > config > env > default lookup
    - get_metadata()       → version / build information
"""

from .cli import execute, main
from .commands import ROOT_COMMAND
from .config import (
    Layer,
    Scope,
    Setting,
    SettingRegistry,
    SettingsResolver,
    UserLevel,
    find_config,
    load_config,
    load_user_config,
    register_app_settings,
)
from .constants import (
    DEFAULT_CONFIG_DIR,
    DEFAULT_LOG_LEVEL,
    DEFAULT_LOOK,
    DEFAULT_WKSPC_META_DIR,
)
from .context import RunContext
from .errors import DvlnError, wrap_error
from .logs import getAppLogger
from .meta import (
    PROGRAM_CONFIG,
    PROGRAM_DISPLAY,
    PROGRAM_ENV,
    PROGRAM_PACKAGE,
    PROGRAM_SCRIPT,
    Metadata,
    get_metadata,
)
from .workspace import find_workspace_root


__all__ = [  # noqa: RUF022
    # cli
    "execute",
    "main",
    # commands
    "ROOT_COMMAND",
    # config
    "find_config",
    "Layer",
    "load_config",
    "load_user_config",
    "register_app_settings",
    "Scope",
    "Setting",
    "SettingRegistry",
    "SettingsResolver",
    "UserLevel",
    # constants
    "DEFAULT_CONFIG_DIR",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_LOOK",
    "DEFAULT_WKSPC_META_DIR",
    # context
    "RunContext",
    # errors
    "DvlnError",
    "wrap_error",
    # logs
    "getAppLogger",
    # meta
    "get_metadata",
    "Metadata",
    "PROGRAM_CONFIG",
    "PROGRAM_DISPLAY",
    "PROGRAM_ENV",
    "PROGRAM_PACKAGE",
    "PROGRAM_SCRIPT",
    # workspace
    "find_workspace_root",
]
