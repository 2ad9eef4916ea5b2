# src/dvln/context.py
"""Per-invocation run state, threaded explicitly through every stage."""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .analysis import StepTimer
from .api import ApiState, JSONStyle
from .config import SettingRegistry, SettingsResolver, Verbosity, register_app_settings
from .logs import AppLogger, getAppLogger
from .meta import PROGRAM_SCRIPT
from .utils_logs import FOR_LOGFILE, FOR_SCREEN


@dataclass
class OutputDestinations:
    """Screen/logfile state for one run; thresholds live on the logger."""

    logger: AppLogger
    temp_logfile_path: Path | None = None
    # text shown on stderr after the run; empty when nothing is pending
    temp_note: str = ""

    @property
    def screen_threshold(self) -> int:
        return self.logger.threshold(FOR_SCREEN)

    @property
    def logfile_threshold(self) -> int:
        return self.logger.threshold(FOR_LOGFILE)

    @property
    def logfile_path(self) -> Path | None:
        return self.logger.logfile_path


@dataclass
class RunContext:
    registry: SettingRegistry
    resolver: SettingsResolver
    output: OutputDestinations
    environ: Mapping[str, str]
    api: ApiState = field(default_factory=ApiState)
    timer: StepTimer = field(default_factory=StepTimer)
    current_command: str | None = None
    jobs: int | None = None
    workspace_root: Path | None = None
    # command name -> parser, rebuilt by dvln.flags.bind()
    parsers: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(cls, environ: Mapping[str, str] | None = None) -> "RunContext":
        """Fresh registry, resolver and output state for one invocation."""
        env = os.environ if environ is None else environ
        registry = register_app_settings(SettingRegistry())
        logger = getAppLogger()
        logger.reset_output()
        return cls(
            registry=registry,
            resolver=SettingsResolver(registry, env),
            output=OutputDestinations(logger),
            environ=env,
        )

    @property
    def logger(self) -> AppLogger:
        return self.output.logger

    def set_current_command(self, name: str) -> None:
        """Remember the command being run; the first call wins."""
        if self.current_command is None:
            self.current_command = name

    @property
    def look(self) -> str:
        return self.resolver.get_string("look")

    @property
    def is_json(self) -> bool:
        return self.look == "json"

    @property
    def verbosity(self) -> Verbosity:
        """verbose wins over terse when both are set."""
        if self.resolver.get_bool("verbose"):
            return "verbose"
        if self.resolver.get_bool("terse"):
            return "terse"
        return "regular"

    def json_style(self) -> JSONStyle:
        return JSONStyle(
            indent=self.resolver.get_int("jsonindentlevel"),
            raw=self.resolver.get_bool("jsonraw"),
            prefix=self.resolver.get_string("jsonprefix"),
        )

    def help_hint(self) -> str:
        """Usage pointer naming the active command, for error messages."""
        cmd = ""
        if self.current_command and self.current_command != PROGRAM_SCRIPT:
            cmd = f" {self.current_command}"
        return f"Please run '{PROGRAM_SCRIPT} help{cmd}' for usage"
