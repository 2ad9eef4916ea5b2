# src/dvln/config/resolver.py
"""Layered value resolution: Default < Environment < ConfigFile < Explicit.

Nothing is cached: every lookup walks the layers again, so values read during
early passes (before the config file is loaded) are simply recomputed later.
"""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from dvln.logs import getAppLogger
from dvln.meta import PROGRAM_ENV
from dvln.utils_logs import TRACE_LEVEL
from dvln.utils_types import coerce_like, to_bool, to_int, to_str

from .config_types import Layer, ResolvedValue, Scope
from .registry import SettingRegistry


class SettingsResolver:
    """Merged, precedence-ordered view over a `SettingRegistry`.

    The explicit layer holds only what the user typed on the command line
    plus anything pushed with `set()`; flag defaults never land there.
    """

    def __init__(
        self,
        registry: SettingRegistry,
        environ: Mapping[str, str] | None = None,
        *,
        env_prefix: str = PROGRAM_ENV,
    ) -> None:
        self.registry = registry
        self.environ: Mapping[str, str] = os.environ if environ is None else environ
        self.env_prefix = env_prefix
        self._explicit: dict[str, Any] = {}
        self._config: dict[str, Any] = {}
        self.config_file_used: Path | None = None

    # --- layer population ---

    def set(self, name: str, value: Any) -> None:
        """Explicit override; reads exactly like a value typed on the CLI."""
        self._explicit[name.lower()] = value

    def unset(self, name: str) -> None:
        self._explicit.pop(name.lower(), None)

    def set_cli_values(self, values: Mapping[str, Any]) -> None:
        """Push flags the user actually supplied into the explicit layer."""
        for name, value in values.items():
            getAppLogger().trace("[resolver] CLI value %s=%r", name, value)
            self.set(name, value)

    def set_config_values(
        self, values: Mapping[str, Any], source: Path | None = None
    ) -> None:
        """Replace the config-file layer (keys are case-insensitive)."""
        self._config = {str(key).lower(): value for key, value in values.items()}
        self.config_file_used = source

    def is_explicit(self, name: str) -> bool:
        return name.lower() in self._explicit

    def env_name(self, name: str) -> str:
        return f"{self.env_prefix}_{name.upper()}"

    # --- lookup ---

    def resolve(self, name: str) -> ResolvedValue:
        """Effective value of `name` and the layer that supplied it.

        Unregistered names resolve to an explicit value if one was `set()`,
        otherwise to None at the default layer.
        """
        key = name.lower()
        setting = self.registry.get_setting(key)
        if setting is None:
            if key in self._explicit:
                return ResolvedValue(self._explicit[key], Layer.CLI)
            return ResolvedValue(None, Layer.DEFAULT)

        if setting.scope is Scope.CONST_GLOBAL:
            return ResolvedValue(setting.default, Layer.DEFAULT)

        if key in self._explicit:
            return ResolvedValue(
                coerce_like(setting.default, self._explicit[key]), Layer.CLI
            )

        if setting.scope is Scope.CLI_ONLY_GLOBAL:
            return ResolvedValue(setting.default, Layer.DEFAULT)

        if key in self._config:
            return ResolvedValue(
                coerce_like(setting.default, self._config[key]), Layer.CONFIG
            )

        env_value = self.environ.get(self.env_name(key), "")
        if env_value != "":
            return ResolvedValue(coerce_like(setting.default, env_value), Layer.ENV)

        return ResolvedValue(setting.default, Layer.DEFAULT)

    def get(self, name: str) -> Any:
        return self.resolve(name).value

    def get_bool(self, name: str) -> bool:
        return to_bool(self.get(name))

    def get_int(self, name: str) -> int:
        return to_int(self.get(name))

    def get_string(self, name: str) -> str:
        return to_str(self.get(name))

    def all_resolved(self) -> dict[str, ResolvedValue]:
        return {name: self.resolve(name) for name in self.registry.names()}

    def dump(self) -> None:
        """Write every resolved value and its source layer at trace level."""
        logger = getAppLogger()
        if not logger.isEnabledFor(TRACE_LEVEL):
            return
        logger.trace("[resolver] Resolved settings:")
        for name, resolved in self.all_resolved().items():
            logger.trace(
                "  %-16s = %-24r (%s)", name, resolved.value, resolved.layer.value
            )
        if self.config_file_used is not None:
            logger.trace("  config file: %s", self.config_file_used)
