# src/dvln/config/registry.py
"""The setting registry: name -> default, description, user level, scope.

Every setting must be registered before it is first resolved or bound to a
flag. That ordering is guaranteed by program structure (`app_settings` runs
when a `RunContext` is built) and is not checked at runtime.
"""

from collections.abc import Iterator

from dvln.errors import SettingNotFoundError
from dvln.logs import getAppLogger

from .config_types import (
    Scope,
    Setting,
    SettingDescription,
    SettingValue,
    UserLevel,
)


class SettingRegistry:
    def __init__(self) -> None:
        self._settings: dict[str, Setting] = {}

    def register(
        self,
        name: str,
        default: SettingValue,
        description: str,
        min_user_level: UserLevel,
        scope: Scope,
    ) -> Setting:
        """Store a setting; registering a name again replaces it (last wins)."""
        key = name.lower()
        if key in self._settings:
            getAppLogger().trace("[registry] Re-registering setting %r", key)
        setting = Setting(key, default, description, min_user_level, scope)
        self._settings[key] = setting
        return setting

    def describe(self, name: str) -> SettingDescription:
        setting = self._settings.get(name.lower())
        if setting is None:
            xmsg = f"Setting not registered: {name!r}"
            raise SettingNotFoundError(xmsg)
        return SettingDescription(
            setting.description, setting.min_user_level, setting.scope
        )

    def get_setting(self, name: str) -> Setting | None:
        return self._settings.get(name.lower())

    def names(self) -> list[str]:
        """Registered names, sorted."""
        return sorted(self._settings)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._settings

    def __iter__(self) -> Iterator[Setting]:
        return (self._settings[name] for name in self.names())

    def __len__(self) -> int:
        return len(self._settings)
