# src/dvln/config/config_types.py


from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Literal, NamedTuple, TypedDict

from typing_extensions import NotRequired


SettingValue = bool | int | str

Verbosity = Literal["terse", "regular", "verbose"]
GlobsKind = Literal["env", "cfg"]


class UserLevel(IntEnum):
    """Minimum user experience level a setting is aimed at."""

    INTERNAL = 0
    NOVICE = 1
    STANDARD = 2
    EXPERT = 3


class Scope(Enum):
    """Which layers may populate a setting."""

    CONST_GLOBAL = "const"  # default only, never overridden
    BASIC_GLOBAL = "basic"  # env, config file, default (no flag)
    CLI_GLOBAL = "cli"  # all four layers
    CLI_ONLY_GLOBAL = "cli_only"  # explicit layer only, no env/file

    @property
    def env_settable(self) -> bool:
        return self in (Scope.BASIC_GLOBAL, Scope.CLI_GLOBAL)

    @property
    def file_settable(self) -> bool:
        return self in (Scope.BASIC_GLOBAL, Scope.CLI_GLOBAL)


class Layer(Enum):
    DEFAULT = "default"
    ENV = "env"
    CONFIG = "config"
    CLI = "cli"


@dataclass(frozen=True)
class Setting:
    name: str
    default: SettingValue
    description: str
    min_user_level: UserLevel
    scope: Scope


class SettingDescription(NamedTuple):
    description: str
    min_user_level: UserLevel
    scope: Scope


class ResolvedValue(NamedTuple):
    value: Any
    layer: Layer


# --- structured records --------------------------------------------------------


class GlobsEntry(TypedDict):
    """One `--globs` item, fields filtered by verbosity."""

    description: NotRequired[str]
    useLevel: NotRequired[str]  # noqa: N815
    value: SettingValue


class ApiMessage(TypedDict):
    message: str
    code: int
    level: str


class UsageItem(TypedDict):
    helpMsg: str  # noqa: N815
    recordLog: NotRequired[str]  # noqa: N815
    userId: NotRequired[str]  # noqa: N815
