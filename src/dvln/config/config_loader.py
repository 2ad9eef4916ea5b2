# src/dvln/config/config_loader.py


from pathlib import Path
from typing import Any, cast

from dvln.constants import CONFIG_EXTENSIONS
from dvln.errors import ConfigReadError
from dvln.logs import getAppLogger
from dvln.meta import PROGRAM_CONFIG
from dvln.utils import (
    expand_home,
    load_jsonc,
    load_toml,
    load_yaml,
    plural,
    remove_path_in_error_message,
)

from .resolver import SettingsResolver


def find_config(config_setting: str) -> Path | None:
    """Locate the user config file named by the `config` setting.

    A directory is searched for `cfg.<ext>` (extensions in CONFIG_EXTENSIONS
    order); a file is used as-is. Nothing found is normal, not an error.
    """
    logger = getAppLogger()
    if not config_setting:
        return None

    target = expand_home(config_setting)
    logger.trace("[find_config] Checking %s", target)

    if target.is_file():
        return target

    if target.is_dir():
        found = [
            target / f"{PROGRAM_CONFIG}{ext}"
            for ext in CONFIG_EXTENSIONS
            if (target / f"{PROGRAM_CONFIG}{ext}").is_file()
        ]
        if len(found) > 1:
            names = ", ".join(p.name for p in found)
            logger.debug(
                "Multiple config files detected (%s); using %s.", names, found[0].name
            )
        if found:
            return found[0]

    logger.debug("No config file located, normal, continuing")
    return None


def load_config(config_path: Path) -> dict[str, Any]:
    """Load a config file into a flat mapping.

    Supports:
      - TOML: .toml
      - YAML: .yaml, .yml
      - JSON/JSONC: .json, .jsonc (and anything else)

    Returns an empty dict for intentionally empty files.

    Raises:
        ValueError: unparseable file or a root that is not a mapping.
    """
    logger = getAppLogger()
    logger.trace("[load_config] Loading from %s (%s)", config_path, config_path.suffix)

    suffix = config_path.suffix.lower()
    data: Any
    if suffix == ".toml":
        data = load_toml(config_path)
    elif suffix in (".yaml", ".yml"):
        data = load_yaml(config_path)
    else:
        data = load_jsonc(config_path)

    if data is None:
        return {}
    if not isinstance(data, dict):
        xmsg = (
            f"Config file {config_path.name} must hold a mapping of settings,"
            f" not {type(data).__name__}"
        )
        raise ValueError(xmsg)  # noqa: TRY004
    return cast("dict[str, Any]", data)


def load_user_config(resolver: SettingsResolver) -> Path | None:
    """Fill the resolver's config-file layer; returns the file used, if any.

    Keys that are unknown, or whose scope does not allow config-file values,
    are kept out of the layer and reported at debug level.
    """
    logger = getAppLogger()
    config_path = find_config(resolver.get_string("config"))
    if config_path is None:
        resolver.set_config_values({}, None)
        return None

    try:
        raw = load_config(config_path)
    except (OSError, ValueError) as e:
        clean_msg = remove_path_in_error_message(str(e), config_path)
        xmsg = (
            "Configuration package failed to read config\n"
            f"{config_path.name}: {clean_msg}"
        )
        raise ConfigReadError(xmsg) from e

    accepted: dict[str, Any] = {}
    ignored: list[str] = []
    for key, value in raw.items():
        setting = resolver.registry.get_setting(str(key))
        if setting is None or not setting.scope.file_settable:
            ignored.append(str(key))
            continue
        accepted[setting.name] = value

    if ignored:
        logger.debug(
            "Ignoring %d config key%s in %s: %s",
            len(ignored),
            plural(ignored),
            config_path.name,
            ", ".join(ignored),
        )

    resolver.set_config_values(accepted, config_path)
    logger.debug("Used config file: %s", config_path)
    return config_path
