# src/dvln/config/dump.py
"""`--globs env|cfg`: list the settings a user may set outside the CLI."""

from dvln.utils_types import to_str

from .config_types import GlobsEntry, GlobsKind, Setting, UserLevel, Verbosity
from .resolver import SettingsResolver


def dumpable_settings(resolver: SettingsResolver, kind: GlobsKind) -> list[Setting]:
    """Settings visible to users through the environment or the config file."""
    result: list[Setting] = []
    for setting in resolver.registry:
        if setting.min_user_level is UserLevel.INTERNAL:
            continue
        if kind == "env" and not setting.scope.env_settable:
            continue
        if kind == "cfg" and not setting.scope.file_settable:
            continue
        result.append(setting)
    return result


def globs_key(resolver: SettingsResolver, kind: GlobsKind, setting: Setting) -> str:
    return resolver.env_name(setting.name) if kind == "env" else setting.name


def globs_fields(verbosity: Verbosity) -> list[str]:
    if verbosity == "terse":
        return ["(name)", "value"]
    if verbosity == "verbose":
        return ["(name)", "description", "useLevel", "value"]
    return ["(name)", "description", "value"]


def build_globs_items(
    resolver: SettingsResolver, kind: GlobsKind, verbosity: Verbosity
) -> list[dict[str, GlobsEntry]]:
    """One `{name: {description?, useLevel?, value}}` item per setting."""
    items: list[dict[str, GlobsEntry]] = []
    for setting in dumpable_settings(resolver, kind):
        entry: GlobsEntry = {"value": resolver.get(setting.name)}
        if verbosity != "terse":
            entry["description"] = setting.description
        if verbosity == "verbose":
            entry["useLevel"] = setting.min_user_level.name
        items.append({globs_key(resolver, kind, setting): entry})
    return items


def format_globs_text(
    resolver: SettingsResolver, kind: GlobsKind, verbosity: Verbosity
) -> str:
    """Human readable dump: a "NAME: " header line, then indented fields."""
    lines: list[str] = []
    for item in build_globs_items(resolver, kind, verbosity):
        for name, entry in item.items():
            lines.append(f"{name}: ")
            if verbosity == "terse":
                lines.append(f"  Value: {to_str(entry['value'])}")
                continue
            lines.append(f"  Description: {entry.get('description', '')}")
            if "useLevel" in entry:
                lines.append(f"  Use Level:   {entry['useLevel']}")
            lines.append(f"  Value:       {to_str(entry['value'])}")
    return "\n".join(lines)
