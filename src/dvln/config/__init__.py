# src/dvln/config/__init__.py
"""Setting registry, layered resolver, config-file loader and settings dump."""

from .app_settings import register_app_settings
from .config_loader import find_config, load_config, load_user_config
from .config_types import (
    GlobsKind,
    Layer,
    ResolvedValue,
    Scope,
    Setting,
    SettingDescription,
    SettingValue,
    UserLevel,
    Verbosity,
)
from .dump import build_globs_items, format_globs_text, globs_fields
from .registry import SettingRegistry
from .resolver import SettingsResolver


__all__ = [  # noqa: RUF022
    # app_settings
    "register_app_settings",
    # config_loader
    "find_config",
    "load_config",
    "load_user_config",
    # config_types
    "GlobsKind",
    "Layer",
    "ResolvedValue",
    "Scope",
    "Setting",
    "SettingDescription",
    "SettingValue",
    "UserLevel",
    "Verbosity",
    # dump
    "build_globs_items",
    "format_globs_text",
    "globs_fields",
    # registry
    "SettingRegistry",
    # resolver
    "SettingsResolver",
]
