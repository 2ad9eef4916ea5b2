# tests/5_core/test_globs_dump.py

import dvln.config as mod_config
import dvln.config.dump as mod_dump


def _resolver(env: dict[str, str] | None = None) -> mod_config.SettingsResolver:
    reg = mod_config.register_app_settings(mod_config.SettingRegistry())
    return mod_config.SettingsResolver(reg, env or {})


def test_dumpable_settings_hide_internal_and_cli_only() -> None:
    # --- execute ---
    names = [s.name for s in mod_dump.dumpable_settings(_resolver(), "cfg")]

    # --- verify ---
    assert "look" in names
    assert "screenlevel" in names
    assert "apiver" not in names  # internal
    assert "globs" not in names  # CLI only
    assert names == sorted(names)


def test_env_keys_are_variable_names() -> None:
    # --- execute ---
    items = mod_dump.build_globs_items(_resolver({"DVLN_LOOK": "json"}), "env", "regular")

    # --- verify ---
    look = next(item["DVLN_LOOK"] for item in items if "DVLN_LOOK" in item)
    assert look == {"value": "json", "description": "output look, text|json"}


def test_globs_fields_by_verbosity() -> None:
    assert mod_dump.globs_fields("terse") == ["(name)", "value"]
    assert mod_dump.globs_fields("regular") == ["(name)", "description", "value"]
    assert mod_dump.globs_fields("verbose") == [
        "(name)",
        "description",
        "useLevel",
        "value",
    ]


def test_verbose_items_carry_use_level() -> None:
    items = mod_dump.build_globs_items(_resolver(), "cfg", "verbose")
    entry = next(item["jobs"] for item in items if "jobs" in item)
    assert entry["useLevel"] == "EXPERT"


def test_format_globs_text_regular() -> None:
    # --- execute ---
    text = mod_dump.format_globs_text(_resolver(), "cfg", "regular")

    # --- verify ---
    lines = text.splitlines()
    idx = lines.index("look: ")
    assert lines[idx + 1] == "  Description: output look, text|json"
    assert lines[idx + 2] == "  Value:       text"


def test_format_globs_text_terse() -> None:
    text = mod_dump.format_globs_text(_resolver(), "env", "terse")
    lines = text.splitlines()
    idx = lines.index("DVLN_DEBUG: ")
    assert lines[idx + 1] == "  Value: false"
