# src/dvln/utils_types.py

from typing import Any


TRUE_STRINGS = frozenset({"1", "t", "true", "yes", "y", "on"})


# --- lenient coercion ---------------------------------------------------------
# Environment and config values arrive as strings (or whatever the file format
# produced); none of these raise, unparseable input gives the zero value.


def to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in TRUE_STRINGS
    return False


def to_int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip(), 10)
        except ValueError:
            return 0
    return 0


def to_str(value: Any) -> str:
    """String form of a setting value; booleans render as true/false."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def coerce_like(template: Any, value: Any) -> Any:
    """Coerce `value` to the type of `template` (a setting's default)."""
    if isinstance(template, bool):
        return to_bool(value)
    if isinstance(template, int):
        return to_int(value)
    if isinstance(template, str):
        return to_str(value)
    return value
