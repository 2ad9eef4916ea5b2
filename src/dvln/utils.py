# src/dvln/utils.py

import json
import re
import tomllib
from pathlib import Path
from typing import Any, cast

import yaml

from .logs import getAppLogger


# --- config file loaders ------------------------------------------------------


def load_toml(path: Path) -> dict[str, Any]:
    """Load and parse a TOML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file cannot be parsed
    """
    if not path.exists():
        xmsg = f"TOML file not found: {path}"
        raise FileNotFoundError(xmsg)

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        xmsg = f"Invalid TOML syntax in {path}: {e}"
        raise ValueError(xmsg) from e


def load_yaml(path: Path) -> dict[str, Any] | list[Any] | None:
    """Load a YAML file with PyYAML's safe loader.

    An empty document (or one holding only comments) returns None.
    """
    if not path.exists():
        xmsg = f"YAML file not found: {path}"
        raise FileNotFoundError(xmsg)

    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        xmsg = f"Invalid YAML syntax in {path}: {e}"
        raise ValueError(xmsg) from e

    if data is None:
        return None
    if not isinstance(data, (dict, list)):
        xmsg = f"Invalid YAML root type: {type(data).__name__}"
        raise ValueError(xmsg)  # noqa: TRY004
    return cast("dict[str, Any] | list[Any]", data)


def _strip_jsonc_comments(text: str) -> str:  # noqa: PLR0912
    """Strip comments from JSONC while preserving string contents.

    Handles //, #, and /* */ comments without modifying content inside strings.
    """
    result: list[str] = []
    in_string = False
    in_escape = False
    i = 0
    while i < len(text):
        ch = text[i]

        # Handle escape sequences in strings
        if in_escape:
            result.append(ch)
            in_escape = False
            i += 1
            continue

        if ch == "\\" and in_string:
            result.append(ch)
            in_escape = True
            i += 1
            continue

        if ch == '"':
            in_string = not in_string
            result.append(ch)
            i += 1
            continue

        if in_string:
            result.append(ch)
            i += 1
            continue

        # line comments; "://" inside a bare value is left alone
        if (
            ch == "/"
            and i + 1 < len(text)
            and text[i + 1] == "/"
            and not (i > 0 and text[i - 1] == ":")
        ) or ch == "#":
            while i < len(text) and text[i] != "\n":
                i += 1
            continue

        if ch == "/" and i + 1 < len(text) and text[i + 1] == "*":
            end = text.find("*/", i + 2)
            i = len(text) if end == -1 else end + 2
            continue

        result.append(ch)
        i += 1

    return "".join(result)


def load_jsonc(path: Path) -> dict[str, Any] | list[Any] | None:
    """Load JSONC (JSON with comments and trailing commas)."""
    logger = getAppLogger()
    logger.trace("[load_jsonc] Loading from %s", path)

    if not path.exists():
        xmsg = f"JSONC file not found: {path}"
        raise FileNotFoundError(xmsg)

    if not path.is_file():
        xmsg = f"Expected a file: {path}"
        raise ValueError(xmsg)

    text = path.read_text(encoding="utf-8")
    text = _strip_jsonc_comments(text)

    # Remove trailing commas before } or ]
    text = re.sub(r",(?=\s*[}\]])", "", text).strip()

    if not text:
        # Empty or only comments → interpret as "no config"
        return None

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        xmsg = (
            f"Invalid JSONC syntax in {path}:"
            f" {e.msg} (line {e.lineno}, column {e.colno})"
        )
        raise ValueError(xmsg) from e

    # Guard against scalar roots (invalid config structure)
    if not isinstance(data, (dict, list)):
        xmsg = f"Invalid JSONC root type: {type(data).__name__}"
        raise ValueError(xmsg)  # noqa: TRY004

    result = cast("dict[str, Any] | list[Any]", data)
    logger.trace("[load_jsonc] Loaded %s with %d items", type(result).__name__, len(result))
    return result


def remove_path_in_error_message(inner_msg: str, path: Path) -> str:
    """Remove redundant file path mentions (and nearby filler)
    from error messages.

    Example:
        "Invalid JSONC syntax in /abs/path/cfg.jsonc: Expecting value"
        → "Invalid JSONC syntax: Expecting value"

    """
    full_path = str(path)
    filename = path.name

    candidates = [
        f"in {full_path}",
        f"in '{full_path}'",
        f'in "{full_path}"',
        f"in {filename}",
        full_path,
        filename,
    ]

    clean_msg = inner_msg
    for pattern in candidates:
        clean_msg = clean_msg.replace(pattern, "").strip(": ").strip()

    clean_msg = re.sub(r"[ \t]{2,}", " ", clean_msg)
    return re.sub(r"[ \t]*:[ \t]*", ": ", clean_msg)


# --- paths --------------------------------------------------------------------


def expand_home(raw: str) -> Path:
    """Expand a leading "~" and make the path absolute."""
    return Path(raw).expanduser().absolute()


def collapse_home(raw: str | Path) -> str:
    """Swap a leading home directory for "~" to keep paths short in help."""
    text = str(raw)
    try:
        home = str(Path.home())
    except RuntimeError:
        return text
    sep = "/" if "/" in text else "\\"
    if home and text.startswith(home.rstrip(sep) + sep):
        return "~" + text[len(home.rstrip(sep)) :]
    return text


# --- misc ---------------------------------------------------------------------


def plural(obj: Any) -> str:
    """Return 's' if obj represents a plural count.

    Accepts ints, floats, and any object implementing __len__().
    Returns '' for singular or zero.
    """
    count: int | float
    try:
        count = len(obj)
    except TypeError:
        # fallback for numbers or uncountable types
        count = obj if isinstance(obj, (int, float)) else 0
    return "s" if count != 1 else ""
