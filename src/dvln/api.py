# src/dvln/api.py
"""JSON API envelopes (Google JSON style) for `--look json` output.

Success:
    {"apiVersion", "context", "id", "data": {"kind", "verbosity", "fields",
     "startIndex", "totalItems", "items"}, "note"?, "warnings"?}

Failure:
    {"apiVersion", "context", "id", "error": {"message", "code", "level"},
     "warnings"?}
"""

import json
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from .config.config_types import ApiMessage
from .constants import DEFAULT_JSON_INDENT_LEVEL


DEFAULT_API_ID = 0
DEFAULT_START_INDEX = 1


@dataclass
class JSONStyle:
    indent: int = DEFAULT_JSON_INDENT_LEVEL
    raw: bool = False
    prefix: str = ""

    def render(self, payload: Any) -> str:
        if self.raw:
            text = json.dumps(payload, separators=(",", ":"))
        else:
            text = json.dumps(payload, indent=max(self.indent, 0))
        if self.prefix:
            text = "\n".join(self.prefix + line for line in text.splitlines())
        return text


@dataclass
class ApiState:
    """Note and warnings stored during a run, embedded in the final JSON."""

    note: ApiMessage | None = None
    warnings: list[ApiMessage] = field(default_factory=list)

    def set_stored_note(self, msg: ApiMessage) -> None:
        self.note = msg

    def add_stored_warning(self, msg: ApiMessage) -> None:
        self.warnings.append(msg)


def new_msg(message: str, code: int, level: str) -> ApiMessage:
    return {"message": message, "code": code, "level": level}


def _annotate(payload: dict[str, Any], state: ApiState | None) -> dict[str, Any]:
    if state is not None:
        if state.note is not None:
            payload["note"] = state.note
        if state.warnings:
            payload["warnings"] = list(state.warnings)
    return payload


def build_response(  # noqa: PLR0913
    api_version: str,
    context: str,
    kind: str,
    verbosity: str,
    fields: Sequence[str],
    items: Sequence[Any],
    *,
    state: ApiState | None = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "apiVersion": api_version,
        "context": context,
        "id": DEFAULT_API_ID,
        "data": {
            "kind": kind,
            "verbosity": verbosity,
            "fields": list(fields),
            "startIndex": DEFAULT_START_INDEX,
            "totalItems": len(items),
            "items": list(items),
        },
    }
    return _annotate(payload, state)


def build_error_response(
    api_version: str,
    context: str,
    msg: ApiMessage,
    *,
    state: ApiState | None = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "apiVersion": api_version,
        "context": context,
        "id": DEFAULT_API_ID,
        "error": dict(msg),
    }
    if state is not None and state.warnings:
        payload["warnings"] = list(state.warnings)
    return payload
