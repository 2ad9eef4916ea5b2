# tests/utils/cli_run.py
"""Run dvln in-process and collect what it wrote."""

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import pytest

import dvln.cli as mod_cli
import dvln.context as mod_context


@dataclass
class CliResult:
    code: int
    out: str
    err: str

    def json(self) -> Any:
        """stdout parsed as a single JSON document."""
        return json.loads(self.out)


def run_cli(
    capsys: pytest.CaptureFixture[str],
    *argv: str,
    env: Mapping[str, str] | None = None,
) -> CliResult:
    environ = dict(env or {})
    capsys.readouterr()  # drop anything a fixture printed
    code = mod_cli.execute(list(argv), environ)
    captured = capsys.readouterr()
    return CliResult(code, captured.out, captured.err)


def make_ctx(env: Mapping[str, str] | None = None) -> mod_context.RunContext:
    """A fresh RunContext over an explicit (default: empty) environment."""
    return mod_context.RunContext.create(dict(env or {}))
