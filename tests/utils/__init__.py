# tests/utils/__init__.py

from .capture import CapturedOutput, capture_output
from .cli_run import CliResult, make_ctx, run_cli
from .log_fixtures import make_test_trace


__all__ = [  # noqa: RUF022
    # capture
    "CapturedOutput",
    "capture_output",
    # cli_run
    "CliResult",
    "make_ctx",
    "run_cli",
    # log_fixtures
    "make_test_trace",
]
