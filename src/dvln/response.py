# src/dvln/response.py
"""Text or JSON rendering of results, usage, warnings and errors."""

import logging
from collections.abc import Sequence
from typing import Any

from .api import build_error_response, build_response, new_msg
from .config.config_types import UsageItem
from .constants import CODE_DEFAULT, CODE_JSON_RENDER, RECORD_OFF
from .context import RunContext
from .errors import DvlnError, FatalError
from .meta import current_user
from .utils_logs import ISSUE_LEVEL, level_from_name, level_to_name


ERROR_CONTEXT = "dvlnError"
HELP_CONTEXT = "dvlnHelp"


class JSONLookFilter(logging.Filter):
    """Reroute issue/error/fatal records while `--look json` is active.

    Records that end the run become a JSON error response; the rest are
    stored as warnings for the final response and kept off screen and
    logfile. Lower levels pass through untouched.
    """

    def __init__(self, ctx: RunContext) -> None:
        super().__init__()
        self.ctx = ctx

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno < ISSUE_LEVEL or getattr(record, "raw", False):
            return True

        msg = new_msg(
            record.getMessage(),
            getattr(record, "code", CODE_DEFAULT),
            level_to_name(record.levelno),
        )
        if not getattr(record, "dies", False):
            self.ctx.api.add_stored_warning(msg)
            return False

        payload = build_error_response(
            self.ctx.resolver.get_string("apiver"),
            ERROR_CONTEXT,
            msg,
            state=self.ctx.api,
        )
        record.msg = self.ctx.json_style().render(payload)
        record.args = ()
        record.exc_info = None
        record.raw = True
        record.stream = "stdout"
        return True


def install_json_interception(ctx: RunContext) -> JSONLookFilter | None:
    """Attach the JSON filter when look is json; safe to call repeatedly."""
    if not ctx.is_json:
        return None
    logger = ctx.logger
    for flt in logger.filters:
        if isinstance(flt, JSONLookFilter):
            return flt
    flt = JSONLookFilter(ctx)
    logger.addFilter(flt)
    return flt


def emit_json(ctx: RunContext, payload: dict[str, Any]) -> None:
    try:
        text = ctx.json_style().render(payload)
    except (TypeError, ValueError) as e:
        xmsg = f"Unable to render JSON output: {e}"
        raise FatalError(xmsg, CODE_JSON_RENDER) from e
    ctx.logger.info("%s", text, extra={"raw": True})


def respond(  # noqa: PLR0913
    ctx: RunContext,
    *,
    context: str,
    kind: str,
    fields: Sequence[str],
    items: Sequence[Any],
    text: str,
) -> None:
    """Print a command result: `text` verbatim, or a JSON envelope."""
    if not ctx.is_json:
        ctx.logger.info("%s", text)
        return
    payload = build_response(
        ctx.resolver.get_string("apiver"),
        context,
        kind,
        ctx.verbosity,
        fields,
        items,
        state=ctx.api,
    )
    emit_json(ctx, payload)


def show_cli_output(ctx: RunContext, text: str) -> None:
    """Print usage/help text, wrapped in a `usage` envelope in json mode."""
    if not ctx.is_json:
        ctx.logger.info("%s", text)
        return

    usage: UsageItem = {"helpMsg": text}
    fields = ["helpMsg"]
    record = ctx.resolver.get_string("record")
    if record and record != RECORD_OFF:
        usage["recordLog"] = record
        fields.append("recordLog")
    user = current_user()
    if user:
        usage["userId"] = user
        fields.append("userId")

    payload = build_response(
        ctx.resolver.get_string("apiver"),
        HELP_CONTEXT,
        "usage",
        "regular",
        fields,
        [usage],
        state=ctx.api,
    )
    emit_json(ctx, payload)


def report_error(ctx: RunContext, err: DvlnError) -> int:
    """Render a user-facing error in the active look; returns its exit code."""
    install_json_interception(ctx)
    logger = ctx.logger
    exc_info = err if logger.wants_traceback() else None
    logger.report(
        level_from_name(err.level, ISSUE_LEVEL),
        "%s",
        err.message,
        code=err.code,
        dies=True,
        exc_info=exc_info,
    )
    return err.exit_code


def emit_temp_log_note(ctx: RunContext) -> None:
    """Post-run: point text users at the temp logfile (screen only, stderr)."""
    note = ctx.output.temp_note
    if not note or ctx.is_json:
        return
    ctx.output.temp_note = ""
    ctx.logger.note("%s", note, extra={"screen_only": True, "stream": "stderr"})
