# src/dvln/cli.py
"""Entry point: runs one dvln invocation from argv to exit code.

Stages, in order:
    1. pass 1 flag pre-parse (only typed flags land in the resolver)
    2. early output adjustment so `--debug`/`--record` apply right away
    3. config file load, then the final output adjustment
    4. pass 2 flag rebind, final prep (validation, early exits)
    5. strict parse and dispatch to the subcommand handler
"""

import sys
from collections.abc import Mapping, Sequence

from .commands import ROOT_COMMAND, show_help
from .config import load_user_config
from .constants import CODE_INTERNAL, DEFAULT_ERROR_EXIT_VAL
from .context import RunContext
from .errors import CommandLineError, ConfigReadError, DvlnError
from .flags import bind, parse_command_line, push_cli_opts
from .output_control import adjust_out_levels
from .prep import final_prep
from .response import emit_temp_log_note, install_json_interception, report_error
from .utils_logs import safe_log


def _early_setup(ctx: RunContext, argv: Sequence[str]) -> None:
    """Pass 1 flags, config file and output destinations."""
    try:
        push_cli_opts(ctx, ROOT_COMMAND, argv)
    except CommandLineError:
        # honor --look/--debug from the root flags in the error itself
        adjust_out_levels(ctx)
        raise
    adjust_out_levels(ctx)
    if ctx.resolver.get_bool("analysis"):
        ctx.timer.enable()

    config_error: ConfigReadError | None = None
    try:
        load_user_config(ctx.resolver)
    except ConfigReadError as e:
        config_error = e
    adjust_out_levels(ctx)
    install_json_interception(ctx)
    if config_error is not None:
        raise config_error

    bind(ctx, ROOT_COMMAND)


def _run(ctx: RunContext, argv: Sequence[str]) -> int:
    logger = ctx.logger
    ctx.timer.step("dvln.execute(): start")

    _early_setup(ctx, argv)
    done = final_prep(ctx)
    if done is not None:
        return done
    ctx.timer.step("dvln.execute(): loaded dvln user config, early setup and output prep done")

    parsed = parse_command_line(ctx, ROOT_COMMAND, argv)
    if ctx.resolver.get_bool("help"):
        topic = None if parsed.command is ROOT_COMMAND else parsed.command.name
        logger.debug("CLI package dispatch completed successfully")
        return show_help(ctx, topic)

    handler = parsed.command.handler
    if handler is None:
        return show_help(ctx, parsed.command.name)
    exit_code = handler(ctx, parsed)
    logger.debug("CLI package dispatch completed successfully")
    return exit_code


def execute(
    argv: Sequence[str] | None = None, environ: Mapping[str, str] | None = None
) -> int:
    """Run dvln once; every failure is rendered here and mapped to an exit code."""
    args = list(sys.argv[1:] if argv is None else argv)
    ctx = RunContext.create(environ)
    logger = ctx.logger

    try:
        return _run(ctx, args)

    except DvlnError as e:
        # controlled termination
        try:
            return report_error(ctx, e)
        except Exception as log_err:  # noqa: BLE001
            safe_log(f"[FATAL] Logging failed while reporting: {e} ({log_err})")
            return e.exit_code

    except Exception as e:  # noqa: BLE001
        # unexpected internal error
        try:
            logger.critical_if_not_debug(
                "Unexpected internal error: %s",
                e,
                extra={"code": CODE_INTERNAL, "dies": True},
            )
        except Exception:  # noqa: BLE001
            safe_log(f"[FATAL] Logging failed while reporting: {e}")
        return DEFAULT_ERROR_EXIT_VAL

    finally:
        emit_temp_log_note(ctx)
        ctx.timer.step("dvln.execute(): complete")
        ctx.timer.stop()
        logger.close_logfile()


def main(argv: list[str] | None = None) -> int:
    return execute(argv)
