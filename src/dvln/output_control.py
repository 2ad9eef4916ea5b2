# src/dvln/output_control.py
"""Derive screen/logfile thresholds and destinations from resolved settings.

Called twice per run: once right after the CLI pre-pass so `--debug` and
`--record` take effect early, and again once the config file is loaded.
"""

import logging
from collections.abc import Mapping
from pathlib import Path

from .api import new_msg
from .constants import (
    CODE_LOGFILE_OPEN,
    CODE_TEMP_LOGFILE_NOTE,
    CONTROL_ENV_FORWARDS,
    CONTROL_ENV_NONE,
    DEFAULT_ENV_LOGFILE_OFF,
    DEFAULT_ENV_SCREEN_FLAGS,
    DEFAULT_TEMP_LOG_PREFIX,
    RECORD_OFF,
    RECORD_TEMP_VALUES,
)
from .context import RunContext
from .errors import FatalError
from .utils import collapse_home, expand_home
from .utils_logs import (
    DISCARD_LEVEL,
    FOR_BOTH,
    FOR_LOGFILE,
    FOR_SCREEN,
    TRACE_LEVEL,
    VERBOSE_LEVEL,
    level_from_name,
)


def control_env_settings(environ: Mapping[str, str]) -> dict[str, str]:
    """Map DVLN_* control variables onto the output service's OUT_* names.

    Unset or empty variables are skipped; "none" forwards an explicit "".
    """
    settings: dict[str, str] = {}
    for env_name, out_name in CONTROL_ENV_FORWARDS.items():
        value = environ.get(env_name, "")
        if not value:
            continue
        settings[out_name] = "" if value == CONTROL_ENV_NONE else value
    return settings


def adjust_out_levels(ctx: RunContext) -> None:
    resolver = ctx.resolver
    logger = ctx.logger

    logger.set_threshold(level_from_name(resolver.get_string("screenlevel")), FOR_SCREEN)

    control = control_env_settings(ctx.environ)
    debug = resolver.get_bool("debug")
    verbose = resolver.get_bool("verbose")

    # exactly one branch applies
    if debug and verbose:
        logger.set_threshold(TRACE_LEVEL, FOR_BOTH)
        if not ctx.environ.get(DEFAULT_ENV_SCREEN_FLAGS):
            control[CONTROL_ENV_FORWARDS[DEFAULT_ENV_SCREEN_FLAGS]] = "debug"
    elif debug:
        logger.set_threshold(logging.DEBUG, FOR_BOTH)
    elif verbose:
        logger.set_threshold(VERBOSE_LEVEL, FOR_BOTH)
    elif resolver.get_bool("quiet"):
        logger.set_threshold(logging.ERROR, FOR_SCREEN)

    logger.configure(control)
    setup_record(ctx)
    promote_temp_note(ctx)

    # test hook
    if ctx.environ.get(DEFAULT_ENV_LOGFILE_OFF) == "1":
        logger.set_threshold(DISCARD_LEVEL, FOR_LOGFILE)

    logger.trace(
        "Output thresholds: screen=%s logfile=%s",
        logging.getLevelName(logger.threshold(FOR_SCREEN)),
        logging.getLevelName(logger.threshold(FOR_LOGFILE)),
    )


def allocate_temp_logfile(ctx: RunContext) -> Path:
    """Create this run's temp logfile once; later calls return the same path."""
    if ctx.output.temp_logfile_path is not None:
        return ctx.output.temp_logfile_path

    try:
        path = ctx.logger.use_temp_logfile(DEFAULT_TEMP_LOG_PREFIX)
    except OSError as e:
        xmsg = f"Unable to create a temp output logfile: {e}"
        raise FatalError(xmsg, CODE_LOGFILE_OPEN) from e
    ctx.output.temp_logfile_path = path

    note = f"Temp output logfile: {path}"
    if ctx.is_json:
        # embedded in the final JSON instead of a screen note
        ctx.api.set_stored_note(new_msg(note, CODE_TEMP_LOGFILE_NOTE, "note"))
    else:
        ctx.output.temp_note = note

    # "temp" is replaced by the real file for the rest of the run
    ctx.resolver.set("record", str(path))
    return path


def promote_temp_note(ctx: RunContext) -> None:
    """Move a pending screen note into the stored API note once the look is json.

    The temp logfile is allocated before the config file is read, so a json
    look set there is only known on a later pass.
    """
    note = ctx.output.temp_note
    if not note or not ctx.is_json:
        return
    ctx.output.temp_note = ""
    ctx.api.set_stored_note(new_msg(note, CODE_TEMP_LOGFILE_NOTE, "note"))


def setup_record(ctx: RunContext) -> None:
    record = ctx.resolver.get_string("record")
    if not record or record == RECORD_OFF:
        return

    logger = ctx.logger
    if record in RECORD_TEMP_VALUES:
        allocate_temp_logfile(ctx)
    else:
        target = expand_home(record)
        if logger.logfile_path != target:
            try:
                logger.set_logfile(target)
            except OSError as e:
                xmsg = f"Unable to open output logfile {record}: {e}"
                raise FatalError(xmsg, CODE_LOGFILE_OPEN) from e
        short = collapse_home(record)
        if short != record:
            ctx.resolver.set("record", short)

    if logger.threshold(FOR_LOGFILE) == DISCARD_LEVEL:
        logger.set_threshold(
            level_from_name(ctx.resolver.get_string("logfilelevel")), FOR_LOGFILE
        )
