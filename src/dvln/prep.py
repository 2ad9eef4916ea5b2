# src/dvln/prep.py
"""Validation and early-exit handling once every setting layer is loaded.

`final_prep()` runs after the config file is read and output is adjusted,
before the strict command-line parse. It either returns an exit code (the
run is over: version shown, settings dumped) or None to continue.
"""

import os
from typing import cast

from .commands import show_globs, show_version
from .config.config_types import GlobsKind
from .constants import (
    CODE_BAD_GLOBS,
    CODE_BAD_JOBS,
    CODE_BAD_LOOK,
    CODE_SERVE_UNAVAILABLE,
    CODE_WKSPC_SCAN,
    GLOBS_SKIP,
    GLOBS_VALUES,
    JOBS_ALL,
    LOOK_VALUES,
)
from .context import RunContext
from .errors import FatalError, ValidationError, wrap_error
from .workspace import find_workspace_root


def resolve_jobs(ctx: RunContext) -> int:
    """Turn the `jobs` setting into a worker count, capped at the CPU count.

    Raises:
        ValidationError: the value is neither a number nor "all".
    """
    cpus = os.cpu_count() or 1
    jobs = ctx.resolver.get_string("jobs").strip()
    if not jobs or jobs == JOBS_ALL:
        return cpus
    try:
        requested = int(jobs)
    except ValueError:
        xmsg = (
            f"Jobs value should be a number or '{JOBS_ALL}', found: {jobs}\n"
            f"{ctx.help_hint()}"
        )
        raise ValidationError(xmsg, CODE_BAD_JOBS) from None
    return max(1, min(requested, cpus))


def check_look(ctx: RunContext) -> None:
    look = ctx.look
    if look not in LOOK_VALUES:
        xmsg = (
            "The --look option (-L) can only be set to 'text' or 'json', "
            f"found: '{look}'\n{ctx.help_hint()}"
        )
        raise ValidationError(xmsg, CODE_BAD_LOOK)
    if ctx.is_json and ctx.resolver.get_bool("interact"):
        ctx.logger.debug("Disabling interactive mode, not available with JSON output")
        ctx.resolver.set("interact", False)


def check_globs(ctx: RunContext) -> GlobsKind | None:
    """Return the dump kind requested with `--globs`, None when not dumping."""
    globs = ctx.resolver.get_string("globs")
    if not globs or globs == GLOBS_SKIP:
        return None
    if globs not in GLOBS_VALUES:
        xmsg = (
            "The --globs option (-G) can only be set to 'env' or 'cfg', "
            f"found: '{globs}'\n{ctx.help_hint()}"
        )
        raise ValidationError(xmsg, CODE_BAD_GLOBS)
    return cast("GlobsKind", globs)


def scan_workspace(ctx: RunContext) -> None:
    r = ctx.resolver
    wkspcdir = r.get_string("wkspcdir")
    start = None if wkspcdir in ("", ".") else wkspcdir
    try:
        ctx.workspace_root = find_workspace_root(start, r.get_string("wkspcmetadir"))
    except OSError as e:
        raise wrap_error(
            e, "Unexpected problem scanning for a workspace", CODE_WKSPC_SCAN, level="error"
        ) from e
    if ctx.workspace_root is None:
        ctx.logger.debug("No workspace found from %s", start or os.getcwd())
    else:
        ctx.logger.debug("Workspace root: %s", ctx.workspace_root)


def final_prep(ctx: RunContext) -> int | None:
    logger = ctx.logger
    r = ctx.resolver

    if r.config_file_used is not None:
        logger.debug("Used config file: %s", r.config_file_used)

    ctx.jobs = resolve_jobs(ctx)
    logger.trace("Using %d jobs", ctx.jobs)

    if r.get_bool("serve"):
        xmsg = f"Serve mode (port {r.get_int('port')}) is not available yet"
        raise FatalError(xmsg, CODE_SERVE_UNAVAILABLE)

    check_look(ctx)

    if r.get_bool("version"):
        return show_version(ctx)

    r.dump()

    kind = check_globs(ctx)
    if kind is not None:
        return show_globs(ctx, kind)

    scan_workspace(ctx)
    return None
