# src/dvln/commands.py
"""The `dvln` command tree and the handlers behind each subcommand."""

from .config import build_globs_items, format_globs_text, globs_fields
from .config.config_types import GlobsKind
from .constants import CODE_NO_SUBCOMMAND, DEFAULT_SUCCESS_EXIT_VAL
from .context import RunContext
from .errors import DvlnError
from .flags import CommandSpec, FlagSpec, ParsedCommand, render_help
from .meta import PROGRAM_SCRIPT, get_metadata
from .response import respond, show_cli_output


VERSION_CONTEXT = "dvlnVersion"
GLOBS_CONTEXT = "dvlnGlobs"
PKG_CONTEXT = "dvlnPkg"


# --------------------------------------------------------------------------- #
# Shared renderers (also reached through root flags)
# --------------------------------------------------------------------------- #


def show_version(ctx: RunContext) -> int:
    meta = get_metadata()
    verbosity = ctx.verbosity
    data = meta.as_dict(verbosity)
    respond(
        ctx,
        context=VERSION_CONTEXT,
        kind="version",
        fields=list(data),
        items=[data],
        text=meta.as_text(verbosity),
    )
    return DEFAULT_SUCCESS_EXIT_VAL


def show_globs(ctx: RunContext, kind: GlobsKind) -> int:
    """Dump user-visible settings as env vars (`env`) or config keys (`cfg`)."""
    verbosity = ctx.verbosity
    respond(
        ctx,
        context=GLOBS_CONTEXT,
        kind=kind,
        fields=globs_fields(verbosity),
        items=build_globs_items(ctx.resolver, kind, verbosity),
        text=format_globs_text(ctx.resolver, kind, verbosity),
    )
    return DEFAULT_SUCCESS_EXIT_VAL


def show_help(ctx: RunContext, topic: str | None = None) -> int:
    show_cli_output(ctx, render_help(ctx, ROOT_COMMAND, topic))
    return DEFAULT_SUCCESS_EXIT_VAL


# --------------------------------------------------------------------------- #
# Handlers
# --------------------------------------------------------------------------- #


def _pkg_item(ctx: RunContext, action: str) -> dict[str, object]:
    r = ctx.resolver
    item: dict[str, object] = {
        "action": action,
        "devline": r.get_string("devline"),
        "pkg": r.get_string("pkg"),
        "jobs": ctx.jobs,
    }
    if ctx.workspace_root is not None:
        item["wkspcRoot"] = str(ctx.workspace_root)
    return item


def _respond_pkg(ctx: RunContext, item: dict[str, object], text: str) -> int:
    respond(
        ctx,
        context=PKG_CONTEXT,
        kind=str(item["action"]),
        fields=list(item),
        items=[item],
        text=text,
    )
    return DEFAULT_SUCCESS_EXIT_VAL


def run_root(ctx: RunContext, parsed: ParsedCommand) -> int:  # noqa: ARG001
    xmsg = f"Please use a valid subcommand (for a list: '{PROGRAM_SCRIPT} help')"
    raise DvlnError(xmsg, CODE_NO_SUBCOMMAND)


def run_get(ctx: RunContext, parsed: ParsedCommand) -> int:  # noqa: ARG001
    logger = ctx.logger
    logger.debug("Initialization done, firing up get()")
    codebase = ctx.resolver.get_string("codebase")
    item = _pkg_item(ctx, "get")
    item["codebase"] = codebase
    logger.verbose("Workspace directory: %s", ctx.resolver.get_string("wkspcdir"))
    text = f"Getting packages from codebase {codebase}, devline {item['devline']}"
    return _respond_pkg(ctx, item, text)


def run_pull(ctx: RunContext, parsed: ParsedCommand) -> int:  # noqa: ARG001
    ctx.logger.debug("Initialization done, firing up pull()")
    item = _pkg_item(ctx, "pull")
    return _respond_pkg(ctx, item, f"Pulling packages based on devline {item['devline']}")


def run_update(ctx: RunContext, parsed: ParsedCommand) -> int:  # noqa: ARG001
    ctx.logger.debug("Initialization done, firing up update()")
    item = _pkg_item(ctx, "update")
    return _respond_pkg(
        ctx, item, f"Updating packages based on devline {item['devline']}"
    )


def run_version(ctx: RunContext, parsed: ParsedCommand) -> int:  # noqa: ARG001
    return show_version(ctx)


def run_help(ctx: RunContext, parsed: ParsedCommand) -> int:
    return show_help(ctx, parsed.args[0] if parsed.args else None)


# --------------------------------------------------------------------------- #
# The tree
# --------------------------------------------------------------------------- #

_DEVLINE = FlagSpec("devline", "d")
_PKG = FlagSpec("pkg", "p")

GET_COMMAND = CommandSpec(
    name="get",
    short="get packages for a codebase [+ devline]",
    long=(
        "Populate a workspace with the packages of a codebase, optionally\n"
        "following a development line (devline) other than the default."
    ),
    flags=(
        FlagSpec("codebase", "c"),
        _DEVLINE,
        _PKG,
        FlagSpec("wkspcdir", "w"),
    ),
    handler=run_get,
)

HELP_COMMAND = CommandSpec(
    name="help",
    short="help about any command",
    positional="command",
    handler=run_help,
)

PULL_COMMAND = CommandSpec(
    name="pull",
    short="pull package updates into the workspace",
    long="Pull updates for the workspace packages that follow a devline.",
    flags=(_DEVLINE, _PKG),
    handler=run_pull,
)

UPDATE_COMMAND = CommandSpec(
    name="update",
    short="update the workspace to the current devline state",
    long="Update workspace packages (and their versions) to match a devline.",
    flags=(_DEVLINE, _PKG),
    handler=run_update,
)

VERSION_COMMAND = CommandSpec(
    name="version",
    short="show dvln version information",
    handler=run_version,
)

ROOT_COMMAND = CommandSpec(
    name=PROGRAM_SCRIPT,
    short="dvln package/workspace mgmt tool",
    long=(
        "dvln: Multi-package development line and workspace management tool\n"
        "\n"
        "Build codebases out of packages, pull them into a workspace along a\n"
        "development line and keep them up to date.\n"
        "\n"
        "For complete documentation see: http://dvln.org"
    ),
    flags=(
        FlagSpec("port", "P"),
        FlagSpec("serve", "S"),
        FlagSpec("version", "V"),
    ),
    persistent_flags=(
        FlagSpec("analysis", "A"),
        FlagSpec("config", "C"),
        FlagSpec("debug", "D"),
        FlagSpec("fatalon", "F"),
        FlagSpec("force", "f"),
        FlagSpec("globs", "G"),
        FlagSpec("help", "h"),
        FlagSpec("interact", "i"),
        FlagSpec("jobs", "J"),
        FlagSpec("look", "L"),
        FlagSpec("quiet", "q"),
        FlagSpec("record", "R"),
        FlagSpec("terse", "t"),
        FlagSpec("verbose", "v"),
    ),
    subcommands=(
        GET_COMMAND,
        HELP_COMMAND,
        PULL_COMMAND,
        UPDATE_COMMAND,
        VERSION_COMMAND,
    ),
    handler=run_root,
)
