# src/dvln/flags.py
"""Command-line flag binding in two passes over argparse parsers.

Parsers are a pure function of the resolver's current values: pass 1 builds
them from defaults (plus env) to pick up the flags the user typed, pass 2
rebuilds them once the config file is loaded so help shows the effective
defaults. Flag identity never changes between builds, only the defaults shown.
"""

import argparse
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from difflib import get_close_matches
from typing import Any

from .context import RunContext
from .errors import CommandLineError
from .logs import getAppLogger
from .utils_types import TRUE_STRINGS, to_str


FALSE_STRINGS = frozenset({"0", "f", "false", "no", "n", "off"})
POSITIONAL_DEST = "args"


# --------------------------------------------------------------------------- #
# Command tree description
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class FlagSpec:
    """A flag bound to the setting of the same name."""

    name: str
    short: str | None = None


@dataclass(frozen=True)
class CommandSpec:
    name: str
    short: str
    long: str = ""
    flags: tuple[FlagSpec, ...] = ()
    # visible on this command and every subcommand
    persistent_flags: tuple[FlagSpec, ...] = ()
    subcommands: tuple["CommandSpec", ...] = ()
    positional: str | None = None
    handler: Callable[[RunContext, "ParsedCommand"], int] | None = field(
        default=None, compare=False
    )

    def find_subcommand(self, token: str) -> "CommandSpec | None":
        """Exact name, else a unique prefix match."""
        for sub in self.subcommands:
            if sub.name == token:
                return sub
        matches = [sub for sub in self.subcommands if sub.name.startswith(token)]
        if len(matches) == 1:
            return matches[0]
        return None


@dataclass
class ParsedCommand:
    command: CommandSpec
    values: dict[str, Any]
    args: list[str]


# --------------------------------------------------------------------------- #
# argparse glue
# --------------------------------------------------------------------------- #


class FlagParseError(Exception):
    """Raised instead of argparse's print-and-exit on bad flags."""

    def __init__(self, message: str, hints: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.message = message
        self.hints = list(hints)

    def render(self) -> str:
        return "\n".join([f"Error: {self.message}", *self.hints])


_EXPECTED_ARG = re.compile(r"argument (\S+): expected one argument")


class FlagArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        # Build known option strings: ["-v", "--verbose", "--look", ...]
        known_opts: list[str] = []
        for action in self._actions:
            known_opts.extend([s for s in action.option_strings if s])

        hint_lines: list[str] = []
        if "unrecognized arguments:" in message:
            bad = message.split("unrecognized arguments:", 1)[1].strip()
            bad_args = [tok for tok in bad.split() if tok.startswith("-")]
            for arg in bad_args:
                close = get_close_matches(arg.split("=", 1)[0], known_opts, n=1, cutoff=0.6)
                if close:
                    hint_lines.append(f"Hint: did you mean {close[0]}?")
            if bad_args:
                message = f"unknown flag: {' '.join(bad_args)}"

        expected = _EXPECTED_ARG.search(message)
        if expected:
            names = expected.group(1).split("/")
            message = f"flag needs an argument: {names[-1]}"

        raise FlagParseError(message, hint_lines)


def option_kinds(parser: argparse.ArgumentParser) -> tuple[set[str], set[str]]:
    """Return (boolean long flags, option strings that take a value)."""
    bool_longs: set[str] = set()
    value_opts: set[str] = set()
    for action in parser._actions:  # noqa: SLF001
        if not action.option_strings:
            continue
        if action.nargs == 0:
            bool_longs.update(
                s[2:] for s in action.option_strings if s.startswith("--")
            )
        else:
            value_opts.update(action.option_strings)
    return bool_longs, value_opts


def normalize_bool_tokens(tokens: Sequence[str], bool_longs: set[str]) -> list[str]:
    """Rewrite `--flag=true|false` as `--flag` / `--no-flag`."""
    result: list[str] = []
    for i, tok in enumerate(tokens):
        if tok == "--":
            result.extend(tokens[i:])
            break
        if tok.startswith("--") and "=" in tok:
            name, _, value = tok[2:].partition("=")
            if name in bool_longs:
                low = value.strip().lower()
                if low in TRUE_STRINGS:
                    result.append(f"--{name}")
                    continue
                if low in FALSE_STRINGS:
                    result.append(f"--no-{name}")
                    continue
        result.append(tok)
    return result


def consumes_next(token: str, value_opts: set[str]) -> bool:
    """Whether a flag token takes the following token as its value.

    `-L json` and `--look json` do; `-Ljson`, `--look=json` and `-vD` do not.
    """
    if token.startswith("--"):
        return "=" not in token and token in value_opts
    for idx, ch in enumerate(token[1:]):
        if f"-{ch}" in value_opts:
            return idx == len(token) - 2
    return False


def split_flag_chunks(tokens: Sequence[str], value_opts: set[str]) -> list[list[str]]:
    """Group each flag with its separate value (if any); drop positionals."""
    chunks: list[list[str]] = []
    i = 0
    while i < len(tokens):
        tok = tokens[i]
        if tok == "--":
            break
        if not tok.startswith("-") or tok == "-":
            i += 1
            continue
        chunk = [tok]
        if consumes_next(tok, value_opts) and i + 1 < len(tokens):
            chunk.append(tokens[i + 1])
            i += 1
        chunks.append(chunk)
        i += 1
    return chunks


def _default_label(value: Any) -> str | None:
    text = to_str(value)
    return None if text in ("", "false", "0") else text


def _add_flag(
    group: argparse._ArgumentGroup,  # pyright: ignore[reportPrivateUsage]
    ctx: RunContext,
    flag: FlagSpec,
) -> None:
    setting = ctx.registry.get_setting(flag.name)
    if setting is None:
        return
    opts = [f"-{flag.short}"] if flag.short else []
    opts.append(f"--{flag.name}")

    help_text = setting.description
    label = _default_label(ctx.resolver.get(flag.name))
    if label is not None:
        help_text = f"{help_text} (default: {label})"
    help_text = help_text.replace("%", "%%")

    if isinstance(setting.default, bool):
        group.add_argument(
            *opts,
            dest=flag.name,
            action=argparse.BooleanOptionalAction,
            help=help_text,
        )
    elif isinstance(setting.default, int):
        group.add_argument(*opts, dest=flag.name, type=int, metavar="int", help=help_text)
    else:
        group.add_argument(*opts, dest=flag.name, metavar="string", help=help_text)


def _commands_epilog(root: CommandSpec) -> str:
    width = max((len(sub.name) for sub in root.subcommands), default=0) + 2
    lines = ["Available Commands:"]
    lines.extend(f"  {sub.name:<{width}}{sub.short}" for sub in root.subcommands)
    lines.append("")
    lines.append(f'Use "{root.name} help [command]" for more information about a command.')
    return "\n".join(lines)


def build_parser(
    ctx: RunContext, root: CommandSpec, command: CommandSpec
) -> FlagArgumentParser:
    """Build the parser for `command` from the resolver's current values."""
    is_root = command is root
    parser = FlagArgumentParser(
        prog=root.name if is_root else f"{root.name} {command.name}",
        description=command.long or command.short,
        epilog=_commands_epilog(root) if is_root and root.subcommands else None,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
        allow_abbrev=False,
        argument_default=argparse.SUPPRESS,
    )
    local = parser.add_argument_group("Flags")
    for flag in command.flags:
        _add_flag(local, ctx, flag)
    inherited = local if is_root else parser.add_argument_group("Global Flags")
    for flag in root.persistent_flags:
        _add_flag(inherited, ctx, flag)
    if command.positional:
        parser.add_argument(
            POSITIONAL_DEST, nargs="*", default=[], metavar=command.positional
        )
    return parser


def find_command(
    root: CommandSpec, tokens: Sequence[str], value_opts: set[str]
) -> tuple[CommandSpec, list[str]]:
    """Locate the invoked subcommand; return it and the remaining tokens.

    Raises:
        CommandLineError: the first positional names no known subcommand.
    """
    i = 0
    while i < len(tokens):
        tok = tokens[i]
        if tok == "--":
            break
        if tok.startswith("-") and tok != "-":
            i += 2 if consumes_next(tok, value_opts) else 1
            continue
        if not root.subcommands:
            break
        sub = root.find_subcommand(tok)
        if sub is None:
            xmsg = (
                f'Error: unknown command "{tok}" for "{root.name}"\n'
                f"Please run '{root.name} help' for usage"
            )
            raise CommandLineError(xmsg)
        return sub, [*tokens[:i], *tokens[i + 1 :]]
    return root, list(tokens)


def tolerant_parse(parser: FlagArgumentParser, tokens: Sequence[str]) -> dict[str, Any]:
    """Parse what can be parsed; bad or unknown flags are skipped."""
    logger = getAppLogger()
    bool_longs, value_opts = option_kinds(parser)
    values: dict[str, Any] = {}
    for chunk in split_flag_chunks(normalize_bool_tokens(tokens, bool_longs), value_opts):
        try:
            ns, extras = parser.parse_known_args(chunk)
        except FlagParseError as e:
            logger.trace("[flags] Pre-pass ignoring %s: %s", chunk, e.message)
            continue
        if extras:
            logger.trace("[flags] Pre-pass ignoring unknown %s", extras)
        values.update(vars(ns))
    values.pop(POSITIONAL_DEST, None)
    return values


# --------------------------------------------------------------------------- #
# The passes
# --------------------------------------------------------------------------- #


def push_cli_opts(ctx: RunContext, root: CommandSpec, argv: Sequence[str]) -> None:
    """Pass 1: push only the flags actually typed into the explicit layer.

    Root-level flags are pushed even when the subcommand is unknown, so that
    the resulting error already honors e.g. `--look json`.
    """
    root_parser = build_parser(ctx, root, root)
    _, value_opts = option_kinds(root_parser)
    try:
        command, rest = find_command(root, argv, value_opts)
    except CommandLineError:
        ctx.resolver.set_cli_values(_known(ctx, tolerant_parse(root_parser, argv)))
        raise

    ctx.set_current_command(command.name)
    ctx.resolver.set_cli_values(_known(ctx, tolerant_parse(root_parser, rest)))
    if command is not root:
        sub_parser = build_parser(ctx, root, command)
        ctx.resolver.set_cli_values(_known(ctx, tolerant_parse(sub_parser, rest)))


def _known(ctx: RunContext, values: dict[str, Any]) -> dict[str, Any]:
    return {name: value for name, value in values.items() if name in ctx.registry}


def bind(ctx: RunContext, root: CommandSpec) -> dict[str, FlagArgumentParser]:
    """Pass 2: rebuild every parser from the fully resolved values."""
    ctx.parsers = {
        command.name: build_parser(ctx, root, command)
        for command in (root, *root.subcommands)
    }
    return ctx.parsers


def parse_command_line(
    ctx: RunContext, root: CommandSpec, argv: Sequence[str]
) -> ParsedCommand:
    """Strict dispatch parse; errors become CommandLineError (code 2000)."""
    if not ctx.parsers:
        bind(ctx, root)
    _, root_value_opts = option_kinds(ctx.parsers[root.name])
    command, rest = find_command(root, argv, root_value_opts)
    parser = ctx.parsers[command.name]
    bool_longs, _ = option_kinds(parser)
    try:
        ns = parser.parse_args(normalize_bool_tokens(rest, bool_longs))
    except FlagParseError as e:
        xmsg = f"{e.render()}\n{ctx.help_hint()}"
        raise CommandLineError(xmsg) from e
    values = vars(ns)
    args = list(values.pop(POSITIONAL_DEST, []))
    return ParsedCommand(command=command, values=values, args=args)


def render_help(ctx: RunContext, root: CommandSpec, topic: str | None = None) -> str:
    """Help text for `topic` (a subcommand name or prefix) or the root."""
    if not ctx.parsers:
        bind(ctx, root)
    command = root
    if topic:
        found = root.find_subcommand(topic)
        if found is None:
            xmsg = f'Unknown help topic "{topic}"\n{ctx.help_hint()}'
            raise CommandLineError(xmsg)
        command = found
    return ctx.parsers[command.name].format_help().rstrip("\n")
