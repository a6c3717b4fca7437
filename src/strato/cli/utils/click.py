from __future__ import annotations

import math

from dataclasses import dataclass
from functools import cached_property
from pathlib import Path

import click

from click_option_group import optgroup

from strato.lib.client import Client
from strato.lib.config import GlobalConfig, LocalConfig
from strato.lib.errors import UsageError
from strato.lib.utils import parse_meta


@dataclass
class CliContext:
    """Global option values, shared with subcommands.

    The options are accepted both before and after the subcommand name, so
    the config files and the client are only loaded on first use.
    """

    cwd: Path = Path(".")
    local_config_path: Path | None = None
    global_config_path: Path | None = None
    token: str | None = None
    scope_name: str | None = None

    @cached_property
    def local_config(self) -> LocalConfig:
        return LocalConfig.load(self.cwd, self.local_config_path)

    @property
    def scope(self) -> str | None:
        return self.scope_name or self.local_config.scope

    @cached_property
    def client(self) -> Client:
        return Client.from_config(
            GlobalConfig.load(self.global_config_path),
            token=self.token,
        )

    def close(self) -> None:
        if "client" in self.__dict__:
            self.client.close()


pass_cli_context = click.make_pass_decorator(CliContext)


def store_option(ctx, param, value):
    if value is not None and not ctx.resilient_parsing:
        setattr(ctx.ensure_object(CliContext), param.name, value)


def global_options(func):
    """Options taken by the main group and repeated on each subcommand"""
    # reverse order because not using decorators to keep command clean
    func = click.option(
        "-S",
        "--scope",
        "scope_name",
        metavar="NAME",
        expose_value=False,
        callback=store_option,
        help="Set a custom scope",
    )(func)
    func = click.option(
        "-t",
        "--token",
        metavar="TOKEN",
        expose_value=False,
        callback=store_option,
        help="Login token",
    )(func)
    func = click.option(
        "-Q",
        "--global-config",
        "global_config_path",
        metavar="DIR",
        type=click.Path(file_okay=False, path_type=Path),
        expose_value=False,
        callback=store_option,
        help="Path to the global `.strato` directory",
    )(func)
    func = click.option(
        "-A",
        "--local-config",
        "local_config_path",
        metavar="FILE",
        type=click.Path(dir_okay=False, path_type=Path),
        expose_value=False,
        callback=store_option,
        help="Path to the local `strato.json` file",
    )(func)
    return func  # noqa: RET504


class AliasedShortMatchGroup(click.Group):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._alias2cmd = {}
        self._cmd2aliases = {}

    def add_command(self, cmd, *args, **kwargs):
        super().add_command(cmd, *args, **kwargs)
        if aliases := getattr(cmd, "aliases", None):
            self._cmd2aliases[cmd.name] = aliases
            for alias in aliases:
                self._alias2cmd[alias] = cmd.name

    def resolve_alias(self, cmd_name):
        return self._alias2cmd.get(cmd_name, cmd_name)

    def get_command(self, ctx, cmd_name):
        cmd_name = self.resolve_alias(cmd_name)

        command = super().get_command(ctx, cmd_name)
        if command is not None:
            return command

        # allow any unique prefix of a command or alias
        matches = list(
            {
                self.resolve_alias(cmd)
                for cmd in self.list_commands(ctx) + list(self._alias2cmd.keys())
                if cmd.startswith(cmd_name)
            },
        )

        if not matches:
            return None

        if len(matches) == 1:
            return super().get_command(ctx, matches[0])

        ctx.fail(
            f"Unknown command '{cmd_name}'. Did you mean any of these: "
            f"{', '.join(sorted(matches))}?",
        )

        return None

    def format_commands(self, ctx, formatter):
        rows = []
        for sub in self.list_commands(ctx):
            cmd = self.get_command(ctx, sub)
            if cmd is None or cmd.hidden:
                continue
            if aliases := self._cmd2aliases.get(sub):
                sub = f"{sub} ({','.join(sorted(aliases))})"
            rows.append((sub, cmd))

        if not rows:
            return

        limit = formatter.width - 6 - max(len(sub) for sub, _ in rows)
        with formatter.section("Commands"):
            formatter.write_dl(
                [(sub, cmd.get_short_help_str(limit)) for sub, cmd in rows],
            )

    def resolve_command(self, ctx, args):
        # always return the full command name
        _, cmd, args = super().resolve_command(ctx, args)
        return cmd.name if cmd else None, cmd, args


def help_option(func):
    """``-h/--help`` that exits with status 2 once usage is shown"""

    def _show_help(ctx, param, value):
        if not value or ctx.resilient_parsing:
            return
        click.echo(ctx.get_help())
        ctx.exit(2)

    return click.option(
        "-h",
        "--help",
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=_show_help,
        help="Output usage information",
    )(func)


def at_most_one(ctx, param, value):
    value = value or ()
    if len(value) > 1:
        raise UsageError(
            f"`{ctx.command_path} [{param.human_readable_name.lower()}]` "
            "accepts at most one argument",
        )
    return value[0] if value else None


def numeric_flag(ctx, param, value):
    if value is None:
        return None
    # any decimal or exponent form, truncated to a whole number
    try:
        number = float(value)
    except ValueError:
        number = math.nan
    if not math.isfinite(number):
        raise UsageError(f"Please provide a number for flag `{param.opts[-1]}`")
    return int(number)


def query_filters(func):
    """Options narrowing which deployments are listed"""
    # reverse order because not using decorators to keep command clean
    func = optgroup.option(
        "-N",
        "--next",
        "next_timestamp",
        metavar="TIMESTAMP",
        callback=numeric_flag,
        help="Show next page of results",
    )(func)
    func = optgroup.option(
        "-m",
        "--meta",
        multiple=True,
        metavar="KEY=VALUE",
        callback=lambda ctx, param, value: parse_meta(value),
        help=(
            "Filter deployments by metadata (e.g.: `-m KEY=value`). "
            "Can appear many times."
        ),
    )(func)
    func = optgroup.option(
        "-a",
        "--all",
        "all_",
        is_flag=True,
        help="Show the latest deployment of every project under the scope",
    )(func)
    func = optgroup.group(
        "Query Filters",
        help="Parameters to filter the deployments query",
    )(func)
    return func  # noqa: RET504
