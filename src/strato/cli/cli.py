import sys

from pathlib import Path
from typing import Any

import click

from strato import exceptions
from strato.cli import constants
from strato.cli.utils import click as utils_click
from strato.cli.utils import logging

logger = logging.getLogger(__name__)


from strato.cli.commands.list import list_deployments  # noqa: E402


class MainGroup(utils_click.AliasedShortMatchGroup):
    def invoke(self, *args, **kwargs) -> Any:
        try:
            return super().invoke(*args, **kwargs)
        except exceptions.StratoError as e:
            logger.error(
                e,
                exc_info=(
                    e if logger.getEffectiveLevel() < logging.logging.INFO else False
                ),
            )
            sys.exit(e.exit_code)


@click.group(
    name=constants.PROG,
    help=constants.DESC,
    cls=MainGroup,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@utils_click.global_options
@click.option(
    "--cwd",
    default=".",
    expose_value=False,
    callback=utils_click.store_option,
    type=click.Path(path_type=Path),
    help="Directory of the project to operate on",
)
@click.pass_context
@logging.verbosity
def cli(ctx) -> None:
    cli_ctx = ctx.ensure_object(utils_click.CliContext)
    ctx.call_on_close(cli_ctx.close)


cli.add_command(list_deployments)


if __name__ == "__main__":
    cli()
