import logging
import sys
import time

import click

from strato.cli.utils.click import (
    CliContext,
    at_most_one,
    global_options,
    help_option,
    pass_cli_context,
    query_filters,
)
from strato.cli.utils.logging import debug_option
from strato.cli.utils.output import (
    app_table,
    command_name,
    elapsed,
    get_console,
    highlight,
    log,
    note,
    print_table,
    projects_table,
)
from strato.lib.client import PAGE_SIZE
from strato.lib.enums import LinkStatus
from strato.lib.errors import MissingOrgError, NotFoundError, UsageError
from strato.lib.link import get_linked_project
from strato.lib.models import Deployment
from strato.lib.scope import get_scope
from strato.lib.utils import (
    is_deployment_host,
    is_valid_name,
    resolve_paths,
    sort_recent,
    to_host,
    unique_projects,
    validate_paths,
)

logger = logging.getLogger(__name__)

EPILOG = """
\b
Examples:
  - List all deployments
      $ strato ls
  - List all deployments for the app `my-app`
      $ strato ls my-app
  - Filter deployments by metadata
      $ strato ls -m key1=value1 -m key2=value2
  - Paginate deployments for a project, where `1584722256178` is the
    time in milliseconds since the UNIX epoch
      $ strato ls my-app --next 1584722256178
"""


def host_filter(app: str) -> str | None:
    """Return the host when ``app`` is really a deployment hostname.

    Some people pass whole deployment domains instead of project names;
    only generated deployment hosts (which always contain a ``-``) are
    accepted, not aliases.
    """
    host = to_host(app)
    if not is_deployment_host(host):
        return None

    note(
        f"We suggest using {command_name('inspect <deployment>')} "
        "for retrieving details about a single deployment",
    )

    if len(host.split("-")) < 2:  # noqa: PLR2004
        raise UsageError("Only deployment hostnames are allowed, no aliases")

    return host


def next_page_command(
    app: str | None,
    all_: bool,
    meta: dict[str, str],
    scope: str | None,
    next_timestamp: int,
) -> str:
    parts = ["ls"]
    if app:
        parts.append(app)
    if all_:
        parts.append("--all")
    parts.extend(f"--meta {key}={value}" for key, value in meta.items())
    if scope:
        parts.append(f"--scope {scope}")
    parts.append(f"--next {next_timestamp}")
    return command_name(" ".join(parts))


def fallback_find(cli_ctx: CliContext, app: str) -> list[Deployment]:
    logger.debug(
        "No deployments: attempting to find deployment that matches supplied app name",
    )
    try:
        match = cli_ctx.client.find_deployment(app)
    except NotFoundError:
        logger.debug("Ignore find_deployment 404")
        return []

    logger.debug("Found deployment that matches app name")
    return [match]


@click.command(
    "ls",
    add_help_option=False,
    epilog=EPILOG,
)
@click.argument("app", nargs=-1, callback=at_most_one)
@query_filters
@global_options
@debug_option
@help_option
@pass_cli_context
def list_deployments(
    cli_ctx: CliContext,
    app: str | None,
    all_: bool,
    meta: dict[str, str],
    next_timestamp: int | None,
) -> None:
    """List deployments of the linked project, a named project, or all projects"""
    host = None
    if app:
        if not is_valid_name(app):
            raise UsageError(
                f'The provided argument "{app}" is not a valid project name',
            )
        host = host_filter(app)

    path = validate_paths(resolve_paths(cli_ctx.cwd))
    client = cli_ctx.client

    link = get_linked_project(client, path)
    if link.status == LinkStatus.ERROR:
        sys.exit(link.exit_code)

    if host:
        app = None
    elif not app and link.project:
        app = link.project.name

    if link.status == LinkStatus.NOT_LINKED and not app and not host:
        click.echo(
            "Looks like this directory isn't linked to a Strato project. "
            f"Please run {command_name('link')} to link it.",
            err=True,
        )
        return

    if link.status == LinkStatus.LINKED:
        if link.org is None:
            raise MissingOrgError()
        org = link.org
    else:
        org = get_scope(client, cli_ctx.scope)

    context_name = org.slug
    client.current_team = org.id if org.is_team else None

    start = time.monotonic()
    with get_console(stderr=True).status(
        f"Fetching deployments in [bold]{context_name}[/bold]",
    ):
        logger.debug("Fetching deployments")
        deployments, pagination = client.list_deployments(
            None if all_ else app,
            meta=meta,
            next_timestamp=next_timestamp,
        )

        if app and not all_ and not deployments:
            deployments = fallback_find(cli_ctx, app)

    if host:
        deployments = [d for d in deployments if d.url == host]

    log(
        "Deployments"
        f"{f' for {highlight(app)}' if app and not all_ else ''} "
        f"under {highlight(context_name)} "
        f"{elapsed((time.monotonic() - start) * 1000)}",
    )

    if not deployments:
        log("No deployments found.")
        return

    if app is None:
        log(
            "To list more deployments for a project run "
            f"{command_name('ls [project]')}",
        )

    click.echo("", err=True)

    deployments = sort_recent(deployments)
    if app and not all_:
        user = client.get_user()
        table = app_table(deployments, show_username=user.username != context_name)
    else:
        # a host filter already narrows the list to one deployment url
        if not host:
            deployments = unique_projects(deployments)
        table = projects_table(deployments)

    print_table(table)

    if pagination.count == PAGE_SIZE:
        log(
            "To display the next page run "
            f"{next_page_command(app, all_, meta, cli_ctx.scope, pagination.next)}",
        )


list_deployments.aliases = ["list"]
