import time

from collections.abc import Iterable, Sequence

import click

from rich.console import Console
from rich.measure import Measurement
from rich.table import Table
from rich.text import Text

from strato.cli.constants import PROG
from strato.lib.enums import DeploymentState
from strato.lib.models import Deployment
from strato.lib.utils import format_ms, get_deployment_duration

CIRCLE = "● "
MAX_TABLE_WIDTH = 10_000

STATE_COLORS = {
    DeploymentState.INITIALIZING: "yellow",
    DeploymentState.BUILDING: "yellow",
    DeploymentState.ERROR: "red",
    DeploymentState.READY: "green",
    DeploymentState.QUEUED: "white",
}


def get_console(stderr: bool = False) -> Console:
    return Console(stderr=stderr, highlight=False)


def command_name(subcommand: str | None = None) -> str:
    cmd = f"{PROG} {subcommand}" if subcommand else PROG
    return click.style(f"`{cmd}`", fg="cyan")


def elapsed(ms: float) -> str:
    return click.style(f"[{format_ms(round(ms))}]", fg="bright_black")


def log(msg: str) -> None:
    click.echo(f"{click.style('>', fg='bright_black')} {msg}", err=True)


def note(msg: str) -> None:
    click.echo(f"{click.style('NOTE:', fg='yellow')} {msg}", err=True)


def highlight(msg: str) -> str:
    return click.style(msg, fg="magenta", bold=True)


def state_string(state: DeploymentState | str) -> Text:
    state = DeploymentState(state)
    if color := STATE_COLORS.get(state):
        return Text.assemble((CIRCLE, color), str(state))
    if state == DeploymentState.CANCELED:
        return Text(str(state), style="bright_black")
    return Text(str(DeploymentState.UNKNOWN), style="bright_black")


def now_ms() -> int:
    return int(time.time() * 1000)


def age(deployment: Deployment, now: int | None = None) -> Text:
    now = now_ms() if now is None else now
    return Text(format_ms(now - deployment.created_at), style="bright_black")


def make_table(headers: Sequence[str], rows: Iterable[Sequence[str | Text]]) -> Table:
    table = Table(
        box=None,
        padding=(0, 2),
        header_style="bold cyan",
        show_edge=False,
    )
    for header in headers:
        table.add_column(header, no_wrap=True)
    for row in rows:
        table.add_row(*row)
    return table


def app_table(
    deployments: Iterable[Deployment],
    show_username: bool = True,
    now: int | None = None,
) -> Table:
    """Deployments of a single project, newest first with a marker on the
    first row."""
    headers = ["deployment url", "state", "age", "duration"]
    if show_username:
        headers.append("username")

    rows = []
    for i, dep in enumerate(deployments):
        row = [
            Text.assemble(
                ("> " if i == 0 else "", "bright_black"),
                (f"https://{dep.url}", "bold"),
            ),
            state_string(dep.state),
            age(dep, now),
            Text(get_deployment_duration(dep), style="bright_black"),
        ]
        if show_username:
            row.append(Text(dep.creator or "", style="dim"))
        rows.append(row)

    return make_table(headers, rows)


def projects_table(
    deployments: Iterable[Deployment],
    now: int | None = None,
) -> Table:
    return make_table(
        ["project", "latest deployment", "state", "age"],
        (
            [
                dep.project_name,
                Text(f"https://{dep.url}", style="bold"),
                state_string(dep.state),
                age(dep, now),
            ]
            for dep in deployments
        ),
    )


def print_table(table: Table) -> None:
    # sized to the table rather than the terminal so no column is cropped
    console = get_console()
    options = console.options.update_width(MAX_TABLE_WIDTH)
    console.width = Measurement.get(console, options, table).maximum
    console.print(table)
