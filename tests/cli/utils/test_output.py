import pytest

from rich.console import Console

from strato.cli.utils.output import app_table, projects_table, state_string
from strato.lib.enums import DeploymentState
from strato.lib.models import Deployment

NOW = 10 * 60 * 1000


def render(table) -> list[str]:
    console = Console(width=200, color_system=None)
    with console.capture() as capture:
        console.print(table)
    return [line.strip() for line in capture.get().splitlines() if line.strip()]


def make(name, created_at, state="READY", **kwargs):
    return Deployment(
        uid=f"dpl_{name}",
        name=name,
        url=f"{name}-{created_at}.strato.app",
        state=DeploymentState(state),
        created_at=created_at,
        **kwargs,
    )


@pytest.mark.parametrize(
    ("state", "expected", "style"),
    [
        ("INITIALIZING", "● INITIALIZING", "yellow"),
        ("BUILDING", "● BUILDING", "yellow"),
        ("ERROR", "● ERROR", "red"),
        ("READY", "● READY", "green"),
        ("QUEUED", "● QUEUED", "white"),
    ],
)
def test_state_string_with_marker(state, expected, style):
    text = state_string(state)
    assert text.plain == expected
    assert text.spans[0].style == style


def test_state_string_canceled():
    text = state_string(DeploymentState.CANCELED)
    assert text.plain == "CANCELED"
    assert "●" not in text.plain


@pytest.mark.parametrize("state", ["DELETED", None])
def test_state_string_unknown(state):
    assert state_string(state).plain == "UNKNOWN"


def test_app_table():
    deployments = [
        make("my-app", NOW - 60_000, building_at=1_000, ready=1_000, creator="bob"),
        make("my-app", NOW - 120_000, state="CANCELED", creator="carol"),
    ]

    lines = render(app_table(deployments, now=NOW))
    assert lines[1].split() == [
        ">",
        f"https://my-app-{NOW - 60_000}.strato.app",
        "●",
        "READY",
        "1m",
        "--",
        "bob",
    ]
    assert lines[2].split() == [
        f"https://my-app-{NOW - 120_000}.strato.app",
        "CANCELED",
        "2m",
        "?",
        "carol",
    ]


def test_app_table_without_username():
    lines = render(app_table([make("my-app", NOW)], show_username=False, now=NOW))
    assert lines[0].split() == ["deployment", "url", "state", "age", "duration"]
    assert lines[1].split()[-1] == "?"


def test_projects_table():
    lines = render(
        projects_table([make("a", NOW - 1_000), make("file", NOW - 5)], now=NOW),
    )
    assert lines[1].split() == [
        "a",
        f"https://a-{NOW - 1_000}.strato.app",
        "●",
        "READY",
        "1s",
    ]
    assert lines[2].split()[0] == "files"
    assert lines[2].split()[-1] == "5ms"
