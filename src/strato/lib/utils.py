import logging
import math
import re

from collections.abc import Iterable
from pathlib import Path
from urllib.parse import urlsplit

from strato.lib.errors import UsageError
from strato.lib.models import Deployment

logger = logging.getLogger(__name__)

DEPLOYMENT_DOMAINS = (".strato.app", ".strato.sh")

VALID_NAME_REGEX = re.compile(r"^[a-z0-9](?:[a-z0-9._-]{0,98}[a-z0-9])?$", re.I)

SECOND = 1000
MINUTE = SECOND * 60
HOUR = MINUTE * 60
DAY = HOUR * 24


def is_valid_name(name: str) -> bool:
    return bool(VALID_NAME_REGEX.match(name or ""))


def to_host(url: str) -> str:
    """Strip the scheme and any path from a URL-ish string.

    >>> to_host("https://my-app-abc.strato.app/some/path")
    'my-app-abc.strato.app'
    >>> to_host("my-app-abc.strato.app/")
    'my-app-abc.strato.app'
    """
    if re.match(r"^[a-z][a-z0-9+.-]*://", url, re.I):
        return urlsplit(url).netloc
    return url.split("/", 1)[0]


def is_deployment_host(host: str) -> bool:
    return host.endswith(DEPLOYMENT_DOMAINS)


def parse_meta(values: Iterable[str] | None) -> dict[str, str]:
    """Turn repeated ``key=value`` strings into a mapping.

    Everything after the first ``=`` is the value; a missing ``=``
    yields an empty value. Later keys overwrite earlier ones.
    """
    meta = {}
    for item in values or ():
        key, _, value = item.partition("=")
        meta[key] = value
    return meta


def _round(value: float) -> int:
    # round half up, matching what users see from other tools
    return math.floor(value + 0.5)


def format_ms(ms: float) -> str:
    """Short human representation of a millisecond duration.

    Args:
        ms (float): duration in milliseconds

    Returns:
        str like ``350ms``, ``12s``, ``3m``, ``2h``, ``4d``
    """
    ms_abs = abs(ms)
    if ms_abs >= DAY:
        return f"{_round(ms / DAY)}d"
    if ms_abs >= HOUR:
        return f"{_round(ms / HOUR)}h"
    if ms_abs >= MINUTE:
        return f"{_round(ms / MINUTE)}m"
    if ms_abs >= SECOND:
        return f"{_round(ms / SECOND)}s"
    return f"{int(ms)}ms"


def get_deployment_duration(deployment: Deployment | None) -> str:
    if not deployment or not deployment.ready or not deployment.building_at:
        return "?"
    duration = format_ms(deployment.ready - deployment.building_at)
    if duration == "0ms":
        return "--"
    return duration


def sort_recent(deployments: Iterable[Deployment]) -> list[Deployment]:
    return sorted(deployments, key=lambda d: d.created_at, reverse=True)


def unique_projects(deployments: Iterable[Deployment]) -> list[Deployment]:
    """Keep only the first deployment seen for each project name."""
    seen: set[str] = set()
    unique = []
    for deployment in deployments:
        if deployment.project_name in seen:
            continue
        seen.add(deployment.project_name)
        unique.append(deployment)
    return unique


def resolve_paths(cwd: Path, paths: Iterable[str] = ()) -> list[Path]:
    return [cwd.joinpath(p).resolve() for p in paths] or [cwd.resolve()]


def validate_paths(paths: list[Path]) -> Path:
    """Check the given paths resolve to a single project directory."""
    for path in paths:
        if not path.exists():
            raise UsageError(
                f'The specified file or directory "{path.name}" does not exist.',
            )

    if len(paths) > 1:
        raise UsageError("Can't list more than one path.")

    path = paths[0]
    if not path.is_dir():
        raise UsageError("Support for single file projects has been removed.")

    logger.debug("Using project path '%s'", path)
    return path
