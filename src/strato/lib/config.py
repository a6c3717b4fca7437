from __future__ import annotations

import json
import logging
import os

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Self

from strato.lib.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.strato.app"
DEFAULT_GLOBAL_DIR_NAME = ".strato"
AUTH_CONFIG_FILENAME = "auth.json"
GLOBAL_CONFIG_FILENAME = "config.json"
LOCAL_CONFIG_FILENAME = "strato.json"


def _read_json(path: Path) -> dict[str, Any]:
    try:
        obj = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise ConfigError(f"Couldn't parse JSON file '{path}': {e}") from e
    if not isinstance(obj, dict):
        raise ConfigError(f"Expected a JSON object in '{path}'")
    return obj


def _read_optional_json(path: Path) -> dict[str, Any]:
    if not path.is_file():
        logger.debug("No config file at '%s'", path)
        return {}
    return _read_json(path)


def default_global_dir() -> Path:
    if env := os.environ.get("STRATO_GLOBAL_CONFIG"):
        return Path(env)
    return Path.home().joinpath(DEFAULT_GLOBAL_DIR_NAME)


@dataclass
class GlobalConfig:
    """User level settings, kept in the global config directory."""

    path: Path
    token: str | None = None
    current_team: str | None = None
    api_url: str = DEFAULT_API_URL

    @classmethod
    def load(cls: type[Self], path: Path | None = None) -> Self:
        path = path or default_global_dir()
        auth = _read_optional_json(path.joinpath(AUTH_CONFIG_FILENAME))
        config = _read_optional_json(path.joinpath(GLOBAL_CONFIG_FILENAME))
        return cls(
            path=path,
            token=os.environ.get("STRATO_TOKEN", auth.get("token")),
            current_team=config.get("currentTeam"),
            api_url=os.environ.get(
                "STRATO_API_URL",
                config.get("api", DEFAULT_API_URL),
            ),
        )


@dataclass
class LocalConfig:
    path: Path | None = None
    settings: dict[str, Any] = field(default_factory=dict)

    @property
    def scope(self) -> str | None:
        return self.settings.get("scope")

    @classmethod
    def load(cls: type[Self], cwd: Path, path: Path | None = None) -> Self:
        if path is not None:
            path = cwd.joinpath(path)
            if not path.is_file():
                raise ConfigError(f"Couldn't find a local config file at '{path}'")
            return cls(path=path, settings=_read_json(path))

        path = cwd.joinpath(LOCAL_CONFIG_FILENAME)
        if path.is_file():
            return cls(path=path, settings=_read_json(path))
        return cls()
