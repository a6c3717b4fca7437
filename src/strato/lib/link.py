from __future__ import annotations

import json
import logging
import os

from dataclasses import dataclass
from pathlib import Path
from typing import Self

from strato.lib.client import Client
from strato.lib.enums import LinkStatus
from strato.lib.errors import APIError, ConfigError
from strato.lib.models import Link, Org

logger = logging.getLogger(__name__)

PROJECT_LINK_DIR_NAME = ".strato"
PROJECT_LINK_FILENAME = "project.json"

# orgs are either a team or the personal account of the current user
TEAM_ID_PREFIX = "team_"

ORG_ID_ENV = "STRATO_ORG_ID"
PROJECT_ID_ENV = "STRATO_PROJECT_ID"


@dataclass(frozen=True)
class ProjectLink:
    """The ids a directory is linked to, before they are resolved remotely"""

    org_id: str
    project_id: str

    @classmethod
    def from_env(cls: type[Self]) -> Self | None:
        org_id = os.environ.get(ORG_ID_ENV)
        project_id = os.environ.get(PROJECT_ID_ENV)

        if not org_id and not project_id:
            return None
        if not (org_id and project_id):
            raise ConfigError(
                f"You specified `{ORG_ID_ENV if org_id else PROJECT_ID_ENV}` "
                f"but you forgot to specify "
                f"`{PROJECT_ID_ENV if org_id else ORG_ID_ENV}`. "
                "You need to specify both to link a project.",
            )
        return cls(org_id=org_id, project_id=project_id)

    @classmethod
    def from_path(cls: type[Self], path: Path) -> Self | None:
        link_file = path.joinpath(PROJECT_LINK_DIR_NAME, PROJECT_LINK_FILENAME)
        if not link_file.is_file():
            return None

        try:
            obj = json.loads(link_file.read_text())
            return cls(org_id=obj["orgId"], project_id=obj["projectId"])
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            raise ConfigError(
                f"Project link file is malformed: '{link_file}'. "
                f"Remove the `{PROJECT_LINK_DIR_NAME}` directory and link again.",
            ) from e

    @classmethod
    def resolve(cls: type[Self], path: Path) -> Self | None:
        return cls.from_env() or cls.from_path(path)


def get_org_by_id(client: Client, org_id: str) -> Org | None:
    if org_id.startswith(TEAM_ID_PREFIX):
        return Org.from_team(client.get_team(org_id))

    user = client.get_user()
    if user.id != org_id:
        return None
    return Org.from_user(user)


def get_linked_project(client: Client, path: Path) -> Link:
    """Resolve the org and project a directory is linked to.

    A directory without link metadata is ``not_linked``; link metadata
    that points at an org or project we cannot see is an ``error`` and
    the reason is logged.
    """
    project_link = ProjectLink.resolve(path)
    if project_link is None:
        logger.debug("No project link found for '%s'", path)
        return Link.not_linked()

    try:
        org = get_org_by_id(client, project_link.org_id)
    except APIError as e:
        if e.status not in (403, 404):
            raise
        org = None

    if org is None:
        logger.error(
            "Could not retrieve the linked scope '%s'. To link your project, "
            "remove the `%s` directory and link again.",
            project_link.org_id,
            PROJECT_LINK_DIR_NAME,
        )
        return Link.error()

    client.current_team = org.id if org.is_team else None

    try:
        project = client.get_project(project_link.project_id)
    except APIError as e:
        if e.status not in (403, 404):
            raise
        logger.error(
            "Could not retrieve Project Settings. To link your project, "
            "remove the `%s` directory and link again.",
            PROJECT_LINK_DIR_NAME,
        )
        return Link.error()

    logger.debug("Linked to project '%s' under '%s'", project.name, org.slug)
    return Link(status=LinkStatus.LINKED, org=org, project=project)
