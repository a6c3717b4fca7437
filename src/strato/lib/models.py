from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Self

from strato.lib.enums import DeploymentState, LinkStatus, OrgType


@dataclass(frozen=True)
class User:
    id: str
    username: str

    @classmethod
    def from_dict(cls: type[Self], obj: dict[str, Any]) -> Self:
        return cls(id=obj["id"], username=obj["username"])


@dataclass(frozen=True)
class Org:
    id: str
    slug: str
    type: OrgType = OrgType.USER

    @property
    def is_team(self) -> bool:
        return self.type == OrgType.TEAM

    @classmethod
    def from_user(cls: type[Self], user: User) -> Self:
        return cls(id=user.id, slug=user.username, type=OrgType.USER)

    @classmethod
    def from_team(cls: type[Self], team: dict[str, Any]) -> Self:
        return cls(id=team["id"], slug=team["slug"], type=OrgType.TEAM)


@dataclass(frozen=True)
class Project:
    id: str
    name: str

    @classmethod
    def from_dict(cls: type[Self], obj: dict[str, Any]) -> Self:
        return cls(id=obj["id"], name=obj["name"])


@dataclass(frozen=True)
class Deployment:
    """Snapshot of a single deployment as returned by the list endpoint.

    All timestamps are milliseconds since the UNIX epoch.
    """

    uid: str
    name: str
    url: str
    state: DeploymentState
    created_at: int
    building_at: int | None = None
    ready: int | None = None
    creator: str | None = None
    meta: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls: type[Self], obj: dict[str, Any]) -> Self:
        return cls(
            uid=obj.get("uid", obj.get("id", "")),
            name=obj["name"],
            url=obj["url"],
            state=DeploymentState(obj.get("state", obj.get("readyState"))),
            created_at=obj.get("createdAt", obj.get("created")),
            building_at=obj.get("buildingAt"),
            ready=obj.get("ready"),
            creator=(obj.get("creator") or {}).get("username"),
            meta=obj.get("meta") or {},
        )

    @property
    def project_name(self) -> str:
        # single file and multi file uploads are grouped under one name
        if self.name == "file":
            return "files"
        return self.name


@dataclass(frozen=True)
class Pagination:
    count: int
    next: int | None = None

    @classmethod
    def from_dict(cls: type[Self], obj: dict[str, Any] | None) -> Self:
        obj = obj or {}
        return cls(count=obj.get("count", 0), next=obj.get("next"))


@dataclass(frozen=True)
class Link:
    status: LinkStatus
    org: Org | None = None
    project: Project | None = None
    exit_code: int = 0

    @classmethod
    def not_linked(cls: type[Self]) -> Self:
        return cls(status=LinkStatus.NOT_LINKED)

    @classmethod
    def error(cls: type[Self], exit_code: int = 1) -> Self:
        return cls(status=LinkStatus.ERROR, exit_code=exit_code)
