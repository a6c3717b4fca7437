import pytest

from strato.lib.enums import DeploymentState, LinkStatus
from strato.lib.models import Deployment, Link, Org, Pagination, User


def test_deployment_from_dict(deployment_factory):
    obj = deployment_factory(name="file", created_at=10, state="QUEUED")
    obj["meta"] = {"env": "prod"}

    deployment = Deployment.from_dict(obj)
    assert deployment.state == DeploymentState.QUEUED
    assert deployment.created_at == 10
    assert deployment.building_at == 1_000
    assert deployment.ready == 13_000
    assert deployment.creator == "alice"
    assert deployment.meta == {"env": "prod"}
    assert deployment.project_name == "files"


def test_deployment_optional_fields():
    deployment = Deployment.from_dict(
        {"name": "a", "url": "a-1.strato.app", "createdAt": 1},
    )
    assert deployment.state == DeploymentState.UNKNOWN
    assert deployment.building_at is None
    assert deployment.ready is None
    assert deployment.creator is None
    assert deployment.meta == {}


@pytest.mark.parametrize("state", ["nope", None, ""])
def test_unknown_states(state):
    assert DeploymentState(state) == DeploymentState.UNKNOWN


def test_deployment_is_immutable(deployment_factory):
    deployment = Deployment.from_dict(deployment_factory())
    with pytest.raises(AttributeError):
        deployment.url = "other"


def test_pagination_defaults():
    assert Pagination.from_dict(None) == Pagination(count=0, next=None)


def test_org_from_user():
    org = Org.from_user(User(id="user_1", username="alice"))
    assert org.slug == "alice"
    assert not org.is_team


def test_link_constructors():
    assert Link.not_linked().status == LinkStatus.NOT_LINKED
    error = Link.error()
    assert error.status == LinkStatus.ERROR
    assert error.exit_code == 1
