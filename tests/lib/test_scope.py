import pytest

from strato.lib.client import Client
from strato.lib.enums import OrgType
from strato.lib.errors import ScopeNotFoundError
from strato.lib.scope import get_scope
from tests.conftest import MOCK_API_URL, MOCK_TOKEN, TEAM, USER


@pytest.fixture
def client():
    return Client(token=MOCK_TOKEN, api_url=MOCK_API_URL)


def test_default_is_personal_account(client, api):
    org = get_scope(client)
    assert org.type == OrgType.USER
    assert org.slug == USER["username"]


def test_configured_current_team(client, api):
    client.current_team = TEAM["id"]
    org = get_scope(client)
    assert org.is_team
    assert org.slug == TEAM["slug"]


@pytest.mark.parametrize("scope", [USER["username"], USER["id"]])
def test_scope_is_user(client, api, scope):
    client.current_team = TEAM["id"]
    org = get_scope(client, scope)
    assert not org.is_team
    assert client.current_team is None


@pytest.mark.parametrize("scope", [TEAM["slug"], TEAM["id"]])
def test_scope_is_team(client, api, scope):
    org = get_scope(client, scope)
    assert org.id == TEAM["id"]
    assert client.current_team == TEAM["id"]


def test_unknown_scope(client, api):
    with pytest.raises(ScopeNotFoundError, match="nobody"):
        get_scope(client, "nobody")
