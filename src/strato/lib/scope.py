import logging

from strato.lib.client import Client
from strato.lib.errors import ScopeNotFoundError
from strato.lib.models import Org

logger = logging.getLogger(__name__)


def get_scope(client: Client, scope: str | None = None) -> Org:
    """Work out which org commands act on when no project link exists.

    An explicit scope may name a team (by slug or id) or the user's own
    account. Without one the configured current team is used, falling
    back to the personal account.
    """
    user = client.get_user()

    if scope is None:
        if client.current_team:
            return Org.from_team(client.get_team(client.current_team))
        return Org.from_user(user)

    if scope in (user.username, user.id):
        client.current_team = None
        return Org.from_user(user)

    for team in client.get_teams():
        if scope in (team["slug"], team["id"]):
            logger.debug("Using team scope '%s'", team["slug"])
            client.current_team = team["id"]
            return Org.from_team(team)

    raise ScopeNotFoundError(scope)
