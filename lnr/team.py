"""Workflow states for a team."""

from lnr import documents, prompt
from lnr.decoders import decode_team
from lnr.errors import NotFoundError
from lnr.models import State, Team
from lnr.request import Gql
from lnr.settings import Config


def get_states(config: Config, token: str, team: Team) -> list[State]:
    """Fetch the team's states, ordered by position (API order breaks ties)."""
    response = Gql(config, token, documents.TEAM_STATES).put_string("id", team.id).run()
    states = decode_team(response).states or []
    return sorted(states, key=lambda s: s.position)


def state(config: Config, token: str, team: Team, state_name: str | None) -> State:
    """Resolve a state by name if given, otherwise ask the user."""
    states = get_states(config, token, team)
    if not states:
        raise NotFoundError("No states found")
    if state_name is None:
        return prompt.select("Select state", states, config)
    for s in states:
        if s.name == state_name:
            return s
    raise NotFoundError(f"{state_name} state not found")
