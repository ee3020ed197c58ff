"""The authenticated user, and picking one of their teams or projects."""

from lnr import documents, prompt
from lnr.decoders import decode_viewer
from lnr.errors import NotFoundError
from lnr.models import Project, Team, Viewer
from lnr.request import Gql
from lnr.settings import Config

NO_PROJECT = "None"


def get_viewer(config: Config, token: str) -> Viewer:
    response = Gql(config, token, documents.VIEWER).run()
    return decode_viewer(response)


def team_names(viewer: Viewer) -> list[str]:
    if not viewer.teams:
        raise NotFoundError("No teams found")
    return [t.name for t in viewer.teams]


def team_by_name(viewer: Viewer, team_name: str) -> Team:
    names = team_names(viewer)
    for t in viewer.teams:
        if t.name == team_name:
            return t
    raise NotFoundError(f"Team {team_name} not found, options are: {', '.join(names)}")


def team(viewer: Viewer, team_name: str | None, config: Config) -> Team:
    """Resolve a team: by name if given, the only one, or ask the user."""
    if team_name is not None:
        return team_by_name(viewer, team_name)

    names = sorted(team_names(viewer))
    if len(names) == 1:
        return team_by_name(viewer, names[0])
    chosen = prompt.select("Select a team", names, config)
    return team_by_name(viewer, chosen)


def project_names(team: Team | None) -> list[str]:
    if team is None or not team.projects:
        return []
    return [p.name for p in team.projects]


def project(team: Team | None, project_name: str) -> Project | None:
    if project_name == NO_PROJECT or team is None:
        return None
    for p in team.projects or []:
        if p.name == project_name:
            return p
    raise NotFoundError("Project not found")


def select_project(team: Team | None, config: Config) -> Project | None:
    """Ask for a project, with "None" offered first. No projects means no prompt."""
    names = sorted(project_names(team))
    if not names:
        return None
    chosen = prompt.select("Select project", [NO_PROJECT, *names], config)
    return project(team, chosen)
