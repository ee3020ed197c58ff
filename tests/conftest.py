"""Shared test fixtures."""

from pathlib import Path

import pytest

from lnr.models import Priority, Project, State, Team, TeamMembership, Viewer
from lnr.settings import Config

MOCK_URL = "https://linear.test/graphql"


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's environment and .env out of every test."""
    for name in ("LINEAR_API_KEY", "DISABLE_SPINNER", "LNR_CONFIG"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def config(tmp_path: Path) -> Config:
    return Config(
        path=str(tmp_path / "lnr.cfg"),
        mock_url=MOCK_URL,
        mock_string="Mocked",
        mock_select=0,
        spinners=False,
    )


@pytest.fixture
def config_file(config: Config) -> Config:
    """The config fixture with one organization, written to disk."""
    config.add_organization("acme", "lin_api_acme")
    return config.create()


@pytest.fixture
def project() -> Project:
    return Project(id="project-1", name="Roadmap")


@pytest.fixture
def team(project: Project) -> Team:
    return Team(id="team-1", name="Backend", projects=[project])


@pytest.fixture
def viewer(team: Team) -> Viewer:
    return Viewer(id="viewer-1", name="Alan", team_memberships=[TeamMembership(team=team)])


@pytest.fixture
def todo() -> State:
    return State(id="state-todo", name="Todo", position=1.0)


@pytest.fixture
def priority() -> Priority:
    return Priority.NORMAL


# ---------------------------------------------------------------------------
# API responses
# ---------------------------------------------------------------------------


@pytest.fixture
def viewer_response() -> dict:
    return {
        "data": {
            "viewer": {
                "id": "viewer-1",
                "name": "Alan",
                "teamMemberships": {
                    "nodes": [
                        {
                            "team": {
                                "id": "team-1",
                                "name": "Backend",
                                "projects": {"nodes": [{"id": "project-1", "name": "Roadmap"}]},
                            }
                        }
                    ]
                },
            }
        }
    }


@pytest.fixture
def states_response() -> dict:
    return {
        "data": {
            "team": {
                "id": "team-1",
                "name": "Backend",
                "states": {
                    "nodes": [
                        {"id": "state-done", "name": "Done", "position": 3.0},
                        {"id": "state-todo", "name": "Todo", "position": 1.0},
                        {"id": "state-progress", "name": "In Progress", "position": 2.0},
                    ]
                },
            }
        }
    }


@pytest.fixture
def issue_create_response() -> dict:
    return {
        "data": {
            "issueCreate": {
                "issue": {
                    "id": "be3354-id",
                    "identifier": "BE-3354",
                    "url": "https://linear.app/vardy/issue/BE-3354/test",
                }
            }
        }
    }


def _issue_node(identifier: str, title: str, state: str, position: float = 1.0, children: list | None = None) -> dict:
    return {
        "id": f"{identifier.lower()}-id",
        "identifier": identifier,
        "title": title,
        "description": None,
        "url": f"https://linear.app/vardy/issue/{identifier}/test",
        "branchName": f"alan/{identifier.lower()}",
        "state": {"id": f"state-{state.lower()}", "name": state, "position": position},
        "children": {"nodes": children or []},
    }


@pytest.fixture
def issue_node():
    return _issue_node


@pytest.fixture
def issue_list_response() -> dict:
    return {"data": {"issues": {"nodes": [_issue_node("SHO-2148", "Modify schema", "Todo")]}}}


@pytest.fixture
def issue_detail_node() -> dict:
    node = _issue_node(
        "BE-3354",
        "Test",
        "In Progress",
        children=[_issue_node("BE-3355", "Child task", "Todo")],
    )
    node["description"] = "Make the thing work"
    node["comments"] = {
        "nodes": [
            {
                "body": "Looks good",
                "createdAt": "2024-05-01T10:30:00.000Z",
                "editedAt": None,
                "url": "https://linear.app/vardy/issue/BE-3354/test#comment-1",
                "user": {"displayName": "alan"},
                "children": {
                    "nodes": [
                        {
                            "body": "Thanks",
                            "createdAt": "2024-05-01T11:00:00.000Z",
                            "editedAt": "2024-05-01T11:05:00.000Z",
                            "url": "https://linear.app/vardy/issue/BE-3354/test#comment-2",
                            "user": None,
                        }
                    ]
                },
            }
        ]
    }
    return node
