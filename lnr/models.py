"""Shared pydantic models: the records decoded from Linear responses."""

from datetime import datetime
from enum import IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic.alias_generators import to_camel

from lnr.errors import InputError


def unwrap_nodes(value: Any) -> Any:
    # GraphQL connections arrive as {"nodes": [...]}
    if isinstance(value, dict) and "nodes" in value:
        return value["nodes"]
    return value


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class Project(_Record):
    id: str
    name: str


class State(_Record):
    id: str
    name: str
    position: float

    def __str__(self) -> str:
        return self.name


class Team(_Record):
    id: str
    name: str
    projects: list[Project] | None = None
    states: list[State] | None = None

    unwrap_connections = field_validator("projects", "states", mode="before")(unwrap_nodes)

    def __str__(self) -> str:
        return self.name


class TeamMembership(_Record):
    team: Team


class Viewer(_Record):
    id: str
    name: str
    team_memberships: list[TeamMembership] = []

    unwrap_connections = field_validator("team_memberships", mode="before")(unwrap_nodes)

    @property
    def teams(self) -> list[Team]:
        return [m.team for m in self.team_memberships]


class Comment(_Record):
    body: str
    created_at: datetime
    edited_at: datetime | None = None
    url: str
    author_display_name: str
    children: list["Comment"] | None = None

    unwrap_connections = field_validator("children", mode="before")(unwrap_nodes)

    @model_validator(mode="before")
    @classmethod
    def author_from_user(cls, data: Any) -> Any:
        if isinstance(data, dict) and "user" in data:
            data = dict(data)
            user = data.pop("user")
            data["authorDisplayName"] = (user or {}).get("displayName") or "Unknown"
        return data


class Issue(_Record):
    id: str  # opaque, always from the API
    identifier: str  # ENG-123
    title: str
    description: str | None = None
    url: str
    branch_name: str
    state: State
    children: list["Issue"] | None = None
    comments: list[Comment] | None = None

    unwrap_connections = field_validator("children", "comments", mode="before")(unwrap_nodes)

    @property
    def is_parent(self) -> bool:
        return bool(self.children)

    def __str__(self) -> str:
        return f"{self.identifier} | {self.title}"


class CreatedIssue(_Record):
    """Returned by create/update mutations, just what the caller needs."""

    id: str
    url: str
    identifier: str | None = None


class Priority(IntEnum):
    """Linear's integer encoding, as sent in issueCreate."""

    NONE = 0
    URGENT = 1
    HIGH = 2
    NORMAL = 3
    LOW = 4

    def __str__(self) -> str:
        return self.name.capitalize()

    @classmethod
    def choices(cls) -> list["Priority"]:
        """Order presented in the priority prompt."""
        return [cls.LOW, cls.NORMAL, cls.HIGH, cls.URGENT, cls.NONE]

    @classmethod
    def from_flag(cls, value: int) -> "Priority":
        """Map the CLI scale (1 Low … 4 Urgent) to the API encoding."""
        mapping = {1: cls.LOW, 2: cls.NORMAL, 3: cls.HIGH, 4: cls.URGENT}
        if value not in mapping:
            raise InputError(f"Priority {value} is not valid. Must choose between 1 and 4.")
        return mapping[value]
